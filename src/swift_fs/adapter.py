"""Filesystem adapter over a Swift object store container."""

import hashlib
import mimetypes
from collections.abc import Callable, Iterator, Mapping
from contextlib import closing, contextmanager
from datetime import datetime
from functools import partial
from typing import BinaryIO, TypeVar
from urllib.parse import quote

from swift_fs.config import Config
from swift_fs.exceptions import (
    ErrorKind,
    FilesystemError,
    ObjectNotFoundError,
    SwiftFsError,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToGeneratePublicUrl,
    UnableToGenerateTemporaryUrl,
    UnableToListContents,
    UnableToMoveFile,
    UnableToProvideChecksum,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
    classify,
)
from swift_fs.metadata import VISIBILITY_METADATA_KEY, MetadataTranslator
from swift_fs.namespace import NamespaceEmulator
from swift_fs.observability import OperationContext, Timer, emit_counter, emit_timer, get_logger
from swift_fs.paths import PathPrefixer
from swift_fs.plugins import create_object_store
from swift_fs.protocols.filesystem import FileAttributes, StorageAttributes, Visibility
from swift_fs.protocols.object_store import ObjectRecord, ObjectStore
from swift_fs.signing import TemporaryUrlSigner

logger = get_logger(__name__)

T = TypeVar("T")

OPERATION_METRIC = "swift_fs.operation"
ERROR_METRIC = "swift_fs.operation.error"

DEFAULT_MIME_TYPE = "application/octet-stream"

HASH_CHUNK_SIZE = 64 * 1024

FailureFactory = Callable[[str, BaseException], FilesystemError]


def _visibility_value(visibility: str | Visibility | None) -> str | None:
    if isinstance(visibility, Visibility):
        return visibility.value
    return visibility or None


class SwiftAdapter:
    """Filesystem adapter backed by one Swift container.

    Paths are logical: they are placed under the configured prefix before
    reaching the store. Every store or core error is re-raised as the
    FilesystemError subclass of the failing operation, with a kind from
    ErrorKind and the original error as its cause. Two operations deviate:
    deleting a missing file succeeds, and existence checks report False
    when the store cannot be reached.

    Example:
        adapter = SwiftAdapter(store, prefix="tenant-a", temp_url_key="secret")
        adapter.write("docs/readme.txt", b"hello", visibility="private")
        for entry in adapter.list_contents("docs"):
            print(entry.path)
    """

    def __init__(
        self,
        store: ObjectStore,
        prefix: str = "",
        temp_url_key: str | None = None,
        temp_url_digest: str = "sha256",
        default_visibility: str | Visibility | None = None,
        public_url: str | None = None,
        page_size: int | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            store: Object store client for the container
            prefix: Root all paths are placed under
            temp_url_key: Shared TempURL key. temporary_url() fails without it.
            temp_url_digest: HMAC digest for temporary URLs
            default_visibility: Visibility written when write() gets none
            public_url: Base URL for public_url() instead of the store's URL
            page_size: Listing page size. Store default when omitted.
        """
        self.store = store
        self.prefixer = PathPrefixer(prefix)
        self.translator = MetadataTranslator(self.prefixer)
        self.namespace = NamespaceEmulator(store, self.prefixer, self.translator, page_size)
        self.signer = (
            TemporaryUrlSigner(temp_url_key, temp_url_digest) if temp_url_key else None
        )
        self.default_visibility = _visibility_value(default_visibility)
        self.public_base_url = public_url.rstrip("/") if public_url else None

    @classmethod
    def from_config(cls, config: Config, store: ObjectStore | None = None) -> "SwiftAdapter":
        """Build an adapter, creating the store through the backend registry."""
        if store is None:
            store = create_object_store(config.store.backend, **config.store.backend_options())
        temp_url_key = config.adapter.temp_url_key
        return cls(
            store,
            prefix=config.adapter.prefix,
            temp_url_key=temp_url_key.get_secret_value() if temp_url_key else None,
            temp_url_digest=config.adapter.temp_url_digest,
            default_visibility=config.adapter.default_visibility,
            public_url=config.adapter.public_url,
            page_size=config.store.page_size,
        )

    @property
    def container(self) -> str:
        return self.store.container

    @contextmanager
    def _operation(self, name: str, location: str, failure: FailureFactory) -> Iterator[None]:
        """Scope one public operation: logging context, timing, error mapping."""
        with OperationContext(name, location, self.container):
            timer = Timer()
            try:
                with timer:
                    yield
            except FilesystemError as e:
                emit_counter(ERROR_METRIC, {"kind": e.kind.value})
                raise
            except SwiftFsError as e:
                error = failure(location, e)
                emit_counter(ERROR_METRIC, {"kind": error.kind.value})
                logger.warning(f"{name} failed", error=e)
                raise error from e
            finally:
                emit_timer(OPERATION_METRIC, timer.duration_ms)

    def _key(self, path: str) -> str:
        return self.prefixer.prefix_path(path)

    def _head(self, path: str) -> ObjectRecord:
        return self.store.head_object(self._key(path))

    # Existence

    def file_exists(self, path: str) -> bool:
        """Check whether a file exists. Store failures report False.

        The root is a directory, never a file.
        """
        with OperationContext("file_exists", path, self.container):
            if not path.strip(self.prefixer.separator):
                return False
            try:
                return self.store.object_exists(self._key(path))
            except SwiftFsError as e:
                emit_counter(ERROR_METRIC, {"kind": classify(e).value})
                logger.warning("Existence check failed, reporting absent", error=e)
                return False

    def directory_exists(self, path: str) -> bool:
        """Check whether any object lives under a directory.

        An empty directory is indistinguishable from a missing one. Store
        failures report False, as for file_exists().
        """
        with OperationContext("directory_exists", path, self.container):
            try:
                return self.namespace.directory_exists(path)
            except SwiftFsError as e:
                emit_counter(ERROR_METRIC, {"kind": classify(e).value})
                logger.warning("Existence check failed, reporting absent", error=e)
                return False

    # Writing

    def _write(
        self,
        path: str,
        content: bytes | BinaryIO,
        visibility: str | Visibility | None,
        mime_type: str | None,
        headers: Mapping[str, str] | None,
    ) -> None:
        visibility = _visibility_value(visibility) or self.default_visibility
        metadata = {VISIBILITY_METADATA_KEY: visibility} if visibility else {}
        content_type = mime_type or mimetypes.guess_type(path)[0] or DEFAULT_MIME_TYPE
        with self._operation("write", path, UnableToWriteFile.from_error):
            record = self.store.create_object(
                self._key(path),
                content,
                content_type=content_type,
                metadata=metadata,
                headers=headers,
            )
            logger.debug("File written", context={"key": record.key, "etag": record.etag})

    def write(
        self,
        path: str,
        contents: bytes | str,
        visibility: str | Visibility | None = None,
        mime_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Create or replace a file."""
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        self._write(path, contents, visibility, mime_type, headers)

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        visibility: str | Visibility | None = None,
        mime_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Create or replace a file from a readable stream. The caller keeps ownership of it."""
        self._write(path, stream, visibility, mime_type, headers)

    # Reading

    def read(self, path: str) -> bytes:
        with self._operation("read", path, UnableToReadFile.from_error):
            return self.store.download(self._key(path))

    def read_stream(self, path: str) -> BinaryIO:
        """Open a stream over a file. The caller must close it."""
        with self._operation("read_stream", path, UnableToReadFile.from_error):
            return self.store.open_stream(self._key(path))

    # Deleting

    def delete(self, path: str) -> None:
        """Delete a file. Deleting a missing file succeeds."""
        with self._operation("delete", path, UnableToDeleteFile.from_error):
            try:
                self.store.delete_object(self._key(path))
            except ObjectNotFoundError:
                logger.debug("File already absent")

    def delete_directory(self, path: str) -> None:
        """Delete every file under a directory.

        Not atomic: on failure the files removed so far stay removed.
        """
        with self._operation("delete_directory", path, UnableToDeleteDirectory.from_error):
            deleted = self.namespace.delete_directory(path)
            logger.info("Directory deleted", context={"objects": deleted})

    def create_directory(self, path: str) -> None:
        """Always fails: the store cannot hold empty directories."""
        with self._operation("create_directory", path, UnableToCreateDirectory.from_error):
            raise UnableToCreateDirectory.not_supported(path)

    # Moving and copying

    def move(self, source: str, destination: str) -> None:
        """Move a file by copying it server-side and deleting the source."""
        source_key = self._key(source)
        destination_key = self._key(destination)
        if source_key == destination_key:
            return
        with self._operation("move", source, UnableToMoveFile.from_error):
            self.store.copy_object(source_key, self._copy_destination(destination_key))
            self.store.delete_object(source_key)

    def copy(self, source: str, destination: str) -> None:
        with self._operation("copy", source, UnableToCopyFile.from_error):
            self.store.copy_object(
                self._key(source), self._copy_destination(self._key(destination))
            )

    def _copy_destination(self, key: str) -> str:
        return f"/{self.container}/{key.lstrip('/')}"

    # Listing

    def list_contents(self, path: str = "", deep: bool = False) -> Iterator[StorageAttributes]:
        """Lazily list a directory.

        A shallow listing holds only the files directly inside ``path``;
        deep listings hold every object below it. Store pages are fetched as
        the iterator advances. Errors surface during iteration as
        UnableToListContents.
        """
        return self._guarded_listing(path, self.namespace.list_contents(path, deep))

    def _guarded_listing(
        self, path: str, entries: Iterator[StorageAttributes]
    ) -> Iterator[StorageAttributes]:
        try:
            yield from entries
        except SwiftFsError as e:
            error = UnableToListContents.from_error(path, e)
            emit_counter(ERROR_METRIC, {"kind": error.kind.value})
            logger.warning("Listing failed", context={"location": path}, error=e)
            raise error from e

    # Metadata

    def _metadata(self, path: str, metadata_type: str, read: Callable[[ObjectRecord], T]) -> T:
        failure = partial(UnableToRetrieveMetadata.for_field, metadata_type)
        with self._operation(metadata_type, path, failure):
            return read(self._head(path))

    def attributes(self, path: str) -> FileAttributes:
        """Return every attribute of a file."""
        return self._metadata(path, "attributes", self.translator.to_file_attributes)

    def file_size(self, path: str) -> FileAttributes:
        size = self._metadata(path, "file_size", self.translator.file_size)
        return FileAttributes(path, file_size=size)

    def mime_type(self, path: str) -> FileAttributes:
        mime_type = self._metadata(path, "mime_type", self.translator.mime_type)
        return FileAttributes(path, mime_type=mime_type)

    def last_modified(self, path: str) -> FileAttributes:
        timestamp = self._metadata(path, "last_modified", self.translator.last_modified)
        return FileAttributes(path, last_modified=timestamp)

    def visibility(self, path: str) -> FileAttributes:
        visibility = self._metadata(path, "visibility", self.translator.visibility)
        return FileAttributes(path, visibility=visibility)

    def set_visibility(self, path: str, visibility: str | Visibility) -> None:
        value = _visibility_value(visibility)
        if not value:
            raise UnableToSetVisibility(
                path, ErrorKind.UNSUPPORTED_OPERATION, "Visibility must not be empty"
            )
        with self._operation("set_visibility", path, UnableToSetVisibility.from_error):
            self.store.update_metadata(self._key(path), {VISIBILITY_METADATA_KEY: value})

    def checksum(self, path: str, algorithm: str = "md5") -> str:
        """Return a hex checksum of a file.

        md5 comes from the stored ETag when there is one; other algorithms
        hash the downloaded content.
        """
        algorithm = algorithm.lower()
        if algorithm not in hashlib.algorithms_available:
            raise UnableToProvideChecksum(
                path, ErrorKind.UNSUPPORTED_OPERATION, f"Unknown algorithm: {algorithm}"
            )
        with self._operation("checksum", path, UnableToProvideChecksum.from_error):
            if algorithm == "md5":
                etag = self._head(path).etag
                if etag:
                    return etag
            digest = hashlib.new(algorithm)
            with closing(self.store.open_stream(self._key(path))) as stream:
                for chunk in iter(partial(stream.read, HASH_CHUNK_SIZE), b""):
                    digest.update(chunk)
            return digest.hexdigest()

    # URLs

    def temporary_url(
        self,
        path: str,
        expires_at: datetime | int,
        method: str = "GET",
    ) -> str:
        """Return a signed URL granting anonymous access until ``expires_at``."""
        if self.signer is None:
            raise UnableToGenerateTemporaryUrl(
                path, ErrorKind.SIGNING_PRECONDITION, "No temporary URL key is configured"
            )
        with self._operation("temporary_url", path, UnableToGenerateTemporaryUrl.from_error):
            object_url = self.store.object_url(self._key(path))
            return self.signer.sign(object_url, expires_at, method)

    def public_url(self, path: str) -> str:
        with self._operation("public_url", path, UnableToGeneratePublicUrl.from_error):
            key = self._key(path)
            if self.public_base_url:
                return f"{self.public_base_url}/{quote(key)}"
            return self.store.object_url(key)
