"""OpenStack Swift object storage backend."""

import io
from collections.abc import Callable, Iterator, Mapping
from typing import Any, BinaryIO, TypeVar
from urllib.parse import quote

from keystoneauth1 import exceptions as keystone_exceptions
from keystoneauth1 import loading, session
from swiftclient import client as swiftclient
from swiftclient.exceptions import ClientException
from urllib3.exceptions import HTTPError

from swift_fs.exceptions import (
    ConfigError,
    ObjectNotFoundError,
    StoreError,
    StoreTransportError,
)
from swift_fs.observability import get_logger
from swift_fs.protocols.object_store import ObjectPage, ObjectRecord

logger = get_logger(__name__)

T = TypeVar("T")

OBJECT_META_PREFIX = "x-object-meta-"

DEFAULT_CHUNK_SIZE = 64 * 1024

# Raised by python-swiftclient, by keystoneauth1 when a session handles auth,
# and by urllib3 while a response body is read
CLIENT_ERRORS = (ClientException, keystone_exceptions.ClientException, HTTPError, OSError)


def translate_error(key: str, error: BaseException) -> StoreError:
    """Map a client library error onto the store error hierarchy."""
    status = getattr(error, "http_status", None)
    if status == 404 and isinstance(error, ClientException):
        return ObjectNotFoundError(f"Object not found: {key}", key=key, status=404)
    return StoreTransportError(
        f"Swift request failed for '{key}': {error}", key=key, status=status
    )


def metadata_from_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Extract custom object metadata from response headers."""
    return {
        name.lower()[len(OBJECT_META_PREFIX):]: value
        for name, value in headers.items()
        if name.lower().startswith(OBJECT_META_PREFIX)
    }


def metadata_to_headers(metadata: Mapping[str, str]) -> dict[str, str]:
    return {f"X-Object-Meta-{name}": str(value) for name, value in metadata.items()}


class ChunkedObjectStream(io.RawIOBase):
    """Readable stream over a chunked object download.

    Closing the stream closes the underlying HTTP response. Failures while
    reading the body are raised as StoreTransportError.
    """

    def __init__(self, body: Any, key: str = "") -> None:
        self._body = body
        self.key = key
        self._chunks: Iterator[bytes] = iter(body)
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, b: Any) -> int:
        while not self._buffer:
            try:
                self._buffer = next(self._chunks)
            except StopIteration:
                return 0
            except CLIENT_ERRORS as e:
                raise translate_error(self.key, e) from e
        size = min(len(b), len(self._buffer))
        b[:size] = self._buffer[:size]
        self._buffer = self._buffer[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            close = getattr(self._body, "close", None)
            if close is not None:
                close()
        super().close()


def build_connection(
    auth_url: str | None = None,
    auth_version: str = "3",
    user: str | None = None,
    key: str | None = None,
    project_name: str | None = None,
    project_domain_name: str = "Default",
    user_domain_name: str = "Default",
    application_credential_id: str | None = None,
    application_credential_secret: str | None = None,
    region_name: str | None = None,
    interface: str = "public",
    storage_url: str | None = None,
    token: str | None = None,
    retries: int = 5,
    timeout: float | None = None,
) -> swiftclient.Connection:
    """Create a Swift connection from configuration values.

    Pre-authenticated storage URL and token take precedence, then keystone
    application credentials, then user/key auth.
    """
    os_options = {"region_name": region_name, "interface": interface}

    if storage_url and token:
        return swiftclient.Connection(
            preauthurl=storage_url,
            preauthtoken=token,
            retries=retries,
            timeout=timeout,
        )

    if not auth_url:
        raise ConfigError("Swift backend requires auth_url or storage_url and token")

    if application_credential_id and application_credential_secret:
        loader = loading.get_plugin_loader("v3applicationcredential")
        auth = loader.load_from_options(
            auth_url=auth_url,
            application_credential_id=application_credential_id,
            application_credential_secret=application_credential_secret,
        )
        return swiftclient.Connection(
            session=session.Session(auth=auth),
            os_options=os_options,
            retries=retries,
            timeout=timeout,
        )

    if user and key:
        if auth_version.startswith("3"):
            loader = loading.get_plugin_loader("password")
            auth = loader.load_from_options(
                auth_url=auth_url,
                username=user,
                password=key,
                project_name=project_name,
                user_domain_name=user_domain_name,
                project_domain_name=project_domain_name,
            )
            return swiftclient.Connection(
                session=session.Session(auth=auth),
                os_options=os_options,
                retries=retries,
                timeout=timeout,
            )
        return swiftclient.Connection(
            authurl=auth_url,
            user=user,
            key=key,
            auth_version=auth_version,
            os_options=os_options,
            retries=retries,
            timeout=timeout,
        )

    raise ConfigError(
        "Swift backend requires application credentials or user and key"
    )


class SwiftObjectStore:
    """Object store backed by a Swift container.

    Every python-swiftclient, keystoneauth1 and urllib3 error is translated
    here: HTTP 404 from Swift becomes ObjectNotFoundError, anything else
    StoreTransportError.
    """

    def __init__(
        self,
        container: str | None = None,
        connection: swiftclient.Connection | None = None,
        page_size: int = 1000,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        **kwargs: Any,
    ) -> None:
        """Initialize Swift object store.

        Args:
            container: Swift container name
            connection: Existing connection. Built from kwargs when omitted.
            page_size: Maximum objects requested per listing call
            chunk_size: Chunk size for streamed downloads
            **kwargs: Connection settings passed to build_connection()
        """
        if not container:
            raise ConfigError("SwiftObjectStore requires a container name")
        self._container = container
        self.page_size = page_size
        self.chunk_size = chunk_size
        self.connection = connection if connection is not None else build_connection(**kwargs)

    @property
    def container(self) -> str:
        return self._container

    def _call(self, key: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except CLIENT_ERRORS as e:
            raise translate_error(key, e) from e

    def object_exists(self, key: str) -> bool:
        try:
            self._call(key, self.connection.head_object, self._container, key)
        except ObjectNotFoundError:
            return False
        return True

    def head_object(self, key: str) -> ObjectRecord:
        headers = self._call(key, self.connection.head_object, self._container, key)
        return ObjectRecord(
            key=key,
            size=headers.get("content-length"),
            content_type=headers.get("content-type"),
            last_modified=headers.get("last-modified"),
            etag=(headers.get("etag") or "").strip('"') or None,
            metadata=metadata_from_headers(headers),
        )

    def list_page(
        self,
        prefix: str,
        marker: str | None = None,
        limit: int | None = None,
    ) -> ObjectPage:
        limit = limit or self.page_size
        _, listing = self._call(
            prefix,
            self.connection.get_container,
            self._container,
            prefix=prefix,
            marker=marker,
            limit=limit,
        )
        records = tuple(
            ObjectRecord(
                key=item["name"],
                size=item.get("bytes"),
                content_type=item.get("content_type"),
                last_modified=item.get("last_modified"),
                etag=item.get("hash"),
            )
            # Pseudo-directory "subdir" entries only appear with a delimiter
            for item in listing
            if "name" in item
        )
        has_more = len(listing) >= limit
        return ObjectPage(
            records=records,
            has_more=has_more,
            next_marker=records[-1].key if has_more and records else None,
        )

    def create_object(
        self,
        key: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ObjectRecord:
        request_headers = dict(headers or {})
        request_headers.update(metadata_to_headers(metadata or {}))
        etag = self._call(
            key,
            self.connection.put_object,
            self._container,
            key,
            contents=content,
            content_type=content_type,
            headers=request_headers,
            chunk_size=self.chunk_size,
        )
        logger.debug("Object uploaded", context={"key": key, "etag": etag})
        return ObjectRecord(
            key=key,
            size=len(content) if isinstance(content, bytes) else None,
            content_type=content_type,
            etag=etag,
            metadata={k.lower(): v for k, v in (metadata or {}).items()},
        )

    def delete_object(self, key: str) -> None:
        self._call(key, self.connection.delete_object, self._container, key)

    def copy_object(self, key: str, destination: str) -> None:
        self._call(
            key,
            self.connection.copy_object,
            self._container,
            key,
            destination=destination,
        )

    def download(self, key: str) -> bytes:
        _, body = self._call(key, self.connection.get_object, self._container, key)
        return body

    def open_stream(self, key: str) -> BinaryIO:
        _, body = self._call(
            key,
            self.connection.get_object,
            self._container,
            key,
            resp_chunk_size=self.chunk_size,
        )
        return io.BufferedReader(ChunkedObjectStream(body, key))

    def update_metadata(self, key: str, metadata: Mapping[str, str]) -> None:
        # POST replaces all custom metadata, so merge with what is there
        current = self.head_object(key).metadata
        merged = {**current, **{k.lower(): v for k, v in metadata.items()}}
        self._call(
            key,
            self.connection.post_object,
            self._container,
            key,
            headers=metadata_to_headers(merged),
        )

    def object_url(self, key: str) -> str:
        storage_url = self.connection.url
        if not storage_url:
            storage_url, _ = self._call(key, self.connection.get_auth)
        return f"{storage_url.rstrip('/')}/{quote(self._container)}/{quote(key)}"
