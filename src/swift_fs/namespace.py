"""Directory semantics over a flat object key space."""

from collections.abc import Iterator

from swift_fs.exceptions import ObjectNotFoundError
from swift_fs.metadata import MetadataTranslator
from swift_fs.observability import get_logger
from swift_fs.paths import PathPrefixer
from swift_fs.protocols.filesystem import StorageAttributes
from swift_fs.protocols.object_store import ObjectRecord, ObjectStore

logger = get_logger(__name__)


def iter_records(
    store: ObjectStore,
    prefix: str,
    page_size: int | None = None,
) -> Iterator[ObjectRecord]:
    """Yield every object under a key prefix, fetching pages on demand.

    Nothing is requested until the first item is pulled, and each further
    page only once the previous one is exhausted.
    """
    marker: str | None = None
    while True:
        page = store.list_page(prefix, marker=marker, limit=page_size)
        yield from page.records
        if not page.has_more or not page.records:
            return
        marker = page.next_marker or page.records[-1].key


def parent_directory(path: str, separator: str = "/") -> str:
    return path.rpartition(separator)[0]


class NamespaceEmulator:
    """Emulates directories on top of a prefix-listable object store.

    There are no directory objects to create: a directory "exists" while at
    least one object key starts with its prefix, so an empty directory can
    never be observed.
    """

    def __init__(
        self,
        store: ObjectStore,
        prefixer: PathPrefixer,
        translator: MetadataTranslator,
        page_size: int | None = None,
    ) -> None:
        self.store = store
        self.prefixer = prefixer
        self.translator = translator
        self.page_size = page_size

    def records(self, directory: str) -> Iterator[ObjectRecord]:
        prefix = self.prefixer.prefix_directory_path(directory)
        for record in iter_records(self.store, prefix, self.page_size):
            # A "dir/" marker object stands for the directory itself
            if record.key == prefix:
                continue
            yield record

    def list_deep(self, directory: str) -> Iterator[StorageAttributes]:
        """Yield every object below a directory, at any depth."""
        for record in self.records(directory):
            yield self.translator.to_attributes(record)

    def list_shallow(self, directory: str) -> Iterator[StorageAttributes]:
        """Yield the objects directly inside a directory.

        Keys nested further down are skipped; no entries are synthesized for
        the subdirectories they imply. Stored "sub/" markers count as direct
        children.
        """
        separator = self.prefixer.separator
        target = directory.strip(separator)
        for record in self.records(directory):
            path = self.translator.path(record).rstrip(separator)
            if parent_directory(path, separator) != target:
                continue
            yield self.translator.to_attributes(record)

    def list_contents(self, directory: str, deep: bool = False) -> Iterator[StorageAttributes]:
        if deep:
            return self.list_deep(directory)
        return self.list_shallow(directory)

    def directory_exists(self, directory: str) -> bool:
        prefix = self.prefixer.prefix_directory_path(directory)
        page = self.store.list_page(prefix, limit=1)
        return bool(page.records)

    def delete_directory(self, directory: str) -> int:
        """Delete every object under a directory and return how many were removed.

        Objects are deleted one at a time; a failure leaves the ones already
        removed deleted. Objects that vanish concurrently are skipped.
        """
        prefix = self.prefixer.prefix_directory_path(directory)
        deleted = 0
        for record in iter_records(self.store, prefix, self.page_size):
            try:
                self.store.delete_object(record.key)
            except ObjectNotFoundError:
                logger.debug("Object already gone", context={"key": record.key})
                continue
            deleted += 1
        return deleted
