"""Protocol interfaces for the store and the filesystem abstraction."""

from swift_fs.protocols.filesystem import (
    DirectoryAttributes,
    FileAttributes,
    FilesystemAdapter,
    StorageAttributes,
    Visibility,
)
from swift_fs.protocols.object_store import ObjectPage, ObjectRecord, ObjectStore

__all__ = [
    "DirectoryAttributes",
    "FileAttributes",
    "FilesystemAdapter",
    "ObjectPage",
    "ObjectRecord",
    "ObjectStore",
    "StorageAttributes",
    "Visibility",
]
