"""Filesystem abstraction contract implemented by adapters."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import BinaryIO, Protocol


class Visibility(str, Enum):
    """Visibility tags understood by the adapter."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class FileAttributes:
    """Attributes of a stored file. Absent fields are None."""

    path: str
    file_size: int | None = None
    visibility: str | None = None
    last_modified: int | None = None
    mime_type: str | None = None
    extra_metadata: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return True

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryAttributes:
    """Attributes of a directory entry."""

    path: str
    visibility: str | None = None
    last_modified: int | None = None

    @property
    def is_file(self) -> bool:
        return False

    @property
    def is_dir(self) -> bool:
        return True


StorageAttributes = FileAttributes | DirectoryAttributes


class FilesystemAdapter(Protocol):
    """Protocol for filesystem adapters."""

    def file_exists(self, path: str) -> bool: ...

    def directory_exists(self, path: str) -> bool: ...

    def write(
        self,
        path: str,
        contents: bytes | str,
        visibility: str | None = None,
        mime_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None: ...

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        visibility: str | None = None,
        mime_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None: ...

    def read(self, path: str) -> bytes: ...

    def read_stream(self, path: str) -> BinaryIO: ...

    def delete(self, path: str) -> None: ...

    def delete_directory(self, path: str) -> None: ...

    def create_directory(self, path: str) -> None: ...

    def move(self, source: str, destination: str) -> None: ...

    def copy(self, source: str, destination: str) -> None: ...

    def list_contents(self, path: str = "", deep: bool = False) -> Iterator[StorageAttributes]: ...

    def visibility(self, path: str) -> FileAttributes: ...

    def set_visibility(self, path: str, visibility: str) -> None: ...

    def mime_type(self, path: str) -> FileAttributes: ...

    def last_modified(self, path: str) -> FileAttributes: ...

    def file_size(self, path: str) -> FileAttributes: ...

    def checksum(self, path: str, algorithm: str = "md5") -> str: ...

    def temporary_url(
        self, path: str, expires_at: datetime | int, method: str = "GET"
    ) -> str: ...

    def public_url(self, path: str) -> str: ...
