"""ObjectStore protocol for flat object storage backends."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Protocol


@dataclass(frozen=True)
class ObjectRecord:
    """An object as reported by the store.

    ``last_modified`` is whatever the backend received: a string in one of
    the store's timestamp formats, a datetime, or epoch seconds.
    """

    key: str
    size: int | str | None = None
    content_type: str | None = None
    last_modified: str | datetime | int | float | None = None
    etag: str | None = None
    metadata: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectPage:
    """One page of a prefix listing."""

    records: tuple[ObjectRecord, ...]
    has_more: bool = False
    next_marker: str | None = None


class ObjectStore(Protocol):
    """Protocol for object store clients (Swift, in-memory)."""

    @property
    def container(self) -> str:
        """Name of the container objects live in."""
        ...

    def object_exists(self, key: str) -> bool:
        """Check whether an object exists. Raises StoreError on transport failure."""
        ...

    def head_object(self, key: str) -> ObjectRecord:
        """Fetch object metadata. Raises ObjectNotFoundError if absent."""
        ...

    def list_page(
        self,
        prefix: str,
        marker: str | None = None,
        limit: int | None = None,
    ) -> ObjectPage:
        """Fetch one page of objects whose key starts with prefix, after marker."""
        ...

    def create_object(
        self,
        key: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ObjectRecord:
        """Create or replace an object."""
        ...

    def delete_object(self, key: str) -> None:
        """Delete an object. Raises ObjectNotFoundError if absent."""
        ...

    def copy_object(self, key: str, destination: str) -> None:
        """Server-side copy. ``destination`` is ``/<container>/<key>``."""
        ...

    def download(self, key: str) -> bytes:
        """Download the full object body."""
        ...

    def open_stream(self, key: str) -> BinaryIO:
        """Open a readable stream over the object body. Caller closes it."""
        ...

    def update_metadata(self, key: str, metadata: Mapping[str, str]) -> None:
        """Set custom metadata entries, keeping the ones not named."""
        ...

    def object_url(self, key: str) -> str:
        """Public URL of an object, including the API version segment."""
        ...
