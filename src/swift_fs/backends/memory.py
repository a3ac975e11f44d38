"""In-memory object storage."""

import hashlib
import io
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, BinaryIO
from urllib.parse import quote

from swift_fs.exceptions import ObjectNotFoundError, StoreTransportError
from swift_fs.protocols.object_store import ObjectPage, ObjectRecord


@dataclass
class StoredObject:
    """An object held in memory."""

    data: bytes
    content_type: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    last_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def etag(self) -> str:
        return hashlib.md5(self.data).hexdigest()


class InMemoryObjectStore:
    """Object store kept in a dict, with Swift-style paging and URLs.

    Suitable for development and testing. Data is lost on restart.
    """

    def __init__(
        self,
        container: str = "default",
        page_size: int = 1000,
        storage_url: str = "https://swift.invalid/v1/AUTH_memory",
        **kwargs: Any,
    ) -> None:
        """Initialize memory object store.

        Args:
            container: Container name used in object URLs and copy destinations
            page_size: Maximum records returned by one listing page
            storage_url: Account URL object URLs are built on
            **kwargs: Ignored (for compatibility with other backends)
        """
        self._container = container
        self.page_size = page_size
        self.storage_url = storage_url.rstrip("/")
        self._objects: dict[str, StoredObject] = {}
        self._lock = threading.Lock()

    @property
    def container(self) -> str:
        return self._container

    def _get(self, key: str) -> StoredObject:
        stored = self._objects.get(key)
        if stored is None:
            raise ObjectNotFoundError(f"Object not found: {key}", key=key, status=404)
        return stored

    def _record(self, key: str, stored: StoredObject) -> ObjectRecord:
        return ObjectRecord(
            key=key,
            size=len(stored.data),
            content_type=stored.content_type,
            last_modified=stored.last_modified,
            etag=stored.etag,
            metadata=dict(stored.metadata),
        )

    def object_exists(self, key: str) -> bool:
        with self._lock:
            return key in self._objects

    def head_object(self, key: str) -> ObjectRecord:
        with self._lock:
            return self._record(key, self._get(key))

    def list_page(
        self,
        prefix: str,
        marker: str | None = None,
        limit: int | None = None,
    ) -> ObjectPage:
        limit = min(limit or self.page_size, self.page_size)
        with self._lock:
            keys = sorted(
                k for k in self._objects
                if k.startswith(prefix) and (marker is None or k > marker)
            )
            selected = keys[:limit]
            records = tuple(self._record(k, self._objects[k]) for k in selected)
        has_more = len(keys) > limit
        return ObjectPage(
            records=records,
            has_more=has_more,
            next_marker=selected[-1] if has_more else None,
        )

    def create_object(
        self,
        key: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ObjectRecord:
        data = content if isinstance(content, bytes) else content.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        stored = StoredObject(
            data=data,
            content_type=content_type,
            metadata={k.lower(): v for k, v in (metadata or {}).items()},
            headers=dict(headers or {}),
        )
        with self._lock:
            self._objects[key] = stored
        return self._record(key, stored)

    def delete_object(self, key: str) -> None:
        with self._lock:
            self._get(key)
            del self._objects[key]

    def copy_object(self, key: str, destination: str) -> None:
        container, _, dest_key = destination.lstrip("/").partition("/")
        if container != self._container or not dest_key:
            raise StoreTransportError(
                f"Invalid copy destination: {destination}", key=key, status=412
            )
        with self._lock:
            source = self._get(key)
            self._objects[dest_key] = StoredObject(
                data=source.data,
                content_type=source.content_type,
                metadata=dict(source.metadata),
                headers=dict(source.headers),
            )

    def download(self, key: str) -> bytes:
        with self._lock:
            return self._get(key).data

    def open_stream(self, key: str) -> BinaryIO:
        return io.BytesIO(self.download(key))

    def update_metadata(self, key: str, metadata: Mapping[str, str]) -> None:
        with self._lock:
            stored = self._get(key)
            stored.metadata.update({k.lower(): v for k, v in metadata.items()})

    def object_url(self, key: str) -> str:
        return f"{self.storage_url}/{quote(self._container)}/{quote(key)}"

    def clear(self) -> None:
        """Clear all data. Useful for testing."""
        with self._lock:
            self._objects.clear()
