"""Pytest configuration and fixtures."""

import pytest

from swift_fs.adapter import SwiftAdapter
from swift_fs.backends.memory import InMemoryObjectStore
from swift_fs.exceptions import StoreTransportError
from swift_fs.observability import clear_metric_callbacks

TEMP_URL_KEY = "test-temp-url-key"


class FailingObjectStore(InMemoryObjectStore):
    """Memory store whose named operations fail like an unreachable service."""

    def __init__(self, failing=(), **kwargs):
        super().__init__(**kwargs)
        self.failing = set(failing)

    def _check(self, operation):
        if operation in self.failing:
            raise StoreTransportError(f"{operation} failed: service unavailable", status=503)

    def object_exists(self, key):
        self._check("object_exists")
        return super().object_exists(key)

    def head_object(self, key):
        self._check("head_object")
        return super().head_object(key)

    def list_page(self, prefix, marker=None, limit=None):
        self._check("list_page")
        return super().list_page(prefix, marker=marker, limit=limit)

    def create_object(self, key, content, **kwargs):
        self._check("create_object")
        return super().create_object(key, content, **kwargs)

    def delete_object(self, key):
        self._check("delete_object")
        return super().delete_object(key)

    def copy_object(self, key, destination):
        self._check("copy_object")
        return super().copy_object(key, destination)

    def download(self, key):
        self._check("download")
        return super().download(key)

    def update_metadata(self, key, metadata):
        self._check("update_metadata")
        return super().update_metadata(key, metadata)


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        "store": {
            "backend": "memory",
            "container": "test-container",
            "page_size": 2,
        },
        "adapter": {
            "prefix": "tenant",
            "temp_url_key": TEMP_URL_KEY,
            "default_visibility": "private",
        },
        "logging": {"level": "DEBUG", "format": "text"},
    }


@pytest.fixture
def store():
    """Memory store with a small page size to exercise paging."""
    return InMemoryObjectStore(container="test-container", page_size=2)


@pytest.fixture
def adapter(store):
    """Adapter without a prefix."""
    return SwiftAdapter(store, temp_url_key=TEMP_URL_KEY)


@pytest.fixture
def prefixed_adapter(store):
    """Adapter rooted under 'tenant/'."""
    return SwiftAdapter(store, prefix="tenant", temp_url_key=TEMP_URL_KEY)


@pytest.fixture(autouse=True)
def _reset_metric_callbacks():
    yield
    clear_metric_callbacks()
