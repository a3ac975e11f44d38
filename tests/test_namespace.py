"""Tests for directory emulation over flat keys."""

import pytest

from swift_fs.backends.memory import InMemoryObjectStore
from swift_fs.exceptions import ObjectNotFoundError, StoreTransportError
from swift_fs.metadata import MetadataTranslator
from swift_fs.namespace import NamespaceEmulator, iter_records
from swift_fs.paths import PathPrefixer
from swift_fs.protocols import ObjectPage, ObjectRecord


class PagedSource:
    """Finite in-memory page source that records every request."""

    def __init__(self, pages):
        self.pages = pages
        self.requests = []

    def list_page(self, prefix, marker=None, limit=None):
        self.requests.append(marker)
        index = len(self.requests) - 1
        return self.pages[index]


def make_emulator(store, prefix=""):
    prefixer = PathPrefixer(prefix)
    return NamespaceEmulator(store, prefixer, MetadataTranslator(prefixer))


def fill(store, *keys):
    for key in keys:
        store.create_object(key, b"data", content_type="text/plain")


class TestIterRecords:
    """Tests for lazy page pulling."""

    def test_pages_fetched_on_demand(self):
        """A page is only requested once the previous one is consumed."""
        source = PagedSource([
            ObjectPage((ObjectRecord("a"), ObjectRecord("b")), has_more=True, next_marker="b"),
            ObjectPage((ObjectRecord("c"),), has_more=False),
        ])

        records = iter_records(source, "")
        assert source.requests == []

        assert next(records).key == "a"
        assert next(records).key == "b"
        assert source.requests == [None]

        assert next(records).key == "c"
        assert source.requests == [None, "b"]
        assert list(records) == []

    def test_marker_falls_back_to_last_key(self):
        """Without next_marker the last key of the page is used."""
        source = PagedSource([
            ObjectPage((ObjectRecord("a"),), has_more=True),
            ObjectPage((), has_more=False),
        ])
        assert [r.key for r in iter_records(source, "")] == ["a"]
        assert source.requests == [None, "a"]

    def test_empty_page_stops(self):
        """An empty page ends iteration even if more is claimed."""
        source = PagedSource([ObjectPage((), has_more=True)])
        assert list(iter_records(source, "")) == []

    def test_memory_store_paging(self):
        """Every key is returned across several store pages."""
        store = InMemoryObjectStore(page_size=2)
        fill(store, *[f"k/{i}" for i in range(5)])
        assert [r.key for r in iter_records(store, "k/")] == [f"k/{i}" for i in range(5)]


class TestListing:
    """Tests for shallow and deep listings."""

    @pytest.fixture
    def store(self):
        store = InMemoryObjectStore(page_size=2)
        fill(
            store,
            "some/0.txt",
            "some/1.txt",
            "some/2-nested/path.txt",
            "path/file.txt",
            "path/sub/file2.txt",
        )
        return store

    def test_shallow_listing_skips_nested(self, store):
        """Only direct children are listed; nothing is synthesized."""
        emulator = make_emulator(store)
        paths = [entry.path for entry in emulator.list_shallow("some/")]
        assert paths == ["some/0.txt", "some/1.txt"]

    def test_shallow_listing_without_trailing_separator(self, store):
        """'some' and 'some/' list the same directory."""
        emulator = make_emulator(store)
        assert [e.path for e in emulator.list_shallow("some")] == ["some/0.txt", "some/1.txt"]

    def test_shallow_root_listing(self, store):
        """At the root, nested keys are all filtered out."""
        fill(store, "top.txt")
        emulator = make_emulator(store)
        assert [e.path for e in emulator.list_shallow("")] == ["top.txt"]

    def test_deep_listing_returns_all_leaves(self, store):
        """Deep listing yields every object, none synthesized."""
        emulator = make_emulator(store)
        entries = list(emulator.list_deep(""))
        assert sorted(e.path for e in entries) == [
            "path/file.txt",
            "path/sub/file2.txt",
            "some/0.txt",
            "some/1.txt",
            "some/2-nested/path.txt",
        ]
        assert all(e.is_file for e in entries)

    def test_listing_does_not_match_sibling_prefix(self, store):
        """Listing 'path' ignores keys under 'pathology/'."""
        fill(store, "pathology/x.txt")
        emulator = make_emulator(store)
        assert "pathology/x.txt" not in [e.path for e in emulator.list_deep("path")]

    def test_listing_with_root_prefix(self):
        """Paths are reported relative to the root prefix."""
        store = InMemoryObjectStore()
        fill(store, "root/a.txt", "root/d/b.txt", "elsewhere/c.txt")
        emulator = make_emulator(store, "root")
        assert [e.path for e in emulator.list_shallow("")] == ["a.txt"]
        assert [e.path for e in emulator.list_deep("")] == ["a.txt", "d/b.txt"]

    def test_directory_markers(self):
        """Stored markers appear as directories; a directory's own marker is skipped."""
        store = InMemoryObjectStore()
        store.create_object("docs/", b"", content_type="application/directory")
        store.create_object("docs/sub", b"", content_type="application/directory")
        fill(store, "docs/a.txt")
        emulator = make_emulator(store)

        entries = list(emulator.list_shallow("docs"))

        assert [(e.path, e.is_dir) for e in entries] == [("docs/a.txt", False), ("docs/sub", True)]

    def test_trailing_separator_markers_in_parent_listing(self):
        """A "dir/" marker is a direct child of the directory above it."""
        store = InMemoryObjectStore()
        store.create_object("docs/", b"", content_type="application/directory")
        store.create_object("docs/sub/", b"", content_type="application/directory")
        fill(store, "docs/sub/a.txt", "top.txt")
        emulator = make_emulator(store)

        root = [(e.path, e.is_dir) for e in emulator.list_shallow("")]
        docs = [(e.path, e.is_dir) for e in emulator.list_shallow("docs")]

        assert root == [("docs", True), ("top.txt", False)]
        assert docs == [("docs/sub", True)]

    def test_listing_is_lazy(self):
        """Nothing is fetched until the listing is iterated."""
        source = PagedSource([ObjectPage((ObjectRecord("x/a", size=1),))])
        emulator = make_emulator(source)

        entries = emulator.list_contents("x", deep=True)
        assert source.requests == []
        assert [e.path for e in entries] == ["x/a"]


class TestDirectories:
    """Tests for directory existence and deletion."""

    def test_directory_exists(self):
        """A directory exists while an object lives under it."""
        store = InMemoryObjectStore()
        fill(store, "a/b/c.txt")
        emulator = make_emulator(store)
        assert emulator.directory_exists("a")
        assert emulator.directory_exists("a/b/")
        assert not emulator.directory_exists("a/c")
        assert not emulator.directory_exists("a/b/c")

    def test_delete_empty_directory(self):
        """Deleting a directory with no objects succeeds."""
        emulator = make_emulator(InMemoryObjectStore())
        assert emulator.delete_directory("missing") == 0

    def test_delete_only_matching_prefix(self):
        """Prefix 'a/' removes its objects and not 'ab/x'."""
        store = InMemoryObjectStore(page_size=2)
        fill(store, "a/1", "a/2", "a/deep/3", "ab/x", "b/y")
        emulator = make_emulator(store)

        assert emulator.delete_directory("a") == 3

        remaining = [r.key for r in iter_records(store, "")]
        assert remaining == ["ab/x", "b/y"]

    def test_delete_tolerates_vanished_objects(self):
        """Objects removed concurrently are skipped."""

        class VanishingStore(InMemoryObjectStore):
            def delete_object(self, key):
                if key == "a/1":
                    raise ObjectNotFoundError("gone", key=key)
                return super().delete_object(key)

        store = VanishingStore()
        fill(store, "a/1", "a/2")
        assert make_emulator(store).delete_directory("a") == 1

    def test_delete_failure_is_partial(self):
        """A failure stops deletion and keeps what was already removed."""

        class BrokenStore(InMemoryObjectStore):
            def delete_object(self, key):
                if key == "a/2":
                    raise StoreTransportError("boom", key=key, status=500)
                return super().delete_object(key)

        store = BrokenStore()
        fill(store, "a/1", "a/2", "a/3")

        with pytest.raises(StoreTransportError):
            make_emulator(store).delete_directory("a")

        assert not store.object_exists("a/1")
        assert store.object_exists("a/2")
        assert store.object_exists("a/3")
