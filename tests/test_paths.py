"""Tests for path prefixing."""

import pytest

from swift_fs.paths import PathPrefixer

LOGICAL_PATHS = [
    "",
    "file.txt",
    "a/b/c.txt",
    "dir/",
    "with space/ünïcode.txt",
    "trailing/slash/",
]


class TestPathPrefixer:
    """Tests for PathPrefixer."""

    @pytest.mark.parametrize("root", ["", "root", "root/", "/root/", "a/b/c"])
    @pytest.mark.parametrize("path", LOGICAL_PATHS)
    def test_strip_inverts_prefix(self, root, path):
        """strip_prefix undoes prefix_path for well-formed paths."""
        prefixer = PathPrefixer(root)
        assert prefixer.strip_prefix(prefixer.prefix_path(path)) == path

    def test_prefix_is_normalized(self):
        """Surrounding separators on the root are ignored."""
        assert PathPrefixer("/root/").prefix == "root/"
        assert PathPrefixer("root").prefix == "root/"
        assert PathPrefixer("//").prefix == ""

    def test_no_double_separator(self):
        """A leading separator on the path does not double up."""
        prefixer = PathPrefixer("root")
        assert prefixer.prefix_path("/file.txt") == "root/file.txt"

    def test_no_prefix(self):
        """Without a root, paths map to themselves."""
        prefixer = PathPrefixer()
        assert prefixer.prefix_path("a/b.txt") == "a/b.txt"
        assert prefixer.strip_prefix("a/b.txt") == "a/b.txt"

    def test_prefix_is_injective(self):
        """Distinct paths map to distinct keys."""
        prefixer = PathPrefixer("root")
        keys = {prefixer.prefix_path(p) for p in ["a", "b", "a/b", "ab"]}
        assert len(keys) == 4

    def test_strip_leaves_foreign_keys(self):
        """Keys outside the root are returned unchanged."""
        prefixer = PathPrefixer("root")
        assert prefixer.strip_prefix("other/file.txt") == "other/file.txt"

    def test_directory_prefix(self):
        """Directory prefixes end with the separator."""
        prefixer = PathPrefixer("root")
        assert prefixer.prefix_directory_path("a") == "root/a/"
        assert prefixer.prefix_directory_path("a/") == "root/a/"
        assert prefixer.prefix_directory_path("") == "root/"
        assert PathPrefixer().prefix_directory_path("") == ""

    def test_strip_directory_prefix(self):
        """Directory keys map back without the trailing separator."""
        prefixer = PathPrefixer("root")
        assert prefixer.strip_directory_prefix("root/a/") == "a"
