"""Root prefix handling for object keys."""


class PathPrefixer:
    """Maps logical paths onto object keys under a configured root.

    Several logical filesystems can share a container by using different
    roots:

        prefixer = PathPrefixer("tenants/acme")
        prefixer.prefix_path("docs/a.txt")  # "tenants/acme/docs/a.txt"
        prefixer.strip_prefix("tenants/acme/docs/a.txt")  # "docs/a.txt"

    Logical paths are well-formed when they carry no leading separator; for
    those, ``strip_prefix(prefix_path(path)) == path``.
    """

    def __init__(self, prefix: str = "", separator: str = "/") -> None:
        """Initialize the prefixer.

        Args:
            prefix: Root all keys are placed under. Surrounding separators
                are ignored, so "a/b", "/a/b/" and "a/b/" are the same root.
            separator: Path separator used by the store's keys
        """
        self.separator = separator
        root = prefix.strip(separator)
        self.prefix = f"{root}{separator}" if root else ""

    def prefix_path(self, path: str) -> str:
        """Return the object key for a logical path."""
        return self.prefix + path.lstrip(self.separator)

    def strip_prefix(self, path: str) -> str:
        """Return the logical path for an object key."""
        if self.prefix and path.startswith(self.prefix):
            return path[len(self.prefix) :]
        return path

    def prefix_directory_path(self, path: str) -> str:
        """Return the key prefix shared by every object inside a directory.

        The result ends with the separator unless it is empty, so "a" never
        matches keys under "ab/".
        """
        directory = path.strip(self.separator)
        if not directory:
            return self.prefix
        return f"{self.prefix}{directory}{self.separator}"

    def strip_directory_prefix(self, path: str) -> str:
        """Return the logical directory path for a key prefix."""
        return self.strip_prefix(path).rstrip(self.separator)

    def __repr__(self) -> str:
        return f"PathPrefixer(prefix={self.prefix!r})"
