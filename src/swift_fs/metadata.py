"""Translation of store object records into filesystem attributes."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from swift_fs.exceptions import MetadataUnavailableError
from swift_fs.paths import PathPrefixer
from swift_fs.protocols.filesystem import DirectoryAttributes, FileAttributes, StorageAttributes
from swift_fs.protocols.object_store import ObjectRecord

# Custom metadata key holding the visibility tag. Swift exposes it as the
# X-Object-Meta-Visibility header. Renaming it orphans existing objects.
VISIBILITY_METADATA_KEY = "visibility"
VISIBILITY_HEADER = "X-Object-Meta-Visibility"

DIRECTORY_CONTENT_TYPE = "application/directory"


def normalize_mime_type(content_type: str | None) -> str | None:
    """Return the bare media type of a Content-Type value.

    Parameters are dropped and empty segments skipped, so both
    "text/plain; charset=utf-8" and "; plain/text" yield a single type.
    """
    if not content_type:
        return None
    for part in content_type.split(";"):
        part = part.strip()
        if part and "=" not in part:
            return part
    return None


def parse_timestamp(value: str | datetime | int | float | None) -> int | None:
    """Parse a store timestamp into Unix epoch seconds.

    Accepts epoch numbers, datetimes, RFC 1123 strings (object HEAD
    responses) and ISO 8601 strings (container listings). Naive values are
    taken as UTC. Returns None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        if text.isdigit():
            return int(text)
        parsed = None
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            pass
        if parsed is None:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


class MetadataTranslator:
    """Maps ObjectRecords to FileAttributes and DirectoryAttributes.

    Field accessors raise MetadataUnavailableError when the field is absent
    or unparsable; there are no implicit defaults. ``to_attributes`` is the
    lenient variant used by listings, where absent fields stay None.
    """

    def __init__(self, prefixer: PathPrefixer) -> None:
        self.prefixer = prefixer

    def path(self, record: ObjectRecord) -> str:
        return self.prefixer.strip_prefix(record.key)

    def file_size(self, record: ObjectRecord) -> int:
        size = record.size
        if size is None or size == "":
            raise MetadataUnavailableError("file_size", record.key)
        try:
            value = int(size)
        except (TypeError, ValueError):
            raise MetadataUnavailableError(
                "file_size", record.key, f"invalid content length {size!r}"
            )
        if value < 0:
            raise MetadataUnavailableError(
                "file_size", record.key, f"negative content length {value}"
            )
        return value

    def mime_type(self, record: ObjectRecord) -> str:
        mime_type = normalize_mime_type(record.content_type)
        if mime_type is None:
            raise MetadataUnavailableError("mime_type", record.key)
        return mime_type

    def last_modified(self, record: ObjectRecord) -> int:
        if record.last_modified is None:
            raise MetadataUnavailableError("last_modified", record.key)
        timestamp = parse_timestamp(record.last_modified)
        if timestamp is None:
            raise MetadataUnavailableError(
                "last_modified",
                record.key,
                f"unparsable timestamp {record.last_modified!r}",
            )
        return timestamp

    def visibility(self, record: ObjectRecord) -> str:
        visibility = record.metadata.get(VISIBILITY_METADATA_KEY)
        if not visibility:
            raise MetadataUnavailableError("visibility", record.key)
        return visibility

    def is_directory_marker(self, record: ObjectRecord) -> bool:
        return normalize_mime_type(record.content_type) == DIRECTORY_CONTENT_TYPE

    def to_file_attributes(self, record: ObjectRecord) -> FileAttributes:
        """Strict translation: every field must be present except visibility."""
        return FileAttributes(
            path=self.path(record),
            file_size=self.file_size(record),
            visibility=record.metadata.get(VISIBILITY_METADATA_KEY) or None,
            last_modified=self.last_modified(record),
            mime_type=self.mime_type(record),
            extra_metadata=dict(record.metadata),
        )

    def to_attributes(self, record: ObjectRecord) -> StorageAttributes:
        """Lenient translation for listing entries."""
        visibility = record.metadata.get(VISIBILITY_METADATA_KEY) or None
        last_modified = parse_timestamp(record.last_modified)
        if self.is_directory_marker(record):
            return DirectoryAttributes(
                path=self.prefixer.strip_directory_prefix(record.key),
                visibility=visibility,
                last_modified=last_modified,
            )
        size = None
        if record.size is not None and record.size != "":
            try:
                size = int(record.size)
            except (TypeError, ValueError):
                size = None
        return FileAttributes(
            path=self.path(record),
            file_size=size,
            visibility=visibility,
            last_modified=last_modified,
            mime_type=normalize_mime_type(record.content_type),
            extra_metadata=dict(record.metadata),
        )
