"""Tests for metadata translation."""

from datetime import datetime, timezone

import pytest

from swift_fs.exceptions import MetadataUnavailableError
from swift_fs.metadata import MetadataTranslator, normalize_mime_type, parse_timestamp
from swift_fs.paths import PathPrefixer
from swift_fs.protocols import DirectoryAttributes, FileAttributes, ObjectRecord

JAN_1_2020 = 1577836800


@pytest.fixture
def translator():
    return MetadataTranslator(PathPrefixer("prefix"))


@pytest.fixture
def record():
    return ObjectRecord(
        key="prefix/filename.ext",
        size="4",
        content_type="; plain/text",
        last_modified="2020-01-01",
        etag="abc",
        metadata={"visibility": "public"},
    )


class TestNormalizeMimeType:
    """Tests for normalize_mime_type."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("text/plain", "text/plain"),
            ("text/plain; charset=utf-8", "text/plain"),
            ("; plain/text", "plain/text"),
            ("  image/png  ", "image/png"),
            ("", None),
            (None, None),
            ("; charset=utf-8", None),
        ],
    )
    def test_normalize(self, value, expected):
        """Parameters and empty segments are dropped."""
        assert normalize_mime_type(value) == expected


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    @pytest.mark.parametrize(
        "value",
        [
            "2020-01-01",
            "2020-01-01T00:00:00.000000",
            "2020-01-01T00:00:00Z",
            "Wed, 01 Jan 2020 00:00:00 GMT",
            "1577836800",
            1577836800,
            1577836800.5,
            datetime(2020, 1, 1, tzinfo=timezone.utc),
            datetime(2020, 1, 1),
        ],
    )
    def test_formats(self, value):
        """Listing, HEAD and native timestamps all parse."""
        assert parse_timestamp(value) == JAN_1_2020

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2020-13-45"])
    def test_unparsable(self, value):
        """Garbage yields None."""
        assert parse_timestamp(value) is None


class TestMetadataTranslator:
    """Tests for MetadataTranslator."""

    def test_fields(self, translator, record):
        """Each accessor maps its field."""
        assert translator.path(record) == "filename.ext"
        assert translator.file_size(record) == 4
        assert translator.mime_type(record) == "plain/text"
        assert translator.last_modified(record) == JAN_1_2020
        assert translator.visibility(record) == "public"

    @pytest.mark.parametrize(
        "field, accessor",
        [
            ("size", "file_size"),
            ("content_type", "mime_type"),
            ("last_modified", "last_modified"),
        ],
    )
    def test_missing_field_raises(self, translator, field, accessor):
        """Absent fields raise instead of defaulting."""
        incomplete = ObjectRecord(key="prefix/f", **{field: None})
        with pytest.raises(MetadataUnavailableError) as exc_info:
            getattr(translator, accessor)(incomplete)
        assert exc_info.value.field == accessor

    def test_missing_visibility_raises(self, translator):
        """No visibility header means unknown, not a default."""
        with pytest.raises(MetadataUnavailableError):
            translator.visibility(ObjectRecord(key="prefix/f", metadata={}))

    def test_invalid_size_raises(self, translator):
        """Non-numeric content length is a failure."""
        with pytest.raises(MetadataUnavailableError):
            translator.file_size(ObjectRecord(key="prefix/f", size="lots"))

    def test_unparsable_timestamp_raises(self, translator):
        """Unparsable timestamps are a failure."""
        with pytest.raises(MetadataUnavailableError):
            translator.last_modified(ObjectRecord(key="prefix/f", last_modified="soon"))

    def test_to_file_attributes(self, translator, record):
        """Strict translation fills every field."""
        attributes = translator.to_file_attributes(record)
        assert attributes == FileAttributes(
            path="filename.ext",
            file_size=4,
            visibility="public",
            last_modified=JAN_1_2020,
            mime_type="plain/text",
            extra_metadata={"visibility": "public"},
        )

    def test_to_attributes_is_lenient(self, translator):
        """Listing translation leaves absent fields empty."""
        attributes = translator.to_attributes(ObjectRecord(key="prefix/a/b.txt", size=3))
        assert isinstance(attributes, FileAttributes)
        assert attributes.path == "a/b.txt"
        assert attributes.file_size == 3
        assert attributes.mime_type is None
        assert attributes.visibility is None

    def test_directory_marker(self, translator):
        """application/directory objects become directory entries."""
        attributes = translator.to_attributes(
            ObjectRecord(key="prefix/a/sub", size=0, content_type="application/directory")
        )
        assert attributes == DirectoryAttributes(path="a/sub")
        assert attributes.is_dir
