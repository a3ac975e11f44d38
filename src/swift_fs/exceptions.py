"""swift-fs exceptions."""

from enum import Enum


class SwiftFsError(Exception):
    """Base exception for swift-fs."""

    pass


class ConfigError(SwiftFsError):
    """Configuration error."""

    pass


class StoreError(SwiftFsError):
    """Error reported by an object store backend."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.status = status


class ObjectNotFoundError(StoreError):
    """The requested object key does not exist in the store."""

    pass


class StoreTransportError(StoreError):
    """Network or service error from the store."""

    pass


class MetadataUnavailableError(SwiftFsError):
    """A required metadata field was absent or unparsable."""

    def __init__(self, field: str, key: str, reason: str = "") -> None:
        message = f"Metadata field '{field}' is unavailable for '{key}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.field = field
        self.key = key


class SigningPreconditionError(SwiftFsError):
    """A temporary URL could not be constructed."""

    pass


class ErrorKind(str, Enum):
    """Failure kinds surfaced to filesystem callers."""

    NOT_FOUND = "not_found"
    TRANSPORT_FAILURE = "transport_failure"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    METADATA_UNAVAILABLE = "metadata_unavailable"
    SIGNING_PRECONDITION = "signing_precondition"


def classify(error: BaseException) -> ErrorKind:
    """Map an internal error onto the kind reported to callers."""
    if isinstance(error, ObjectNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, MetadataUnavailableError):
        return ErrorKind.METADATA_UNAVAILABLE
    if isinstance(error, SigningPreconditionError):
        return ErrorKind.SIGNING_PRECONDITION
    return ErrorKind.TRANSPORT_FAILURE


class FilesystemError(SwiftFsError):
    """A filesystem operation failed.

    Subclasses name the operation; ``kind`` says why it failed. The store or
    core error that triggered the failure is chained as ``__cause__``.
    """

    operation = "perform operation"

    def __init__(self, location: str, kind: ErrorKind, reason: str = "") -> None:
        message = f"Unable to {self.operation} at location: {location}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.location = location
        self.kind = kind
        self.reason = reason

    @classmethod
    def from_error(cls, location: str, error: BaseException) -> "FilesystemError":
        """Build the operation failure for an internal error."""
        exc = cls(location, classify(error), str(error))
        exc.__cause__ = error
        return exc


class UnableToReadFile(FilesystemError):
    operation = "read file"


class UnableToWriteFile(FilesystemError):
    operation = "write file"


class UnableToDeleteFile(FilesystemError):
    operation = "delete file"


class UnableToDeleteDirectory(FilesystemError):
    operation = "delete directory"


class UnableToCreateDirectory(FilesystemError):
    operation = "create directory"

    @classmethod
    def not_supported(cls, location: str) -> "UnableToCreateDirectory":
        return cls(
            location,
            ErrorKind.UNSUPPORTED_OPERATION,
            "Directories cannot be explicitly created for Object Storage. "
            "Store files directly.",
        )


class UnableToMoveFile(FilesystemError):
    operation = "move file"


class UnableToCopyFile(FilesystemError):
    operation = "copy file"


class UnableToListContents(FilesystemError):
    operation = "list contents"


class UnableToRetrieveMetadata(FilesystemError):
    """Retrieving one metadata field (file_size, mime_type, ...) failed."""

    operation = "retrieve metadata"

    def __init__(
        self,
        location: str,
        kind: ErrorKind,
        reason: str = "",
        metadata_type: str = "",
    ) -> None:
        super().__init__(location, kind, reason)
        self.metadata_type = metadata_type

    @classmethod
    def for_field(
        cls, metadata_type: str, location: str, error: BaseException
    ) -> "UnableToRetrieveMetadata":
        exc = cls(location, classify(error), str(error), metadata_type)
        exc.__cause__ = error
        return exc


class UnableToSetVisibility(FilesystemError):
    operation = "set visibility"


class UnableToProvideChecksum(FilesystemError):
    operation = "provide checksum"


class UnableToGenerateTemporaryUrl(FilesystemError):
    operation = "generate temporary url"


class UnableToGeneratePublicUrl(FilesystemError):
    operation = "generate public url"
