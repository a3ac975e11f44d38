"""swift-fs - A filesystem adapter for OpenStack Swift object storage."""

from swift_fs.adapter import SwiftAdapter
from swift_fs.config import Config
from swift_fs.exceptions import (
    ErrorKind,
    FilesystemError,
    SwiftFsError,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToGeneratePublicUrl,
    UnableToGenerateTemporaryUrl,
    UnableToListContents,
    UnableToMoveFile,
    UnableToProvideChecksum,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from swift_fs.observability import (
    LogLevel,
    OperationContext,
    StructuredLogger,
    Timer,
    configure_logging,
    get_logger,
    register_metric_callback,
)
from swift_fs.paths import PathPrefixer
from swift_fs.protocols import DirectoryAttributes, FileAttributes, Visibility
from swift_fs.signing import TemporaryUrlSigner

__version__ = "0.1.0"
__all__ = [
    # Core
    "Config",
    "PathPrefixer",
    "SwiftAdapter",
    "TemporaryUrlSigner",
    # Attributes
    "DirectoryAttributes",
    "FileAttributes",
    "Visibility",
    # Errors
    "ErrorKind",
    "FilesystemError",
    "SwiftFsError",
    "UnableToCopyFile",
    "UnableToCreateDirectory",
    "UnableToDeleteDirectory",
    "UnableToDeleteFile",
    "UnableToGeneratePublicUrl",
    "UnableToGenerateTemporaryUrl",
    "UnableToListContents",
    "UnableToMoveFile",
    "UnableToProvideChecksum",
    "UnableToReadFile",
    "UnableToRetrieveMetadata",
    "UnableToSetVisibility",
    "UnableToWriteFile",
    # Observability
    "LogLevel",
    "OperationContext",
    "StructuredLogger",
    "Timer",
    "configure_logging",
    "get_logger",
    "register_metric_callback",
]
