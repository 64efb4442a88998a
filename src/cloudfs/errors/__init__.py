"""Public error exports for cloudfs."""

from __future__ import annotations

from .exceptions import (
    ClientError,
    CloudFSError,
    ConnectionFailedError,
    HttpError,
    InvalidArgumentError,
    InvalidItemError,
    InvalidShareError,
    NotAuthenticatedError,
    OperationNotAllowedError,
    ProtocolError,
    RequestTimeoutError,
    ServerError,
)
from .service import (
    SERVICE_ERROR_CODES,
    APICallLimitReached,
    APIError,
    DirectoryNotEmpty,
    EndpointError,
    FileError,
    FileSystemError,
    FolderError,
    FolderNotFound,
    GeneralPanicError,
    NameConflictCreatingFolder,
    NotFound,
    OriginalPathNoLongerExists,
    ServiceError,
    ShareError,
    VersionMismatchIgnored,
    build_error_code_table,
    map_service_error,
)

__all__ = [
    "CloudFSError",
    "InvalidArgumentError",
    "NotAuthenticatedError",
    "InvalidItemError",
    "InvalidShareError",
    "OperationNotAllowedError",
    "HttpError",
    "ClientError",
    "ConnectionFailedError",
    "RequestTimeoutError",
    "ProtocolError",
    "ServerError",
    "ServiceError",
    "GeneralPanicError",
    "APIError",
    "APICallLimitReached",
    "FileSystemError",
    "ShareError",
    "FolderError",
    "FileError",
    "EndpointError",
    "FolderNotFound",
    "DirectoryNotEmpty",
    "NameConflictCreatingFolder",
    "NotFound",
    "OriginalPathNoLongerExists",
    "VersionMismatchIgnored",
    "SERVICE_ERROR_CODES",
    "build_error_code_table",
    "map_service_error",
]
