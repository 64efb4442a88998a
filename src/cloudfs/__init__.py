"""cloudfs public API."""

from __future__ import annotations

from cloudfs.auth import ClientCredentials
from cloudfs.controller import RestAdapter
from cloudfs.errors import (
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
    ServiceError,
    map_service_error,
)
from cloudfs.models import (
    Container,
    ExistsPolicy,
    File,
    Folder,
    Item,
    ItemKind,
    RestorePolicy,
    VersionConflictPolicy,
)
from cloudfs.session import Session
from cloudfs.transport import ConnectionConfig
from cloudfs.version import __version__

__all__ = [
    "__version__",
    # High-level
    "Session",
    "RestAdapter",
    # Config
    "ClientCredentials",
    "ConnectionConfig",
    # Models
    "Item",
    "Container",
    "Folder",
    "File",
    "ItemKind",
    "ExistsPolicy",
    "RestorePolicy",
    "VersionConflictPolicy",
    # Errors
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
    "map_service_error",
]
