"""Exception hierarchy for cloudfs (local, transport and base classes)."""

from __future__ import annotations

from typing import Any, Optional


class CloudFSError(Exception):
    """
    Base exception for cloudfs.

    Attributes:
        details: Optional structured information (e.g., url, method, status).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(CloudFSError):
    """Raised when the caller passes an invalid argument."""


class NotAuthenticatedError(CloudFSError):
    """Raised when an authenticated call is attempted without a bearer token."""

    def __init__(self, message: str = "session is not linked, please authenticate", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidItemError(CloudFSError):
    """Raised when operating on an item that has been permanently deleted."""


class InvalidShareError(CloudFSError):
    """Raised when operating on a share that no longer exists."""


class OperationNotAllowedError(CloudFSError):
    """Raised when the item state forbids the operation (trash, share, old version)."""


class HttpError(CloudFSError):
    """Base class of transport-level errors."""


class ClientError(HttpError):
    """
    Raised when no usable response came back from the server.

    `request` holds the request context ({"url", "method", "params"}).
    """

    def __init__(
        self,
        message: str,
        *,
        request: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, details={"request": request or {}}, cause=cause)
        self.request = request or {}
        self.code = -1
        self.response: dict[str, Any] = {
            "status": -1,
            "content_type": "text/plain",
            "content": "HTTP client error",
        }


class ConnectionFailedError(ClientError):
    """Raised when the host is unreachable or refuses the connection."""


class RequestTimeoutError(ClientError):
    """Raised when connecting, sending or receiving exceeds its timeout."""


class ProtocolError(ClientError):
    """Raised for malformed or exceptional responses from the HTTP transport."""


class ServerError(HttpError):
    """
    Raised for any HTTP status outside [200, 400) or an unrequested redirect.

    Never leaves the REST adapter: it is converted into a ServiceError there.
    """

    def __init__(
        self,
        message: str,
        status: int,
        *,
        response: Optional[dict[str, Any]] = None,
        request: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            details={"status": status, "request": request or {}},
        )
        self.status = status
        self.response = response or {}
        self.request = request or {}
