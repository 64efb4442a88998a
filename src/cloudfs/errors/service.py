"""Service error kinds and mapping of service error codes to exceptions."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

from .exceptions import CloudFSError, ServerError

logger = logging.getLogger(__name__)


class ServiceError(CloudFSError):
    """
    Base class of all errors returned by the CloudFS service.

    Attributes:
        code: Service error code, -1 when the body carried none.
        status: HTTP status of the failed response, -1 if unknown.
        request: Request context ({"url", "method", "params"}).
        response: Response context ({"status", "content_type", "content"}).
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        status: Optional[int] = None,
        request: Optional[dict[str, Any]] = None,
        response: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.code = code if code is not None else -1
        self.status = status if status is not None else -1
        self.request = request or {}
        self.response = response or {}
        super().__init__(
            message,
            details={
                "code": self.code,
                "status": self.status,
                "url": self.request.get("url"),
                "method": self.request.get("method"),
            },
            cause=cause,
        )


class GeneralPanicError(ServiceError):
    pass


class APIError(ServiceError):
    pass


class APICallLimitReached(ServiceError):
    pass


class FileSystemError(ServiceError):
    """Base class for filesystem (version, restore) errors."""


class ShareError(ServiceError):
    """Base class for share errors."""


class FolderError(ServiceError):
    """Base class for folder errors."""


class FileError(ServiceError):
    """Base class for file errors."""


class EndpointError(ServiceError):
    """Base class for endpoint entry errors."""


class InvalidVersion(FileSystemError):
    pass


class VersionMismatchIgnored(FileSystemError):
    pass


class OriginalPathNoLongerExists(FileSystemError):
    pass


class SharePathRequired(ShareError):
    pass


class SharePathDoesNotExist(ShareError):
    pass


class WouldExceedQuota(ShareError):
    pass


class ShareDoesNotExist(ShareError):
    pass


class FolderDoesNotExist(FolderError):
    pass


class FolderNotFound(FolderError):
    pass


class UploadToReadOnlyDestinationFailed(FolderError):
    pass


class MoveToReadOnlyDestinationFailed(FolderError):
    pass


class CopyToReadOnlyDestinationFailed(FolderError):
    pass


class RenameOnReadOnlyLocationFailed(FolderError):
    pass


class DeleteOnReadOnlyLocationFailed(FolderError):
    pass


class CreateFolderOnReadOnlyLocationFailed(FolderError):
    pass


class FailedToReadFilesystem(FolderError):
    pass


class NameConflictCreatingFolder(FolderError):
    pass


class NameConflictOnUpload(FolderError):
    pass


class NameConflictOnRename(FolderError):
    pass


class NameConflictOnMove(FolderError):
    pass


class NameConflictOnCopy(FolderError):
    pass


class FailedToSaveChanges(FolderError):
    pass


class FailedToBroadcastUpdate(FolderError):
    pass


class CannotDeleteTheInfiniteDrive(FolderError):
    pass


class FolderMissingToParameter(FolderError):
    pass


class ExistsParameterInvalid(FolderError):
    pass


class MissingPathParameter(FolderError):
    pass


class SpecifiedLocationIsReadOnly(FolderError):
    pass


class SpecifiedSourceIsReadOnly(FolderError):
    pass


class SpecifiedDestinationIsReadOnly(FolderError):
    pass


class FolderPathDoesNotExist(FolderError):
    pass


class PermissionDenied(FolderError):
    pass


class RenamePermissionDenied(FolderError):
    pass


class NameConflictInOperation(FolderError):
    pass


class InvalidOperation(FolderError):
    pass


class VersionMissingOrIncorrect(FolderError):
    pass


class InvalidDepth(FolderError):
    pass


class VersionDoesNotExist(FolderError):
    pass


class FolderNameRequired(FolderError):
    pass


class InvalidName(FolderError):
    pass


class TreeRequired(FolderError):
    pass


class InvalidVerbose(FolderError):
    pass


class DirectoryNotEmpty(FolderError):
    pass


class NotFound(FileError):
    pass


class FileInvalidOperation(FileError):
    pass


class FileInvalidName(FileError):
    pass


class InvalidExists(FileError):
    pass


class ExtensionTooLong(FileError):
    pass


class InvalidDateCreated(FileError):
    pass


class InvalidDateMetaLastModified(FileError):
    pass


class InvalidDateContentLastModified(FileError):
    pass


class MIMETooLong(FileError):
    pass


class SizeMustBePositive(FileError):
    pass


class NameRequired(FileError):
    pass


class SizeRequired(FileError):
    pass


class ToPathRequired(FileError):
    pass


class FileVersionMissingOrIncorrect(FileError):
    pass


class InvalidPath(EndpointError):
    pass


class AlreadyExists(EndpointError):
    pass


class NotAllowed(EndpointError):
    pass


# Order matters: a code declared twice keeps its last declaration.
_ERROR_CODE_DECLARATIONS: tuple[tuple[int, type[ServiceError]], ...] = (
    (9999, GeneralPanicError),
    (9000, APIError),
    (9006, APICallLimitReached),
    # Filesystem
    (8001, InvalidVersion),
    (8002, VersionMismatchIgnored),
    (8004, OriginalPathNoLongerExists),
    # Shares
    (6001, SharePathRequired),
    (6002, SharePathDoesNotExist),
    (6003, WouldExceedQuota),
    (6004, ShareDoesNotExist),
    # Folders
    (2002, FolderDoesNotExist),
    (2003, FolderNotFound),
    (2004, UploadToReadOnlyDestinationFailed),
    (2005, MoveToReadOnlyDestinationFailed),
    (2006, CopyToReadOnlyDestinationFailed),
    (2007, RenameOnReadOnlyLocationFailed),
    (2008, DeleteOnReadOnlyLocationFailed),
    (2009, CreateFolderOnReadOnlyLocationFailed),
    (2010, FailedToReadFilesystem),
    (2011, FailedToReadFilesystem),
    (2012, FailedToReadFilesystem),
    (2013, FailedToReadFilesystem),
    (2014, NameConflictCreatingFolder),
    (2015, NameConflictOnUpload),
    (2016, NameConflictOnRename),
    (2017, NameConflictOnMove),
    (2018, NameConflictOnCopy),
    (2019, FailedToSaveChanges),
    (2020, FailedToSaveChanges),
    (2021, FailedToSaveChanges),
    (2022, FailedToBroadcastUpdate),
    (2023, FailedToBroadcastUpdate),
    (2024, FailedToSaveChanges),
    (2025, FailedToSaveChanges),
    (2026, CannotDeleteTheInfiniteDrive),
    (2028, FolderMissingToParameter),
    (2033, ExistsParameterInvalid),
    (2034, MissingPathParameter),
    (2036, SpecifiedLocationIsReadOnly),
    (2037, SpecifiedSourceIsReadOnly),
    (2038, SpecifiedDestinationIsReadOnly),
    (2039, FolderPathDoesNotExist),
    (2040, PermissionDenied),
    (2041, RenamePermissionDenied),
    (2042, NameConflictInOperation),
    (2043, InvalidOperation),
    (2044, VersionMissingOrIncorrect),
    (2045, InvalidDepth),
    (2046, VersionDoesNotExist),
    (2047, FolderNameRequired),
    (2048, InvalidName),
    (2049, TreeRequired),
    (2050, InvalidVerbose),
    (2052, DirectoryNotEmpty),
    # Files
    (3001, NotFound),
    (3007, FileInvalidOperation),
    (3008, FileInvalidName),
    (3009, InvalidExists),
    (3010, ExtensionTooLong),
    (3011, InvalidDateCreated),
    (3012, InvalidDateMetaLastModified),
    (3013, InvalidDateContentLastModified),
    (3014, MIMETooLong),
    (3015, SizeMustBePositive),
    (3018, NameRequired),
    (3019, SizeRequired),
    (3020, ToPathRequired),
    (3021, FileVersionMissingOrIncorrect),
    # Endpoint entry
    (10000, InvalidPath),
    (10001, AlreadyExists),
    (10002, NotAllowed),
)


def build_error_code_table(
    declarations: Iterable[tuple[int, type[ServiceError]]],
) -> dict[int, type[ServiceError]]:
    """
    Build the code -> exception table.

    A code declared more than once keeps the last declaration; each
    redeclaration is logged so that the ambiguity stays visible.
    """
    table: dict[int, type[ServiceError]] = {}
    for code, kind in declarations:
        previous = table.get(code)
        if previous is not None and previous is not kind:
            logger.warning(
                "cloudfs.errors duplicate_code code=%d previous=%s replacement=%s",
                code,
                previous.__name__,
                kind.__name__,
            )
        table[code] = kind
    return table


SERVICE_ERROR_CODES: dict[int, type[ServiceError]] = build_error_code_table(
    _ERROR_CODE_DECLARATIONS
)


def _extract_code_and_message(body: Any) -> tuple[Optional[int], Optional[str]]:
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    payload = json.loads(body)
    if not isinstance(payload, dict) or "error" not in payload:
        return None, None

    error = payload["error"]
    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message")
    else:
        message = payload.get("message", error)
        code = payload.get("error_code")

    if isinstance(code, str) and code.isdigit():
        code = int(code)
    if not isinstance(code, int) or isinstance(code, bool):
        code = None
    return code, str(message) if message is not None else None


def map_service_error(error: ServerError) -> ServiceError:
    """
    Map a ServerError to the specific ServiceError named by its service code.

    Policy:
        - body is not JSON, or has no "error" key -> ServiceError
        - code missing or not in SERVICE_ERROR_CODES -> ServiceError
        - otherwise -> SERVICE_ERROR_CODES[code]
    """
    raw_message = str(error)
    context: dict[str, Any] = {
        "status": error.status,
        "request": error.request,
        "response": error.response,
        "cause": error,
    }

    try:
        code, message = _extract_code_and_message(error.response.get("content") or raw_message)
    except ValueError:
        return ServiceError(raw_message, **context)

    message = message or raw_message
    kind = SERVICE_ERROR_CODES.get(code) if code is not None else None
    if kind is None:
        return ServiceError(message, code=code, **context)
    return kind(message, code=code, **context)
