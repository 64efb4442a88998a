"""CloudFS REST API adapter (low level, path addressed)."""

from __future__ import annotations

import io
import json
import logging
import os
from typing import Any, Callable, Mapping, Optional, Union

from cloudfs.auth import ClientCredentials, build_signed_headers
from cloudfs.errors import (
    InvalidArgumentError,
    NotAuthenticatedError,
    ServerError,
    ServiceError,
    map_service_error,
)
from cloudfs.models.policies import ExistsPolicy, RestorePolicy, VersionConflictPolicy
from cloudfs.transport import Connection, ConnectionConfig, HttpResponse
from cloudfs.util.paths import normalize_destination

from . import constants as c

logger = logging.getLogger(__name__)

Payload = Union[dict[str, Any], list[Any], bytes]


class RestAdapter:
    """
    Low level mapping of the CloudFS REST API.

    Notes:
        - All `path`/`destination` arguments are absolute item addresses.
        - The underlying Connection is thread-safe; one adapter per
          authenticated end-user can be shared across threads.
        - Service failures surface as ServiceError subclasses.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        *,
        config: Optional[ConnectionConfig] = None,
        connection: Optional[Connection] = None,
    ) -> None:
        self._credentials = credentials
        self._connection = connection or Connection(config)
        self._access_token: Optional[str] = None

    @classmethod
    def create(
        cls,
        client_id: str,
        secret: str,
        host: str,
        **connection_options: Any,
    ) -> "RestAdapter":
        """Build an adapter from raw credentials and ConnectionConfig options."""
        try:
            config = ConnectionConfig(**connection_options)
        except TypeError as exc:
            raise InvalidArgumentError(
                "Unknown connection option",
                details={"options": sorted(connection_options)},
                cause=exc,
            ) from exc
        return cls(ClientCredentials(client_id, secret, host), config=config)

    @property
    def credentials(self) -> ClientCredentials:
        return self._credentials

    @property
    def is_authenticated(self) -> bool:
        """True while a bearer token is held (no network call)."""
        return bool(self._access_token)

    # ----------------------------
    # Session
    # ----------------------------
    def authenticate(self, username: str, password: str) -> bool:
        """Exchange end-user credentials for a bearer token."""
        _require(username, "username")
        _require(password, "password")

        form = {
            c.PARAM_GRANT_TYPE: c.PARAM_PASSWORD,
            c.PARAM_PASSWORD: password,
            c.PARAM_USER: username,
        }
        headers = build_signed_headers(self._credentials, c.ENDPOINT_OAUTH, form)
        response = self._request("POST", c.ENDPOINT_OAUTH, headers=headers, data=form)

        token = response.get("access_token") if isinstance(response, dict) else None
        if not token:
            raise ServiceError("Token exchange response carried no access_token")
        self._access_token = token
        logger.info("cloudfs.auth authenticated client_id=%s", self._credentials.client_id)
        return True

    def linked(self) -> bool:
        """Return whether authenticated calls currently succeed."""
        try:
            self.ping()
        except NotAuthenticatedError:
            return False
        return True

    def unlink(self) -> bool:
        """Drop the bearer token and close pooled connections."""
        if self._access_token:
            self._access_token = None
            logger.info("cloudfs.auth unlinked client_id=%s", self._credentials.client_id)
        self._connection.unlink()
        return True

    def ping(self) -> bool:
        self._request("GET", c.ENDPOINT_PING)
        return True

    def create_account(
        self,
        username: str,
        password: str,
        *,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Provision a new end-user account (signed with this adapter's credentials)."""
        _require(username, "username")
        _require(password, "password")

        form = {c.PARAM_PASSWORD: password, c.PARAM_USER: username}
        if email:
            form[c.PARAM_EMAIL] = email
        if first_name:
            form[c.PARAM_FIRST_NAME] = first_name
        if last_name:
            form[c.PARAM_LAST_NAME] = last_name

        headers = build_signed_headers(self._credentials, c.ENDPOINT_CUSTOMERS, form)
        return self._request("POST", c.ENDPOINT_CUSTOMERS, headers=headers, data=form)

    def get_profile(self) -> dict[str, Any]:
        return self._request("GET", c.ENDPOINT_USER_PROFILE)

    # ----------------------------
    # Folders and files
    # ----------------------------
    def create_folder(
        self,
        name: str,
        *,
        path: Optional[str] = None,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.FAIL,
    ) -> dict[str, Any]:
        """Create folder `name` under `path` (root by default) and return its metadata."""
        _require(name, "name")
        policy = ExistsPolicy.coerce(exists)

        response = self._request(
            "POST",
            c.ENDPOINT_FOLDERS,
            name=path,
            params={"operation": c.QUERY_OPS_CREATE},
            data={"name": name, "exists": policy.value},
        )
        items = response.get("items") or []
        if not items:
            raise ServiceError("Create folder response carried no items", details={"path": path})
        return items[0]

    def list_folder(
        self,
        *,
        path: Optional[str] = None,
        depth: Optional[int] = None,
        filter_by: Optional[str] = None,
        strict_traverse: bool = False,
    ) -> list[dict[str, Any]]:
        """
        List items under `path` (root by default).

        Args:
            depth: Levels to recurse, 0 means infinite.
            filter_by: Service filter expression, e.g. "name=docs".
            strict_traverse: Traverse based on the success of the filter.
        """
        if not isinstance(strict_traverse, bool):
            raise InvalidArgumentError("strict_traverse must be a boolean")

        params: dict[str, Any] = {}
        if depth is not None:
            params["depth"] = depth
        if filter_by:
            params["filter"] = filter_by
            params["strict-traverse"] = _bool(strict_traverse)

        response = self._request("GET", c.ENDPOINT_FOLDERS, name=path, params=params)
        return response.get("items", [])

    def delete_folder(self, path: str, *, commit: bool = False, force: bool = False) -> dict[str, Any]:
        return self._delete(c.ENDPOINT_FOLDERS, path, commit=commit, force=force)

    def delete_file(self, path: str, *, commit: bool = False) -> dict[str, Any]:
        return self._delete(c.ENDPOINT_FILES, path, commit=commit)

    def copy_folder(
        self,
        path: str,
        destination: str,
        name: str,
        *,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.FAIL,
    ) -> dict[str, Any]:
        return self._copy_or_move(c.ENDPOINT_FOLDERS, c.QUERY_OPS_COPY, path, destination, name, exists)

    def copy_file(
        self,
        path: str,
        destination: str,
        name: str,
        *,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.RENAME,
    ) -> dict[str, Any]:
        return self._copy_or_move(c.ENDPOINT_FILES, c.QUERY_OPS_COPY, path, destination, name, exists)

    def move_folder(
        self,
        path: str,
        destination: str,
        name: str,
        *,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.FAIL,
    ) -> dict[str, Any]:
        return self._copy_or_move(c.ENDPOINT_FOLDERS, c.QUERY_OPS_MOVE, path, destination, name, exists)

    def move_file(
        self,
        path: str,
        destination: str,
        name: str,
        *,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.RENAME,
    ) -> dict[str, Any]:
        return self._copy_or_move(c.ENDPOINT_FILES, c.QUERY_OPS_MOVE, path, destination, name, exists)

    def get_folder_meta(self, path: str) -> dict[str, Any]:
        return self._get_meta(c.ENDPOINT_FOLDERS, path)

    def get_file_meta(self, path: str) -> dict[str, Any]:
        return self._get_meta(c.ENDPOINT_FILES, path)

    def alter_folder_meta(
        self,
        path: str,
        version: Optional[int],
        *,
        version_conflict: Union[VersionConflictPolicy, str] = VersionConflictPolicy.FAIL,
        **properties: Any,
    ) -> dict[str, Any]:
        return self._alter_meta(c.ENDPOINT_FOLDERS, path, version, version_conflict, properties)

    def alter_file_meta(
        self,
        path: str,
        version: Optional[int],
        *,
        version_conflict: Union[VersionConflictPolicy, str] = VersionConflictPolicy.FAIL,
        **properties: Any,
    ) -> dict[str, Any]:
        return self._alter_meta(c.ENDPOINT_FILES, path, version, version_conflict, properties)

    def upload(
        self,
        path: str,
        source: Any,
        *,
        name: Optional[str] = None,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.FAIL,
    ) -> dict[str, Any]:
        """
        Upload `source` into folder `path`.

        `source` is a binary file object or in-memory bytes/str. The file name
        defaults to the basename of `source.name`; sources without one need
        an explicit `name`. The source position is restored afterwards.
        """
        policy = ExistsPolicy.coerce(exists, allow_reuse=False)

        if isinstance(source, str):
            source = source.encode("utf-8")
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))

        if not name:
            source_name = getattr(source, "name", None)
            name = os.path.basename(source_name) if isinstance(source_name, str) else None
        if not name:
            raise InvalidArgumentError(
                "Invalid argument, custom name is required if source has no file name"
            )

        original_pos = source.tell() if hasattr(source, "tell") else None
        if original_pos is not None:
            source.seek(0)
        try:
            return self._request(
                "POST",
                c.ENDPOINT_FILES,
                name=path,
                data={"exists": policy.value},
                files={"file": (name, source, c.CONTENT_TYPE_OCTET_STREAM)},
            )
        finally:
            if original_pos is not None:
                source.seek(original_pos)

    def download(
        self,
        path: str,
        *,
        startbyte: int = 0,
        bytecount: int = 0,
        chunk_handler: Optional[Callable[[bytes], None]] = None,
    ) -> bytes:
        """
        Download file content.

        Args:
            startbyte: Offset to start reading from.
            bytecount: Number of bytes to read, 0 means up to end of file.
            chunk_handler: Receives chunks as soon as they arrive; the return
                value is then empty.
        """
        _require(path, "path")
        if startbyte < 0 or bytecount < 0:
            raise InvalidArgumentError("Size must be positive", details={"startbyte": startbyte, "bytecount": bytecount})

        headers: dict[str, str] = {}
        if startbyte or bytecount:
            if bytecount == 0:
                headers["Range"] = f"bytes={startbyte}-"
            else:
                headers["Range"] = f"bytes={startbyte}-{startbyte + bytecount - 1}"

        response = self._request(
            "GET",
            c.ENDPOINT_FILES,
            name=path,
            headers=headers,
            chunk_handler=chunk_handler,
            raw=True,
        )
        return response

    # ----------------------------
    # Versions and history
    # ----------------------------
    def list_single_file_version(self, path: str, version: int) -> dict[str, Any]:
        _require(path, "path")
        _require_int(version, "version")
        return self._request("GET", c.ENDPOINT_FILES, name=path, operation=f"{c.OPERATION_VERSIONS}/{version}")

    def promote_file_version(self, path: str, version: int) -> dict[str, Any]:
        """Make `version` the current metadata of the file (creates a new version)."""
        _require(path, "path")
        _require_int(version, "version")
        return self._request(
            "POST",
            c.ENDPOINT_FILES,
            name=path,
            operation=f"{c.OPERATION_VERSIONS}/{version}",
            params={"operation": c.QUERY_OPS_PROMOTE},
        )

    def list_file_versions(
        self,
        path: str,
        *,
        start_version: int = 0,
        stop_version: Optional[int] = None,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        _require(path, "path")
        params: dict[str, Any] = {"start-version": start_version, "limit": limit}
        if stop_version is not None:
            params["stop-version"] = stop_version

        response = self._request(
            "GET",
            c.ENDPOINT_FILES,
            name=path,
            operation=c.OPERATION_VERSIONS,
            params=params,
        )
        if isinstance(response, dict):
            return response.get("items", [])
        return response

    def list_history(self, *, start: int = -10, stop: Optional[int] = None) -> Any:
        params: dict[str, Any] = {"start": start}
        if stop is not None:
            params["stop"] = stop
        return self._request("GET", c.ENDPOINT_HISTORY, params=params)

    # ----------------------------
    # Trash
    # ----------------------------
    def browse_trash(self, *, path: Optional[str] = None) -> dict[str, Any]:
        """Return {"meta": ..., "items": [...]} for `path` in trash (trash root by default)."""
        return self._request("GET", c.ENDPOINT_TRASH, name=path)

    def delete_trash_item(self, *, path: Optional[str] = None) -> dict[str, Any]:
        return self._request("DELETE", c.ENDPOINT_TRASH, name=path)

    def recover_trash_item(
        self,
        path: str,
        *,
        restore: Union[RestorePolicy, str] = RestorePolicy.FAIL,
        destination: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Restore a trashed item.

        `destination` is the rescue folder (RESCUE) or the named path to
        recreate (RECREATE); ignored with FAIL.
        """
        _require(path, "path")
        policy = RestorePolicy.coerce(restore)

        form = {"restore": policy.value}
        if destination:
            if policy is RestorePolicy.RESCUE:
                form["rescue-path"] = normalize_destination(destination)
            elif policy is RestorePolicy.RECREATE:
                form["recreate-path"] = normalize_destination(destination)

        return self._request("POST", c.ENDPOINT_TRASH, name=path, data=form)

    # ----------------------------
    # Internals
    # ----------------------------
    def _delete(self, endpoint: str, path: str, *, commit: bool, force: bool = False) -> dict[str, Any]:
        _require(path, "path")
        if not isinstance(commit, bool):
            raise InvalidArgumentError("commit must be a boolean")
        if not isinstance(force, bool):
            raise InvalidArgumentError("force must be a boolean")

        params = {"commit": _bool(commit)}
        if force:
            params["force"] = _bool(force)
        return self._request("DELETE", endpoint, name=path, params=params)

    def _copy_or_move(
        self,
        endpoint: str,
        operation: str,
        path: str,
        destination: str,
        name: str,
        exists: Union[ExistsPolicy, str],
    ) -> dict[str, Any]:
        _require(path, "path")
        _require(name, "name")
        _require(destination, "destination")
        policy = ExistsPolicy.coerce(exists, allow_reuse=False)

        response = self._request(
            "POST",
            endpoint,
            name=path,
            params={"operation": operation},
            data={"to": normalize_destination(destination), "name": name, "exists": policy.value},
        )
        return response.get("meta", response)

    def _get_meta(self, endpoint: str, path: str) -> dict[str, Any]:
        _require(path, "path")
        response = self._request("GET", endpoint, name=path, operation=c.OPERATION_META)
        return response.get("meta", response)

    def _alter_meta(
        self,
        endpoint: str,
        path: str,
        version: Optional[int],
        version_conflict: Union[VersionConflictPolicy, str],
        properties: Mapping[str, Any],
    ) -> dict[str, Any]:
        _require(path, "path")
        policy = VersionConflictPolicy.coerce(version_conflict)

        form = {k: v for k, v in properties.items() if v is not None}
        application_data = form.pop("application_data", None)
        if application_data:
            form["application_data"] = json.dumps(application_data)
        form["version"] = str(version)
        form["version-conflict"] = policy.value

        response = self._request("POST", endpoint, name=path, operation=c.OPERATION_META, data=form)
        return response.get("meta", response)

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        name: Optional[str] = None,
        operation: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, Any]] = None,
        data: Any = None,
        files: Any = None,
        chunk_handler: Optional[Callable[[bytes], None]] = None,
        raw: bool = False,
    ) -> Any:
        if endpoint not in c.UNAUTHENTICATED_ENDPOINTS and not self._access_token:
            raise NotAuthenticatedError()

        request_headers: dict[str, str] = {}
        if self._access_token:
            request_headers["Authorization"] = f"Bearer {self._access_token}"
        request_headers.update(headers or {})

        url = f"{self._credentials.host}{_uri_path(endpoint, name, operation)}"
        try:
            response = self._connection.request(
                method,
                url,
                headers=request_headers,
                params=params,
                data=data,
                files=files,
                chunk_handler=chunk_handler,
            )
        except ServerError as exc:
            raise map_service_error(exc) from exc

        if raw:
            return response.content
        return _parse_response(response)


def _parse_response(response: HttpResponse) -> Payload:
    content_type = response.content_type or ""
    if c.CONTENT_TYPE_JSON not in content_type:
        return response.content

    try:
        payload = json.loads(response.content.decode("utf-8"))
    except ValueError as exc:
        raise ServiceError(
            "Malformed JSON in service response",
            status=response.status,
            response={"status": response.status, "content_type": content_type, "content": response.content},
            cause=exc,
        ) from exc
    if isinstance(payload, dict):
        return payload.get("result", payload)
    return payload


def _uri_path(endpoint: str, name: Optional[str] = None, operation: Optional[str] = None) -> str:
    """
    Join endpoint, item address and an operation suffix.

    _uri_path("/v2/folders/", "/a/b", "meta") -> "/v2/folders/a/b/meta"
    """
    delim = ""
    if name:
        name = name.strip()
        delim = "" if name.endswith("/") else "/"
    if operation:
        name = f"{name or ''}{delim}{operation}"
    if not name:
        return endpoint

    if endpoint.endswith("/") and name.startswith("/"):
        name = name[1:]
    elif not endpoint.endswith("/") and not name.startswith("/"):
        name = f"/{name}"
    return f"{endpoint}{name}"


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _require(value: Any, what: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentError(f"Invalid argument, must pass {what}")


def _require_int(value: Any, what: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid argument, {what} must be an integer")
