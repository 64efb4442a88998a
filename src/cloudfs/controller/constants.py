"""Endpoint and parameter definitions for the CloudFS REST API."""

from __future__ import annotations

ENDPOINT_OAUTH: str = "/v2/oauth2/token"
ENDPOINT_PING: str = "/v2/ping"
ENDPOINT_CUSTOMERS: str = "/v2/admin/cloudfs/customers/"
ENDPOINT_USER_PROFILE: str = "/v2/user/profile/"
ENDPOINT_FOLDERS: str = "/v2/folders/"
ENDPOINT_FILES: str = "/v2/files/"
ENDPOINT_HISTORY: str = "/v2/history"
ENDPOINT_TRASH: str = "/v2/trash/"

# Endpoints reachable without a bearer token (signed instead).
UNAUTHENTICATED_ENDPOINTS: frozenset[str] = frozenset({ENDPOINT_OAUTH, ENDPOINT_CUSTOMERS})

QUERY_OPS_CREATE: str = "create"
QUERY_OPS_COPY: str = "copy"
QUERY_OPS_MOVE: str = "move"
QUERY_OPS_PROMOTE: str = "promote"

OPERATION_META: str = "meta"
OPERATION_VERSIONS: str = "versions"

PARAM_GRANT_TYPE: str = "grant_type"
PARAM_USER: str = "username"
PARAM_PASSWORD: str = "password"
PARAM_EMAIL: str = "email"
PARAM_FIRST_NAME: str = "first_name"
PARAM_LAST_NAME: str = "last_name"

CONTENT_TYPE_JSON: str = "application/json"
CONTENT_TYPE_OCTET_STREAM: str = "application/octet-stream"
