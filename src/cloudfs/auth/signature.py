"""Request signing for the token exchange and account provisioning endpoints."""

from __future__ import annotations

import base64
import hashlib
import hmac
from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

from cloudfs.util.time import now_utc, to_signature_date

from .credentials import ClientCredentials

AUTH_SCHEME = "BCS"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_DATE = "Date"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded;charset=utf-8"


def sort_case_insensitive(values: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of `values` ordered by lower-cased key."""
    return {str(k): values[k] for k in sorted(values, key=lambda k: str(k).lower())}


def urlencode_pairs(values: Mapping[str, Any], delim: str, join_with: str) -> str:
    """Encode pairs as key<delim>value joined by join_with (form style escaping)."""
    return join_with.join(
        f"{quote_plus(str(k))}{delim}{quote_plus(str(v))}" for k, v in values.items()
    )


def generate_auth_signature(
    endpoint: str,
    params: Mapping[str, Any],
    headers: Mapping[str, Any],
    secret: str,
) -> str:
    """
    Compute the bootstrap signature.

    String to sign:
        POST&<endpoint>&<sorted, encoded params>&<sorted, encoded headers>
    signed with HMAC-SHA1 keyed by `secret` and base64 encoded.
    """
    params_encoded = urlencode_pairs(sort_case_insensitive(params), "=", "&")
    headers_encoded = urlencode_pairs(sort_case_insensitive(headers), ":", "&")
    string_to_sign = f"POST&{endpoint}&{params_encoded}&{headers_encoded}"
    digest = hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_signed_headers(
    credentials: ClientCredentials,
    endpoint: str,
    form: Mapping[str, Any],
    *,
    date: Optional[datetime] = None,
) -> dict[str, str]:
    """Return the Content-Type, Date and Authorization headers for a signed POST."""
    headers = {
        HEADER_CONTENT_TYPE: CONTENT_TYPE_FORM,
        HEADER_DATE: to_signature_date(date or now_utc()),
    }
    signature = generate_auth_signature(endpoint, form, headers, credentials.secret)
    headers[HEADER_AUTHORIZATION] = f"{AUTH_SCHEME} {credentials.client_id}:{signature}"
    return headers
