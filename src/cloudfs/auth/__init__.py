"""Public auth exports for cloudfs."""

from __future__ import annotations

from .credentials import ClientCredentials
from .signature import build_signed_headers, generate_auth_signature

__all__ = ["ClientCredentials", "build_signed_headers", "generate_auth_signature"]
