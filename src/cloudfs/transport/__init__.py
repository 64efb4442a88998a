"""Internal transport exports for cloudfs."""

from __future__ import annotations

from .connection import Connection, ConnectionConfig, HttpResponse

__all__ = ["Connection", "ConnectionConfig", "HttpResponse"]
