"""Internal controller exports for cloudfs."""

from __future__ import annotations

from .rest_adapter import RestAdapter

__all__ = ["RestAdapter"]
