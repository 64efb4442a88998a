"""Address resolution helpers.

An address is the absolute, slash-delimited chain of item ids locating an
item (e.g. ``/FOPqySw3ToK/x9TbQ``). ``compute_address`` is the only place that
builds one.
"""

from __future__ import annotations

import posixpath
from typing import Any, Optional

from cloudfs.errors import InvalidArgumentError

ROOT_ADDRESS = "/"
FOLDER_KIND = "folder"


def compute_address(parent_address: Optional[str], item_id: str) -> str:
    """Return the address of `item_id` under `parent_address` (root when blank)."""
    if not parent_address or parent_address == ROOT_ADDRESS:
        return f"/{item_id}"
    return f"{parent_address}/{item_id}"


def parent_address(address: str) -> str:
    """Return the address of the parent of `address` ("/" for top-level items)."""
    parent = posixpath.dirname(address.rstrip("/") or ROOT_ADDRESS)
    return parent or ROOT_ADDRESS


def resolve_folder_address(value: Any) -> Optional[str]:
    """
    Normalize a destination folder argument to an address.

    Accepts None (no destination), a string (returned as-is) or an object
    exposing `address` and a folder `kind`.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    # ItemKind is a str enum, so this also matches ItemKind.FOLDER.
    if hasattr(value, "address") and getattr(value, "kind", None) == FOLDER_KIND:
        return value.address
    raise InvalidArgumentError(
        f"Invalid input of type {type(value).__name__}, expected a folder or an address string",
        details={"type": type(value).__name__},
    )


def resolve_item_address(value: Any) -> Optional[str]:
    """Same as resolve_folder_address but accepts any addressable item."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    if hasattr(value, "address"):
        return value.address
    raise InvalidArgumentError(
        f"Invalid input of type {type(value).__name__}, expected an item or an address string",
        details={"type": type(value).__name__},
    )


def normalize_destination(path: Optional[str]) -> str:
    """Return "/" for a blank path and prefix a missing leading slash."""
    if not path:
        return ROOT_ADDRESS
    if not path.startswith("/"):
        return f"/{path}"
    return path


def split_named_path(path: str) -> list[str]:
    """Split a named path (e.g. "/a/b") into its non-empty segments."""
    return [segment for segment in path.split("/") if segment]
