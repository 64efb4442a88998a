"""Public model exports for cloudfs."""

from __future__ import annotations

from .container import Container, Folder
from .factory import create_item, create_items
from .file import File
from .item import ORIGINAL_PATH_KEY, Item
from .policies import ExistsPolicy, ItemKind, RestorePolicy, VersionConflictPolicy
from .validators import validate_item_state

__all__ = [
    "Item",
    "Container",
    "Folder",
    "File",
    "ItemKind",
    "ExistsPolicy",
    "RestorePolicy",
    "VersionConflictPolicy",
    "ORIGINAL_PATH_KEY",
    "create_item",
    "create_items",
    "validate_item_state",
]
