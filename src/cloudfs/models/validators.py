"""State guards for item operations."""

from __future__ import annotations

from typing import Any

from cloudfs.errors import InvalidItemError, OperationNotAllowedError


def validate_item_state(
    item: Any,
    *,
    in_trash: bool = True,
    in_share: bool = True,
    exists: bool = True,
    old_version: bool = True,
) -> None:
    """
    Reject operations on items that are purged, trashed, shared or old versions.

    Each keyword disables one check when False. Anything that is not an Item
    (addresses, None) passes through unchecked.
    """
    from .item import Item

    if not isinstance(item, Item):
        return

    if exists and not item.exists:
        raise InvalidItemError(
            "Operation not allowed as item does not exist anymore",
            details={"address": item.address},
        )
    if in_trash and item.in_trash:
        raise OperationNotAllowedError(
            "Operation not allowed as item is in trash",
            details={"address": item.address},
        )
    if in_share and item.in_share:
        raise OperationNotAllowedError(
            "Operation not allowed as item is in share",
            details={"address": item.address},
        )
    if old_version and item.is_old_version:
        raise OperationNotAllowedError(
            "Operation not allowed as item is an older version",
            details={"address": item.address},
        )
