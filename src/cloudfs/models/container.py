"""Folder handles."""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional, Union

from cloudfs.errors import InvalidArgumentError, InvalidItemError

from .item import Item
from .policies import ExistsPolicy, ItemKind, VersionConflictPolicy
from .validators import validate_item_state


class Container(Item):
    """An item that holds other items."""

    def __init__(self, rest_adapter: Any, properties: Mapping[str, Any], **kwargs: Any) -> None:
        if ItemKind.from_wire(properties.get("type", "")) is not ItemKind.FOLDER:
            raise InvalidArgumentError(
                f"Invalid item of type {properties.get('type')}",
                details={"id": properties.get("id")},
            )
        super().__init__(rest_adapter, properties, **kwargs)

    def list(self) -> list[Item]:
        """List direct children (the trash listing when this folder is in trash)."""
        from .factory import create_items

        if not self.exists:
            raise InvalidItemError(
                "Operation not allowed as item does not exist anymore",
                details={"address": self.address},
            )

        if self.in_trash:
            response = self._rest_adapter.browse_trash(path=self.address).get("items", [])
        else:
            response = self._rest_adapter.list_folder(path=self.address, depth=1)
        return create_items(
            self._rest_adapter,
            response,
            parent=self.address,
            in_trash=self.in_trash,
        )

    def create_folder(self, name: str, *, exists: Union[ExistsPolicy, str] = ExistsPolicy.FAIL) -> "Folder":
        """Create a sub folder; REUSE returns the existing folder of that name."""
        validate_item_state(self)
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("Invalid argument, must pass name")

        properties = self._rest_adapter.create_folder(name, path=self.address, exists=exists)
        return Folder(self._rest_adapter, properties, parent=self.address)

    def _rest_move(self, destination: str, name: str, exists: ExistsPolicy) -> dict[str, Any]:
        return self._rest_adapter.move_folder(self.address, destination, name, exists=exists)

    def _rest_copy(self, destination: str, name: str, exists: ExistsPolicy) -> dict[str, Any]:
        return self._rest_adapter.copy_folder(self.address, destination, name, exists=exists)

    def _rest_delete(self, *, commit: bool, force: bool) -> None:
        self._rest_adapter.delete_folder(self.address, commit=commit, force=force)

    def _rest_get_meta(self, address: str) -> dict[str, Any]:
        return self._rest_adapter.get_folder_meta(address)

    def _rest_alter_meta(
        self,
        version: Optional[int],
        version_conflict: VersionConflictPolicy,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        return self._rest_adapter.alter_folder_meta(
            self.address, version, version_conflict=version_conflict, **changes
        )


class Folder(Container):
    """A folder in the user's file system."""

    def upload(
        self,
        source: Any,
        *,
        name: Optional[str] = None,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.FAIL,
    ) -> Item:
        """
        Upload a local file into this folder.

        Args:
            source: Local path (str or os.PathLike) or a binary file object.
            name: Remote file name; defaults to the source's basename.
            exists: FAIL, OVERWRITE or RENAME.
        """
        from .factory import create_item

        validate_item_state(self)
        if source is None or source == "":
            raise InvalidArgumentError("Invalid input, expected file system path or file object")

        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as fh:
                response = self._rest_adapter.upload(self.address, fh, name=name, exists=exists)
        else:
            response = self._rest_adapter.upload(self.address, source, name=name, exists=exists)
        return create_item(self._rest_adapter, response, parent=self.address)
