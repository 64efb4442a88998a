"""Build File/Folder handles from service metadata."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from cloudfs.errors import InvalidArgumentError

from .container import Folder
from .file import File
from .item import Item
from .policies import ItemKind


def create_item(
    rest_adapter: Any,
    properties: Mapping[str, Any],
    *,
    parent: Any = None,
    in_trash: bool = False,
    in_share: bool = False,
    old_version: bool = False,
) -> Item:
    """Return a Folder for "folder"/"root" metadata and a File for "file"."""
    if not isinstance(properties, Mapping) or "type" not in properties:
        raise InvalidArgumentError("Did not recognize item", details={"properties": properties})

    kind = ItemKind.from_wire(properties["type"])
    if kind is ItemKind.FOLDER:
        return Folder(rest_adapter, properties, parent=parent, in_trash=in_trash, in_share=in_share)
    return File(
        rest_adapter,
        properties,
        parent=parent,
        in_trash=in_trash,
        in_share=in_share,
        old_version=old_version,
    )


def create_items(
    rest_adapter: Any,
    properties_list: Iterable[Mapping[str, Any]],
    *,
    parent: Any = None,
    in_trash: bool = False,
    in_share: bool = False,
    old_version: bool = False,
) -> list[Item]:
    return [
        create_item(
            rest_adapter,
            properties,
            parent=parent,
            in_trash=in_trash,
            in_share=in_share,
            old_version=old_version,
        )
        for properties in properties_list
    ]
