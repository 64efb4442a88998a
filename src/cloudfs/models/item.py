"""Item lifecycle: ACTIVE -> TRASHED -> PURGED, with move/copy/save in between."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from cloudfs.errors import (
    InvalidArgumentError,
    NotAuthenticatedError,
    OperationNotAllowedError,
    ServiceError,
)
from cloudfs.util.paths import (
    ROOT_ADDRESS,
    compute_address,
    normalize_destination,
    resolve_folder_address,
    split_named_path,
)
from cloudfs.util.time import from_timestamp, to_timestamp

from .policies import ExistsPolicy, ItemKind, RestorePolicy, VersionConflictPolicy
from .validators import validate_item_state

if TYPE_CHECKING:
    from cloudfs.controller.rest_adapter import RestAdapter

logger = logging.getLogger(__name__)

# application_data key holding the parent address an item was trashed from.
ORIGINAL_PATH_KEY = "_cloudfs_original_path"
# Wire type of the user's root folder; its address is always "/".
ROOT_TYPE = "root"

Timestamp = Union[datetime, int, float]


class Item:
    """
    Base class of every file and folder handle.

    Notes:
        - `address` is always derived from the parent address and the id.
        - move, save, delete, restore and refresh update this object in
          place; copy returns a new object.
        - Item objects are not safe for concurrent mutation.
    """

    kind: ItemKind

    def __init__(
        self,
        rest_adapter: "RestAdapter",
        properties: Mapping[str, Any],
        *,
        parent: Any = None,
        in_trash: bool = False,
        in_share: bool = False,
        old_version: bool = False,
    ) -> None:
        if rest_adapter is None:
            raise InvalidArgumentError("Invalid rest adapter, must pass RestAdapter")
        self._rest_adapter = rest_adapter
        self._set_properties(
            properties,
            parent=parent,
            in_trash=in_trash,
            in_share=in_share,
            old_version=old_version,
        )

    # ----------------------------
    # State
    # ----------------------------
    @property
    def id(self) -> str:
        return self._id

    @property
    def address(self) -> str:
        if self._is_root:
            return ROOT_ADDRESS
        return compute_address(self._parent_address, self._id)

    @property
    def is_root(self) -> bool:
        return self._is_root

    @property
    def parent_address(self) -> str:
        return self._parent_address

    @property
    def parent_id(self) -> Optional[str]:
        return self._parent_id

    @property
    def version(self) -> Optional[int]:
        return self._version

    @property
    def exists(self) -> bool:
        """False once the item has been permanently deleted."""
        return self._exists

    @property
    def in_trash(self) -> bool:
        return self._in_trash

    @property
    def in_share(self) -> bool:
        return self._in_share

    @property
    def is_old_version(self) -> bool:
        return self._old_version

    @property
    def pending_changes(self) -> dict[str, Any]:
        """Copy of the staged, not yet saved changes."""
        changes = dict(self._pending_changes)
        changes["application_data"] = dict(self._pending_changes["application_data"])
        return changes

    # ----------------------------
    # Editable attributes
    # ----------------------------
    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgumentError("Invalid argument, name must be a non-empty string")
        self._stage("name", value)
        self._name = value

    @property
    def date_created(self) -> Optional[datetime]:
        return from_timestamp(self._date_created)

    @date_created.setter
    def date_created(self, value: Timestamp) -> None:
        self._date_created = self._stage("date_created", _wire_timestamp(value))

    @property
    def date_meta_last_modified(self) -> Optional[datetime]:
        return from_timestamp(self._date_meta_last_modified)

    @date_meta_last_modified.setter
    def date_meta_last_modified(self, value: Timestamp) -> None:
        self._date_meta_last_modified = self._stage("date_meta_last_modified", _wire_timestamp(value))

    @property
    def date_content_last_modified(self) -> Optional[datetime]:
        return from_timestamp(self._date_content_last_modified)

    @date_content_last_modified.setter
    def date_content_last_modified(self, value: Timestamp) -> None:
        self._date_content_last_modified = self._stage(
            "date_content_last_modified", _wire_timestamp(value)
        )

    @property
    def application_data(self) -> dict[str, Any]:
        return dict(self._application_data)

    @application_data.setter
    def application_data(self, value: Mapping[str, Any]) -> None:
        """Merge `value` into the custom data; previously staged keys are kept."""
        if not isinstance(value, Mapping):
            raise InvalidArgumentError("Invalid argument, application_data must be a mapping")
        validate_item_state(self)
        self._application_data.update(value)
        self._pending_changes["application_data"].update(value)

    # ----------------------------
    # Operations
    # ----------------------------
    def move(
        self,
        destination: Any,
        *,
        name: Optional[str] = None,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.RENAME,
    ) -> "Item":
        """
        Move this item under `destination` (Folder or folder address).

        This object is updated in place and returned. Pending changes are
        discarded.
        """
        validate_item_state(self)
        validate_item_state(destination)
        destination_address = _require_destination(destination)
        policy = ExistsPolicy.coerce(exists, allow_reuse=False)

        response = self._rest_move(destination_address, name or self._name, policy)
        self._set_properties(response, parent=destination_address)
        return self

    def copy(
        self,
        destination: Any,
        *,
        name: Optional[str] = None,
        exists: Union[ExistsPolicy, str] = ExistsPolicy.RENAME,
    ) -> "Item":
        """Copy this item under `destination` and return the new item."""
        validate_item_state(self)
        validate_item_state(destination)
        destination_address = _require_destination(destination)
        policy = ExistsPolicy.coerce(exists, allow_reuse=False)

        response = self._rest_copy(destination_address, name or self._name, policy)
        return type(self)(self._rest_adapter, response, parent=destination_address)

    def delete(self, *, force: bool = False, commit: bool = False, raise_exception: bool = False) -> bool:
        """
        Move this item to trash, or purge it with `commit=True`.

        Deleting a trashed item without `commit` is a no-op. `force` is needed
        for non-empty folders. Service and session failures return False
        unless `raise_exception` is set.
        """
        validate_item_state(self, in_trash=False)

        try:
            if self._in_trash:
                if commit:
                    self._rest_adapter.delete_trash_item(path=self.address)
                    self._purge()
                return True

            self._rest_delete(commit=commit, force=force)
            if commit:
                self._purge()
            else:
                self._load_properties(self._properties)
                self._application_data[ORIGINAL_PATH_KEY] = self._parent_address
                self._parent_address = ROOT_ADDRESS
                self._in_trash = True
            self._reset_pending_changes()
            return True
        except (NotAuthenticatedError, ServiceError) as exc:
            if raise_exception:
                raise
            logger.warning("cloudfs.item delete_failed address=%s error=%s", self.address, exc)
            return False

    def restore(
        self,
        destination: Any = None,
        *,
        exists: Union[RestorePolicy, str] = RestorePolicy.FAIL,
        raise_exception: bool = False,
    ) -> bool:
        """
        Restore this item from trash.

        Args:
            destination: RESCUE: folder to place the item into when its
                original parent is gone (root by default). RECREATE: named
                path (e.g. "/a/b") to recreate; required.
            exists: FAIL, RESCUE or RECREATE. RECREATE lists one folder per
                path segment and is expensive.

        Returns:
            True on success; False on a service or session failure unless
            `raise_exception` is set.
        """
        validate_item_state(self, in_trash=False)
        if not self._in_trash:
            raise OperationNotAllowedError(
                "Item needs to be in trash for restore operation",
                details={"address": self.address},
            )
        validate_item_state(destination)
        destination_address = resolve_folder_address(destination)
        policy = RestorePolicy.coerce(exists)
        if policy is RestorePolicy.RECREATE and not destination_address:
            raise InvalidArgumentError("Invalid argument, RECREATE requires a named destination path")

        try:
            self._rest_adapter.recover_trash_item(
                self.address,
                restore=policy,
                destination=destination_address,
            )
            parent, properties = self._locate_restored(destination_address, policy)
            self._set_properties(properties, parent=parent)
            return True
        except (NotAuthenticatedError, ServiceError) as exc:
            if raise_exception:
                raise
            logger.warning("cloudfs.item restore_failed address=%s error=%s", self.address, exc)
            return False

    def save(self, *, version_conflict: Union[VersionConflictPolicy, str] = VersionConflictPolicy.FAIL) -> "Item":
        """Send pending changes with the local version; no request when nothing is staged."""
        validate_item_state(self)
        policy = VersionConflictPolicy.coerce(version_conflict)

        changes = self.pending_changes
        if not changes["application_data"]:
            del changes["application_data"]
        if not changes:
            return self

        response = self._rest_alter_meta(self._version, policy, changes)
        self._set_properties(response, parent=self._parent_address)
        return self

    def refresh(self) -> "Item":
        """Reload server state for the current address, discarding pending changes."""
        validate_item_state(self, in_trash=False, in_share=False)

        if self._in_trash:
            properties = self._rest_adapter.browse_trash(path=self.address)["meta"]
            original_path = self._application_data.get(ORIGINAL_PATH_KEY)
        else:
            properties = self._rest_get_meta(self.address)
            original_path = None

        self._set_properties(
            properties,
            parent=self._parent_address,
            in_trash=self._in_trash,
            in_share=self._in_share,
        )
        if original_path:
            self._application_data[ORIGINAL_PATH_KEY] = original_path
        return self

    # ----------------------------
    # Per-kind REST calls
    # ----------------------------
    def _rest_move(self, destination: str, name: str, exists: ExistsPolicy) -> dict[str, Any]:
        raise NotImplementedError

    def _rest_copy(self, destination: str, name: str, exists: ExistsPolicy) -> dict[str, Any]:
        raise NotImplementedError

    def _rest_delete(self, *, commit: bool, force: bool) -> None:
        raise NotImplementedError

    def _rest_get_meta(self, address: str) -> dict[str, Any]:
        raise NotImplementedError

    def _rest_alter_meta(
        self,
        version: Optional[int],
        version_conflict: VersionConflictPolicy,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        raise NotImplementedError

    # ----------------------------
    # Internals
    # ----------------------------
    def _set_properties(
        self,
        properties: Mapping[str, Any],
        *,
        parent: Any = None,
        in_trash: bool = False,
        in_share: bool = False,
        old_version: bool = False,
    ) -> None:
        item_id = properties.get("id")
        if not properties.get("type"):
            raise InvalidArgumentError("Provide item type", details={"id": item_id})
        is_root = properties["type"] == ROOT_TYPE
        if not item_id and not is_root:
            raise InvalidArgumentError("Provide item id", details={"properties": dict(properties)})

        self._properties = dict(properties)
        self._load_properties(self._properties)

        self._parent_address = resolve_folder_address(parent) or ROOT_ADDRESS
        self._in_trash = in_trash
        self._in_share = in_share
        self._old_version = old_version
        self._exists = True
        self._reset_pending_changes()

    def _load_properties(self, properties: Mapping[str, Any]) -> None:
        """Set local attributes from server metadata, dropping unsaved setter values."""
        self._is_root = properties["type"] == ROOT_TYPE
        self._id = properties.get("id") or ""
        self.kind = ItemKind.from_wire(properties["type"])
        self._name = properties.get("name") or ""
        self._parent_id = properties.get("parent_id")
        self._date_created = properties.get("date_created")
        self._date_meta_last_modified = properties.get("date_meta_last_modified")
        self._date_content_last_modified = properties.get("date_content_last_modified")
        self._version = properties.get("version")
        self._application_data = dict(properties.get("application_data") or {})
        self._load_kind_properties(properties)

    def _load_kind_properties(self, properties: Mapping[str, Any]) -> None:
        """Hook for kind specific fields."""

    def _stage(self, key: str, value: Any) -> Any:
        validate_item_state(self)
        self._pending_changes[key] = value
        return value

    def _reset_pending_changes(self) -> None:
        self._pending_changes: dict[str, Any] = {"application_data": {}}

    def _purge(self) -> None:
        self._exists = False
        self._in_trash = False
        self._in_share = False
        self._old_version = False
        self._reset_pending_changes()

    def _locate_restored(
        self,
        destination: Optional[str],
        policy: RestorePolicy,
    ) -> tuple[str, dict[str, Any]]:
        original = self._application_data.get(ORIGINAL_PATH_KEY) or ROOT_ADDRESS
        try:
            return original, self._rest_get_meta(compute_address(original, self._id))
        except ServiceError:
            if policy is RestorePolicy.FAIL:
                raise

        if policy is RestorePolicy.RESCUE:
            parent = normalize_destination(destination)
        else:
            parent = self._resolve_named_path(destination or ROOT_ADDRESS)
        return parent, self._rest_get_meta(compute_address(parent, self._id))

    def _resolve_named_path(self, named_path: str) -> str:
        """Walk `named_path` one segment at a time, creating missing folders."""
        address = ROOT_ADDRESS
        for segment in split_named_path(named_path):
            matches = self._rest_adapter.list_folder(
                path=address,
                depth=1,
                filter_by=f"name={segment}",
                strict_traverse=True,
            )
            folders = [m for m in matches if m.get("name") == segment]
            if folders:
                meta = folders[0]
            else:
                meta = self._rest_adapter.create_folder(segment, path=address, exists=ExistsPolicy.REUSE)
            address = compute_address(address, meta["id"])
        return address

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._id == other._id  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r}, name={self._name!r})"


def _require_destination(destination: Any) -> str:
    address = resolve_folder_address(destination)
    if not address:
        raise InvalidArgumentError("Invalid argument, must pass destination folder")
    return normalize_destination(address)


def _wire_timestamp(value: Timestamp) -> int:
    if isinstance(value, datetime):
        try:
            return to_timestamp(value)
        except ValueError as exc:
            raise InvalidArgumentError("Invalid argument, timezone-aware datetime required", cause=exc) from exc
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    raise InvalidArgumentError(
        "Invalid argument, expected a datetime or epoch seconds",
        details={"type": type(value).__name__},
    )
