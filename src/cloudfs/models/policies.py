"""Closed enumerations for item kinds and conflict policies."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar, Union

from cloudfs.errors import InvalidArgumentError

P = TypeVar("P", bound="_Policy")


class _Policy(str, Enum):
    @classmethod
    def coerce(cls: type[P], value: Union[P, str]) -> P:
        """Accept a member or its name/value in any case; reject anything else."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.lower() == member.value:
                    return member
        allowed = ", ".join(m.name for m in cls)
        raise InvalidArgumentError(
            f"Invalid value for {cls.__name__}: {value!r} (expected one of {allowed})",
            details={"value": value},
        )


class ItemKind(_Policy):
    """Type of item; the service's "root" type is a folder."""

    FILE = "file"
    FOLDER = "folder"

    @classmethod
    def from_wire(cls, value: str) -> "ItemKind":
        if isinstance(value, str) and value.lower() == "root":
            return cls.FOLDER
        return cls.coerce(value)


class ExistsPolicy(_Policy):
    """Action taken when an item with the same name exists at the target."""

    FAIL = "fail"
    OVERWRITE = "overwrite"
    RENAME = "rename"
    REUSE = "reuse"

    @classmethod
    def coerce(cls, value: Union["ExistsPolicy", str], *, allow_reuse: bool = True) -> "ExistsPolicy":
        """Same as the base coerce; REUSE is refused unless `allow_reuse` (folder creation only)."""
        policy = super().coerce(value)
        if policy is cls.REUSE and not allow_reuse:
            raise InvalidArgumentError(
                "Invalid argument, REUSE is only supported when creating folders",
                details={"value": value},
            )
        return policy


class RestorePolicy(_Policy):
    """Action taken when the original parent of a trashed item is gone."""

    FAIL = "fail"
    RESCUE = "rescue"
    RECREATE = "recreate"


class VersionConflictPolicy(_Policy):
    """Action taken when the local version differs from the server's."""

    FAIL = "fail"
    IGNORE = "ignore"
