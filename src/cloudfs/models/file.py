"""File handles with a sequential read cursor."""

from __future__ import annotations

import os
from typing import Any, Callable, Mapping, Optional

from cloudfs.errors import InvalidArgumentError

from .item import Item
from .policies import ExistsPolicy, ItemKind, VersionConflictPolicy
from .validators import validate_item_state

SEEK_SET = 0
SEEK_CUR = 1
SEEK_END = 2


class File(Item):
    """
    A file in the user's file system.

    Reads start at an internal cursor (see `seek`, `tell`, `rewind`) and
    never go past `size`.

    Example:
        file.seek(4)
        file.read()           # from byte 4 to end of file
        file.rewind()
        file.read(chunk_handler=print)
    """

    def __init__(self, rest_adapter: Any, properties: Mapping[str, Any], **kwargs: Any) -> None:
        if properties.get("type") != ItemKind.FILE.value:
            raise InvalidArgumentError(
                f"Invalid item of type {properties.get('type')}",
                details={"id": properties.get("id")},
            )
        self._offset = 0
        super().__init__(rest_adapter, properties, **kwargs)

    @property
    def size(self) -> int:
        return self._size or 0

    @property
    def is_mirrored(self) -> Optional[bool]:
        return self._is_mirrored

    @property
    def blocklist_key(self) -> Optional[str]:
        return self._blocklist_key

    @property
    def blocklist_id(self) -> Optional[str]:
        return self._blocklist_id

    @property
    def extension(self) -> Optional[str]:
        return self._extension

    @extension.setter
    def extension(self, value: str) -> None:
        self._extension = self._stage("extension", value)

    @property
    def mime(self) -> Optional[str]:
        return self._mime

    @mime.setter
    def mime(self, value: str) -> None:
        self._mime = self._stage("mime", value)

    # ----------------------------
    # Reading
    # ----------------------------
    def read(
        self,
        bytecount: Optional[int] = None,
        *,
        chunk_handler: Optional[Callable[[bytes], None]] = None,
    ) -> bytes:
        """
        Read up to `bytecount` bytes (to end of file by default) from the cursor.

        With `chunk_handler` the content is streamed to it and b"" is returned.
        The cursor advances by the number of bytes received.
        """
        validate_item_state(self)
        if bytecount is not None and bytecount < 0:
            raise InvalidArgumentError(f"Negative length given - {bytecount}")

        if bytecount == 0 or self._offset >= self.size:
            return b""
        if bytecount is None or self._offset + bytecount > self.size:
            bytecount = self.size - self._offset

        if chunk_handler is not None:
            def _advance(chunk: bytes) -> None:
                self._offset += len(chunk)
                chunk_handler(chunk)

            self._rest_adapter.download(
                self.address,
                startbyte=self._offset,
                bytecount=bytecount,
                chunk_handler=_advance,
            )
            return b""

        data = self._rest_adapter.download(self.address, startbyte=self._offset, bytecount=bytecount)
        self._offset += len(data or b"")
        return data or b""

    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        """Move the cursor (0: absolute, 1: relative, 2: from end) and return it."""
        if whence == SEEK_SET:
            position = offset
        elif whence == SEEK_CUR:
            position = self._offset + offset
        elif whence == SEEK_END:
            position = self.size + offset
        else:
            raise InvalidArgumentError(f"Invalid whence value {whence}, expected 0, 1 or 2")

        if position < 0:
            raise InvalidArgumentError(f"Negative seek position {position}")
        self._offset = position
        return self._offset

    def rewind(self) -> int:
        self._offset = 0
        return self._offset

    def tell(self) -> int:
        return self._offset

    def download(self, local_dir: str, *, filename: Optional[str] = None) -> str:
        """
        Stream this file into `local_dir` and return the written path.

        An existing file with the same name is overwritten.
        """
        if not os.path.isdir(local_dir):
            raise InvalidArgumentError("local path is not a valid directory", details={"local_dir": str(local_dir)})
        validate_item_state(self)

        target = os.path.join(local_dir, filename or self.name)
        with open(target, "wb") as fh:
            self._rest_adapter.download(self.address, chunk_handler=fh.write)
        return target

    def versions(
        self,
        *,
        start_version: int = 0,
        stop_version: Optional[int] = None,
        limit: int = 10,
    ) -> list["File"]:
        """List previous versions as read-only File objects."""
        validate_item_state(self, in_trash=False, in_share=False)

        response = self._rest_adapter.list_file_versions(
            self.address,
            start_version=start_version,
            stop_version=stop_version,
            limit=limit,
        )
        return [
            File(
                self._rest_adapter,
                properties,
                parent=self.address,
                in_trash=self.in_trash,
                in_share=self.in_share,
                old_version=True,
            )
            for properties in response
        ]

    # ----------------------------
    # Internals
    # ----------------------------
    def _load_kind_properties(self, properties: Mapping[str, Any]) -> None:
        self._is_mirrored = properties.get("is_mirrored")
        self._mime = properties.get("mime")
        self._blocklist_key = properties.get("blocklist_key")
        self._blocklist_id = properties.get("blocklist_id")
        self._extension = properties.get("extension")
        self._size = properties.get("size")

    def _rest_move(self, destination: str, name: str, exists: ExistsPolicy) -> dict[str, Any]:
        return self._rest_adapter.move_file(self.address, destination, name, exists=exists)

    def _rest_copy(self, destination: str, name: str, exists: ExistsPolicy) -> dict[str, Any]:
        return self._rest_adapter.copy_file(self.address, destination, name, exists=exists)

    def _rest_delete(self, *, commit: bool, force: bool) -> None:
        self._rest_adapter.delete_file(self.address, commit=commit)

    def _rest_get_meta(self, address: str) -> dict[str, Any]:
        return self._rest_adapter.get_file_meta(address)

    def _rest_alter_meta(
        self,
        version: Optional[int],
        version_conflict: VersionConflictPolicy,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        return self._rest_adapter.alter_file_meta(
            self.address, version, version_conflict=version_conflict, **changes
        )
