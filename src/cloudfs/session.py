"""Session: one authenticated end-user of a CloudFS account."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from cloudfs.auth import ClientCredentials
from cloudfs.controller import RestAdapter
from cloudfs.errors import OperationNotAllowedError
from cloudfs.models import Folder, Item, ItemKind, create_item
from cloudfs.util.paths import ROOT_ADDRESS, parent_address, resolve_item_address

logger = logging.getLogger(__name__)


class Session:
    """
    Entry point of the client.

    Example:
        session = Session(client_id, secret, host)
        session.authenticate(username, password)
        folder = session.root.create_folder("docs")
        folder.upload("/tmp/report.pdf")
        session.unlink()

    Notes:
        - A session authenticates once; after `unlink` it cannot be reused.
        - Connection options are forwarded to ConnectionConfig
          (connect_timeout, send_timeout, receive_timeout, max_retries,
          user_agent).
    """

    def __init__(self, client_id: str, secret: str, host: str, **connection_options: Any) -> None:
        self._rest_adapter = RestAdapter.create(client_id, secret, host, **connection_options)
        self._connection_options = dict(connection_options)
        self._host = host
        self._admin_credentials: Optional[ClientCredentials] = None
        self._root: Optional[Folder] = None
        self._unlinked = False

    @classmethod
    def from_rest_adapter(cls, rest_adapter: RestAdapter) -> "Session":
        """Create a session around an injected adapter (useful for tests)."""
        obj = cls.__new__(cls)
        obj._rest_adapter = rest_adapter
        obj._connection_options = {}
        obj._host = rest_adapter.credentials.host
        obj._admin_credentials = None
        obj._root = None
        obj._unlinked = False
        return obj

    @property
    def rest_adapter(self) -> RestAdapter:
        return self._rest_adapter

    def authenticate(self, username: str, password: str) -> bool:
        """
        Link this session to an end-user.

        Raises:
            OperationNotAllowedError: session already linked or unlinked.
        """
        self._validate_session()
        if self._rest_adapter.is_authenticated:
            raise OperationNotAllowedError("Cannot re-authenticate, create a new session")
        return self._rest_adapter.authenticate(username, password)

    def is_linked(self) -> bool:
        return self._rest_adapter.linked()

    def unlink(self) -> bool:
        """Discard credentials and pooled connections; the session is unusable afterwards."""
        self._rest_adapter.unlink()
        self._root = None
        self._unlinked = True
        return True

    @property
    def root(self) -> Folder:
        """Root folder of the end-user's file system (fetched once)."""
        self._validate_session()
        if self._root is None:
            properties = self._rest_adapter.get_folder_meta("/")
            self._root = create_item(self._rest_adapter, properties)  # type: ignore[assignment]
        return self._root  # type: ignore[return-value]

    def get_item(self, address: Any, *, kind: Union[ItemKind, str] = ItemKind.FILE) -> Item:
        """
        Fetch the item at `address` (an address string, or an Item to reload by address).

        `kind` selects the metadata endpoint; "/" always returns the root folder.
        """
        self._validate_session()
        target = (resolve_item_address(address) or ROOT_ADDRESS).rstrip("/")
        if not target:
            return self.root

        if ItemKind.coerce(kind) is ItemKind.FOLDER:
            properties = self._rest_adapter.get_folder_meta(target)
        else:
            properties = self._rest_adapter.get_file_meta(target)
        return create_item(self._rest_adapter, properties, parent=parent_address(target))

    def get_profile(self) -> dict[str, Any]:
        self._validate_session()
        return self._rest_adapter.get_profile()

    def action_history(self, *, start: int = -10, stop: Optional[int] = None) -> Any:
        """Return the recent actions performed on the account."""
        self._validate_session()
        return self._rest_adapter.list_history(start=start, stop=stop)

    def set_admin_credentials(self, client_id: str, secret: str) -> None:
        """Credentials used by `create_account` (same host as this session)."""
        self._admin_credentials = ClientCredentials(client_id, secret, self._host)

    def create_account(
        self,
        username: str,
        password: str,
        *,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Provision a new end-user with the admin credentials.

        Raises:
            OperationNotAllowedError: session linked or unlinked, or no admin
                credentials set.
        """
        self._validate_session()
        if self._rest_adapter.is_authenticated:
            raise OperationNotAllowedError(
                "New account creation with an already linked session is not possible, create a new session"
            )
        if self._admin_credentials is None:
            raise OperationNotAllowedError("Admin credentials are not set, call set_admin_credentials first")

        admin = self._admin_adapter(self._admin_credentials)
        try:
            response = admin.create_account(
                username,
                password,
                email=email,
                first_name=first_name,
                last_name=last_name,
            )
        finally:
            admin.unlink()
        logger.info("cloudfs.session account_created username=%s", username)
        return response

    def _admin_adapter(self, creds: ClientCredentials) -> RestAdapter:
        return RestAdapter.create(creds.client_id, creds.secret, creds.host, **self._connection_options)

    def _validate_session(self) -> None:
        if self._unlinked:
            raise OperationNotAllowedError("This session has been unlinked, create a new session")
