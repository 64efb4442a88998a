"""Application credentials for cloudfs."""

from __future__ import annotations

from dataclasses import dataclass

from cloudfs.errors import InvalidArgumentError

HTTPS_PREFIX = "https://"


@dataclass(slots=True, frozen=True)
class ClientCredentials:
    """
    Application credentials used to sign bootstrap requests.

    Notes:
        - `host` is normalized to carry an https:// scheme.
        - `secret` never appears in repr output.
    """

    client_id: str
    secret: str
    host: str

    def __post_init__(self) -> None:
        for key in ("client_id", "secret", "host"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise InvalidArgumentError(f"ClientCredentials.{key} must be a non-empty string")

        if not self.host.startswith(("https://", "http://")):
            object.__setattr__(self, "host", f"{HTTPS_PREFIX}{self.host}")

    def __repr__(self) -> str:
        return f"ClientCredentials(client_id={self.client_id!r}, host={self.host!r})"
