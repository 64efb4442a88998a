"""Pooled HTTP connection with retry on server failures (internal use only)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import requests
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import RequestException, Timeout

from cloudfs.errors import (
    ConnectionFailedError,
    InvalidArgumentError,
    ProtocolError,
    RequestTimeoutError,
    ServerError,
)
from cloudfs.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"CloudFSClient ({__version__})"
CHUNK_SIZE = 16 * 1024
BACKOFF_FACTOR = 0.3


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Connection settings.

    A timeout of 0 disables it. `send_timeout` defaults to 0 so that large
    uploads are never cut off.
    """

    connect_timeout: float = 60
    send_timeout: float = 0
    receive_timeout: float = 120
    max_retries: int = 3
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        for key in ("connect_timeout", "send_timeout", "receive_timeout"):
            value = getattr(self, key)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                raise InvalidArgumentError(f"ConnectionConfig.{key} must be a non-negative number")
        if not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise InvalidArgumentError("ConnectionConfig.max_retries must be a non-negative integer")

    @property
    def timeout(self) -> tuple[Optional[float], Optional[float]]:
        """(connect, read) tuple for requests; once connected requests uses one socket timeout."""
        connect = self.connect_timeout or None
        read = max(self.send_timeout, self.receive_timeout) or None
        return connect, read


@dataclass(frozen=True)
class HttpResponse:
    """Successful response as seen by the REST layer."""

    status: int
    content_type: Optional[str]
    content: bytes


class Connection:
    """
    Thin wrapper over a pooled requests.Session.

    Notes:
        - The session is safe to share between threads.
        - HTTP 5xx responses are retried up to `max_retries` times with
          exponential delay (2 ** attempt * 0.3 seconds).
        - GET follows redirects; any other verb treats a redirect as an error.
    """

    def __init__(
        self,
        config: Optional[ConnectionConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config or ConnectionConfig()
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = self._config.user_agent

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def unlink(self) -> None:
        """Close all pooled keep-alive connections. Safe to call repeatedly."""
        self._session.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, Any]] = None,
        data: Any = None,
        files: Any = None,
        chunk_handler: Optional[Callable[[bytes], None]] = None,
    ) -> HttpResponse:
        """
        Send a request and return the successful response.

        Args:
            chunk_handler: If given, the successful body is streamed to it in
                chunks and the returned content is empty.

        Raises:
            ConnectionFailedError, RequestTimeoutError, ProtocolError: no
                usable response.
            ServerError: status outside [200, 400) or an unrequested redirect.
        """
        method = method.upper()
        context = _request_context(method, url, params)
        stream = chunk_handler is not None

        try:
            response = self._request_with_retry(
                method,
                url,
                headers=dict(headers or {}),
                params=dict(params or {}),
                data=data,
                files=files,
                stream=stream,
            )
            status = response.status_code
            content_type = response.headers.get("Content-Type")

            if status < 200 or status >= 400 or response.is_redirect:
                content = response.content
                message = content.decode("utf-8", errors="replace") if content else (response.reason or "")
                raise ServerError(
                    message,
                    status,
                    response={"status": status, "content_type": content_type, "content": content},
                    request=context,
                )

            if stream:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        chunk_handler(chunk)  # type: ignore[misc]
                response.close()
                return HttpResponse(status=status, content_type=content_type, content=b"")

            return HttpResponse(status=status, content_type=content_type, content=response.content)
        except Timeout as exc:
            raise RequestTimeoutError("Request timed out", request=context, cause=exc) from exc
        except RequestsConnectionError as exc:
            raise ConnectionFailedError("Connection failed", request=context, cause=exc) from exc
        except RequestException as exc:
            raise ProtocolError(f"HTTP transport error: {exc}", request=context, cause=exc) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _request_with_retry(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        attempt = 0
        while True:
            logger.debug("cloudfs.http request method=%s url=%s attempt=%d", method, url, attempt + 1)
            response = self._session.request(
                method,
                url,
                timeout=self._config.timeout,
                allow_redirects=(method == "GET"),
                **kwargs,
            )
            attempt += 1
            if response.status_code < 500 or attempt > self._config.max_retries:
                return response

            delay = (2 ** attempt) * BACKOFF_FACTOR
            logger.warning(
                "cloudfs.http retry method=%s url=%s status=%d attempt=%d delay=%.2f",
                method,
                url,
                response.status_code,
                attempt,
                delay,
            )
            response.close()
            _rewind_files(kwargs.get("files"))
            time.sleep(delay)


def _rewind_files(files: Any) -> None:
    if not isinstance(files, Mapping):
        return
    for value in files.values():
        fileobj = value[1] if isinstance(value, tuple) and len(value) > 1 else value
        if hasattr(fileobj, "seek"):
            fileobj.seek(0)


def _request_context(method: str, url: str, params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    return {
        "url": url.split("?")[0],
        "method": method,
        "params": str(dict(params or {})),
    }
