import io
import unittest
from unittest.mock import Mock, patch

import requests

from cloudfs.errors import (
    ConnectionFailedError,
    InvalidArgumentError,
    ProtocolError,
    RequestTimeoutError,
    ServerError,
)
from cloudfs.transport.connection import (
    DEFAULT_USER_AGENT,
    Connection,
    ConnectionConfig,
)

URL = "https://example.cloudfs.io/v2/folders/"


def _response(status: int, content: bytes = b"", content_type: str = "application/json", *, redirect: bool = False):
    resp = Mock()
    resp.status_code = status
    resp.headers = {"Content-Type": content_type}
    resp.content = content
    resp.reason = "Reason"
    resp.is_redirect = redirect
    resp.iter_content.return_value = iter([content[:2], b"", content[2:]])
    return resp


def _connection(*responses, max_retries: int = 3):
    session = Mock()
    session.headers = {}
    session.request.side_effect = list(responses)
    conn = Connection(ConnectionConfig(max_retries=max_retries), session=session)
    return conn, session


class TestConnectionConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = ConnectionConfig()
        self.assertEqual(config.max_retries, 3)
        self.assertEqual(config.user_agent, DEFAULT_USER_AGENT)
        self.assertEqual(config.timeout, (60, 120))

    def test_zero_means_no_timeout(self) -> None:
        config = ConnectionConfig(connect_timeout=0, send_timeout=0, receive_timeout=0)
        self.assertEqual(config.timeout, (None, None))

    def test_send_timeout_extends_read_timeout(self) -> None:
        config = ConnectionConfig(send_timeout=300, receive_timeout=120)
        self.assertEqual(config.timeout, (60, 300))

    def test_invalid_values(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            ConnectionConfig(connect_timeout=-1)
        with self.assertRaises(InvalidArgumentError):
            ConnectionConfig(max_retries=-1)


class TestConnection(unittest.TestCase):
    def test_sets_user_agent(self) -> None:
        _, session = _connection()
        self.assertEqual(session.headers["User-Agent"], DEFAULT_USER_AGENT)

    def test_success_returns_response(self) -> None:
        conn, session = _connection(_response(200, b'{"result": {}}'))
        resp = conn.request("get", URL, params={"depth": 1})

        self.assertEqual(resp.status, 200)
        self.assertEqual(resp.content, b'{"result": {}}')
        self.assertEqual(resp.content_type, "application/json")
        _, kwargs = session.request.call_args
        self.assertEqual(session.request.call_args[0], ("GET", URL))
        self.assertTrue(kwargs["allow_redirects"])
        self.assertEqual(kwargs["timeout"], (60, 120))
        self.assertEqual(kwargs["params"], {"depth": 1})

    def test_redirects_only_followed_for_get(self) -> None:
        conn, session = _connection(_response(200))
        conn.request("POST", URL, data={"a": "b"})
        self.assertFalse(session.request.call_args[1]["allow_redirects"])

    def test_unrequested_redirect_is_server_error(self) -> None:
        conn, _ = _connection(_response(302, b"", "text/html", redirect=True))
        with self.assertRaises(ServerError) as ctx:
            conn.request("POST", URL)
        self.assertEqual(ctx.exception.status, 302)
        self.assertEqual(str(ctx.exception), "Reason")

    def test_client_error_status_is_server_error_with_context(self) -> None:
        conn, session = _connection(_response(404, b'{"error": {"code": 2003}}'))
        with self.assertRaises(ServerError) as ctx:
            conn.request("GET", URL + "?x=1", params={"depth": 1})

        err = ctx.exception
        self.assertEqual(err.status, 404)
        self.assertEqual(err.response["content"], b'{"error": {"code": 2003}}')
        self.assertEqual(err.request["url"], URL)
        self.assertEqual(err.request["method"], "GET")
        self.assertIn("depth", err.request["params"])
        # 4xx is not retried
        self.assertEqual(session.request.call_count, 1)

    @patch("cloudfs.transport.connection.time.sleep")
    def test_retries_server_failures_with_backoff(self, sleep: Mock) -> None:
        conn, session = _connection(
            _response(503),
            _response(503),
            _response(503),
            _response(200, b"ok", "text/plain"),
        )
        resp = conn.request("GET", URL)

        self.assertEqual(resp.content, b"ok")
        self.assertEqual(session.request.call_count, 4)
        delays = [c.args[0] for c in sleep.call_args_list]
        self.assertEqual(delays, [0.6, 1.2, 2.4])

    @patch("cloudfs.transport.connection.time.sleep")
    def test_gives_up_after_max_retries(self, sleep: Mock) -> None:
        conn, session = _connection(*[_response(503, b"unavailable", "text/plain") for _ in range(4)])
        with self.assertRaises(ServerError) as ctx:
            conn.request("GET", URL)

        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(session.request.call_count, 4)
        self.assertEqual(sleep.call_count, 3)

    @patch("cloudfs.transport.connection.time.sleep")
    def test_no_retry_when_disabled(self, sleep: Mock) -> None:
        conn, session = _connection(_response(500), max_retries=0)
        with self.assertRaises(ServerError):
            conn.request("GET", URL)
        self.assertEqual(session.request.call_count, 1)
        sleep.assert_not_called()

    @patch("cloudfs.transport.connection.time.sleep")
    def test_retry_rewinds_upload_stream(self, sleep: Mock) -> None:
        stream = io.BytesIO(b"payload")
        conn, _ = _connection(_response(500), _response(200))

        stream.read()
        conn.request("POST", URL, files={"file": ("a.txt", stream, "application/octet-stream")})
        self.assertEqual(stream.tell(), 0)

    def test_streams_chunks_to_handler(self) -> None:
        conn, session = _connection(_response(200, b"abcdef", "application/octet-stream"))
        chunks = []
        resp = conn.request("GET", URL, chunk_handler=chunks.append)

        self.assertEqual(chunks, [b"ab", b"cdef"])
        self.assertEqual(resp.content, b"")
        self.assertTrue(session.request.call_args[1]["stream"])

    def test_transport_exceptions_are_mapped(self) -> None:
        cases = [
            (requests.exceptions.ConnectTimeout("t"), RequestTimeoutError),
            (requests.exceptions.ReadTimeout("t"), RequestTimeoutError),
            (requests.exceptions.ConnectionError("c"), ConnectionFailedError),
            (requests.exceptions.TooManyRedirects("r"), ProtocolError),
        ]
        for raised, expected in cases:
            with self.subTest(raised=type(raised).__name__):
                conn, _ = _connection(raised)
                with self.assertRaises(expected) as ctx:
                    conn.request("GET", URL)
                self.assertIs(ctx.exception.cause, raised)
                self.assertEqual(ctx.exception.request["method"], "GET")

    def test_unlink_closes_session(self) -> None:
        conn, session = _connection()
        conn.unlink()
        conn.unlink()
        self.assertEqual(session.close.call_count, 2)
