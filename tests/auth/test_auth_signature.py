import base64
import hashlib
import hmac
import unittest
from datetime import datetime, timezone

from cloudfs.auth.credentials import ClientCredentials
from cloudfs.auth.signature import (
    CONTENT_TYPE_FORM,
    build_signed_headers,
    generate_auth_signature,
    sort_case_insensitive,
    urlencode_pairs,
)


def _hmac_b64(secret: str, message: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class TestSignature(unittest.TestCase):
    def test_sort_case_insensitive(self) -> None:
        ordered = sort_case_insensitive({"b": 1, "A": 2, "c": 3})
        self.assertEqual(list(ordered), ["A", "b", "c"])

    def test_urlencode_pairs_escapes_like_forms(self) -> None:
        encoded = urlencode_pairs({"user name": "a&b", "Date": "Sun,  5 Jan"}, "=", "&")
        self.assertEqual(encoded, "user+name=a%26b&Date=Sun%2C++5+Jan")

    def test_generate_auth_signature_string_to_sign(self) -> None:
        params = {"username": "u@x.com", "grant_type": "password", "password": "p w"}
        headers = {"Date": "Sun,  5 Jan 2025 03:04:05 UTC", "Content-Type": CONTENT_TYPE_FORM}

        expected_string = (
            "POST&/v2/oauth2/token"
            "&grant_type=password&password=p+w&username=u%40x.com"
            "&Content-Type:application%2Fx-www-form-urlencoded%3Bcharset%3Dutf-8"
            "&Date:Sun%2C++5+Jan+2025+03%3A04%3A05+UTC"
        )
        signature = generate_auth_signature("/v2/oauth2/token", params, headers, "s3cret")
        self.assertEqual(signature, _hmac_b64("s3cret", expected_string))

    def test_build_signed_headers(self) -> None:
        creds = ClientCredentials("client", "s3cret", "example.cloudfs.io")
        date = datetime(2025, 1, 5, 3, 4, 5, tzinfo=timezone.utc)
        form = {"grant_type": "password", "password": "pw", "username": "u"}

        headers = build_signed_headers(creds, "/v2/oauth2/token", form, date=date)

        self.assertEqual(headers["Content-Type"], CONTENT_TYPE_FORM)
        self.assertEqual(headers["Date"], "Sun,  5 Jan 2025 03:04:05 UTC")
        expected = generate_auth_signature(
            "/v2/oauth2/token",
            form,
            {"Content-Type": CONTENT_TYPE_FORM, "Date": headers["Date"]},
            "s3cret",
        )
        self.assertEqual(headers["Authorization"], f"BCS client:{expected}")
