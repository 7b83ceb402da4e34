"""Tests for authentication handlers."""

import base64
import hashlib
import hmac

from optigraph.core.auth import (
    Auth,
    HmacAuth,
    NoAuth,
    SingleKeyAuth,
    auth_from_settings,
    compute_hmac_signature,
    path_and_query,
)
from optigraph.core.settings import AuthenticationMode, GraphSettings

URL = "https://cg.example.com/content/v2?cache=false"
BODY = '{"query":"{ Content { total } }"}'


class TestSingleKeyAuth:
    """Tests for SingleKeyAuth."""

    def test_header(self):
        """Test epi-single header format."""
        auth = SingleKeyAuth("abc123")
        assert auth.get_headers(BODY, URL) == {"Authorization": "epi-single abc123"}

    def test_empty_key_sends_nothing(self):
        assert SingleKeyAuth("").get_headers(BODY, URL) == {}
        assert SingleKeyAuth(None).get_headers(BODY, URL) == {}


class TestPathAndQuery:
    """Tests for the signed request target."""

    def test_path_with_query(self):
        assert path_and_query(URL) == "/content/v2?cache=false"

    def test_path_only(self):
        assert path_and_query("https://cg.example.com/content/v2") == "/content/v2"

    def test_root(self):
        assert path_and_query("https://cg.example.com") == "/"


class TestHmacAuth:
    """Tests for HmacAuth."""

    def test_header_format(self):
        """Test epi-hmac header carries key, timestamp, nonce and signature."""
        auth = HmacAuth("k1", "s1", clock=lambda: 1700000000.9, nonce_factory=lambda: "a" * 32)
        header = auth.get_headers(BODY, URL)["Authorization"]

        assert header.startswith("epi-hmac ")
        app_key, timestamp, nonce, signature = header[len("epi-hmac "):].split(":")
        assert app_key == "k1"
        assert timestamp == "1700000000"
        assert nonce == "a" * 32
        assert base64.b64decode(signature)

    def test_signature_matches_independent_computation(self):
        """Test the signature is HMAC-SHA256(secret, key+ts+nonce+POST+path+body)."""
        nonce = "0123456789abcdef0123456789abcdef"
        auth = HmacAuth("k1", "s1", clock=lambda: 1700000000, nonce_factory=lambda: nonce)
        header = auth.get_headers(BODY, URL)["Authorization"]

        message = f"k11700000000{nonce}POST/content/v2?cache=false{BODY}".encode()
        expected = base64.b64encode(hmac.new(b"s1", message, hashlib.sha256).digest()).decode()
        assert header == f"epi-hmac k1:1700000000:{nonce}:{expected}"

    def test_compute_signature_is_deterministic(self):
        first = compute_hmac_signature("k1", "s1", "1", "n", "/", "{}")
        second = compute_hmac_signature("k1", "s1", "1", "n", "/", "{}")
        assert first == second
        assert first != compute_hmac_signature("k1", "s2", "1", "n", "/", "{}")

    def test_default_nonce_is_32_hex_chars(self):
        header = HmacAuth("k1", "s1").get_headers(BODY, URL)["Authorization"]
        nonce = header.split(":")[2]
        assert len(nonce) == 32
        assert all(c in "0123456789abcdef" for c in nonce)

    def test_fresh_nonce_per_request(self):
        auth = HmacAuth("k1", "s1")
        first = auth.get_headers(BODY, URL)["Authorization"].split(":")[2]
        second = auth.get_headers(BODY, URL)["Authorization"].split(":")[2]
        assert first != second

    def test_missing_credentials_send_nothing(self):
        assert HmacAuth("k1", "").get_headers(BODY, URL) == {}
        assert HmacAuth(None, "s1").get_headers(BODY, URL) == {}


class TestNoAuth:
    """Tests for NoAuth."""

    def test_no_auth(self):
        """Test no auth returns empty headers."""
        assert NoAuth().get_headers(BODY, URL) == {}


class TestAuthFromSettings:
    """Tests for picking the handler from settings."""

    def test_single_key(self):
        auth = auth_from_settings(GraphSettings(auth_mode="single_key", single_key="x"))
        assert isinstance(auth, SingleKeyAuth)
        assert auth.key == "x"

    def test_hmac(self):
        auth = auth_from_settings(GraphSettings(auth_mode=AuthenticationMode.HMAC, app_key="k", secret="s"))
        assert isinstance(auth, HmacAuth)

    def test_none(self):
        auth = auth_from_settings(GraphSettings(auth_mode="none", single_key="ignored"))
        assert isinstance(auth, NoAuth)


class TestAuthProtocol:
    """Tests for Auth protocol compliance."""

    def test_builtin_handlers_are_auth(self):
        for auth in (NoAuth(), SingleKeyAuth("k"), HmacAuth("k", "s")):
            assert isinstance(auth, Auth)

    def test_custom_auth_class(self):
        """Test custom auth class implements protocol."""
        class CustomAuth:
            def get_headers(self, body, url):
                return {"X-Custom": "value"}

        auth = CustomAuth()
        assert isinstance(auth, Auth)
        assert auth.get_headers(BODY, URL) == {"X-Custom": "value"}
