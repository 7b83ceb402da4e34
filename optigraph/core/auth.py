"""Authentication handlers for content graph requests.

Provides pluggable authentication via the Auth protocol. Handlers see the
exact request body and endpoint so that signing schemes can cover them.
"""

import base64
import hashlib
import hmac
import time
import uuid
from typing import Callable, Dict, Protocol, runtime_checkable

import httpx

from .settings import AuthenticationMode, GraphSettings


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Implement this protocol to create custom authentication.

    Example:
        class TenantAuth:
            def __init__(self, token: str, tenant: str):
                self.token = token
                self.tenant = tenant

            def get_headers(self, body: str, url: str) -> dict[str, str]:
                return {
                    "Authorization": f"Bearer {self.token}",
                    "X-Tenant": self.tenant,
                }
    """

    def get_headers(self, body: str, url: str) -> Dict[str, str]:
        """Return headers to include in a POST of `body` to `url`."""
        ...


class NoAuth:
    """No authentication (for public endpoints or testing)."""

    def get_headers(self, body: str, url: str) -> Dict[str, str]:
        return {}


class SingleKeyAuth:
    """Single-key authentication for public content queries.

    Args:
        key: The single key; an empty key sends no header

    Example:
        auth = SingleKeyAuth("wRtAbc123")
    """

    def __init__(self, key: str | None):
        self.key = key

    def get_headers(self, body: str, url: str) -> Dict[str, str]:
        if not self.key:
            return {}
        return {"Authorization": f"epi-single {self.key}"}


def path_and_query(url: str) -> str:
    """Return the path plus query string of `url`, e.g. `/content/v2?x=1`."""
    return httpx.URL(url).raw_path.decode("ascii")


def compute_hmac_signature(
    app_key: str,
    secret: str,
    timestamp: str,
    nonce: str,
    target: str,
    body: str,
    method: str = "POST",
) -> str:
    """Sign `app_key + timestamp + nonce + method + target + body` with HMAC-SHA256.

    Returns the base64-encoded digest.
    """
    string_to_sign = f"{app_key}{timestamp}{nonce}{method}{target}{body}"
    digest = hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class HmacAuth:
    """HMAC-signed authentication using an app key and shared secret.

    Args:
        app_key: Application key
        secret: Shared secret (never transmitted)
        clock: Returns the current unix time in seconds
        nonce_factory: Returns a fresh 32-char lowercase hex nonce

    Example:
        auth = HmacAuth("my-app-key", "my-secret")
    """

    def __init__(
        self,
        app_key: str | None,
        secret: str | None,
        *,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self.app_key = app_key
        self.secret = secret
        self._clock = clock
        self._nonce_factory = nonce_factory

    def get_headers(self, body: str, url: str) -> Dict[str, str]:
        if not self.app_key or not self.secret:
            return {}

        timestamp = str(int(self._clock()))
        nonce = self._nonce_factory()
        signature = compute_hmac_signature(
            self.app_key, self.secret, timestamp, nonce, path_and_query(url), body
        )
        return {
            "Authorization": f"epi-hmac {self.app_key}:{timestamp}:{nonce}:{signature}"
        }


def auth_from_settings(settings: GraphSettings) -> Auth:
    """Pick the auth handler matching `settings.auth_mode`."""
    if settings.auth_mode == AuthenticationMode.SINGLE_KEY:
        return SingleKeyAuth(settings.single_key)
    if settings.auth_mode == AuthenticationMode.HMAC:
        return HmacAuth(settings.app_key, settings.secret)
    return NoAuth()
