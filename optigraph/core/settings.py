"""Connection settings and settings providers.

Settings can be built directly, read from environment variables or
loaded from a JSON file:

    settings = GraphSettings(endpoint="https://cg.optimizely.com/content/v2",
                             auth_mode=AuthenticationMode.SINGLE_KEY,
                             single_key="abc")
    settings = GraphSettings.from_env()
    settings = GraphSettings.from_file("graph.json")
"""

import json
import os
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError, field_validator

DEFAULT_ENDPOINT = "https://cg.optimizely.com/content/v2"


class OptigraphError(Exception):
    """Base exception for optigraph."""


class ConfigurationError(OptigraphError):
    """Raised when settings cannot be read or are invalid."""


class AuthenticationMode(str, Enum):
    """Authentication modes supported by the content graph."""
    NONE = "none"
    SINGLE_KEY = "single_key"
    HMAC = "hmac"

    @classmethod
    def parse(cls, value: "str | AuthenticationMode") -> "AuthenticationMode":
        """Parse a mode name case-insensitively, accepting `-` for `_`."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        if normalized == "singlekey":
            normalized = "single_key"
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError(
                f"Unknown authentication mode '{value}' (expected one of: {choices})"
            ) from None


class GraphSettings(BaseModel):
    """Settings for connecting to a content graph endpoint."""

    endpoint: str = DEFAULT_ENDPOINT
    auth_mode: AuthenticationMode = AuthenticationMode.SINGLE_KEY
    single_key: str | None = None
    app_key: str | None = None
    secret: str | None = None
    default_locale: str | None = "en"
    timeout: float = 30.0
    max_history_items: int = 50

    @field_validator("auth_mode", mode="before")
    @classmethod
    def _parse_auth_mode(cls, value):
        return AuthenticationMode.parse(value)

    @classmethod
    def from_env(cls, prefix: str = "OPTIGRAPH_", environ: dict[str, str] | None = None) -> "GraphSettings":
        """Build settings from `{prefix}ENDPOINT`, `{prefix}AUTH_MODE`, etc.

        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in ("endpoint", "auth_mode", "single_key", "app_key",
                     "secret", "default_locale", "timeout"):
            raw = environ.get(f"{prefix}{name.upper()}")
            if raw:
                values[name] = raw
        return cls._validate(values, source="environment")

    @classmethod
    def from_file(cls, path: str | Path) -> "GraphSettings":
        """Load settings from a JSON file."""
        try:
            with open(path, encoding="utf-8") as f:
                values = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in settings file {path}: {e}") from e
        if not isinstance(values, dict):
            raise ConfigurationError(f"Settings file {path} must contain a JSON object")
        return cls._validate(values, source=str(path))

    @classmethod
    def _validate(cls, values: dict, source: str) -> "GraphSettings":
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings from {source}: {e}") from e


@runtime_checkable
class SettingsProvider(Protocol):
    """Protocol for anything that can hand out the current settings."""

    def get_settings(self) -> GraphSettings:
        ...


SettingsListener = Callable[[GraphSettings], None]


class StaticSettingsProvider:
    """In-memory settings provider with change notification.

    Example:
        provider = StaticSettingsProvider(GraphSettings(single_key="abc"))
        provider.add_listener(lambda s: print("now using", s.endpoint))
        provider.save(provider.get_settings().model_copy(update={"endpoint": url}))
    """

    def __init__(self, settings: GraphSettings | None = None):
        self._settings = settings
        self._listeners: list[SettingsListener] = []

    def get_settings(self) -> GraphSettings:
        if self._settings is None:
            self._settings = GraphSettings()
        return self._settings

    def save(self, settings: GraphSettings):
        self._settings = settings
        self._notify(settings)

    def clear(self):
        """Drop the stored settings; the next read returns defaults."""
        self._settings = None
        self._notify(GraphSettings())

    def add_listener(self, listener: SettingsListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: SettingsListener):
        self._listeners.remove(listener)

    def _notify(self, settings: GraphSettings):
        for listener in self._listeners:
            listener(settings)
