"""Configuration constants and provider settings for multitts."""

import os
from dataclasses import dataclass
from typing import Any, Mapping

from multitts.errors import ConfigError


# --- HTTP transport ---

# Seconds. Long inputs can take minutes to synthesize.
HTTP_TIMEOUT: float = float(os.environ.get("MULTITTS_HTTP_TIMEOUT", "600.0"))
CONNECT_TIMEOUT: float = float(os.environ.get("MULTITTS_CONNECT_TIMEOUT", "10.0"))


# --- Logging ---

LOG_LEVEL: str = os.environ.get("MULTITTS_LOG_LEVEL", "WARNING")


# --- Vendor endpoints ---

OPENAI_ENDPOINT_URL: str = os.environ.get(
    "MULTITTS_OPENAI_ENDPOINT_URL", "https://api.openai.com/v1/audio/speech"
)
ELEVENLABS_ENDPOINT_URL: str = os.environ.get(
    "MULTITTS_ELEVENLABS_ENDPOINT_URL", "https://api.elevenlabs.io/v1/text-to-speech"
)
POLLY_DEFAULT_REGION: str = "us-east-1"


@dataclass(frozen=True)
class EnvVar:
    """Marks a config value that is read from an environment variable at lookup time."""

    name: str

    def resolve(self) -> str:
        """Return the variable's value, or raise ``ConfigError`` if it is unset."""
        value = os.environ.get(self.name)
        if value is None:
            raise ConfigError(
                f"Environment variable {self.name!r} is not set. "
                "Please set it or provide the value in your configuration."
            )
        return value


def resolve_env_vars(value: Any) -> Any:
    """Recursively replace ``EnvVar`` markers in *value* with their values."""
    if isinstance(value, EnvVar):
        return value.resolve()
    if isinstance(value, Mapping):
        return {key: resolve_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_env_vars(item) for item in value]
    return value


def default_provider_settings() -> dict[str, dict[str, Any]]:
    """Return the standard per-provider settings table."""
    return {
        "openai": {
            "api_key": EnvVar("OPENAI_API_KEY"),
            "endpoint_url": OPENAI_ENDPOINT_URL,
            "default_model": "tts-1",
            "default_voice": "nova",
            "default_format": "mp3",
        },
        "elevenlabs": {
            "api_key": EnvVar("ELEVENLABS_API_KEY"),
            "endpoint_url": ELEVENLABS_ENDPOINT_URL,
            "default_model": "eleven_flash_v2_5",
            "default_voice": "Xb7hH8MSUJpSbSDYk0k2",
            "default_format": "mp3",
        },
        "polly": {
            "access_key_id": EnvVar("AWS_ACCESS_KEY_ID"),
            "secret_access_key": EnvVar("AWS_SECRET_ACCESS_KEY"),
            "region": os.environ.get("AWS_REGION", POLLY_DEFAULT_REGION),
            "session_token": os.environ.get("AWS_SESSION_TOKEN"),
            "default_model": "standard",
            "default_voice": "Joanna",
            "default_format": "mp3",
        },
    }


class Config:
    """Read-only provider settings, threaded into every provider call.

    Values may be ``EnvVar`` markers. They are resolved only when a provider
    asks for its settings, and only if a per-call override did not already
    supply the key.
    """

    def __init__(self, providers: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._providers: dict[str, dict[str, Any]] = {
            name: dict(settings) for name, settings in (providers or {}).items()
        }

    @classmethod
    def default(cls) -> "Config":
        """Build a Config from the standard settings table."""
        return cls(default_provider_settings())

    def provider_config(
        self, provider: str, overrides: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Return the effective settings for *provider*.

        *overrides* win over configured values. Keys whose override is None
        are ignored so callers can pass request fields straight through.

        Raises:
            ConfigError: If a remaining ``EnvVar`` points at an unset variable.
        """
        merged = dict(self._providers.get(provider, {}))
        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value
        return resolve_env_vars(merged)

    @property
    def provider_names(self) -> list[str]:
        """Names of providers that have settings in this Config."""
        return list(self._providers)
