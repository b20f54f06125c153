"""Abstract base class for TTS providers.

All vendor integrations implement this interface. The TTSClient uses it to
synthesize speech without knowing which vendor is active. Providers perform
exactly one round trip per ``generate()`` call: chunking and retrying are
the client's job. Providers hold no mutable state; credentials and defaults
are resolved from the ``ProviderContext`` on every call.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from multitts.config import Config
from multitts.errors import ErrorCode, TTSError
from multitts.events.telemetry import Telemetry
from multitts.tts.types import LanguageInfo, ModelInfo, ProviderCapabilities, VoiceInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderContext:
    """Per-call collaborators handed to a provider.

    Attributes:
        http: Shared, pooled HTTP client. Safe for concurrent use.
        config: Read-only provider settings.
        telemetry: Event emitter for ``http.request`` events.
    """

    http: httpx.AsyncClient
    config: Config
    telemetry: Telemetry


class TTSProvider(ABC):
    """Abstract base class for TTS providers.

    ``generate()`` returns audio bytes or raises ``TTSError``; it must never
    leak vendor-specific exceptions.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Registry name of this provider (e.g. ``"openai"``)."""

    @abstractmethod
    async def generate(self, params: Mapping[str, Any], ctx: ProviderContext) -> bytes:
        """Synthesize ``params["text"]`` in a single request and return audio bytes."""

    @abstractmethod
    def validate_params(self, params: Mapping[str, Any]) -> None:
        """Check provider-specific constraints.

        Raises:
            TTSError: With code ``validation_error`` on the first problem found.
        """

    async def stream(self, params: Mapping[str, Any], ctx: ProviderContext) -> Any:
        """Streaming synthesis. Not implemented for any provider yet."""
        raise TTSError(
            ErrorCode.NOT_IMPLEMENTED,
            "Streaming not yet implemented",
            provider=self.provider_name,
        )

    @abstractmethod
    def models(self) -> list[ModelInfo]:
        """Static model catalog."""

    @abstractmethod
    def voices(self) -> list[VoiceInfo]:
        """Static voice catalog."""

    @abstractmethod
    def languages(self) -> list[LanguageInfo]:
        """Static language catalog."""

    @abstractmethod
    def capabilities(self) -> ProviderCapabilities:
        """Declared limits and features."""

    def max_text_length(self, params: Mapping[str, Any] | None = None) -> int | None:
        """Longest text accepted for *params*; None means unbounded.

        Defaults to the capability value. Providers whose limit depends on
        the selected model override this.
        """
        return self.capabilities().max_text_length

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _invalid(self, message: str) -> TTSError:
        return TTSError(ErrorCode.VALIDATION_ERROR, message, provider=self.provider_name)

    def _check_text(self, params: Mapping[str, Any], suffix: str = "") -> None:
        text = params.get("text")
        if not text:
            raise self._invalid("Text cannot be empty")
        max_length = self.max_text_length(params)
        if max_length is not None and len(text) > max_length:
            raise self._invalid(
                f"Text exceeds maximum length of {max_length} characters{suffix}"
            )

    def _check_format(self, params: Mapping[str, Any]) -> None:
        fmt = params.get("format")
        formats = self.capabilities().formats
        if fmt and fmt not in formats:
            raise self._invalid(f"Invalid format: {fmt} (supported: {', '.join(formats)})")

    def _settings(
        self, ctx: ProviderContext, overrides: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return ctx.config.provider_config(self.provider_name, overrides)

    async def _post(
        self,
        ctx: ProviderContext,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Any = None,
        content: bytes | None = None,
    ) -> bytes:
        """POST to the vendor and return the response body.

        Raises:
            TTSError: ``network_error`` when no response was received,
                ``rate_limited`` for 429, ``http_error`` for other failing
                statuses.
        """
        start = time.monotonic()
        try:
            response = await ctx.http.post(url, headers=headers, json=json, content=content)
        except httpx.HTTPError as exc:
            logger.warning("%s request to %s failed: %r", self.provider_name, url, exc)
            raise TTSError(
                ErrorCode.NETWORK_ERROR,
                f"Network error: {exc!r}",
                provider=self.provider_name,
            ) from exc

        duration_ms = (time.monotonic() - start) * 1000
        ctx.telemetry.http_request(
            duration_ms,
            response.status_code,
            provider=self.provider_name,
            method="POST",
            url=url,
        )

        if response.is_success:
            return response.content

        message = self._error_message(response) or f"HTTP {response.status_code}"
        logger.warning(
            "%s synthesis status=%d message=%s",
            self.provider_name,
            response.status_code,
            message,
        )
        code = ErrorCode.RATE_LIMITED if response.status_code == 429 else ErrorCode.HTTP_ERROR
        raise TTSError(
            code,
            message,
            provider=self.provider_name,
            status=response.status_code,
            headers=response.headers,
        )

    def _error_message(self, response: httpx.Response) -> str | None:
        """Extract a human message from a failing vendor response, if possible."""
        return None


def decode_json(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or None if it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None
