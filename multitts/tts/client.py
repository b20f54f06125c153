"""TTSClient: the generate pipeline over every registered provider.

A call to ``generate()`` runs these stages in order:

1. Emit ``generate.start`` and validate the raw params into a
   ``GenerationRequest``.
2. Resolve the provider from the registry.
3. Split the text if it exceeds the provider's length limit.
4. Generate each chunk in order, each wrapped by the retry engine. The first
   chunk that fails aborts the whole call.
5. Concatenate the chunk audio.
6. Emit ``generate.stop`` (or ``generate.error`` followed by a failed
   ``generate.stop``).

Expected failures raise ``TTSError``. Anything else is a fault: it is
reported as ``generate.exception`` and re-raised unchanged.
"""

import functools
import logging
import time
from typing import Any, Mapping

import httpx

from multitts.config import CONNECT_TIMEOUT, HTTP_TIMEOUT, Config
from multitts.errors import ErrorCode, TTSError
from multitts.events.telemetry import Telemetry, default_telemetry
from multitts.tts.audio_concatenator import concatenate
from multitts.tts.provider import ProviderContext, TTSProvider
from multitts.tts.registry import ProviderRegistry, default_registry
from multitts.tts.retry import safe_error, with_retry
from multitts.tts.text_splitter import split_text
from multitts.tts.types import (
    GenerationRequest,
    LanguageInfo,
    ModelInfo,
    ProviderCapabilities,
    VoiceInfo,
    validate_request,
)

logger = logging.getLogger(__name__)


class TTSClient:
    """Unified async text-to-speech client.

    Holds one pooled ``httpx.AsyncClient`` shared by every provider call.
    Use it as an async context manager, or call ``start()`` and ``stop()``
    explicitly::

        async with TTSClient() as client:
            audio = await client.generate(provider="openai", text="Hello")
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        registry: ProviderRegistry | None = None,
        telemetry: Telemetry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config if config is not None else Config.default()
        self._registry = registry if registry is not None else default_registry
        self._telemetry = telemetry if telemetry is not None else default_telemetry
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def telemetry(self) -> Telemetry:
        return self._telemetry

    async def start(self) -> None:
        """Create the pooled HTTP client."""
        if self._http is not None:
            return
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(HTTP_TIMEOUT, connect=CONNECT_TIMEOUT),
            transport=self._transport,
        )
        logger.info("TTS client started (providers: %s)", ", ".join(self._registry.names()))

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.info("TTS client stopped")

    async def __aenter__(self) -> "TTSClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> bytes:
        """Synthesize speech and return the complete audio.

        *params* and keyword arguments are merged, keywords winning.

        Raises:
            TTSError: For every expected failure (validation, network, HTTP,
                exhausted retries).
            TypeError: If *params* is not a mapping.
        """
        started = time.monotonic()
        described = _describe(params, kwargs)
        self._telemetry.generate_start(**described)

        try:
            request = validate_request(_merge_params(params, kwargs))
            provider = self._registry.get(request.provider.value)
            audio = await self._run(request, provider)
        except TTSError as error:
            error.with_provider(described.get("provider"))
            duration_ms = _elapsed_ms(started)
            self._telemetry.generate_error(
                duration_ms,
                safe_error(error),
                provider=error.provider,
                text_length=described.get("text_length"),
            )
            self._telemetry.generate_stop(
                duration_ms,
                provider=error.provider,
                text_length=described.get("text_length"),
                success=False,
            )
            raise
        except Exception as exc:
            logger.error("Unexpected failure during generation", exc_info=True)
            self._telemetry.generate_exception(type(exc).__name__, exc, **described)
            raise

        self._telemetry.generate_stop(
            _elapsed_ms(started),
            provider=request.provider.value,
            text_length=len(request.text),
            output_size=len(audio),
            format=request.format,
            success=True,
        )
        return audio

    async def _run(self, request: GenerationRequest, provider: TTSProvider) -> bytes:
        name = provider.provider_name
        ctx = self._context()

        max_length = provider.max_text_length(request.provider_params())
        if max_length is None or len(request.text) <= max_length:
            chunks = [request.text]
        else:
            chunks = split_text(
                request.text, max_length, telemetry=self._telemetry, provider=name
            )

        segments: list[bytes] = []
        for index, chunk in enumerate(chunks):
            params = request.model_copy(update={"text": chunk}).provider_params()
            provider.validate_params(params)
            logger.debug(
                "Generating chunk %d/%d with %s (%d chars)",
                index + 1,
                len(chunks),
                name,
                len(chunk),
            )
            audio = await with_retry(
                functools.partial(provider.generate, params, ctx),
                request.retry_opts,
                telemetry=self._telemetry,
                metadata={"provider": name},
            )
            if not isinstance(audio, (bytes, bytearray)):
                raise TTSError(
                    ErrorCode.INVALID_PROVIDER_RESULT,
                    f"Provider returned {type(audio).__name__}, expected audio bytes",
                    provider=name,
                )
            segments.append(bytes(audio))

        return concatenate(segments)

    async def stream(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
        """Streaming synthesis. Every built-in provider raises ``not_implemented``."""
        described = _describe(params, kwargs)
        try:
            request = validate_request(_merge_params(params, kwargs))
            provider = self._registry.get(request.provider.value)
            return await provider.stream(request.provider_params(), self._context())
        except TTSError as error:
            raise error.with_provider(described.get("provider"))

    def _context(self) -> ProviderContext:
        if self._http is None:
            raise RuntimeError("TTSClient is not started; use 'async with TTSClient()'")
        return ProviderContext(http=self._http, config=self._config, telemetry=self._telemetry)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def providers(self) -> list[str]:
        return self._registry.names()

    def models(self, provider: str) -> list[ModelInfo]:
        return self._registry.models(provider)

    def voices(self, provider: str) -> list[VoiceInfo]:
        return self._registry.voices(provider)

    def languages(self, provider: str) -> list[LanguageInfo]:
        return self._registry.languages(provider)

    def capabilities(self, provider: str) -> ProviderCapabilities:
        return self._registry.capabilities(provider)


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------


async def generate(params: Mapping[str, Any] | None = None, **kwargs: Any) -> bytes:
    """Generate audio with a short-lived ``TTSClient`` using the default config."""
    async with TTSClient() as client:
        return await client.generate(params, **kwargs)


async def stream(params: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
    async with TTSClient() as client:
        return await client.stream(params, **kwargs)


def providers() -> list[str]:
    return default_registry.names()


def models(provider: str) -> list[ModelInfo]:
    return default_registry.models(provider)


def voices(provider: str) -> list[VoiceInfo]:
    return default_registry.voices(provider)


def languages(provider: str) -> list[LanguageInfo]:
    return default_registry.languages(provider)


def capabilities(provider: str) -> ProviderCapabilities:
    return default_registry.capabilities(provider)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _merge_params(params: Any, kwargs: Mapping[str, Any]) -> dict[str, Any]:
    if params is None:
        return dict(kwargs)
    if not isinstance(params, Mapping):
        raise TypeError(f"params must be a mapping, got {type(params).__name__}")
    return {**params, **kwargs}


def _describe(params: Any, kwargs: Mapping[str, Any]) -> dict[str, Any]:
    """Best-effort provider name and text length for event metadata."""
    merged = {**params, **kwargs} if isinstance(params, Mapping) else dict(kwargs)
    provider = merged.get("provider")
    provider = getattr(provider, "value", provider)
    text = merged.get("text")
    return {
        "provider": provider if isinstance(provider, str) else None,
        "text_length": len(text) if isinstance(text, str) else None,
    }


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000
