"""Provider registry: maps provider names to ``TTSProvider`` instances.

The standard table covers every ``ProviderName``. An override table can
substitute or add implementations, which is how tests and deployments plug
in fakes without touching the client.
"""

import logging
from typing import Mapping

from multitts.errors import ErrorCode, TTSError
from multitts.tts.provider import TTSProvider
from multitts.tts.providers import ElevenLabsClient, OpenAIClient, PollyClient
from multitts.tts.types import LanguageInfo, ModelInfo, ProviderCapabilities, VoiceInfo

logger = logging.getLogger(__name__)


def default_providers() -> dict[str, TTSProvider]:
    """Create one instance of every built-in provider, keyed by name."""
    providers: list[TTSProvider] = [OpenAIClient(), ElevenLabsClient(), PollyClient()]
    return {provider.provider_name: provider for provider in providers}


class ProviderRegistry:
    """Lookup table from provider name to implementation."""

    def __init__(
        self,
        providers: Mapping[str, TTSProvider] | None = None,
        overrides: Mapping[str, TTSProvider] | None = None,
    ) -> None:
        self._providers: dict[str, TTSProvider] = dict(
            providers if providers is not None else default_providers()
        )
        if overrides:
            logger.debug("Provider overrides installed for: %s", ", ".join(overrides))
            self._providers.update(overrides)

    def names(self) -> list[str]:
        """Return the registered provider names."""
        return list(self._providers)

    def get(self, name: str) -> TTSProvider:
        """Return the provider registered under *name*.

        Raises:
            TTSError: ``validation_error`` if no provider has that name.
        """
        key = getattr(name, "value", name)
        provider = self._providers.get(key) if isinstance(key, str) else None
        if provider is None:
            raise TTSError(
                ErrorCode.VALIDATION_ERROR,
                f"Unknown provider: {key}",
                provider=key if isinstance(key, str) else None,
            )
        return provider

    def models(self, name: str) -> list[ModelInfo]:
        return self.get(name).models()

    def voices(self, name: str) -> list[VoiceInfo]:
        return self.get(name).voices()

    def languages(self, name: str) -> list[LanguageInfo]:
        return self.get(name).languages()

    def capabilities(self, name: str) -> ProviderCapabilities:
        return self.get(name).capabilities()


default_registry = ProviderRegistry()
