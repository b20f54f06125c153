"""OpenAI text-to-speech provider.

Posts to the ``/v1/audio/speech`` endpoint and returns the raw audio body.
"""

import logging
from typing import Any, Mapping

import httpx

from multitts.config import OPENAI_ENDPOINT_URL
from multitts.errors import ErrorCode, TTSError
from multitts.tts.provider import ProviderContext, TTSProvider, decode_json
from multitts.tts.types import LanguageInfo, ModelInfo, ProviderCapabilities, VoiceInfo

logger = logging.getLogger(__name__)

_MODELS = [
    ModelInfo(id="tts-1", name="TTS 1", description="Standard quality, faster generation"),
    ModelInfo(id="tts-1-hd", name="TTS 1 HD", description="High quality, slower generation"),
]

_VOICES = [
    VoiceInfo(id="alloy", name="Alloy", gender="neutral", language="en"),
    VoiceInfo(id="echo", name="Echo", gender="male", language="en"),
    VoiceInfo(id="fable", name="Fable", gender="neutral", language="en"),
    VoiceInfo(id="onyx", name="Onyx", gender="male", language="en"),
    VoiceInfo(id="nova", name="Nova", gender="female", language="en"),
    VoiceInfo(id="shimmer", name="Shimmer", gender="female", language="en"),
]

_LANGUAGES = [
    LanguageInfo(code="en", name="English"),
    LanguageInfo(code="tr", name="Turkish"),
    LanguageInfo(code="de", name="German"),
    LanguageInfo(code="es", name="Spanish"),
    LanguageInfo(code="fr", name="French"),
    LanguageInfo(code="it", name="Italian"),
    LanguageInfo(code="pt", name="Portuguese"),
    LanguageInfo(code="ru", name="Russian"),
    LanguageInfo(code="ja", name="Japanese"),
    LanguageInfo(code="ko", name="Korean"),
    LanguageInfo(code="zh", name="Chinese"),
]

_CAPABILITIES = ProviderCapabilities(
    streaming=True,
    formats=("mp3", "opus", "aac", "flac"),
    sample_rates=(22050, 44100),
    max_text_length=4096,
)


class OpenAIClient(TTSProvider):
    """OpenAI TTS HTTP client."""

    @property
    def provider_name(self) -> str:
        return "openai"

    async def generate(self, params: Mapping[str, Any], ctx: ProviderContext) -> bytes:
        self.validate_params(params)
        settings = self._settings(
            ctx,
            {
                "api_key": params.get("api_key"),
                "api_organization": params.get("api_organization"),
            },
        )
        api_key = settings.get("api_key")
        if not api_key:
            raise TTSError(
                ErrorCode.ERROR, "OpenAI API key not configured", provider=self.provider_name
            )

        body: dict[str, Any] = {
            "model": params.get("model") or settings.get("default_model", "tts-1"),
            "input": params["text"],
            "voice": params.get("voice") or settings.get("default_voice", "nova"),
            "response_format": params.get("format") or settings.get("default_format", "mp3"),
        }
        if params.get("speed"):
            body["speed"] = params["speed"]

        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        if settings.get("api_organization"):
            headers["OpenAI-Organization"] = settings["api_organization"]

        url = settings.get("endpoint_url") or OPENAI_ENDPOINT_URL
        return await self._post(ctx, url, headers=headers, json=body)

    def validate_params(self, params: Mapping[str, Any]) -> None:
        self._check_text(params)
        voice = params.get("voice")
        if voice and not any(v.id == voice for v in _VOICES):
            raise self._invalid(f"Invalid voice: {voice}")
        model = params.get("model")
        if model and not any(m.id == model for m in _MODELS):
            raise self._invalid(f"Invalid model: {model}")

    def models(self) -> list[ModelInfo]:
        return list(_MODELS)

    def voices(self) -> list[VoiceInfo]:
        return list(_VOICES)

    def languages(self) -> list[LanguageInfo]:
        return list(_LANGUAGES)

    def capabilities(self) -> ProviderCapabilities:
        return _CAPABILITIES

    def _error_message(self, response: httpx.Response) -> str | None:
        decoded = decode_json(response)
        if isinstance(decoded, dict):
            error = decoded.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
            return "Unknown error"
        return None
