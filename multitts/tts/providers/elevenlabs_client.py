"""ElevenLabs text-to-speech provider.

Sends text to the ElevenLabs text-to-speech API and returns the raw audio
bytes. The text limit depends on the selected model, so ``max_text_length``
is model-aware. ElevenLabs itself supports streaming, but ``stream()`` is
not implemented here, so ``capabilities().streaming`` is False.

``ulaw_8000`` is not one of the shared request formats. Request it through
``provider_opts={"format": "ulaw_8000"}``, which overrides the top-level
``format`` before the params reach this client.
"""

import logging
from typing import Any, Mapping

import httpx

from multitts.config import ELEVENLABS_ENDPOINT_URL
from multitts.errors import ErrorCode, TTSError
from multitts.tts.provider import ProviderContext, TTSProvider, decode_json
from multitts.tts.types import LanguageInfo, ModelInfo, ProviderCapabilities, VoiceInfo

logger = logging.getLogger(__name__)

_MULTILINGUAL_V2_LANGUAGES = (
    "en", "ja", "zh", "de", "hi", "fr", "ko", "pt", "it", "es", "id", "nl", "tr", "fil",
    "pl", "sv", "bg", "ro", "ar", "cs", "el", "fi", "hr", "ms", "sk", "da", "ta", "uk",
    "ru",
)

_FLASH_V2_5_LANGUAGES = _MULTILINGUAL_V2_LANGUAGES + ("hu", "no", "vi")

_MODELS = [
    ModelInfo(
        id="eleven_multilingual_v2",
        name="Eleven Multilingual v2",
        description="Most life-like, emotionally rich model in 29 languages.",
        languages=_MULTILINGUAL_V2_LANGUAGES,
    ),
    ModelInfo(
        id="eleven_flash_v2_5",
        name="Eleven Flash v2.5",
        description="Ultra low latency model in 32 languages.",
        languages=_FLASH_V2_5_LANGUAGES,
    ),
]

# Per-model text limits published by the API.
_MODEL_MAX_LENGTHS = {
    "eleven_multilingual_v2": 10_000,
    "eleven_flash_v2_5": 40_000,
}

_VOICES = [
    VoiceInfo(id="Xb7hH8MSUJpSbSDYk0k2", name="Alice", gender="female", language="en"),
    VoiceInfo(id="nPczCjzI2devNBz1zQrb", name="Brian", gender="male", language="en"),
    VoiceInfo(id="N2lVS1w4EtoT3dr4eOWO", name="Callum", gender="male", language="en"),
    VoiceInfo(id="KbaseEXyT9EE0CQLEfbB", name="Belma", gender="female", language="tr"),
    VoiceInfo(id="IuRRIAcbQK5AQk1XevPj", name="Doga", gender="male", language="tr"),
    VoiceInfo(id="zCagxWNd7QOsCjiHDrGR", name="İpek", gender="female", language="tr"),
    VoiceInfo(id="axtmxCPnqPghs9C5SjJ8", name="Meloxia", gender="female", language="tr"),
    VoiceInfo(id="Q5n6GDIjpN0pLOlycRFT", name="Yunus", gender="male", language="tr"),
]

_LANGUAGE_NAMES = {
    "ar": "Arabic", "bg": "Bulgarian", "cs": "Czech", "da": "Danish", "de": "German",
    "el": "Greek", "en": "English", "es": "Spanish", "fi": "Finnish", "fil": "Filipino",
    "fr": "French", "hi": "Hindi", "hr": "Croatian", "hu": "Hungarian", "id": "Indonesian",
    "it": "Italian", "ja": "Japanese", "ko": "Korean", "ms": "Malay", "nl": "Dutch",
    "no": "Norwegian", "pl": "Polish", "pt": "Portuguese", "ro": "Romanian", "ru": "Russian",
    "sk": "Slovak", "sv": "Swedish", "ta": "Tamil", "tr": "Turkish", "uk": "Ukrainian",
    "vi": "Vietnamese", "zh": "Chinese",
}

_LANGUAGES = [LanguageInfo(code=code, name=name) for code, name in _LANGUAGE_NAMES.items()]

_CAPABILITIES = ProviderCapabilities(
    streaming=False,
    formats=("mp3", "pcm", "ulaw_8000"),
    sample_rates=(22050, 24000, 44100, 48000),
    max_text_length=40_000,
)

_PCM_SAMPLE_RATES = (16000, 22050, 24000, 44100, 48000)

# Keys collected into the ``voice_settings`` object of the request body.
_VOICE_SETTING_KEYS = ("speed", "stability", "similarity_boost", "style", "use_speaker_boost")


class ElevenLabsClient(TTSProvider):
    """ElevenLabs TTS HTTP client."""

    @property
    def provider_name(self) -> str:
        return "elevenlabs"

    async def generate(self, params: Mapping[str, Any], ctx: ProviderContext) -> bytes:
        """Synthesize text via ElevenLabs and return the audio bytes."""
        self.validate_params(params)
        settings = self._settings(ctx, {"api_key": params.get("api_key")})
        api_key = settings.get("api_key")
        if not api_key:
            raise TTSError(
                ErrorCode.ERROR, "ElevenLabs API key not configured", provider=self.provider_name
            )

        voice_id = params.get("voice") or settings.get("default_voice", "Xb7hH8MSUJpSbSDYk0k2")
        body: dict[str, Any] = {
            "text": params["text"],
            "model_id": params.get("model") or settings.get("default_model", "eleven_flash_v2_5"),
            "output_format": _output_format(
                params.get("format") or settings.get("default_format", "mp3"),
                params.get("sample_rate"),
            ),
        }

        voice_settings = {
            key: params[key] for key in _VOICE_SETTING_KEYS if params.get(key) is not None
        }
        if voice_settings:
            body["voice_settings"] = voice_settings

        endpoint = settings.get("endpoint_url") or ELEVENLABS_ENDPOINT_URL
        return await self._post(
            ctx,
            f"{endpoint}/{voice_id}",
            headers={"xi-api-key": api_key, "Content-Type": "application/json"},
            json=body,
        )

    def validate_params(self, params: Mapping[str, Any]) -> None:
        model = params.get("model")
        self._check_text(params, f" for model {model}" if model else "")
        voice = params.get("voice")
        if voice is not None and (not isinstance(voice, str) or not voice):
            raise self._invalid(f"Invalid voice: {voice}")
        if model and model not in _MODEL_MAX_LENGTHS:
            raise self._invalid(f"Invalid model: {model}")
        self._check_format(params)

    def max_text_length(self, params: Mapping[str, Any] | None = None) -> int | None:
        model = (params or {}).get("model")
        return _MODEL_MAX_LENGTHS.get(model, _CAPABILITIES.max_text_length)

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
        if not isinstance(decoded, dict):
            return None
        detail = decoded.get("detail")
        if isinstance(detail, dict) and isinstance(detail.get("message"), str):
            return detail["message"]
        if isinstance(detail, str):
            return detail
        return None


def _output_format(fmt: str, sample_rate: int | None) -> str:
    """Map a request format to the ElevenLabs ``{codec}_{rate}[_{bitrate}]`` form."""
    if fmt == "pcm":
        rate = sample_rate if sample_rate in _PCM_SAMPLE_RATES else 22050
        return f"pcm_{rate}"
    if fmt == "ulaw_8000":
        return "ulaw_8000"
    return "mp3_22050_32"
