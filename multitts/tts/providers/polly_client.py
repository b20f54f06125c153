"""Amazon Polly text-to-speech provider.

Calls Polly's ``SynthesizeSpeech`` REST endpoint over the shared httpx
client. Requests are signed with AWS Signature Version 4 using botocore's
signer, so no boto3 session or its own HTTP stack is involved.
"""

import json
import logging
from typing import Any, Mapping

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from multitts.config import POLLY_DEFAULT_REGION
from multitts.errors import ErrorCode, TTSError
from multitts.tts.provider import ProviderContext, TTSProvider, decode_json
from multitts.tts.types import LanguageInfo, ModelInfo, ProviderCapabilities, VoiceInfo

logger = logging.getLogger(__name__)

_SERVICE = "polly"
_ENDPOINT_TEMPLATE = "https://polly.{region}.amazonaws.com/v1/speech"

_MODELS = [
    ModelInfo(id="standard", name="Standard", description="AWS Polly standard engine"),
    ModelInfo(
        id="neural",
        name="Neural",
        description="AWS Polly neural engine (when supported by voice/region)",
    ),
]

_VOICES = [
    VoiceInfo(id="Filiz", name="Filiz", gender="female", language="tr", locale="tr-TR"),
    VoiceInfo(id="Burcu", name="Burcu", gender="female", language="tr", locale="tr-TR"),
    VoiceInfo(id="Amy", name="Amy", gender="female", language="en", locale="en-GB"),
    VoiceInfo(id="Emma", name="Emma", gender="female", language="en", locale="en-GB"),
    VoiceInfo(id="Brian", name="Brian", gender="male", language="en", locale="en-GB"),
    VoiceInfo(id="Arthur", name="Arthur", gender="male", language="en", locale="en-GB"),
    VoiceInfo(id="Marlene", name="Marlene", gender="female", language="de", locale="de-DE"),
    VoiceInfo(id="Daniel", name="Daniel", gender="male", language="de", locale="de-DE"),
    VoiceInfo(id="Vicki", name="Vicki", gender="female", language="de", locale="de-DE"),
    VoiceInfo(id="Danielle", name="Danielle", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Gregory", name="Gregory", gender="male", language="en", locale="en-US"),
    VoiceInfo(id="Ivy", name="Ivy", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Joanna", name="Joanna", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Kendra", name="Kendra", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Kimberly", name="Kimberly", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Salli", name="Salli", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Joey", name="Joey", gender="male", language="en", locale="en-US"),
    VoiceInfo(id="Justin", name="Justin", gender="male", language="en", locale="en-US"),
    VoiceInfo(id="Kevin", name="Kevin", gender="male", language="en", locale="en-US"),
    VoiceInfo(id="Matthew", name="Matthew", gender="male", language="en", locale="en-US"),
    VoiceInfo(id="Ruth", name="Ruth", gender="female", language="en", locale="en-US"),
    VoiceInfo(id="Stephen", name="Stephen", gender="male", language="en", locale="en-US"),
]

_LANGUAGES = [
    LanguageInfo(code="tr", name="Turkish", locale="tr-TR"),
    LanguageInfo(code="en", name="English", locale="en-GB"),
    LanguageInfo(code="de", name="German", locale="de-DE"),
    LanguageInfo(code="en", name="English", locale="en-US"),
]

_CAPABILITIES = ProviderCapabilities(
    streaming=False,
    formats=("mp3", "ogg_vorbis", "pcm"),
    sample_rates=(8000, 16000, 22050),
    max_text_length=3000,
)

# Rates Polly accepts per output format. Any other rate is left to the vendor default.
_FORMAT_SAMPLE_RATES = {
    "pcm": (8000, 16000),
    "mp3": (8000, 16000, 22050, 24000),
    "ogg_vorbis": (8000, 16000, 22050, 24000),
}

_CREDENTIAL_KEYS = ("access_key_id", "secret_access_key", "region", "session_token")


class PollyClient(TTSProvider):
    """Amazon Polly HTTP client with SigV4 request signing."""

    @property
    def provider_name(self) -> str:
        return "polly"

    async def generate(self, params: Mapping[str, Any], ctx: ProviderContext) -> bytes:
        self.validate_params(params)
        settings = self._settings(ctx, {key: params.get(key) for key in _CREDENTIAL_KEYS})

        access_key_id = settings.get("access_key_id")
        secret_access_key = settings.get("secret_access_key")
        if not access_key_id:
            raise TTSError(
                ErrorCode.ERROR, "AWS access_key_id not configured", provider=self.provider_name
            )
        if not secret_access_key:
            raise TTSError(
                ErrorCode.ERROR,
                "AWS secret_access_key not configured",
                provider=self.provider_name,
            )

        region = settings.get("region") or POLLY_DEFAULT_REGION
        url = settings.get("endpoint_url") or _ENDPOINT_TEMPLATE.format(region=region)
        payload = json.dumps(self._request_body(params, settings)).encode("utf-8")

        credentials = Credentials(
            access_key_id, secret_access_key, settings.get("session_token") or None
        )
        headers = sign_request(credentials, region, url, payload)
        return await self._post(ctx, url, headers=headers, content=payload)

    def validate_params(self, params: Mapping[str, Any]) -> None:
        self._check_text(params)
        voice = params.get("voice")
        if voice and not any(v.id == voice for v in _VOICES):
            raise self._invalid(f"Invalid voice: {voice}")
        model = params.get("model")
        if model and not any(m.id == model for m in _MODELS):
            raise self._invalid(
                f'Invalid model/engine: {model} (expected "standard" or "neural")'
            )
        self._check_format(params)

    def models(self) -> list[ModelInfo]:
        return list(_MODELS)

    def voices(self) -> list[VoiceInfo]:
        return list(_VOICES)

    def languages(self) -> list[LanguageInfo]:
        return list(_LANGUAGES)

    def capabilities(self) -> ProviderCapabilities:
        return _CAPABILITIES

    def _request_body(
        self, params: Mapping[str, Any], settings: Mapping[str, Any]
    ) -> dict[str, Any]:
        text = params["text"]
        output_format = params.get("format") or settings.get("default_format", "mp3")
        body = {
            "OutputFormat": output_format,
            "Text": text,
            "VoiceId": params.get("voice") or settings.get("default_voice", "Joanna"),
            "Engine": params.get("model") or settings.get("default_model", "standard"),
            "TextType": "ssml" if "<speak>" in text else "text",
        }
        sample_rate = params.get("sample_rate")
        if sample_rate in _FORMAT_SAMPLE_RATES.get(output_format, ()):
            body["SampleRate"] = str(sample_rate)
        elif sample_rate is not None:
            logger.debug(
                "Omitting SampleRate %s, not valid for Polly %s output",
                sample_rate,
                output_format,
            )
        return body

    def _error_message(self, response: httpx.Response) -> str | None:
        decoded = decode_json(response)
        if isinstance(decoded, dict):
            for key in ("message", "Message"):
                if isinstance(decoded.get(key), str):
                    return decoded[key]
        return None


def sign_request(
    credentials: Credentials, region: str, url: str, payload: bytes
) -> dict[str, str]:
    """Return SigV4-signed headers for a Polly POST of *payload* to *url*."""
    request = AWSRequest(
        method="POST",
        url=url,
        data=payload,
        headers={"Content-Type": "application/x-amz-json-1.1"},
    )
    SigV4Auth(credentials, _SERVICE, region).add_auth(request)
    return dict(request.headers.items())
