"""Tests for multitts.tts.providers.polly_client."""

import httpx
import pytest
from botocore.credentials import Credentials

from multitts.config import Config
from multitts.errors import ErrorCode, TTSError
from multitts.tts.providers.polly_client import PollyClient, sign_request


def _params(**overrides) -> dict:
    params = {"text": "Hello from Polly", "format": "mp3", "sample_rate": 22050}
    params.update(overrides)
    return params


# ---------------------------------------------------------------------------
# Request building and signing
# ---------------------------------------------------------------------------


class TestGenerate:
    """Tests for PollyClient.generate()."""

    async def test_returns_audio_bytes(self, stub_vendor, make_context):
        stub = stub_vendor(httpx.Response(200, content=b"polly-audio"))
        assert await PollyClient().generate(_params(), make_context(stub)) == b"polly-audio"

    async def test_request_body(self, stub_vendor, make_context):
        stub = stub_vendor()
        await PollyClient().generate(_params(voice="Filiz", model="neural"), make_context(stub))

        assert stub.body() == {
            "OutputFormat": "mp3",
            "Text": "Hello from Polly",
            "VoiceId": "Filiz",
            "Engine": "neural",
            "TextType": "text",
            "SampleRate": "22050",
        }

    async def test_defaults_and_ssml(self, stub_vendor, make_context):
        stub = stub_vendor()
        await PollyClient().generate({"text": "<speak>Hi</speak>"}, make_context(stub))

        body = stub.body()
        assert body["VoiceId"] == "Joanna"
        assert body["Engine"] == "standard"
        assert body["TextType"] == "ssml"
        assert "SampleRate" not in body

    async def test_pcm_omits_unsupported_default_rate(self, stub_vendor, make_context):
        stub = stub_vendor()
        await PollyClient().generate(_params(format="pcm"), make_context(stub))

        body = stub.body()
        assert body["OutputFormat"] == "pcm"
        assert "SampleRate" not in body

    @pytest.mark.parametrize(
        ("fmt", "rate"), [("pcm", 8000), ("pcm", 16000), ("ogg_vorbis", 24000)]
    )
    async def test_supported_rate_is_sent(self, stub_vendor, make_context, fmt, rate):
        stub = stub_vendor()
        await PollyClient().generate(_params(format=fmt, sample_rate=rate), make_context(stub))
        assert stub.body()["SampleRate"] == str(rate)

    async def test_regional_endpoint_and_signature(self, stub_vendor, make_context):
        stub = stub_vendor()
        await PollyClient().generate(_params(), make_context(stub))

        request = stub.requests[0]
        assert str(request.url) == "https://polly.eu-west-1.amazonaws.com/v1/speech"
        assert request.headers["Content-Type"] == "application/x-amz-json-1.1"
        assert "X-Amz-Date" in request.headers
        authorization = request.headers["Authorization"]
        assert authorization.startswith("AWS4-HMAC-SHA256 Credential=AKIDTEST/")
        assert "/eu-west-1/polly/aws4_request" in authorization
        assert "X-Amz-Security-Token" not in request.headers

    async def test_credential_overrides(self, stub_vendor, make_context):
        stub = stub_vendor()
        params = _params(
            access_key_id="AKIDOTHER",
            secret_access_key="other-secret",
            region="us-west-2",
            session_token="token-123",
        )
        await PollyClient().generate(params, make_context(stub))

        request = stub.requests[0]
        assert request.url.host == "polly.us-west-2.amazonaws.com"
        assert "Credential=AKIDOTHER/" in request.headers["Authorization"]
        assert request.headers["X-Amz-Security-Token"] == "token-123"

    async def test_default_region(self, stub_vendor, make_context):
        stub = stub_vendor()
        cfg = Config({"polly": {"access_key_id": "AKID", "secret_access_key": "s"}})
        await PollyClient().generate(_params(), make_context(stub, cfg))
        assert stub.requests[0].url.host == "polly.us-east-1.amazonaws.com"

    async def test_endpoint_url_override(self, stub_vendor, make_context):
        stub = stub_vendor()
        cfg = Config(
            {
                "polly": {
                    "access_key_id": "AKID",
                    "secret_access_key": "s",
                    "endpoint_url": "http://localhost:4566/v1/speech",
                }
            }
        )
        await PollyClient().generate(_params(), make_context(stub, cfg))
        assert str(stub.requests[0].url) == "http://localhost:4566/v1/speech"

    @pytest.mark.parametrize(
        ("settings", "message"),
        [
            ({"secret_access_key": "s"}, "AWS access_key_id not configured"),
            ({"access_key_id": "AKID"}, "AWS secret_access_key not configured"),
        ],
    )
    async def test_missing_credentials(self, stub_vendor, make_context, settings, message):
        stub = stub_vendor()

        with pytest.raises(TTSError) as exc_info:
            await PollyClient().generate(_params(), make_context(stub, Config({"polly": settings})))

        assert exc_info.value.code is ErrorCode.ERROR
        assert exc_info.value.message == message
        assert stub.calls == 0


class TestSignRequest:
    def test_signed_headers(self):
        headers = sign_request(
            Credentials("AKID", "secret"),
            "eu-central-1",
            "https://polly.eu-central-1.amazonaws.com/v1/speech",
            b'{"Text": "hi"}',
        )
        assert headers["Content-Type"] == "application/x-amz-json-1.1"
        assert "SignedHeaders=" in headers["Authorization"]
        assert "/eu-central-1/polly/aws4_request" in headers["Authorization"]


# ---------------------------------------------------------------------------
# Errors and validation
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.parametrize("key", ["message", "Message"])
    async def test_vendor_message(self, stub_vendor, make_context, key):
        stub = stub_vendor(httpx.Response(400, json={key: "Unsupported sample rate"}))

        with pytest.raises(TTSError) as exc_info:
            await PollyClient().generate(_params(), make_context(stub))

        assert exc_info.value.code is ErrorCode.HTTP_ERROR
        assert exc_info.value.message == "Unsupported sample rate"
        assert exc_info.value.provider == "polly"

    async def test_throttling_is_rate_limited(self, stub_vendor, make_context):
        stub = stub_vendor(httpx.Response(429, json={"message": "Rate exceeded"}))

        with pytest.raises(TTSError) as exc_info:
            await PollyClient().generate(_params(), make_context(stub))

        assert exc_info.value.code is ErrorCode.RATE_LIMITED
        assert exc_info.value.status == 429


class TestValidateParams:
    @pytest.mark.parametrize(
        ("params", "message"),
        [
            (_params(text=""), "Text cannot be empty"),
            (_params(text="a" * 3001), "Text exceeds maximum length of 3000 characters"),
            (_params(voice="Nobody"), "Invalid voice: Nobody"),
            (
                _params(model="generative"),
                'Invalid model/engine: generative (expected "standard" or "neural")',
            ),
            (_params(format="aac"), "Invalid format: aac (supported: mp3, ogg_vorbis, pcm)"),
        ],
    )
    def test_invalid(self, params, message):
        with pytest.raises(TTSError) as exc_info:
            PollyClient().validate_params(params)

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
        assert exc_info.value.message == message

    def test_valid(self):
        PollyClient().validate_params(_params(voice="Matthew", model="neural", format="ogg_vorbis"))


class TestCatalog:
    def test_capabilities(self):
        caps = PollyClient().capabilities()
        assert caps.max_text_length == 3000
        assert caps.sample_rates == (8000, 16000, 22050)

    def test_voice_locales(self):
        locales = {voice.locale for voice in PollyClient().voices()}
        assert locales == {"tr-TR", "en-GB", "de-DE", "en-US"}
