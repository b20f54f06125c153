"""Tests for multitts.tts.types: request validation and catalog models."""

import pytest
from pydantic import ValidationError

from multitts.errors import ErrorCode, TTSError
from multitts.tts.types import (
    GenerationRequest,
    ProviderCapabilities,
    ProviderName,
    RetryPolicy,
    VoiceInfo,
    validate_request,
)


# ---------------------------------------------------------------------------
# GenerationRequest
# ---------------------------------------------------------------------------


class TestGenerationRequestDefaults:
    """A minimal request gets the documented defaults."""

    def test_defaults(self):
        request = validate_request({"provider": "openai", "text": "Hello"})

        assert request.provider is ProviderName.OPENAI
        assert request.format == "mp3"
        assert request.sample_rate == 22050
        assert request.speed == 1.0
        assert request.pitch == 0.0
        assert request.voice is None
        assert request.model is None
        assert request.api_key is None
        assert request.provider_opts == {}
        assert request.retry_opts == RetryPolicy()

    def test_retry_policy_defaults(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.initial_delay == 1000
        assert policy.max_delay == 10_000
        assert policy.backoff_factor == 2.0
        assert policy.retryable_errors == frozenset()

    def test_provider_enum_accepted(self):
        request = validate_request({"provider": ProviderName.POLLY, "text": "Hi"})
        assert request.provider is ProviderName.POLLY

    def test_retry_opts_from_mapping(self):
        request = validate_request(
            {"provider": "polly", "text": "Hi", "retry_opts": {"max_attempts": 1}}
        )
        assert request.retry_opts.max_attempts == 1
        assert request.retry_opts.initial_delay == 1000

    def test_request_is_immutable(self):
        request = validate_request({"provider": "openai", "text": "Hello"})
        with pytest.raises(ValidationError):
            request.text = "changed"


class TestValidateRequestErrors:
    """validate_request() converts every schema problem into validation_error."""

    @pytest.mark.parametrize(
        ("params", "field"),
        [
            ({"provider": "nope", "text": "hi"}, "provider"),
            ({"text": "hi"}, "provider"),
            ({"provider": "openai"}, "text"),
            ({"provider": "openai", "text": ""}, "text"),
            ({"provider": "openai", "text": "   "}, "text"),
            ({"provider": "openai", "text": 42}, "text"),
            ({"provider": "openai", "text": "hi", "format": "mp4"}, "format"),
            ({"provider": "openai", "text": "hi", "sample_rate": 0}, "sample_rate"),
            ({"provider": "openai", "text": "hi", "unknown": 1}, "unknown"),
            (
                {"provider": "openai", "text": "hi", "retry_opts": {"max_attempts": -1}},
                "retry_opts",
            ),
        ],
    )
    def test_invalid_params(self, params, field):
        with pytest.raises(TTSError) as exc_info:
            validate_request(params)

        error = exc_info.value
        assert error.code is ErrorCode.VALIDATION_ERROR
        assert field in error.message

    def test_provider_is_reported_when_known(self):
        with pytest.raises(TTSError) as exc_info:
            validate_request({"provider": "nope", "text": "hi"})
        assert exc_info.value.provider == "nope"

    def test_blank_text_message(self):
        with pytest.raises(TTSError) as exc_info:
            validate_request({"provider": "openai", "text": "  "})
        assert "text cannot be empty" in exc_info.value.message


class TestProviderParams:
    """provider_params() merges provider_opts on top of the request fields."""

    def test_excludes_provider_and_provider_opts(self):
        request = validate_request({"provider": "openai", "text": "Hi", "voice": "nova"})
        params = request.provider_params()

        assert "provider" not in params
        assert "provider_opts" not in params
        assert params["text"] == "Hi"
        assert params["voice"] == "nova"

    def test_provider_opts_win(self):
        request = validate_request(
            {
                "provider": "elevenlabs",
                "text": "Hi",
                "api_key": "top-level",
                "provider_opts": {"api_key": "from-opts", "stability": 0.4},
            }
        )
        params = request.provider_params()

        assert params["api_key"] == "from-opts"
        assert params["stability"] == 0.4


# ---------------------------------------------------------------------------
# Catalog models
# ---------------------------------------------------------------------------


class TestCatalogModels:
    """Catalog entries are plain frozen models."""

    def test_unbounded_capabilities(self):
        caps = ProviderCapabilities(
            streaming=False, formats=("mp3",), sample_rates=(22050,), max_text_length=None
        )
        assert caps.max_text_length is None

    def test_voice_gender_is_restricted(self):
        with pytest.raises(ValidationError):
            VoiceInfo(id="v", name="V", gender="robot", language="en")


class TestProviderName:
    """ProviderName behaves like a str enum."""

    def test_values(self):
        assert [p.value for p in ProviderName] == ["openai", "elevenlabs", "polly"]
        assert ProviderName.OPENAI == "openai"
