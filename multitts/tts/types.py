"""Pydantic models for multitts requests, policies and provider catalogs."""

from enum import Enum
from typing import Any, Literal, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from multitts.errors import ErrorCode, TTSError


class ProviderName(str, Enum):
    """Closed set of providers a request may target."""

    OPENAI = "openai"
    ELEVENLABS = "elevenlabs"
    POLLY = "polly"


AudioFormat = Literal["mp3", "wav", "ogg_vorbis", "pcm", "opus", "aac", "flac"]


class RetryPolicy(BaseModel):
    """Retry configuration for a single provider call.

    ``max_attempts`` counts retries after the initial attempt, so the default
    of 3 allows up to 4 calls. Delays are in milliseconds. An empty
    ``retryable_errors`` set means every error code is retried.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: NonNegativeInt = 3
    initial_delay: NonNegativeInt = 1000
    max_delay: NonNegativeInt = 10_000
    backoff_factor: PositiveFloat = 2.0
    retryable_errors: frozenset[str] = frozenset()

    @field_validator("retryable_errors", mode="before")
    @classmethod
    def _codes_as_strings(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(v.value if isinstance(v, Enum) else v for v in value)
        return value


class GenerationRequest(BaseModel):
    """Validated parameters for one ``generate`` call. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: ProviderName
    text: StrictStr
    voice: str | None = None
    model: str | None = None
    format: AudioFormat = "mp3"
    sample_rate: PositiveInt = 22050
    speed: float = 1.0
    pitch: float = 0.0
    language: str | None = None

    # Per-request credential overrides
    api_key: str | None = None
    api_organization: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    region: str | None = None

    provider_opts: dict[str, Any] = Field(default_factory=dict)
    retry_opts: RetryPolicy = Field(default_factory=RetryPolicy)

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text cannot be empty")
        return value

    def provider_params(self) -> dict[str, Any]:
        """Return the params handed to a provider.

        All fields except ``provider`` and ``provider_opts``, with
        ``provider_opts`` entries overlaid on top so that caller-declared
        provider-specific keys win.
        """
        params = self.model_dump(exclude={"provider", "provider_opts"})
        params.update(self.provider_opts)
        return params


def validate_request(params: Mapping[str, Any]) -> GenerationRequest:
    """Build a ``GenerationRequest`` from raw caller params.

    Raises:
        TTSError: With code ``validation_error`` describing every invalid field.
    """
    try:
        return GenerationRequest.model_validate(dict(params))
    except ValidationError as exc:
        raise TTSError(
            ErrorCode.VALIDATION_ERROR,
            _format_validation_error(exc),
            provider=_provider_value(params.get("provider")),
        ) from exc


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err["loc"]) or "params"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def _provider_value(value: Any) -> str | None:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    return None


# ---------------------------------------------------------------------------
# Provider catalogs
# ---------------------------------------------------------------------------


class ProviderCapabilities(BaseModel):
    """Declared limits and features of a provider.

    ``max_text_length`` of None means the provider accepts unbounded text.
    """

    model_config = ConfigDict(frozen=True)

    streaming: bool
    formats: tuple[str, ...]
    sample_rates: tuple[int, ...]
    max_text_length: PositiveInt | None


class ModelInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    languages: tuple[str, ...] | None = None


class VoiceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    gender: Literal["male", "female", "neutral"] | None = None
    language: str
    locale: str | None = None


class LanguageInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    locale: str | None = None
