"""multitts: one async API over several text-to-speech vendors."""

from multitts.config import Config, EnvVar
from multitts.errors import ConfigError, ErrorCode, TTSError
from multitts.events import EventName, Telemetry, TelemetryEvent, default_telemetry
from multitts.tts.client import (
    TTSClient,
    capabilities,
    generate,
    languages,
    models,
    providers,
    stream,
    voices,
)
from multitts.tts.registry import ProviderRegistry
from multitts.tts.types import GenerationRequest, ProviderName, RetryPolicy

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "EnvVar",
    "ErrorCode",
    "EventName",
    "GenerationRequest",
    "ProviderName",
    "ProviderRegistry",
    "RetryPolicy",
    "TTSClient",
    "TTSError",
    "Telemetry",
    "TelemetryEvent",
    "capabilities",
    "default_telemetry",
    "generate",
    "languages",
    "models",
    "providers",
    "stream",
    "voices",
]
