from multitts.tts.client import TTSClient
from multitts.tts.provider import ProviderContext, TTSProvider
from multitts.tts.registry import ProviderRegistry, default_registry
from multitts.tts.types import GenerationRequest, ProviderName, RetryPolicy

__all__ = [
    "GenerationRequest",
    "ProviderContext",
    "ProviderName",
    "ProviderRegistry",
    "RetryPolicy",
    "TTSClient",
    "TTSProvider",
    "default_registry",
]
