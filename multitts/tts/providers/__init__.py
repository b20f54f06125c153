from multitts.tts.providers.elevenlabs_client import ElevenLabsClient
from multitts.tts.providers.openai_client import OpenAIClient
from multitts.tts.providers.polly_client import PollyClient

__all__ = ["ElevenLabsClient", "OpenAIClient", "PollyClient"]
