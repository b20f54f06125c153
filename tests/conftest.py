"""Shared fixtures for multitts tests."""

import json

import httpx
import pytest

from multitts.config import Config
from multitts.events.event_bus import EventBus
from multitts.events.telemetry import Telemetry
from multitts.events.types import TelemetryEvent
from multitts.tts.provider import ProviderContext


class VendorStub:
    """Stands in for a vendor endpoint behind ``httpx.MockTransport``.

    Canned responses are replayed in order; the last one repeats once the
    list runs out. Every request is recorded for later assertions.
    """

    def __init__(self, responses: list[httpx.Response]) -> None:
        self._responses = responses or [httpx.Response(200, content=b"audio")]
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        canned = self._responses[min(len(self.requests), len(self._responses)) - 1]
        return httpx.Response(canned.status_code, headers=canned.headers, content=canned.content)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> dict:
        """Decode the JSON body of a recorded request."""
        return json.loads(self.requests[index].content)


@pytest.fixture
def event_bus() -> EventBus[TelemetryEvent]:
    """Return a fresh EventBus instance with a roomy queue for testing."""
    return EventBus(maxsize=64)


@pytest.fixture
def telemetry(event_bus: EventBus[TelemetryEvent]) -> Telemetry:
    """Return a Telemetry emitter wired to the test event bus."""
    return Telemetry(event_bus)


@pytest.fixture
def config() -> Config:
    """Return a Config with literal credentials so no env vars are needed."""
    return Config(
        {
            "openai": {
                "api_key": "sk-test",
                "endpoint_url": "https://openai.test/v1/audio/speech",
                "default_model": "tts-1",
                "default_voice": "nova",
                "default_format": "mp3",
            },
            "elevenlabs": {
                "api_key": "xi-test",
                "endpoint_url": "https://elevenlabs.test/v1/text-to-speech",
                "default_model": "eleven_flash_v2_5",
                "default_voice": "Xb7hH8MSUJpSbSDYk0k2",
                "default_format": "mp3",
            },
            "polly": {
                "access_key_id": "AKIDTEST",
                "secret_access_key": "secret-test",
                "region": "eu-west-1",
                "default_model": "standard",
                "default_voice": "Joanna",
                "default_format": "mp3",
            },
        }
    )


@pytest.fixture
def stub_vendor():
    """Return a factory building a ``VendorStub`` from canned responses."""

    def _make(*responses: httpx.Response) -> VendorStub:
        return VendorStub(list(responses))

    return _make


@pytest.fixture
async def make_context(config: Config, telemetry: Telemetry):
    """Return a factory building a ProviderContext on top of a VendorStub."""
    clients: list[httpx.AsyncClient] = []

    def _make(stub: VendorStub, cfg: Config | None = None) -> ProviderContext:
        http = httpx.AsyncClient(transport=stub.transport)
        clients.append(http)
        return ProviderContext(http=http, config=cfg or config, telemetry=telemetry)

    yield _make

    for http in clients:
        await http.aclose()
