from multitts.events.event_bus import EventBus
from multitts.events.telemetry import Telemetry, default_telemetry
from multitts.events.types import EventName, TelemetryEvent

__all__ = ["EventBus", "EventName", "Telemetry", "TelemetryEvent", "default_telemetry"]
