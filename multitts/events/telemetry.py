"""Telemetry emitter with named helpers for every multitts event.

Each helper builds a ``TelemetryEvent`` and pushes it onto the event bus.
Emission is fire-and-forget: a failing bus is logged and never interrupts
generation. Every event is also logged at DEBUG level.
"""

import logging
import time
from typing import Any

from multitts.events.event_bus import EventBus
from multitts.events.types import EventName, TelemetryEvent

logger = logging.getLogger(__name__)


class Telemetry:
    """Emits multitts telemetry events onto an ``EventBus``."""

    def __init__(self, bus: EventBus[TelemetryEvent] | None = None) -> None:
        self._bus: EventBus[TelemetryEvent] = bus if bus is not None else EventBus()

    @property
    def bus(self) -> EventBus[TelemetryEvent]:
        """The underlying event bus; subscribe to it to observe events."""
        return self._bus

    def emit(
        self,
        name: EventName,
        measurements: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Build and emit a single event. Never raises."""
        try:
            event = TelemetryEvent(
                type=name,
                measurements=measurements or {},
                metadata=metadata or {},
            )
            logger.debug(
                "telemetry %s measurements=%s metadata=%s",
                name.value,
                event.measurements,
                event.metadata,
            )
            self._bus.emit(event)
        except Exception:
            logger.warning("Failed to emit telemetry event %s", name.value, exc_info=True)

    # ------------------------------------------------------------------
    # generate.*
    # ------------------------------------------------------------------

    def generate_start(self, **metadata: Any) -> None:
        self.emit(EventName.GENERATE_START, {"system_time": time.time()}, metadata)

    def generate_stop(self, duration_ms: float, **metadata: Any) -> None:
        self.emit(EventName.GENERATE_STOP, {"duration": duration_ms}, metadata)

    def generate_error(self, duration_ms: float, error: Any, **metadata: Any) -> None:
        logger.warning("Generation failed after %.1f ms: %r", duration_ms, error)
        self.emit(
            EventName.GENERATE_ERROR,
            {"duration": duration_ms},
            {**metadata, "error": error},
        )

    def generate_exception(
        self, kind: str, error: BaseException, **metadata: Any
    ) -> None:
        """Report an unexpected fault. The stacktrace travels with the exception."""
        self.emit(
            EventName.GENERATE_EXCEPTION,
            {"system_time": time.time()},
            {**metadata, "kind": kind, "error": error, "stacktrace": error.__traceback__},
        )

    # ------------------------------------------------------------------
    # http / retry / text
    # ------------------------------------------------------------------

    def http_request(self, duration_ms: float, status_code: int, **metadata: Any) -> None:
        self.emit(
            EventName.HTTP_REQUEST,
            {"duration": duration_ms, "status_code": status_code},
            metadata,
        )

    def retry_attempt(self, attempt: int, **metadata: Any) -> None:
        logger.warning(
            "Retrying after attempt %d (delay=%s ms, error=%s)",
            attempt,
            metadata.get("delay"),
            metadata.get("error"),
        )
        self.emit(
            EventName.RETRY_ATTEMPT,
            {"system_time": time.time()},
            {**metadata, "attempt": attempt},
        )

    def text_split(self, chunks: int, **metadata: Any) -> None:
        self.emit(
            EventName.TEXT_SPLIT,
            {"chunks": chunks, "system_time": time.time()},
            metadata,
        )


default_telemetry = Telemetry()
