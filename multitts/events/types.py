"""Pydantic models for multitts telemetry events."""

import time
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class EventName(str, Enum):
    """Fixed vocabulary of telemetry events emitted by multitts."""

    GENERATE_START = "generate.start"
    GENERATE_STOP = "generate.stop"
    GENERATE_ERROR = "generate.error"
    GENERATE_EXCEPTION = "generate.exception"
    HTTP_REQUEST = "http.request"
    RETRY_ATTEMPT = "retry.attempt"
    TEXT_SPLIT = "text.split"


class TelemetryEvent(BaseModel):
    """A single telemetry event flowing through the event bus.

    ``measurements`` holds numeric values (durations in milliseconds, counts,
    status codes); ``metadata`` holds descriptive context such as the
    provider name, text length or the sanitized error.
    """

    type: EventName
    timestamp: float = Field(default_factory=time.time)
    event_id: str = Field(default_factory=lambda: str(uuid4()))
    measurements: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
