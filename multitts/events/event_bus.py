"""In-process delivery of telemetry events to observers.

Observers call :meth:`EventBus.subscribe` and read events from the returned
``asyncio.Queue``. Publishing is synchronous so the text splitter and the
retry loop can publish without awaiting.
"""

import asyncio
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventBus(Generic[T]):
    """Copies every published event into each observer's bounded queue.

    An observer whose queue is full misses the event; generation is never
    held up by a slow observer.
    """

    def __init__(self, maxsize: int = 256) -> None:
        self._maxsize = maxsize
        self._queues: list[asyncio.Queue[T]] = []

    def subscribe(self) -> asyncio.Queue[T]:
        queue: asyncio.Queue[T] = asyncio.Queue(maxsize=self._maxsize)
        self._queues.append(queue)
        return queue

    def emit(self, event: T) -> None:
        for queue in self._queues:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    "Observer queue full (%d), dropping event %s",
                    self._maxsize,
                    getattr(event, "type", event),
                )
