# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Outbound domain event queue.

Services call ``emit()`` after a successful commit. Emission is a
non-blocking put onto a bounded queue: it never waits and never raises,
so a slow or absent subscriber cannot fail a mutation. A full queue drops
the event with a warning.

A single dispatcher task drains the queue in FIFO order into the
EventBus, so the events of one entity are delivered in commit order.

Example:
    notifier = EventNotifier(queue_size=1000)
    await notifier.start()
    notifier.emit(EventTypes.Course.CREATED, {"id": "c1"})
    await notifier.stop()
"""

import asyncio
import contextlib
import logging
from typing import Any

from courseflow.infrastructure.events.bus import EventBus, EventData, get_event_bus
from courseflow.infrastructure.events.types import EventPatterns

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000


class EventNotifier:
    """Bounded outbound queue feeding an EventBus.

    Attributes:
        dropped: Number of events dropped because the queue was full.
    """

    def __init__(self, bus: EventBus | None = None, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        """Initialize the notifier.

        Args:
            bus: Bus to deliver events to. Defaults to the singleton bus.
            queue_size: Queue capacity.
        """
        self._bus = bus or get_event_bus()
        self._queue: asyncio.Queue[tuple[str, dict[str, Any]]] = asyncio.Queue(maxsize=queue_size)
        self._task: asyncio.Task[None] | None = None
        self.dropped = 0

    @property
    def bus(self) -> EventBus:
        """The bus events are delivered to."""
        return self._bus

    @property
    def is_running(self) -> bool:
        """Check if the dispatcher task is running."""
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Number of events waiting for delivery."""
        return self._queue.qsize()

    def emit(self, event_type: str, payload: dict[str, Any]) -> bool:
        """Enqueue an event for delivery.

        Args:
            event_type: Event type string.
            payload: JSON-compatible payload.

        Returns:
            True if the event was queued, False if it was dropped.
        """
        try:
            self._queue.put_nowait((event_type, payload))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Event queue full, dropping event: type=%s, dropped_total=%d",
                event_type,
                self.dropped,
            )
            return False
        return True

    async def _dispatch_loop(self) -> None:
        while True:
            event_type, payload = await self._queue.get()
            try:
                await self._bus.publish(event_type, payload)
            finally:
                self._queue.task_done()

    async def start(self) -> None:
        """Spawn the dispatcher task."""
        if self.is_running:
            logger.warning("Event notifier already running")
            return
        self._task = asyncio.create_task(self._dispatch_loop())
        logger.info("Event notifier started")

    async def stop(self) -> None:
        """Deliver everything queued, then cancel the dispatcher."""
        if self._task is None:
            return

        if not self._task.done():
            await self._queue.join()
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Event notifier stopped")

    async def drain(self) -> int:
        """Deliver all queued events in the calling task.

        For callers without a running dispatcher (tests, scripts).

        Returns:
            Number of events delivered.
        """
        delivered = 0
        while not self._queue.empty():
            event_type, payload = self._queue.get_nowait()
            try:
                await self._bus.publish(event_type, payload)
            finally:
                self._queue.task_done()
            delivered += 1
        return delivered


async def log_broadcast(event: EventData) -> None:
    """Broadcast sink that writes every domain event to the log.

    Stands in for a real-time transport; swap it by subscribing a
    different handler to EventPatterns.ALL.
    """
    logger.info(
        "Broadcast event: type=%s, id=%s, subject=%s",
        event.event_type,
        event.event_id,
        event.payload.get("id"),
    )


def register_log_broadcaster(bus: EventBus) -> None:
    """Subscribe the logging broadcaster to every event."""
    bus.subscribe(EventPatterns.ALL, log_broadcast)


_notifier: EventNotifier | None = None


def get_event_notifier() -> EventNotifier:
    """Get the singleton event notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = EventNotifier()
    return _notifier


def set_event_notifier(notifier: EventNotifier) -> None:
    """Install the notifier returned by get_event_notifier()."""
    global _notifier
    _notifier = notifier


def reset_event_notifier() -> None:
    """Reset the notifier singleton. Used by tests."""
    global _notifier
    _notifier = None
