# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the event bus and the outbound event notifier."""

import asyncio
import logging

import pytest

from courseflow.infrastructure.events import (
    EventBus,
    EventData,
    EventNotifier,
    EventPatterns,
    EventTypes,
    get_event_bus,
    get_event_notifier,
    log_broadcast,
    register_log_broadcaster,
    reset_event_bus,
    set_event_notifier,
)


class TestEventBus:
    """Tests for EventBus subscriptions and publishing."""

    @pytest.mark.asyncio
    async def test_exact_subscription(self):
        """Test delivery to an exact-type subscriber."""
        bus = EventBus()
        received: list[EventData] = []

        async def handler(event: EventData) -> None:
            received.append(event)

        bus.subscribe(EventTypes.Course.CREATED, handler)
        event = await bus.publish(EventTypes.Course.CREATED, {"id": "c1"})

        assert received == [event]
        assert event.payload == {"id": "c1"}
        assert event.to_dict()["event_type"] == "course.created"

    @pytest.mark.asyncio
    async def test_pattern_subscription(self):
        """Test wildcard patterns match by fnmatch."""
        bus = EventBus()
        received: list[str] = []

        async def handler(event: EventData) -> None:
            received.append(event.event_type)

        bus.subscribe(EventPatterns.ALL_DELETED, handler)
        await bus.publish(EventTypes.Course.DELETED, {"id": "c1"})
        await bus.publish(EventTypes.Course.CREATED, {"id": "c1"})
        await bus.publish(EventTypes.Submission.DELETED, {"id": "s1"})

        assert received == ["course.deleted", "submission.deleted"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_affect_others(self):
        """Test that one handler's exception is isolated."""
        bus = EventBus()
        received: list[str] = []

        async def broken(event: EventData) -> None:
            raise RuntimeError("boom")

        async def healthy(event: EventData) -> None:
            received.append(event.event_type)

        bus.subscribe(EventPatterns.ALL, broken)
        bus.subscribe(EventPatterns.ALL, healthy)

        await bus.publish(EventTypes.Enrollment.CREATED, {"id": "e1"})

        assert received == ["enrollment.created"]

    def test_unsubscribe(self):
        """Test removing a handler."""
        bus = EventBus()

        async def handler(event: EventData) -> None:
            pass

        bus.subscribe(EventPatterns.ALL_COURSE, handler)

        assert bus.unsubscribe(EventPatterns.ALL_COURSE, handler) is True
        assert bus.unsubscribe(EventPatterns.ALL_COURSE, handler) is False
        assert bus.get_stats()["total_handlers"] == 0

    @pytest.mark.asyncio
    async def test_stats(self):
        """Test subscription and publish counters."""
        bus = EventBus()

        async def handler(event: EventData) -> None:
            pass

        bus.subscribe(EventTypes.Course.CREATED, handler)
        bus.subscribe(EventPatterns.ALL, handler)
        await bus.publish(EventTypes.Course.CREATED, {})

        stats = bus.get_stats()
        assert stats["exact_subscriptions"] == 1
        assert stats["pattern_subscriptions"] == 1
        assert stats["total_handlers"] == 2
        assert stats["events_published"] == 1

    def test_singleton_reset(self):
        """Test that reset produces a fresh bus."""
        first = get_event_bus()
        assert get_event_bus() is first

        reset_event_bus()

        assert get_event_bus() is not first


class TestEventNotifier:
    """Tests for the bounded outbound queue."""

    @pytest.mark.asyncio
    async def test_drain_delivers_in_emit_order(self):
        """Test FIFO delivery of queued events."""
        bus = EventBus()
        notifier = EventNotifier(bus=bus, queue_size=10)
        received: list[str] = []

        async def handler(event: EventData) -> None:
            received.append(event.payload["id"])

        bus.subscribe(EventPatterns.ALL, handler)
        for i in range(5):
            assert notifier.emit(EventTypes.Course.UPDATED, {"id": str(i)}) is True

        assert notifier.pending == 5
        assert await notifier.drain() == 5
        assert received == ["0", "1", "2", "3", "4"]
        assert notifier.pending == 0

    def test_full_queue_drops_event(self, caplog):
        """Test that emit never blocks and drops when full."""
        notifier = EventNotifier(bus=EventBus(), queue_size=2)

        with caplog.at_level(logging.WARNING):
            assert notifier.emit(EventTypes.Course.CREATED, {"id": "1"}) is True
            assert notifier.emit(EventTypes.Course.CREATED, {"id": "2"}) is True
            assert notifier.emit(EventTypes.Course.CREATED, {"id": "3"}) is False

        assert notifier.dropped == 1
        assert notifier.pending == 2
        assert "dropping event" in caplog.text

    @pytest.mark.asyncio
    async def test_dispatcher_delivers_and_stops(self):
        """Test the background dispatcher flushes on stop."""
        bus = EventBus()
        notifier = EventNotifier(bus=bus)
        received: list[str] = []

        async def handler(event: EventData) -> None:
            await asyncio.sleep(0)
            received.append(event.event_type)

        bus.subscribe(EventPatterns.ALL_SUBMISSION, handler)
        await notifier.start()
        assert notifier.is_running is True

        notifier.emit(EventTypes.Submission.CREATED, {"id": "s1"})
        notifier.emit(EventTypes.Submission.GRADED, {"id": "s1"})
        await notifier.stop()

        assert received == ["submission.created", "submission.graded"]
        assert notifier.is_running is False

    @pytest.mark.asyncio
    async def test_dispatcher_survives_handler_error(self):
        """Test that a failing subscriber does not stop delivery."""
        bus = EventBus()
        notifier = EventNotifier(bus=bus)
        received: list[str] = []

        async def handler(event: EventData) -> None:
            if event.payload["id"] == "bad":
                raise ValueError("bad payload")
            received.append(event.payload["id"])

        bus.subscribe(EventPatterns.ALL, handler)
        await notifier.start()
        notifier.emit(EventTypes.Course.CREATED, {"id": "bad"})
        notifier.emit(EventTypes.Course.CREATED, {"id": "good"})
        await notifier.stop()

        assert received == ["good"]

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        """Test that stopping an idle notifier is a no-op."""
        notifier = EventNotifier(bus=EventBus())

        await notifier.stop()

        assert notifier.is_running is False

    def test_set_event_notifier(self):
        """Test installing a process-wide notifier."""
        notifier = EventNotifier(bus=EventBus())

        set_event_notifier(notifier)

        assert get_event_notifier() is notifier


class TestLogBroadcast:
    """Tests for the logging broadcaster."""

    @pytest.mark.asyncio
    async def test_broadcaster_logs_every_event(self, caplog):
        """Test that the broadcaster receives all events."""
        bus = EventBus()
        register_log_broadcaster(bus)

        with caplog.at_level(logging.INFO):
            await bus.publish(EventTypes.Assignment.CREATED, {"id": "a1"})
            await bus.publish(EventTypes.Enrollment.DELETED, {"id": "e1"})

        assert "type=assignment.created" in caplog.text
        assert "subject=e1" in caplog.text

    @pytest.mark.asyncio
    async def test_log_broadcast_direct(self, caplog):
        """Test the sink on a single event."""
        event = EventData(event_type=EventTypes.Submission.GRADED, payload={"id": "s1"})

        with caplog.at_level(logging.INFO):
            await log_broadcast(event)

        assert event.event_id in caplog.text
