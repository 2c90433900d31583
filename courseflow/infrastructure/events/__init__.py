# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain event infrastructure.

Components:
- EventBus: In-memory pub/sub with pattern matching
- EventTypes: Event type constants per entity
- EventNotifier: Bounded outbound queue drained into the bus

Architecture:
    Service (after commit) -> EventNotifier.emit() -> dispatcher -> EventBus -> subscribers
"""

from courseflow.infrastructure.events.bus import (
    EventBus,
    EventData,
    EventHandler,
    get_event_bus,
    reset_event_bus,
)
from courseflow.infrastructure.events.notifier import (
    EventNotifier,
    get_event_notifier,
    log_broadcast,
    register_log_broadcaster,
    reset_event_notifier,
    set_event_notifier,
)
from courseflow.infrastructure.events.types import EventPatterns, EventTypes

__all__ = [
    "EventBus",
    "EventData",
    "EventHandler",
    "get_event_bus",
    "reset_event_bus",
    "EventNotifier",
    "get_event_notifier",
    "log_broadcast",
    "register_log_broadcaster",
    "reset_event_notifier",
    "set_event_notifier",
    "EventPatterns",
    "EventTypes",
]
