# -*- coding: utf-8 -*-
"""Process-wide bubus bus carrying notification triggers.

Producers dispatch NotificationRequestedEvent / BroadcastRequestedEvent;
NotificationDispatcher subscribes on start().
"""

from __future__ import annotations

from bubus import EventBus  # type: ignore[import-untyped]

BUS_NAME = "RestaurantNotifications"

_event_bus: EventBus | None = None


def create_event_bus(name: str = BUS_NAME, *, max_history_size: int = 100) -> EventBus:
    """Build a standalone bus. No write-ahead log: pending triggers do not survive a restart."""
    return EventBus(name=name, max_history_size=max_history_size, wal_path=None)


def get_event_bus() -> EventBus:
    """Return the shared bus, creating it on first use."""
    global _event_bus
    if _event_bus is None:
        _event_bus = create_event_bus()
    return _event_bus


def set_event_bus(bus: EventBus | None) -> None:
    """Replace the shared bus (tests, DI). None drops it so the next get creates a fresh one."""
    global _event_bus
    _event_bus = bus
