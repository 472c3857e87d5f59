# -*- coding: utf-8 -*-
"""Event bus and event types."""

from restaurant_notifications.events.bus import create_event_bus, get_event_bus, set_event_bus
from restaurant_notifications.events.notification_events import (
    BroadcastRecipient,
    BroadcastRequestedEvent,
    NotificationRequestedEvent,
)

__all__ = [
    "BroadcastRecipient",
    "BroadcastRequestedEvent",
    "NotificationRequestedEvent",
    "create_event_bus",
    "get_event_bus",
    "set_event_bus",
]
