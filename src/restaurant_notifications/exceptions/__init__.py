"""Exceptions subpackage."""

from restaurant_notifications.exceptions.exceptions import (
    MissingRequiredConfigError,
    NotificationError,
    TelegramTransportError,
    UnknownNotificationTypeError,
)

__all__ = [
    "MissingRequiredConfigError",
    "NotificationError",
    "TelegramTransportError",
    "UnknownNotificationTypeError",
]
