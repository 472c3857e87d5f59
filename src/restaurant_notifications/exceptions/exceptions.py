"""Custom exceptions for notification delivery."""

from __future__ import annotations


class NotificationError(Exception):
    """Base exception for notification delivery errors."""

    pass


class MissingRequiredConfigError(NotificationError):
    """Raised when a required configuration value is missing."""

    pass


class TelegramTransportError(NotificationError):
    """Raised when a Bot API call fails below the provider protocol (network, timeout, bad payload)."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.status_code = status_code
        self.cause = cause


class UnknownNotificationTypeError(NotificationError):
    """Raised when no message template exists for a notification type."""

    def __init__(self, notification_type: str) -> None:
        super().__init__(f"Unknown notification type: {notification_type}")
        self.notification_type = notification_type
