"""Configuration subpackage."""

from restaurant_notifications.config.config import (
    AppSettings,
    DeliverySettings,
    LoggingSettings,
    Settings,
    TelegramSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "DeliverySettings",
    "LoggingSettings",
    "Settings",
    "TelegramSettings",
    "get_settings",
]
