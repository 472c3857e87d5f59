"""Restaurant notifications: reliable Telegram delivery for restaurant operations."""

from restaurant_notifications.clients import TelegramApiClient
from restaurant_notifications.config import get_settings
from restaurant_notifications.delivery import Broadcaster, TelegramSender
from restaurant_notifications.DI import Container
from restaurant_notifications.services import NotificationDispatcher

__version__ = "0.0.1"
__all__ = [
    "Broadcaster",
    "Container",
    "NotificationDispatcher",
    "TelegramApiClient",
    "TelegramSender",
    "get_settings",
]
