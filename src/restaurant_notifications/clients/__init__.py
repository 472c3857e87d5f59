"""Telegram Bot API clients."""

from restaurant_notifications.clients.bot_config import BotConfig, BotInfo
from restaurant_notifications.clients.telegram_api import ApiResponse, TelegramApiClient

__all__ = [
    "ApiResponse",
    "BotConfig",
    "BotInfo",
    "TelegramApiClient",
]
