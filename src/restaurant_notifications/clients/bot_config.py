# -*- coding: utf-8 -*-
"""Bot credentials and identity.

BotConfig is resolved once from settings and injected into the API client and
sender; nothing in the send path reads process state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from restaurant_notifications.config import TelegramSettings
from restaurant_notifications.utils import mask_token, validate_bot_token


@dataclass(frozen=True, slots=True)
class BotConfig:
    """Resolved bot credentials. is_configured=False disables all sends."""

    is_configured: bool
    bot_token: Optional[str] = None
    bot_username: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: TelegramSettings) -> BotConfig:
        token = (settings.bot_token or "").strip()
        if not token:
            return cls(is_configured=False, bot_username=settings.bot_username)
        configured = validate_bot_token(token) if settings.validate_token_format else True
        return cls(
            is_configured=configured,
            bot_token=token,
            bot_username=settings.bot_username,
        )

    @classmethod
    def unconfigured(cls) -> BotConfig:
        return cls(is_configured=False)

    def __repr__(self) -> str:
        return (
            f"BotConfig(is_configured={self.is_configured}, "
            f"bot_token={mask_token(self.bot_token)!r}, bot_username={self.bot_username!r})"
        )


@dataclass(frozen=True, slots=True)
class BotInfo:
    """Subset of the getMe result."""

    id: int
    is_bot: bool
    first_name: str
    username: Optional[str] = None
    can_join_groups: bool = False
    can_read_all_group_messages: bool = False
    supports_inline_queries: bool = False

    @classmethod
    def from_api(cls, result: Mapping[str, Any]) -> BotInfo:
        return cls(
            id=int(result["id"]),
            is_bot=bool(result.get("is_bot", True)),
            first_name=str(result.get("first_name", "")),
            username=result.get("username"),
            can_join_groups=bool(result.get("can_join_groups", False)),
            can_read_all_group_messages=bool(result.get("can_read_all_group_messages", False)),
            supports_inline_queries=bool(result.get("supports_inline_queries", False)),
        )
