"""Validation and masking helpers for chat ids and bot tokens."""

from __future__ import annotations

import re
from typing import Any

# <bot_id>:<secret>, e.g. 123456789:ABCdefGHIjklMNOpqrsTUVwxyz0123456789
_BOT_TOKEN_PATTERN = re.compile(r"^\d{8,10}:[A-Za-z0-9_-]{35}$")


def validate_bot_token(token: Any) -> bool:
    """Return True if token has the shape of a Telegram bot token."""
    if not isinstance(token, str):
        return False
    return bool(_BOT_TOKEN_PATTERN.match(token))


def mask_chat_id(chat_id: Any) -> str:
    """Return a masked chat id for logging (e.g. 1234...6789)."""
    if chat_id is None:
        return "***"
    s = str(chat_id)
    if len(s) < 8:
        return "***"
    return f"{s[:4]}...{s[-4:]}"


def mask_token(token: str | None) -> str:
    """Return the bot id part of a token with the secret hidden."""
    if not token or ":" not in token:
        return "***"
    return f"{token.split(':', 1)[0]}:***"
