# -*- coding: utf-8 -*-
"""Utility modules."""

from restaurant_notifications.utils.validation import (
    mask_chat_id,
    mask_token,
    validate_bot_token,
)

__all__ = ["mask_chat_id", "mask_token", "validate_bot_token"]
