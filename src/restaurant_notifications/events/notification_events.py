# -*- coding: utf-8 -*-
"""Notification trigger events.

Emitted by order, payment, stock, attendance, shift, leave, overtime and
payroll producers; handled by NotificationDispatcher.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from bubus import BaseEvent  # type: ignore[import-untyped]
from pydantic import BaseModel, Field


class BroadcastRecipient(BaseModel):
    """One broadcast target as supplied by the producer."""

    chat_id: str
    recipient_name: str = "Direct Chat"
    recipient_type: str = "employee"


class NotificationRequestedEvent(BaseEvent[None]):
    """Deliver one templated notification to a single chat.

    chat_id=None targets the configured owner chat.
    """

    notification_type: str
    template_data: dict[str, Any] = Field(default_factory=dict)
    chat_id: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_type: str = "direct"
    priority: Literal["low", "normal", "high", "urgent"] = "normal"
    text: Optional[str] = None
    """Pre-rendered text; skips the template when set."""


class BroadcastRequestedEvent(BaseEvent[None]):
    """Deliver one templated notification to many chats."""

    notification_type: str
    recipients: list[BroadcastRecipient]
    template_data: dict[str, Any] = Field(default_factory=dict)
    priority: Literal["low", "normal", "high", "urgent"] = "normal"
    text: Optional[str] = None
