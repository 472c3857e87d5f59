"""Destination: an external chat a notification is delivered to.

The chat id is opaque to this package; it is whatever the Bot API accepts
(numeric user/group id as a string, or @channelusername).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecipientType(str, Enum):
    """Who sits behind a chat id."""

    EMPLOYEE = "employee"
    OWNER = "owner"
    GROUP = "group"
    DIRECT = "direct"


@dataclass(frozen=True, slots=True)
class Destination:
    """Chat identifier plus a human-readable label for audit and broadcast results."""

    chat_id: str
    recipient_name: str = "Direct Chat"
    recipient_type: RecipientType | str = RecipientType.DIRECT

    @classmethod
    def create(
        cls,
        chat_id: str | int,
        recipient_name: str | None = None,
        recipient_type: RecipientType | str = RecipientType.DIRECT,
    ) -> Destination:
        """Normalize and validate a destination."""
        normalized = str(chat_id).strip()
        if not normalized:
            raise ValueError("chat_id must be non-empty")
        return cls(
            chat_id=normalized,
            recipient_name=(recipient_name or "").strip() or "Direct Chat",
            recipient_type=recipient_type,
        )


def unique_by_chat_id(destinations: list[Destination]) -> list[Destination]:
    """Drop repeated chat ids, keeping the first occurrence and input order."""
    seen: set[str] = set()
    unique: list[Destination] = []
    for destination in destinations:
        if destination.chat_id in seen:
            continue
        seen.add(destination.chat_id)
        unique.append(destination)
    return unique
