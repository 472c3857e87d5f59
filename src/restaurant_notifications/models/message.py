# -*- coding: utf-8 -*-
"""Outbound message payload (text, formatting and optional inline keyboard)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Literal, Optional, Union

from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.constants import ParseMode

ButtonSpec = Union[InlineKeyboardButton, Mapping[str, Any]]
MediaKind = Literal["photo", "document"]


def _to_button(spec: ButtonSpec) -> InlineKeyboardButton:
    if isinstance(spec, InlineKeyboardButton):
        return spec
    text = spec.get("text")
    if not text:
        raise ValueError("Inline keyboard button requires 'text'")
    return InlineKeyboardButton(
        text=str(text),
        url=spec.get("url"),
        callback_data=spec.get("callback_data"),
    )


def _parse_mode_of(value: ParseMode | str) -> ParseMode:
    """Resolve a parse mode, ignoring case ("html", "markdownv2")."""
    if isinstance(value, ParseMode):
        return value
    for mode in ParseMode:
        if mode.value.lower() == str(value).strip().lower():
            return mode
    allowed = ", ".join(m.value for m in ParseMode)
    raise ValueError(f"Unsupported parse mode {value!r}; expected one of {allowed}")


@dataclass(frozen=True)
class Message:
    """Immutable message handed to the sender.

    parse_mode None means plain text; otherwise Telegram renders Markdown/HTML.
    """

    text: str
    parse_mode: Optional[ParseMode] = ParseMode.MARKDOWN
    reply_markup: Optional[InlineKeyboardMarkup] = None
    disable_notification: bool = False

    @classmethod
    def create(
        cls,
        text: str,
        *,
        parse_mode: ParseMode | str | None = ParseMode.MARKDOWN,
        keyboard: Sequence[Sequence[ButtonSpec]] | None = None,
        disable_notification: bool = False,
    ) -> Message:
        """Build a message; string parse modes match case-insensitively ("html", "Markdown")."""
        mode = _parse_mode_of(parse_mode) if parse_mode is not None else None
        message = cls(text=text, parse_mode=mode, disable_notification=disable_notification)
        if keyboard:
            message = message.with_keyboard(keyboard)
        return message

    @classmethod
    def plain(cls, text: str) -> Message:
        return cls(text=text, parse_mode=None)

    def with_keyboard(self, rows: Sequence[Sequence[ButtonSpec]]) -> Message:
        """Return a copy carrying an inline keyboard built from button rows."""
        keyboard = [[_to_button(spec) for spec in row] for row in rows]
        return replace(self, reply_markup=InlineKeyboardMarkup(inline_keyboard=keyboard))

    def _common_fields(self, chat_id: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "disable_notification": self.disable_notification,
        }
        if self.parse_mode is not None:
            payload["parse_mode"] = self.parse_mode.value
        if self.reply_markup is not None:
            payload["reply_markup"] = self.reply_markup.to_dict()
        return payload

    def to_payload(self, chat_id: str) -> dict[str, Any]:
        """JSON body for sendMessage."""
        payload = self._common_fields(chat_id)
        payload["text"] = self.text
        return payload

    def to_media_payload(self, chat_id: str, kind: MediaKind, url: str) -> dict[str, Any]:
        """JSON body for sendPhoto/sendDocument; the text becomes the caption when non-empty."""
        payload = self._common_fields(chat_id)
        payload[kind] = url
        if self.text:
            payload["caption"] = self.text
        return payload
