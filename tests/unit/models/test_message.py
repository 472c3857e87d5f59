# -*- coding: utf-8 -*-
"""Unit tests for Message payload building."""

from __future__ import annotations

import pytest
from telegram import InlineKeyboardButton
from telegram.constants import ParseMode

from restaurant_notifications.models import Message


def test_create_defaults_to_markdown() -> None:
    message = Message.create("*bold*")

    assert message.parse_mode is ParseMode.MARKDOWN
    assert message.to_payload("42") == {
        "chat_id": "42",
        "disable_notification": False,
        "parse_mode": "Markdown",
        "text": "*bold*",
    }


def test_create_accepts_string_parse_mode() -> None:
    message = Message.create("<b>bold</b>", parse_mode="HTML")

    assert message.parse_mode is ParseMode.HTML


@pytest.mark.parametrize(
    ("value", "expected"),
    [("html", ParseMode.HTML), ("markdown", ParseMode.MARKDOWN), ("MARKDOWNV2", ParseMode.MARKDOWN_V2)],
)
def test_create_matches_parse_mode_case_insensitively(value: str, expected: ParseMode) -> None:
    assert Message.create("x", parse_mode=value).parse_mode is expected


def test_create_rejects_unknown_parse_mode() -> None:
    with pytest.raises(ValueError, match="Unsupported parse mode 'rtf'"):
        Message.create("x", parse_mode="rtf")


def test_plain_message_omits_parse_mode() -> None:
    payload = Message.plain("hello").to_payload("42")

    assert "parse_mode" not in payload


def test_keyboard_accepts_dicts_and_buttons() -> None:
    message = Message.create(
        "Pilih",
        keyboard=[
            [{"text": "Buka", "url": "https://example.com/orders/1"}],
            [InlineKeyboardButton(text="OK", callback_data="ok")],
        ],
    )

    markup = message.to_payload("42")["reply_markup"]

    assert markup["inline_keyboard"][0][0] == {"text": "Buka", "url": "https://example.com/orders/1"}
    assert markup["inline_keyboard"][1][0] == {"text": "OK", "callback_data": "ok"}


def test_keyboard_button_requires_text() -> None:
    with pytest.raises(ValueError):
        Message.create("Pilih", keyboard=[[{"url": "https://example.com"}]])


def test_media_payload_uses_caption_only_when_text_present() -> None:
    with_caption = Message.create("Struk").to_media_payload("42", "photo", "https://x/y.jpg")
    without_caption = Message.create("").to_media_payload("42", "document", "https://x/y.pdf")

    assert with_caption["photo"] == "https://x/y.jpg"
    assert with_caption["caption"] == "Struk"
    assert without_caption["document"] == "https://x/y.pdf"
    assert "caption" not in without_caption
    assert "text" not in without_caption
