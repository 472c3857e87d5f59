# -*- coding: utf-8 -*-
"""Unit tests for Destination normalization and dedupe."""

from __future__ import annotations

import pytest

from restaurant_notifications.models import Destination, RecipientType, unique_by_chat_id


def test_create_strips_chat_id_and_defaults_name() -> None:
    destination = Destination.create(" 123456 ")

    assert destination.chat_id == "123456"
    assert destination.recipient_name == "Direct Chat"
    assert destination.recipient_type is RecipientType.DIRECT


def test_create_accepts_integer_chat_id() -> None:
    assert Destination.create(-100123).chat_id == "-100123"


def test_create_rejects_empty_chat_id() -> None:
    with pytest.raises(ValueError):
        Destination.create("   ")


def test_unique_by_chat_id_keeps_first_occurrence() -> None:
    first = Destination.create("1", "Ani")
    duplicate = Destination.create("1", "Ani (group)")
    second = Destination.create("2", "Budi")

    assert unique_by_chat_id([first, duplicate, second]) == [first, second]
