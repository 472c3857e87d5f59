# -*- coding: utf-8 -*-
"""Unit tests for TelegramSender retry, classification and audit behavior."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

from restaurant_notifications.clients.bot_config import BotConfig, BotInfo
from restaurant_notifications.clients.telegram_api import ApiResponse
from restaurant_notifications.delivery.rate_limiter import RateLimitDecision
from restaurant_notifications.delivery.retry_policy import RetryPolicy
from restaurant_notifications.exceptions import TelegramTransportError
from restaurant_notifications.models import Destination, Message, SendOptions
from restaurant_notifications.persistence.repositories.in_memory.delivery_log_repository import (
    InMemoryDeliveryLogRepository,
)


async def test_send_success_writes_one_record(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
) -> None:
    sender, api = sender_factory(api_response(message_id=555))

    result = await sender.send(
        chat_id,
        "Order *A-1* ready",
        SendOptions(notification_type="order_ready", data={"order_number": "A-1"}),
    )

    assert result.success is True
    assert result.message_id == 555
    assert result.retry_count == 0
    api.call.assert_awaited_once()
    method, payload = api.call.await_args.args
    assert method == "sendMessage"
    assert payload["chat_id"] == chat_id
    assert payload["text"] == "Order *A-1* ready"
    assert payload["parse_mode"] == "Markdown"
    (record,) = await repository.list_records()
    assert record.success is True
    assert record.message_id == 555
    assert record.notification_type == "order_ready"
    assert record.data == {"order_number": "A-1"}


async def test_rate_limited_then_success_uses_provider_hint(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    repository: InMemoryDeliveryLogRepository,
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    sender, api = sender_factory(
        api_response(429, description="Too Many Requests: retry after 5", retry_after=5),
        api_response(message_id=556),
    )

    result = await sender.send(chat_id, "hello")

    assert result.success is True
    assert result.message_id == 556
    assert result.retry_count == 1
    assert api.call.await_count == 2
    sleep.assert_awaited_once_with(5.0)
    (record,) = await repository.list_records()
    assert record.success is True
    assert record.retry_count == 1


async def test_blocked_chat_fails_fast_without_retry(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    repository: InMemoryDeliveryLogRepository,
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    sender, api = sender_factory(
        api_response(403, description="Forbidden: bot was blocked by the user")
    )

    result = await sender.send(chat_id, "hello")

    assert result.success is False
    assert result.error == "Chat blocked or bot removed"
    assert result.error_type == "chat_blocked"
    assert result.chat_blocked is True
    assert result.retry_recommended is False
    assert result.retry_count == 0
    api.call.assert_awaited_once()
    sleep.assert_not_awaited()
    (record,) = await repository.list_records()
    assert record.success is False
    assert record.error_message == "Chat blocked or bot removed"


async def test_invalid_token_is_never_retried(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    sender, api = sender_factory(api_response(401, description="Unauthorized"))

    result = await sender.send(chat_id, "hello")

    assert result.error == "Invalid bot token"
    assert result.retry_recommended is False
    api.call.assert_awaited_once()
    sleep.assert_not_awaited()


async def test_unconfigured_bot_short_circuits(
    sender_factory: Callable[..., Any],
    repository: InMemoryDeliveryLogRepository,
    allow_all_limiter: Any,
    chat_id: str,
) -> None:
    sender, api = sender_factory(bot_config=BotConfig.unconfigured())

    result = await sender.send(chat_id, "hello")

    assert result.success is False
    assert result.error == "Bot not configured"
    assert result.retry_recommended is False
    api.call.assert_not_awaited()
    allow_all_limiter.check.assert_not_awaited()
    assert await repository.list_records() == []


async def test_exhausted_retries_recommend_resubmission(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    repository: InMemoryDeliveryLogRepository,
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    responses = [api_response(502, description="Bad Gateway") for _ in range(4)]
    sender, api = sender_factory(*responses)

    result = await sender.send(chat_id, "hello")

    assert result.success is False
    assert result.error == "Telegram server error: Bad Gateway"
    assert result.retry_recommended is True
    assert result.retry_count == 3
    assert api.call.await_count == 4
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0, 4.0]
    (record,) = await repository.list_records()
    assert record.success is False
    assert record.retry_count == 3


async def test_transport_error_is_retried(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    sender, api = sender_factory(
        TelegramTransportError("sendMessage request failed: ClientConnectorError"),
        api_response(message_id=7),
    )

    result = await sender.send(chat_id, "hello")

    assert result.success is True
    assert result.retry_count == 1
    sleep.assert_awaited_once_with(1.0)


async def test_transport_errors_exhaust_as_transient_network(
    sender_factory: Callable[..., Any],
    chat_id: str,
) -> None:
    errors = [TelegramTransportError("timeout") for _ in range(2)]
    sender, _ = sender_factory(*errors, retry_policy=RetryPolicy(max_retries=1))

    result = await sender.send(chat_id, "hello")

    assert result.success is False
    assert result.error_type == "transient_network"
    assert result.retry_recommended is True
    assert result.retry_count == 1


async def test_zero_retries_makes_single_attempt(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    sender, api = sender_factory(
        api_response(500, description="Internal Server Error"),
        retry_policy=RetryPolicy(max_retries=0),
    )

    result = await sender.send(chat_id, "hello")

    assert result.success is False
    assert result.retry_count == 0
    api.call.assert_awaited_once()
    sleep.assert_not_awaited()


async def test_rate_limit_wait_does_not_consume_retries(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    sleep: AsyncMock,
    chat_id: str,
) -> None:
    limiter = SimpleNamespace(
        check=AsyncMock(
            side_effect=[
                RateLimitDecision(allowed=False, retry_after_seconds=12),
                RateLimitDecision(allowed=True),
            ]
        )
    )
    sender, api = sender_factory(api_response(message_id=9), rate_limiter=limiter)

    result = await sender.send(chat_id, "hello")

    assert result.success is True
    assert result.retry_count == 0
    sleep.assert_awaited_once_with(12)
    api.call.assert_awaited_once()


async def test_send_accepts_destination_and_message(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
) -> None:
    sender, api = sender_factory(api_response(message_id=1))
    destination = Destination.create(" 123456789 ", "Budi")

    await sender.send(destination, Message.plain("plain text"))

    payload = api.call.await_args.args[1]
    assert payload["chat_id"] == "123456789"
    assert "parse_mode" not in payload


async def test_send_with_keyboard_includes_reply_markup(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    chat_id: str,
) -> None:
    sender, api = sender_factory(api_response(message_id=2))

    result = await sender.send_with_keyboard(
        chat_id,
        "Approve overtime?",
        [[{"text": "Approve", "callback_data": "ot:1:yes"}, {"text": "Reject", "callback_data": "ot:1:no"}]],
    )

    assert result.success is True
    markup = api.call.await_args.args[1]["reply_markup"]
    buttons = markup["inline_keyboard"][0]
    assert [b["text"] for b in buttons] == ["Approve", "Reject"]
    assert buttons[0]["callback_data"] == "ot:1:yes"


async def test_send_photo_uses_caption(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    chat_id: str,
) -> None:
    sender, api = sender_factory(api_response(message_id=3))

    await sender.send_photo(chat_id, "https://example.com/receipt.jpg", "Bukti transfer")

    method, payload = api.call.await_args.args
    assert method == "sendPhoto"
    assert payload["photo"] == "https://example.com/receipt.jpg"
    assert payload["caption"] == "Bukti transfer"


async def test_send_document_without_caption(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    chat_id: str,
) -> None:
    sender, api = sender_factory(api_response(message_id=4))

    await sender.send_document(chat_id, "https://example.com/payslip.pdf")

    method, payload = api.call.await_args.args
    assert method == "sendDocument"
    assert payload["document"] == "https://example.com/payslip.pdf"
    assert "caption" not in payload


async def test_send_test_message_records_type(
    sender_factory: Callable[..., Any],
    api_response: Callable[..., ApiResponse],
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
) -> None:
    sender, api = sender_factory(api_response(message_id=5))

    result = await sender.send_test_message(chat_id)

    assert result.success is True
    assert "Test Message" in api.call.await_args.args[1]["text"]
    (record,) = await repository.list_records()
    assert record.notification_type == "test_message"


async def test_test_connection_returns_bot_info(
    sender_factory: Callable[..., Any],
) -> None:
    sender, api = sender_factory()
    api.get_me.return_value = ApiResponse(
        status=200,
        body={"ok": True, "result": {"id": 42, "is_bot": True, "first_name": "Cafe", "username": "cafe_bot"}},
    )

    outcome = await sender.test_connection()

    assert outcome.success is True
    assert isinstance(outcome.result, BotInfo)
    assert outcome.result.username == "cafe_bot"
    assert outcome.response_time_ms is not None


async def test_test_connection_reports_provider_error(
    sender_factory: Callable[..., Any],
) -> None:
    sender, api = sender_factory()
    api.get_me.return_value = ApiResponse(
        status=401, body={"ok": False, "error_code": 401, "description": "Unauthorized"}
    )

    outcome = await sender.test_connection()

    assert outcome.success is False
    assert outcome.error == "Unauthorized"


async def test_single_call_operations_skip_when_unconfigured(
    sender_factory: Callable[..., Any],
) -> None:
    sender, api = sender_factory(bot_config=BotConfig.unconfigured())

    outcome = await sender.delete_message("123456789", 10)

    assert outcome.success is False
    assert outcome.error == "Bot not configured"
    api.delete_message.assert_not_awaited()


async def test_get_chat_member_transport_error_is_reported(
    sender_factory: Callable[..., Any],
) -> None:
    sender, api = sender_factory()
    api.get_chat_member.side_effect = TelegramTransportError("getChatMember request failed")

    outcome = await sender.get_chat_member("123456789", 77)

    assert outcome.success is False
    assert outcome.error == "getChatMember request failed"
