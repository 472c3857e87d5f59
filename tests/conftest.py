# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from restaurant_notifications.clients.bot_config import BotConfig
from restaurant_notifications.clients.telegram_api import ApiResponse
from restaurant_notifications.delivery.delivery_log import DeliveryLog
from restaurant_notifications.delivery.rate_limiter import RateLimitDecision
from restaurant_notifications.delivery.retry_policy import RetryPolicy
from restaurant_notifications.delivery.sender import TelegramSender
from restaurant_notifications.persistence.repositories.in_memory.delivery_log_repository import (
    InMemoryDeliveryLogRepository,
)

VALID_TOKEN = "123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaw1"


@pytest.fixture
def chat_id() -> str:
    """Default destination chat id used by tests."""
    return "987654321"


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def bot_token() -> str:
    """Token with a valid <bot_id>:<secret> shape."""
    return VALID_TOKEN


@pytest.fixture
def bot_config(bot_token: str) -> BotConfig:
    """Configured bot credentials."""
    return BotConfig(is_configured=True, bot_token=bot_token, bot_username="cafe_bot")


@pytest.fixture
def repository() -> InMemoryDeliveryLogRepository:
    """Fresh in-memory delivery log repository per test."""
    return InMemoryDeliveryLogRepository()


@pytest.fixture
def delivery_log(repository: InMemoryDeliveryLogRepository) -> DeliveryLog:
    return DeliveryLog(repository)


@pytest.fixture
def sleep() -> AsyncMock:
    """Sleep double: records requested delays without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def allow_all_limiter() -> Any:
    """Rate limiter double that always allows."""
    return SimpleNamespace(check=AsyncMock(return_value=RateLimitDecision(allowed=True)))


@pytest.fixture
def api_response() -> Callable[..., ApiResponse]:
    """Build Bot API responses: ok(message_id) or an error body."""

    def _build(
        status: int = 200,
        *,
        message_id: Optional[int] = None,
        error_code: Optional[int] = None,
        description: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> ApiResponse:
        if error_code is None and 200 <= status < 300:
            result: Any = {"message_id": message_id} if message_id is not None else True
            return ApiResponse(status=status, body={"ok": True, "result": result})
        body: dict[str, Any] = {"ok": False, "error_code": error_code or status}
        if description is not None:
            body["description"] = description
        if retry_after is not None:
            body["parameters"] = {"retry_after": retry_after}
        return ApiResponse(status=status, body=body)

    return _build


@pytest.fixture
def sender_factory(
    bot_config: BotConfig,
    delivery_log: DeliveryLog,
    allow_all_limiter: Any,
    sleep: AsyncMock,
) -> Callable[..., tuple[TelegramSender, Any]]:
    """Build TelegramSender over a fake API whose call() returns responses in order.

    Returns (sender, api) so tests can assert on api.call.
    """

    def _build(*responses: Any, **overrides: Any) -> tuple[TelegramSender, Any]:
        api = SimpleNamespace(
            call=AsyncMock(side_effect=list(responses)),
            get_me=AsyncMock(),
            delete_message=AsyncMock(),
            get_chat_member=AsyncMock(),
        )
        sender = TelegramSender(
            api_client=overrides.pop("api_client", api),
            bot_config=overrides.pop("bot_config", bot_config),
            rate_limiter=overrides.pop("rate_limiter", allow_all_limiter),
            delivery_log=overrides.pop("delivery_log", delivery_log),
            retry_policy=overrides.pop("retry_policy", RetryPolicy()),
            sleep=overrides.pop("sleep", sleep),
            **overrides,
        )
        return sender, api

    return _build

