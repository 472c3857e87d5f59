# -*- coding: utf-8 -*-
"""Unit tests for the per-chat rate limiter."""

from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

from restaurant_notifications.delivery.rate_limiter import RateLimiter
from restaurant_notifications.models.delivery import DeliveryRecord
from restaurant_notifications.persistence.repositories.in_memory.delivery_log_repository import (
    InMemoryDeliveryLogRepository,
)


async def _seed(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    created: list[datetime],
    *,
    success: bool = True,
) -> None:
    for created_at in created:
        await repository.add_record(
            DeliveryRecord.create(
                chat_id=chat_id,
                notification_type="order_ready",
                success=success,
                created_at=created_at,
            )
        )


async def test_allows_when_below_limit(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    now_utc: datetime,
) -> None:
    await _seed(repository, chat_id, [now_utc - timedelta(seconds=i) for i in range(19)])
    limiter = RateLimiter(repository, messages_per_window=20, clock=lambda: now_utc)

    decision = await limiter.check(chat_id)

    assert decision.allowed is True
    assert decision.retry_after_seconds is None


async def test_denies_at_limit_with_positive_retry_after(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    now_utc: datetime,
) -> None:
    oldest = now_utc - timedelta(seconds=45)
    await _seed(repository, chat_id, [oldest] + [now_utc - timedelta(seconds=i) for i in range(19)])
    limiter = RateLimiter(repository, messages_per_window=20, clock=lambda: now_utc)

    decision = await limiter.check(chat_id)

    assert decision.allowed is False
    assert decision.retry_after_seconds == 15


async def test_retry_after_is_at_least_one_second(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    now_utc: datetime,
) -> None:
    await _seed(repository, chat_id, [now_utc - timedelta(seconds=60)] * 2)
    limiter = RateLimiter(repository, messages_per_window=2, clock=lambda: now_utc)

    decision = await limiter.check(chat_id)

    assert decision.allowed is False
    assert decision.retry_after_seconds == 1


async def test_records_outside_window_are_ignored(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    now_utc: datetime,
) -> None:
    await _seed(repository, chat_id, [now_utc - timedelta(seconds=61)] * 5)
    limiter = RateLimiter(repository, messages_per_window=5, clock=lambda: now_utc)

    decision = await limiter.check(chat_id)

    assert decision.allowed is True


async def test_failed_records_do_not_count(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    now_utc: datetime,
) -> None:
    await _seed(repository, chat_id, [now_utc] * 5, success=False)
    limiter = RateLimiter(repository, messages_per_window=5, clock=lambda: now_utc)

    decision = await limiter.check(chat_id)

    assert decision.allowed is True


async def test_other_chats_do_not_count(
    repository: InMemoryDeliveryLogRepository,
    chat_id: str,
    now_utc: datetime,
) -> None:
    await _seed(repository, "111111111", [now_utc] * 5)
    limiter = RateLimiter(repository, messages_per_window=5, clock=lambda: now_utc)

    decision = await limiter.check(chat_id)

    assert decision.allowed is True


async def test_fails_open_when_store_is_unavailable(chat_id: str) -> None:
    broken = SimpleNamespace(list_records=AsyncMock(side_effect=RuntimeError("db down")))
    limiter = RateLimiter(broken)  # type: ignore[arg-type]

    decision = await limiter.check(chat_id)

    assert decision.allowed is True
