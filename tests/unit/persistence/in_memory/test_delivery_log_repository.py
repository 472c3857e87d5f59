# -*- coding: utf-8 -*-
"""Unit tests for InMemoryDeliveryLogRepository."""

from __future__ import annotations

from datetime import datetime, timedelta

from restaurant_notifications.models.delivery import BroadcastSummary, DeliveryRecord
from restaurant_notifications.persistence.repositories.in_memory.delivery_log_repository import (
    InMemoryDeliveryLogRepository,
)


async def test_list_records_returns_oldest_first(
    repository: InMemoryDeliveryLogRepository,
    now_utc: datetime,
) -> None:
    newer = DeliveryRecord.create("1", "order_ready", True, created_at=now_utc)
    older = DeliveryRecord.create("1", "order_ready", True, created_at=now_utc - timedelta(minutes=1))

    await repository.add_record(newer)
    await repository.add_record(older)

    assert await repository.list_records() == [older, newer]


async def test_list_records_filters_combine(
    repository: InMemoryDeliveryLogRepository,
    now_utc: datetime,
) -> None:
    match = DeliveryRecord.create("1", "order_ready", True, created_at=now_utc)
    await repository.add_record(match)
    await repository.add_record(DeliveryRecord.create("2", "order_ready", True, created_at=now_utc))
    await repository.add_record(DeliveryRecord.create("1", "order_ready", False, created_at=now_utc))
    await repository.add_record(
        DeliveryRecord.create("1", "order_ready", True, created_at=now_utc - timedelta(hours=1))
    )

    listed = await repository.list_records(
        chat_id="1", since=now_utc - timedelta(minutes=5), success=True
    )

    assert listed == [match]


async def test_since_is_inclusive(
    repository: InMemoryDeliveryLogRepository,
    now_utc: datetime,
) -> None:
    record = DeliveryRecord.create("1", "order_ready", True, created_at=now_utc)
    await repository.add_record(record)

    assert await repository.list_records(since=now_utc) == [record]


async def test_list_broadcasts_filters_by_since(
    repository: InMemoryDeliveryLogRepository,
    now_utc: datetime,
) -> None:
    old = BroadcastSummary.create(
        "broadcast",
        total_recipients=1,
        successful_sends=1,
        failed_sends=0,
        success_rate=100,
        created_at=now_utc - timedelta(days=1),
    )
    recent = BroadcastSummary.create(
        "broadcast",
        total_recipients=2,
        successful_sends=1,
        failed_sends=1,
        success_rate=50,
        created_at=now_utc,
    )
    await repository.add_broadcast(recent)
    await repository.add_broadcast(old)

    assert await repository.list_broadcasts() == [old, recent]
    assert await repository.list_broadcasts(since=now_utc - timedelta(hours=1)) == [recent]
