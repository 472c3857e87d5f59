# -*- coding: utf-8 -*-
"""In-memory delivery log repository (append-only lists)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from restaurant_notifications.models.delivery import BroadcastSummary, DeliveryRecord
from restaurant_notifications.persistence.repositories.interfaces.delivery_log_repository import (
    IDeliveryLogRepository,
)


class InMemoryDeliveryLogRepository(IDeliveryLogRepository):
    """In-memory implementation of IDeliveryLogRepository."""

    def __init__(self) -> None:
        """Initialize empty record and broadcast logs."""
        self._records: list[DeliveryRecord] = []
        self._broadcasts: list[BroadcastSummary] = []

    async def add_record(self, record: DeliveryRecord) -> None:
        self._records.append(record)

    async def add_broadcast(self, summary: BroadcastSummary) -> None:
        self._broadcasts.append(summary)

    async def list_records(
        self,
        *,
        chat_id: Optional[str] = None,
        since: Optional[datetime] = None,
        success: Optional[bool] = None,
    ) -> list[DeliveryRecord]:
        """Return records matching every given filter, oldest first."""
        matches = [
            r
            for r in self._records
            if (chat_id is None or r.chat_id == chat_id)
            and (since is None or r.created_at >= since)
            and (success is None or r.success is success)
        ]
        return sorted(matches, key=lambda r: r.created_at)

    async def list_broadcasts(self, *, since: Optional[datetime] = None) -> list[BroadcastSummary]:
        matches = [b for b in self._broadcasts if since is None or b.created_at >= since]
        return sorted(matches, key=lambda b: b.created_at)
