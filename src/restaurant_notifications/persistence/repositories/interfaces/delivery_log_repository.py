# -*- coding: utf-8 -*-
"""Abstract interface for delivery audit storage (in-memory, DB, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from restaurant_notifications.models.delivery import BroadcastSummary, DeliveryRecord


class IDeliveryLogRepository(ABC):
    """Append-only store for DeliveryRecord and BroadcastSummary rows.

    Mirrors the telegram_notifications / telegram_broadcasts tables. Rows are
    never updated or deleted through this interface.
    """

    @abstractmethod
    async def add_record(self, record: DeliveryRecord) -> None:
        """Append one per-send record."""
        ...

    @abstractmethod
    async def add_broadcast(self, summary: BroadcastSummary) -> None:
        """Append one per-broadcast summary."""
        ...

    @abstractmethod
    async def list_records(
        self,
        *,
        chat_id: Optional[str] = None,
        since: Optional[datetime] = None,
        success: Optional[bool] = None,
    ) -> list[DeliveryRecord]:
        """Return records matching every given filter, oldest first.

        since is inclusive (created_at >= since).
        """
        ...

    @abstractmethod
    async def list_broadcasts(self, *, since: Optional[datetime] = None) -> list[BroadcastSummary]:
        """Return broadcast summaries, oldest first."""
        ...
