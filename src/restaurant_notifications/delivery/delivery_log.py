# -*- coding: utf-8 -*-
"""DeliveryLog: fire-and-forget audit writes plus delivery statistics."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import structlog

from restaurant_notifications.models.delivery import BroadcastSummary, DeliveryRecord
from restaurant_notifications.models.results import DeliveryStats
from restaurant_notifications.utils import mask_chat_id

if TYPE_CHECKING:
    from restaurant_notifications.models.results import BroadcastResult
    from restaurant_notifications.persistence.repositories.interfaces import (
        IDeliveryLogRepository,
    )


def broadcast_success_rate(successes: int, total: int) -> int:
    """Percentage of successes, rounded half up; 0 when nothing was sent."""
    if total <= 0:
        return 0
    return math.floor(successes * 100 / total + 0.5)


class DeliveryLog:
    """Appends DeliveryRecord/BroadcastSummary rows without ever failing the caller.

    A write error is logged locally and discarded: audit loss must not turn a
    delivered notification (or the business operation behind it) into a failure.
    """

    def __init__(
        self,
        repository: IDeliveryLogRepository,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._repository = repository
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def log_send(
        self,
        chat_id: str,
        message_id: Optional[int],
        notification_type: str,
        data: Optional[dict[str, Any]] = None,
        *,
        success: bool = True,
        error_message: Optional[str] = None,
        retry_count: int = 0,
    ) -> None:
        """Append one per-send record; never raises."""
        try:
            record = DeliveryRecord.create(
                chat_id=chat_id,
                notification_type=notification_type,
                success=success,
                message_id=message_id,
                data=data,
                error_message=error_message,
                retry_count=retry_count,
            )
            await self._repository.add_record(record)
        except Exception as e:
            self._logger.exception(
                "delivery_log_write_failed",
                chat_id_masked=mask_chat_id(chat_id),
                notification_type=notification_type,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def log_broadcast(
        self,
        result: BroadcastResult,
        notification_type: str,
        data: Optional[dict[str, Any]] = None,
    ) -> None:
        """Append one per-broadcast summary; never raises."""
        try:
            summary = BroadcastSummary.create(
                notification_type=notification_type,
                total_recipients=result.total_recipients,
                successful_sends=len(result.successful_sends),
                failed_sends=len(result.failed_sends),
                success_rate=result.success_rate,
                data=data,
            )
            await self._repository.add_broadcast(summary)
        except Exception as e:
            self._logger.exception(
                "delivery_log_broadcast_write_failed",
                notification_type=notification_type,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def stats(self, since: datetime) -> DeliveryStats:
        """Counts of records created at or after since."""
        records = await self._repository.list_records(since=since)
        successful = sum(1 for r in records if r.success)
        types = sorted({r.notification_type for r in records})
        return DeliveryStats(
            total_sent=len(records),
            successful=successful,
            failed=len(records) - successful,
            success_rate=broadcast_success_rate(successful, len(records)),
            notification_types=types,
        )
