# -*- coding: utf-8 -*-
"""Per-chat sliding-window rate limiter backed by the delivery log."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Optional

import structlog

from restaurant_notifications.utils import mask_chat_id

if TYPE_CHECKING:
    from restaurant_notifications.persistence.repositories.interfaces import (
        IDeliveryLogRepository,
    )


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    retry_after_seconds: Optional[int] = None


class RateLimiter:
    """Soft per-chat messages-per-window ceiling.

    Counts successful DeliveryRecords for the chat inside the trailing window.
    Best effort: concurrent sends may both read the count before either
    writes. A failing read allows the send; the provider's own 429 is the
    authoritative backstop.
    """

    def __init__(
        self,
        repository: IDeliveryLogRepository,
        *,
        messages_per_window: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], datetime] = _utc_now,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._repository = repository
        self._limit = messages_per_window
        self._window = timedelta(seconds=window_seconds)
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def check(self, chat_id: str) -> RateLimitDecision:
        """Decide whether a message may be sent to chat_id now. No side effects."""
        now = self._clock()
        try:
            recent = await self._repository.list_records(
                chat_id=chat_id,
                since=now - self._window,
                success=True,
            )
        except Exception as e:
            self._logger.warning(
                "rate_limit_check_failed_allowing",
                chat_id_masked=mask_chat_id(chat_id),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return RateLimitDecision(allowed=True)

        if len(recent) < self._limit:
            return RateLimitDecision(allowed=True)

        oldest = min(r.created_at for r in recent)
        remaining = (oldest + self._window - now).total_seconds()
        retry_after = max(math.ceil(remaining), 1)
        self._logger.debug(
            "rate_limit_exceeded",
            chat_id_masked=mask_chat_id(chat_id),
            recent_count=len(recent),
            limit=self._limit,
            retry_after_seconds=retry_after,
        )
        return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)
