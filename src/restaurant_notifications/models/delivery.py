"""Delivery audit entities: per-send DeliveryRecord and per-broadcast BroadcastSummary.

Both are append-only. DeliveryRecord rows also back the per-chat rate limiter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal, Optional
from uuid import UUID, uuid4

Priority = Literal["low", "normal", "high", "urgent"]


class AttemptOutcome(str, Enum):
    """Outcome of a single provider call."""

    DELIVERED = "delivered"
    PROVIDER_ERROR = "provider_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True, slots=True)
class SendOptions:
    """Caller-supplied audit context for a send or broadcast."""

    notification_type: str = "manual"
    data: dict[str, Any] = field(default_factory=dict)
    priority: Priority = "normal"


@dataclass(frozen=True, slots=True)
class SendAttempt:
    """One HTTP call to the provider. Lives only for the duration of a send."""

    chat_id: str
    attempt: int
    """Zero-based retry index at the time of the call."""
    started_at: datetime
    outcome: AttemptOutcome
    error: Optional[str] = None
    error_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DeliveryRecord:
    """Terminal outcome of one send (success or final failure)."""

    id: UUID
    chat_id: str
    notification_type: str
    success: bool
    created_at: datetime
    message_id: Optional[int] = None
    data: dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    retry_count: int = 0

    @classmethod
    def create(
        cls,
        chat_id: str,
        notification_type: str,
        success: bool,
        *,
        message_id: Optional[int] = None,
        data: Optional[dict[str, Any]] = None,
        error_message: Optional[str] = None,
        retry_count: int = 0,
        created_at: Optional[datetime] = None,
    ) -> DeliveryRecord:
        return cls(
            id=uuid4(),
            chat_id=chat_id,
            notification_type=notification_type,
            success=success,
            created_at=created_at or datetime.now(UTC),
            message_id=message_id,
            data=dict(data or {}),
            error_message=error_message,
            retry_count=retry_count,
        )


@dataclass(frozen=True, slots=True)
class BroadcastSummary:
    """Aggregate of one multi-recipient send."""

    id: UUID
    notification_type: str
    total_recipients: int
    successful_sends: int
    failed_sends: int
    success_rate: int
    """Percentage 0-100."""
    created_at: datetime
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        notification_type: str,
        *,
        total_recipients: int,
        successful_sends: int,
        failed_sends: int,
        success_rate: int,
        data: Optional[dict[str, Any]] = None,
        created_at: Optional[datetime] = None,
    ) -> BroadcastSummary:
        return cls(
            id=uuid4(),
            notification_type=notification_type,
            total_recipients=total_recipients,
            successful_sends=successful_sends,
            failed_sends=failed_sends,
            success_rate=success_rate,
            created_at=created_at or datetime.now(UTC),
            data=dict(data or {}),
        )
