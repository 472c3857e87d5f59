"""Result value objects returned to callers of the sender and broadcaster."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from restaurant_notifications.models.message import Message


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of a single-destination send.

    On failure, retry_recommended=True means a later resubmission may succeed
    (e.g. after an outage); False means do not resubmit automatically.
    """

    success: bool
    message_id: Optional[int] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    retry_count: int = 0
    retry_recommended: bool = False
    rate_limited: bool = False
    chat_blocked: bool = False

    @classmethod
    def delivered(cls, message_id: Optional[int], retry_count: int) -> SendResult:
        return cls(success=True, message_id=message_id, retry_count=retry_count)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SuccessfulSend:
    chat_id: str
    recipient_name: str
    message_id: Optional[int]


@dataclass(frozen=True, slots=True)
class FailedSend:
    chat_id: str
    recipient_name: str
    error: str
    retry_recommended: bool = False


@dataclass(slots=True)
class BroadcastResult:
    """Per-destination detail plus aggregate rate for one broadcast."""

    total_recipients: int
    total_sent: int = 0
    successful_sends: list[SuccessfulSend] = field(default_factory=list)
    failed_sends: list[FailedSend] = field(default_factory=list)
    success_rate: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class BulkMessage:
    """One entry of a bulk send: its own chat, text and audit context."""

    chat_id: str
    message: Message
    notification_type: str = "bulk"
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class BulkResult:
    total_processed: int
    successful_sends: int = 0
    failed_sends: int = 0
    results: list[SendResult] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a single-attempt Bot API call (delete, member lookup, getMe)."""

    success: bool
    result: Any = None
    error: Optional[str] = None
    response_time_ms: Optional[int] = None


@dataclass(frozen=True, slots=True)
class DeliveryStats:
    """Delivery counts over a lookback period."""

    total_sent: int
    successful: int
    failed: int
    success_rate: int
    notification_types: list[str] = field(default_factory=list)
