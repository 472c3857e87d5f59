# -*- coding: utf-8 -*-
"""Domain models."""

from restaurant_notifications.models.delivery import (
    AttemptOutcome,
    BroadcastSummary,
    DeliveryRecord,
    SendAttempt,
    SendOptions,
)
from restaurant_notifications.models.destination import (
    Destination,
    RecipientType,
    unique_by_chat_id,
)
from restaurant_notifications.models.message import Message
from restaurant_notifications.models.results import (
    BroadcastResult,
    BulkMessage,
    BulkResult,
    DeliveryStats,
    FailedSend,
    OperationResult,
    SendResult,
    SuccessfulSend,
)

__all__ = [
    "AttemptOutcome",
    "BroadcastResult",
    "BroadcastSummary",
    "BulkMessage",
    "BulkResult",
    "DeliveryRecord",
    "DeliveryStats",
    "Destination",
    "FailedSend",
    "Message",
    "OperationResult",
    "RecipientType",
    "SendAttempt",
    "SendOptions",
    "SendResult",
    "SuccessfulSend",
    "unique_by_chat_id",
]
