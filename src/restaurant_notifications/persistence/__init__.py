"""Persistence layer (repositories, etc.)."""

from restaurant_notifications.persistence.repositories import (
    IDeliveryLogRepository,
    InMemoryDeliveryLogRepository,
)

__all__ = [
    "IDeliveryLogRepository",
    "InMemoryDeliveryLogRepository",
]
