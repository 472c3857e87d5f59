# -*- coding: utf-8 -*-
"""In-memory repository implementations."""

from restaurant_notifications.persistence.repositories.in_memory.delivery_log_repository import (
    InMemoryDeliveryLogRepository,
)

__all__ = ["InMemoryDeliveryLogRepository"]
