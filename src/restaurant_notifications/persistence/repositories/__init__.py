# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, etc.)."""

from restaurant_notifications.persistence.repositories.interfaces import (
    IDeliveryLogRepository,
)
from restaurant_notifications.persistence.repositories.in_memory import (
    InMemoryDeliveryLogRepository,
)

__all__ = [
    "IDeliveryLogRepository",
    "InMemoryDeliveryLogRepository",
]
