# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/, etc."""

from restaurant_notifications.persistence.repositories.interfaces.delivery_log_repository import (
    IDeliveryLogRepository,
)

__all__ = ["IDeliveryLogRepository"]
