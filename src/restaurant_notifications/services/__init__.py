# -*- coding: utf-8 -*-
"""Application services."""

from restaurant_notifications.services.notification_dispatcher import NotificationDispatcher

__all__ = ["NotificationDispatcher"]
