"""Dependency injection."""

from restaurant_notifications.DI.container import Container

__all__ = ["Container"]
