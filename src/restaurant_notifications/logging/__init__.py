"""Logging setup (structlog + Logfire)."""

from restaurant_notifications.logging.config import configure_logging

__all__ = ["configure_logging"]
