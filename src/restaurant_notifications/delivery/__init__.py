"""Outbound delivery core: classifier, retry policy, rate limiter, log, sender, broadcaster."""

from restaurant_notifications.delivery.broadcaster import Broadcaster
from restaurant_notifications.delivery.delivery_log import DeliveryLog, broadcast_success_rate
from restaurant_notifications.delivery.error_classifier import (
    ErrorClassification,
    ErrorType,
    classify,
)
from restaurant_notifications.delivery.rate_limiter import RateLimitDecision, RateLimiter
from restaurant_notifications.delivery.retry_policy import RetryPolicy
from restaurant_notifications.delivery.sender import TelegramSender

__all__ = [
    "Broadcaster",
    "DeliveryLog",
    "ErrorClassification",
    "ErrorType",
    "RateLimitDecision",
    "RateLimiter",
    "RetryPolicy",
    "TelegramSender",
    "broadcast_success_rate",
    "classify",
]
