"""Backoff strategy shared by every retry in the sender."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from restaurant_notifications.config import DeliverySettings


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded exponential backoff; a positive provider hint overrides the computed delay."""

    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 30.0

    @classmethod
    def from_settings(cls, settings: DeliverySettings) -> RetryPolicy:
        return cls(
            max_retries=settings.max_retries,
            initial_delay=settings.initial_delay_seconds,
            backoff_factor=settings.backoff_factor,
            max_delay=settings.max_delay_seconds,
        )

    def delay_for(self, retry_count: int, provider_hint: Optional[float] = None) -> float:
        """Seconds to wait before the next attempt.

        Args:
            retry_count: Retries already performed (0 before the first retry).
            provider_hint: retry_after supplied by the provider, if any.
        """
        if provider_hint is not None and provider_hint > 0:
            return float(provider_hint)
        return min(self.initial_delay * self.backoff_factor ** max(retry_count, 0), self.max_delay)

    def can_retry(self, retry_count: int) -> bool:
        return retry_count < self.max_retries
