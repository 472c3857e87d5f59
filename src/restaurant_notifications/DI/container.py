# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from restaurant_notifications.clients.bot_config import BotConfig
from restaurant_notifications.clients.telegram_api import TelegramApiClient
from restaurant_notifications.config import Settings, get_settings
from restaurant_notifications.delivery import (
    Broadcaster,
    DeliveryLog,
    RateLimiter,
    RetryPolicy,
    TelegramSender,
)
from restaurant_notifications.events.bus import get_event_bus
from restaurant_notifications.persistence import InMemoryDeliveryLogRepository
from restaurant_notifications.services import NotificationDispatcher
from restaurant_notifications.templates import MessageTemplateRenderer


def _build_bot_config(settings: Settings) -> BotConfig:
    """Resolve Telegram credentials once; an empty token yields an unconfigured bot."""
    return BotConfig.from_settings(settings.telegram)


def _build_retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy.from_settings(settings.delivery)


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, Telegram client, delivery log, sender, broadcaster."""

    config = providers.Callable(get_settings)

    bot_config = providers.Singleton(_build_bot_config, config)

    telegram_api_client = providers.Singleton(
        TelegramApiClient,
        settings=config,
        bot_config=bot_config,
    )

    delivery_log_repository = providers.Singleton(InMemoryDeliveryLogRepository)

    delivery_log = providers.Singleton(
        DeliveryLog,
        repository=delivery_log_repository,
    )

    rate_limiter = providers.Singleton(
        RateLimiter,
        repository=delivery_log_repository,
        messages_per_window=config.provided.delivery.messages_per_minute,
        window_seconds=config.provided.delivery.rate_limit_window_seconds,
    )

    retry_policy = providers.Singleton(_build_retry_policy, config)

    sender = providers.Singleton(
        TelegramSender,
        api_client=telegram_api_client,
        bot_config=bot_config,
        rate_limiter=rate_limiter,
        delivery_log=delivery_log,
        retry_policy=retry_policy,
        default_rate_limit_retry_after=config.provided.delivery.default_rate_limit_retry_after,
    )

    broadcaster = providers.Singleton(
        Broadcaster,
        sender=sender,
        delivery_log=delivery_log,
        batch_size=config.provided.delivery.broadcast_batch_size,
        batch_delay_seconds=config.provided.delivery.broadcast_batch_delay_seconds,
        bulk_batch_size=config.provided.delivery.bulk_batch_size,
        bulk_batch_delay_seconds=config.provided.delivery.bulk_batch_delay_seconds,
    )

    template_renderer = providers.Singleton(
        MessageTemplateRenderer,
        cafe_name=config.provided.app.cafe_name,
        tz_name=config.provided.app.timezone,
    )

    event_bus = providers.Callable(get_event_bus)

    notification_dispatcher = providers.Singleton(
        NotificationDispatcher,
        sender=sender,
        broadcaster=broadcaster,
        renderer=template_renderer,
        event_bus=event_bus,
        owner_chat_id=config.provided.delivery.owner_chat_id,
    )
