# -*- coding: utf-8 -*-
"""
Entry point for the notification service.

Orchestrates: logging, settings, container, bot connection check, dispatcher, shutdown (SIGINT or CancelledError).
Triggers flow: producer -> event bus -> NotificationDispatcher -> TelegramSender / Broadcaster -> delivery log.

Run with: python -m restaurant_notifications.main
"""
from __future__ import annotations

import asyncio
import signal
import structlog
from typing import Any

from restaurant_notifications.DI import Container
from restaurant_notifications.logging.config import configure_logging


def _setup_sigint(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT,
            lambda: shutdown_event.set(),
        )
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


async def _do_shutdown(logger: Any) -> None:
    """Clean shutdown. Safe to call on normal shutdown or CancelledError."""
    logger.info("main_shutdown_complete")


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")

    container = Container()
    bot_config = container.bot_config()
    sender = container.sender()
    dispatcher = container.notification_dispatcher()
    api_client = container.telegram_api_client()
    shutdown_event = asyncio.Event()
    _setup_sigint(shutdown_event)

    if not bot_config.is_configured:
        logger.warning(
            "main_bot_not_configured",
            message="TELEGRAM__BOT_TOKEN is not set or invalid; sends will fail fast",
        )
    else:
        connection = await sender.test_connection()
        if connection.success:
            logger.info(
                "main_bot_connected",
                bot_username=getattr(connection.result, "username", None),
                response_time_ms=connection.response_time_ms,
            )
        else:
            logger.warning("main_bot_connection_failed", error=connection.error)

    dispatcher.start()
    logger.info("main_dispatcher_started")
    try:
        try:
            await shutdown_event.wait()
        except asyncio.CancelledError:
            await _do_shutdown(logger)
            raise

        await _do_shutdown(logger)
    finally:
        dispatcher.stop()
        await api_client.aclose()


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
