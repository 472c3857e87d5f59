# -*- coding: utf-8 -*-
"""Single-destination sender: rate limit, call, classify, back off, log once."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Optional, Union

import structlog
from structlog.contextvars import bound_contextvars
from telegram.constants import ParseMode

from restaurant_notifications.clients.bot_config import BotInfo
from restaurant_notifications.delivery.error_classifier import (
    DEFAULT_RATE_LIMIT_RETRY_AFTER,
    ErrorType,
    classify,
)
from restaurant_notifications.delivery.retry_policy import RetryPolicy
from restaurant_notifications.exceptions import TelegramTransportError
from restaurant_notifications.models.delivery import AttemptOutcome, SendAttempt, SendOptions
from restaurant_notifications.models.destination import Destination
from restaurant_notifications.models.message import ButtonSpec, MediaKind, Message
from restaurant_notifications.models.results import OperationResult, SendResult
from restaurant_notifications.templates import render_test_message
from restaurant_notifications.utils import mask_chat_id

if TYPE_CHECKING:
    from restaurant_notifications.clients.bot_config import BotConfig
    from restaurant_notifications.clients.telegram_api import ApiResponse, TelegramApiClient
    from restaurant_notifications.delivery.delivery_log import DeliveryLog
    from restaurant_notifications.delivery.rate_limiter import RateLimiter

DestinationLike = Union[Destination, str, int]
MessageLike = Union[Message, str]

_NOT_CONFIGURED = "Bot not configured"


def _chat_id_of(destination: DestinationLike) -> str:
    if isinstance(destination, Destination):
        return destination.chat_id
    return Destination.create(destination).chat_id


def _as_message(message: MessageLike) -> Message:
    return message if isinstance(message, Message) else Message.create(message)


def _message_id_of(response: ApiResponse) -> Optional[int]:
    result = response.result
    if isinstance(result, dict) and result.get("message_id") is not None:
        return int(result["message_id"])
    return None


class TelegramSender:
    """Delivers one message to one chat with bounded exponential-backoff retry.

    Attempts for a chat are strictly sequential. Rate-limit waits do not
    consume the retry budget. Exactly one DeliveryRecord is written per
    terminal outcome; none when the bot is not configured.
    """

    def __init__(
        self,
        api_client: TelegramApiClient,
        bot_config: BotConfig,
        rate_limiter: RateLimiter,
        delivery_log: DeliveryLog,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        default_rate_limit_retry_after: float = DEFAULT_RATE_LIMIT_RETRY_AFTER,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._api = api_client
        self._bot_config = bot_config
        self._rate_limiter = rate_limiter
        self._delivery_log = delivery_log
        self._retry_policy = retry_policy or RetryPolicy()
        self._default_retry_after = default_rate_limit_retry_after
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def is_configured(self) -> bool:
        return self._bot_config.is_configured

    # -------------------------------------------------------------------------
    # Retried sends
    # -------------------------------------------------------------------------

    async def send(
        self,
        destination: DestinationLike,
        message: MessageLike,
        options: Optional[SendOptions] = None,
    ) -> SendResult:
        """Send a text message (sendMessage) and return its terminal outcome."""
        chat_id = _chat_id_of(destination)
        payload = _as_message(message).to_payload(chat_id)
        return await self._deliver("sendMessage", chat_id, payload, options or SendOptions())

    async def send_with_keyboard(
        self,
        destination: DestinationLike,
        text: str,
        keyboard: Sequence[Sequence[ButtonSpec]],
        options: Optional[SendOptions] = None,
        *,
        parse_mode: ParseMode | str | None = ParseMode.MARKDOWN,
    ) -> SendResult:
        """Send a text message carrying an inline keyboard."""
        message = Message.create(text, parse_mode=parse_mode, keyboard=keyboard)
        return await self.send(destination, message, options)

    async def send_photo(
        self,
        destination: DestinationLike,
        photo_url: str,
        caption: Optional[str] = None,
        options: Optional[SendOptions] = None,
        *,
        parse_mode: ParseMode | str | None = ParseMode.MARKDOWN,
    ) -> SendResult:
        return await self._send_media("photo", destination, photo_url, caption, options, parse_mode)

    async def send_document(
        self,
        destination: DestinationLike,
        document_url: str,
        caption: Optional[str] = None,
        options: Optional[SendOptions] = None,
        *,
        parse_mode: ParseMode | str | None = ParseMode.MARKDOWN,
    ) -> SendResult:
        return await self._send_media(
            "document", destination, document_url, caption, options, parse_mode
        )

    async def send_test_message(self, destination: DestinationLike) -> SendResult:
        """Send the canned "bot is working" message."""
        return await self.send(
            destination,
            Message.create(render_test_message()),
            SendOptions(notification_type="test_message"),
        )

    async def _send_media(
        self,
        kind: MediaKind,
        destination: DestinationLike,
        url: str,
        caption: Optional[str],
        options: Optional[SendOptions],
        parse_mode: ParseMode | str | None,
    ) -> SendResult:
        chat_id = _chat_id_of(destination)
        message = Message.create(caption or "", parse_mode=parse_mode)
        payload = message.to_media_payload(chat_id, kind, url)
        method = "sendPhoto" if kind == "photo" else "sendDocument"
        return await self._deliver(method, chat_id, payload, options or SendOptions())

    async def _deliver(
        self,
        method: str,
        chat_id: str,
        payload: dict[str, Any],
        options: SendOptions,
    ) -> SendResult:
        if not self._bot_config.is_configured:
            self._logger.warning(
                "telegram_send_skipped_not_configured",
                chat_id_masked=mask_chat_id(chat_id),
                notification_type=options.notification_type,
            )
            return SendResult(
                success=False,
                error=_NOT_CONFIGURED,
                error_type=ErrorType.INVALID_CREDENTIAL.value,
                retry_recommended=False,
            )

        retry_count = 0
        attempts: list[SendAttempt] = []
        last_error: Optional[str] = None
        last_error_type: Optional[ErrorType] = None

        with bound_contextvars(
            telegram_method=method,
            chat_id_masked=mask_chat_id(chat_id),
            notification_type=options.notification_type,
        ):
            while True:
                decision = await self._rate_limiter.check(chat_id)
                if not decision.allowed:
                    wait = decision.retry_after_seconds or 1
                    self._logger.info("telegram_send_rate_limit_wait", wait_seconds=wait)
                    await self._sleep(wait)
                    continue

                started_at = datetime.now(UTC)
                provider_hint: Optional[float] = None
                try:
                    response = await self._api.call(method, payload)
                except TelegramTransportError as e:
                    last_error = str(e)
                    last_error_type = ErrorType.TRANSIENT_NETWORK
                    attempts.append(
                        SendAttempt(
                            chat_id=chat_id,
                            attempt=retry_count,
                            started_at=started_at,
                            outcome=AttemptOutcome.TRANSPORT_ERROR,
                            error=last_error,
                            error_type=last_error_type.value,
                        )
                    )
                else:
                    if response.ok:
                        message_id = _message_id_of(response)
                        attempts.append(
                            SendAttempt(
                                chat_id=chat_id,
                                attempt=retry_count,
                                started_at=started_at,
                                outcome=AttemptOutcome.DELIVERED,
                            )
                        )
                        await self._delivery_log.log_send(
                            chat_id,
                            message_id,
                            options.notification_type,
                            options.data,
                            success=True,
                            retry_count=retry_count,
                        )
                        self._logger.info(
                            "telegram_send_delivered",
                            message_id=message_id,
                            retry_count=retry_count,
                            attempts=len(attempts),
                        )
                        return SendResult.delivered(message_id, retry_count)

                    classification = classify(
                        response.body,
                        response.status,
                        default_retry_after=self._default_retry_after,
                    )
                    last_error = classification.message
                    last_error_type = classification.error_type
                    attempts.append(
                        SendAttempt(
                            chat_id=chat_id,
                            attempt=retry_count,
                            started_at=started_at,
                            outcome=AttemptOutcome.PROVIDER_ERROR,
                            error=last_error,
                            error_type=last_error_type.value,
                        )
                    )
                    if not classification.retry_recommended:
                        return await self._terminal_failure(
                            chat_id,
                            options,
                            error=classification.message,
                            error_type=classification.error_type,
                            retry_count=retry_count,
                            retry_recommended=False,
                            attempts=attempts,
                        )
                    provider_hint = classification.retry_after_seconds

                if not self._retry_policy.can_retry(retry_count):
                    break

                delay = self._retry_policy.delay_for(retry_count, provider_hint)
                self._logger.warning(
                    "telegram_send_retry",
                    retry_count=retry_count,
                    max_retries=self._retry_policy.max_retries,
                    backoff_seconds=delay,
                    error_type=last_error_type.value if last_error_type else None,
                    error_message=last_error,
                )
                await self._sleep(delay)
                retry_count += 1

            return await self._terminal_failure(
                chat_id,
                options,
                error=last_error or "Max retries exceeded",
                error_type=last_error_type,
                retry_count=retry_count,
                retry_recommended=True,
                attempts=attempts,
            )

    async def _terminal_failure(
        self,
        chat_id: str,
        options: SendOptions,
        *,
        error: str,
        error_type: Optional[ErrorType],
        retry_count: int,
        retry_recommended: bool,
        attempts: list[SendAttempt],
    ) -> SendResult:
        await self._delivery_log.log_send(
            chat_id,
            None,
            options.notification_type,
            options.data,
            success=False,
            error_message=error,
            retry_count=retry_count,
        )
        self._logger.error(
            "telegram_send_failed",
            error_type=error_type.value if error_type else None,
            error_message=error,
            retry_count=retry_count,
            attempts=len(attempts),
            retry_recommended=retry_recommended,
        )
        return SendResult(
            success=False,
            error=error,
            error_type=error_type.value if error_type else None,
            retry_count=retry_count,
            retry_recommended=retry_recommended,
            rate_limited=error_type is ErrorType.RATE_LIMITED,
            chat_blocked=error_type is ErrorType.CHAT_BLOCKED,
        )

    # -------------------------------------------------------------------------
    # Single-attempt operations
    # -------------------------------------------------------------------------

    async def delete_message(self, chat_id: str, message_id: int) -> OperationResult:
        return await self._single_call(
            "deleteMessage",
            lambda: self._api.delete_message(chat_id, message_id),
            failure="Failed to delete message",
        )

    async def get_chat_member(self, chat_id: str, user_id: int) -> OperationResult:
        return await self._single_call(
            "getChatMember",
            lambda: self._api.get_chat_member(chat_id, user_id),
            failure="Failed to get chat member",
        )

    async def test_connection(self) -> OperationResult:
        """Call getMe; on success result is a BotInfo and response_time_ms is set."""
        outcome = await self._single_call(
            "getMe",
            self._api.get_me,
            failure="Telegram API error",
        )
        if not outcome.success or not isinstance(outcome.result, dict):
            return outcome
        return OperationResult(
            success=True,
            result=BotInfo.from_api(outcome.result),
            response_time_ms=outcome.response_time_ms,
        )

    async def _single_call(
        self,
        method: str,
        call: Callable[[], Awaitable[ApiResponse]],
        *,
        failure: str,
    ) -> OperationResult:
        if not self._bot_config.is_configured:
            return OperationResult(success=False, error=_NOT_CONFIGURED)
        started = time.perf_counter()
        try:
            response = await call()
        except TelegramTransportError as e:
            self._logger.warning(
                "telegram_operation_transport_error",
                telegram_method=method,
                error_message=str(e),
            )
            return OperationResult(success=False, error=str(e))
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if response.ok:
            return OperationResult(success=True, result=response.result, response_time_ms=elapsed_ms)
        self._logger.warning(
            "telegram_operation_failed",
            telegram_method=method,
            http_status_code=response.status,
            description=response.description,
        )
        return OperationResult(
            success=False,
            error=response.description or failure,
            response_time_ms=elapsed_ms,
        )
