# -*- coding: utf-8 -*-
"""Fan one message out to many chats in paced, bounded-concurrency batches."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Optional, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

from restaurant_notifications.delivery.delivery_log import broadcast_success_rate
from restaurant_notifications.delivery.error_classifier import ErrorType
from restaurant_notifications.models.delivery import SendOptions
from restaurant_notifications.models.results import (
    BroadcastResult,
    BulkResult,
    FailedSend,
    SendResult,
    SuccessfulSend,
)
from restaurant_notifications.utils import mask_chat_id

if TYPE_CHECKING:
    from restaurant_notifications.delivery.delivery_log import DeliveryLog
    from restaurant_notifications.delivery.sender import MessageLike, TelegramSender
    from restaurant_notifications.models.destination import Destination
    from restaurant_notifications.models.results import BulkMessage

T = TypeVar("T")


def _batches(items: Sequence[T], size: int) -> list[Sequence[T]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class Broadcaster:
    """Batch broadcaster over TelegramSender.

    Members of a batch are sent concurrently on the event loop and the batch
    waits for all of them; one failing chat never stops the others. A fixed
    pause separates batches to stay under the provider's aggregate ceiling.
    """

    def __init__(
        self,
        sender: TelegramSender,
        delivery_log: DeliveryLog,
        *,
        batch_size: int = 5,
        batch_delay_seconds: float = 0.2,
        bulk_batch_size: int = 3,
        bulk_batch_delay_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._sender = sender
        self._delivery_log = delivery_log
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay_seconds
        self._bulk_batch_size = max(1, bulk_batch_size)
        self._bulk_batch_delay = bulk_batch_delay_seconds
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def broadcast(
        self,
        destinations: Sequence[Destination],
        message: MessageLike,
        options: Optional[SendOptions] = None,
        *,
        rejected: Sequence[FailedSend] = (),
    ) -> BroadcastResult:
        """Send message to every destination and persist one BroadcastSummary.

        Never raises for per-destination failures; they land in failed_sends.
        rejected holds recipients refused before sending (e.g. a blank chat id);
        they count as recipients and as failed sends.
        """
        options = options or SendOptions(notification_type="broadcast")
        result = BroadcastResult(
            total_recipients=len(destinations) + len(rejected),
            total_sent=len(rejected),
            failed_sends=list(rejected),
        )
        batches = _batches(destinations, self._batch_size)

        with bound_contextvars(
            notification_type=options.notification_type,
            broadcast_recipients=result.total_recipients,
        ):
            self._logger.info("broadcast_started", broadcast_batches=len(batches))
            for index, batch in enumerate(batches):
                outcomes = await asyncio.gather(
                    *(self._send_one(destination, message, options) for destination in batch)
                )
                for destination, outcome in zip(batch, outcomes):
                    result.total_sent += 1
                    if isinstance(outcome, SendResult) and outcome.success:
                        result.successful_sends.append(
                            SuccessfulSend(
                                chat_id=destination.chat_id,
                                recipient_name=destination.recipient_name,
                                message_id=outcome.message_id,
                            )
                        )
                    elif isinstance(outcome, SendResult):
                        result.failed_sends.append(
                            FailedSend(
                                chat_id=destination.chat_id,
                                recipient_name=destination.recipient_name,
                                error=outcome.error or "Unknown error",
                                retry_recommended=outcome.retry_recommended,
                            )
                        )
                    else:
                        result.failed_sends.append(
                            FailedSend(
                                chat_id=destination.chat_id,
                                recipient_name=destination.recipient_name,
                                error=str(outcome) or type(outcome).__name__,
                            )
                        )
                if index < len(batches) - 1:
                    await self._sleep(self._batch_delay)

            await self._complete(result, options)
        return result

    async def record_failures(
        self,
        failed: Sequence[FailedSend],
        options: Optional[SendOptions] = None,
    ) -> BroadcastResult:
        """Close a broadcast that cannot be sent at all (e.g. no template).

        Every recipient is reported failed and the summary is still written.
        """
        options = options or SendOptions(notification_type="broadcast")
        result = BroadcastResult(
            total_recipients=len(failed),
            total_sent=len(failed),
            failed_sends=list(failed),
        )
        with bound_contextvars(
            notification_type=options.notification_type,
            broadcast_recipients=result.total_recipients,
        ):
            await self._complete(result, options)
        return result

    async def _complete(self, result: BroadcastResult, options: SendOptions) -> None:
        result.success_rate = broadcast_success_rate(
            len(result.successful_sends), result.total_sent
        )
        await self._delivery_log.log_broadcast(result, options.notification_type, options.data)
        self._logger.info(
            "broadcast_completed",
            broadcast_successful=len(result.successful_sends),
            broadcast_failed=len(result.failed_sends),
            broadcast_success_rate=result.success_rate,
        )

    async def _send_one(
        self,
        destination: Destination,
        message: MessageLike,
        options: SendOptions,
    ) -> SendResult | Exception:
        try:
            return await self._sender.send(destination, message, options)
        except Exception as e:
            self._logger.exception(
                "broadcast_send_error",
                chat_id_masked=mask_chat_id(destination.chat_id),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return e

    async def _send_bulk_item(self, item: BulkMessage) -> SendResult:
        try:
            return await self._sender.send(
                item.chat_id,
                item.message,
                SendOptions(notification_type=item.notification_type, data=item.data),
            )
        except Exception as e:
            self._logger.exception(
                "bulk_send_error",
                chat_id_masked=mask_chat_id(str(item.chat_id)),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return SendResult(
                success=False,
                error=str(e) or type(e).__name__,
                error_type=ErrorType.UNKNOWN.value,
            )

    async def send_bulk(self, messages: Sequence[BulkMessage]) -> BulkResult:
        """Send distinct messages to their own chats in small paced batches.

        A send that raises is reported as a failed SendResult for its item.
        """
        result = BulkResult(total_processed=len(messages))
        batches = _batches(messages, self._bulk_batch_size)
        for index, batch in enumerate(batches):
            outcomes = await asyncio.gather(*(self._send_bulk_item(item) for item in batch))
            for outcome in outcomes:
                if outcome.success:
                    result.successful_sends += 1
                else:
                    result.failed_sends += 1
            result.results.extend(outcomes)
            if index < len(batches) - 1:
                await self._sleep(self._bulk_batch_delay)
        self._logger.info(
            "bulk_send_completed",
            bulk_total=result.total_processed,
            bulk_successful=result.successful_sends,
            bulk_failed=result.failed_sends,
        )
        return result
