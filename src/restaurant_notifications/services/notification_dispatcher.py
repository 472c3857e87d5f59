# -*- coding: utf-8 -*-
"""NotificationDispatcher: turns notification triggers into Telegram deliveries."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

import structlog

from restaurant_notifications.events.notification_events import (
    BroadcastRecipient,
    BroadcastRequestedEvent,
    NotificationRequestedEvent,
)
from restaurant_notifications.exceptions import UnknownNotificationTypeError
from restaurant_notifications.models import (
    BroadcastResult,
    Destination,
    FailedSend,
    Message,
    RecipientType,
    SendOptions,
    SendResult,
    unique_by_chat_id,
)
from restaurant_notifications.models.delivery import Priority
from restaurant_notifications.utils import mask_chat_id

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from restaurant_notifications.delivery import Broadcaster, TelegramSender
    from restaurant_notifications.templates import MessageTemplateRenderer


_OWNER_NOT_CONFIGURED = "Owner Telegram chat ID not configured"
_INVALID_CHAT_ID = "Invalid chat id"

Recipient = Union[BroadcastRecipient, Destination, Mapping[str, Any]]


def _destination_of(recipient: Recipient) -> Destination:
    if isinstance(recipient, Destination):
        return recipient
    if isinstance(recipient, BroadcastRecipient):
        return Destination.create(
            recipient.chat_id, recipient.recipient_name, recipient.recipient_type
        )
    return Destination.create(
        recipient.get("chat_id") or "",
        recipient.get("recipient_name"),
        recipient.get("recipient_type", RecipientType.EMPLOYEE),
    )


def _split_recipients(
    recipients: Sequence[Recipient],
) -> tuple[list[Destination], list[FailedSend]]:
    """Valid destinations (deduplicated) and a failure per unusable recipient."""
    destinations: list[Destination] = []
    rejected: list[FailedSend] = []
    for recipient in recipients:
        try:
            destinations.append(_destination_of(recipient))
        except ValueError:
            if isinstance(recipient, Mapping):
                chat_id, name = recipient.get("chat_id"), recipient.get("recipient_name")
            else:
                chat_id, name = recipient.chat_id, recipient.recipient_name
            rejected.append(
                FailedSend(
                    chat_id=str(chat_id or ""),
                    recipient_name=name or "Direct Chat",
                    error=_INVALID_CHAT_ID,
                )
            )
    return unique_by_chat_id(destinations), rejected


class NotificationDispatcher:
    """Renders templates and routes them to the sender or broadcaster.

    Subscribes to NotificationRequestedEvent and BroadcastRequestedEvent on
    start(); notify() and broadcast() can also be called directly when the
    caller needs the delivery result.
    """

    def __init__(
        self,
        sender: TelegramSender,
        broadcaster: Broadcaster,
        renderer: MessageTemplateRenderer,
        event_bus: Any,
        *,
        owner_chat_id: Optional[str] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._sender = sender
        self._broadcaster = broadcaster
        self._renderer = renderer
        self._event_bus: "EventBus" = event_bus
        self._owner_chat_id = (owner_chat_id or "").strip() or None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to notification trigger events."""
        self._event_bus.on(NotificationRequestedEvent, self._on_notification_requested)
        self._event_bus.on(BroadcastRequestedEvent, self._on_broadcast_requested)
        self._logger.debug("notification_dispatcher_started")

    def stop(self) -> None:
        """Unsubscribe from notification trigger events."""
        handlers = getattr(self._event_bus, "handlers", {})
        for event_cls, handler in (
            (NotificationRequestedEvent, self._on_notification_requested),
            (BroadcastRequestedEvent, self._on_broadcast_requested),
        ):
            key = event_cls.__name__
            if key in handlers:
                handlers[key] = [h for h in handlers[key] if h != handler]
        self._logger.debug("notification_dispatcher_stopped")

    def _render(
        self,
        notification_type: str,
        data: Mapping[str, Any],
        text: Optional[str],
    ) -> str:
        if text:
            return text
        return self._renderer.render(notification_type, data)

    async def notify(
        self,
        destination: Destination | str,
        notification_type: str,
        data: Optional[Mapping[str, Any]] = None,
        *,
        priority: Priority = "normal",
        text: Optional[str] = None,
    ) -> SendResult:
        """Render notification_type and send it to one chat."""
        data = dict(data or {})
        try:
            body = self._render(notification_type, data, text)
        except UnknownNotificationTypeError as e:
            self._logger.warning(
                "notification_template_missing",
                notification_type=notification_type,
            )
            return SendResult(
                success=False,
                error=str(e),
                error_type="unknown_notification_type",
                retry_recommended=False,
            )
        options = SendOptions(notification_type=notification_type, data=data, priority=priority)
        return await self._sender.send(destination, Message.create(body), options)

    async def notify_owner(
        self,
        notification_type: str,
        data: Optional[Mapping[str, Any]] = None,
        *,
        priority: Priority = "normal",
        text: Optional[str] = None,
    ) -> SendResult:
        """Send to the configured owner chat (daily reports, stock and system alerts)."""
        if self._owner_chat_id is None:
            self._logger.warning(
                "owner_chat_not_configured",
                notification_type=notification_type,
            )
            return SendResult(success=False, error=_OWNER_NOT_CONFIGURED, retry_recommended=False)
        owner = Destination.create(self._owner_chat_id, "Owner", RecipientType.OWNER)
        return await self.notify(owner, notification_type, data, priority=priority, text=text)

    async def broadcast(
        self,
        recipients: Sequence[Recipient],
        notification_type: str,
        data: Optional[Mapping[str, Any]] = None,
        *,
        priority: Priority = "normal",
        text: Optional[str] = None,
    ) -> BroadcastResult:
        """Render once and broadcast to every distinct chat in recipients.

        Recipients without a usable chat id are reported in failed_sends;
        the rest still receive the message.
        """
        data = dict(data or {})
        destinations, rejected = _split_recipients(recipients)
        if rejected:
            self._logger.warning(
                "broadcast_recipients_rejected",
                notification_type=notification_type,
                broadcast_rejected=len(rejected),
            )
        options = SendOptions(notification_type=notification_type, data=data, priority=priority)
        try:
            body = self._render(notification_type, data, text)
        except UnknownNotificationTypeError as e:
            self._logger.warning(
                "notification_template_missing",
                notification_type=notification_type,
                broadcast_recipients=len(destinations) + len(rejected),
            )
            failed = rejected + [
                FailedSend(chat_id=d.chat_id, recipient_name=d.recipient_name, error=str(e))
                for d in destinations
            ]
            return await self._broadcaster.record_failures(failed, options)
        return await self._broadcaster.broadcast(
            destinations, Message.create(body), options, rejected=rejected
        )

    async def _on_notification_requested(self, event: NotificationRequestedEvent) -> None:
        """Handle NotificationRequestedEvent: owner chat when chat_id is absent."""
        if event.chat_id:
            destination = Destination.create(
                event.chat_id, event.recipient_name, event.recipient_type
            )
            result = await self.notify(
                destination,
                event.notification_type,
                event.template_data,
                priority=event.priority,
                text=event.text,
            )
        else:
            result = await self.notify_owner(
                event.notification_type,
                event.template_data,
                priority=event.priority,
                text=event.text,
            )
        self._logger.debug(
            "notification_request_handled",
            notification_type=event.notification_type,
            chat_id_masked=mask_chat_id(event.chat_id or self._owner_chat_id or ""),
            success=result.success,
            error=result.error,
        )

    async def _on_broadcast_requested(self, event: BroadcastRequestedEvent) -> None:
        """Handle BroadcastRequestedEvent."""
        result = await self.broadcast(
            event.recipients,
            event.notification_type,
            event.template_data,
            priority=event.priority,
            text=event.text,
        )
        self._logger.debug(
            "broadcast_request_handled",
            notification_type=event.notification_type,
            broadcast_successful=len(result.successful_sends),
            broadcast_failed=len(result.failed_sends),
        )
