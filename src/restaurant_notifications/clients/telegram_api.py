# -*- coding: utf-8 -*-
"""Async Telegram Bot API client: one POST per call, no retries.

Retry, backoff and classification belong to the sender; this client only
turns an HTTP exchange into an ApiResponse or a TelegramTransportError.
"""

from __future__ import annotations

import asyncio
import uuid
import aiohttp
import structlog
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from restaurant_notifications.clients.bot_config import BotConfig
from restaurant_notifications.config import Settings
from restaurant_notifications.exceptions import (
    MissingRequiredConfigError,
    TelegramTransportError,
)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """HTTP status plus parsed JSON body ({} when the body was not JSON)."""

    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and self.body.get("ok") is True

    @property
    def result(self) -> Any:
        return self.body.get("result")

    @property
    def description(self) -> Optional[str]:
        return self.body.get("description")


class TelegramApiClient:
    """Client for https://api.telegram.org/bot{token}/{method}.

    Injects Settings and BotConfig and optionally an aiohttp.ClientSession.
    If no session is provided, one is created and must be closed via
    aclose() or used as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        bot_config: BotConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (api_base, timeout).
            bot_config: Resolved credentials.
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._bot_config = bot_config
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def bot_config(self) -> BotConfig:
        return self._bot_config

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.telegram.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> TelegramApiClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _method_url(self, method: str) -> str:
        token = self._bot_config.bot_token
        if not token:
            raise MissingRequiredConfigError("TELEGRAM__BOT_TOKEN")
        base = self._settings.telegram.api_base.rstrip("/")
        return f"{base}/bot{token}/{method}"

    async def call(self, method: str, payload: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """POST a JSON payload to a Bot API method.

        Returns:
            ApiResponse for any HTTP status, including provider errors.

        Raises:
            MissingRequiredConfigError: If no bot token is configured.
            TelegramTransportError: On connection errors and timeouts.
        """
        url = self._method_url(method)
        request_id = uuid.uuid4().hex[:12]
        with bound_contextvars(telegram_method=method, telegram_request_id=request_id):
            try:
                session = await self._get_session()
                async with session.post(url, json=payload or {}) as response:
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        body = None
                    if not isinstance(body, dict):
                        self._logger.debug(
                            "telegram_api_non_json_response",
                            http_status_code=response.status,
                        )
                        body = {}
                    self._logger.debug(
                        "telegram_api_response",
                        http_status_code=response.status,
                        telegram_ok=body.get("ok"),
                    )
                    return ApiResponse(status=response.status, body=body)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self._logger.debug(
                    "telegram_api_transport_error",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise TelegramTransportError(
                    f"{method} request failed: {type(e).__name__}",
                    method=method,
                    cause=e,
                ) from e

    async def send_message(self, payload: Dict[str, Any]) -> ApiResponse:
        return await self.call("sendMessage", payload)

    async def send_photo(self, payload: Dict[str, Any]) -> ApiResponse:
        return await self.call("sendPhoto", payload)

    async def send_document(self, payload: Dict[str, Any]) -> ApiResponse:
        return await self.call("sendDocument", payload)

    async def delete_message(self, chat_id: str, message_id: int) -> ApiResponse:
        return await self.call("deleteMessage", {"chat_id": chat_id, "message_id": message_id})

    async def get_chat_member(self, chat_id: str, user_id: int) -> ApiResponse:
        return await self.call("getChatMember", {"chat_id": chat_id, "user_id": user_id})

    async def get_me(self) -> ApiResponse:
        return await self.call("getMe")
