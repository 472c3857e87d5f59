# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, TELEGRAM__BOT_TOKEN.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "restaurant-notifications"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"
    cafe_name: str = Field(
        default="Cafe Management System",
        description="Name shown in the footer of templated messages.",
    )
    timezone: str = Field(
        default="Asia/Makassar",
        description="IANA zone used for message timestamps. Env: APP__TIMEZONE.",
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/notifications.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class TelegramSettings(BaseSettings):
    """Telegram Bot API access (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    bot_token: Optional[str] = Field(default=None, description="Telegram bot token.")
    bot_username: Optional[str] = Field(default=None, description="Bot username, informational.")
    api_base: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL.",
    )
    validate_token_format: bool = Field(
        default=True,
        description="Treat tokens not shaped like <bot_id>:<secret> as unconfigured.",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="Per-request HTTP timeout in seconds.",
    )
    default_parse_mode: Optional[Literal["Markdown", "MarkdownV2", "HTML"]] = "Markdown"


class DeliverySettings(BaseSettings):
    """Retry, rate limit and batching knobs for outbound delivery (from env DELIVERY__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    max_retries: int = Field(default=3, ge=0, le=20)
    initial_delay_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    backoff_factor: float = Field(default=2.0, ge=1.0, le=10.0)
    max_delay_seconds: float = Field(default=30.0, ge=0.0, le=600.0)
    default_rate_limit_retry_after: int = Field(
        default=30,
        ge=1,
        le=600,
        description="Wait used for a 429 that carries no retry_after hint.",
    )

    messages_per_minute: int = Field(default=20, ge=1, le=120)
    rate_limit_window_seconds: float = Field(default=60.0, ge=1.0, le=3600.0)

    broadcast_batch_size: int = Field(default=5, ge=1, le=100)
    broadcast_batch_delay_seconds: float = Field(default=0.2, ge=0.0, le=60.0)
    bulk_batch_size: int = Field(default=3, ge=1, le=100)
    bulk_batch_delay_seconds: float = Field(default=1.0, ge=0.0, le=60.0)

    owner_chat_id: Optional[str] = Field(
        default=None,
        description="Chat id used for owner-directed notifications. Env: DELIVERY__OWNER_CHAT_ID.",
    )


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, DELIVERY__MAX_RETRIES.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.
        from_env(delivery={"max_retries": 5}).

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from restaurant_notifications.config import get_settings

        settings = get_settings()
        retries = settings.delivery.max_retries
    """
    return Settings()
