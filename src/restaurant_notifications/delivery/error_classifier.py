# -*- coding: utf-8 -*-
"""Map Bot API error responses to a retry decision.

The table decides which failures spend retry budget and which fail fast:

    429                         rate_limited         retry (provider hint or default wait)
    403 + "blocked"/"kicked"    chat_blocked         no retry
    403 other                   permanent_api_error  no retry
    401                         invalid_credential   no retry
    400 + "chat not found"      chat_blocked         no retry
    400 other                   permanent_api_error  no retry
    500/502/503/504             transient_network    retry
    anything else               unknown              retry
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

DEFAULT_RATE_LIMIT_RETRY_AFTER = 30

_SERVER_ERROR_CODES = frozenset({500, 502, 503, 504})


class ErrorType(str, Enum):
    """Failure taxonomy for provider responses."""

    RATE_LIMITED = "rate_limited"
    CHAT_BLOCKED = "chat_blocked"
    INVALID_CREDENTIAL = "invalid_credential"
    TRANSIENT_NETWORK = "transient_network"
    PERMANENT_API_ERROR = "permanent_api_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ErrorClassification:
    error_type: ErrorType
    message: str
    retry_recommended: bool
    retry_after_seconds: Optional[float] = None


def _error_code(body: Mapping[str, Any], http_status: int) -> int:
    code = body.get("error_code")
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    if isinstance(code, str) and code.isdigit():
        return int(code)
    return http_status


def _retry_after_hint(body: Mapping[str, Any]) -> Optional[float]:
    parameters = body.get("parameters")
    if not isinstance(parameters, Mapping):
        return None
    value = parameters.get("retry_after")
    try:
        hint = float(value)
    except (TypeError, ValueError):
        return None
    return hint if hint > 0 else None


def classify(
    body: Optional[Mapping[str, Any]],
    http_status: int,
    *,
    default_retry_after: float = DEFAULT_RATE_LIMIT_RETRY_AFTER,
) -> ErrorClassification:
    """Classify a failed Bot API response.

    Args:
        body: Parsed JSON body (may be empty when the provider sent no JSON).
        http_status: HTTP status of the response; used when body has no error_code.
        default_retry_after: Wait suggested for a 429 without a provider hint.
    """
    body = body or {}
    code = _error_code(body, http_status)
    description = str(body.get("description") or "Unknown error")
    lowered = description.lower()

    if code == 429:
        return ErrorClassification(
            error_type=ErrorType.RATE_LIMITED,
            message="Rate limited by Telegram",
            retry_recommended=True,
            retry_after_seconds=_retry_after_hint(body) or default_retry_after,
        )

    if code == 403:
        if "blocked" in lowered or "kicked" in lowered:
            return ErrorClassification(
                error_type=ErrorType.CHAT_BLOCKED,
                message="Chat blocked or bot removed",
                retry_recommended=False,
            )
        return ErrorClassification(
            error_type=ErrorType.PERMANENT_API_ERROR,
            message="Bot access forbidden",
            retry_recommended=False,
        )

    if code == 401:
        return ErrorClassification(
            error_type=ErrorType.INVALID_CREDENTIAL,
            message="Invalid bot token",
            retry_recommended=False,
        )

    if code == 400:
        if "chat not found" in lowered:
            return ErrorClassification(
                error_type=ErrorType.CHAT_BLOCKED,
                message="Chat not found",
                retry_recommended=False,
            )
        return ErrorClassification(
            error_type=ErrorType.PERMANENT_API_ERROR,
            message=f"Bad request: {description}",
            retry_recommended=False,
        )

    if code in _SERVER_ERROR_CODES:
        return ErrorClassification(
            error_type=ErrorType.TRANSIENT_NETWORK,
            message=f"Telegram server error: {description}",
            retry_recommended=True,
        )

    return ErrorClassification(
        error_type=ErrorType.UNKNOWN,
        message=f"Telegram API error: {description}",
        retry_recommended=True,
    )
