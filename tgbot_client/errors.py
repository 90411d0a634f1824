from __future__ import annotations

from typing import Optional


class BotApiError(Exception):
    """Base class for every failure surfaced by the Bot API client."""

    def __init__(self, message: str, *, reason_code: str, method: str = "") -> None:
        super().__init__(message)
        self.reason_code = reason_code
        self.method = method


class TransportError(BotApiError):
    """The request never produced a usable envelope (network, HTTP or JSON failure)."""


class ResponseDecodeError(TransportError):
    """The envelope reported success but its result did not match the expected shape."""

    def __init__(self, message: str, *, method: str = "") -> None:
        super().__init__(message, reason_code="INVALID_RESULT_TYPE", method=method)


class RemoteError(BotApiError):
    """The remote service answered with ``ok=false``."""

    def __init__(
        self,
        error_code: Optional[int],
        description: Optional[str],
        *,
        method: str = "",
    ) -> None:
        code_text = error_code if error_code is not None else 0
        super().__init__(
            f"error: {code_text} {description or ''}".rstrip(),
            reason_code="TELEGRAM_API_ERROR",
            method=method,
        )
        self.error_code = error_code
        self.description = description
