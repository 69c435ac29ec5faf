"""Domain-specific exception types for askrelay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class AskRelayError(Exception):
    """Base exception for askrelay domain errors."""

    message: str
    code: str = "askrelay_error"
    details: Dict[str, Any] | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.details is None:
            self.details = {}


class DeliveryError(AskRelayError):
    """Error raised when a call to the chat service fails.

    Covers transport failures, timeouts, HTTP error statuses and API-level
    rejections (``ok: false``) alike.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        status: int | None = None,
        api_error: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if method:
            details.setdefault("method", method)
        if status is not None:
            details.setdefault("status", status)
        if api_error:
            details.setdefault("api_error", api_error)
        self.method = method
        self.status = status
        self.api_error = api_error
        super().__init__(message=message, code="delivery_error", details=details)


class ConfigError(AskRelayError):
    """Error raised when a usable configuration is required but missing."""

    def __init__(self, message: str, *, details: Dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code="config_error", details=details)


class QuestionFormatError(AskRelayError):
    """Error raised when the host passes a malformed question bag."""

    def __init__(self, message: str, *, details: Dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code="question_format_error", details=details)
