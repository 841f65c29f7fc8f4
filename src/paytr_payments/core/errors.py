"""
Exception hierarchy for the PayTR helpers.

Gateway-reported failures are not exceptions: they come back as
:class:`~paytr_payments.core.responses.OperationResult` values with an
``error`` status. The classes below cover faults on our side of the wire.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "ConfigError",
    "PayTRError",
    "ResponseParseError",
    "TransportError",
    "ValidationError",
]


class PayTRError(Exception):
    """Base class for every error raised by this package."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details: Dict[str, Any] = dict(details or {})


class ConfigError(PayTRError):
    """Raised when the supplied configuration is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIG_ERROR")


class ValidationError(PayTRError):
    """Raised for caller-supplied parameters that fail shape or range checks."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(
            f"{field_name}: {message}",
            code="VALIDATION_ERROR",
            details={"field": field_name},
        )
        self.field_name = field_name


class TransportError(PayTRError):
    """Raised when the gateway is unreachable or answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="HTTP_ERROR",
            details={"url": url, "status": status_code},
        )
        self.url = url
        self.status_code = status_code
        self.body = body


class ResponseParseError(PayTRError):
    """Raised when an API endpoint returns something other than JSON."""

    def __init__(self, message: str, *, raw_body: str) -> None:
        super().__init__(message, code="PARSE_ERROR", details={"response": raw_body})
        self.raw_body = raw_body
