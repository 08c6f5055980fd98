"""Exceptions raised by the Billbee client."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .schemas import RequestDescriptor


class BillbeeError(Exception):
    """Base class for all client errors."""


class ConfigurationError(BillbeeError, ValueError):
    """Raised when a required credential is missing at construction time."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing {field}")
        self.field = field


class RequestValidationError(BillbeeError, ValueError):
    """A call was rejected before any network I/O."""


class MissingPathError(RequestValidationError):
    def __init__(self) -> None:
        super().__init__("Missing path")


class MissingBodyError(RequestValidationError):
    def __init__(self) -> None:
        super().__init__("Missing body")


class TransportError(BillbeeError):
    """Raised for non-success responses and network failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
        descriptor: Optional["RequestDescriptor"] = None,
    ) -> None:
        if status_code is not None:
            message = f"HTTP {status_code}: {message}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.descriptor = descriptor


class ThrottledError(TransportError):
    """Raised when the API responds with HTTP 429."""

    def __init__(
        self,
        message: str = "rate limit exceeded",
        *,
        body: Any = None,
        descriptor: Optional["RequestDescriptor"] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, status_code=429, body=body, descriptor=descriptor)
        self.retry_after = retry_after


class DecodeError(BillbeeError, ValueError):
    """Raised when a response body cannot be decoded.

    ``context`` holds the text surrounding the failure position.
    """

    def __init__(self, message: str, context: str = "", position: Optional[int] = None) -> None:
        detail = f"{message} near {context!r}" if context else message
        super().__init__(detail)
        self.context = context
        self.position = position
