"""
Error taxonomy for the KGiTON SDK.

Every failure the gateway surfaces is a :class:`KGiTONError`. Callers can
branch on ``kind`` (or catch the subclass) without string matching.
"""

from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Discriminant of the error taxonomy."""
    BASE = "base"
    NETWORK = "network"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    API = "api"


class ErrorResponse(BaseModel):
    """Serializable error shape for integrators that forward SDK errors."""

    kind: ErrorKind
    code: str
    message: str
    status_code: int
    details: Optional[Any] = None


class KGiTONError(Exception):
    """Base exception for the KGiTON SDK."""

    kind: ErrorKind = ErrorKind.BASE

    def __init__(self, message: str, code: str = "KGITON_ERROR", status_code: int = 0,
                 details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self.code!r}, "
            f"status_code={self.status_code})"
        )

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            kind=self.kind,
            code=self.code,
            message=self.message,
            status_code=self.status_code,
            details=self.details
        )


class NetworkError(KGiTONError):
    """No response was received (DNS, connect, timeout)."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str = "Network request failed", details: Optional[Any] = None):
        super().__init__(message, "NETWORK_ERROR", 0, details)


class ValidationError(KGiTONError):
    """The server rejected the request payload (HTTP 400)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "Validation failed", details: Optional[Any] = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class AuthenticationError(KGiTONError):
    """Missing or invalid credentials (HTTP 401)."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, "AUTHENTICATION_ERROR", 401, details)


class AuthorizationError(KGiTONError):
    """Authenticated but not allowed (HTTP 403)."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, message: str = "Access denied", details: Optional[Any] = None):
        super().__init__(message, "AUTHORIZATION_ERROR", 403, details)


class NotFoundError(KGiTONError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, "NOT_FOUND", 404, details)


class RateLimitError(KGiTONError):
    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Rate limit exceeded", details: Optional[Any] = None):
        super().__init__(message, "RATE_LIMIT_EXCEEDED", 429, details)


class ApiError(KGiTONError):
    """Any other non-2xx response."""

    kind = ErrorKind.API

    def __init__(self, message: str = "An error occurred", status_code: int = 500,
                 details: Optional[Any] = None):
        super().__init__(message, "API_ERROR", status_code, details)


class InsufficientTokenError(KGiTONError):
    """License token balance is too low for the requested operation."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "Insufficient token balance", details: Optional[Any] = None):
        super().__init__(message, "INSUFFICIENT_TOKENS", 400, details)


class LicenseOwnershipError(KGiTONError):
    """Raised by ownership checks when the caller asked for a hard failure."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, "LICENSE_OWNERSHIP_ERROR", 0, details)


_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    429: RateLimitError,
}


def _body_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for field in ("error", "message"):
        value = body.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def from_response(response: httpx.Response) -> KGiTONError:
    """Classify a completed non-2xx response."""
    try:
        body: Any = response.json()
    except ValueError:
        body = {"raw": response.text} if response.text else None

    message = _body_message(body)
    error_cls = _STATUS_ERRORS.get(response.status_code)

    if error_cls is None:
        return ApiError(message or ApiError().message, response.status_code, details=body)
    if error_cls is ValidationError:
        return ValidationError(message or "Validation failed", details=body)
    return error_cls(message) if message else error_cls()


def from_transport_error(exc: httpx.TransportError) -> NetworkError:
    """Classify a request that never produced a response."""
    message = str(exc) or "Network request failed"
    details: Dict[str, Any] = {"exception": type(exc).__name__}
    return NetworkError(message, details=details)
