"""Error taxonomy for fluxql.

Every failure surfaced by the SDK is a ``FluxQLError`` carrying an
``ErrorKind``. GraphQL error lists are classified by their control codes:
``network_error`` and ``invalid_session`` are treated as signals, not just
diagnostic text.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

NETWORK_ERROR_CODE = "network_error"
INVALID_SESSION_CODE = "invalid_session"
HTTP_ERROR_CODE = "http_error"


class ErrorKind(str, Enum):
    """Classification of SDK failures."""

    VALIDATION = "validation"
    NETWORK = "network"
    INVALID_SESSION = "invalid_session"
    API = "api"
    CONFIGURATION = "configuration"


class FluxQLError(Exception):
    """Base class for all fluxql errors."""

    kind: ErrorKind = ErrorKind.API


class ValidationError(FluxQLError):
    """Raised by a validator stage when an input payload is malformed.

    Validation errors never reach the network and are never retried.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class ConfigurationError(FluxQLError):
    """Raised when a required configuration value is missing."""

    kind = ErrorKind.CONFIGURATION


class ApiError(FluxQLError):
    """Raised when a GraphQL call returns an error list.

    Attributes:
        errors: The ``errors[].message`` values of the response.
    """

    kind = ErrorKind.API

    def __init__(self, errors: Iterable[str], message: str | None = None) -> None:
        self.errors = [str(error) for error in errors]
        super().__init__(message or ", ".join(self.errors) or "GraphQL request failed")

    @classmethod
    def from_messages(
        cls,
        errors: Iterable[str],
        message: str | None = None,
    ) -> "ApiError":
        """Build the error subclass matching the control codes in ``errors``.

        Args:
            errors: Error messages from a GraphQL ``errors`` list.
            message: Optional human-readable message.

        Returns:
            A ``NetworkError``, ``InvalidSessionError`` or plain ``ApiError``.
        """
        codes = [str(error) for error in errors]
        if NETWORK_ERROR_CODE in codes:
            return NetworkError(codes, message)
        if INVALID_SESSION_CODE in codes:
            return InvalidSessionError(codes, message)
        return ApiError(codes, message)

    @classmethod
    def from_response(cls, errors: list[dict[str, Any]]) -> "ApiError":
        """Build a classified error from a GraphQL ``errors`` envelope."""
        messages = [str(error.get("message", "")) for error in errors]
        return cls.from_messages(messages)


class NetworkError(ApiError):
    """Transient connectivity failure. Callers retry by re-invoking the action."""

    kind = ErrorKind.NETWORK


class InvalidSessionError(ApiError):
    """The backend rejected the session token."""

    kind = ErrorKind.INVALID_SESSION

    def __init__(
        self,
        errors: Iterable[str] = (INVALID_SESSION_CODE,),
        message: str | None = None,
    ) -> None:
        super().__init__(errors, message)


class SessionInvalidated(dict[str, Any]):
    """Soft result returned when a call ended in session invalidation.

    It is an empty mapping, so ``result == {}`` holds for callers that only
    check for emptiness, while ``isinstance(result, SessionInvalidated)``
    distinguishes it from a genuinely empty payload.
    """

    kind = ErrorKind.INVALID_SESSION

    def __repr__(self) -> str:
        return "SessionInvalidated()"
