"""Consolidated exception hierarchy for gemini-rotator.

All exceptions use proper exception chaining with the `from` keyword.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from http import HTTPStatus
from typing import Any


class ErrorType(StrEnum):
    """Error type codes attached to every raised error."""

    CONFIGURATION = "configuration_error"
    NO_CREDENTIALS = "no_credentials_error"
    TRANSPORT = "transport_error"
    EMPTY_RESPONSE = "empty_response_error"
    FATAL_UPSTREAM = "fatal_upstream_error"
    CREDENTIALS_EXHAUSTED = "credentials_exhausted_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class GeminiRotatorError(Exception):
    """Base exception for all gemini-rotator errors.

    Carries an HTTP-like status code and structured details so callers
    can map failures onto their own responses.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | str = ErrorType.TRANSPORT,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if isinstance(error_type, str) and not isinstance(error_type, ErrorType):
            try:
                self.error_type = ErrorType(error_type)
            except ValueError:
                self.error_type = error_type  # type: ignore[assignment]
        else:
            self.error_type = error_type
        self.status_code = int(status_code)
        self.details = details or {}


class ConfigurationError(GeminiRotatorError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.CONFIGURATION,
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            details=details,
        )


# ============================================================================
# Transport Errors
# ============================================================================


class TransportError(GeminiRotatorError):
    """Error reported by a text-generation transport.

    ``retriable`` is the structured classification tag set by the transport
    when it can tell from the response (HTTP status, upstream status or error
    reason) that the failure belongs to the credential or to transient
    service capacity. ``None`` means the transport has no opinion and the
    message patterns decide.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = HTTPStatus.BAD_GATEWAY,
        upstream_status: str | None = None,
        reason: str | None = None,
        retriable: bool | None = None,
    ) -> None:
        super().__init__(
            message,
            error_type=ErrorType.TRANSPORT,
            status_code=status_code,
            details={
                "upstream_status": upstream_status,
                "reason": reason,
            },
        )
        self.upstream_status = upstream_status
        self.reason = reason
        self.retriable = retriable


class EmptyResponseError(GeminiRotatorError):
    """A success-shaped reply arrived without any text payload."""

    def __init__(self, message: str = "Empty response received from model") -> None:
        super().__init__(
            message,
            error_type=ErrorType.EMPTY_RESPONSE,
            status_code=HTTPStatus.BAD_GATEWAY,
        )


# ============================================================================
# Rotation Errors
# ============================================================================


class NoCredentialsError(GeminiRotatorError):
    """The credential pool is empty."""

    def __init__(
        self,
        message: str = "No API keys configured. Add at least one key to the settings.",
    ) -> None:
        super().__init__(
            message,
            error_type=ErrorType.NO_CREDENTIALS,
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
        )


class FatalUpstreamError(GeminiRotatorError):
    """A non-retriable failure ended the call without further rotation.

    The original error is available both as ``cause`` and through
    ``__cause__``.
    """

    def __init__(self, cause: BaseException, *, attempts: int) -> None:
        super().__init__(
            f"Non-retriable error from AI service: {cause}",
            error_type=ErrorType.FATAL_UPSTREAM,
            status_code=getattr(cause, "status_code", HTTPStatus.BAD_GATEWAY),
            details={"attempts": attempts},
        )
        self.cause = cause
        self.attempts = attempts


class AllCredentialsExhaustedError(GeminiRotatorError):
    """Every credential in the pool failed with a retriable error."""

    def __init__(self, failures: list[BaseException]) -> None:
        super().__init__(
            f"All {len(failures)} API keys failed due to limits or errors",
            error_type=ErrorType.CREDENTIALS_EXHAUSTED,
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            details={"attempts": len(failures)},
        )
        self.failures = failures

    @property
    def attempts(self) -> int:
        return len(self.failures)


__all__ = [
    "AllCredentialsExhaustedError",
    "ConfigurationError",
    "EmptyResponseError",
    "ErrorType",
    "FatalUpstreamError",
    "GeminiRotatorError",
    "NoCredentialsError",
    "TransportError",
]
