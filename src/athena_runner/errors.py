"""Typed failures raised across a query run."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

_MAX_MESSAGE_CHARS = 2048


class ErrorCategory(str, Enum):
    """Provider-agnostic error categories used for log detail."""

    CONFIGURATION = "configuration"
    INVALID_REQUEST = "invalid_request"
    EXECUTION_FAILED = "execution_failed"
    TIMEOUT = "timeout"
    THROTTLING = "throttling"
    AUTH = "auth"
    CONNECTIVITY = "connectivity"
    TRANSIENT = "transient"
    UNKNOWN = "unknown"


class QueryRunnerError(Exception):
    """Base class for every failure surfaced by a query run."""


class RunnerConfigError(QueryRunnerError, ValueError):
    """Raised when runner configuration is missing or unsafe."""


class QuerySubmissionError(QueryRunnerError):
    """Raised when Athena rejects the statement or its execution target."""

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        """Keep the service message verbatim."""
        self.error_code = error_code
        self.service_message = message
        super().__init__(f"Query submission rejected: {message}")


class QueryExecutionFailedError(QueryRunnerError):
    """Raised when a query reaches a FAILED or CANCELLED terminal state."""

    def __init__(self, execution_id: str, state: str, reason: Optional[str]) -> None:
        """Capture the terminal state and the service-reported reason."""
        self.execution_id = execution_id
        self.state = state
        self.reason = reason
        super().__init__(f"Query {state}: {reason}")


class QueryWaitTimeoutError(QueryRunnerError, TimeoutError):
    """Raised when the wait deadline passes while the query is still running.

    The remote execution is not cancelled and may still complete.
    """

    def __init__(
        self, execution_id: str, timeout_seconds: float, last_state: Optional[str] = None
    ) -> None:
        """Capture the deadline that expired."""
        self.execution_id = execution_id
        self.timeout_seconds = timeout_seconds
        self.last_state = last_state
        super().__init__(f"Query execution timed out after {timeout_seconds:g} seconds")


class QueryTransportError(QueryRunnerError):
    """Raised when a call to the query service itself fails."""

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        error_code: Optional[str] = None,
        http_status: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> None:
        """Capture call metadata reported by the AWS SDK when present."""
        self.operation = operation
        self.error_code = error_code
        self.http_status = http_status
        self.request_id = request_id
        self.service_message = message
        super().__init__(f"{operation} failed: {message}")


_THROTTLING_CODES = {
    "ThrottlingException",
    "TooManyRequestsException",
    "RequestLimitExceeded",
    "SlowDown",
}
_AUTH_CODES = {
    "AccessDeniedException",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "ExpiredTokenException",
    "NoCredentialsError",
}
_TRANSIENT_CODES = {"InternalServerException", "ServiceUnavailable", "ServiceUnavailableException"}


def classify_error(exc: BaseException) -> ErrorCategory:
    """Classify a run failure into a provider-agnostic category."""
    if isinstance(exc, RunnerConfigError):
        return ErrorCategory.CONFIGURATION
    if isinstance(exc, QuerySubmissionError):
        return ErrorCategory.INVALID_REQUEST
    if isinstance(exc, QueryExecutionFailedError):
        return ErrorCategory.EXECUTION_FAILED
    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, QueryTransportError):
        code = exc.error_code or ""
        if code in _THROTTLING_CODES or exc.http_status == 429:
            return ErrorCategory.THROTTLING
        if code in _AUTH_CODES or exc.http_status in {401, 403}:
            return ErrorCategory.AUTH
        if code in _TRANSIENT_CODES or (exc.http_status or 0) >= 500:
            return ErrorCategory.TRANSIENT

    message = str(exc).lower()
    if any(token in message for token in ("timed out", "timeout")):
        return ErrorCategory.TIMEOUT
    if any(token in message for token in ("rate exceeded", "throttl", "too many requests")):
        return ErrorCategory.THROTTLING
    if any(token in message for token in ("could not connect", "connection", "endpoint url")):
        return ErrorCategory.CONNECTIVITY
    if any(token in message for token in ("access denied", "not authorized", "credentials")):
        return ErrorCategory.AUTH
    return ErrorCategory.UNKNOWN


def describe_error(exc: BaseException) -> Dict[str, Any]:
    """Return bounded structured detail for logging a failed run."""
    details: Dict[str, Any] = {
        "type": exc.__class__.__name__,
        "category": classify_error(exc).value,
        "message": str(exc)[:_MAX_MESSAGE_CHARS],
    }
    for attribute in (
        "execution_id",
        "state",
        "reason",
        "timeout_seconds",
        "last_state",
        "operation",
        "error_code",
        "http_status",
        "request_id",
    ):
        value = getattr(exc, attribute, None)
        if value is not None:
            details[attribute] = value
    return details
