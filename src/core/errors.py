"""Error classification utilities for plant analysis and task operations."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class ErrorCategory(Enum):
    """Categories of errors that can occur while talking to the analysis service."""

    SERVICE_QUOTA_EXCEEDED = "service_quota_exceeded"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    AUTHENTICATION_FAILED = "authentication_failed"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Service errors
    ERR_SERVICE_QUOTA_EXCEEDED = "ERR_SERVICE_QUOTA_EXCEEDED"
    ERR_RATE_LIMIT_EXCEEDED = "ERR_RATE_LIMIT_EXCEEDED"
    ERR_AUTHENTICATION_FAILED = "ERR_AUTHENTICATION_FAILED"
    ERR_NETWORK_ERROR = "ERR_NETWORK_ERROR"
    ERR_ANALYSIS_FAILED = "ERR_ANALYSIS_FAILED"

    # Record errors
    ERR_PLANT_NOT_FOUND = "ERR_PLANT_NOT_FOUND"
    ERR_ROOM_NOT_FOUND = "ERR_ROOM_NOT_FOUND"
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_RECORD_NOT_FOUND = "ERR_RECORD_NOT_FOUND"

    # Configuration errors
    ERR_MISSING_API_KEY = "ERR_MISSING_API_KEY"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_ERROR_PATTERNS: dict[
    Literal["quota", "rate_limit", "auth", "network"],
    dict[str, list[str] | set[str]],
] = {
    "quota": {
        "phrases": [
            "quota exceeded",
            "insufficient credits",
            "insufficient_quota",
            "credit limit",
            "out of credits",
        ],
        "exception_types": set(),
    },
    "rate_limit": {
        "phrases": [
            "rate limit",
            "too many requests",
            "rate_limit_exceeded",
            "429",
        ],
        "exception_types": set(),
    },
    "auth": {
        "phrases": [
            "authentication failed",
            "invalid api key",
            "incorrect api key",
            "unauthorized",
            "401",
        ],
        "exception_types": {"AuthenticationError", "PermissionError"},
    },
    "network": {
        "phrases": [
            "connection",
            "timeout",
            "timed out",
            "network",
            "503",
            "502",
            "504",
        ],
        "exception_types": {"ConnectionError", "TimeoutError", "ConnectError", "ReadTimeout"},
    },
}


def _match_error_pattern(
    *,
    error_str: str,
    exception_type: str,
    pattern_type: Literal["quota", "rate_limit", "auth", "network"],
) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def classify_analysis_error(exception: Exception) -> tuple[ErrorCategory, str]:
    """Classify an image-analysis error and return a user-friendly message.

    Args:
        exception: The exception raised while calling the analysis service

    Returns:
        Tuple of (ErrorCategory, user_friendly_message)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="quota"):
        return (
            ErrorCategory.SERVICE_QUOTA_EXCEEDED,
            "The AI service quota has been exceeded. Please try again later.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="rate_limit"):
        return (
            ErrorCategory.RATE_LIMIT_EXCEEDED,
            "Too many requests. Please wait a moment and try again.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="auth"):
        return (
            ErrorCategory.AUTHENTICATION_FAILED,
            "The AI service rejected the API key. Please check your settings.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Network error occurred. Please check your connection and try again.",
        )

    return (
        ErrorCategory.UNKNOWN,
        "An unexpected error occurred. Please try again later.",
    )


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if isinstance(exception, KeyError) or "not found" in error_str:
        if "plants" in error_str or "plant" in error_str:
            return ErrorResponse(
                code=ErrorCode.ERR_PLANT_NOT_FOUND,
                message="I couldn't find that plant.",
                suggestion="It may have been moved to the cemetery. Check the archived plants.",
                severity=ErrorSeverity.LOW,
            )
        if "rooms" in error_str or "room" in error_str:
            return ErrorResponse(
                code=ErrorCode.ERR_ROOM_NOT_FOUND,
                message="I couldn't find that room.",
                suggestion="Reload the room overview and try again.",
                severity=ErrorSeverity.LOW,
            )
        if "tasks" in error_str or "task" in error_str:
            return ErrorResponse(
                code=ErrorCode.ERR_TASK_NOT_FOUND,
                message="I couldn't find that task.",
                suggestion="The task may have been deleted. Reload the plant's task list.",
                severity=ErrorSeverity.LOW,
            )
        return ErrorResponse(
            code=ErrorCode.ERR_RECORD_NOT_FOUND,
            message="The requested record does not exist.",
            suggestion="Reload the page and try again.",
            severity=ErrorSeverity.LOW,
        )

    if exception_type == "ValueError" and "credential not configured" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_MISSING_API_KEY,
            message="No API key is configured for plant analysis.",
            suggestion="Add your API key in the settings.",
            severity=ErrorSeverity.HIGH,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="quota"):
        return ErrorResponse(
            code=ErrorCode.ERR_SERVICE_QUOTA_EXCEEDED,
            message="The AI service quota has been exceeded.",
            suggestion="Please try again later or check your plan.",
            severity=ErrorSeverity.HIGH,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="rate_limit"):
        return ErrorResponse(
            code=ErrorCode.ERR_RATE_LIMIT_EXCEEDED,
            message="Too many requests.",
            suggestion="Please wait a moment and try again.",
            severity=ErrorSeverity.MEDIUM,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="auth"):
        return ErrorResponse(
            code=ErrorCode.ERR_AUTHENTICATION_FAILED,
            message="Service authentication failed.",
            suggestion="Check the API key in your settings.",
            severity=ErrorSeverity.CRITICAL,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return ErrorResponse(
            code=ErrorCode.ERR_NETWORK_ERROR,
            message="Network error occurred.",
            suggestion="Please check your connection and try again.",
            severity=ErrorSeverity.MEDIUM,
        )

    if "analysis" in error_str or "no content returned" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_ANALYSIS_FAILED,
            message="The plant could not be analysed.",
            suggestion="Try a sharper photo with the whole plant in frame.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, restart the app.",
        severity=ErrorSeverity.MEDIUM,
    )
