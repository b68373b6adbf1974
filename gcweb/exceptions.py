"""Custom exceptions for the geocaching.com web client."""

from typing import Any


class GCWebError(Exception):
    """Base exception for all gcweb errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize gcweb error.

        Args:
            message: Error message
            details: Additional error details

        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(GCWebError):
    """Raised when configuration is invalid or missing."""


class APIError(GCWebError):
    """Base class for API-related errors."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            status_code: HTTP status code
            message: Error message
            response_text: Raw response text from API
            details: Additional error details

        """
        super().__init__(message, details)
        self.status_code = status_code
        self.response_text = response_text


class AuthenticationError(APIError):
    """Raised when the session is not accepted (401)."""

    def __init__(self, message: str = "Authentication failed", response_text: str | None = None) -> None:
        super().__init__(401, message, response_text)


class PermissionError(APIError):
    """Raised when access is forbidden (403)."""

    def __init__(self, message: str = "Access forbidden", response_text: str | None = None) -> None:
        super().__init__(403, message, response_text)


class NotFoundError(APIError):
    """Raised when resource is not found (404)."""

    def __init__(self, message: str = "Resource not found", response_text: str | None = None) -> None:
        super().__init__(404, message, response_text)


class RateLimitError(APIError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        response_text: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(429, message, response_text)
        self.retry_after = retry_after


class ValidationError(GCWebError):
    """Raised when input validation fails."""

    def __init__(self, field: str, value: Any, message: str) -> None:
        super().__init__(message, {"field": field, "value": value})
        self.field = field
        self.value = value


class DegenerateViewportError(ValidationError):
    """Raised when a search box collapses to a single point."""

    def __init__(self, viewport: Any) -> None:
        super().__init__("box", viewport, f"Searching map with empty viewport: {viewport}")


class TimeoutError(GCWebError):
    """Raised when operation times out."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        message = f"Operation '{operation}' timed out after {timeout_seconds} seconds"
        super().__init__(message, {"operation": operation, "timeout_seconds": timeout_seconds})
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class CsrfTokenMissingError(GCWebError):
    """Raised when a log page does not yield an anti-forgery token."""

    def __init__(self, url: str, status_code: int | None = None) -> None:
        super().__init__(
            f"Unable to find a CSRF token in page '{url}'",
            {"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


class RemoteRejectedError(GCWebError):
    """Raised when a successful response lacks a field the workflow depends on."""

    def __init__(self, missing_field: str, diagnostic: str) -> None:
        super().__init__(f"Response is missing '{missing_field}': {diagnostic}", {"field": missing_field})
        self.missing_field = missing_field
        self.diagnostic = diagnostic
