"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error payloads for provider callbacks and API responses
- Machine-readable error codes for the calling platform
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    └── ExternalServiceError - Third-party service failures

Usage:
    from core.exceptions import ExternalServiceError

    # Raise with message only
    raise ExternalServiceError("Gateway unavailable")

    # Raise with additional details
    raise ExternalServiceError(
        "Gateway rejected the request",
        error_code="GATEWAY_ERROR",
        details={"status_code": 400}
    )

    # Convert to dict for a JSON response
    try:
        ...
    except BaseApplicationError as e:
        return JsonResponse(e.to_dict(), status=502)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (status codes, ids, etc.)

    Example:
        try:
            provider.pay(request)
        except BaseApplicationError as e:
            logger.warning(f"Payment failed: {e.error_code}")
            return JsonResponse(e.to_dict(), status=502)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for a JSON response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Login to Airwallex failed",
                "error_code": "AIRWALLEX_AUTH_FAILED",
                "details": {"status_code": 401}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Third-party API failures (payment gateways, etc.)
    - Network timeouts
    - External service unavailability
    - Unexpected external service responses

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
        HTTP 502 Bad Gateway or 503 Service Unavailable are appropriate.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
