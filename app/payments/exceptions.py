"""
Payment-specific exceptions for Airwallex gateway operations.

This module provides the exception hierarchy raised by the Airwallex
adapter, the token cache, the intent lifecycle and the status reconciler.

Exception Hierarchy:
    ExternalServiceError (core)
    └── AirwallexError - Base for all Airwallex errors
        ├── AirwallexAuthError - Token fetch/parse failure
        │   └── ExpiryFormatError - expires_at could not be parsed
        ├── AirwallexTransportError - Network failure or timeout
        ├── AirwallexGatewayError - Remote 4xx/5xx with structured body
        ├── AirwallexDecodeError - Malformed JSON or missing fields
        ├── IntentCreationError - Payment intent could not be created
        └── UnexpectedStatusError - Status outside the reconciliation table

    DescriptorError - Packed descriptor could not be decoded (ValueError)

None of these errors are retried inside the payments app. Retry policy,
if any, belongs to the calling platform.

Usage:
    from payments.exceptions import AirwallexError, IntentCreationError

    try:
        response = provider.pay(request)
    except IntentCreationError as e:
        logger.error("Payment failed", extra={"error_code": e.error_code})
        return JsonResponse(e.to_dict(), status=502)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from typing import Any


class AirwallexError(ExternalServiceError):
    """
    Base exception for all Airwallex-related errors.

    The original exception (if any) is available as ``__cause__`` for
    logging. Messages never include credentials or bearer tokens.
    """

    default_error_code: str = "AIRWALLEX_ERROR"


class AirwallexAuthError(AirwallexError):
    """
    Login to Airwallex failed or returned an unusable token.

    Raised when:
    - The login call fails at the network level
    - The login response is not 2xx or its body is undecodable
    - The response lacks ``token`` or ``expires_at``
    """

    default_error_code: str = "AIRWALLEX_AUTH_FAILED"


class ExpiryFormatError(AirwallexAuthError):
    """
    The token ``expires_at`` value could not be parsed.

    Airwallex emits offsets such as ``+0000``; these are normalized
    before parsing, so this only fires for genuinely malformed values.
    """

    default_error_code: str = "AIRWALLEX_EXPIRY_FORMAT"


class AirwallexTransportError(AirwallexError):
    """
    Connection to Airwallex failed or timed out.

    IMPORTANT: for create calls the operation may have succeeded on
    Airwallex's side. The ``request_id`` sent with every create makes a
    platform-level retry safe.
    """

    default_error_code: str = "AIRWALLEX_UNAVAILABLE"


class AirwallexGatewayError(AirwallexError):
    """
    Airwallex answered with HTTP status >= 400.

    Attributes:
        status_code: HTTP status returned by Airwallex
        response_body: Decoded JSON error body, kept for diagnostics
    """

    default_error_code: str = "AIRWALLEX_GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: dict[str, Any] | None = None,
        error_code: str | None = None,
    ):
        self.status_code = status_code
        self.response_body = response_body or {}
        details: dict[str, Any] = {"status_code": status_code}
        if self.response_body.get("code"):
            details["gateway_code"] = self.response_body["code"]
        super().__init__(message, error_code=error_code, details=details)


class AirwallexDecodeError(AirwallexError):
    """
    Response or webhook body was not the JSON object we expected.

    Covers invalid JSON, non-object JSON, and missing or mistyped
    required fields in a response schema.
    """

    default_error_code: str = "AIRWALLEX_DECODE_ERROR"


class IntentCreationError(AirwallexError):
    """
    A payment intent could not be created.

    Wraps the underlying AirwallexError, which is chained as
    ``__cause__``.
    """

    default_error_code: str = "INTENT_CREATION_FAILED"


class UnexpectedStatusError(AirwallexError):
    """
    The intent/attempt status combination is not in the reconciliation
    table.

    Attributes:
        intent_status: Outer intent status reported by Airwallex
        attempt_status: Latest payment attempt status ("" if none)
    """

    default_error_code: str = "UNEXPECTED_PAYMENT_STATUS"

    def __init__(self, intent_status: str, attempt_status: str = ""):
        self.intent_status = intent_status
        self.attempt_status = attempt_status
        super().__init__(
            f"Unexpected Airwallex status: intent={intent_status!r}, "
            f"attempt={attempt_status!r}",
            details={
                "intent_status": intent_status,
                "attempt_status": attempt_status,
            },
        )


class DescriptorError(ValueError):
    """Raised when a packed product descriptor cannot be unpacked."""


__all__ = [
    "AirwallexError",
    "AirwallexAuthError",
    "ExpiryFormatError",
    "AirwallexTransportError",
    "AirwallexGatewayError",
    "AirwallexDecodeError",
    "IntentCreationError",
    "UnexpectedStatusError",
    "DescriptorError",
]
