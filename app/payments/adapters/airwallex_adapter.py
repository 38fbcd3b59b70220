"""
Airwallex API adapter for payment operations.

This module provides the AirwallexClient class which encapsulates all
Airwallex REST API interactions. All Airwallex calls should go through
this adapter to ensure consistent error handling, timeouts and
observability.

Features:
- Fixed client-side timeout on every call
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Response schemas decoded once at the boundary
- No automatic retries (retry policy belongs to the caller)

Configuration (via settings):
- AIRWALLEX_CLIENT_ID: Client identifier sent on login
- AIRWALLEX_API_KEY: API key sent on login
- AIRWALLEX_API_ENDPOINT: API base URL (default: https://api.airwallex.com)
- AIRWALLEX_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Usage:
    from payments.adapters import AirwallexClient, TokenCache

    client = AirwallexClient(client_id="...", api_key="...")
    tokens = TokenCache(fetch=client.login)

    created = client.create_payment_intent(tokens.get_token(), body)
    intent = client.retrieve_payment_intent(tokens.get_token(), created.id)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from payments.exceptions import (
    AirwallexAuthError,
    AirwallexDecodeError,
    AirwallexError,
    AirwallexGatewayError,
    AirwallexTransportError,
)


DEFAULT_API_ENDPOINT = "https://api.airwallex.com"
DEFAULT_TIMEOUT_SECONDS = 10

LOGIN_PATH = "authentication/login"
CREATE_INTENT_PATH = "pa/payment_intents/create"
RETRIEVE_INTENT_PATH = "pa/payment_intents/{intent_id}"


# =============================================================================
# Response Schemas
# =============================================================================


def _require_str(payload: dict[str, Any], key: str, schema: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise AirwallexDecodeError(
            f"{schema} response is missing {key!r}",
            details={"schema": schema, "field": key},
        )
    return value


def _optional_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


@dataclass
class TokenResponse:
    """
    Body of a successful login call.

    Attributes:
        token: Bearer token
        expires_at: Raw expiry timestamp (e.g. "2024-01-01T00:30:00+0000")
    """

    token: str
    expires_at: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenResponse:
        token = payload.get("token")
        expires_at = payload.get("expires_at")
        if not isinstance(token, str) or not token:
            raise AirwallexAuthError("Login response is missing token")
        if not isinstance(expires_at, str) or not expires_at:
            raise AirwallexAuthError("Login response is missing expires_at")
        return cls(token=token, expires_at=expires_at)


@dataclass
class IntentCreatedResponse:
    """
    Body of a successful create-intent call.

    Attributes:
        id: PaymentIntent ID (int_xxx)
        client_secret: Secret handed to the hosted checkout page
    """

    id: str
    client_secret: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> IntentCreatedResponse:
        return cls(
            id=_require_str(payload, "id", "payment_intents/create"),
            client_secret=_require_str(payload, "client_secret", "payment_intents/create"),
        )


@dataclass
class PaymentIntent:
    """
    Point-in-time snapshot of an Airwallex PaymentIntent.

    Never cached: status fields change server-side as the payment
    proceeds, so callers query again instead of reusing a snapshot.

    Attributes:
        id: PaymentIntent ID
        status: Intent status (REQUIRES_PAYMENT_METHOD, SUCCEEDED, etc.)
        payment_attempt_status: Status of latest_payment_attempt ("" if none)
        amount: Amount in major currency units
        currency: ISO 4217 currency code
        client_secret: Secret for the hosted checkout ("" when not returned)
        request_id: Idempotency key the intent was created with
        descriptor: Top-level descriptor, if Airwallex kept it
        metadata: Attached metadata
        raw_response: Full decoded response (for debugging)
    """

    id: str
    status: str
    payment_attempt_status: str = ""
    amount: float = 0.0
    currency: str = ""
    client_secret: str = ""
    request_id: str = ""
    descriptor: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PaymentIntent:
        """
        Decode an intent object from a GET response or webhook body.

        Raises:
            AirwallexDecodeError: id or status missing, or mistyped fields
        """
        status = _require_str(payload, "status", "payment_intent")

        amount = payload.get("amount", 0)
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise AirwallexDecodeError(
                "payment_intent amount is not a number",
                details={"schema": "payment_intent", "field": "amount"},
            )

        metadata = payload.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise AirwallexDecodeError(
                "payment_intent metadata is not an object",
                details={"schema": "payment_intent", "field": "metadata"},
            )

        # A freshly created intent has no attempt yet
        attempt = payload.get("latest_payment_attempt") or {}
        attempt_status = _optional_str(attempt, "status") if isinstance(attempt, dict) else ""

        return cls(
            id=_optional_str(payload, "id"),
            status=status,
            payment_attempt_status=attempt_status,
            amount=float(amount),
            currency=_optional_str(payload, "currency"),
            client_secret=_optional_str(payload, "client_secret"),
            request_id=_optional_str(payload, "request_id"),
            descriptor=_optional_str(payload, "descriptor"),
            metadata=metadata,
            raw_response=payload,
        )


# =============================================================================
# Airwallex Client
# =============================================================================


class AirwallexClient:
    """
    Adapter for Airwallex REST API operations.

    Holds credentials and an httpx.Client; keeps no token state (see
    TokenCache). Safe to share between threads.

    Args:
        client_id: Airwallex client identifier
        api_key: Airwallex API key
        api_endpoint: API base URL, without the /api/v1 suffix
        timeout: Per-call timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        client_id: str,
        api_key: str,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.client_id = client_id
        self.api_key = api_key
        self.api_endpoint = api_endpoint.rstrip("/")
        self.timeout = timeout
        self._http = httpx.Client(timeout=timeout, transport=transport)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def url_for(self, path: str) -> str:
        """Build the absolute URL for an API path."""
        return f"{self.api_endpoint}/api/v1/{path.lstrip('/')}"

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self) -> tuple[str, str]:
        """
        Log in with the client id and API key.

        Credentials travel as request headers; the body is an empty
        JSON object.

        Returns:
            (token, raw_expiry) tuple, suitable as a TokenCache fetcher

        Raises:
            AirwallexAuthError: Call failed, non-2xx, or fields missing
        """
        logger = self.get_logger()
        log_context = {"operation": "login", "client_id": self.client_id}

        start_time = time.time()
        logger.info("Starting Airwallex operation", extra=log_context)

        try:
            response = self._http.post(
                self.url_for(LOGIN_PATH),
                json={},
                headers={
                    "x-client-id": self.client_id,
                    "x-api-key": self.api_key,
                },
            )
        except httpx.HTTPError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "Connection error during Airwallex login",
                extra={**log_context, "duration_ms": duration_ms},
                exc_info=True,
            )
            raise AirwallexAuthError(
                "Could not reach Airwallex to log in",
                details={"reason": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000

        try:
            payload = self._decode(response)
        except AirwallexDecodeError as e:
            logger.error(
                "Undecodable Airwallex login response",
                extra={**log_context, "status_code": response.status_code, "duration_ms": duration_ms},
            )
            raise AirwallexAuthError(
                "Airwallex login returned an undecodable body",
                details={"status_code": response.status_code},
            ) from e

        if response.status_code >= 400:
            logger.critical(
                "Airwallex authentication failed - check client id and API key",
                extra={**log_context, "status_code": response.status_code, "duration_ms": duration_ms},
            )
            raise AirwallexAuthError(
                "Airwallex rejected the login",
                details={"status_code": response.status_code},
            )

        result = TokenResponse.from_payload(payload)

        logger.info(
            "Airwallex operation completed",
            extra={**log_context, "expires_at": result.expires_at, "duration_ms": duration_ms},
        )
        return result.token, result.expires_at

    # =========================================================================
    # Core Operations
    # =========================================================================

    def request(
        self,
        method: str,
        path: str,
        token: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Issue an authenticated call and return the decoded JSON object.

        Args:
            method: HTTP method
            path: API path relative to /api/v1/
            token: Bearer token
            body: JSON body (None for GET)

        Returns:
            Decoded JSON object

        Raises:
            AirwallexTransportError: Connection failure or timeout
            AirwallexDecodeError: Body is not a JSON object
            AirwallexGatewayError: HTTP status >= 400
        """
        logger = self.get_logger()
        log_context = {"operation": "request", "method": method, "path": path}

        start_time = time.time()
        logger.debug("Starting Airwallex operation", extra=log_context)

        try:
            response = self._http.request(
                method,
                self.url_for(path),
                json=body,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_transport_error(e, log_context, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        log_context = {
            **log_context,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        # Airwallex returns structured errors, so decode before checking status
        payload = self._decode(response)

        if response.status_code >= 400:
            logger.error("Airwallex request failed", extra={**log_context, "gateway_code": payload.get("code")})
            raise AirwallexGatewayError(
                f"Airwallex request failed with status {response.status_code}: "
                f"{payload.get('message', 'no message')}",
                status_code=response.status_code,
                response_body=payload,
            )

        logger.debug("Airwallex operation completed", extra=log_context)
        return payload

    def create_payment_intent(self, token: str, body: dict[str, Any]) -> IntentCreatedResponse:
        """
        Create a PaymentIntent.

        Args:
            token: Bearer token
            body: Create-intent request body (must carry request_id)

        Returns:
            IntentCreatedResponse with id and client_secret
        """
        payload = self.request("POST", CREATE_INTENT_PATH, token, body)
        created = IntentCreatedResponse.from_payload(payload)
        self.get_logger().info(
            "Airwallex payment intent created",
            extra={
                "operation": "create_payment_intent",
                "payment_intent_id": created.id,
                "request_id": body.get("request_id"),
            },
        )
        return created

    def retrieve_payment_intent(self, token: str, intent_id: str) -> PaymentIntent:
        """
        Retrieve a PaymentIntent by ID.

        Args:
            token: Bearer token
            intent_id: Airwallex PaymentIntent ID

        Returns:
            PaymentIntent snapshot
        """
        payload = self.request(
            "GET", RETRIEVE_INTENT_PATH.format(intent_id=intent_id), token
        )
        return PaymentIntent.from_payload(payload)

    # =========================================================================
    # Error Handling
    # =========================================================================

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        """Decode a response body that must be a JSON object."""
        try:
            payload = response.json()
        except ValueError as e:
            raise AirwallexDecodeError(
                "Airwallex returned a body that is not valid JSON",
                details={"status_code": response.status_code},
            ) from e

        if not isinstance(payload, dict):
            raise AirwallexDecodeError(
                "Airwallex returned JSON that is not an object",
                details={"status_code": response.status_code},
            )
        return payload

    @classmethod
    def _handle_transport_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate httpx exceptions to domain exceptions.

        Raises:
            AirwallexTransportError: Timeout or connection failure
            AirwallexError: Any other unexpected failure
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, httpx.TimeoutException):
            logger.error("Timeout calling Airwallex", extra=log_context)
            raise AirwallexTransportError(
                "Airwallex request timed out",
                error_code="AIRWALLEX_TIMEOUT",
            ) from error

        elif isinstance(error, httpx.HTTPError):
            logger.error(
                "Connection error to Airwallex",
                extra=log_context,
                exc_info=True,
            )
            raise AirwallexTransportError(
                "Could not connect to Airwallex",
            ) from error

        else:
            logger.error(
                f"Unexpected error calling Airwallex: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise AirwallexError(
                f"Unexpected Airwallex error: {type(error).__name__}",
            ) from error


__all__ = [
    "AirwallexClient",
    "IntentCreatedResponse",
    "PaymentIntent",
    "TokenResponse",
]
