"""
Payment adapters for external services.

This module provides the adapter for the Airwallex payment gateway.
All Airwallex API calls should go through these adapters to ensure
consistent error handling, timeouts and observability.

Usage:
    from payments.adapters import AirwallexClient, TokenCache

    client = AirwallexClient(client_id="...", api_key="...")
    tokens = TokenCache(fetch=client.login)

    intent = client.retrieve_payment_intent(tokens.get_token(), "int_xxx")
"""

from payments.adapters.airwallex_adapter import (
    AirwallexClient,
    IntentCreatedResponse,
    PaymentIntent,
    TokenResponse,
)
from payments.adapters.token_cache import CachedToken, TokenCache, parse_expiry

__all__ = [
    "AirwallexClient",
    "CachedToken",
    "IntentCreatedResponse",
    "PaymentIntent",
    "TokenCache",
    "TokenResponse",
    "parse_expiry",
]
