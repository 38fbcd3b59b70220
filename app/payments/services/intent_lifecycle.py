"""
Payment intent lifecycle for the Airwallex provider.

This module provides the IntentLifecycle class which creates payment
intents from a PayRequest, derives the hosted checkout URL for them, and
later fetches their state.

The lifecycle:
- Packs product metadata into the intent descriptor so asynchronous
  notifications can be reconciled without the original request
- Uses the platform order id as request_id, making creation idempotent
- Never caches intents: every query is a fresh round trip

Usage:
    from payments.services import IntentLifecycle

    lifecycle = IntentLifecycle(client, tokens)
    intent = lifecycle.create_intent(request)
    pay_url = lifecycle.build_checkout_url(intent, request)

    # Later
    intent = lifecycle.query_intent(intent.id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode, urlsplit

from payments.adapters import PaymentIntent
from payments.descriptor import pack_descriptor
from payments.exceptions import (
    AirwallexError,
    AirwallexGatewayError,
    DescriptorError,
    IntentCreationError,
)
from payments.state_machines import IntentStatus

if TYPE_CHECKING:
    from payments.adapters import AirwallexClient, TokenCache
    from payments.types import PayRequest


logger = logging.getLogger(__name__)

DEFAULT_CHECKOUT_URL = "https://checkout.airwallex.com/#/standalone/checkout?"

# 1x1 transparent GIF, shown instead of Airwallex's own logo
PLACEHOLDER_LOGO_URL = "data:image/gif;base64,R0lGODlhAQABAAD/ACwAAAAAAQABAAACADs="


def resolve_logo_url(return_url: str) -> str:
    """
    Derive the checkout logo from the merchant's return URL.

    Args:
        return_url: URL the payer returns to ("" if none)

    Returns:
        "scheme://host/favicon.ico" for the return URL's site, or the
        placeholder image when no host can be derived

    Example:
        >>> resolve_logo_url("https://shop.example/return")
        'https://shop.example/favicon.ico'
    """
    if not return_url:
        return PLACEHOLDER_LOGO_URL

    try:
        parts = urlsplit(return_url)
    except ValueError:
        return PLACEHOLDER_LOGO_URL

    host = parts.netloc.rpartition("@")[2]
    if not host:
        return PLACEHOLDER_LOGO_URL

    scheme = parts.scheme or "https"
    return f"{scheme}://{host}/favicon.ico"


class IntentLifecycle:
    """
    Creates, links and queries Airwallex payment intents.

    Args:
        client: AirwallexClient issuing the HTTP calls
        tokens: TokenCache supplying bearer tokens
        checkout_url: Hosted checkout base URL, ending in "?"
    """

    def __init__(
        self,
        client: AirwallexClient,
        tokens: TokenCache,
        checkout_url: str = DEFAULT_CHECKOUT_URL,
    ) -> None:
        self.client = client
        self.tokens = tokens
        self.checkout_url = checkout_url

    def build_intent_body(self, request: PayRequest) -> dict[str, Any]:
        """
        Build the payment_intents/create body for a pay request.

        Raises:
            DescriptorError: A product field contains the descriptor delimiter
        """
        descriptor = pack_descriptor(
            [request.product_name, request.product_display_name, request.provider_name]
        )
        return {
            "request_id": request.order_id,
            "amount": float(request.price),
            "currency": request.currency,
            "merchant_order_id": request.order_id,
            "descriptor": descriptor,
            "metadata": {
                "descriptor": descriptor,
                "description": request.product_description,
            },
            "order": {
                "products": [
                    {
                        "name": request.product_display_name,
                        "quantity": 1,
                        "desc": request.product_description,
                        "image_url": request.product_image,
                    }
                ]
            },
        }

    def create_intent(self, request: PayRequest) -> PaymentIntent:
        """
        Create a payment intent for a pay request.

        Args:
            request: The platform's pay request

        Returns:
            PaymentIntent in REQUIRES_PAYMENT_METHOD state

        Raises:
            IntentCreationError: Wraps the underlying failure
        """
        log_context = {
            "operation": "create_intent",
            "order_id": request.order_id,
            "currency": request.currency,
        }

        token = None
        try:
            body = self.build_intent_body(request)
            token = self.tokens.get_token()
            created = self.client.create_payment_intent(token, body)
        except DescriptorError as e:
            logger.error("Could not pack intent descriptor", extra=log_context)
            raise IntentCreationError(
                "Product fields cannot be packed into the intent descriptor",
                details={"order_id": request.order_id},
            ) from e
        except AirwallexError as e:
            self._on_gateway_failure(e, token)
            logger.error(
                "Failed to create Airwallex payment intent",
                extra={**log_context, "error_code": e.error_code},
            )
            raise IntentCreationError(
                "Failed to create payment intent",
                details={"order_id": request.order_id, "cause": e.error_code},
            ) from e

        logger.info(
            "Created Airwallex payment intent",
            extra={**log_context, "payment_intent_id": created.id},
        )

        return PaymentIntent(
            id=created.id,
            status=IntentStatus.REQUIRES_PAYMENT_METHOD,
            amount=float(request.price),
            currency=request.currency,
            client_secret=created.client_secret,
            request_id=request.order_id,
            descriptor=body["descriptor"],
            metadata=body["metadata"],
        )

    def build_checkout_url(self, intent: PaymentIntent, request: PayRequest) -> str:
        """
        Build the hosted checkout redirect URL.

        The same return URL is used for success and failure: the outcome
        is read from a later status query, not from which callback fired.
        """
        params = {
            "intent_id": intent.id,
            "client_secret": intent.client_secret,
            "currency": request.currency,
            "amount": str(request.price),
            "sessionId": request.order_id,
            "successUrl": request.return_url,
            "failUrl": request.return_url,
            "logoUrl": resolve_logo_url(request.return_url),
        }
        return self.checkout_url + urlencode(params)

    def query_intent(self, intent_id: str) -> PaymentIntent:
        """
        Fetch the current state of a payment intent.

        Raises:
            AirwallexAuthError: Token could not be obtained
            AirwallexGatewayError: Airwallex rejected the lookup
            AirwallexTransportError: Network failure or timeout
            AirwallexDecodeError: Response did not match the intent schema
        """
        token = None
        try:
            token = self.tokens.get_token()
            return self.client.retrieve_payment_intent(token, intent_id)
        except AirwallexError as e:
            self._on_gateway_failure(e, token)
            raise

    def _on_gateway_failure(self, error: AirwallexError, token: str | None) -> None:
        # Only the token the failed call carried is discarded
        if token is None:
            return
        if isinstance(error, AirwallexGatewayError) and error.status_code == 401:
            if self.tokens.invalidate(token):
                logger.warning("Airwallex rejected the cached token; discarding it")


__all__ = [
    "DEFAULT_CHECKOUT_URL",
    "IntentLifecycle",
    "PLACEHOLDER_LOGO_URL",
    "resolve_logo_url",
]
