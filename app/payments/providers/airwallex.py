"""
Airwallex payment provider.

Ties the Airwallex adapter, token cache, intent lifecycle and status
reconciler together behind the PaymentProvider contract.

Flow:
    pay()    → create intent → hosted checkout URL
    notify() → webhook body → (re-query intent) → reconcile → NotifyResult
    query()  → re-query intent → reconcile → NotifyResult

Notification modes (AIRWALLEX_NOTIFY_MODE):
    requery  The webhook is only a trigger; the intent is fetched again
             and its live state is reconciled. Default.
    trust    The webhook payload is reconciled as-is. A Paid outcome is
             still confirmed with a follow-up query before it is returned.

Usage:
    from payments.providers import get_airwallex_provider

    provider = get_airwallex_provider()
    response = provider.pay(request)
    redirect(response.pay_url)
"""

from __future__ import annotations

import functools
import json
import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import models

from payments.adapters import AirwallexClient, PaymentIntent, TokenCache
from payments.adapters.airwallex_adapter import DEFAULT_API_ENDPOINT, DEFAULT_TIMEOUT_SECONDS
from payments.exceptions import AirwallexAuthError, AirwallexDecodeError
from payments.providers.base import PaymentProvider
from payments.services import DEFAULT_CHECKOUT_URL, IntentLifecycle
from payments.state_machines.reconciler import PaymentReconciler
from payments.types import PayResponse

if TYPE_CHECKING:
    from payments.types import NotifyResult, PayRequest


logger = logging.getLogger(__name__)


class NotifyMode(models.TextChoices):
    """How far a webhook payload is trusted."""

    REQUERY = "requery", "Re-query intent"
    TRUST = "trust", "Trust payload"


class AirwallexPaymentProvider(PaymentProvider):
    """
    Payment provider backed by Airwallex hosted checkout.

    Owns one TokenCache; share the provider instance (see
    get_airwallex_provider) so concurrent requests reuse the token.

    Args:
        lifecycle: IntentLifecycle for creating and querying intents
        reconciler: PaymentReconciler (default: new instance)
        notify_mode: NotifyMode value (default: requery)
    """

    payment_name = "Airwallex"

    def __init__(
        self,
        lifecycle: IntentLifecycle,
        reconciler: PaymentReconciler | None = None,
        notify_mode: str = NotifyMode.REQUERY,
    ) -> None:
        if notify_mode not in NotifyMode.values:
            raise ValueError(f"Unknown notify mode: {notify_mode!r}")
        self.lifecycle = lifecycle
        self.reconciler = reconciler or PaymentReconciler()
        self.notify_mode = NotifyMode(notify_mode)

    @classmethod
    def create(
        cls,
        client_id: str,
        api_key: str,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        checkout_url: str = DEFAULT_CHECKOUT_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        notify_mode: str = NotifyMode.REQUERY,
        **client_kwargs: Any,
    ) -> AirwallexPaymentProvider:
        """Build a provider with its own client and token cache."""
        client = AirwallexClient(
            client_id=client_id,
            api_key=api_key,
            api_endpoint=api_endpoint,
            timeout=timeout,
            **client_kwargs,
        )
        lifecycle = IntentLifecycle(
            client=client,
            tokens=TokenCache(fetch=client.login),
            checkout_url=checkout_url,
        )
        return cls(lifecycle=lifecycle, notify_mode=notify_mode)

    @classmethod
    def from_settings(cls) -> AirwallexPaymentProvider:
        """
        Build a provider from Django settings.

        Raises:
            ImproperlyConfigured: Credentials missing or notify mode invalid
        """
        client_id = getattr(settings, "AIRWALLEX_CLIENT_ID", "")
        api_key = getattr(settings, "AIRWALLEX_API_KEY", "")
        if not client_id or not api_key:
            raise ImproperlyConfigured(
                "AIRWALLEX_CLIENT_ID and AIRWALLEX_API_KEY must be set"
            )

        try:
            return cls.create(
                client_id=client_id,
                api_key=api_key,
                api_endpoint=getattr(settings, "AIRWALLEX_API_ENDPOINT", DEFAULT_API_ENDPOINT),
                checkout_url=getattr(settings, "AIRWALLEX_CHECKOUT_URL", DEFAULT_CHECKOUT_URL),
                timeout=getattr(settings, "AIRWALLEX_API_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
                notify_mode=getattr(settings, "AIRWALLEX_NOTIFY_MODE", NotifyMode.REQUERY),
            )
        except ValueError as e:
            raise ImproperlyConfigured(str(e)) from e

    # =========================================================================
    # PaymentProvider
    # =========================================================================

    def pay(self, request: PayRequest) -> PayResponse:
        """
        Create an intent and return the hosted checkout URL.

        Raises:
            IntentCreationError: The intent could not be created
        """
        intent = self.lifecycle.create_intent(request)
        return PayResponse(
            pay_url=self.lifecycle.build_checkout_url(intent, request),
            order_id=intent.id,
        )

    def notify(self, body: bytes, order_id: str) -> NotifyResult:
        """
        Interpret an Airwallex notification for an order.

        Accepts either a bare intent object or an event envelope whose
        ``data.object`` is the intent.

        Raises:
            AirwallexDecodeError: Body is not a usable intent notification
            AirwallexError: The follow-up query failed
        """
        intent_payload = self._decode_notification(body)
        notify_message = body.decode("utf-8", errors="replace")
        intent_id = order_id or intent_payload.get("id", "")
        if not intent_id or not isinstance(intent_id, str):
            raise AirwallexDecodeError("Notification carries no intent id")

        logger.info(
            "Received Airwallex notification",
            extra={
                "order_id": intent_id,
                "intent_status": intent_payload["status"],
                "notify_mode": str(self.notify_mode),
            },
        )

        if self.notify_mode == NotifyMode.REQUERY:
            return self.query(intent_id, notify_message=notify_message)

        result = self.reconciler.reconcile(
            PaymentIntent.from_payload(intent_payload),
            order_id=intent_id,
            notify_message=notify_message,
        )
        if result.is_paid:
            # Never honour Paid on the webhook's word alone
            result = self.query(intent_id, notify_message=notify_message)
        return result

    def query(self, order_id: str, notify_message: str = "") -> NotifyResult:
        """Fetch the intent's live state and reconcile it."""
        intent = self.lifecycle.query_intent(order_id)
        return self.reconciler.reconcile(
            intent, order_id=order_id, notify_message=notify_message
        )

    def get_response_error(self, error: Exception | None) -> str:
        if error is None:
            return "success"
        if isinstance(error, AirwallexAuthError):
            return "authentication_failed"
        return "fail"

    @staticmethod
    def _decode_notification(body: bytes) -> dict[str, Any]:
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise AirwallexDecodeError("Notification body is not valid JSON") from e

        if not isinstance(payload, dict):
            raise AirwallexDecodeError("Notification body is not a JSON object")

        data = payload.get("data")
        if isinstance(data, dict) and isinstance(data.get("object"), dict):
            payload = data["object"]

        if not isinstance(payload.get("status"), str) or not payload["status"]:
            raise AirwallexDecodeError("Invalid status in notification")
        return payload


@functools.lru_cache(maxsize=1)
def get_airwallex_provider() -> AirwallexPaymentProvider:
    """Return the process-wide provider built from settings."""
    return AirwallexPaymentProvider.from_settings()


__all__ = [
    "AirwallexPaymentProvider",
    "NotifyMode",
    "get_airwallex_provider",
]
