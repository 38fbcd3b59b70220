"""
Payment providers pluggable into the platform.

Usage:
    from payments.providers import get_airwallex_provider

    provider = get_airwallex_provider()
    response = provider.pay(request)
    result = provider.notify(request_body, order_id=response.order_id)
"""

from payments.providers.airwallex import (
    AirwallexPaymentProvider,
    NotifyMode,
    get_airwallex_provider,
)
from payments.providers.base import PaymentProvider

__all__ = [
    "AirwallexPaymentProvider",
    "NotifyMode",
    "PaymentProvider",
    "get_airwallex_provider",
]
