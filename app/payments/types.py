"""
Type definitions for payment provider operations.

These dataclasses are the provider-neutral request and result types the
platform exchanges with a payment provider. They are request-scoped
values: nothing here is cached or persisted by the payments app.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from payments.state_machines import PaymentState


@dataclass(frozen=True)
class PayRequest:
    """
    Parameters for starting a payment.

    Attributes:
        order_id: Platform payment name; used as the gateway request_id,
            merchant order id and checkout session id
        product_name: Internal product name
        product_display_name: Name shown to the payer
        product_description: Free-text description
        product_image: Absolute URL of the product image
        price: Amount in major currency units
        currency: ISO 4217 currency code
        return_url: Where the payer lands after checkout ("" if none)
        provider_name: Name of the configured provider instance

    Example:
        request = PayRequest(
            order_id="payment_abc123",
            product_name="monthly_member",
            product_display_name="Monthly Member",
            price=Decimal("9.99"),
            currency="USD",
            return_url="https://shop.example/return",
            provider_name="airwallex",
        )
    """

    order_id: str
    product_name: str
    product_display_name: str
    price: Decimal
    currency: str
    provider_name: str
    product_description: str = ""
    product_image: str = ""
    return_url: str = ""

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if not self.order_id:
            raise ValueError("order_id is required")
        if not self.currency:
            raise ValueError("currency is required")
        try:
            price = Decimal(self.price)
        except (InvalidOperation, TypeError, ValueError):
            raise ValueError("price must be a positive number") from None
        if not price.is_finite() or price <= 0:
            raise ValueError("price must be a positive number")


@dataclass(frozen=True)
class PayResponse:
    """
    Result from starting a payment.

    Attributes:
        pay_url: Hosted checkout URL to redirect the payer to
        order_id: Gateway intent id; pass it back to notify()/query()
    """

    pay_url: str
    order_id: str


@dataclass
class NotifyResult:
    """
    Normalized outcome of a payment, derived from gateway state.

    Consumed by the platform to update its own order record.

    Attributes:
        order_id: Gateway intent id the result refers to
        payment_status: Platform payment state
        price: Amount reported by the gateway
        currency: Currency reported by the gateway
        product_name: Decoded from the intent descriptor (Paid only)
        product_display_name: Decoded from the intent descriptor (Paid only)
        provider_name: Decoded from the intent descriptor (Paid only)
        notify_message: Diagnostic message or raw notification body
        payment_name: Gateway name
    """

    order_id: str
    payment_status: PaymentState
    price: float = 0.0
    currency: str = ""
    product_name: str = ""
    product_display_name: str = ""
    provider_name: str = ""
    notify_message: str = ""
    payment_name: str = "Airwallex"

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentState.PAID

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        data = asdict(self)
        data["payment_status"] = str(self.payment_status)
        return data


__all__ = [
    "NotifyResult",
    "PayRequest",
    "PayResponse",
]
