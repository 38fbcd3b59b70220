"""
Abstract base payment provider.

This module defines the contract every payment provider plugged into the
platform implements. The platform selects a provider by name elsewhere
and only talks to it through these methods.

Usage:
    class MyProvider(PaymentProvider):
        def pay(self, request):
            ...

        def notify(self, body, order_id):
            ...

        def get_response_error(self, error):
            return "success" if error is None else "fail"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from payments.types import NotifyResult, PayRequest, PayResponse


class PaymentProvider(ABC):
    """
    Abstract base class for payment providers.

    Subclasses must implement all abstract methods.
    """

    @abstractmethod
    def pay(self, request: PayRequest) -> PayResponse:
        """
        Start a payment and return where to send the payer.

        Args:
            request: Provider-neutral pay request

        Returns:
            PayResponse with the checkout URL and the provider order id
        """
        ...

    @abstractmethod
    def notify(self, body: bytes, order_id: str) -> NotifyResult:
        """
        Interpret an asynchronous payment notification.

        Args:
            body: Raw notification body as posted by the gateway
            order_id: Provider order id returned by pay()

        Returns:
            NotifyResult with the normalized payment state
        """
        ...

    @abstractmethod
    def get_response_error(self, error: Exception | None) -> str:
        """Return the acknowledgement string expected by the gateway."""
        ...
