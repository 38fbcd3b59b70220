"""
Reconciliation of Airwallex intent state into the platform payment state.

Airwallex carries two levels of state: the intent status and, once the
payer has tried to pay, the status of the latest payment attempt. The
intent reports SUCCEEDED before the attempt settles, so SUCCEEDED alone
is never treated as paid.

Transition table (intent status first):

    PENDING / REQUIRES_PAYMENT_METHOD /
    REQUIRES_CUSTOMER_ACTION / REQUIRES_CAPTURE  → Created
    CANCELLED                                    → Canceled
    EXPIRED                                      → Timeout
    SUCCEEDED                                    → attempt table
    anything else                                → Error

Attempt table (intent SUCCEEDED):

    PAID / SETTLED                               → Paid
    CANCELLED / EXPIRED / RECEIVED /
    AUTHENTICATION_REDIRECTED / AUTHORIZED /
    CAPTURE_REQUESTED                            → Created
    anything else                                → Error

Unknown values always resolve to Error, never to Created or Paid.

Usage:
    from payments.state_machines.reconciler import PaymentReconciler

    result = PaymentReconciler().reconcile(intent, order_id=intent.id)
    if result.is_paid:
        grant_access(result.order_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from payments.descriptor import unpack_descriptor
from payments.exceptions import DescriptorError, UnexpectedStatusError
from payments.state_machines.states import AttemptStatus, IntentStatus, PaymentState
from payments.types import NotifyResult

if TYPE_CHECKING:
    from payments.adapters import PaymentIntent


logger = logging.getLogger(__name__)


INTENT_STATE_MAP: dict[str, PaymentState] = {
    IntentStatus.PENDING: PaymentState.CREATED,
    IntentStatus.REQUIRES_PAYMENT_METHOD: PaymentState.CREATED,
    IntentStatus.REQUIRES_CUSTOMER_ACTION: PaymentState.CREATED,
    IntentStatus.REQUIRES_CAPTURE: PaymentState.CREATED,
    IntentStatus.CANCELLED: PaymentState.CANCELED,
    IntentStatus.EXPIRED: PaymentState.TIMEOUT,
}

ATTEMPT_STATE_MAP: dict[str, PaymentState] = {
    AttemptStatus.PAID: PaymentState.PAID,
    AttemptStatus.SETTLED: PaymentState.PAID,
    AttemptStatus.CANCELLED: PaymentState.CREATED,
    AttemptStatus.EXPIRED: PaymentState.CREATED,
    AttemptStatus.RECEIVED: PaymentState.CREATED,
    AttemptStatus.AUTHENTICATION_REDIRECTED: PaymentState.CREATED,
    AttemptStatus.AUTHORIZED: PaymentState.CREATED,
    AttemptStatus.CAPTURE_REQUESTED: PaymentState.CREATED,
}


def resolve_payment_state(intent_status: str, attempt_status: str = "") -> PaymentState:
    """
    Map an intent/attempt status pair onto the platform payment state.

    Args:
        intent_status: Outer intent status
        attempt_status: Latest payment attempt status ("" if none)

    Returns:
        PaymentState for known combinations

    Raises:
        UnexpectedStatusError: Combination is not in the transition table
    """
    if intent_status == IntentStatus.SUCCEEDED:
        state = ATTEMPT_STATE_MAP.get(attempt_status)
    else:
        state = INTENT_STATE_MAP.get(intent_status)

    if state is None:
        raise UnexpectedStatusError(intent_status, attempt_status)
    return state


class PaymentReconciler:
    """
    Builds a NotifyResult from a PaymentIntent snapshot.

    Never raises for unexpected statuses: they are logged and reported
    as PaymentState.ERROR so the platform can surface a failure.
    """

    payment_name = "Airwallex"

    def reconcile(
        self,
        intent: PaymentIntent,
        order_id: str,
        notify_message: str = "",
    ) -> NotifyResult:
        """
        Reconcile an intent into a normalized result.

        Args:
            intent: Intent snapshot (queried, or decoded from a webhook)
            order_id: Platform-facing order id (the intent id)
            notify_message: Raw notification body to pass through

        Returns:
            NotifyResult; product fields are filled only when Paid
        """
        result = NotifyResult(
            order_id=order_id,
            payment_status=PaymentState.ERROR,
            price=intent.amount,
            currency=intent.currency,
            notify_message=notify_message,
            payment_name=self.payment_name,
        )

        try:
            result.payment_status = resolve_payment_state(
                intent.status, intent.payment_attempt_status
            )
        except UnexpectedStatusError as e:
            logger.warning(
                "Unexpected Airwallex payment status",
                extra={"order_id": order_id, **e.details},
            )
            result.notify_message = e.message
            return result

        if result.payment_status == PaymentState.PAID:
            self._fill_product_fields(result, intent)

        logger.info(
            "Reconciled Airwallex payment",
            extra={
                "order_id": order_id,
                "intent_status": intent.status,
                "attempt_status": intent.payment_attempt_status,
                "payment_status": str(result.payment_status),
            },
        )
        return result

    def _fill_product_fields(self, result: NotifyResult, intent: PaymentIntent) -> None:
        # metadata survives where the top-level descriptor may be rewritten
        descriptor = intent.metadata.get("descriptor") or intent.descriptor
        if not isinstance(descriptor, str) or not descriptor:
            logger.warning(
                "Paid Airwallex intent carries no descriptor",
                extra={"order_id": result.order_id},
            )
            return

        try:
            product_name, display_name, provider_name = unpack_descriptor(descriptor)
        except DescriptorError:
            logger.warning(
                "Could not unpack Airwallex descriptor",
                extra={"order_id": result.order_id},
                exc_info=True,
            )
            return

        result.product_name = product_name
        result.product_display_name = display_name
        result.provider_name = provider_name


__all__ = [
    "ATTEMPT_STATE_MAP",
    "INTENT_STATE_MAP",
    "PaymentReconciler",
    "resolve_payment_state",
]
