"""
State enums for Airwallex payments.

This module defines the platform payment state and the Airwallex status
vocabulary it is reconciled from. These are Django TextChoices so they
compare equal to the raw strings found in gateway payloads.

Two-level gateway state:

Intent status (outer):
    REQUIRES_PAYMENT_METHOD → REQUIRES_CUSTOMER_ACTION → REQUIRES_CAPTURE
        → SUCCEEDED
    any non-terminal → CANCELLED / EXPIRED

Payment attempt status (inner, only meaningful once an attempt exists):
    RECEIVED → AUTHENTICATION_REDIRECTED → AUTHORIZED → CAPTURE_REQUESTED
        → PAID → SETTLED
    any non-terminal → CANCELLED / EXPIRED

Platform state:
    Created → Paid
    Created → Canceled / Timeout / Error
"""

from django.db import models


class PaymentState(models.TextChoices):
    """
    Platform-wide payment state reported back to the calling platform.

    Terminal states: PAID, CANCELED, TIMEOUT
    ERROR means "surface as failed", CREATED means "ask again later".
    """

    CREATED = "Created", "Created"
    PAID = "Paid", "Paid"
    CANCELED = "Canceled", "Canceled"
    TIMEOUT = "Timeout", "Timeout"
    ERROR = "Error", "Error"


class IntentStatus(models.TextChoices):
    """Outer status of an Airwallex payment intent."""

    PENDING = "PENDING", "Pending"
    REQUIRES_PAYMENT_METHOD = "REQUIRES_PAYMENT_METHOD", "Requires Payment Method"
    REQUIRES_CUSTOMER_ACTION = "REQUIRES_CUSTOMER_ACTION", "Requires Customer Action"
    REQUIRES_CAPTURE = "REQUIRES_CAPTURE", "Requires Capture"
    SUCCEEDED = "SUCCEEDED", "Succeeded"
    CANCELLED = "CANCELLED", "Cancelled"
    EXPIRED = "EXPIRED", "Expired"


class AttemptStatus(models.TextChoices):
    """
    Status of the latest payment attempt on an intent.

    Airwallex flips the intent to SUCCEEDED before the attempt settles,
    so only PAID and SETTLED count as money received.
    """

    RECEIVED = "RECEIVED", "Received"
    AUTHENTICATION_REDIRECTED = "AUTHENTICATION_REDIRECTED", "Authentication Redirected"
    AUTHORIZED = "AUTHORIZED", "Authorized"
    CAPTURE_REQUESTED = "CAPTURE_REQUESTED", "Capture Requested"
    PAID = "PAID", "Paid"
    SETTLED = "SETTLED", "Settled"
    CANCELLED = "CANCELLED", "Cancelled"
    EXPIRED = "EXPIRED", "Expired"


__all__ = [
    "PaymentState",
    "IntentStatus",
    "AttemptStatus",
]
