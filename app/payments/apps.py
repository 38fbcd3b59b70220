"""
Payments app configuration.

This app provides the Airwallex payment provider:
- Bearer token cache for the Airwallex API
- Payment intent creation and hosted checkout links
- Reconciliation of intent status into the platform payment state
- Notification endpoint
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
