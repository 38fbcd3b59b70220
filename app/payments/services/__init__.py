"""
Payment services for coordinating payment operations.

This module provides:
- IntentLifecycle: Creates payment intents, builds checkout URLs and
  queries intent state

Usage:
    from payments.services import IntentLifecycle

    lifecycle = IntentLifecycle(client, tokens)
    intent = lifecycle.create_intent(request)
    pay_url = lifecycle.build_checkout_url(intent, request)
"""

from payments.services.intent_lifecycle import (
    DEFAULT_CHECKOUT_URL,
    PLACEHOLDER_LOGO_URL,
    IntentLifecycle,
    resolve_logo_url,
)

__all__ = [
    "DEFAULT_CHECKOUT_URL",
    "IntentLifecycle",
    "PLACEHOLDER_LOGO_URL",
    "resolve_logo_url",
]
