"""
Notification endpoint views for Airwallex.

This module provides the HTTP endpoint Airwallex (or the platform's
notify relay) posts payment notifications to. The view:
1. Hands the raw body to the Airwallex provider
2. Returns the normalized result as JSON

Usage:
    # In urls.py
    from payments.webhooks.views import airwallex_notify

    urlpatterns = [
        path("notify/airwallex/<str:order_id>/", airwallex_notify, name="airwallex_notify"),
    ]
"""

from __future__ import annotations

import logging

from django.core.exceptions import ImproperlyConfigured
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.exceptions import AirwallexDecodeError, AirwallexError
from payments.providers import get_airwallex_provider


logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def airwallex_notify(request: HttpRequest, order_id: str) -> JsonResponse:
    """
    Receive an Airwallex payment notification for an order.

    The order id in the URL is the intent id returned by pay(). Depending
    on AIRWALLEX_NOTIFY_MODE the provider either re-queries the intent or
    reconciles the payload directly.

    Security:
    - CSRF exemption required for external callbacks
    - Only POST requests accepted
    - In requery mode (the default) the payload's status is never
      trusted; the live intent state decides the outcome

    Returns:
        JsonResponse with status:
        - 200: NotifyResult payload plus the acknowledgement string
        - 400: Body is not JSON or lacks a status
        - 502: Airwallex could not be reached or rejected the lookup
        - 503: Airwallex credentials or notify mode are not configured
    """
    try:
        provider = get_airwallex_provider()
    except ImproperlyConfigured as e:
        logger.error(
            "Airwallex provider is not configured",
            extra={"order_id": order_id, "error": str(e)},
        )
        return JsonResponse(
            {
                "error": "Airwallex provider is not configured",
                "error_code": "PROVIDER_NOT_CONFIGURED",
                "details": {},
                "response": "fail",
            },
            status=503,
        )

    try:
        result = provider.notify(request.body, order_id)
    except AirwallexDecodeError as e:
        logger.warning(
            "Rejected malformed Airwallex notification",
            extra={"order_id": order_id, "error": str(e)},
        )
        return JsonResponse(
            {**e.to_dict(), "response": provider.get_response_error(e)},
            status=400,
        )
    except AirwallexError as e:
        logger.error(
            "Failed to process Airwallex notification",
            extra={"order_id": order_id, "error_code": e.error_code},
            exc_info=True,
        )
        return JsonResponse(
            {**e.to_dict(), "response": provider.get_response_error(e)},
            status=502,
        )

    logger.info(
        "Processed Airwallex notification",
        extra={"order_id": order_id, "payment_status": str(result.payment_status)},
    )
    return JsonResponse(
        {**result.to_dict(), "response": provider.get_response_error(None)},
        status=200,
    )
