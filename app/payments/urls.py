"""
URL configuration for the payments app.

Routes:
    - POST /notify/airwallex/<order_id>/ - Airwallex notification endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments.webhooks.views import airwallex_notify

app_name = "payments"

urlpatterns = [
    # Notification endpoints
    path("notify/airwallex/<str:order_id>/", airwallex_notify, name="airwallex_notify"),
]
