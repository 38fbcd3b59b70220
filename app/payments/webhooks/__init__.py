"""
Notification handling for payment events from Airwallex.

Usage:
    # In urls.py
    from payments.webhooks.views import airwallex_notify

    urlpatterns = [
        path("notify/airwallex/<str:order_id>/", airwallex_notify, name="airwallex_notify"),
    ]
"""

from payments.webhooks.views import airwallex_notify

__all__ = [
    "airwallex_notify",
]
