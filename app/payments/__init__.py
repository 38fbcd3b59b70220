"""
Payments app for Airwallex integration.

This app handles:
- Airwallex authentication and token caching
- Payment intent lifecycle (create, checkout link, query)
- Normalizing Airwallex statuses into the platform payment state
- Notification handling

Usage:
    from payments.providers import get_airwallex_provider

    provider = get_airwallex_provider()
    response = provider.pay(request)

    # Later, from the notification endpoint or a poller
    result = provider.query(response.order_id)
"""
