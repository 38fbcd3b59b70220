"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as health checks.
"""

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET


@require_GET
def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    This endpoint is used by:
    - Docker health checks
    - Kubernetes liveness/readiness probes
    - Load balancers (AWS ALB, nginx)

    Only local configuration is inspected; Airwallex itself is never
    contacted, so a gateway outage does not take the service out of rotation.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - airwallex: "configured" or "unconfigured"
        - notify_mode: Active AIRWALLEX_NOTIFY_MODE

    HTTP Status Codes:
        200: All systems operational
        503: Airwallex credentials missing

    Example Response:
        {
            "status": "healthy",
            "airwallex": "configured",
            "notify_mode": "requery"
        }
    """
    configured = bool(
        getattr(settings, "AIRWALLEX_CLIENT_ID", "")
        and getattr(settings, "AIRWALLEX_API_KEY", "")
    )

    health_status = {
        "status": "healthy" if configured else "unhealthy",
        "airwallex": "configured" if configured else "unconfigured",
        "notify_mode": getattr(settings, "AIRWALLEX_NOTIFY_MODE", "requery"),
    }

    status_code = 200 if configured else 503

    return JsonResponse(health_status, status=status_code)
