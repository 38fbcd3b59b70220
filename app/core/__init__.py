"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps:

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ExternalServiceError: Third-party service failures

Views (import from core.views):
    - health_check: Liveness endpoint for load balancers

Usage:
    from core.exceptions import ExternalServiceError

    class GatewayError(ExternalServiceError):
        pass

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
"""

# Exceptions (no Django dependencies)
from .exceptions import BaseApplicationError, ExternalServiceError

__all__ = [
    # Exceptions
    "BaseApplicationError",
    "ExternalServiceError",
]
