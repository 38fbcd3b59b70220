"""
Pytest fixtures for notification endpoint tests.

Routes the view's provider lookup to a provider wired to the fake
Airwallex API.
"""

from unittest.mock import patch

import pytest
from django.test import RequestFactory


@pytest.fixture
def rf():
    """Request factory for creating test requests."""
    return RequestFactory()


@pytest.fixture
def patched_provider(provider):
    """Serve the fake-API provider from the notify view."""
    with patch(
        "payments.webhooks.views.get_airwallex_provider", return_value=provider
    ):
        yield provider
