"""
Pytest fixtures shared by the payments test packages.

This module wires the fake Airwallex API, a client and a token cache
together so adapter, service and provider tests exercise the real code
paths without network access.

Usage:
    def test_query(intent_lifecycle, fake_api):
        fake_api.reply(intent_path("int_1"), payload=IntentPayloadFactory(id="int_1"))
        intent = intent_lifecycle.query_intent("int_1")
"""

import pytest

from payments.adapters import AirwallexClient, TokenCache
from payments.providers import AirwallexPaymentProvider
from payments.services import IntentLifecycle
from payments.tests.factories import IntentPayloadFactory, PayRequestFactory
from payments.tests.fakes import TEST_ENDPOINT, FakeAirwallexAPI


# =============================================================================
# Airwallex Fixtures
# =============================================================================


@pytest.fixture
def fake_api():
    """Fake Airwallex API with a working login endpoint."""
    return FakeAirwallexAPI()


@pytest.fixture
def airwallex_client(fake_api):
    """AirwallexClient talking to the fake API."""
    client = AirwallexClient(
        client_id="test-client-id",
        api_key="test-api-key",
        api_endpoint=TEST_ENDPOINT,
        timeout=5,
        transport=fake_api.transport,
    )
    yield client
    client.close()


@pytest.fixture
def token_cache(airwallex_client):
    """TokenCache logging in through the fake API."""
    return TokenCache(fetch=airwallex_client.login)


@pytest.fixture
def intent_lifecycle(airwallex_client, token_cache):
    """IntentLifecycle wired to the fake API."""
    return IntentLifecycle(client=airwallex_client, tokens=token_cache)


@pytest.fixture
def provider(intent_lifecycle):
    """AirwallexPaymentProvider in the default requery mode."""
    return AirwallexPaymentProvider(lifecycle=intent_lifecycle)


@pytest.fixture
def trusting_provider(intent_lifecycle):
    """AirwallexPaymentProvider in trust mode."""
    return AirwallexPaymentProvider(lifecycle=intent_lifecycle, notify_mode="trust")


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def pay_request():
    """A valid pay request with a return URL."""
    return PayRequestFactory(order_id="payment_abc123")


@pytest.fixture
def intent_payload():
    """A settled intent as returned by GET payment_intents/{id}."""
    return IntentPayloadFactory(
        id="int_hkdmr7v9rg1j58ky8re",
        request_id="payment_abc123",
    )
