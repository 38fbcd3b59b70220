"""
Pytest configuration for the Django apps.

Auto-marks tests by filename and resets process-wide state between tests.
Fixtures shared by a single package live in that package's tests/conftest.py.
"""

import pytest

from payments.providers import get_airwallex_provider


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_*_provider.py → integration
    - test_*_adapter.py, test_token_cache.py, test_reconciler.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_airwallex_provider.py",
    ]

    unit_patterns = [
        "test_airwallex_adapter.py",
        "test_token_cache.py",
        "test_reconciler.py",
        "test_descriptor.py",
        "test_intent_lifecycle.py",
        "test_types.py",
        "test_exceptions.py",
    ]

    for item in items:
        # Skip if test already has unit/integration marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = item.path.name

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django)
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def reset_airwallex_provider():
    """Drop the cached process-wide provider so settings overrides apply."""
    get_airwallex_provider.cache_clear()
    yield
    get_airwallex_provider.cache_clear()
