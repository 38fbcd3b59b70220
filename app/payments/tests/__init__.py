"""
Tests for payments app.

This package contains test modules for:
- test_descriptor.py: Descriptor packing tests
- test_types.py: PayRequest and NotifyResult tests

It also holds the shared test helpers:
- fakes.py: In-process fake of the Airwallex API
- factories.py: Factory Boy factories for requests and intents

Usage:
    pytest payments/tests/
    pytest payments/
"""
