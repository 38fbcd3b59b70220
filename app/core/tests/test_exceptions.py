"""
Tests for the application exception hierarchy.

Tests cover:
- Default and explicit error codes
- Dict conversion and string forms
- Airwallex subclasses
"""

from core.exceptions import BaseApplicationError, ExternalServiceError
from payments.exceptions import (
    AirwallexError,
    AirwallexGatewayError,
    ExpiryFormatError,
    UnexpectedStatusError,
)


class TestBaseApplicationError:
    """Tests for BaseApplicationError."""

    def test_default_error_code(self):
        error = BaseApplicationError("Something failed")

        assert error.error_code == "APPLICATION_ERROR"
        assert error.details == {}

    def test_to_dict_omits_empty_details(self):
        """details only appear when present."""
        assert ExternalServiceError("Down").to_dict() == {
            "error": "Down",
            "error_code": "EXTERNAL_SERVICE_ERROR",
        }

    def test_to_dict_with_details(self):
        error = ExternalServiceError("Down", error_code="GATEWAY_DOWN", details={"x": 1})

        assert error.to_dict() == {
            "error": "Down",
            "error_code": "GATEWAY_DOWN",
            "details": {"x": 1},
        }

    def test_str_includes_code(self):
        assert str(ExternalServiceError("Down")) == "[EXTERNAL_SERVICE_ERROR] Down"


class TestAirwallexErrors:
    """Tests for the Airwallex subclasses."""

    def test_hierarchy(self):
        """Airwallex errors are external service errors."""
        assert issubclass(AirwallexError, ExternalServiceError)
        assert issubclass(ExpiryFormatError, AirwallexError)

    def test_gateway_error_details(self):
        """Gateway code is only included when Airwallex sent one."""
        with_code = AirwallexGatewayError("bad", status_code=400, response_body={"code": "x"})
        without_code = AirwallexGatewayError("bad", status_code=500)

        assert with_code.details == {"status_code": 400, "gateway_code": "x"}
        assert without_code.details == {"status_code": 500}
        assert without_code.response_body == {}

    def test_unexpected_status_message(self):
        error = UnexpectedStatusError("SUCCEEDED", "REFUNDED")

        assert error.error_code == "UNEXPECTED_PAYMENT_STATUS"
        assert "REFUNDED" in error.message
