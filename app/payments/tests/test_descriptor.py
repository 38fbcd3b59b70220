"""
Tests for descriptor packing.

Tests cover:
- Round trip of product fields
- Field count and delimiter validation
"""

import pytest

from payments.descriptor import DELIMITER, pack_descriptor, unpack_descriptor
from payments.exceptions import DescriptorError


class TestPackDescriptor:
    """Tests for pack_descriptor()."""

    def test_joins_with_unit_separator(self):
        """Fields should be joined with the unit separator."""
        assert pack_descriptor(["a", "b", "c"]) == "a\x1fb\x1fc"
        assert DELIMITER == "\x1f"

    def test_wrong_field_count(self):
        """Exactly three fields are required."""
        with pytest.raises(DescriptorError, match="Expected 3"):
            pack_descriptor(["a", "b"])

    def test_field_containing_delimiter(self):
        """A field that already holds the delimiter would not round-trip."""
        with pytest.raises(DescriptorError):
            pack_descriptor(["a\x1fx", "b", "c"])


class TestUnpackDescriptor:
    """Tests for unpack_descriptor()."""

    @pytest.mark.parametrize(
        "fields",
        [
            ["monthly_member", "Monthly Member", "airwallex"],
            ["", "", ""],
            ["café", "Tür & Tor | 100%", "provider/with:colons"],
        ],
    )
    def test_round_trip(self, fields):
        """Packed fields should unpack to the same values."""
        assert unpack_descriptor(pack_descriptor(fields)) == fields

    @pytest.mark.parametrize("descriptor", ["", "only_one", "a\x1fb", "a\x1fb\x1fc\x1fd"])
    def test_wrong_part_count(self, descriptor):
        """Anything other than three parts is invalid."""
        with pytest.raises(DescriptorError):
            unpack_descriptor(descriptor)

    def test_descriptor_error_is_value_error(self):
        """Callers catching ValueError also catch descriptor failures."""
        with pytest.raises(ValueError):
            unpack_descriptor("bad")
