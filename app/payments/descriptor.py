"""
Packing of product metadata into the intent descriptor.

Airwallex webhooks carry the intent, not the original pay request, so the
product name, display name and provider name ride along on the intent as
one packed string and are decoded again when the payment is reconciled.

Fields are joined with the ASCII unit separator, which does not occur in
product text.
"""

from __future__ import annotations

from payments.exceptions import DescriptorError

DELIMITER = "\x1f"
FIELD_COUNT = 3


def pack_descriptor(fields: list[str] | tuple[str, ...]) -> str:
    """
    Join product_name, product_display_name and provider_name.

    Raises:
        DescriptorError: Wrong number of fields, or a field contains
            the delimiter
    """
    if len(fields) != FIELD_COUNT:
        raise DescriptorError(f"Expected {FIELD_COUNT} descriptor fields, got {len(fields)}")
    for value in fields:
        if DELIMITER in value:
            raise DescriptorError("Descriptor field contains the delimiter")
    return DELIMITER.join(fields)


def unpack_descriptor(descriptor: str) -> list[str]:
    """
    Split a packed descriptor back into its three fields.

    Raises:
        DescriptorError: The string does not hold exactly three fields
    """
    parts = descriptor.split(DELIMITER)
    if len(parts) != FIELD_COUNT:
        raise DescriptorError(f"Invalid descriptor: expected {FIELD_COUNT} fields, got {len(parts)}")
    return parts
