"""
USB Constants for string descriptor requests.

Standard request codes, descriptor types and the fixed limits that govern
GET_DESCRIPTOR(STRING) control transfers.
"""

from __future__ import annotations

from enum import IntEnum


class RequestType(IntEnum):
    """bmRequestType values used by the string descriptor requests."""

    # Device-to-host, standard request, device recipient
    DEVICE_TO_HOST_STANDARD_DEVICE = 0x80


class StandardRequest(IntEnum):
    """USB standard request codes (bRequest)."""

    GET_STATUS = 0x00
    CLEAR_FEATURE = 0x01
    SET_FEATURE = 0x03
    SET_ADDRESS = 0x05
    GET_DESCRIPTOR = 0x06
    SET_DESCRIPTOR = 0x07
    GET_CONFIGURATION = 0x08
    SET_CONFIGURATION = 0x09


class DescriptorType(IntEnum):
    """USB descriptor type codes (bDescriptorType)."""

    DEVICE = 0x01
    CONFIGURATION = 0x02
    STRING = 0x03
    INTERFACE = 0x04
    ENDPOINT = 0x05


# US English
LANGID_ENGLISH_US = 0x0409

# Descriptor header: bLength + bDescriptorType
DESCRIPTOR_HEADER_LENGTH = 2

# (255 - 2) // 2 rounds down to 126; 127 is the request ceiling
MAX_STRING_UNITS = 127

# Index 0 addresses the language ID table, never a string
NO_STRING_INDEX = 0
MAX_STRING_INDEX = 0xFF

# Transfer timeouts in milliseconds
SETUP_TIMEOUT_MS = 20
COMPLETION_TIMEOUT_MS = 100

# Shown in place of any string that could not be read
DEFAULT_PLACEHOLDER = "Unknown"


def descriptor_value(descriptor_type: int, index: int) -> int:
    """
    Build the wValue of a GET_DESCRIPTOR request.

    Args:
        descriptor_type: Descriptor type code (high byte)
        index: Descriptor index (low byte)

    Returns:
        16-bit wValue
    """
    return ((descriptor_type & 0xFF) << 8) | (index & 0xFF)
