"""
USB String Descriptors.

Reads string descriptors over control transfers and decodes their
UTF-16 payload to UTF-8.
"""

from usbstrings.descriptors.constants import (
    LANGID_ENGLISH_US,
    MAX_STRING_UNITS,
    DescriptorType,
    StandardRequest,
)
from usbstrings.descriptors.errors import (
    AllocationFailure,
    BadArgument,
    DescriptorError,
    InvalidSurrogate,
    ProtocolMismatch,
    TransferTimeout,
    TransportError,
)
from usbstrings.descriptors.resolver import (
    Resolution,
    ResolvedString,
    StringResolver,
    resolve_device_string,
)
from usbstrings.descriptors.strings import (
    DescriptorHeader,
    StringDescriptor,
    fetch_string_descriptor,
    probe_string_length,
    read_string_header,
)
from usbstrings.descriptors.transfer import (
    ControlRequest,
    DeviceHandle,
    PyUSBDevice,
    TransferTimeouts,
)
from usbstrings.descriptors.unicode import utf16_to_utf8, utf8_length

__all__ = [
    # Constants
    "DescriptorType",
    "LANGID_ENGLISH_US",
    "MAX_STRING_UNITS",
    "StandardRequest",
    # Errors
    "AllocationFailure",
    "BadArgument",
    "DescriptorError",
    "InvalidSurrogate",
    "ProtocolMismatch",
    "TransferTimeout",
    "TransportError",
    # Transfers
    "ControlRequest",
    "DeviceHandle",
    "PyUSBDevice",
    "TransferTimeouts",
    # Descriptors
    "DescriptorHeader",
    "StringDescriptor",
    "fetch_string_descriptor",
    "probe_string_length",
    "read_string_header",
    # Unicode
    "utf16_to_utf8",
    "utf8_length",
    # Resolver
    "Resolution",
    "ResolvedString",
    "StringResolver",
    "resolve_device_string",
]
