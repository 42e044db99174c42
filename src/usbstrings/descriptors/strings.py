"""
USB string descriptor retrieval.

Reads a string descriptor in two control transfers: the first asks for
the 2-byte header to learn the length, the second fetches the payload.
Replies are validated before anything is copied out, and the amount
copied is capped by the caller's capacity rather than by whatever length
the device claims.
"""

from __future__ import annotations

import logging
from array import array
from dataclasses import dataclass

from usbstrings.descriptors.constants import (
    DESCRIPTOR_HEADER_LENGTH,
    LANGID_ENGLISH_US,
    MAX_STRING_INDEX,
    MAX_STRING_UNITS,
    NO_STRING_INDEX,
    DescriptorType,
)
from usbstrings.descriptors.errors import (
    BadArgument,
    DescriptorError,
    ProtocolMismatch,
)
from usbstrings.descriptors.transfer import (
    DEFAULT_TIMEOUTS,
    ControlRequest,
    DeviceHandle,
    TransferTimeouts,
)
from usbstrings.descriptors.unicode import utf16le_units


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DescriptorHeader:
    """The bLength/bDescriptorType pair that opens every descriptor."""

    length: int
    descriptor_type: int

    @classmethod
    def parse(cls, data: bytes) -> DescriptorHeader:
        """
        Parse and check the header of a string descriptor reply.

        Raises:
            ProtocolMismatch: If the reply is shorter than a header or is
                not a string descriptor
        """
        if len(data) < DESCRIPTOR_HEADER_LENGTH:
            raise ProtocolMismatch(DescriptorType.STRING, None)
        header = cls(length=data[0], descriptor_type=data[1])
        if header.descriptor_type != DescriptorType.STRING:
            raise ProtocolMismatch(DescriptorType.STRING, header.descriptor_type)
        return header

    @property
    def unit_count(self) -> int:
        """Number of UTF-16 code units the header says follow it."""
        return max(0, self.length - DESCRIPTOR_HEADER_LENGTH) // 2


@dataclass
class StringDescriptor:
    """
    The code units fetched for one string index.

    units is the destination buffer; only the first valid_units entries
    were written by the fetch. Anything after that is not populated.
    """

    index: int
    units: array
    valid_units: int
    requested_units: int
    reported_length: int

    @property
    def payload(self) -> array:
        """The populated code units."""
        return self.units[: self.valid_units]

    @property
    def truncated(self) -> bool:
        """True when fewer units arrived than were requested."""
        return self.valid_units < self.requested_units


def check_string_index(index: int) -> None:
    """
    Reject indexes that cannot address a string.

    Raises:
        BadArgument: If index is 0 (language table) or outside a byte
    """
    if not NO_STRING_INDEX < index <= MAX_STRING_INDEX:
        raise BadArgument(f"String index out of range: {index}")


def read_string_header(
    device: DeviceHandle,
    index: int,
    *,
    language_id: int = LANGID_ENGLISH_US,
    timeouts: TransferTimeouts = DEFAULT_TIMEOUTS,
) -> DescriptorHeader:
    """
    Request only the header of a string descriptor.

    Args:
        device: Device handle to issue the transfer on
        index: String index (1-255)
        language_id: Language ID for the request
        timeouts: Setup/completion timeouts

    Returns:
        The validated DescriptorHeader.

    Raises:
        TransportError: If the transfer fails or times out
        ProtocolMismatch: If the reply is not a string descriptor header
    """
    check_string_index(index)
    request = ControlRequest.get_string_descriptor(
        index, DESCRIPTOR_HEADER_LENGTH, language_id
    )
    data = device.control_transfer(request, timeouts)
    return DescriptorHeader.parse(data)


def probe_string_length(
    device: DeviceHandle,
    index: int,
    *,
    language_id: int = LANGID_ENGLISH_US,
    timeouts: TransferTimeouts = DEFAULT_TIMEOUTS,
) -> int:
    """
    Find how many code units a string descriptor holds.

    Returns:
        Code unit count, or 0 if the string is unavailable. An empty
        string and a failed read both come back as 0.
    """
    try:
        header = read_string_header(
            device, index, language_id=language_id, timeouts=timeouts
        )
    except BadArgument:
        raise
    except DescriptorError as e:
        logger.debug("String %d length probe failed: %s", index, e)
        return 0
    return header.unit_count


def fetch_string_descriptor(
    device: DeviceHandle,
    index: int,
    length: int,
    buffer: array | None = None,
    *,
    language_id: int = LANGID_ENGLISH_US,
    timeouts: TransferTimeouts = DEFAULT_TIMEOUTS,
) -> StringDescriptor:
    """
    Fetch the payload of a string descriptor.

    Args:
        device: Device handle to issue the transfer on
        index: String index (1-255)
        length: Capacity in code units (at most 127)
        buffer: Destination for the code units. Must hold at least
            length units. A zero-filled one is allocated when omitted.
        language_id: Language ID for the request
        timeouts: Setup/completion timeouts

    Returns:
        StringDescriptor wrapping the destination buffer.

    Raises:
        BadArgument: If length exceeds 127 units or the buffer is too small
        TransportError: If the transfer fails or times out
        ProtocolMismatch: If the reply is not a string descriptor
    """
    if not 0 <= length <= MAX_STRING_UNITS:
        raise BadArgument(
            f"String length {length} exceeds {MAX_STRING_UNITS} code units"
        )
    check_string_index(index)
    if buffer is None:
        buffer = array("H", bytes(length * 2))
    elif len(buffer) < length:
        raise BadArgument(
            f"Buffer holds {len(buffer)} code units, {length} requested"
        )

    capacity = length * 2
    request = ControlRequest.get_string_descriptor(
        index, capacity + DESCRIPTOR_HEADER_LENGTH, language_id
    )
    data = device.control_transfer(request, timeouts)
    header = DescriptorHeader.parse(data)

    # Never trust bLength alone
    valid_bytes = min(
        header.length - DESCRIPTOR_HEADER_LENGTH,
        capacity,
        len(data) - DESCRIPTOR_HEADER_LENGTH,
    )
    units = utf16le_units(
        data[DESCRIPTOR_HEADER_LENGTH:DESCRIPTOR_HEADER_LENGTH + max(0, valid_bytes)]
    )
    for position, unit in enumerate(units):
        buffer[position] = unit

    if len(units) < length:
        logger.debug(
            "String %d truncated: %d of %d code units (bLength=%d, received=%d)",
            index, len(units), length, header.length, len(data),
        )

    return StringDescriptor(
        index=index,
        units=buffer,
        valid_units=len(units),
        requested_units=length,
        reported_length=header.length,
    )
