"""
String resolution.

Turns a string index into displayable text. Every non-fatal failure on
the way (timeouts, transfer errors, wrong descriptor types, broken
surrogates) is folded into a single placeholder result so that one bad
field never stops the rest of a device from being described.
"""

from __future__ import annotations

import logging
from array import array
from dataclasses import dataclass
from enum import Enum

from usbstrings.descriptors.constants import (
    DEFAULT_PLACEHOLDER,
    LANGID_ENGLISH_US,
    MAX_STRING_INDEX,
    NO_STRING_INDEX,
)
from usbstrings.descriptors.errors import (
    AllocationFailure,
    BadArgument,
    DescriptorError,
)
from usbstrings.descriptors.strings import (
    fetch_string_descriptor,
    probe_string_length,
)
from usbstrings.descriptors.transfer import (
    DEFAULT_TIMEOUTS,
    DeviceHandle,
    TransferTimeouts,
)
from usbstrings.descriptors.unicode import text_units, utf16_to_utf8


logger = logging.getLogger(__name__)


class Resolution(Enum):
    """Outcome of resolving one string index."""

    RESOLVED = "resolved"
    SENTINEL = "sentinel"


@dataclass(frozen=True)
class ResolvedString:
    """
    Result of resolving a string index.

    data holds the UTF-8 bytes when resolved and is empty for the
    sentinel. cause keeps the failure that was absorbed, if any, for
    diagnostics only.
    """

    index: int
    status: Resolution
    data: bytes = b""
    placeholder: str = DEFAULT_PLACEHOLDER
    cause: Exception | None = None

    @classmethod
    def sentinel(
        cls,
        index: int,
        placeholder: str = DEFAULT_PLACEHOLDER,
        cause: Exception | None = None,
    ) -> ResolvedString:
        return cls(
            index=index,
            status=Resolution.SENTINEL,
            placeholder=placeholder,
            cause=cause,
        )

    @property
    def is_resolved(self) -> bool:
        return self.status is Resolution.RESOLVED

    @property
    def is_sentinel(self) -> bool:
        return self.status is Resolution.SENTINEL

    @property
    def text(self) -> str:
        """Decoded text, or the placeholder for the sentinel."""
        if self.is_sentinel:
            return self.placeholder
        return self.data.decode("utf-8")

    @property
    def value(self) -> str | None:
        """Decoded text, or None for the sentinel."""
        return self.text if self.is_resolved else None

    def __str__(self) -> str:
        return self.text


def resolve_device_string(
    device: DeviceHandle,
    index: int,
    *,
    placeholder: str = DEFAULT_PLACEHOLDER,
    language_id: int = LANGID_ENGLISH_US,
    timeouts: TransferTimeouts = DEFAULT_TIMEOUTS,
) -> ResolvedString:
    """
    Resolve a string index to text.

    Args:
        device: Device handle to read from
        index: String index (0-255); 0 means the field has no string
        placeholder: Text shown for the sentinel
        language_id: Language ID for the requests
        timeouts: Setup/completion timeouts applied to each transfer

    Returns:
        ResolvedString; the sentinel on any transfer, protocol or
        encoding failure.

    Raises:
        BadArgument: If index is outside 0-255
        AllocationFailure: If the code unit buffer cannot be allocated
    """
    if not NO_STRING_INDEX <= index <= MAX_STRING_INDEX:
        raise BadArgument(f"String index out of range: {index}")
    if index == NO_STRING_INDEX:
        return ResolvedString.sentinel(index, placeholder)

    length = probe_string_length(
        device, index, language_id=language_id, timeouts=timeouts
    )
    if length == 0:
        return ResolvedString.sentinel(index, placeholder)

    try:
        # One spare zeroed unit past the fetched payload
        buffer = array("H", bytes((length + 1) * 2))
    except MemoryError as e:
        raise AllocationFailure(
            f"Cannot allocate {length + 1} code units for string {index}"
        ) from e

    try:
        descriptor = fetch_string_descriptor(
            device,
            index,
            length,
            buffer,
            language_id=language_id,
            timeouts=timeouts,
        )
        units = text_units(descriptor.payload)
        data = utf16_to_utf8(units)
    except BadArgument:
        raise
    except DescriptorError as e:
        logger.debug("String %d unresolved: %s", index, e)
        return ResolvedString.sentinel(index, placeholder, cause=e)

    if not data:
        logger.debug("String %d has no text past its header", index)
        return ResolvedString.sentinel(index, placeholder)

    return ResolvedString(
        index=index,
        status=Resolution.RESOLVED,
        data=data,
        placeholder=placeholder,
    )


class StringResolver:
    """
    Resolves the strings of one device.

    Holds the device handle and request settings so callers can resolve
    manufacturer, product and serial one after another. Calls are not
    safe to issue concurrently on the same instance.
    """

    def __init__(
        self,
        device: DeviceHandle,
        placeholder: str = DEFAULT_PLACEHOLDER,
        language_id: int = LANGID_ENGLISH_US,
        timeouts: TransferTimeouts = DEFAULT_TIMEOUTS,
    ) -> None:
        self.device = device
        self.placeholder = placeholder
        self.language_id = language_id
        self.timeouts = timeouts

    def resolve(self, index: int) -> ResolvedString:
        """Resolve one string index on the bound device."""
        return resolve_device_string(
            self.device,
            index,
            placeholder=self.placeholder,
            language_id=self.language_id,
            timeouts=self.timeouts,
        )

    def text(self, index: int) -> str:
        """Resolve one string index straight to display text."""
        return self.resolve(index).text
