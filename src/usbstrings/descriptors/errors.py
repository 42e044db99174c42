"""
Exceptions raised while reading and decoding string descriptors.
"""

from __future__ import annotations


class DescriptorError(Exception):
    """Base class for string descriptor failures."""


class TransportError(DescriptorError):
    """The control transfer was issued but did not complete."""


class TransferTimeout(TransportError):
    """The control transfer hit its setup or completion timeout."""


class ProtocolMismatch(DescriptorError):
    """The device answered with something other than a string descriptor."""

    def __init__(self, expected: int, actual: int | None, message: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        if message is None:
            if actual is None:
                message = f"Short descriptor reply, expected type 0x{expected:02x}"
            else:
                message = (
                    f"Descriptor type mismatch: expected 0x{expected:02x}, "
                    f"got 0x{actual:02x}"
                )
        super().__init__(message)


class BadArgument(DescriptorError, ValueError):
    """A caller passed an index, length or code unit outside its range."""


class InvalidSurrogate(DescriptorError, UnicodeError):
    """A UTF-16 sequence holds an unpaired or dangling surrogate."""

    def __init__(self, offset: int, unit: int, reason: str) -> None:
        self.offset = offset
        self.unit = unit
        self.reason = reason
        super().__init__(f"{reason} 0x{unit:04x} at offset {offset}")


class AllocationFailure(DescriptorError, MemoryError):
    """The code unit buffer for a string could not be allocated."""
