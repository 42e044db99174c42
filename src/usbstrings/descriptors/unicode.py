"""
UTF-16 to UTF-8 transcoding.

Converts the code units of a string descriptor to UTF-8 in two passes:
the first validates every surrogate pair and computes the exact output
size, the second writes the encoded bytes. Nothing is written unless the
whole sequence validates.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from usbstrings.descriptors.errors import BadArgument, InvalidSurrogate


HIGH_SURROGATE_FIRST = 0xD800
HIGH_SURROGATE_LAST = 0xDBFF
LOW_SURROGATE_FIRST = 0xDC00
LOW_SURROGATE_LAST = 0xDFFF


def is_high_surrogate(unit: int) -> bool:
    """Check if a code unit opens a surrogate pair."""
    return HIGH_SURROGATE_FIRST <= unit <= HIGH_SURROGATE_LAST


def is_low_surrogate(unit: int) -> bool:
    """Check if a code unit closes a surrogate pair."""
    return LOW_SURROGATE_FIRST <= unit <= LOW_SURROGATE_LAST


def combine_surrogates(high: int, low: int) -> int:
    """Rebuild the code point a surrogate pair encodes."""
    return 0x10000 + ((high - HIGH_SURROGATE_FIRST) << 10) + (low - LOW_SURROGATE_FIRST)


def _code_points(units: Sequence[int]) -> Iterator[tuple[int, int]]:
    """
    Walk a code unit sequence, yielding (code point, UTF-8 width).

    Raises:
        InvalidSurrogate: On an unpaired high or low surrogate
        BadArgument: On a value that is not a 16-bit code unit
    """
    length = len(units)
    offset = 0
    while offset < length:
        unit = units[offset]
        if not 0 <= unit <= 0xFFFF:
            raise BadArgument(f"Not a 16-bit code unit: {unit!r} at offset {offset}")

        if is_high_surrogate(unit):
            if offset + 1 >= length:
                raise InvalidSurrogate(offset, unit, "Dangling high surrogate")
            low = units[offset + 1]
            if not is_low_surrogate(low):
                raise InvalidSurrogate(offset, unit, "Unpaired high surrogate")
            yield combine_surrogates(unit, low), 4
            offset += 2
            continue

        if is_low_surrogate(unit):
            raise InvalidSurrogate(offset, unit, "Unpaired low surrogate")

        if unit <= 0x7F:
            yield unit, 1
        elif unit <= 0x7FF:
            yield unit, 2
        else:
            yield unit, 3
        offset += 1


def utf8_length(units: Sequence[int]) -> int:
    """
    Validate a code unit sequence and size its UTF-8 encoding.

    Args:
        units: UTF-16 code units

    Returns:
        Exact number of UTF-8 bytes the sequence encodes to. 0 means the
        input was empty, never that it was invalid.

    Raises:
        InvalidSurrogate: If any surrogate is unpaired
    """
    return sum(width for _, width in _code_points(units))


def utf16_to_utf8(units: Sequence[int]) -> bytes:
    """
    Transcode UTF-16 code units to UTF-8.

    Args:
        units: UTF-16 code units (e.g. the payload of a string descriptor)

    Returns:
        UTF-8 encoded bytes; b"" for an empty sequence.

    Raises:
        InvalidSurrogate: If any surrogate is unpaired. No output is
            produced in that case.
    """
    result = bytearray(utf8_length(units))

    position = 0
    for code_point, width in _code_points(units):
        if width == 1:
            result[position] = code_point
        elif width == 2:
            result[position] = 0xC0 | (code_point >> 6)
            result[position + 1] = 0x80 | (code_point & 0x3F)
        elif width == 3:
            result[position] = 0xE0 | (code_point >> 12)
            result[position + 1] = 0x80 | ((code_point >> 6) & 0x3F)
            result[position + 2] = 0x80 | (code_point & 0x3F)
        else:
            result[position] = 0xF0 | (code_point >> 18)
            result[position + 1] = 0x80 | ((code_point >> 12) & 0x3F)
            result[position + 2] = 0x80 | ((code_point >> 6) & 0x3F)
            result[position + 3] = 0x80 | (code_point & 0x3F)
        position += width

    return bytes(result)


def utf16le_units(payload: bytes) -> list[int]:
    """
    Split little-endian UTF-16 bytes into code units.

    A trailing odd byte is not a whole code unit and is dropped.
    """
    return [payload[i] | (payload[i + 1] << 8) for i in range(0, len(payload) - 1, 2)]


def text_units(units: Sequence[int]) -> Sequence[int]:
    """
    Cut a code unit sequence at its first NUL.

    Some devices pad their strings with NULs; the text ends before them.
    """
    if 0 in units:
        return units[: list(units).index(0)]
    return units
