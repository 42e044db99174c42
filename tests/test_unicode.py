"""
Tests for UTF-16 to UTF-8 transcoding.
"""

from __future__ import annotations

import pytest

from usbstrings.descriptors.errors import BadArgument, InvalidSurrogate
from usbstrings.descriptors.unicode import (
    combine_surrogates,
    text_units,
    utf16_to_utf8,
    utf16le_units,
    utf8_length,
)


def to_units(text: str) -> list[int]:
    """Encode text to UTF-16 code units."""
    return utf16le_units(text.encode("utf-16-le"))


class TestUtf16ToUtf8:
    """Tests for utf16_to_utf8."""

    def test_ascii(self) -> None:
        """Test plain ASCII maps one unit to one byte."""
        assert utf16_to_utf8([0x0041, 0x0042]) == b"AB"

    def test_two_byte_form(self) -> None:
        """Test units up to 0x7FF use the 2-byte form."""
        assert utf16_to_utf8([0x00E9]) == b"\xc3\xa9"
        assert utf16_to_utf8([0x07FF]) == b"\xdf\xbf"

    def test_three_byte_form(self) -> None:
        """Test units above 0x7FF use the 3-byte form."""
        assert utf16_to_utf8([0x20AC]) == b"\xe2\x82\xac"
        assert utf16_to_utf8([0xFFFF]) == b"\xef\xbf\xbf"

    def test_surrogate_pair(self) -> None:
        """Test a surrogate pair becomes one 4-byte sequence."""
        assert utf16_to_utf8([0xD83D, 0xDE00]) == bytes([0xF0, 0x9F, 0x98, 0x80])

    def test_highest_code_point(self) -> None:
        """Test the last surrogate pair encodes U+10FFFF."""
        assert utf16_to_utf8([0xDBFF, 0xDFFF]) == "\U0010ffff".encode("utf-8")

    def test_empty_is_success(self) -> None:
        """Test empty input gives empty bytes rather than failing."""
        assert utf16_to_utf8([]) == b""

    def test_mixed_widths(self) -> None:
        """Test a string mixing every encoded width."""
        text = "Aé€\U0001f600z"
        assert utf16_to_utf8(to_units(text)) == text.encode("utf-8")

    def test_dangling_high_surrogate(self) -> None:
        """Test a high surrogate at the end of input fails."""
        with pytest.raises(InvalidSurrogate) as exc_info:
            utf16_to_utf8([0xD800])
        assert exc_info.value.offset == 0
        assert exc_info.value.unit == 0xD800

    def test_unpaired_low_surrogate(self) -> None:
        """Test a lone low surrogate fails."""
        with pytest.raises(InvalidSurrogate):
            utf16_to_utf8([0xDC00])

    def test_high_surrogate_followed_by_character(self) -> None:
        """Test a high surrogate not followed by a low surrogate fails."""
        with pytest.raises(InvalidSurrogate) as exc_info:
            utf16_to_utf8([0x0041, 0xD83D, 0x0041])
        assert exc_info.value.offset == 1

    def test_reversed_pair(self) -> None:
        """Test a low surrogate before a high surrogate fails."""
        with pytest.raises(InvalidSurrogate):
            utf16_to_utf8([0xDE00, 0xD83D])

    def test_failure_after_valid_prefix(self) -> None:
        """Test an error late in the input still fails the whole conversion."""
        with pytest.raises(InvalidSurrogate) as exc_info:
            utf16_to_utf8(to_units("Black Magic") + [0xDC01])
        assert exc_info.value.offset == 11

    def test_invalid_surrogate_is_unicode_error(self) -> None:
        """Test InvalidSurrogate can be caught as UnicodeError."""
        with pytest.raises(UnicodeError):
            utf16_to_utf8([0xDFFF])

    def test_out_of_range_unit(self) -> None:
        """Test values that are not 16-bit code units are rejected."""
        with pytest.raises(BadArgument):
            utf16_to_utf8([0x10000])
        with pytest.raises(ValueError):
            utf16_to_utf8([-1])

    def test_round_trip(self) -> None:
        """Test decoding the output reproduces the input scalar values."""
        for text in ["", "Hi", "Ünïcödé", "日本語", "\U0001f50c USB \U0001f4be", "\x00\x7f\x80"]:
            units = to_units(text)
            assert utf16_to_utf8(units).decode("utf-8") == text


class TestUtf8Length:
    """Tests for utf8_length."""

    def test_byte_count_without_surrogates(self) -> None:
        """Test the size equals 1/2/3 bytes per unit by range."""
        units = [0x41, 0x7F, 0x80, 0x7FF, 0x800, 0xD7FF, 0xE000, 0xFFFF]
        assert utf8_length(units) == 1 + 1 + 2 + 2 + 3 + 3 + 3 + 3
        assert len(utf16_to_utf8(units).decode("utf-8")) == len(units)

    def test_surrogate_pair_counts_four(self) -> None:
        """Test a surrogate pair counts as 4 bytes."""
        assert utf8_length([0xD83D, 0xDE00]) == 4

    def test_empty(self) -> None:
        """Test empty input sizes to zero."""
        assert utf8_length([]) == 0

    def test_invalid_raises_not_zero(self) -> None:
        """Test invalid input raises instead of returning 0."""
        with pytest.raises(InvalidSurrogate):
            utf8_length([0xD800, 0xD800])

    def test_matches_encoded_length(self) -> None:
        """Test pass 1 sizing agrees with pass 2 output."""
        units = to_units("Black Magic Probe – \U0001f9f2")
        assert utf8_length(units) == len(utf16_to_utf8(units))


class TestHelpers:
    """Tests for the surrogate and byte helpers."""

    def test_combine_surrogates(self) -> None:
        """Test surrogate pairs rebuild their code point."""
        assert combine_surrogates(0xD800, 0xDC00) == 0x10000
        assert combine_surrogates(0xD83D, 0xDE00) == 0x1F600

    def test_utf16le_units(self) -> None:
        """Test little-endian byte pairs become code units."""
        assert utf16le_units(b"\x48\x00\x69\x00") == [0x0048, 0x0069]
        assert utf16le_units(b"\xac\x20") == [0x20AC]

    def test_text_units_stops_at_nul(self) -> None:
        """Test text ends at the first NUL unit."""
        assert list(text_units([0x48, 0x00, 0x41])) == [0x48]
        assert list(text_units([0x00, 0x41])) == []
        assert list(text_units([0x48, 0x69])) == [0x48, 0x69]

    def test_utf16le_units_drops_odd_byte(self) -> None:
        """Test a trailing half unit is ignored."""
        assert utf16le_units(b"\x48\x00\x69") == [0x0048]
        assert utf16le_units(b"") == []
