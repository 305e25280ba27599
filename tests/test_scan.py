"""Tests for scan order, byte order and bit order transforms."""

import logging

import pytest

from image2lcd.exceptions import InvalidConfiguration
from image2lcd.image_processing.scan import (
    apply_bit_order,
    apply_byte_order,
    apply_scan_mode,
    reorder_pixels,
)
from image2lcd.models import (
    BitOrder,
    ByteOrder,
    Color4096Format,
    ColorFormat,
    FormatSpec,
    ScanMode,
)

# 3x2 image, one byte per pixel, value = 10 * row + column
GRID = bytes([0, 1, 2, 10, 11, 12])
GRAY8 = FormatSpec(ColorFormat.GRAYSCALE)


class TestScanMode:
    """Test cases for pixel reordering."""

    @pytest.mark.parametrize("spec", [GRAY8, FormatSpec(ColorFormat.MONO)])
    def test_apply_scan_mode_when_horizontal_then_identity(self, spec: FormatSpec) -> None:
        assert apply_scan_mode(GRID, 3, 2, ScanMode.HORIZONTAL, spec) == GRID

    def test_apply_scan_mode_when_vertical_then_columns_first(self) -> None:
        result = apply_scan_mode(GRID, 3, 2, ScanMode.VERTICAL, GRAY8)

        assert result == bytes([0, 10, 1, 11, 2, 12])

    def test_apply_scan_mode_when_vertical_then_matches_index_formula(self) -> None:
        width, height = 5, 4
        data = bytes(range(width * height))

        result = apply_scan_mode(data, width, height, ScanMode.VERTICAL, GRAY8)

        for y in range(height):
            for x in range(width):
                assert result[x * height + y] == data[y * width + x]

    def test_apply_scan_mode_when_reverse_vertical_then_rows_flipped(self) -> None:
        result = apply_scan_mode(GRID, 3, 2, ScanMode.HORIZONTAL_REVERSE_BYTE_VERTICAL, GRAY8)

        assert result == bytes([10, 11, 12, 0, 1, 2])

    def test_apply_scan_mode_when_data_vertical_byte_horizontal_then_pass_through(self) -> None:
        result = apply_scan_mode(GRID, 3, 2, ScanMode.DATA_VERTICAL_BYTE_HORIZONTAL, GRAY8)

        assert result == GRID

    def test_apply_scan_mode_when_multi_byte_pixels_then_pixels_kept_whole(self) -> None:
        # 2x2 image of 16-bit pixels AA BB / CC DD
        data = bytes.fromhex("AA01BB02CC03DD04")
        spec = FormatSpec(ColorFormat.COLOR16BIT)

        result = apply_scan_mode(data, 2, 2, ScanMode.VERTICAL, spec)

        assert result == bytes.fromhex("AA01CC03BB02DD04")

    def test_apply_scan_mode_when_string_mode_then_accepted(self) -> None:
        assert apply_scan_mode(GRID, 3, 2, "vertical", GRAY8) == bytes([0, 10, 1, 11, 2, 12])

    @pytest.mark.parametrize(
        "spec",
        [
            FormatSpec(ColorFormat.MONO),
            FormatSpec(ColorFormat.GRAY4),
            FormatSpec(ColorFormat.GRAY16),
            FormatSpec(ColorFormat.COLOR4096, color4096_format=Color4096Format.PACKED_12BIT),
        ],
    )
    def test_apply_scan_mode_when_packed_format_not_horizontal_then_passes_through_with_warning(
        self, spec: FormatSpec, caplog: pytest.LogCaptureFixture
    ) -> None:
        data = bytes([0x12, 0x34, 0x56])

        with caplog.at_level(logging.WARNING, logger="image2lcd.image_processing.scan"):
            result = apply_scan_mode(data, 4, 2, ScanMode.VERTICAL, spec)

        assert result == data
        assert "not implemented" in caplog.text

    def test_reorder_pixels_when_vertical_twice_with_swapped_dims_then_identity(self) -> None:
        data = bytes(range(24))

        once = reorder_pixels(data, 4, 3, ScanMode.VERTICAL, 2)
        back = reorder_pixels(once, 3, 4, ScanMode.VERTICAL, 2)

        assert back == data


class TestByteOrder:
    """Test cases for word byte order swapping."""

    @pytest.mark.parametrize("group_size", [1, 2, 3, 4])
    def test_apply_byte_order_when_msb_then_unchanged(self, group_size: int) -> None:
        data = bytes(range(12))

        assert apply_byte_order(data, "msb", group_size) == data

    @pytest.mark.parametrize("group_size", [2, 3, 4])
    def test_apply_byte_order_when_lsb_then_each_group_reversed(self, group_size: int) -> None:
        data = bytes(range(12))

        result = apply_byte_order(data, ByteOrder.LSB, group_size)

        for start in range(0, len(data), group_size):
            assert result[start : start + group_size] == data[start : start + group_size][::-1]

    def test_apply_byte_order_when_lsb_single_byte_then_unchanged(self) -> None:
        assert apply_byte_order(b"\x01\x02", ByteOrder.LSB, 1) == b"\x01\x02"

    def test_apply_byte_order_when_trailing_partial_group_then_left_in_place(self) -> None:
        assert apply_byte_order(b"\x01\x02\x03", ByteOrder.LSB, 2) == b"\x02\x01\x03"

    def test_apply_byte_order_when_applied_twice_then_identity(self) -> None:
        data = bytes(range(30))

        assert apply_byte_order(apply_byte_order(data, "lsb", 3), "lsb", 3) == data

    def test_apply_byte_order_when_unknown_order_then_raises(self) -> None:
        with pytest.raises(InvalidConfiguration):
            apply_byte_order(b"\x00\x01", "middle", 2)


class TestBitOrder:
    """Test cases for pixel order inside packed bytes."""

    def test_apply_bit_order_when_msb_first_then_unchanged(self) -> None:
        assert apply_bit_order(b"\x80\x01", BitOrder.MSB_FIRST, 1) == b"\x80\x01"

    @pytest.mark.parametrize(
        "bpp,value,expected",
        [
            (1, 0b1000_0000, 0b0000_0001),
            (1, 0b1100_1010, 0b0101_0011),
            (2, 0b00_01_10_11, 0b11_10_01_00),
            (4, 0x1F, 0xF1),
        ],
    )
    def test_apply_bit_order_when_lsb_first_then_pixels_reversed_in_byte(
        self, bpp: int, value: int, expected: int
    ) -> None:
        assert apply_bit_order(bytes([value]), BitOrder.LSB_FIRST, bpp) == bytes([expected])

    @pytest.mark.parametrize("bpp", [8, 12, 16, 24, 32])
    def test_apply_bit_order_when_byte_aligned_format_then_unchanged(self, bpp: int) -> None:
        data = bytes(range(16))

        assert apply_bit_order(data, BitOrder.LSB_FIRST, bpp) == data
