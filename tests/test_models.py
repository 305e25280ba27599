"""Tests for data models and configuration validation."""

import numpy as np
import pytest

from image2lcd.exceptions import InvalidConfiguration, InvalidDimension, UnsupportedFormat
from image2lcd.models import (
    Color4096Format,
    ColorFormat,
    ConversionConfig,
    ConversionResult,
    FormatSpec,
    Mirror,
    PixelBuffer,
    RGBOrder,
    ScanMode,
)


class TestPixelBuffer:
    """Test cases for PixelBuffer invariants."""

    def test_init_when_sample_length_matches_then_succeeds(self) -> None:
        buffer = PixelBuffer(width=2, height=3, samples=bytes(24))

        assert buffer.pixel_count == 6
        assert buffer.as_array().shape == (3, 2, 4)

    def test_init_when_sample_length_mismatches_then_raises(self) -> None:
        with pytest.raises(InvalidDimension):
            PixelBuffer(width=2, height=2, samples=bytes(15))

    @pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2)])
    def test_init_when_dimension_not_positive_then_raises(self, width: int, height: int) -> None:
        with pytest.raises(InvalidDimension):
            PixelBuffer(width=width, height=height, samples=b"")

    def test_samples_when_given_bytearray_then_stored_as_bytes(self) -> None:
        source = bytearray(4)
        buffer = PixelBuffer(width=1, height=1, samples=source)
        source[0] = 99

        assert isinstance(buffer.samples, bytes)
        assert buffer.samples[0] == 0

    def test_as_array_when_called_then_view_is_read_only(self) -> None:
        buffer = PixelBuffer.filled(2, 2, (1, 2, 3, 4))

        with pytest.raises(ValueError):
            buffer.as_array()[0, 0, 0] = 9

    def test_from_array_when_out_of_range_values_then_clamps(self) -> None:
        array = np.array([[[300, -5, 128, 255]]], dtype=np.int32)

        buffer = PixelBuffer.from_array(array)

        assert buffer.samples == bytes([255, 0, 128, 255])

    def test_from_array_when_wrong_shape_then_raises(self) -> None:
        with pytest.raises(InvalidDimension):
            PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))


class TestColorFormat:
    """Test cases for format name parsing."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("mono", ColorFormat.MONO),
            ("COLOR24BIT", ColorFormat.COLOR24BIT),
            ("rgb565", ColorFormat.COLOR16BIT),
            ("rgb888", ColorFormat.COLOR24BIT),
        ],
    )
    def test_parse_when_known_name_then_returns_member(self, name: str, expected: ColorFormat) -> None:
        assert ColorFormat.parse(name) is expected

    def test_parse_when_unknown_name_then_raises_unsupported_format(self) -> None:
        with pytest.raises(UnsupportedFormat) as excinfo:
            ColorFormat.parse("color64bit")

        assert excinfo.value.format_name == "color64bit"


class TestFormatSpec:
    """Test cases for per-format bit and byte widths."""

    @pytest.mark.parametrize(
        "color_format,bpp,per_byte,bytes_per_pixel",
        [
            (ColorFormat.MONO, 1, 8, 0),
            (ColorFormat.GRAY4, 2, 4, 0),
            (ColorFormat.GRAY16, 4, 2, 0),
            (ColorFormat.GRAYSCALE, 8, 0, 1),
            (ColorFormat.COLOR256, 8, 0, 1),
            (ColorFormat.COLOR4096, 12, 0, 2),
            (ColorFormat.COLOR16BIT, 16, 0, 2),
            (ColorFormat.COLOR18BIT, 18, 0, 3),
            (ColorFormat.COLOR24BIT, 24, 0, 3),
            (ColorFormat.COLOR32BIT, 32, 0, 4),
        ],
    )
    def test_widths_when_format_given_then_match_table(
        self, color_format: ColorFormat, bpp: int, per_byte: int, bytes_per_pixel: int
    ) -> None:
        spec = FormatSpec(color_format)

        assert spec.bits_per_pixel == bpp
        assert spec.pixels_per_byte == per_byte
        assert spec.bytes_per_pixel == bytes_per_pixel

    def test_bytes_per_pixel_when_12bit_packed_then_zero(self) -> None:
        spec = FormatSpec(ColorFormat.COLOR4096, color4096_format=Color4096Format.PACKED_12BIT)

        assert spec.bytes_per_pixel == 0

    def test_is_gray_class_when_grayscale_then_true(self) -> None:
        assert FormatSpec(ColorFormat.GRAYSCALE).is_gray_class
        assert not FormatSpec(ColorFormat.COLOR16BIT).is_gray_class


class TestConversionConfig:
    """Test cases for ConversionConfig coercion and validation."""

    def test_init_when_strings_given_then_coerced_to_enums(self) -> None:
        config = ConversionConfig(
            color_format="rgb565", scan_mode="vertical", mirror="both", rgb_order="bgr"
        )

        assert config.color_format is ColorFormat.COLOR16BIT
        assert config.scan_mode is ScanMode.VERTICAL
        assert config.mirror is Mirror.BOTH
        assert config.rgb_order is RGBOrder.BGR

    def test_init_when_unknown_scan_mode_then_raises(self) -> None:
        with pytest.raises(InvalidConfiguration):
            ConversionConfig(scan_mode="diagonal")

    def test_init_when_unknown_format_then_raises_unsupported_format(self) -> None:
        with pytest.raises(UnsupportedFormat):
            ConversionConfig(color_format="hologram")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rotation": 45},
            {"brightness": 101},
            {"contrast": -101},
            {"max_width": 0},
            {"bytes_per_line": 0},
            {"identifier_name": "9lives"},
            {"identifier_name": "my-image"},
        ],
    )
    def test_init_when_option_out_of_range_then_raises(self, overrides: dict) -> None:
        with pytest.raises(InvalidConfiguration):
            ConversionConfig(**overrides)

    def test_format_spec_when_built_then_carries_sub_options(self) -> None:
        config = ConversionConfig(color_format="color24bit", rgb_order="GRB")

        spec = config.format_spec

        assert spec.color_format is ColorFormat.COLOR24BIT
        assert spec.rgb_order is RGBOrder.GRB


class TestScanMode:
    def test_ordinal_when_listed_then_matches_header_codes(self) -> None:
        assert [mode.ordinal for mode in ScanMode] == [0, 1, 2, 3]


class TestRGBOrder:
    def test_channel_indices_when_gbr_then_maps_to_source_channels(self) -> None:
        assert RGBOrder.GBR.channel_indices == (1, 2, 0)


class TestConversionResult:
    def test_size_in_bytes_when_created_then_matches_payload(self) -> None:
        result = ConversionResult(
            payload=bytearray(b"\x01\x02\x03"),
            width=3,
            height=1,
            color_format=ColorFormat.COLOR256,
            scan_mode=ScanMode.HORIZONTAL,
        )

        assert result.size_in_bytes == 3
        assert isinstance(result.payload, bytes)
