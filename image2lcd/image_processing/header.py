"""Image2Lcd header and palette framing.

AIDEV-NOTE: Layout is fixed by the Image2Lcd binary format - keep in sync:

    HEADGRAY  (6 bytes): scan, gray, w (u16 LE), h (u16 LE)
    HEADCOLOR (8 bytes): scan, gray, w (u16 LE), h (u16 LE), is565, rgb
    PALETTE:             count (u16 LE), count * (r, g, b)

Scan byte bits: 0-1 scan mode, 4 word byte order, 5 bit order in byte,
6 horizontal reverse, 7 vertical reverse.
"""

import logging
import struct

from ..exceptions import InvalidConfiguration, InvalidDimension
from ..models import (
    MAX_HEADER_DIMENSION,
    MAX_PALETTE_ENTRIES,
    BitOrder,
    Color16bitFormat,
    Color18bitFormat,
    Color4096Format,
    ColorFormat,
    ConversionConfig,
    ConversionResult,
    PaletteType,
    WordByteOrder,
)

logger = logging.getLogger(__name__)

SCAN_WORD_REVERSE = 0x10
SCAN_BIT_LSB_FIRST = 0x20
SCAN_HORIZONTAL_REVERSE = 0x40
SCAN_VERTICAL_REVERSE = 0x80

HEADGRAY = struct.Struct("<BBHH")
HEADCOLOR = struct.Struct("<BBHHBB")

# "gray" field of the header: color depth code per format
DEPTH_CODES = {
    ColorFormat.MONO: 1,
    ColorFormat.GRAY4: 2,
    ColorFormat.GRAY16: 4,
    ColorFormat.GRAYSCALE: 8,
    ColorFormat.COLOR256: 8,
    ColorFormat.COLOR4096: 12,
    ColorFormat.COLOR16BIT: 16,
    ColorFormat.COLOR18BIT: 18,
    ColorFormat.COLOR24BIT: 24,
    ColorFormat.COLOR32BIT: 32,
}

COMPONENT_CODES = {"R": 0x01, "G": 0x02, "B": 0x03}


def encode_scan_byte(config: ConversionConfig) -> int:
    """Pack scan mode and order flags into the first header byte."""
    scan = config.scan_mode.ordinal & 0x03
    if config.word_byte_order is WordByteOrder.REVERSE_ORDER:
        scan |= SCAN_WORD_REVERSE
    if config.bit_order_in_byte is BitOrder.LSB_FIRST:
        scan |= SCAN_BIT_LSB_FIRST
    if config.horizontal_reverse:
        scan |= SCAN_HORIZONTAL_REVERSE
    if config.vertical_reverse:
        scan |= SCAN_VERTICAL_REVERSE
    return scan


def encode_rgb_byte(config: ConversionConfig) -> int:
    """Component order as 2-bit codes, first component in bits 4-5."""
    rgb = 0
    for slot, component in enumerate(config.rgb_order.value):
        rgb |= COMPONENT_CODES[component] << ((2 - slot) * 2)
    return rgb


def variant_flag(config: ConversionConfig) -> int:
    """The HEADCOLOR is565 byte: 1 when the format's alternate layout is active."""
    color_format = config.color_format
    if color_format is ColorFormat.COLOR4096:
        return int(config.color4096_format is Color4096Format.PACKED_12BIT)
    if color_format is ColorFormat.COLOR16BIT:
        return int(config.color16bit_format is Color16bitFormat.RGB565)
    if color_format is ColorFormat.COLOR18BIT:
        return int(config.color18bit_format is Color18bitFormat.HIGH_BITS)
    return 0


def _check_dimensions(width: int, height: int) -> None:
    if not (0 < width <= MAX_HEADER_DIMENSION and 0 < height <= MAX_HEADER_DIMENSION):
        raise InvalidDimension(
            f"{width}x{height} cannot be stored in a 16-bit header field"
        )


def generate_headgray(config: ConversionConfig, width: int, height: int) -> bytes:
    """6-byte header for gray-class formats."""
    _check_dimensions(width, height)
    return HEADGRAY.pack(
        encode_scan_byte(config), DEPTH_CODES[config.color_format], width, height
    )


def generate_headcolor(config: ConversionConfig, width: int, height: int) -> bytes:
    """8-byte header for color-class formats."""
    _check_dimensions(width, height)
    return HEADCOLOR.pack(
        encode_scan_byte(config),
        DEPTH_CODES[config.color_format],
        width,
        height,
        variant_flag(config),
        encode_rgb_byte(config),
    )


def generate_header(config: ConversionConfig, width: int, height: int) -> bytes:
    """Pick HEADGRAY or HEADCOLOR for the configured format."""
    if config.format_spec.is_gray_class:
        return generate_headgray(config, width, height)
    return generate_headcolor(config, width, height)


def rgb332_palette() -> bytes:
    """256 entries expanding each RGB332 index to full 8-bit components."""
    entries = bytearray()
    for index in range(256):
        r = (index >> 5) & 0x07
        g = (index >> 2) & 0x07
        b = index & 0x03
        entries += bytes(
            (
                (r << 5) | (r << 2) | (r >> 1),
                (g << 5) | (g << 2) | (g >> 1),
                (b << 6) | (b << 4) | (b << 2) | b,
            )
        )
    return bytes(entries)


def grayscale_palette() -> bytes:
    """256 linear gray entries."""
    return bytes(level for level in range(256) for _ in range(3))


def palette_entries(config: ConversionConfig) -> bytes:
    """Raw RGB triples of the configured palette.

    A custom palette wins whenever one is supplied.

    Raises:
        InvalidConfiguration: If the custom palette is missing, not a whole
            number of triples, or has more than 256 entries
    """
    if config.custom_palette is not None:
        entries = config.custom_palette
    elif config.palette_type is PaletteType.CUSTOM:
        raise InvalidConfiguration("Palette type 'custom' requires custom_palette data")
    elif config.palette_type is PaletteType.GRAYSCALE:
        entries = grayscale_palette()
    else:
        entries = rgb332_palette()

    if len(entries) % 3:
        raise InvalidConfiguration(
            f"Palette length must be a multiple of 3, got {len(entries)} bytes"
        )
    if len(entries) // 3 > MAX_PALETTE_ENTRIES:
        raise InvalidConfiguration(
            f"Palette has {len(entries) // 3} entries, maximum is {MAX_PALETTE_ENTRIES}"
        )
    return entries


def generate_palette(config: ConversionConfig) -> bytes:
    """PALETTE structure: little-endian entry count followed by RGB triples."""
    entries = palette_entries(config)
    return struct.pack("<H", len(entries) // 3) + entries


def wants_palette(config: ConversionConfig) -> bool:
    return config.include_palette and config.color_format is ColorFormat.COLOR256


def frame(result: ConversionResult, config: ConversionConfig) -> bytes:
    """Concatenate [header][palette][payload] as the configuration requests.

    Args:
        result: Output of the conversion pipeline
        config: The same configuration used for the conversion

    Returns:
        Full byte sequence ready to be rendered or written
    """
    parts = []
    if config.include_header:
        parts.append(generate_header(config, result.width, result.height))
    if wants_palette(config):
        parts.append(generate_palette(config))
    parts.append(result.payload)

    framed = b"".join(parts)
    logger.debug(
        "Framed %d payload bytes into %d bytes (header=%s, palette=%s)",
        result.size_in_bytes,
        len(framed),
        config.include_header,
        wants_palette(config),
    )
    return framed
