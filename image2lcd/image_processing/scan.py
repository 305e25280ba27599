"""Scan order, byte order and bit order transforms on packed payloads.

AIDEV-NOTE: Input is always the horizontal (row-major) output of the
format encoders. Reordering works on whole pixels, so it is only defined
for formats whose pixels sit on byte boundaries. For the bit-packed
formats (mono/gray4/gray16) and the 12-bit packed layout only horizontal
scan is implemented; other modes are passed through with a warning.
"""

import logging

import numpy as np

from ..models import BitOrder, ByteOrder, FormatSpec, ScanMode, parse_enum

logger = logging.getLogger(__name__)


def apply_scan_mode(
    data: bytes, width: int, height: int, mode: ScanMode, spec: FormatSpec
) -> bytes:
    """Reorder a horizontally packed payload into the requested scan order.

    Args:
        data: Packed payload in row-major order
        width: Image width in pixels
        height: Image height in pixels
        mode: Target scan mode
        spec: Format of the payload (decides the pixel group size)

    Returns:
        Reordered payload of the same length
    """
    mode = parse_enum(ScanMode, mode, "scan mode")
    if mode is ScanMode.HORIZONTAL:
        return data

    bytes_per_pixel = spec.bytes_per_pixel
    if not bytes_per_pixel:
        # TODO: bit-level reordering for packed formats once the expected
        # layout for vertical scans of sub-byte pixels is pinned down
        logger.warning(
            "Scan mode %s is not implemented for %s packing; "
            "emitting horizontal order",
            mode.value,
            spec.color_format.value,
        )
        return data

    return reorder_pixels(data, width, height, mode, bytes_per_pixel)


def reorder_pixels(
    data: bytes, width: int, height: int, mode: ScanMode, bytes_per_pixel: int
) -> bytes:
    """Reorder whole pixels of bytes_per_pixel bytes each."""
    pixels = np.frombuffer(data, dtype=np.uint8).reshape(height, width, bytes_per_pixel)

    if mode is ScanMode.VERTICAL:
        # dst[x * height + y] = src[y * width + x]
        reordered = pixels.transpose(1, 0, 2)
    elif mode is ScanMode.HORIZONTAL_REVERSE_BYTE_VERTICAL:
        reordered = pixels[::-1]
    else:
        # DATA_VERTICAL_BYTE_HORIZONTAL: reserved for bit-level reordering
        reordered = pixels

    return np.ascontiguousarray(reordered).tobytes()


def apply_byte_order(data: bytes, byte_order: "ByteOrder | str", group_size: int) -> bytes:
    """Reverse the bytes inside every group_size-byte pixel for LSB order.

    A trailing partial group (only possible for malformed input) is kept
    as is.
    """
    byte_order = parse_enum(ByteOrder, byte_order, "byte order")
    if byte_order is ByteOrder.MSB or group_size <= 1:
        return bytes(data)

    buffer = np.frombuffer(bytes(data), dtype=np.uint8)
    whole = (buffer.size // group_size) * group_size
    swapped = buffer[:whole].reshape(-1, group_size)[:, ::-1]
    return swapped.tobytes() + buffer[whole:].tobytes()


def _reversal_table(bits_per_pixel: int) -> np.ndarray:
    per_byte = 8 // bits_per_pixel
    mask = (1 << bits_per_pixel) - 1
    table = np.zeros(256, dtype=np.uint8)
    for value in range(256):
        out = 0
        for slot in range(per_byte):
            pixel = (value >> (slot * bits_per_pixel)) & mask
            out |= pixel << ((per_byte - 1 - slot) * bits_per_pixel)
        table[value] = out
    return table


PIXEL_REVERSAL_TABLES = {bpp: _reversal_table(bpp) for bpp in (1, 2, 4)}


def apply_bit_order(data: bytes, bit_order: "BitOrder | str", bits_per_pixel: int) -> bytes:
    """Put the first pixel of each byte in the low bits for LSB-first order.

    Only affects sub-byte formats; byte-aligned data is returned as is.
    """
    bit_order = parse_enum(BitOrder, bit_order, "bit order")
    if bit_order is BitOrder.MSB_FIRST or bits_per_pixel not in PIXEL_REVERSAL_TABLES:
        return bytes(data)

    table = PIXEL_REVERSAL_TABLES[bits_per_pixel]
    return table[np.frombuffer(bytes(data), dtype=np.uint8)].tobytes()
