"""Color format quantization and bit packing.

AIDEV-NOTE: One encoder per ColorFormat, selected through the ENCODERS
table. Quantization is plain bit truncation (no color-space math) so the
output is deterministic and matches the Image2Lcd tool byte for byte.
Multi-byte pixels are emitted big-endian; byte order swapping happens
later in the scan stage.
"""

import logging
from collections.abc import Callable

import numpy as np

from ..exceptions import UnsupportedFormat
from ..models import (
    Color16bitFormat,
    Color18bitFormat,
    Color4096Format,
    ColorFormat,
    FormatSpec,
    PixelBuffer,
)
from .utils import (
    mean_luminance_int,
    pack_sub_byte,
    packed_size,
    rgb_channels,
    weighted_luminance,
)

logger = logging.getLogger(__name__)


def encode_mono(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """1 bit per pixel, set when mean luminance >= 128."""
    bits = (mean_luminance_int(image.as_array()) >= 128).astype(np.uint8)
    return pack_sub_byte(bits, 1)


def encode_gray4(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """2 bits per pixel (4 gray levels)."""
    return pack_sub_byte(mean_luminance_int(image.as_array()) >> 6, 2)


def encode_gray16(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """4 bits per pixel (16 gray levels)."""
    return pack_sub_byte(mean_luminance_int(image.as_array()) >> 4, 4)


def encode_grayscale(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """8-bit BT.601 luma, one byte per pixel."""
    return weighted_luminance(image.as_array()).tobytes()


def encode_color256(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """RGB332 palette index, one byte per pixel."""
    r, g, b = rgb_channels(image.as_array())
    index = ((r >> 5) << 5) | ((g >> 5) << 2) | (b >> 6)
    return index.astype(np.uint8).tobytes()


def encode_color4096(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """12-bit color, either packed two pixels per three bytes or one 16-bit word each."""
    r, g, b = (c.ravel() >> 4 for c in rgb_channels(image.as_array()))

    if spec.color4096_format is Color4096Format.PACKED_12BIT:
        count = r.size
        if count % 2:
            # Pad with a black pixel; its trailing byte is cut off below
            r, g, b = (np.append(c, 0) for c in (r, g, b))
        r1, r2 = r[0::2], r[1::2]
        g1, g2 = g[0::2], g[1::2]
        b1, b2 = b[0::2], b[1::2]
        packed = np.stack(
            [(r1 << 4) | g1, (b1 << 4) | r2, (g2 << 4) | b2], axis=1
        ).astype(np.uint8)
        return packed.tobytes()[: packed_size(count, 12)]

    word = (r << 8) | (g << 4) | b
    return _big_endian_words(word)


def encode_color16bit(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """RGB565 or RGB555 as big-endian 16-bit words."""
    r, g, b = rgb_channels(image.as_array())
    if spec.color16bit_format is Color16bitFormat.RGB555:
        word = ((r >> 3) << 10) | ((g >> 3) << 5) | (b >> 3)
    else:
        word = ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)
    return _big_endian_words(word)


def encode_color18bit(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """6 bits per component, one component per byte."""
    pixels = image.as_array()[..., :3] >> 2
    if spec.color18bit_format is Color18bitFormat.HIGH_BITS:
        pixels = pixels << 2
    return np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()


def encode_color24bit(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """8 bits per component in the configured component order."""
    order = list(spec.rgb_order.channel_indices)
    return np.ascontiguousarray(image.as_array()[..., order]).tobytes()


def encode_color32bit(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """Ordered components followed by the untouched alpha byte."""
    order = list(spec.rgb_order.channel_indices) + [3]
    return np.ascontiguousarray(image.as_array()[..., order]).tobytes()


def _big_endian_words(words: np.ndarray) -> bytes:
    return np.asarray(words).astype(">u2").ravel().tobytes()


ENCODERS: "dict[ColorFormat, Callable[[PixelBuffer, FormatSpec], bytes]]" = {
    ColorFormat.MONO: encode_mono,
    ColorFormat.GRAY4: encode_gray4,
    ColorFormat.GRAY16: encode_gray16,
    ColorFormat.GRAYSCALE: encode_grayscale,
    ColorFormat.COLOR256: encode_color256,
    ColorFormat.COLOR4096: encode_color4096,
    ColorFormat.COLOR16BIT: encode_color16bit,
    ColorFormat.COLOR18BIT: encode_color18bit,
    ColorFormat.COLOR24BIT: encode_color24bit,
    ColorFormat.COLOR32BIT: encode_color32bit,
}


def expected_size(spec: FormatSpec, width: int, height: int) -> int:
    """Payload size in bytes for an image of the given dimensions."""
    pixels = width * height
    if spec.bytes_per_pixel:
        return pixels * spec.bytes_per_pixel
    return packed_size(pixels, spec.bits_per_pixel)


def encode(image: PixelBuffer, spec: FormatSpec) -> bytes:
    """Quantize and pack the image into the format's byte layout.

    Args:
        image: Preprocessed RGBA image
        spec: Target format and its sub-options

    Returns:
        Packed payload in horizontal scan order

    Raises:
        UnsupportedFormat: If spec names a format without an encoder
    """
    encoder = ENCODERS.get(spec.color_format)
    if encoder is None:
        raise UnsupportedFormat(spec.color_format)

    payload = encoder(image, spec)
    logger.debug(
        "Encoded %dx%d image as %s: %d bytes",
        image.width,
        image.height,
        spec.color_format.value,
        len(payload),
    )
    return payload
