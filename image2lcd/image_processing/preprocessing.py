"""Geometric and tonal transforms applied before packing.

AIDEV-NOTE: Every function takes a PixelBuffer and returns a new one;
nothing here mutates its input. Alpha is never touched by the tonal
transforms. Order of application is owned by ImageConverter.
"""

import logging
import math

import numpy as np

from ..exceptions import InvalidConfiguration, InvalidDimension
from ..models import Mirror, PixelBuffer
from .utils import clamp_to_byte

logger = logging.getLogger(__name__)


def fit_dimensions(
    width: int, height: int, max_width: int, max_height: int
) -> "tuple[int, int]":
    """Compute the size that fits (max_width, max_height) keeping aspect ratio.

    The axis with the larger source/bound ratio binds to its maximum; the
    other axis is rounded half-up.

    Raises:
        InvalidDimension: If the bounds are not positive or the rounded
            size collapses to zero
    """
    if max_width <= 0 or max_height <= 0:
        raise InvalidDimension(f"Resize bounds must be positive, got {max_width}x{max_height}")

    if width <= max_width and height <= max_height:
        return width, height

    aspect = width / height
    if width / max_width > height / max_height:
        new_width = max_width
        new_height = math.floor(max_width / aspect + 0.5)
    else:
        new_height = max_height
        new_width = math.floor(max_height * aspect + 0.5)

    if new_width <= 0 or new_height <= 0:
        raise InvalidDimension(
            f"Resizing {width}x{height} into {max_width}x{max_height} "
            f"gives an empty image ({new_width}x{new_height})"
        )
    return new_width, new_height


def resize(image: PixelBuffer, max_width: int, max_height: int) -> PixelBuffer:
    """Scale the image down to fit the bounding box (nearest neighbour).

    Returns the input unchanged when it already fits.
    """
    new_width, new_height = fit_dimensions(image.width, image.height, max_width, max_height)
    if (new_width, new_height) == (image.width, image.height):
        return image

    # AIDEV-NOTE: Nearest neighbour never invents colors, which matters
    # for palette and mono targets
    src_x = (np.arange(new_width) * (image.width / new_width)).astype(np.intp)
    src_y = (np.arange(new_height) * (image.height / new_height)).astype(np.intp)
    src_x = np.minimum(src_x, image.width - 1)
    src_y = np.minimum(src_y, image.height - 1)

    pixels = image.as_array()
    resized = pixels[src_y[:, None], src_x[None, :]]
    logger.debug(
        "Resized %dx%d -> %dx%d", image.width, image.height, new_width, new_height
    )
    return PixelBuffer.from_array(resized)


def rotate(image: PixelBuffer, degrees: int) -> PixelBuffer:
    """Rotate clockwise by 0, 90, 180 or 270 degrees."""
    if degrees not in (0, 90, 180, 270):
        raise InvalidConfiguration(f"Rotation must be 0, 90, 180 or 270, got {degrees}")
    if degrees == 0:
        return image

    # np.rot90 turns counter-clockwise for positive k
    rotated = np.rot90(image.as_array(), k=-(degrees // 90))
    return PixelBuffer.from_array(rotated)


def mirror(image: PixelBuffer, mode: Mirror) -> PixelBuffer:
    """Flip horizontally, vertically or both."""
    if mode is Mirror.NONE:
        return image

    pixels = image.as_array()
    if mode is Mirror.HORIZONTAL:
        flipped = pixels[:, ::-1]
    elif mode is Mirror.VERTICAL:
        flipped = pixels[::-1, :]
    else:
        flipped = pixels[::-1, ::-1]
    return PixelBuffer.from_array(flipped)


def adjust_brightness(image: PixelBuffer, value: int) -> PixelBuffer:
    """Add value to R, G and B, clamped to [0, 255]."""
    if value == 0:
        return image

    pixels = image.as_array().astype(np.int32)
    pixels[..., :3] += int(round(value))
    return PixelBuffer.from_array(clamp_to_byte(pixels))


def contrast_factor(value: float) -> float:
    """Classic contrast curve factor for value in [-100, 100]."""
    return (259.0 * (value + 255.0)) / (255.0 * (259.0 - value))


def adjust_contrast(image: PixelBuffer, value: int) -> PixelBuffer:
    """Stretch or compress R, G and B around the 128 midpoint."""
    if value == 0:
        return image

    factor = contrast_factor(value)
    pixels = image.as_array().astype(np.float64)
    pixels[..., :3] = np.rint(factor * (pixels[..., :3] - 128.0) + 128.0)
    return PixelBuffer.from_array(clamp_to_byte(pixels))


def invert(image: PixelBuffer) -> PixelBuffer:
    """Replace R, G and B with 255 - value."""
    pixels = image.as_array().copy()
    pixels[..., :3] = 255 - pixels[..., :3]
    return PixelBuffer.from_array(pixels)
