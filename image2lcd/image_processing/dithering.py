"""Dithering to pure black and white for the monochrome target.

AIDEV-NOTE: Floyd-Steinberg has a strict raster-order dependency (every
pixel reads error pushed by earlier pixels), so it runs as a plain loop
over an explicit error accumulator. Ordered dithering has no cross-pixel
dependency and is fully vectorised.
"""

import logging

import numpy as np

from ..models import DitherAlgorithm, PixelBuffer
from .utils import mean_luminance

logger = logging.getLogger(__name__)

THRESHOLD = 128

# 4x4 Bayer matrix, indexed [y % 4][x % 4]
BAYER_4X4 = np.array(
    [
        [0, 8, 2, 10],
        [12, 4, 14, 6],
        [3, 11, 1, 9],
        [15, 7, 13, 5],
    ],
    dtype=np.float64,
)

# (dy, dx, weight) neighbours receiving quantization error
FLOYD_STEINBERG_WEIGHTS = (
    (0, 1, 7 / 16),
    (1, -1, 3 / 16),
    (1, 0, 5 / 16),
    (1, 1, 1 / 16),
)


def apply_dithering(
    image: PixelBuffer,
    algorithm: DitherAlgorithm = DitherAlgorithm.FLOYD_STEINBERG,
) -> PixelBuffer:
    """Dither the image so R, G and B are each exactly 0 or 255.

    Args:
        image: Source image (not modified)
        algorithm: Error diffusion or ordered (Bayer 4x4)

    Returns:
        New PixelBuffer with alpha carried over unchanged
    """
    if algorithm is DitherAlgorithm.ORDERED:
        levels = ordered_levels(image)
    else:
        levels = floyd_steinberg_levels(image)

    logger.debug("Applied %s dithering to %dx%d image", algorithm.value, image.width, image.height)
    return _with_levels(image, levels)


def floyd_steinberg_levels(image: PixelBuffer) -> np.ndarray:
    """Per-pixel 0/255 output of Floyd-Steinberg error diffusion.

    Returns:
        (height, width) uint8 array
    """
    width, height = image.width, image.height
    luminance = mean_luminance(image.as_array())
    error = np.zeros((height, width), dtype=np.float64)
    levels = np.zeros((height, width), dtype=np.uint8)

    for y in range(height):
        for x in range(width):
            # Read the accumulated error before this pixel pushes its own
            old = min(255.0, max(0.0, luminance[y, x] + error[y, x]))
            new = 0 if old < THRESHOLD else 255
            levels[y, x] = new
            quant_error = old - new
            if quant_error == 0:
                continue

            for dy, dx, weight in FLOYD_STEINBERG_WEIGHTS:
                ny, nx = y + dy, x + dx
                if 0 <= nx < width and ny < height:
                    error[ny, nx] += quant_error * weight

    return levels


def ordered_levels(image: PixelBuffer) -> np.ndarray:
    """Per-pixel 0/255 output of 4x4 Bayer ordered dithering."""
    luminance = mean_luminance(image.as_array())
    thresholds = (BAYER_4X4 / 16.0) * 255.0
    tiled = np.tile(
        thresholds,
        (-(-image.height // 4), -(-image.width // 4)),
    )[: image.height, : image.width]
    return np.where(luminance > tiled, 255, 0).astype(np.uint8)


def _with_levels(image: PixelBuffer, levels: np.ndarray) -> PixelBuffer:
    pixels = image.as_array().copy()
    pixels[..., 0] = levels
    pixels[..., 1] = levels
    pixels[..., 2] = levels
    return PixelBuffer.from_array(pixels)
