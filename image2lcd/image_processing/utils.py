"""Utility functions shared by the preprocessing and packing stages.

AIDEV-NOTE: Two luminance definitions live here on purpose. mono/gray4/
gray16 use the unweighted RGB mean; the 8-bit grayscale format uses
BT.601 weights. Do not unify them, the output bytes depend on it.
"""

import numpy as np


def clamp_to_byte(values: np.ndarray) -> np.ndarray:
    """Clamp to [0, 255] and convert to uint8 (no wrap-around)."""
    return np.clip(values, 0, 255).astype(np.uint8)


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round .5 upwards, matching integer pixel math on displays."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def rgb_channels(pixels: np.ndarray) -> "tuple[np.ndarray, np.ndarray, np.ndarray]":
    """Split a (..., 4) RGBA array into int32 R, G, B planes."""
    rgb = pixels[..., :3].astype(np.int32)
    return rgb[..., 0], rgb[..., 1], rgb[..., 2]


def mean_luminance(pixels: np.ndarray) -> np.ndarray:
    """Unweighted mean of R, G and B as float64."""
    r, g, b = rgb_channels(pixels)
    return (r + g + b) / 3.0


def mean_luminance_int(pixels: np.ndarray) -> np.ndarray:
    """Integer part of the unweighted RGB mean (exact, no float error)."""
    r, g, b = rgb_channels(pixels)
    return (r + g + b) // 3


def weighted_luminance(pixels: np.ndarray) -> np.ndarray:
    """ITU-R BT.601 luma rounded half-up to uint8."""
    r, g, b = rgb_channels(pixels)
    luma = 0.299 * r + 0.587 * g + 0.114 * b
    return clamp_to_byte(round_half_up(luma))


def packed_size(pixel_count: int, bits_per_pixel: int) -> int:
    """Bytes needed for pixel_count pixels at bits_per_pixel, rounded up."""
    return (pixel_count * bits_per_pixel + 7) // 8


def pack_sub_byte(values: np.ndarray, bits_per_pixel: int) -> bytes:
    """Pack small integers MSB-first, 8 // bits_per_pixel per byte.

    Args:
        values: Flat array of pixel values, each < 2**bits_per_pixel
        bits_per_pixel: 1, 2 or 4

    Returns:
        Packed bytes, the final byte zero-padded in its low bits
    """
    per_byte = 8 // bits_per_pixel
    flat = np.asarray(values, dtype=np.uint8).ravel()
    padding = (-flat.size) % per_byte
    if padding:
        flat = np.concatenate([flat, np.zeros(padding, dtype=np.uint8)])

    mask = (1 << bits_per_pixel) - 1
    groups = (flat & mask).reshape(-1, per_byte).astype(np.uint16)
    # First pixel in the group lands in the most significant bits
    shifts = np.arange(per_byte - 1, -1, -1, dtype=np.uint16) * bits_per_pixel
    packed = (groups << shifts).sum(axis=1).astype(np.uint8)
    return packed.tobytes()
