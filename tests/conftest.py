"""Shared fixtures for the image2lcd test suite."""

from collections.abc import Callable

import numpy as np
import pytest

from image2lcd.image_processing import ImageConverter
from image2lcd.models import ConversionConfig, PixelBuffer


def make_random_image(width: int, height: int, seed: int = 0, alpha: int | None = 255) -> PixelBuffer:
    """Deterministic random RGBA image; random alpha when alpha is None."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    if alpha is not None:
        pixels[..., 3] = alpha
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def random_image() -> Callable[..., PixelBuffer]:
    """Factory for seeded random images."""
    return make_random_image


@pytest.fixture
def solid_image() -> Callable[..., PixelBuffer]:
    """Factory for single-color images."""

    def _make(width: int, height: int, rgba: "tuple[int, int, int, int]") -> PixelBuffer:
        return PixelBuffer.filled(width, height, rgba)

    return _make


@pytest.fixture
def converter() -> ImageConverter:
    return ImageConverter()


@pytest.fixture
def make_config() -> Callable[..., ConversionConfig]:
    """Config factory with no resize bounds unless given."""

    def _make(**overrides) -> ConversionConfig:
        return ConversionConfig(**overrides)

    return _make
