"""Image2Lcd converter: RGBA images to packed data for embedded LCD/OLED controllers."""

from .exceptions import (
    DestinationWriteFailure,
    Image2LcdError,
    InvalidConfiguration,
    InvalidDimension,
    SourceReadFailure,
    UnsupportedFormat,
)
from .image_processing import ImageConverter, load_image, write_output
from .models import (
    ColorFormat,
    ConversionConfig,
    ConversionResult,
    FormatSpec,
    PixelBuffer,
    ScanMode,
)

__version__ = "1.0.0"

__all__ = [
    "ColorFormat",
    "ConversionConfig",
    "ConversionResult",
    "DestinationWriteFailure",
    "FormatSpec",
    "Image2LcdError",
    "ImageConverter",
    "InvalidConfiguration",
    "InvalidDimension",
    "PixelBuffer",
    "ScanMode",
    "SourceReadFailure",
    "UnsupportedFormat",
    "load_image",
    "write_output",
]
