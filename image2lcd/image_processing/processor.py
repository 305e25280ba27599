"""Main converter orchestrating the complete pipeline.

AIDEV-NOTE: Stage order is fixed: preprocess -> encode -> scan/byte/bit
order -> frame. Each stage gets the ConversionConfig explicitly; the
converter holds no per-conversion state, so one instance can convert
any number of images.
"""

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..exceptions import DestinationWriteFailure, SourceReadFailure
from ..models import (
    ColorFormat,
    ConversionConfig,
    ConversionResult,
    OutputFormat,
    PixelBuffer,
)
from .dithering import apply_dithering
from .formats import encode
from .header import frame
from .output import generate_header_file, render
from .preprocessing import (
    adjust_brightness,
    adjust_contrast,
    invert,
    mirror,
    resize,
    rotate,
)
from .scan import apply_bit_order, apply_byte_order, apply_scan_mode

logger = logging.getLogger(__name__)


def pixel_buffer_from_image(image: Image.Image) -> PixelBuffer:
    """Convert a Pillow image (any mode) to an RGBA PixelBuffer."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    width, height = image.size
    return PixelBuffer(width=width, height=height, samples=image.tobytes())


def load_image(file_path: str | Path) -> PixelBuffer:
    """Load and decode an image file.

    Args:
        file_path: Path to image file (PNG, JPG, BMP, GIF, ...)

    Returns:
        PixelBuffer of the first frame in RGBA

    Raises:
        SourceReadFailure: If file cannot be read or decoded
    """
    try:
        with Image.open(file_path) as image:
            # Multi-frame sources (GIF, TIFF) contribute only their first frame
            image.seek(0)
            return pixel_buffer_from_image(image)
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise SourceReadFailure(f"Failed to load image {file_path}: {e}") from e


def write_output(file_path: str | Path, content: "str | bytes") -> None:
    """Write a rendering to disk.

    Raises:
        DestinationWriteFailure: If the file cannot be written
    """
    path = Path(file_path)
    try:
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
    except OSError as e:
        raise DestinationWriteFailure(f"Failed to write {path}: {e}") from e
    logger.info("Wrote %s", path)


class ImageConverter:
    """Converts RGBA images into Image2Lcd payloads."""

    def preprocess(self, image: PixelBuffer, config: ConversionConfig) -> PixelBuffer:
        """Apply resize, rotate, mirror, brightness, contrast, invert, dither.

        Args:
            image: Decoded source image
            config: Conversion options

        Returns:
            New PixelBuffer (or the input itself when no step applies)
        """
        processed = image

        if config.max_width and config.max_height:
            processed = resize(processed, config.max_width, config.max_height)

        processed = rotate(processed, config.rotation)
        processed = mirror(processed, config.mirror)
        processed = adjust_brightness(processed, config.brightness)
        processed = adjust_contrast(processed, config.contrast)

        if config.invert:
            processed = invert(processed)

        # AIDEV-NOTE: Dithering only makes sense for the 1-bit target
        if config.dithering and config.color_format is ColorFormat.MONO:
            processed = apply_dithering(processed, config.dither_algorithm)

        return processed

    def reorder(self, payload: bytes, width: int, height: int, config: ConversionConfig) -> bytes:
        """Apply scan mode, then word byte order, then in-byte bit order."""
        spec = config.format_spec
        data = apply_scan_mode(payload, width, height, config.scan_mode, spec)
        data = apply_byte_order(data, config.byte_order, spec.bytes_per_pixel)
        return apply_bit_order(data, config.bit_order_in_byte, spec.bits_per_pixel)

    def convert(self, image: PixelBuffer, config: ConversionConfig) -> ConversionResult:
        """Execute the conversion pipeline (without header/palette framing).

        Args:
            image: Decoded source image
            config: Conversion options

        Returns:
            ConversionResult holding the LCD payload

        Raises:
            UnsupportedFormat: If the configured format has no encoder
            InvalidDimension: If preprocessing produces an empty image
        """
        logger.info(
            "Converting %dx%d image to %s (%s scan)",
            image.width,
            image.height,
            config.color_format.value,
            config.scan_mode.value,
        )
        processed = self.preprocess(image, config)
        payload = encode(processed, config.format_spec)
        payload = self.reorder(payload, processed.width, processed.height, config)

        result = ConversionResult(
            payload=payload,
            width=processed.width,
            height=processed.height,
            color_format=config.color_format,
            scan_mode=config.scan_mode,
        )
        logger.info(
            "Conversion complete: %dx%d, %d bytes",
            result.width,
            result.height,
            result.size_in_bytes,
        )
        return result

    def frame(self, result: ConversionResult, config: ConversionConfig) -> bytes:
        """Prepend the header and palette the configuration asks for."""
        return frame(result, config)

    def export(
        self,
        result: ConversionResult,
        config: ConversionConfig,
        output_format: OutputFormat = OutputFormat.C_ARRAY,
    ) -> "str | bytes":
        """Frame the result and render it in the requested output format."""
        return render(self.frame(result, config), result, config, output_format)

    def process(
        self,
        input_path: str | Path,
        output_path: str | Path,
        config: ConversionConfig,
        output_format: OutputFormat = OutputFormat.C_ARRAY,
        header_file: bool = False,
    ) -> ConversionResult:
        """Load, convert and write one image file.

        Args:
            input_path: Source image
            output_path: Destination for the rendering
            config: Conversion options
            output_format: C array, raw binary or hex text
            header_file: Also write a .h next to a C array output

        Returns:
            The ConversionResult that was written
        """
        logger.info("Loading image: %s", input_path)
        image = load_image(input_path)
        logger.info("Image loaded: %dx%d", image.width, image.height)

        result = self.convert(image, config)
        framed = self.frame(result, config)
        write_output(output_path, render(framed, result, config, output_format))

        if header_file and output_format is OutputFormat.C_ARRAY:
            header_path = Path(output_path).with_suffix(".h")
            write_output(
                header_path,
                generate_header_file(framed, result, config.identifier_name),
            )

        return result
