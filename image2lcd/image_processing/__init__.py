"""Image processing pipeline for image-to-LCD conversion.

AIDEV-NOTE: This package handles the complete pipeline from a decoded
RGBA image to Image2Lcd bytes. Organized into modular components:
- processor: Main ImageConverter orchestrator and file I/O boundary
- preprocessing: Resize, rotate, mirror, brightness, contrast, invert
- dithering: Floyd-Steinberg and Bayer ordered dithering
- formats: Per-format quantization and bit packing
- scan: Scan order, byte order and bit order transforms
- header: HEADGRAY/HEADCOLOR headers, palettes, framing
- output: C array, C header, binary and hex text renderings
- utils: Luminance and packing helpers
"""

from .processor import ImageConverter, load_image, write_output

__all__ = ["ImageConverter", "load_image", "write_output"]
