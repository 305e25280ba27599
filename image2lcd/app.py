"""Image2Lcd converter - command line entry point."""

import argparse
import logging
import sys
from pathlib import Path

from .config_manager import ConfigManager
from .exceptions import Image2LcdError
from .image_processing import ImageConverter
from .models import (
    BitOrder,
    ByteOrder,
    Color16bitFormat,
    Color18bitFormat,
    Color4096Format,
    ColorFormat,
    ConversionConfig,
    DitherAlgorithm,
    Mirror,
    OutputFormat,
    PaletteType,
    RGBOrder,
    ScanMode,
    WordByteOrder,
)

logger = logging.getLogger(__name__)

# Default log format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# CLI defaults differ from ConversionConfig: the tool always fits a box
DEFAULT_MAX_WIDTH = 128
DEFAULT_MAX_HEIGHT = 128


def setup_logging(level: int | str = logging.INFO, log_format: str = DEFAULT_FORMAT) -> None:
    """Configure the root logger for console output.

    Args:
        level: Logging level name or number
        log_format: Log message format
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=log_format, stream=sys.stderr)
    logging.getLogger().setLevel(level)


def _choices(enum_cls) -> "list[str]":
    return [member.value for member in enum_cls]


def build_parser() -> argparse.ArgumentParser:
    """Argument parser covering every ConversionConfig option."""
    parser = argparse.ArgumentParser(
        prog="image2lcd",
        description="Convert an image into Image2Lcd data for embedded LCD/OLED displays.",
    )
    parser.add_argument("input", type=Path, help="Source image (PNG, JPG, BMP, GIF, ...)")
    parser.add_argument("output", type=Path, help="Output file")

    fmt = parser.add_argument_group("format")
    fmt.add_argument(
        "--format",
        dest="color_format",
        help="Color format: " + ", ".join(_choices(ColorFormat)) + " (or rgb565, rgb888)",
    )
    fmt.add_argument("--scan-mode", choices=_choices(ScanMode))
    fmt.add_argument("--color4096-format", choices=_choices(Color4096Format))
    fmt.add_argument("--color16bit-format", choices=_choices(Color16bitFormat))
    fmt.add_argument("--color18bit-format", choices=_choices(Color18bitFormat))
    fmt.add_argument("--rgb-order", choices=_choices(RGBOrder))

    pre = parser.add_argument_group("preprocessing")
    pre.add_argument("--width", dest="max_width", type=int, help="Max width (default: 128)")
    pre.add_argument("--height", dest="max_height", type=int, help="Max height (default: 128)")
    pre.add_argument("--rotation", type=int, choices=[0, 90, 180, 270])
    pre.add_argument("--mirror", choices=_choices(Mirror))
    pre.add_argument("--brightness", type=int, help="-100 to 100")
    pre.add_argument("--contrast", type=int, help="-100 to 100")
    pre.add_argument("--invert", action="store_true", default=None)
    pre.add_argument("--dithering", action="store_true", default=None, help="Mono only")
    pre.add_argument("--dither-algorithm", choices=_choices(DitherAlgorithm))

    order = parser.add_argument_group("byte and bit order")
    order.add_argument("--byte-order", choices=_choices(ByteOrder))
    order.add_argument("--bit-order", dest="bit_order_in_byte", choices=_choices(BitOrder))
    order.add_argument("--word-byte-order", choices=_choices(WordByteOrder))
    order.add_argument("--horizontal-reverse", action="store_true", default=None)
    order.add_argument("--vertical-reverse", action="store_true", default=None)

    out = parser.add_argument_group("output")
    out.add_argument(
        "--output-format",
        choices=_choices(OutputFormat),
        default=OutputFormat.C_ARRAY.value,
        help="c, bin or hex (default: c)",
    )
    out.add_argument("--identifier", dest="identifier_name", help="C array identifier")
    out.add_argument("--bytes-per-line", type=int)
    out.add_argument("--header", dest="include_header", action="store_true", default=None)
    out.add_argument("--palette", dest="include_palette", action="store_true", default=None)
    out.add_argument("--palette-type", choices=_choices(PaletteType))
    out.add_argument(
        "--header-file", action="store_true", help="Also write a .h file for C output"
    )

    cfg = parser.add_argument_group("presets and logging")
    cfg.add_argument("--config", type=Path, help="Load options from a JSON preset")
    cfg.add_argument("--save-config", type=Path, help="Save the effective options as a preset")
    cfg.add_argument("-v", "--verbose", action="store_true")
    cfg.add_argument("-q", "--quiet", action="store_true")
    return parser


CONFIG_OPTIONS = (
    "color_format",
    "scan_mode",
    "color4096_format",
    "color16bit_format",
    "color18bit_format",
    "rgb_order",
    "max_width",
    "max_height",
    "rotation",
    "mirror",
    "brightness",
    "contrast",
    "invert",
    "dithering",
    "dither_algorithm",
    "byte_order",
    "bit_order_in_byte",
    "word_byte_order",
    "horizontal_reverse",
    "vertical_reverse",
    "identifier_name",
    "bytes_per_line",
    "include_header",
    "include_palette",
    "palette_type",
)


def config_from_args(args: argparse.Namespace) -> ConversionConfig:
    """Merge command line options over a preset (or the CLI defaults)."""
    if args.config:
        base = ConfigManager(args.config).load()
    else:
        base = ConversionConfig(max_width=DEFAULT_MAX_WIDTH, max_height=DEFAULT_MAX_HEIGHT)

    values = {name: getattr(base, name) for name in CONFIG_OPTIONS}
    values["custom_palette"] = base.custom_palette
    for name in CONFIG_OPTIONS:
        value = getattr(args, name, None)
        if value is not None:
            values[name] = value
    return ConversionConfig(**values)


def main(argv: "list[str] | None" = None) -> int:
    """Run the converter from the command line."""
    args = build_parser().parse_args(argv)

    if args.quiet:
        setup_logging(logging.WARNING)
    elif args.verbose:
        setup_logging(logging.DEBUG)
    else:
        setup_logging(logging.INFO)

    try:
        config = config_from_args(args)
        if args.save_config:
            saved, error = ConfigManager(args.save_config).save(config)
            if not saved:
                logger.warning("Could not save preset %s: %s", args.save_config, error)

        ImageConverter().process(
            args.input,
            args.output,
            config,
            output_format=OutputFormat(args.output_format),
            header_file=args.header_file,
        )
    except Image2LcdError as e:
        logger.error("%s", e)
        return 1

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
