"""Data models and constants for the Image2Lcd converter."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TypeVar

import numpy as np

from .exceptions import InvalidConfiguration, InvalidDimension, UnsupportedFormat

# Configuration file path
CONFIG_FILE = Path.home() / ".image2lcd_config.json"

# AIDEV-NOTE: Header width/height fields are 2 bytes each
MAX_HEADER_DIMENSION = 0xFFFF
MAX_PALETTE_ENTRIES = 256

C_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

E = TypeVar("E", bound=Enum)


class ColorFormat(Enum):
    """Target pixel encodings of the Image2Lcd format family.

    AIDEV-NOTE: Closed set fixed by the external binary layout. Adding a
    member means adding an encoder in image_processing.formats and a depth
    code in image_processing.header.
    """

    MONO = "mono"
    GRAY4 = "gray4"
    GRAY16 = "gray16"
    GRAYSCALE = "grayscale"
    COLOR256 = "color256"
    COLOR4096 = "color4096"
    COLOR16BIT = "color16bit"
    COLOR18BIT = "color18bit"
    COLOR24BIT = "color24bit"
    COLOR32BIT = "color32bit"

    @classmethod
    def parse(cls, value: "ColorFormat | str") -> "ColorFormat":
        """Resolve a format name, accepting the legacy aliases.

        Raises:
            UnsupportedFormat: If the name is not a known format
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = FORMAT_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedFormat(value) from None


# Older tool versions exposed these as standalone formats
FORMAT_ALIASES = {
    "rgb565": ColorFormat.COLOR16BIT.value,
    "rgb888": ColorFormat.COLOR24BIT.value,
}


class ScanMode(Enum):
    """Traversal order used to linearize pixels. Ordinal goes in the header."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    HORIZONTAL_REVERSE_BYTE_VERTICAL = "horizontal-reverse-byte-vertical"
    DATA_VERTICAL_BYTE_HORIZONTAL = "data-vertical-byte-horizontal"

    @property
    def ordinal(self) -> int:
        return list(ScanMode).index(self)


class ByteOrder(Enum):
    MSB = "msb"
    LSB = "lsb"


class BitOrder(Enum):
    MSB_FIRST = "msb-first"
    LSB_FIRST = "lsb-first"


class WordByteOrder(Enum):
    PC_ORDER = "pc-order"
    REVERSE_ORDER = "reverse-order"


class Mirror(Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class DitherAlgorithm(Enum):
    FLOYD_STEINBERG = "floyd-steinberg"
    ORDERED = "ordered"


class PaletteType(Enum):
    RGB332 = "rgb332"
    GRAYSCALE = "grayscale"
    CUSTOM = "custom"


class Color4096Format(Enum):
    PACKED_12BIT = "12bits-3bytes"
    WORD_16BIT = "16bits-word"


class Color16bitFormat(Enum):
    RGB555 = "rgb555"
    RGB565 = "rgb565"


class Color18bitFormat(Enum):
    LOW_BITS = "6bits-low-byte"
    HIGH_BITS = "6bits-high-byte"


class RGBOrder(Enum):
    """Component order for 24/32-bit output and the HEADCOLOR rgb byte."""

    RGB = "RGB"
    RBG = "RBG"
    GRB = "GRB"
    GBR = "GBR"
    BRG = "BRG"
    BGR = "BGR"

    @property
    def channel_indices(self) -> "tuple[int, int, int]":
        """Source channel index (R=0, G=1, B=2) for each output slot."""
        return tuple("RGB".index(c) for c in self.value)  # type: ignore[return-value]


class OutputFormat(Enum):
    """Renderings of the framed byte sequence."""

    C_ARRAY = "c"
    BINARY = "bin"
    HEX_TEXT = "hex"


def parse_enum(enum_cls: "type[E]", value: "E | str", option: str) -> E:
    """Coerce a string (or member) to a member of enum_cls.

    Raises:
        InvalidConfiguration: If value is not one of the enum's values
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(str(m.value) for m in enum_cls)
        raise InvalidConfiguration(
            f"Invalid {option}: {value!r} (expected one of: {choices})"
        ) from None


# --- Pixel data ---


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded RGBA image, 8 bits per channel, row-major.

    AIDEV-NOTE: Immutable. Every preprocessing step builds a new buffer
    so stages never alias each other's samples.
    """

    width: int
    height: int
    samples: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimension(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        samples = bytes(self.samples)
        expected = self.width * self.height * 4
        if len(samples) != expected:
            raise InvalidDimension(
                f"Expected {expected} sample bytes for {self.width}x{self.height}, "
                f"got {len(samples)}"
            )
        object.__setattr__(self, "samples", samples)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """Read-only (height, width, 4) uint8 view of the samples."""
        return np.frombuffer(self.samples, dtype=np.uint8).reshape(
            self.height, self.width, 4
        )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from a (height, width, 4) array, clamping to 0-255."""
        if array.ndim != 3 or array.shape[2] != 4:
            raise InvalidDimension(f"Expected (height, width, 4) array, got {array.shape}")
        if array.dtype != np.uint8:
            array = np.clip(array, 0, 255).astype(np.uint8)
        height, width = array.shape[:2]
        return cls(width=width, height=height, samples=np.ascontiguousarray(array).tobytes())

    @classmethod
    def filled(
        cls, width: int, height: int, rgba: "tuple[int, int, int, int]"
    ) -> "PixelBuffer":
        """Create a buffer where every pixel has the same color."""
        return cls(width=width, height=height, samples=bytes(rgba) * (width * height))


@dataclass(frozen=True)
class FormatSpec:
    """The active color format plus the sub-options it owns.

    Sub-options that belong to another format are carried but never read.
    """

    color_format: ColorFormat
    rgb_order: RGBOrder = RGBOrder.RGB
    color16bit_format: Color16bitFormat = Color16bitFormat.RGB565
    color18bit_format: Color18bitFormat = Color18bitFormat.LOW_BITS
    color4096_format: Color4096Format = Color4096Format.WORD_16BIT

    @classmethod
    def from_config(cls, config: "ConversionConfig") -> "FormatSpec":
        return cls(
            color_format=config.color_format,
            rgb_order=config.rgb_order,
            color16bit_format=config.color16bit_format,
            color18bit_format=config.color18bit_format,
            color4096_format=config.color4096_format,
        )

    @property
    def bits_per_pixel(self) -> int:
        return BITS_PER_PIXEL[self.color_format]

    @property
    def pixels_per_byte(self) -> int:
        """Pixels packed into one byte; 0 for formats of a byte or more."""
        bpp = self.bits_per_pixel
        return 8 // bpp if bpp < 8 else 0

    @property
    def is_sub_byte(self) -> bool:
        return self.bits_per_pixel < 8

    @property
    def is_gray_class(self) -> bool:
        """True for formats framed with the 6-byte HEADGRAY header."""
        return self.color_format in GRAY_CLASS_FORMATS

    @property
    def bytes_per_pixel(self) -> int:
        """Size of one stored pixel in bytes.

        0 when pixels do not sit on byte boundaries (sub-byte formats and
        the 12-bit packed 4096-color layout).
        """
        if self.is_sub_byte:
            return 0
        if self.color_format is ColorFormat.COLOR4096:
            if self.color4096_format is Color4096Format.PACKED_12BIT:
                return 0
            return 2
        return STORED_BYTES_PER_PIXEL[self.color_format]


BITS_PER_PIXEL = {
    ColorFormat.MONO: 1,
    ColorFormat.GRAY4: 2,
    ColorFormat.GRAY16: 4,
    ColorFormat.GRAYSCALE: 8,
    ColorFormat.COLOR256: 8,
    ColorFormat.COLOR4096: 12,
    ColorFormat.COLOR16BIT: 16,
    ColorFormat.COLOR18BIT: 18,
    ColorFormat.COLOR24BIT: 24,
    ColorFormat.COLOR32BIT: 32,
}

STORED_BYTES_PER_PIXEL = {
    ColorFormat.GRAYSCALE: 1,
    ColorFormat.COLOR256: 1,
    ColorFormat.COLOR16BIT: 2,
    ColorFormat.COLOR18BIT: 3,
    ColorFormat.COLOR24BIT: 3,
    ColorFormat.COLOR32BIT: 4,
}

GRAY_CLASS_FORMATS = frozenset(
    {
        ColorFormat.MONO,
        ColorFormat.GRAY4,
        ColorFormat.GRAY16,
        ColorFormat.GRAYSCALE,
        ColorFormat.COLOR256,
    }
)


# --- Conversion configuration ---


@dataclass
class ConversionConfig:
    """Every option read by the conversion pipeline.

    AIDEV-NOTE: Passed explicitly to each stage. String values are
    accepted for enum fields (JSON presets, CLI) and coerced on init.
    """

    # Target format
    color_format: ColorFormat = ColorFormat.MONO
    scan_mode: ScanMode = ScanMode.HORIZONTAL

    # Preprocessing
    max_width: int | None = None  # resize only when both bounds are set
    max_height: int | None = None
    rotation: int = 0  # 0, 90, 180, 270 (clockwise)
    mirror: Mirror = Mirror.NONE
    brightness: int = 0  # -100 to 100
    contrast: int = 0  # -100 to 100
    invert: bool = False
    dithering: bool = False  # mono only
    dither_algorithm: DitherAlgorithm = DitherAlgorithm.FLOYD_STEINBERG

    # Byte/bit order
    byte_order: ByteOrder = ByteOrder.MSB
    bit_order_in_byte: BitOrder = BitOrder.MSB_FIRST
    word_byte_order: WordByteOrder = WordByteOrder.PC_ORDER
    horizontal_reverse: bool = False
    vertical_reverse: bool = False

    # Framing
    include_header: bool = False
    include_palette: bool = False  # color256 only
    palette_type: PaletteType = PaletteType.RGB332
    custom_palette: bytes | None = None  # RGB triples

    # Format sub-options
    color4096_format: Color4096Format = Color4096Format.WORD_16BIT
    color16bit_format: Color16bitFormat = Color16bitFormat.RGB565
    color18bit_format: Color18bitFormat = Color18bitFormat.LOW_BITS
    rgb_order: RGBOrder = RGBOrder.RGB

    # Text output
    identifier_name: str = "image_data"
    bytes_per_line: int = 16

    def __post_init__(self):
        self.color_format = ColorFormat.parse(self.color_format)
        self.scan_mode = parse_enum(ScanMode, self.scan_mode, "scan mode")
        self.mirror = parse_enum(Mirror, self.mirror, "mirror")
        self.dither_algorithm = parse_enum(
            DitherAlgorithm, self.dither_algorithm, "dither algorithm"
        )
        self.byte_order = parse_enum(ByteOrder, self.byte_order, "byte order")
        self.bit_order_in_byte = parse_enum(BitOrder, self.bit_order_in_byte, "bit order")
        self.word_byte_order = parse_enum(
            WordByteOrder, self.word_byte_order, "word byte order"
        )
        self.palette_type = parse_enum(PaletteType, self.palette_type, "palette type")
        self.color4096_format = parse_enum(
            Color4096Format, self.color4096_format, "4096-color format"
        )
        self.color16bit_format = parse_enum(
            Color16bitFormat, self.color16bit_format, "16-bit format"
        )
        self.color18bit_format = parse_enum(
            Color18bitFormat, self.color18bit_format, "18-bit format"
        )
        rgb_order = self.rgb_order
        if isinstance(rgb_order, str):
            rgb_order = rgb_order.upper()
        self.rgb_order = parse_enum(RGBOrder, rgb_order, "RGB order")
        if self.custom_palette is not None:
            self.custom_palette = bytes(self.custom_palette)
        self.validate()

    def validate(self) -> None:
        """Check numeric ranges and identifiers.

        Raises:
            InvalidConfiguration: On the first offending option
        """
        if self.rotation not in (0, 90, 180, 270):
            raise InvalidConfiguration(
                f"Rotation must be 0, 90, 180 or 270, got {self.rotation}"
            )
        for name in ("brightness", "contrast"):
            value = getattr(self, name)
            if not -100 <= value <= 100:
                raise InvalidConfiguration(f"{name} must be in [-100, 100], got {value}")
        for name in ("max_width", "max_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise InvalidConfiguration(f"{name} must be positive, got {value}")
        if self.bytes_per_line <= 0:
            raise InvalidConfiguration(
                f"bytes_per_line must be positive, got {self.bytes_per_line}"
            )
        if not C_IDENTIFIER.fullmatch(self.identifier_name):
            raise InvalidConfiguration(
                f"Not a valid C identifier: {self.identifier_name!r}"
            )

    @property
    def format_spec(self) -> FormatSpec:
        return FormatSpec.from_config(self)


@dataclass(frozen=True)
class ConversionResult:
    """Packed LCD payload (no header or palette) and its description."""

    payload: bytes
    width: int
    height: int
    color_format: ColorFormat
    scan_mode: ScanMode
    size_in_bytes: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "payload", bytes(self.payload))
        object.__setattr__(self, "size_in_bytes", len(self.payload))
