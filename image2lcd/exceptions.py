"""Exception hierarchy for the Image2Lcd converter.

AIDEV-NOTE: Every error raised by the conversion core derives from
Image2LcdError so callers (the CLI in particular) can catch one type.
The builtin base classes keep `except ValueError` / `except OSError`
call sites working.
"""


class Image2LcdError(Exception):
    """Base class for all converter errors."""


class UnsupportedFormat(Image2LcdError, ValueError):
    """Raised for an unknown color format identifier."""

    def __init__(self, format_name: object):
        self.format_name = format_name
        super().__init__(f"Unsupported color format: {format_name}")


class InvalidDimension(Image2LcdError, ValueError):
    """Raised when image dimensions are zero, negative or inconsistent."""


class InvalidConfiguration(Image2LcdError, ValueError):
    """Raised when a conversion option is out of range or malformed."""


class SourceReadFailure(Image2LcdError, OSError):
    """Raised when the source image cannot be read or decoded."""


class DestinationWriteFailure(Image2LcdError, OSError):
    """Raised when the converted output cannot be written."""
