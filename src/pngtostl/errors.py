"""
Error types raised by the conversion pipeline.

Every error is fatal to a run: library code raises, and only the
command-line interface and the web UI turn them into messages.
"""


class PngToStlError(Exception):
    """Base class for all pngtostl errors."""


class FileOpenError(PngToStlError, OSError):
    """The input image path could not be opened or read."""


class DecodeError(PngToStlError, ValueError):
    """
    The input bytes are not a usable image.

    Raised for a bad signature, an unsupported color model
    (palette, grayscale, 16 bits per channel), a truncated or corrupt
    stream, or an allocation failure while decoding.
    """


class InvalidOption(PngToStlError, ValueError):
    """An unrecognized flag, a missing or malformed value, or a missing filename."""
