"""
Image Ingestion Module

This module handles:
- Reading PNG files from disk
- Validating the PNG signature and IHDR header before decoding
- Decoding 8-bit RGB / RGBA images with Pillow into an immutable PixelGrid
- Discarding the alpha channel (fully opaque compositing is assumed)

Only 24-bit RGB and 32-bit RGBA PNG images are accepted. Palette, grayscale
and 16-bit-per-channel images are rejected with a DecodeError instead of
being silently converted, so partial or guessed data never reaches the
height field builder.
"""

import io
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Union

import numpy as np
from PIL import Image

from .errors import DecodeError, FileOpenError

logger = logging.getLogger(__name__)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Signature (8) + IHDR length (4) + type (4) + IHDR payload (13)
_IHDR_END = 8 + 4 + 4 + 13
_IHDR_FORMAT = ">I4sIIBBBBB"


class ColorType:
    """PNG color type codes (IHDR byte 9)."""
    GRAYSCALE = 0
    RGB = 2
    PALETTE = 3
    GRAYSCALE_ALPHA = 4
    RGB_ALPHA = 6


COLOR_TYPE_NAMES = {
    ColorType.GRAYSCALE: "grayscale",
    ColorType.RGB: "RGB",
    ColorType.PALETTE: "palette",
    ColorType.GRAYSCALE_ALPHA: "grayscale+alpha",
    ColorType.RGB_ALPHA: "RGBA",
}

SUPPORTED_COLOR_TYPES = (ColorType.RGB, ColorType.RGB_ALPHA)
SUPPORTED_BIT_DEPTH = 8


class PngHeader(NamedTuple):
    """Fields of the PNG IHDR chunk."""
    width: int
    height: int
    bit_depth: int
    color_type: int
    interlace: int


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """
    Decoded image as a read-only grid of RGB samples.

    Attributes:
        rgb: uint8 array of shape (H, W, 3), row-major
        has_alpha: True if the source carried an alpha channel (discarded)
    """
    rgb: np.ndarray
    has_alpha: bool = False

    def __post_init__(self):
        if self.rgb.ndim != 3 or self.rgb.shape[2] != 3:
            raise ValueError("Pixel data must have shape (H, W, 3)")
        if self.rgb.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {self.rgb.dtype}")
        if self.rgb.shape[0] == 0 or self.rgb.shape[1] == 0:
            raise ValueError("Pixel grid must be at least 1x1")
        self.rgb.flags.writeable = False

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelGrid":
        """
        Build a grid from an RGB or RGBA array.

        Args:
            array: uint8 array of shape (H, W, 3) or (H, W, 4)

        Returns:
            New PixelGrid owning a copy of the RGB channels
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError("Image array must have shape (H, W, 3) or (H, W, 4)")

        rgb = np.array(array[:, :, :3], dtype=np.uint8, copy=True)
        return cls(rgb=rgb, has_alpha=array.shape[2] == 4)

    @property
    def width(self) -> int:
        return self.rgb.shape[1]

    @property
    def height(self) -> int:
        return self.rgb.shape[0]

    @property
    def size(self):
        """Image size as (width, height)."""
        return (self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def read_png_header(data: bytes) -> PngHeader:
    """
    Validate the PNG signature and parse the IHDR chunk.

    Args:
        data: Encoded image bytes

    Returns:
        PngHeader with the image dimensions and color model

    Raises:
        DecodeError: if the bytes are not a PNG or the header is malformed
    """
    if len(data) < len(PNG_SIGNATURE) or data[:len(PNG_SIGNATURE)] != PNG_SIGNATURE:
        raise DecodeError("Not a PNG image (signature mismatch)")
    if len(data) < _IHDR_END:
        raise DecodeError("Truncated PNG header")

    (length, chunk_type, width, height, bit_depth, color_type,
     _compression, _filter, interlace) = struct.unpack(
        _IHDR_FORMAT, data[len(PNG_SIGNATURE):_IHDR_END]
    )

    if chunk_type != b"IHDR" or length != 13:
        raise DecodeError("Malformed PNG: first chunk is not IHDR")
    if width == 0 or height == 0:
        raise DecodeError(f"Invalid PNG dimensions {width}x{height}")

    return PngHeader(width, height, bit_depth, color_type, interlace)


def _check_color_model(header: PngHeader):
    if header.color_type not in SUPPORTED_COLOR_TYPES:
        name = COLOR_TYPE_NAMES.get(header.color_type, f"type {header.color_type}")
        raise DecodeError(
            f"Unsupported PNG color model: {name} (only RGB and RGBA are accepted)"
        )
    if header.bit_depth != SUPPORTED_BIT_DEPTH:
        raise DecodeError(
            f"Unsupported PNG bit depth: {header.bit_depth} bits per channel "
            f"(only {SUPPORTED_BIT_DEPTH} is accepted)"
        )


def decode(data: bytes) -> PixelGrid:
    """
    Decode PNG bytes into a PixelGrid.

    The header is validated before Pillow touches the pixel data, and the
    whole image is loaded before a grid is built.

    Args:
        data: Encoded PNG bytes

    Returns:
        PixelGrid with the RGB channels (alpha discarded)

    Raises:
        DecodeError: on signature mismatch, unsupported color model,
            truncated or corrupt data, or allocation failure
    """
    header = read_png_header(data)
    _check_color_model(header)

    try:
        with Image.open(io.BytesIO(data), formats=["PNG"]) as img:
            img.load()
            if img.mode not in ("RGB", "RGBA"):
                raise DecodeError(f"Unexpected decoded image mode: {img.mode}")
            pixels = np.array(img, dtype=np.uint8)
    except DecodeError:
        raise
    except MemoryError as e:
        raise DecodeError("Out of memory while decoding PNG") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Refusing to decode PNG: {e}") from e
    except (OSError, SyntaxError, ValueError, EOFError, struct.error) as e:
        raise DecodeError(f"Corrupt or truncated PNG: {e}") from e

    if pixels.shape[:2] != (header.height, header.width):
        raise DecodeError(
            f"Decoded size {pixels.shape[1]}x{pixels.shape[0]} does not match "
            f"header size {header.width}x{header.height}"
        )

    logger.debug(
        "Decoded %dx%d %s PNG (interlace=%d)",
        header.width, header.height,
        COLOR_TYPE_NAMES[header.color_type], header.interlace
    )

    return PixelGrid.from_array(pixels)


def load_image(image_path: Union[str, Path]) -> PixelGrid:
    """
    Read and decode a PNG file.

    Args:
        image_path: Path to the PNG file

    Returns:
        PixelGrid

    Raises:
        FileOpenError: if the file cannot be read
        DecodeError: if the contents are not a supported PNG
    """
    image_path = Path(image_path)
    try:
        data = image_path.read_bytes()
    except OSError as e:
        raise FileOpenError(f"Cannot open {image_path}: {e.strerror or e}") from e

    logger.debug("Read %d bytes from %s", len(data), image_path)
    return decode(data)
