"""
Main ReliefGenerator Class

This is the primary interface for the PNG to STL pipeline.
It orchestrates:
1. Image loading and validation
2. Luminance normalization and level quantization
3. Per-pixel box meshing
4. Streaming export to ASCII or binary STL

Example Usage:
    generator = ReliefGenerator(HeightFieldConfig(levels=10, negative=False))
    generator.load_image("photo.png")
    generator.export_stl("photo.stl")
"""

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

import numpy as np

from .box_mesh import BoxEmitter, TRIANGLES_PER_BOX
from .config import HeightFieldConfig, DEFAULT_SOLID_NAME, validate_solid_name
from .exporters import AsciiSTLSink, BinarySTLSink, TriangleSink
from .heightfield import HeightFieldBuilder, level_to_height
from .ingestion import PixelGrid, decode, load_image

logger = logging.getLogger(__name__)


class ReliefGenerator:
    """
    High-level interface for image to relief conversion.

    Attributes:
        config: Height field options
        solid_name: Name written in the STL header
        grid: The loaded pixel grid
    """

    def __init__(
        self,
        config: Optional[HeightFieldConfig] = None,
        solid_name: str = DEFAULT_SOLID_NAME
    ):
        """
        Initialize the ReliefGenerator.

        Args:
            config: Height field options (defaults if None)
            solid_name: Name of the solid in the STL output

        Raises:
            InvalidOption: if the solid name is not printable ASCII
                without whitespace
        """
        self.config = config or HeightFieldConfig()
        self.solid_name = validate_solid_name(solid_name)
        self._builder = HeightFieldBuilder(self.config)
        self._grid: Optional[PixelGrid] = None

    def load_image(self, image_path: Union[str, Path]) -> "ReliefGenerator":
        """
        Load a PNG file.

        Args:
            image_path: Path to an 8-bit RGB or RGBA PNG

        Returns:
            self for method chaining
        """
        self._grid = load_image(image_path)
        logger.debug("Loaded %s (%dx%d)", image_path, self._grid.width, self._grid.height)
        return self

    def load_bytes(self, data: bytes) -> "ReliefGenerator":
        """Load PNG data already in memory."""
        self._grid = decode(data)
        return self

    def load_array(self, array: np.ndarray) -> "ReliefGenerator":
        """
        Load image data from a numpy array.

        Args:
            array: uint8 array of shape (H, W, 3) or (H, W, 4)

        Returns:
            self for method chaining
        """
        self._grid = PixelGrid.from_array(array)
        return self

    def _require_grid(self) -> PixelGrid:
        if self._grid is None:
            raise RuntimeError("No image loaded. Call load_image() first.")
        return self._grid

    def emit(self, sink: TriangleSink) -> int:
        """
        Stream the whole relief into a sink.

        Args:
            sink: Destination for the triangles

        Returns:
            Number of triangles written
        """
        grid = self._require_grid()

        sink.begin(self.solid_name, self.triangle_count)
        emitter = BoxEmitter(sink)
        emitter.emit_heightfield(self._builder.iter_heights(grid))
        sink.end()

        logger.debug("Wrote %d triangles", emitter.triangle_count)
        return emitter.triangle_count

    def export_stl(
        self,
        output: Union[str, Path, TextIO, BinaryIO, None] = None,
        binary: bool = False
    ) -> int:
        """
        Export to STL.

        Args:
            output: File path, open stream, or None for standard output.
                A path is only opened once an image has been loaded.
            binary: Write binary STL instead of ASCII

        Returns:
            Number of triangles written
        """
        self._require_grid()

        if output is None:
            output = sys.stdout.buffer if binary else sys.stdout

        if isinstance(output, (str, Path)):
            if binary:
                with open(output, "wb") as f:
                    return self.emit(BinarySTLSink(f))
            with open(output, "w", encoding="ascii", newline="\n") as f:
                return self.emit(AsciiSTLSink(f))

        sink = BinarySTLSink(output) if binary else AsciiSTLSink(output)
        return self.emit(sink)

    @property
    def grid(self) -> Optional[PixelGrid]:
        """Get the loaded pixel grid."""
        return self._grid

    @property
    def triangle_count(self) -> int:
        """Number of triangles the export will contain."""
        if self._grid is None:
            return 0
        return self._grid.pixel_count * TRIANGLES_PER_BOX

    def level_map(self) -> np.ndarray:
        """Quantized level per pixel, shape (H, W)."""
        return self._builder.level_map(self._require_grid())

    def height_map(self) -> np.ndarray:
        """Column height per pixel in mm, shape (H, W)."""
        return self._builder.height_map(self._require_grid())

    def get_mesh_stats(self) -> dict:
        """
        Get statistics about the relief that would be exported.

        Returns:
            Dictionary with image, level and height statistics
        """
        if self._grid is None:
            return {"error": "No image loaded"}

        grid = self._grid
        levels = self._builder.level_map(grid)
        heights = level_to_height(levels, self.config)
        histogram = np.bincount(levels.ravel(), minlength=self.config.levels)

        return {
            "image_size": grid.size,
            "has_alpha": grid.has_alpha,
            "pixel_count": grid.pixel_count,
            "triangle_count": self.triangle_count,
            "max_luminance": self._builder.max_luminance(grid),
            "levels": self.config.levels,
            "levels_used": int(np.count_nonzero(histogram)),
            "level_histogram": histogram.tolist(),
            "min_height": float(heights.min()),
            "max_height": float(heights.max()),
            "footprint_mm": (float(grid.width), float(grid.height)),
        }

    def preview(self) -> dict:
        """
        Get a preview of the current state.

        Returns:
            Dictionary with current state information
        """
        info = {
            "image_loaded": self._grid is not None,
            "config": self.config.to_dict(),
        }

        if self._grid is not None:
            info["image_size"] = self._grid.size
            info["triangle_count"] = self.triangle_count

        return info
