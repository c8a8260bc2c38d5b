"""
pngtostl
========

Convert PNG images into 3D-printable STL reliefs.

Every pixel becomes a rectangular column standing on z=0 whose height
encodes the pixel's luminance, quantized into a fixed number of levels.
The result is a lithophane-style surface made of independent boxes.

Key Features:
- Unweighted RGB luminance, normalized to the brightest pixel
- Discrete height levels with negative (dark = tall) or positive polarity
- Numba JIT quantization kernels
- Streaming ASCII and binary STL output (memory does not grow with the mesh)

Example Usage:
    from pngtostl import ReliefGenerator, HeightFieldConfig

    generator = ReliefGenerator(HeightFieldConfig(levels=20))
    generator.load_image("photo.png")
    generator.export_stl("photo.stl")
"""

__version__ = "1.0.0"
__author__ = "pngtostl contributors"

from .config import HeightFieldConfig
from .errors import PngToStlError, FileOpenError, DecodeError, InvalidOption
from .ingestion import PixelGrid, decode, load_image
from .heightfield import HeightFieldBuilder, luminance, max_luminance, quantize_level, quantized_height
from .box_mesh import BoxEmitter, box_to_triangles
from .exporters import TriangleSink, AsciiSTLSink, BinarySTLSink
from .generator import ReliefGenerator

__all__ = [
    "ReliefGenerator",
    "HeightFieldConfig",
    "HeightFieldBuilder",
    "PixelGrid",
    "decode",
    "load_image",
    "luminance",
    "max_luminance",
    "quantize_level",
    "quantized_height",
    "BoxEmitter",
    "box_to_triangles",
    "TriangleSink",
    "AsciiSTLSink",
    "BinarySTLSink",
    "PngToStlError",
    "FileOpenError",
    "DecodeError",
    "InvalidOption",
]
