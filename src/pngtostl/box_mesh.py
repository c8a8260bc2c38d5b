"""
Per-pixel Box Meshing

Every pixel becomes an independent closed box (a "box soup"): 6 faces,
2 triangles per face, 12 triangles per pixel. No faces are merged or culled
and adjacent boxes are allowed to overlap.

Triangles are wound counter-clockwise as seen from outside the solid, so
the outward normal follows the right-hand rule. The normal written to the
output is always zero; consumers recompute it from the winding.

Triangles are handed to a TriangleSink one at a time as they are produced,
so memory use does not grow with the size of the image.
"""

from enum import IntEnum
from typing import Iterable, Iterator, Tuple
import numpy as np

from .exporters.stl_exporter import TriangleSink


Vertex = Tuple[float, float, float]
Triangle = Tuple[Vertex, Vertex, Vertex]

TRIANGLES_PER_BOX = 12


class FaceDirection(IntEnum):
    """Face normal directions."""
    BOTTOM = 0  # -Z
    TOP = 1     # +Z
    WEST = 2    # -X (left)
    EAST = 3    # +X (right)
    SOUTH = 4   # -Y (front)
    NORTH = 5   # +Y (back)


# Outward normal vectors for each face direction
FACE_NORMALS = np.array([
    [0, 0, -1],  # BOTTOM
    [0, 0, 1],   # TOP
    [-1, 0, 0],  # WEST
    [1, 0, 0],   # EAST
    [0, -1, 0],  # SOUTH
    [0, 1, 0],   # NORTH
], dtype=np.float64)


def face_triangles(
    direction: int,
    x: float,
    y: float,
    xsize: float,
    ysize: float,
    height: float
) -> Tuple[Triangle, Triangle]:
    """
    The two triangles covering one face of a box.

    Args:
        direction: FaceDirection of the face
        x, y: Bottom-left corner of the box footprint
        xsize, ysize: Footprint dimensions
        height: Top of the box (bottom is z=0)

    Returns:
        Two triangles, each wound counter-clockwise from outside
    """
    x1 = x + xsize
    y1 = y + ysize
    z = height

    if direction == FaceDirection.BOTTOM:
        return (
            ((x, y, 0.0), (x, y1, 0.0), (x1, y, 0.0)),
            ((x1, y, 0.0), (x, y1, 0.0), (x1, y1, 0.0)),
        )
    elif direction == FaceDirection.TOP:
        return (
            ((x, y, z), (x1, y, z), (x, y1, z)),
            ((x1, y, z), (x1, y1, z), (x, y1, z)),
        )
    elif direction == FaceDirection.WEST:
        return (
            ((x, y, 0.0), (x, y, z), (x, y1, 0.0)),
            ((x, y1, 0.0), (x, y, z), (x, y1, z)),
        )
    elif direction == FaceDirection.EAST:
        return (
            ((x1, y, 0.0), (x1, y1, 0.0), (x1, y, z)),
            ((x1, y1, 0.0), (x1, y1, z), (x1, y, z)),
        )
    elif direction == FaceDirection.SOUTH:
        return (
            ((x, y, 0.0), (x1, y, z), (x, y, z)),
            ((x, y, 0.0), (x1, y, 0.0), (x1, y, z)),
        )
    elif direction == FaceDirection.NORTH:
        return (
            ((x, y1, 0.0), (x, y1, z), (x1, y1, z)),
            ((x, y1, 0.0), (x1, y1, z), (x1, y1, 0.0)),
        )
    raise ValueError(f"Unknown face direction: {direction}")


def box_to_triangles(
    x: float,
    y: float,
    xsize: float,
    ysize: float,
    height: float
) -> Iterator[Triangle]:
    """
    Decompose a box standing on z=0 into 12 triangles.

    Args:
        x, y: Bottom-left corner of the footprint
        xsize, ysize: Footprint dimensions
        height: Box height (>= 0; 0 gives zero-area side faces)

    Yields:
        Triangles in face order bottom, top, west, east, south, north
    """
    x, y = float(x), float(y)
    xsize, ysize, height = float(xsize), float(ysize), float(height)
    for direction in FaceDirection:
        yield from face_triangles(direction, x, y, xsize, ysize, height)


class BoxEmitter:
    """
    Streams pixel boxes into a TriangleSink.

    Attributes:
        sink: Destination for the triangles
        xsize, ysize: Footprint of one pixel
        triangle_count: Number of triangles written so far
    """

    def __init__(self, sink: TriangleSink, xsize: float = 1.0, ysize: float = 1.0):
        self.sink = sink
        self.xsize = xsize
        self.ysize = ysize
        self.triangle_count = 0

    def emit_box(self, x: float, y: float, height: float):
        """Write the 12 triangles of the box at pixel (x, y)."""
        for v1, v2, v3 in box_to_triangles(
            x * self.xsize, y * self.ysize, self.xsize, self.ysize, height
        ):
            self.sink.write_triangle(v1, v2, v3)
            self.triangle_count += 1

    def emit_heightfield(self, heights: Iterable[Tuple[int, int, float]]) -> int:
        """
        Write one box per (x, y, height) triple.

        Returns:
            Number of boxes written
        """
        boxes = 0
        for x, y, height in heights:
            self.emit_box(x, y, height)
            boxes += 1
        return boxes


def triangle_normal(triangle: Triangle) -> np.ndarray:
    """
    Unit normal implied by a triangle's winding (right-hand rule).

    Returns a zero vector for a degenerate (zero-area) triangle.
    """
    v0, v1, v2 = (np.asarray(v, dtype=np.float64) for v in triangle)
    n = np.cross(v1 - v0, v2 - v0)
    length = np.linalg.norm(n)
    if length == 0:
        return n
    return n / length
