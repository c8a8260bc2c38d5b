"""
STL Format Writers

STL stores a list of independent triangles, each with a facet normal and
three vertices. Both writers here are streaming sinks: every triangle is
serialized the moment it is received and nothing is kept in memory.

The facet normal is always written as zero; slicers derive it from the
vertex winding (counter-clockwise seen from outside).

ASCII layout:
    solid <name>
    facet normal 0 0 0
      outer loop
        vertex x y z      (x3)
      endloop
    endfacet
    ...
    endsolid <name>

Binary layout (little-endian):
- Header: 80 bytes (must not start with "solid")
- Triangle count: uint32
- Per triangle: normal (3 x float32), 3 vertices (9 x float32),
  attribute byte count (uint16) = 50 bytes
"""

import struct
from typing import BinaryIO, Optional, TextIO, Tuple


Vertex = Tuple[float, float, float]

STL_HEADER_SIZE = 80
_TRIANGLE_STRUCT = struct.Struct("<12fH")
_ZERO_NORMAL = (0.0, 0.0, 0.0)


def format_coordinate(value: float) -> str:
    """Shortest decimal text that reads back as the same float."""
    return repr(float(value))


class TriangleSink:
    """
    Destination for a stream of triangles.

    Subclasses implement begin(), write_triangle() and end(). A sink is
    used once: begin, any number of triangles, end.
    """

    def begin(self, name: str, triangle_count: Optional[int] = None):
        """Start a solid. triangle_count is required by some formats."""
        raise NotImplementedError

    def write_triangle(self, v1: Vertex, v2: Vertex, v3: Vertex):
        """Write one triangle, vertices counter-clockwise from outside."""
        raise NotImplementedError

    def end(self):
        """Finish the solid and flush the underlying stream."""
        raise NotImplementedError


class TriangleCounter(TriangleSink):
    """Sink that only counts what it receives."""

    def __init__(self):
        self.name: Optional[str] = None
        self.count = 0
        self.finished = False

    def begin(self, name: str, triangle_count: Optional[int] = None):
        self.name = name

    def write_triangle(self, v1: Vertex, v2: Vertex, v3: Vertex):
        self.count += 1

    def end(self):
        self.finished = True


class AsciiSTLSink(TriangleSink):
    """Writes ASCII STL to a text stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._name: Optional[str] = None

    def begin(self, name: str, triangle_count: Optional[int] = None):
        self._name = name
        self.stream.write(f"solid {name}\n")

    def write_triangle(self, v1: Vertex, v2: Vertex, v3: Vertex):
        if self._name is None:
            raise RuntimeError("begin() must be called before write_triangle()")

        lines = ["facet normal 0 0 0\n", "  outer loop\n"]
        for v in (v1, v2, v3):
            lines.append(
                f"    vertex {format_coordinate(v[0])} "
                f"{format_coordinate(v[1])} {format_coordinate(v[2])}\n"
            )
        lines.append("  endloop\n")
        lines.append("endfacet\n")
        self.stream.write("".join(lines))

    def end(self):
        self.stream.write(f"endsolid {self._name}\n")
        self.stream.flush()


class BinarySTLSink(TriangleSink):
    """
    Writes binary STL to a byte stream.

    The triangle count goes in the header, so it must be passed to begin().
    Coordinates are stored as float32.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._expected: Optional[int] = None
        self._written = 0

    def begin(self, name: str, triangle_count: Optional[int] = None):
        if triangle_count is None:
            raise ValueError("Binary STL requires the triangle count up front")

        header = f"binary STL {name}".encode("ascii", "replace")[:STL_HEADER_SIZE]
        self.stream.write(header.ljust(STL_HEADER_SIZE, b"\0"))
        self.stream.write(struct.pack("<I", triangle_count))
        self._expected = triangle_count

    def write_triangle(self, v1: Vertex, v2: Vertex, v3: Vertex):
        if self._expected is None:
            raise RuntimeError("begin() must be called before write_triangle()")

        self.stream.write(_TRIANGLE_STRUCT.pack(*_ZERO_NORMAL, *v1, *v2, *v3, 0))
        self._written += 1

    def end(self):
        if self._written != self._expected:
            raise RuntimeError(
                f"Binary STL header announced {self._expected} triangles, "
                f"wrote {self._written}"
            )
        self.stream.flush()
