"""
Streaming STL writers.

Supported formats:
- ASCII STL - Human readable, default output
- Binary STL - Compact, 50 bytes per triangle
"""

from .stl_exporter import TriangleSink, AsciiSTLSink, BinarySTLSink, TriangleCounter

__all__ = ["TriangleSink", "AsciiSTLSink", "BinarySTLSink", "TriangleCounter"]
