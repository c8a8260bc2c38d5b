"""
Height field configuration.

All options that shape the relief travel together in one immutable
HeightFieldConfig value, passed explicitly to the builder and the emitter.

Units: heights are millimetres, one pixel is a 1 x 1 mm footprint.
"""

import math
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict

from .errors import InvalidOption


MIN_LEVELS = 2
DEFAULT_LEVELS = 20
DEFAULT_RELIEF_HEIGHT = 1.0   # mm of variable relief
DEFAULT_BASE_HEIGHT = 0.2     # mm of constant base under every column
DEFAULT_SOLID_NAME = "PngToStl"


def clamp_levels(levels: int) -> int:
    """Clamp a requested level count to the supported minimum."""
    return max(MIN_LEVELS, int(levels))


def validate_solid_name(name: str) -> str:
    """
    Check that a solid name fits on the STL `solid` and `endsolid` lines.

    Names must be non-empty printable ASCII without whitespace.
    """
    if not isinstance(name, str) or not name:
        raise InvalidOption("solid name must be a non-empty string")
    if not all("!" <= ch <= "~" for ch in name):
        raise InvalidOption(
            f"solid name must be printable ASCII without whitespace, got {name!r}"
        )
    return name


@dataclass(frozen=True)
class HeightFieldConfig:
    """
    Options controlling luminance quantization.

    Attributes:
        levels: Number of discrete height steps (>= 2)
        relief_height: Variable relief on top of the base, in mm (> 0)
        base_height: Constant base under every column, in mm (>= 0)
        negative: If True, darker pixels get taller columns
    """
    levels: int = DEFAULT_LEVELS
    relief_height: float = DEFAULT_RELIEF_HEIGHT
    base_height: float = DEFAULT_BASE_HEIGHT
    negative: bool = True

    def __post_init__(self):
        if isinstance(self.levels, bool) or not isinstance(self.levels, int):
            raise InvalidOption(f"levels must be an integer, got {self.levels!r}")
        if self.levels < MIN_LEVELS:
            raise InvalidOption(f"levels must be >= {MIN_LEVELS}, got {self.levels}")
        if not math.isfinite(self.relief_height):
            raise InvalidOption(f"relief height must be finite, got {self.relief_height}")
        if not math.isfinite(self.base_height):
            raise InvalidOption(f"base height must be finite, got {self.base_height}")
        if not self.relief_height > 0:
            raise InvalidOption(
                f"relief height must be positive, got {self.relief_height}"
            )
        if not self.base_height >= 0:
            raise InvalidOption(
                f"base height must be non-negative, got {self.base_height}"
            )

    @property
    def min_height(self) -> float:
        """Lowest possible column height."""
        return self.base_height

    @property
    def max_height(self) -> float:
        """Upper bound of the column height (reached only in the limit)."""
        return self.base_height + self.relief_height

    def with_options(self, **changes) -> "HeightFieldConfig":
        """Return a copy with some options changed (validated again)."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
