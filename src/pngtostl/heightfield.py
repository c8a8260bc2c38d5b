"""
Height Field Builder

Derives one column height per pixel from its color:

1. Luminance pass: L = (R + G + B) / 3 for every pixel, tracking the
   global maximum Lmax.
2. Quantization pass: level = round((levels - 1) * L / Lmax), optionally
   inverted (negative polarity: darker = taller), then
   height = base_height + relief_height * level / levels.

Rounding is half up (floor(x + 0.5)); values are never negative so this is
the same as rounding half away from zero. When Lmax is 0 (an all-black
image) every pixel is level 0 and polarity is not applied, giving a flat
slab of base_height.

The quantization kernel is JIT compiled with Numba. The scalar kernel is
shared by the per-pixel API and the per-row kernel, so both paths produce
identical levels.
"""

import logging
import math
from typing import Iterator, Tuple

import numpy as np
from numba import njit

from .config import HeightFieldConfig
from .ingestion import PixelGrid

logger = logging.getLogger(__name__)


@njit(cache=True)
def _quantize_level(lum: float, lmax: float, levels: int, negative: bool) -> int:
    """Quantize one luminance value into a level in [0, levels - 1]."""
    if lmax <= 0.0:
        return 0
    level = math.floor((levels - 1) * lum / lmax + 0.5)
    if negative:
        level = levels - 1 - level
    return level


@njit(cache=True)
def _quantize_row(
    lum_row: np.ndarray,
    lmax: float,
    levels: int,
    negative: bool
) -> np.ndarray:
    """Quantize a row of luminance values."""
    n = lum_row.shape[0]
    out = np.empty(n, dtype=np.int64)
    for i in range(n):
        out[i] = _quantize_level(lum_row[i], lmax, levels, negative)
    return out


def luminance(rgb: np.ndarray) -> np.ndarray:
    """
    Unweighted mean of the R, G, B channels.

    Args:
        rgb: Array of shape (..., 3) with channel values

    Returns:
        float64 array of shape (...), not rounded
    """
    return rgb.astype(np.float64).sum(axis=-1) / 3.0


def max_luminance(grid: PixelGrid) -> float:
    """Global maximum luminance over all pixels."""
    return float(luminance(grid.rgb).max())


def quantize_level(lum: float, lmax: float, config: HeightFieldConfig) -> int:
    """
    Quantize a single luminance value.

    Args:
        lum: Pixel luminance (0-255)
        lmax: Global maximum luminance of the image
        config: Height field options

    Returns:
        Level in [0, config.levels - 1]
    """
    return int(_quantize_level(float(lum), float(lmax), config.levels, config.negative))


def level_to_height(level, config: HeightFieldConfig):
    """Convert a level (scalar or array) into a column height in mm."""
    return config.base_height + config.relief_height * level / config.levels


def quantized_height(lum: float, lmax: float, config: HeightFieldConfig) -> float:
    """Column height in mm for a single luminance value."""
    return float(level_to_height(quantize_level(lum, lmax, config), config))


class HeightFieldBuilder:
    """
    Computes quantized column heights for a PixelGrid.

    The builder holds only its (immutable) configuration; every method is a
    pure function of the grid passed in.
    """

    def __init__(self, config: HeightFieldConfig = None):
        self.config = config or HeightFieldConfig()

    def max_luminance(self, grid: PixelGrid) -> float:
        return max_luminance(grid)

    def _row_levels(self, lum_row: np.ndarray, lmax: float) -> np.ndarray:
        return _quantize_row(
            np.ascontiguousarray(lum_row, dtype=np.float64),
            lmax, self.config.levels, self.config.negative
        )

    def iter_rows(self, grid: PixelGrid) -> Iterator[Tuple[int, np.ndarray]]:
        """
        Yield (y, heights) for each row, top to bottom.

        Lmax is computed over the whole grid before the first row is yielded.
        """
        lmax = self.max_luminance(grid)
        logger.debug("Max luminance %.4f over %dx%d pixels", lmax, grid.width, grid.height)
        if lmax == 0.0:
            logger.debug("All-black image, every column gets the base height")

        for y in range(grid.height):
            lum_row = luminance(grid.rgb[y])
            yield y, level_to_height(self._row_levels(lum_row, lmax), self.config)

    def iter_heights(self, grid: PixelGrid) -> Iterator[Tuple[int, int, float]]:
        """Yield (x, y, height) triples in row-major order."""
        for y, heights in self.iter_rows(grid):
            for x in range(heights.shape[0]):
                yield x, y, float(heights[x])

    def level_map(self, grid: PixelGrid) -> np.ndarray:
        """
        Quantized levels for the whole grid.

        Returns:
            int64 array of shape (H, W)
        """
        lmax = self.max_luminance(grid)
        lum = luminance(grid.rgb)
        levels = np.empty(lum.shape, dtype=np.int64)
        for y in range(lum.shape[0]):
            levels[y] = self._row_levels(lum[y], lmax)
        return levels

    def height_map(self, grid: PixelGrid) -> np.ndarray:
        """Column heights in mm for the whole grid, shape (H, W)."""
        return level_to_height(self.level_map(grid), self.config)
