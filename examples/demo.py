#!/usr/bin/env python3
"""
pngtostl Demo Script

This script demonstrates the full conversion pipeline by:
1. Creating synthetic test images (no external images needed)
2. Converting each one with both polarities
3. Exporting ASCII and binary STL
4. Printing statistics and timings

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import numpy as np
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pngtostl import ReliefGenerator, HeightFieldConfig


def create_test_image_gradient(size: int = 32) -> np.ndarray:
    """
    Create a horizontal black to white gradient.

    Returns:
        RGB array
    """
    ramp = np.linspace(0, 255, size).astype(np.uint8)
    gray = np.tile(ramp[np.newaxis, :], (size, 1))
    return np.stack([gray, gray, gray], axis=-1)


def create_test_image_circle(size: int = 32) -> np.ndarray:
    """
    Create a bright disc with a radial falloff on a dark background.

    Returns:
        RGBA array (alpha is ignored by the converter)
    """
    rgba = np.zeros((size, size, 4), dtype=np.uint8)
    rgba[:, :, 3] = 255

    center = size // 2
    radius = size // 2 - 2

    for y in range(size):
        for x in range(size):
            dist = np.sqrt((x - center) ** 2 + (y - center) ** 2)
            if dist < radius:
                value = int((1 - dist / radius) * 255)
                rgba[y, x, :3] = [value, value, value]

    return rgba


def create_test_image_checker(size: int = 32, cell: int = 4) -> np.ndarray:
    """
    Create a colored checkerboard.

    Returns:
        RGB array
    """
    rgb = np.zeros((size, size, 3), dtype=np.uint8)
    for y in range(size):
        for x in range(size):
            if (x // cell + y // cell) % 2 == 0:
                rgb[y, x] = [220, 60, 40]
            else:
                rgb[y, x] = [30, 90, 200]
    return rgb


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("pngtostl - Demo")
    print("=" * 60)
    print()

    # Create output directory
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    test_images = [
        ("gradient", create_test_image_gradient(32)),
        ("circle", create_test_image_circle(48)),
        ("checker", create_test_image_checker(32)),
    ]

    total_start = time.time()

    for name, image in test_images:
        print(f"\n--- Processing: {name} ---")
        print(f"Input size: {image.shape[1]}x{image.shape[0]} pixels")

        for negative in (True, False):
            polarity = "negative" if negative else "positive"
            config = HeightFieldConfig(levels=10, negative=negative)

            generator = ReliefGenerator(config, solid_name=name)
            generator.load_array(image)

            stats = generator.get_mesh_stats()
            print(f"  {polarity}:")
            print(f"    Levels used: {stats['levels_used']} of {stats['levels']}")
            print(f"    Height range: {stats['min_height']:.2f} - {stats['max_height']:.2f} mm")

            base_path = output_dir / f"{name}_{polarity}"

            start = time.time()
            count = generator.export_stl(base_path.with_suffix(".stl"))
            ascii_time = time.time() - start

            start = time.time()
            generator.export_stl(output_dir / f"{name}_{polarity}_binary.stl", binary=True)
            binary_time = time.time() - start

            print(f"    Triangles: {count}")
            print(f"    ASCII export: {ascii_time*1000:.1f}ms")
            print(f"    Binary export: {binary_time*1000:.1f}ms")

    total_time = time.time() - total_start

    print("\n" + "=" * 60)
    print(f"Demo complete! Total time: {total_time:.2f}s")
    print(f"Output files in: {output_dir}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    run_demo()
