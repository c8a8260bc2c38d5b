"""
Command-Line Interface for pngtostl

Usage:
    png2stl image.png > model.stl
    png2stl image.png --levels 10 --positive -o model.stl
    png2stl image.png --relief-height 2 --base-height .4 --binary -o model.stl

"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import (
    HeightFieldConfig,
    clamp_levels,
    DEFAULT_BASE_HEIGHT,
    DEFAULT_LEVELS,
    DEFAULT_RELIEF_HEIGHT,
    DEFAULT_SOLID_NAME,
)
from .errors import InvalidOption, PngToStlError
from .generator import ReliefGenerator


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises InvalidOption instead of exiting."""

    def error(self, message):
        raise InvalidOption(message)


def levels_arg(value: str) -> int:
    """Parse --levels, clamping anything below the minimum."""
    try:
        return clamp_levels(int(value))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid level count: {value!r}")


def create_parser() -> ArgumentParser:
    """Create the argument parser."""
    parser = ArgumentParser(
        prog="png2stl",
        description="Convert a PNG image into an STL relief, one column per pixel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        epilog="""
Examples:
  png2stl photo.png > photo.stl
      Lithophane-style relief, darker pixels are thicker

  png2stl logo.png --positive --levels 4 -o logo.stl
      Four height steps, brighter pixels are thicker

Only 8-bit RGB and RGBA PNG images are accepted (alpha is ignored).
        """
    )

    # Input
    parser.add_argument(
        "input",
        nargs="?",
        help="Input PNG image"
    )

    # Relief settings
    parser.add_argument(
        "--relief-height",
        type=float,
        default=DEFAULT_RELIEF_HEIGHT,
        metavar="MM",
        help=f"Relief height (default: {DEFAULT_RELIEF_HEIGHT} mm)"
    )

    parser.add_argument(
        "--base-height",
        type=float,
        default=DEFAULT_BASE_HEIGHT,
        metavar="MM",
        help=f"Fixed base height (default: {DEFAULT_BASE_HEIGHT} mm)"
    )

    parser.add_argument(
        "--levels",
        type=levels_arg,
        default=DEFAULT_LEVELS,
        metavar="N",
        help=f"Number of different levels (heights/greys), minimum 2 (default: {DEFAULT_LEVELS})"
    )

    parser.add_argument(
        "--negative",
        dest="negative",
        action="store_true",
        default=True,
        help="Use thicker plastic for black (default)"
    )

    parser.add_argument(
        "--positive",
        dest="negative",
        action="store_false",
        help="Use thicker plastic for white"
    )

    # Output settings
    parser.add_argument(
        "-o", "--output",
        help="Output STL path (default: standard output)"
    )

    parser.add_argument(
        "--binary",
        action="store_true",
        help="Write binary STL instead of ASCII"
    )

    parser.add_argument(
        "--name",
        default=DEFAULT_SOLID_NAME,
        help=f"Solid name in the STL header (default: {DEFAULT_SOLID_NAME})"
    )

    # Misc
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output on standard error"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print mesh statistics on standard error"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show this help message and exit"
    )

    return parser


def print_stats(generator: ReliefGenerator):
    """Print mesh statistics to standard error."""
    stats = generator.get_mesh_stats()
    width, height = stats["image_size"]
    print("\nMesh Statistics:", file=sys.stderr)
    print(f"  Image size: {width} x {height} pixels", file=sys.stderr)
    print(f"  Triangles: {stats['triangle_count']}", file=sys.stderr)
    print(f"  Max luminance: {stats['max_luminance']:.2f}", file=sys.stderr)
    print(f"  Levels used: {stats['levels_used']} of {stats['levels']}", file=sys.stderr)
    print(f"  Height range: {stats['min_height']:.4f} - {stats['max_height']:.4f} mm",
          file=sys.stderr)


def process_single(args, config: HeightFieldConfig) -> int:
    """Convert a single image file."""
    try:
        generator = ReliefGenerator(config, solid_name=args.name)

        if args.verbose:
            print(f"Loading: {args.input}", file=sys.stderr)
        generator.load_image(args.input)

        if args.stats or args.verbose:
            print_stats(generator)

        output = args.output
        if output is None:
            output = sys.stdout.buffer if args.binary else sys.stdout

        count = generator.export_stl(output, binary=args.binary)

        if args.verbose:
            target = args.output or "standard output"
            print(f"Exported {count} triangles to {target}", file=sys.stderr)

        return 0

    except PngToStlError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()

    if not argv:
        parser.print_help()
        return 0

    try:
        args = parser.parse_args(argv)
    except InvalidOption as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if args.help:
        parser.print_help()
        return 0

    if not args.input:
        print("No PNG filename given", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr
    )

    try:
        config = HeightFieldConfig(
            levels=args.levels,
            relief_height=args.relief_height,
            base_height=args.base_height,
            negative=args.negative
        )
    except InvalidOption as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return 1

    return process_single(args, config)


if __name__ == "__main__":
    sys.exit(main())
