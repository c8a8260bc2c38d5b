"""
Tests for the png2stl command-line interface.
"""

import io
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import numpy as np
from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pngtostl.cli import create_parser, main


def run_cli(argv):
    """Run main() capturing standard output and error."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCLI(unittest.TestCase):
    """Tests for argument handling and exit codes."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

        rgb = np.zeros((2, 3, 3), dtype=np.uint8)
        rgb[0] = [255, 255, 255]
        self.image = self.tmp / "image.png"
        Image.fromarray(rgb).save(self.image)

        self.corrupt = self.tmp / "corrupt.png"
        self.corrupt.write_bytes(b"\x89PNG\r\n\x1a\n garbage")

    def tearDown(self):
        self._tmp.cleanup()

    def test_no_arguments(self):
        """Test that no arguments prints usage and succeeds."""
        code, out, _ = run_cli([])
        assert code == 0
        assert "png2stl" in out

    def test_help(self):
        """Test --help with and without a filename."""
        code, out, _ = run_cli(["--help"])
        assert code == 0
        assert "--relief-height" in out

        code, _, _ = run_cli([str(self.image), "--help"])
        assert code == 0

    def test_defaults(self):
        """Test default option values."""
        args = create_parser().parse_args(["x.png"])
        assert args.relief_height == 1.0
        assert args.base_height == 0.2
        assert args.levels == 20
        assert args.negative is True

    def test_levels_clamped(self):
        """Test that --levels below 2 is clamped."""
        parser = create_parser()
        assert parser.parse_args(["x.png", "--levels", "1"]).levels == 2
        assert parser.parse_args(["x.png", "--levels", "0"]).levels == 2
        assert parser.parse_args(["x.png", "--levels", "5"]).levels == 5

    def test_polarity_last_wins(self):
        """Test --negative / --positive ordering."""
        parser = create_parser()
        assert parser.parse_args(["x.png", "--positive"]).negative is False
        assert parser.parse_args(["x.png", "--positive", "--negative"]).negative is True

    def test_invalid_options(self):
        """Test that bad arguments exit with status 1."""
        assert run_cli([str(self.image), "--bogus"])[0] == 1
        assert run_cli([str(self.image), "--relief-height"])[0] == 1
        assert run_cli([str(self.image), "--levels", "many"])[0] == 1
        assert run_cli([str(self.image), str(self.image)])[0] == 1
        assert run_cli([str(self.image), "--relief-height", "0"])[0] == 1
        assert run_cli([str(self.image), "--relief-height", "inf"])[0] == 1

        # Abbreviated flags are not accepted
        code, out, _ = run_cli([str(self.image), "--pos"])
        assert code == 1
        assert out == ""
        assert run_cli([str(self.image), "--rel", "2"])[0] == 1
        assert run_cli([str(self.image), "--neg"])[0] == 1

    def test_missing_filename(self):
        """Test arguments without a filename."""
        code, out, err = run_cli(["--positive"])
        assert code == 1
        assert out == ""
        assert "No PNG filename given" in err

    def test_stdout_output(self):
        """Test ASCII STL on standard output."""
        code, out, _ = run_cli([str(self.image), "--levels", "2"])
        assert code == 0
        assert out.startswith("solid PngToStl\n")
        assert out.endswith("endsolid PngToStl\n")
        assert out.count("endfacet") == 2 * 3 * 12

    def test_file_output(self):
        """Test -o with a custom solid name."""
        output = self.tmp / "out.stl"
        code, out, _ = run_cli([str(self.image), "--name", "Relief", "-o", str(output)])
        assert code == 0
        assert out == ""
        assert output.read_text().startswith("solid Relief\n")

    def test_invalid_solid_name(self):
        """Test that a bad --name fails before any output is opened."""
        for name in ["Reli\u00e9f", "two words", "line\nbreak", ""]:
            output = self.tmp / "named.stl"
            code, out, err = run_cli([str(self.image), "--name", name, "-o", str(output)])
            assert code == 1
            assert out == ""
            assert "Error" in err
            assert not output.exists()

        code, out, _ = run_cli([str(self.image), "--name", "Reli\u00e9f"])
        assert code == 1
        assert out == ""

    def test_binary_output(self):
        """Test --binary to a file."""
        output = self.tmp / "out.stl"
        code, _, _ = run_cli([str(self.image), "--binary", "-o", str(output)])
        assert code == 0
        assert output.stat().st_size == 84 + 50 * 2 * 3 * 12

    def test_stats(self):
        """Test that statistics go to standard error only."""
        code, out, err = run_cli([str(self.image), "--stats"])
        assert code == 0
        assert "Mesh Statistics" in err
        assert "Mesh Statistics" not in out

    def test_missing_file(self):
        """Test an unreadable input path."""
        code, out, err = run_cli([str(self.tmp / "missing.png")])
        assert code == 1
        assert out == ""
        assert "Error" in err

    def test_corrupt_file_writes_nothing(self):
        """Test that a decode error produces no output at all."""
        code, out, _ = run_cli([str(self.corrupt)])
        assert code == 1
        assert out == ""

        output = self.tmp / "never.stl"
        code, _, _ = run_cli([str(self.corrupt), "-o", str(output)])
        assert code == 1
        assert not output.exists()


if __name__ == "__main__":
    unittest.main(verbosity=2)
