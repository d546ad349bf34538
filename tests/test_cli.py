"""Tests for the command-line entry point."""

from unittest.mock import patch

import pytest

from mdpdf.cli import build_parser, main


class TestConvertCommand:
    """Tests for `mdpdf convert`."""

    def test_converts_file(self, tmp_path, capsys):
        """Test a successful conversion prints the output path."""
        source = tmp_path / "in.md"
        source.write_text("# Hi\n", encoding="utf-8")
        output = tmp_path / "out" / "in.pdf"

        assert main(["convert", str(source), str(output)]) == 0
        assert output.exists()
        assert f"PDF written to {output}" in capsys.readouterr().out

    def test_missing_input_exits_nonzero(self, tmp_path, capsys):
        """Test a missing input is reported on stderr."""
        code = main(["convert", str(tmp_path / "nope.md"), str(tmp_path / "out.pdf")])
        assert code == 1
        assert "Error: Input file not found" in capsys.readouterr().err
        assert not (tmp_path / "out.pdf").exists()

    def test_requires_both_paths(self):
        """Test that argparse rejects a missing output argument."""
        with pytest.raises(SystemExit):
            main(["convert", "only.md"])


class TestPreviewCommand:
    """Tests for `mdpdf preview`."""

    def test_missing_input_exits_before_serving(self, tmp_path, capsys):
        """Test the server is not started without an input file."""
        with patch("uvicorn.run") as run:
            code = main(["preview", str(tmp_path / "nope.md")])
        assert code == 1
        run.assert_not_called()
        assert "not found" in capsys.readouterr().err

    def test_runs_uvicorn_with_settings(self, tmp_path):
        """Test host and port flags reach uvicorn."""
        source = tmp_path / "doc.md"
        source.write_text("text", encoding="utf-8")
        with patch("uvicorn.run") as run:
            code = main(
                ["preview", str(source), str(tmp_path / "doc.pdf"), "--host", "0.0.0.0", "--port", "9000"]
            )
        assert code == 0
        run.assert_called_once()
        assert run.call_args.kwargs == {"host": "0.0.0.0", "port": 9000}

    def test_defaults(self):
        """Test optional preview arguments default to None."""
        args = build_parser().parse_args(["preview"])
        assert args.input is None
        assert args.output is None
        assert args.port is None
