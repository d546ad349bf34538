"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mdpdf import config
from mdpdf.config import PreviewSettings, load_preview_settings


class TestLoadPreviewSettings:
    """Tests for load_preview_settings function."""

    def test_defaults(self):
        """Test environment defaults are used when nothing is passed."""
        settings = load_preview_settings()
        assert settings.input_path == Path(config.PREVIEW_INPUT).resolve()
        assert settings.output_path == Path(config.PREVIEW_OUTPUT).resolve()
        assert settings.port == config.PREVIEW_PORT
        assert settings.debounce_seconds == config.DEBOUNCE_SECONDS

    def test_paths_are_resolved(self, tmp_path, monkeypatch):
        """Test relative paths resolve against the working directory."""
        monkeypatch.chdir(tmp_path)
        settings = load_preview_settings("doc.md", "out/doc.pdf")
        assert settings.input_path == tmp_path.resolve() / "doc.md"
        assert settings.output_path == tmp_path.resolve() / "out" / "doc.pdf"

    def test_none_overrides_ignored(self):
        """Test that None overrides fall back to defaults."""
        settings = load_preview_settings(host=None, port=None)
        assert settings.host == config.PREVIEW_HOST

    def test_explicit_overrides(self):
        """Test explicit overrides win."""
        settings = load_preview_settings(port=8080, host="0.0.0.0")
        assert settings.port == 8080
        assert settings.host == "0.0.0.0"

    def test_invalid_port(self):
        """Test out-of-range ports are rejected."""
        with pytest.raises(ValidationError):
            PreviewSettings(input_path="a.md", output_path="a.pdf", port=70000)
