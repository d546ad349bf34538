"""Environment-driven configuration."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

LOG_LEVEL = os.getenv("MDPDF_LOG_LEVEL", "INFO")

# Live preview defaults, overridable from the command line
PREVIEW_INPUT = os.getenv("MDPDF_PREVIEW_INPUT", "sample.md")
PREVIEW_OUTPUT = os.getenv("MDPDF_PREVIEW_OUTPUT", "output/pdf/sample.pdf")
PREVIEW_HOST = os.getenv("MDPDF_PREVIEW_HOST", "127.0.0.1")
PREVIEW_PORT = int(os.getenv("MDPDF_PREVIEW_PORT", "4173"))

# Seconds to wait after the last change before rebuilding
DEBOUNCE_SECONDS = float(os.getenv("MDPDF_DEBOUNCE_SECONDS", "0.12"))
# Seconds between input mtime checks
POLL_INTERVAL = float(os.getenv("MDPDF_POLL_INTERVAL", "0.25"))


class PreviewSettings(BaseModel):
    """Settings for one live-preview server instance."""

    input_path: Path
    output_path: Path
    host: str = PREVIEW_HOST
    port: int = Field(default=PREVIEW_PORT, ge=0, le=65535)
    debounce_seconds: float = Field(default=DEBOUNCE_SECONDS, ge=0)
    poll_interval: float = Field(default=POLL_INTERVAL, gt=0)


def load_preview_settings(
    input_path: str | Path | None = None,
    output_path: str | Path | None = None,
    **overrides,
) -> PreviewSettings:
    """Build preview settings from the environment, applying explicit overrides.

    Relative paths are resolved against the current working directory.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return PreviewSettings(
        input_path=Path(input_path or PREVIEW_INPUT).resolve(),
        output_path=Path(output_path or PREVIEW_OUTPUT).resolve(),
        **overrides,
    )
