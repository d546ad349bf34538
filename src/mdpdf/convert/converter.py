"""Markdown file to PDF file conversion."""

import os
import tempfile
import time
from pathlib import Path

from pydantic import BaseModel

from ..logger import logger
from .blocks import parse_blocks
from .layout import layout
from .models import LETTER, PageGeometry
from .serializer import serialize


class ConversionError(Exception):
    """Raised when a conversion cannot read its input or write its output."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputNotFoundError(ConversionError, FileNotFoundError):
    """Raised when the markdown input file does not exist."""


class ConversionResult(BaseModel):
    """Summary of a finished conversion."""

    input_path: str
    output_path: str
    block_count: int
    page_count: int
    byte_size: int
    elapsed_ms: float


def render_markdown(markdown: str, geometry: PageGeometry = LETTER) -> bytes:
    """Convert markdown text to PDF bytes in memory."""
    return serialize(layout(parse_blocks(markdown), geometry), geometry)


def _read_markdown(input_path: Path) -> str:
    if not input_path.is_file():
        raise InputNotFoundError(f"Input file not found: {input_path}")
    try:
        return input_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ConversionError(f"Failed to read {input_path}: {e}") from e


def _write_atomic(output_path: Path, data: bytes) -> None:
    """Write via a sibling temp file so a failed write leaves the old file intact."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
        )
    except OSError as e:
        raise ConversionError(f"Failed to write {output_path}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, output_path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise ConversionError(f"Failed to write {output_path}: {e}") from e


def convert_markdown_to_pdf(
    input_path: str | Path,
    output_path: str | Path,
    geometry: PageGeometry = LETTER,
) -> ConversionResult:
    """Convert a markdown file into a PDF file.

    Args:
        input_path: Path to a UTF-8 markdown file.
        output_path: Destination PDF path. Parent directories are created.
        geometry: Page size and margins.

    Returns:
        ConversionResult describing the written file.

    Raises:
        InputNotFoundError: If the input file does not exist. Nothing is written.
        ConversionError: If the input cannot be read or the output cannot be
            written. A previously written output file is left untouched.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    start = time.perf_counter()

    try:
        markdown = _read_markdown(input_path)
        blocks = parse_blocks(markdown)
        pages = layout(blocks, geometry)
        data = serialize(pages, geometry)
        _write_atomic(output_path, data)
    except ConversionError as e:
        logger.error(
            "conversion failed",
            input_path=str(input_path),
            output_path=str(output_path),
            error=e.message,
        )
        raise

    result = ConversionResult(
        input_path=str(input_path),
        output_path=str(output_path),
        block_count=len(blocks),
        page_count=len(pages),
        byte_size=len(data),
        elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    logger.info("conversion complete", **result.model_dump())
    return result
