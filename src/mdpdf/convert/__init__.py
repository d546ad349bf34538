from .models import (
    BlankBlock,
    Block,
    CodeBlock,
    DrawCommand,
    HeadingBlock,
    LETTER,
    ListBlock,
    ListItem,
    Page,
    PageGeometry,
    ParagraphBlock,
)
from .text import (
    escape_pdf_text,
    estimate_text_width,
    normalize_ascii,
    strip_inline_markdown,
    wrap_text,
)
from .blocks import parse_blocks
from .layout import PageLayout, layout
from .serializer import serialize
from .converter import (
    ConversionError,
    ConversionResult,
    InputNotFoundError,
    convert_markdown_to_pdf,
    render_markdown,
)

__all__ = [
    # Models
    "BlankBlock",
    "Block",
    "CodeBlock",
    "DrawCommand",
    "HeadingBlock",
    "LETTER",
    "ListBlock",
    "ListItem",
    "Page",
    "PageGeometry",
    "ParagraphBlock",
    # Text
    "escape_pdf_text",
    "estimate_text_width",
    "normalize_ascii",
    "strip_inline_markdown",
    "wrap_text",
    # Pipeline
    "parse_blocks",
    "PageLayout",
    "layout",
    "serialize",
    # Converter
    "ConversionError",
    "ConversionResult",
    "InputNotFoundError",
    "convert_markdown_to_pdf",
    "render_markdown",
]
