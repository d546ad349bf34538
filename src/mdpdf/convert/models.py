"""Data models shared by the parser, layout engine and serializer."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .text import escape_pdf_text

FontStyle = Literal["regular", "bold", "mono"]

# Resource names used in every page's /Font dictionary
FONT_ALIASES: dict[str, str] = {"regular": "F1", "bold": "F2", "mono": "F3"}


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Blocks ---


class BlankBlock(_FrozenModel):
    """A blank source line; only affects vertical spacing."""

    type: Literal["blank"] = "blank"


class HeadingBlock(_FrozenModel):
    """An ATX heading. Inline markdown is kept until layout."""

    type: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    text: str


class ParagraphBlock(_FrozenModel):
    type: Literal["paragraph"] = "paragraph"
    text: str


class ListItem(_FrozenModel):
    ordered: bool
    index: int | None = None  # literal source number, ordered items only
    text: str


class ListBlock(_FrozenModel):
    """A run of list lines sharing one marker style."""

    type: Literal["list"] = "list"
    items: tuple[ListItem, ...]


class CodeBlock(_FrozenModel):
    """Lines between code fences, tabs already expanded."""

    type: Literal["code"] = "code"
    language: str = ""
    lines: tuple[str, ...] = ()


Block = Annotated[
    Union[BlankBlock, HeadingBlock, ParagraphBlock, ListBlock, CodeBlock],
    Field(discriminator="type"),
]


# --- Layout output ---


class PageGeometry(_FrozenModel):
    """Page size and margins in PDF points (1/72 inch)."""

    width: float = 612
    height: float = 792
    margin_top: float = 64
    margin_bottom: float = 64
    margin_left: float = 64
    margin_right: float = 64

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def top(self) -> float:
        """Baseline of the first line on a fresh page."""
        return self.height - self.margin_top


LETTER = PageGeometry()


class DrawCommand(_FrozenModel):
    """One line of text placed at an absolute page position."""

    font: FontStyle
    size: float
    x: float
    y: float
    text: str

    def to_operator(self) -> str:
        """Render as a content-stream text object."""
        return (
            f"BT /{FONT_ALIASES[self.font]} {self.size:.2f} Tf "
            f"1 0 0 1 {self.x:.2f} {self.y:.2f} Tm "
            f"({escape_pdf_text(self.text)}) Tj ET"
        )


class Page(BaseModel):
    """An ordered list of draw commands for one PDF page."""

    page_number: int
    commands: list[DrawCommand] = Field(default_factory=list)
