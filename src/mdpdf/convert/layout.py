"""Page layout: turns blocks into per-page text draw commands."""

from .models import (
    LETTER,
    BlankBlock,
    Block,
    CodeBlock,
    DrawCommand,
    FontStyle,
    HeadingBlock,
    ListBlock,
    Page,
    PageGeometry,
    ParagraphBlock,
)
from .text import estimate_text_width, normalize_ascii, strip_inline_markdown, wrap_text

LINE_HEIGHT_FACTOR = 1.35

HEADING_SIZES = {1: 28, 2: 22, 3: 18, 4: 15, 5: 13, 6: 12}
BODY_SIZE = 12
CODE_SIZE = 10

BLANK_GAP = 6
MAJOR_HEADING_GAP = 10
MINOR_HEADING_GAP = 6
PARAGRAPH_GAP = 8
LIST_INDENT = 18
LIST_ITEM_GAP = 2
LIST_GAP = 6
CODE_LABEL_INDENT = 8
CODE_INDENT = 16
CODE_GAP = 8


class PageLayout:
    """Cursor-based layout over a growing list of pages.

    The cursor moves down the current page; when a line or gap would cross
    the bottom margin a new page is started and the line or gap is applied
    there instead. Finished pages are never modified.
    """

    def __init__(self, geometry: PageGeometry = LETTER):
        self.geometry = geometry
        self.pages: list[Page] = [Page(page_number=1)]
        self.y = geometry.top

    @property
    def current_page(self) -> Page:
        return self.pages[-1]

    def ensure_space(self, height: float) -> None:
        if self.y - height < self.geometry.margin_bottom:
            self.pages.append(Page(page_number=len(self.pages) + 1))
            self.y = self.geometry.top

    def add_spacing(self, gap: float) -> None:
        self.ensure_space(gap)
        self.y -= gap

    def draw_line(
        self,
        text: str,
        font: FontStyle = "regular",
        size: float = BODY_SIZE,
        indent: float = 0,
    ) -> None:
        line_height = size * LINE_HEIGHT_FACTOR
        self.ensure_space(line_height)
        self.current_page.commands.append(
            DrawCommand(
                font=font,
                size=size,
                x=self.geometry.margin_left + indent,
                y=self.y,
                text=text,
            )
        )
        self.y -= line_height

    def render_wrapped(
        self,
        text: str,
        font: FontStyle = "regular",
        size: float = BODY_SIZE,
        indent: float = 0,
    ) -> None:
        prepared = normalize_ascii(strip_inline_markdown(text))
        width = self.geometry.content_width - indent
        for line in wrap_text(prepared, width, size, font == "mono"):
            self.draw_line(line, font=font, size=size, indent=indent)

    # --- Blocks ---

    def add_block(self, block: Block) -> None:
        if isinstance(block, BlankBlock):
            self.add_spacing(BLANK_GAP)
        elif isinstance(block, HeadingBlock):
            self._add_heading(block)
        elif isinstance(block, ParagraphBlock):
            self.render_wrapped(block.text)
            self.add_spacing(PARAGRAPH_GAP)
        elif isinstance(block, ListBlock):
            self._add_list(block)
        elif isinstance(block, CodeBlock):
            self._add_code(block)
        else:
            raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def _add_heading(self, block: HeadingBlock) -> None:
        size = HEADING_SIZES.get(block.level, BODY_SIZE)
        self.render_wrapped(block.text, font="bold", size=size)
        self.add_spacing(MAJOR_HEADING_GAP if block.level <= 2 else MINOR_HEADING_GAP)

    def _add_list(self, block: ListBlock) -> None:
        for item in block.items:
            marker = f"{item.index}. " if item.ordered else "- "
            marker_width = estimate_text_width(marker, BODY_SIZE, False)
            prepared = normalize_ascii(strip_inline_markdown(item.text))
            lines = wrap_text(
                prepared,
                self.geometry.content_width - LIST_INDENT - marker_width,
                BODY_SIZE,
                False,
            )
            self.draw_line(marker + lines[0], indent=LIST_INDENT)
            for line in lines[1:]:
                self.draw_line(line, indent=LIST_INDENT + marker_width)
            self.add_spacing(LIST_ITEM_GAP)
        self.add_spacing(LIST_GAP)

    def _add_code(self, block: CodeBlock) -> None:
        if block.language:
            self.draw_line(
                f"Code ({block.language}):",
                font="bold",
                size=CODE_SIZE,
                indent=CODE_LABEL_INDENT,
            )
        width = self.geometry.content_width - CODE_INDENT
        for code_line in block.lines:
            prepared = normalize_ascii(code_line or " ")
            for segment in wrap_text(prepared, width, CODE_SIZE, True):
                self.draw_line(segment, font="mono", size=CODE_SIZE, indent=CODE_INDENT)
        self.add_spacing(CODE_GAP)

    def finish(self) -> list[Page]:
        """Return the finished pages, never empty.

        Trailing pages opened only by spacing are dropped. A document with
        no text at all gets one page holding a single space.
        """
        pages = list(self.pages)
        while len(pages) > 1 and not pages[-1].commands:
            pages.pop()
        if not any(page.commands for page in pages):
            return [
                Page(
                    page_number=1,
                    commands=[
                        DrawCommand(
                            font="regular",
                            size=BODY_SIZE,
                            x=self.geometry.margin_left,
                            y=self.geometry.top,
                            text=" ",
                        )
                    ],
                )
            ]
        return pages


def layout(blocks: list[Block], geometry: PageGeometry = LETTER) -> list[Page]:
    """Lay out blocks onto pages.

    Args:
        blocks: Parsed blocks in document order.
        geometry: Page size and margins.

    Returns:
        Pages of draw commands, at least one.
    """
    engine = PageLayout(geometry)
    for block in blocks:
        engine.add_block(block)
    return engine.finish()
