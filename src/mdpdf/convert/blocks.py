"""Markdown block parser.

Classifies source lines into headings, paragraphs, flat lists, fenced code
and blank lines. Every input string parses; there is no error path.
"""

import re

from .models import (
    BlankBlock,
    Block,
    CodeBlock,
    HeadingBlock,
    ListBlock,
    ListItem,
    ParagraphBlock,
)

TAB_WIDTH = 4

_FENCE_OPEN_RE = re.compile(r"^```([\w-]+)?\s*$", re.ASCII)
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_HEADING_START_RE = re.compile(r"^#{1,6}\s+")
_BULLET_RE = re.compile(r"^\s*[-*+]\s+(.*)$")
_ORDERED_RE = re.compile(r"^\s*(\d+)\.\s+(.*)$")


def _split_lines(markdown: str) -> tuple[str, ...]:
    lines = markdown.replace("\r\n", "\n").split("\n")
    # A trailing newline ends the last line instead of starting a new one
    if lines[-1] == "":
        lines.pop()
    return tuple(lines)


def _starts_block(line: str) -> bool:
    """Whether a line ends a running paragraph."""
    stripped = line.strip()
    return (
        stripped == ""
        or stripped.startswith("```")
        or _HEADING_START_RE.match(line) is not None
        or _BULLET_RE.match(line) is not None
        or _ORDERED_RE.match(line) is not None
    )


class _BlockParser:
    """Index cursor over an immutable line sequence."""

    def __init__(self, lines: tuple[str, ...]):
        self.lines = lines
        self.pos = 0
        self.blocks: list[Block] = []

    def parse(self) -> list[Block]:
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            stripped = line.strip()

            if stripped == "":
                self.blocks.append(BlankBlock())
                self.pos += 1
                continue

            fence = _FENCE_OPEN_RE.match(stripped)
            if fence:
                self.pos += 1
                self._consume_code(fence.group(1) or "")
                continue

            heading = _HEADING_RE.match(line)
            if heading:
                self.blocks.append(
                    HeadingBlock(
                        level=len(heading.group(1)), text=heading.group(2).strip()
                    )
                )
                self.pos += 1
                continue

            if _BULLET_RE.match(line):
                self._consume_list(ordered=False)
                continue

            if _ORDERED_RE.match(line):
                self._consume_list(ordered=True)
                continue

            self._consume_paragraph()

        return self.blocks

    def _consume_code(self, language: str) -> None:
        body: list[str] = []
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            self.pos += 1
            if line.strip().startswith("```"):
                break
            body.append(line.replace("\t", " " * TAB_WIDTH))
        # An unterminated fence still yields its collected body
        self.blocks.append(CodeBlock(language=language, lines=tuple(body)))

    def _consume_list(self, ordered: bool) -> None:
        pattern = _ORDERED_RE if ordered else _BULLET_RE
        items: list[ListItem] = []
        while self.pos < len(self.lines):
            match = pattern.match(self.lines[self.pos])
            if not match:
                break
            if ordered:
                items.append(
                    ListItem(
                        ordered=True,
                        index=int(match.group(1)),
                        text=match.group(2).strip(),
                    )
                )
            else:
                items.append(ListItem(ordered=False, text=match.group(1).strip()))
            self.pos += 1
        self.blocks.append(ListBlock(items=tuple(items)))

    def _consume_paragraph(self) -> None:
        parts = [self.lines[self.pos].strip()]
        self.pos += 1
        while self.pos < len(self.lines) and not _starts_block(self.lines[self.pos]):
            parts.append(self.lines[self.pos].strip())
            self.pos += 1
        self.blocks.append(ParagraphBlock(text=" ".join(parts)))


def parse_blocks(markdown: str) -> list[Block]:
    """Parse markdown text into an ordered list of blocks.

    Args:
        markdown: Source text. ``\\r\\n`` line endings are accepted.

    Returns:
        Blocks in document order.
    """
    if not markdown:
        return []
    return _BlockParser(_split_lines(markdown)).parse()
