"""Text measurement, wrapping and inline markdown cleanup."""

import re

# Average glyph width as a fraction of the font size
PROPORTIONAL_WIDTH_FACTOR = 0.52
MONOSPACE_WIDTH_FACTOR = 0.6

# Applied in order: images before links, bold before italic
_INLINE_SUBSTITUTIONS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"[image: \1]"),
    (re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), r"\1 (\2)"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"_([^_]+)_"), r"\1"),
    (re.compile(r"~~([^~]+)~~"), r"\1"),
]

_WHITESPACE_RE = re.compile(r"\s+")

_ASCII_REPLACEMENTS = {
    "\u00a0": " ",
    "\u2007": " ",
    "\u2009": " ",
    "\u200b": "",
    "\u2010": "-",
    "\u2011": "-",
    "\u2012": "-",
    "\u2013": "-",
    "\u2014": "--",
    "\u2015": "--",
    "\u2212": "-",
    "\u2026": "...",
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u00b7": "*",
    "\u2022": "*",
    "\u2190": "<-",
    "\u2192": "->",
    "\u2194": "<->",
    "\u21d0": "<=",
    "\u21d2": "=>",
    "\u21d4": "<=>",
}


def strip_inline_markdown(text: str) -> str:
    """Reduce inline markdown to plain text.

    Images become ``[image: alt]``, links become ``text (url)``, and code,
    bold, italic and strikethrough markers are dropped.
    """
    for pattern, replacement in _INLINE_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


def normalize_ascii(text: str) -> str:
    """Map typographic punctuation to ASCII and replace anything else non-ASCII with '?'."""
    if text.isascii():
        return text
    out = []
    for ch in text:
        if ch.isascii():
            out.append(ch)
        else:
            out.append(_ASCII_REPLACEMENTS.get(ch, "?"))
    return "".join(out)


def escape_pdf_text(text: str) -> str:
    """Escape a string for use inside a PDF literal string ``( ... )``."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def estimate_text_width(text: str, font_size: float, monospace: bool) -> float:
    """Estimate rendered width in points from the character count alone."""
    factor = MONOSPACE_WIDTH_FACTOR if monospace else PROPORTIONAL_WIDTH_FACTOR
    return len(text) * font_size * factor


def wrap_text(
    text: str, max_width: float, font_size: float, monospace: bool
) -> list[str]:
    """Greedy word wrap using the estimated width.

    Whitespace runs collapse to single spaces. A word wider than
    ``max_width`` on its own is broken between characters. Always returns
    at least one line, which is empty for blank input.

    Args:
        text: The text to wrap.
        max_width: Available line width in points.
        font_size: Font size in points.
        monospace: Whether to use the monospace width factor.

    Returns:
        List of lines in reading order.
    """
    normalized = _WHITESPACE_RE.sub(" ", text).strip()
    if not normalized:
        return [""]

    def fits(candidate: str) -> bool:
        return estimate_text_width(candidate, font_size, monospace) <= max_width

    lines: list[str] = []
    current = ""

    for word in normalized.split(" "):
        candidate = f"{current} {word}" if current else word
        if fits(candidate):
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if fits(word):
            current = word
            continue

        # Hard-break a word that cannot fit on any line
        chunk = ""
        for char in word:
            if fits(chunk + char):
                chunk += char
            else:
                if chunk:
                    lines.append(chunk)
                chunk = char
        current = chunk

    if current:
        lines.append(current)
    return lines or [""]
