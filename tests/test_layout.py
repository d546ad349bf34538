"""Tests for the page layout engine."""

import pytest

from mdpdf.convert import (
    LETTER,
    BlankBlock,
    CodeBlock,
    HeadingBlock,
    ListBlock,
    ListItem,
    PageGeometry,
    PageLayout,
    ParagraphBlock,
    layout,
    parse_blocks,
    wrap_text,
)

TOP = LETTER.height - LETTER.margin_top


def _commands(pages):
    return [cmd for page in pages for cmd in page.commands]


class TestPageGeometry:
    """Tests for PageGeometry."""

    def test_letter_defaults(self):
        """Test US Letter size with 64pt margins."""
        assert LETTER.width == 612
        assert LETTER.height == 792
        assert LETTER.content_width == 484
        assert LETTER.top == 728


class TestLayoutBlocks:
    """Tests for per-block rendering rules."""

    def test_title_and_paragraph(self):
        """Test a heading followed by a paragraph fits on one page."""
        pages = layout(parse_blocks("# Title\n\nHello world.\n"))
        assert len(pages) == 1
        title, para = pages[0].commands
        assert (title.font, title.size, title.text) == ("bold", 28, "Title")
        assert (title.x, title.y) == (64, 728)
        assert (para.font, para.size, para.text) == ("regular", 12, "Hello world.")
        # 28pt line, 10pt heading gap, 6pt blank gap
        assert para.y == pytest.approx(728 - 28 * 1.35 - 10 - 6)

    def test_minor_heading_gap(self):
        """Test headings below level 2 use the smaller gap."""
        pages = layout([HeadingBlock(level=3, text="Sub"), ParagraphBlock(text="x")])
        heading, para = pages[0].commands
        assert heading.size == 18
        assert para.y == pytest.approx(728 - 18 * 1.35 - 6)

    def test_heading_sizes(self):
        """Test every heading level's font size."""
        blocks = [HeadingBlock(level=n, text=f"H{n}") for n in range(1, 7)]
        sizes = [cmd.size for cmd in _commands(layout(blocks))]
        assert sizes == [28, 22, 18, 15, 13, 12]

    def test_paragraph_strips_inline_markdown(self):
        """Test inline markdown is removed before drawing."""
        pages = layout([ParagraphBlock(text="**bold** and [link](http://x)")])
        assert pages[0].commands[0].text == "bold and link (http://x)"

    def test_bullet_list(self):
        """Test bullet items are drawn with a dash marker."""
        pages = layout(parse_blocks("- a\n- b"))
        first, second = pages[0].commands
        assert first.text == "- a"
        assert second.text == "- b"
        assert first.x == 64 + 18
        assert second.y == pytest.approx(728 - 12 * 1.35 - 2)

    def test_ordered_list_uses_literal_index(self):
        """Test ordered markers keep the source number."""
        pages = layout(parse_blocks("12. twelve"))
        assert pages[0].commands[0].text == "12. twelve"

    def test_list_continuation_indent(self):
        """Test wrapped list lines indent past the marker."""
        item = ListItem(ordered=False, text="word " * 40)
        pages = layout([ListBlock(items=[item])])
        commands = pages[0].commands
        assert len(commands) > 1
        assert commands[0].text.startswith("- word")
        assert commands[0].x == 82
        marker_width = len("- ") * 12 * 0.52
        for cmd in commands[1:]:
            assert cmd.x == pytest.approx(82 + marker_width)

    def test_code_block_with_language(self):
        """Test a labelled code block."""
        pages = layout(parse_blocks("```js\nconst x = 1;\n```"))
        label, code = pages[0].commands
        assert (label.font, label.size, label.text) == ("bold", 10, "Code (js):")
        assert label.x == 64 + 8
        assert (code.font, code.size, code.text) == ("mono", 10, "const x = 1;")
        assert code.x == 64 + 16
        assert code.y == pytest.approx(728 - 10 * 1.35)

    def test_code_block_without_language(self):
        """Test code without a language has no label."""
        pages = layout([CodeBlock(lines=["pass"])])
        assert [cmd.text for cmd in pages[0].commands] == ["pass"]

    def test_empty_code_line_draws_blank_line(self):
        """Test an empty code line still takes one line."""
        pages = layout([CodeBlock(lines=["a", "", "b"])])
        commands = pages[0].commands
        assert [cmd.text for cmd in commands] == ["a", "", "b"]
        assert commands[2].y == pytest.approx(728 - 2 * 10 * 1.35)

    def test_long_code_line_wraps_with_mono_metric(self):
        """Test code lines wrap at the code width."""
        line = "x" * 200
        pages = layout([CodeBlock(lines=[line])])
        texts = [cmd.text for cmd in pages[0].commands]
        assert texts == wrap_text(line, 484 - 16, 10, True)
        assert len(texts) > 1

    def test_non_ascii_text_is_normalized(self):
        """Test that drawn text is ASCII."""
        pages = layout([ParagraphBlock(text="na\u00efve \u2014 caf\u00e9")])
        assert pages[0].commands[0].text == "na?ve -- caf?"


class TestEmptyDocument:
    """Tests for documents without drawable text."""

    def test_no_blocks(self):
        """Test an empty block list yields one placeholder page."""
        pages = layout([])
        assert len(pages) == 1
        (command,) = pages[0].commands
        assert command.text == " "
        assert (command.x, command.y) == (64, 728)

    def test_only_blank_blocks(self):
        """Test blank lines alone still yield the placeholder page."""
        pages = layout(parse_blocks("\n\n\n\n"))
        assert len(pages) == 1
        assert [cmd.text for cmd in pages[0].commands] == [" "]


class TestPagination:
    """Tests for page breaking."""

    def test_long_paragraph_spans_pages(self):
        """Test a paragraph taller than a page breaks between lines."""
        text = "word " * 1000
        pages = layout([ParagraphBlock(text=text)])
        assert len(pages) > 1
        assert [page.page_number for page in pages] == list(range(1, len(pages) + 1))
        drawn = [cmd.text for cmd in _commands(pages)]
        assert drawn == wrap_text(text, 484, 12, False)

    def test_lines_stay_above_bottom_margin(self):
        """Test no line extends below the bottom margin."""
        pages = layout([ParagraphBlock(text="word " * 1000)] * 3)
        for cmd in _commands(pages):
            assert cmd.y - cmd.size * 1.35 >= LETTER.margin_bottom - 1e-9
            assert cmd.y <= TOP

    def test_new_page_starts_at_top(self):
        """Test the first line of each page sits at the top margin."""
        pages = layout([ParagraphBlock(text="word " * 1000)])
        for page in pages:
            assert page.commands[0].y == pytest.approx(TOP)

    def test_gap_applied_on_new_page(self):
        """Test a gap that would cross the margin moves to the next page."""
        engine = PageLayout()
        engine.draw_line("first")
        engine.y = LETTER.margin_bottom + 2
        engine.add_spacing(6)
        assert len(engine.pages) == 2
        assert engine.y == pytest.approx(TOP - 6)

    def test_trailing_empty_page_dropped(self):
        """Test a page opened only by trailing spacing is not returned."""
        engine = PageLayout()
        engine.draw_line("only line")
        engine.y = LETTER.margin_bottom + 1
        engine.add_spacing(8)
        assert len(engine.pages) == 2
        assert len(engine.finish()) == 1

    def test_custom_geometry(self):
        """Test a smaller page paginates sooner."""
        small = PageGeometry(width=300, height=200, margin_top=20, margin_bottom=20,
                             margin_left=20, margin_right=20)
        pages = layout([ParagraphBlock(text="word " * 200)], small)
        assert len(pages) > 1
        assert pages[0].commands[0].x == 20
        assert pages[0].commands[0].y == 180

    def test_unknown_block_type_raises(self):
        """Test unsupported objects are rejected."""
        with pytest.raises(TypeError):
            layout(["not a block"])
