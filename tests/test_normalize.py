# -*- coding: utf-8 -*-
"""
Tests for line-level normalization.
"""
from text_prep.normalize import (
    collapse_blank_lines,
    format_list_blocks,
    normalize_line_endings,
    normalize_markdown,
)


class TestLineEndings:
    """Tests for normalize_line_endings."""

    def test_crlf_and_cr(self):
        """CRLF and lone CR should become LF."""
        assert normalize_line_endings("a\r\nb\rc") == "a\nb\nc"


class TestCollapseBlankLines:
    """Tests for collapse_blank_lines."""

    def test_keeps_at_most_two(self):
        """Runs of blank lines should be capped."""
        assert collapse_blank_lines("a\n\n\n\n\nb") == "a\n\n\nb"

    def test_whitespace_lines_count_as_blank(self):
        """Whitespace-only lines should be emptied."""
        assert collapse_blank_lines("a\n   \n\t\nb", 1) == "a\n\nb"


class TestFormatListBlocks:
    """Tests for format_list_blocks."""

    def test_blank_line_around_list(self):
        """Lists should be separated from surrounding paragraphs."""
        lines = ["Intro", "- one", "- two", "Outro"]

        assert format_list_blocks(lines) == ["Intro", "", "- one", "- two", "", "Outro"]

    def test_indented_continuation_stays_in_list(self):
        """Indented lines after an item should stay attached."""
        lines = ["- one", "  more about one", "- two"]

        assert format_list_blocks(lines) == ["- one", "  more about one", "- two"]


class TestNormalizeMarkdown:
    """Tests for normalize_markdown."""

    def test_list_markers_canonicalized(self):
        """Bullets and numbered markers should be canonical."""
        text = "* one\n+ two\n• three\n1) first"

        assert normalize_markdown(text) == "- one\n- two\n- three\n1. first"

    def test_interior_whitespace_collapsed(self):
        """Interior runs should collapse while indentation stays."""
        text = "word   word\t\tword\n    indented   line"

        assert normalize_markdown(text) == "word word word\n    indented line"

    def test_nbsp_replaced(self):
        """Non-breaking spaces should become plain spaces."""
        assert normalize_markdown("a\u00a0b") == "a b"

    def test_trailing_whitespace_trimmed(self):
        """Trailing spaces should be removed."""
        assert normalize_markdown("line   \nnext\t") == "line\nnext"

    def test_fenced_content_untouched(self):
        """Inside fences only trailing whitespace goes."""
        text = "```\nx  =   1   \n* not a list\n```"

        assert normalize_markdown(text) == "```\nx  =   1\n* not a list\n```"

    def test_shorter_fence_inside_longer_fence(self):
        """A ``` line inside a ```` fence neither closes it nor gets normalized."""
        text = "````\n```\nx  =   1\n* item\n```\n````\nafter   text"

        assert normalize_markdown(text) == "````\n```\nx  =   1\n* item\n```\n````\nafter text"

    def test_tilde_fence_content_untouched(self):
        """Tilde fences protect their content too."""
        text = "~~~\na   b\n~~~"

        assert normalize_markdown(text) == text

    def test_raw_pass_keeps_alignment(self):
        """The raw pass should keep tab and space alignment."""
        text = "Name\tType\r\nA    B    C  "

        result = normalize_markdown(
            text, collapse_spaces=False, format_lists=False, normalize_whitespace=False
        )

        assert result == "Name\tType\nA    B    C"

    def test_blank_runs_collapsed_and_trimmed(self):
        """Output should be trimmed with blank runs capped."""
        assert normalize_markdown("\n\n\na\n\n\n\n\nb\n\n") == "a\n\n\nb"

    def test_empty_input(self):
        """Empty input should stay empty."""
        assert normalize_markdown("") == ""
