# -*- coding: utf-8 -*-
"""
Tests for the heuristic recovery passes.
"""
import re

from text_prep.heuristics import run_heuristics
from text_prep.heuristics.artifacts import is_attachment_artifact_line, remove_attachment_artifacts
from text_prep.heuristics.fences import (
    detect_fence_language,
    unwrap_accidental_fences,
    wrap_request_response_blocks,
)
from text_prep.heuristics.headings import next_heading_level, promote_pseudo_headings
from text_prep.heuristics.lines import (
    has_strong_header_uniqueness,
    is_code_like_line,
    is_header_like_line,
    split_pseudo_row,
)
from text_prep.heuristics.process_blocks import restructure_process_blocks


class TestLinePredicates:
    """Tests for shared line predicates."""

    def test_split_on_tabs(self):
        """Tabs should take precedence over space runs."""
        assert split_pseudo_row("a  b\tc") == ["a  b", "c"]

    def test_split_on_space_runs(self):
        """Two or more spaces should split cells."""
        assert split_pseudo_row("Name   Role  Team") == ["Name", "Role", "Team"]

    def test_no_alignment(self):
        """Single spaces do not make a row."""
        assert split_pseudo_row("just a sentence") is None

    def test_header_like_limits(self):
        """Header-like lines have at most 6 words and no terminal punctuation."""
        assert is_header_like_line("Delivery date") is True
        assert is_header_like_line("one two three four five six") is True
        assert is_header_like_line("one two three four five six seven") is False
        assert is_header_like_line("Delivery date.") is False
        assert is_header_like_line("x" * 81) is False

    def test_header_like_digit_limit(self):
        """More than four digits disqualify a header."""
        assert is_header_like_line("Code 1234") is True
        assert is_header_like_line("Code 12345") is False

    def test_header_uniqueness_ratio(self):
        """Uniqueness needs at least 80% distinct headers."""
        assert has_strong_header_uniqueness(["a", "b", "c", "d", "a"]) is True
        assert has_strong_header_uniqueness(["a", "b", "a"]) is False

    def test_code_like_lines(self):
        """Braces, arrows and semicolons read as code."""
        assert is_code_like_line("if (x) { run(); }") is True
        assert is_code_like_line("const f = (a) => a") is True
        assert is_code_like_line("Plain words only") is False


class TestAttachmentArtifacts:
    """Tests for attachment artifact removal."""

    def test_artifact_lines(self):
        """File names, size captions and glyph lines are artifacts."""
        assert is_attachment_artifact_line("photo.png (2)") is True
        assert is_attachment_artifact_line("Screenshot 2024.JPG") is True
        assert is_attachment_artifact_line("313.2 KB") is True
        assert is_attachment_artifact_line("12,5 МБ") is True
        assert is_attachment_artifact_line("\ufffc") is True

    def test_prose_is_not_artifact(self):
        """Sentences mentioning files or sizes are kept."""
        assert is_attachment_artifact_line("Please see the attached screenshot named result.png") is False
        assert is_attachment_artifact_line("The file weighs 313.2 KB") is False

    def test_removes_lines_and_counts(self, options):
        """Artifact lines should be dropped while prose stays verbatim."""
        text = "Photo from meeting\nphoto.png (2)\n313.2 KB\n\ufffc\nThe meeting went well."

        result, removed = remove_attachment_artifacts(text, options)

        assert result == "Photo from meeting\nThe meeting went well."
        assert removed == 3

    def test_fenced_lines_kept(self, options):
        """Lines inside fences are never removed."""
        text = "```\nimage.png\n```"

        result, removed = remove_attachment_artifacts(text, options)

        assert result == text
        assert removed == 0

    def test_disabled(self, make_options):
        """Nothing is removed when drop_artifacts is off."""
        text = "photo.png"

        result, removed = remove_attachment_artifacts(text, make_options(drop_artifacts=False))

        assert result == text
        assert removed == 0


class TestPseudoHeadings:
    """Tests for pseudo-heading promotion."""

    def test_numbered_outline_line(self, options):
        """A numbered line after a gap becomes a heading one level below its depth."""
        text = "Intro text here\n\n2.1 Scope of work\nBody text."

        result, promoted = promote_pseudo_headings(text, options)

        assert result == "Intro text here\n\n### Scope of work\nBody text."
        assert promoted == 1

    def test_single_segment_number(self, options):
        """'1. Title' maps to depth 2."""
        result, promoted = promote_pseudo_headings("1. Introduction\n\nText", options)

        assert result.split("\n")[0] == "## Introduction"
        assert promoted == 1

    def test_numbered_list_not_promoted(self, options):
        """A same-depth numbered sequence is a list."""
        text = "1. Buy milk\n2. Call mom"

        result, promoted = promote_pseudo_headings(text, options)

        assert result == text
        assert promoted == 0

    def test_terminal_punctuation_not_promoted(self, options):
        """Numbered sentences stay as they are."""
        text = "1. This is a full sentence."

        result, promoted = promote_pseudo_headings(text, options)

        assert result == text
        assert promoted == 0

    def test_depth_capped(self, make_options):
        """Depth never exceeds max_heading_depth."""
        result, _ = promote_pseudo_headings("1.2.3.4 Deep title", make_options(max_heading_depth=2))

        assert result == "## Deep title"

    def test_table_title(self, options):
        """A line right above a pseudo-table becomes a level-2 heading."""
        text = "Team roster\nName\tRole\tTeam\nAnn\tDev\tCore\nBob\tQA\tEdge"

        result, promoted = promote_pseudo_headings(text, options)

        assert result.split("\n")[0] == "## Team roster"
        assert promoted == 1

    def test_heading_hint_follows_previous_depth(self, make_options):
        """Hinted lines nest one level below the last heading."""
        text = "# Document\n\nRequirements\n\nText."

        result, promoted = promote_pseudo_headings(text, make_options(heading_hints=["requirements"]))

        assert result == "# Document\n\n## Requirements\n\nText."
        assert promoted == 1

    def test_heading_hint_pattern(self, make_options):
        """Compiled patterns are matched with search."""
        options = make_options(heading_hints=[re.compile(r"^Step \d+$")])

        result, promoted = promote_pseudo_headings("Step 1\n\nDo it.", options)

        assert result == "## Step 1\n\nDo it."
        assert promoted == 1

    def test_hint_requires_standalone_line(self, make_options):
        """Hinted lines inside a paragraph stay untouched."""
        text = "Requirements\nare listed below."

        result, promoted = promote_pseudo_headings(text, make_options(heading_hints=["requirements"]))

        assert result == text
        assert promoted == 0

    def test_fenced_lines_ignored(self, options):
        """Lines inside fences are not promoted."""
        text = "```\n1. Setup steps here\n```"

        result, promoted = promote_pseudo_headings(text, options)

        assert result == text
        assert promoted == 0

    def test_disabled(self, make_options):
        """No promotion when the option is off."""
        text = "1. Introduction"

        result, promoted = promote_pseudo_headings(text, make_options(promote_pseudo_headings=False))

        assert result == text
        assert promoted == 0

    def test_next_heading_level(self):
        """Level continues below the last heading, else the preferred level."""
        assert next_heading_level(None, 4, 2) == 2
        assert next_heading_level(2, 4, 2) == 3
        assert next_heading_level(4, 4, 2) == 2
        assert next_heading_level(1, 1, 2) == 1


class TestAccidentalFences:
    """Tests for accidental fence unwrapping."""

    def test_prose_fence_unwrapped(self, options):
        """An unlabelled fence around prose loses its markers."""
        text = "Before\n```\nThis is just a normal sentence inside a fence\n```\nAfter"

        result, unwrapped = unwrap_accidental_fences(text, options)

        assert result == "Before\nThis is just a normal sentence inside a fence\nAfter"
        assert unwrapped == 1

    def test_labelled_fence_kept(self, options):
        """Fences with a language are never unwrapped."""
        text = "```python\nprint hello world\n```"

        result, unwrapped = unwrap_accidental_fences(text, options)

        assert result == text
        assert unwrapped == 0

    def test_code_fence_kept(self, options):
        """Too many code tokens keep the fence."""
        text = "```\nconst x = { a: 1 };\n```"

        result, unwrapped = unwrap_accidental_fences(text, options)

        assert result == text
        assert unwrapped == 0

    def test_json_fence_kept(self, options):
        """JSON-shaped content keeps the fence."""
        text = '```\n{"name": "value"}\n```'

        result, unwrapped = unwrap_accidental_fences(text, options)

        assert result == text
        assert unwrapped == 0

    def test_unclosed_fence_kept(self, options):
        """An unclosed fence is left alone."""
        text = "```\nSome words here"

        result, unwrapped = unwrap_accidental_fences(text, options)

        assert result == text
        assert unwrapped == 0

    def test_disabled(self, make_options):
        """No unwrapping when the option is off."""
        text = "```\nJust words\n```"

        result, unwrapped = unwrap_accidental_fences(text, make_options(unwrap_accidental_fences=False))

        assert result == text
        assert unwrapped == 0


class TestRequestResponseBlocks:
    """Tests for request/response fencing."""

    def test_json_payload(self):
        """A JSON payload gets a json fence."""
        text = 'Request:\n{"id": 1}\n\nDone'

        result, fenced = wrap_request_response_blocks(text)

        assert result == 'Request:\n```json\n{"id": 1}\n```\n\nDone'
        assert fenced == 1

    def test_text_payload(self):
        """Anything that is not JSON gets a text fence."""
        text = "Ответ:\nstatus ok\nall good"

        result, fenced = wrap_request_response_blocks(text)

        assert result == "Ответ:\n```text\nstatus ok\nall good\n```"
        assert fenced == 1

    def test_existing_fence_skipped(self):
        """A marker already followed by a fence is left alone."""
        text = "Запрос:\n```json\n{}\n```"

        result, fenced = wrap_request_response_blocks(text)

        assert result == text
        assert fenced == 0

    def test_marker_line_trimmed(self):
        """The marker line is trimmed."""
        result, _ = wrap_request_response_blocks("  Response:  \nok")

        assert result.split("\n")[0] == "Response:"

    def test_language_detection(self):
        """Comment markers or invalid JSON fall back to text."""
        assert detect_fence_language('[1, 2, 3]') == "json"
        assert detect_fence_language('{\n  // note\n  "a": 1\n}') == "text"
        assert detect_fence_language("{not json}") == "text"
        assert detect_fence_language("plain") == "text"


class TestProcessBlocks:
    """Tests for process-block restructuring."""

    TEXT = (
        "Step\tOwner\tNotes\n"
        "1. Open ticket\n"
        "2. Assign owner\n"
        "- Must have access\n"
        "- Must log time\n"
        "\n"
        "After"
    )

    def test_restructured(self, make_options):
        """Numbered and bulleted lines split into two groups."""
        result, restructured = restructure_process_blocks(
            self.TEXT, make_options(restructure_process_blocks=True)
        )

        assert result == (
            "Step\tOwner\tNotes\n"
            "\n"
            "**Process**\n"
            "1. Open ticket\n"
            "2. Assign owner\n"
            "\n"
            "**Requirements**\n"
            "- Must have access\n"
            "- Must log time\n"
            "\n"
            "After"
        )
        assert restructured == 1

    def test_mixed_block_untouched(self, make_options):
        """Any other line kind in the run prevents restructuring."""
        text = "Step\tOwner\n1. One\n2. Two\n- a\n- b\nplain line"

        result, restructured = restructure_process_blocks(
            text, make_options(restructure_process_blocks=True)
        )

        assert result == text
        assert restructured == 0

    def test_off_by_default(self, options):
        """Restructuring is opt-in."""
        result, restructured = restructure_process_blocks(self.TEXT, options)

        assert result == self.TEXT
        assert restructured == 0


class TestRunHeuristics:
    """Tests for the pass chain."""

    def test_reports_table_conversion(self, options):
        """Each pass with a non-zero count adds a warning."""
        result = run_heuristics("Name\tType\tValue\nAlpha\tText\tSample", options)

        assert result.text == (
            "| Name | Type | Value |\n"
            "| --- | --- | --- |\n"
            "| Alpha | Text | Sample |"
        )
        assert result.warnings == ["Converted 1 pseudo-tables to Markdown tables"]

    def test_no_warnings_for_plain_prose(self, options):
        """Plain prose passes through without warnings."""
        result = run_heuristics("Just a sentence.", options)

        assert result.text == "Just a sentence."
        assert result.warnings == []
