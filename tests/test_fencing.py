# -*- coding: utf-8 -*-
"""
Tests for fenced block tracking.
"""
from text_prep.fencing import FenceTracker, fence_info, fence_marker, is_fence_line


def inside_flags(lines: list[str]) -> list[bool]:
    fence = FenceTracker()
    flags = []
    for line in lines:
        fence.feed(line)
        flags.append(fence.inside)
    return flags


class TestFenceMarker:
    """Tests for fence_marker and fence_info."""

    def test_backticks_and_tildes(self):
        """Runs of three or more backticks or tildes open fences."""
        assert fence_marker("```python") == "```"
        assert fence_marker("  ~~~~") == "~~~~"
        assert fence_marker("``not") is None

    def test_backtick_info_cannot_hold_backticks(self):
        """A backtick run followed by more backticks is inline code."""
        assert not is_fence_line("``` `x` ```")

    def test_info_string(self):
        """The info string follows the marker."""
        assert fence_info("````json ") == "json"
        assert fence_info("text") == ""


class TestFenceTracker:
    """Tests for FenceTracker."""

    def test_open_and_close(self):
        """A matching marker closes the fence."""
        assert inside_flags(["```", "code", "```", "text"]) == [True, True, False, False]

    def test_shorter_run_inside_longer_fence(self):
        """A ``` line inside a ```` fence is content."""
        lines = ["````", "```", "x", "```", "````", "after"]

        assert inside_flags(lines) == [True, True, True, True, False, False]

    def test_other_marker_does_not_close(self):
        """Tildes do not close a backtick fence."""
        assert inside_flags(["```", "~~~", "```"]) == [True, True, False]

    def test_info_string_does_not_close(self):
        """A closing fence carries no info string."""
        assert inside_flags(["```", "```python", "```"]) == [True, True, False]

    def test_feed_reports_markers_only(self):
        """feed is True for the opening and closing lines only."""
        fence = FenceTracker()

        assert [fence.feed(line) for line in ["a", "````", "```", "````"]] == [
            False,
            True,
            False,
            True,
        ]
