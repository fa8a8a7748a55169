# -*- coding: utf-8 -*-
"""
Fenced block tracking for the line-oriented passes.

A fence opens on a run of three or more backticks or tildes and closes only
on a run of the same character that is at least as long and carries no info
string. Shorter or different runs inside the block are content.
"""
import re

_FENCE_RE = re.compile(r"^(`{3,}|~{3,})(.*)$")


def fence_marker(line: str) -> str | None:
    """The backtick or tilde run opening a fence on this line, if any."""
    match = _FENCE_RE.match(line.strip())
    if match is None:
        return None
    marker, info = match.groups()
    # Backtick fences cannot carry backticks in their info string
    if marker[0] == "`" and "`" in info:
        return None
    return marker


def fence_info(line: str) -> str:
    marker = fence_marker(line)
    if marker is None:
        return ""
    return line.strip()[len(marker):].strip()


def is_fence_line(line: str) -> bool:
    return fence_marker(line) is not None


class FenceTracker:
    """Follows fence state over successive lines."""

    def __init__(self):
        self.marker = ""

    @property
    def inside(self) -> bool:
        return bool(self.marker)

    def closes(self, line: str) -> bool:
        """Whether line closes the currently open fence."""
        if not self.marker:
            return False
        marker = fence_marker(line)
        return (
            marker is not None
            and marker[0] == self.marker[0]
            and len(marker) >= len(self.marker)
            and not fence_info(line)
        )

    def feed(self, line: str) -> bool:
        """
        Advance over one line.

        Returns:
            True when the line opens or closes a fence, False for content
            and for plain lines outside fences
        """
        if self.marker:
            if self.closes(line):
                self.marker = ""
                return True
            return False
        marker = fence_marker(line)
        if marker is None:
            return False
        self.marker = marker
        return True
