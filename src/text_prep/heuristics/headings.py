# -*- coding: utf-8 -*-
"""
Pseudo-heading promotion.

Turns lines that act as section titles into real headings:
numbered outline lines ("2.1. Scope"), titles sitting right above a table,
and standalone lines matching configured heading hints.
"""
import re
from re import Pattern

from ..fencing import FenceTracker
from .lines import (
    ends_with_terminal_punctuation,
    heading_level,
    is_list_line,
    is_markdown_table_start,
    is_pseudo_table_line,
    is_pseudo_table_start,
    make_heading_line,
)

NUMBERED_HEADING_RE = re.compile(
    r"^\s*(?:(\d+(?:\.\d+)+)[.)]?|(\d+)[.)])\s+(\S.{3,160})\s*$"
)
NUMBER_PREFIX_RE = re.compile(r"^\s*\d+(?:\.\d+)*[.)]?\s+")

# A numbered line directly followed by a numbered line of the same depth,
# or any numbered line when it is this long, is a list item rather than a title
NUMBERED_SEQUENCE_MAX_TITLE_CHARS = 80

TABLE_TITLE_LEVEL = 2
HINT_DEFAULT_LEVEL = 2
HINT_MIN_CHARS = 3
HINT_MAX_CHARS = 160


def numbered_depth(line: str) -> int | None:
    """Number of segments in a numbered title prefix, None when absent."""
    match = NUMBERED_HEADING_RE.match(line)
    if not match:
        return None
    number = match.group(1) or match.group(2)
    return len(number.split("."))


def strip_number_prefix(line: str) -> str:
    return NUMBER_PREFIX_RE.sub("", line, count=1).strip()


def matches_heading_hint(line: str, hints: list[str | Pattern[str]]) -> bool:
    lowered = line.lower()
    for hint in hints:
        if isinstance(hint, str):
            if hint and hint.lower() in lowered:
                return True
        elif hint.search(line):
            return True
    return False


def next_heading_level(last_level: int | None, max_depth: int, preferred: int) -> int:
    if last_level and last_level < max_depth:
        return min(max_depth, last_level + 1)
    return min(max_depth, preferred)


def _has_gap_before(lines: list[str], index: int) -> bool:
    return index == 0 or lines[index - 1].strip() == ""


def _has_gap_after(lines: list[str], index: int) -> bool:
    return index == len(lines) - 1 or lines[index + 1].strip() == ""


def _precedes_table(lines: list[str], index: int) -> bool:
    line = lines[index]
    if "|" in line or is_pseudo_table_line(line) or is_list_line(line):
        return False
    return is_markdown_table_start(lines, index + 1) or is_pseudo_table_start(lines, index + 1)


def promote_pseudo_headings(text: str, options) -> tuple[str, int]:
    """
    Promote title-like lines to headings.

    Depth tracking runs across the whole scan: a hint-matched line nests one
    level below the last heading seen (real or promoted).
    """
    if not options.promote_pseudo_headings:
        return text, 0

    max_depth = options.max_heading_depth
    lines = text.split("\n")
    output: list[str] = []
    promoted = 0
    fence = FenceTracker()
    last_level: int | None = None

    for index, line in enumerate(lines):
        if fence.feed(line):
            output.append(line)
            continue
        if fence.inside:
            output.append(line)
            continue

        level = heading_level(line)
        if level:
            last_level = level
            output.append(line)
            continue

        trimmed = line.strip()
        if not trimmed:
            output.append(line)
            continue

        depth = numbered_depth(trimmed)
        if depth:
            next_line = lines[index + 1] if index + 1 < len(lines) else ""
            next_depth = numbered_depth(next_line.strip())
            continues_sequence = next_depth is not None and (
                next_depth == depth or len(trimmed) > NUMBERED_SEQUENCE_MAX_TITLE_CHARS
            )
            if (
                not _has_gap_before(lines, index)
                or ends_with_terminal_punctuation(trimmed)
                or continues_sequence
            ):
                output.append(line)
                continue
            level = min(max_depth, depth + 1)
            output.append(make_heading_line(level, strip_number_prefix(trimmed)))
            promoted += 1
            last_level = level
            continue

        if _has_gap_before(lines, index) and _precedes_table(lines, index):
            level = min(max_depth, TABLE_TITLE_LEVEL)
            output.append(make_heading_line(level, trimmed))
            promoted += 1
            last_level = level
            continue

        if (
            options.heading_hints
            and _has_gap_before(lines, index)
            and _has_gap_after(lines, index)
            and HINT_MIN_CHARS <= len(trimmed) <= HINT_MAX_CHARS
            and matches_heading_hint(trimmed, options.heading_hints)
        ):
            level = next_heading_level(last_level, max_depth, HINT_DEFAULT_LEVEL)
            output.append(make_heading_line(level, trimmed))
            promoted += 1
            last_level = level
            continue

        output.append(line)

    return "\n".join(output), promoted
