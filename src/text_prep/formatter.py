# -*- coding: utf-8 -*-
"""
Final canonical formatting.

format_markdown only adjusts blank lines between blocks and never reflows
prose; compact_table_pipes trims the padding inside table rows. Fenced
content is left untouched by both.
"""
import logging
import re

from .fencing import FenceTracker, is_fence_line

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#{1,6}(\s|$)")


def _is_table_line(line: str) -> bool:
    return line.startswith("|")


def _format_spacing(text: str) -> str:
    """
    Normalize blank lines around blocks.

    Rules:
    - One blank line before and after headings
    - One blank line around pipe tables and top-level fences
    - Never more than one consecutive blank line outside fences
    - No leading/trailing blank lines
    """
    result: list[str] = []
    fence = FenceTracker()
    pending_blank = False

    def push_blank():
        if result and result[-1] != "":
            result.append("")

    for line in text.split("\n"):
        if fence.inside:
            result.append(line)
            if fence.feed(line) and not line[:1].isspace():
                pending_blank = True
            continue

        if not line.strip():
            push_blank()
            pending_blank = False
            continue

        is_heading = bool(_HEADING_RE.match(line))
        is_table = _is_table_line(line)
        is_fence = is_fence_line(line)
        previous = result[-1] if result else ""
        top_level = not line[:1].isspace()

        if pending_blank:
            push_blank()
            pending_blank = False
        if is_heading or (is_fence and top_level):
            push_blank()
        elif is_table and previous and not _is_table_line(previous):
            push_blank()
        elif not is_table and _is_table_line(previous) and top_level:
            push_blank()

        result.append(line)

        if is_heading:
            pending_blank = True
        elif is_fence:
            fence.feed(line)

    while result and not result[-1].strip():
        result.pop()
    return "\n".join(result)


def format_markdown(text: str) -> str:
    """Pretty-print canonical text; returns the input unchanged on failure."""
    try:
        return _format_spacing(text)
    except Exception as e:
        logger.warning(f"Formatting failed, keeping unformatted text: {e}")
        return text


def compact_table_pipes(text: str) -> str:
    """Trim cell padding in pipe rows outside fences, keeping indentation."""
    output: list[str] = []
    fence = FenceTracker()
    for line in text.split("\n"):
        if fence.feed(line) or fence.inside:
            output.append(line)
            continue
        trimmed = line.strip()
        if not trimmed.startswith("|") or trimmed.count("|") < 2:
            output.append(line)
            continue

        indent = line[: len(line) - len(line.lstrip())]
        starts_with_pipe = trimmed.startswith("|")
        ends_with_pipe = trimmed.endswith("|") and not trimmed.endswith("\\|")
        inner = trimmed[1 if starts_with_pipe else 0:]
        if ends_with_pipe:
            inner = inner[:-1]
        cells = [cell.strip() for cell in re.split(r"(?<!\\)\|", inner)]
        row = " | ".join(cells)
        output.append(
            f"{indent}{'| ' if starts_with_pipe else ''}{row}{' |' if ends_with_pipe else ''}"
        )
    return "\n".join(output)
