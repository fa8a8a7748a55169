# -*- coding: utf-8 -*-
"""
Line-level normalization of canonical text.

Runs twice in the pipeline: first with whitespace collapsing disabled so the
heuristics still see tab/space alignment, then with every option enabled on
the re-serialized tree.
"""
import re

from .fencing import FenceTracker, is_fence_line

_UNORDERED_RE = re.compile(r"^(\s*)([-*+•])\s+")
_ORDERED_RE = re.compile(r"^(\s*)(\d+)[.)]\s+")
_LIST_LINE_RE = re.compile(r"^(\s*)(-|\d+\.)\s+")
_LEADING_WS_RE = re.compile(r"^(\s*)(.*)$", re.DOTALL)
_SPACE_RUN_RE = re.compile(r"[\t ]+")
_DOUBLE_SPACE_RUN_RE = re.compile(r"[ \t]{2,}")


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _normalize_line_spaces(line: str, collapse_spaces: bool, normalize_whitespace: bool) -> str:
    safe_line = line.replace("\u00a0", " ").rstrip()
    if not collapse_spaces:
        return safe_line
    leading, rest = _LEADING_WS_RE.match(safe_line).groups()
    if normalize_whitespace:
        rest = _SPACE_RUN_RE.sub(" ", rest)
    else:
        rest = _DOUBLE_SPACE_RUN_RE.sub(" ", rest)
    return f"{leading}{rest}"


def _canonicalize_list_marker(line: str) -> str:
    unordered = _UNORDERED_RE.match(line)
    if unordered:
        return f"{unordered.group(1)}- {line[unordered.end():].strip()}"
    ordered = _ORDERED_RE.match(line)
    if ordered:
        return f"{ordered.group(1)}{ordered.group(2)}. {line[ordered.end():].strip()}"
    return line


def collapse_blank_lines(text: str, max_blank_lines: int = 2) -> str:
    """Keep at most max_blank_lines consecutive blank lines."""
    output: list[str] = []
    blank_count = 0
    for line in text.split("\n"):
        if line.strip() == "":
            blank_count += 1
            if blank_count <= max_blank_lines:
                output.append("")
        else:
            blank_count = 0
            output.append(line)
    return "\n".join(output)


def format_list_blocks(lines: list[str]) -> list[str]:
    """
    Surround contiguous list blocks with blank lines.

    Indented lines directly after a list item are continuations and stay
    inside the block.
    """
    formatted: list[str] = []
    in_list = False
    fence = FenceTracker()

    for line in lines:
        if not fence.inside and is_fence_line(line) and in_list and not line[:1].isspace():
            formatted.append("")
            in_list = False
        if fence.feed(line) or fence.inside:
            formatted.append(line)
            continue

        list_match = _LIST_LINE_RE.match(line)
        if list_match:
            if not in_list and formatted and formatted[-1].strip():
                formatted.append("")
            in_list = True
            content = line[list_match.end():].strip()
            formatted.append(f"{list_match.group(1)}{list_match.group(2)} {content}")
            continue

        stripped = line.strip()
        if not stripped:
            in_list = False
        elif in_list and not line[:1].isspace():
            formatted.append("")
            in_list = False
        formatted.append(line)

    return formatted


def _normalize_whitespace_outside_fences(text: str) -> str:
    output: list[str] = []
    fence = FenceTracker()
    for line in text.split("\n"):
        if fence.feed(line) or fence.inside:
            output.append(line.rstrip())
            continue
        leading, rest = _LEADING_WS_RE.match(line).groups()
        output.append(f"{leading}{_SPACE_RUN_RE.sub(' ', rest).rstrip()}")
    return "\n".join(output).strip()


def normalize_markdown(
        text: str,
        collapse_spaces: bool = True,
        format_lists: bool = True,
        normalize_whitespace: bool = True,
) -> str:
    """
    Canonicalize line endings, whitespace and list markers.

    Args:
        text: Input text
        collapse_spaces: Collapse interior whitespace runs (leading indentation is kept)
        format_lists: Insert blank-line boundaries around list blocks
        normalize_whitespace: Collapse every tab/space run, not only runs of two or more

    Returns:
        Normalized text with at most two consecutive blank lines, trimmed
    """
    lines = normalize_line_endings(text or "").split("\n")
    output: list[str] = []
    fence = FenceTracker()

    for line in lines:
        if fence.feed(line) or fence.inside:
            output.append(line.replace("\u00a0", " ").rstrip())
            continue
        normalized = _normalize_line_spaces(line, collapse_spaces, normalize_whitespace)
        output.append(_canonicalize_list_marker(normalized))

    formatted = format_list_blocks(output) if format_lists else output
    joined = "\n".join(formatted)
    if normalize_whitespace:
        joined = _normalize_whitespace_outside_fences(joined)

    return collapse_blank_lines(joined, 2).strip()
