# -*- coding: utf-8 -*-
"""
Fenced block repair.

- unwrap unlabelled fences that only hold prose;
- fence the payload following request/response markers, tagged json when
  it parses as a JSON document.
"""
import json
import re

from ..fencing import FenceTracker, fence_info, is_fence_line
from .lines import is_markdown_heading, is_request_response_marker

# Unwrap thresholds
PROSE_LETTER_RATIO = 0.6
MAX_CODE_TOKENS = 2

_LETTER_RE = re.compile(r"[A-Za-zА-Яа-яЁё]")
_NON_SPACE_RE = re.compile(r"\S")
_CODE_CHAR_RE = re.compile(r"[{}\[\];]")
_ARROW_RE = re.compile(r"=>")
_COLON_VALUE_RE = re.compile(r":\s*\S")
_OPEN_BRACKET_RE = re.compile(r"[{\[]")
_COMMENT_MARKER_RE = re.compile(r"^\s*//|/\*", re.MULTILINE)


def count_code_tokens(content: str) -> int:
    return (
        len(_CODE_CHAR_RE.findall(content))
        + len(_ARROW_RE.findall(content))
        + len(_COLON_VALUE_RE.findall(content))
    )


def letter_ratio(content: str) -> float:
    non_space = len(_NON_SPACE_RE.findall(content))
    if not non_space:
        return 0.0
    return len(_LETTER_RE.findall(content)) / non_space


def is_json_shaped(content: str) -> bool:
    return bool(_OPEN_BRACKET_RE.search(content)) and bool(_COLON_VALUE_RE.search(content))


def is_accidental_fence(content: str) -> bool:
    """Fenced content that reads as prose rather than code or data."""
    return (
        letter_ratio(content) >= PROSE_LETTER_RATIO
        and count_code_tokens(content) <= MAX_CODE_TOKENS
        and not is_json_shaped(content)
    )


def unwrap_accidental_fences(text: str, options) -> tuple[str, int]:
    """Remove the markers of closed, unlabelled fences around prose."""
    if not options.unwrap_accidental_fences:
        return text, 0

    lines = text.split("\n")
    output: list[str] = []
    unwrapped = 0
    index = 0
    while index < len(lines):
        line = lines[index]
        if not is_fence_line(line):
            output.append(line)
            index += 1
            continue

        fence = FenceTracker()
        fence.feed(line)
        closing = index + 1
        while closing < len(lines) and not fence.closes(lines[closing]):
            closing += 1
        body = lines[index + 1:closing]

        if closing >= len(lines):
            # Unclosed fence, keep the rest as is
            output.append(line)
            output.extend(body)
            break

        nested = any(is_fence_line(entry) for entry in body)
        if not fence_info(line) and not nested and is_accidental_fence("\n".join(body)):
            output.extend(body)
            unwrapped += 1
        else:
            output.append(line)
            output.extend(body)
            output.append(lines[closing])
        index = closing + 1

    return "\n".join(output), unwrapped


def detect_fence_language(block: str) -> str:
    trimmed = block.strip()
    if not trimmed or _COMMENT_MARKER_RE.search(block):
        return "text"
    is_object = trimmed.startswith("{") and trimmed.endswith("}")
    is_array = trimmed.startswith("[") and trimmed.endswith("]")
    if not (is_object or is_array):
        return "text"
    try:
        json.loads(trimmed)
    except ValueError:
        return "text"
    return "json"


def wrap_request_response_blocks(text: str, options=None) -> tuple[str, int]:
    """Fence the line run after each request/response marker."""
    lines = text.split("\n")
    output: list[str] = []
    fenced = 0
    fence = FenceTracker()
    index = 0
    while index < len(lines):
        line = lines[index]
        if fence.feed(line):
            output.append(line)
            index += 1
            continue
        if fence.inside or not is_request_response_marker(line):
            output.append(line)
            index += 1
            continue

        output.append(line.strip())
        index += 1
        if index < len(lines) and is_fence_line(lines[index]):
            continue

        block: list[str] = []
        while index < len(lines):
            current = lines[index]
            if not current.strip() or is_fence_line(current) or is_markdown_heading(current):
                break
            if is_request_response_marker(current):
                break
            block.append(current)
            index += 1

        if block:
            language = detect_fence_language("\n".join(block))
            output.append(f"```{language}")
            output.extend(block)
            output.append("```")
            fenced += 1

    return "\n".join(output), fenced
