# -*- coding: utf-8 -*-
"""
Process-block restructuring.

A pseudo-table header row followed by a mixed run of numbered steps and
bullet requirements is split into two labelled groups.
"""
import re

from .lines import is_markdown_heading, split_pseudo_row

PROCESS_LABEL = "**Process**"
REQUIREMENTS_LABEL = "**Requirements**"
MIN_GROUP_ITEMS = 2

_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+")
_BULLET_RE = re.compile(r"^\s*-\s+")


def _is_header_row(line: str) -> bool:
    return split_pseudo_row(line) is not None and not is_markdown_heading(line)


def restructure_process_blocks(text: str, options) -> tuple[str, int]:
    if not options.restructure_process_blocks:
        return text, 0

    lines = text.split("\n")
    output: list[str] = []
    restructured = 0
    index = 0
    while index < len(lines):
        line = lines[index]
        if not _is_header_row(line):
            output.append(line)
            index += 1
            continue

        end = index + 1
        while end < len(lines) and lines[end].strip():
            end += 1
        block = lines[index + 1:end]
        numbered = [item for item in block if _NUMBERED_RE.match(item)]
        bullets = [item for item in block if _BULLET_RE.match(item)]

        output.append(line)
        if (
            block
            and len(numbered) + len(bullets) == len(block)
            and len(numbered) >= MIN_GROUP_ITEMS
            and len(bullets) >= MIN_GROUP_ITEMS
        ):
            output.extend(["", PROCESS_LABEL, *numbered, "", REQUIREMENTS_LABEL, *bullets])
            restructured += 1
        else:
            output.extend(block)
        if end < len(lines):
            output.append(lines[end])
        index = end + 1

    return "\n".join(output), restructured
