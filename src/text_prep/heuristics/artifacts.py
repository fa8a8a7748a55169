# -*- coding: utf-8 -*-
"""
Attachment artifact detection.

Copying a ticket or chat message that carries attachments leaves behind
lines such as "photo.png (2)", "313.2 KB" or a lone U+FFFC glyph.
"""
import re

from ..fencing import FenceTracker

IMAGE_FILE_NAME_RE = re.compile(
    r"^[^\n\\/]+?\.(png|jpe?g|webp|gif)(?:\s*\(\d+\))?$", re.IGNORECASE
)
SIZE_ONLY_RE = re.compile(r"^\d+(?:[.,]\d+)?\s*(kb|mb|gb|кб|мб|гб)$", re.IGNORECASE)
# Object replacement character and the BMP private-use area
PLACEHOLDER_GLYPH_RE = re.compile(r"^[\uFFFC\uE000-\uF8FF]+$")

# File names longer than this many words read as prose mentioning a file
MAX_FILE_NAME_WORDS = 6


def is_attachment_file_name(line: str) -> bool:
    trimmed = line.strip()
    if len(trimmed.split()) > MAX_FILE_NAME_WORDS:
        return False
    return bool(IMAGE_FILE_NAME_RE.match(trimmed))


def is_size_caption(line: str) -> bool:
    return bool(SIZE_ONLY_RE.match(line.strip()))


def is_placeholder_glyph_line(line: str) -> bool:
    trimmed = line.strip()
    return bool(trimmed) and bool(PLACEHOLDER_GLYPH_RE.match(trimmed))


def is_attachment_artifact_line(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed:
        return False
    return (
        is_attachment_file_name(trimmed)
        or is_size_caption(trimmed)
        or is_placeholder_glyph_line(trimmed)
    )


def remove_attachment_artifacts(text: str, options) -> tuple[str, int]:
    """Drop artifact lines outside fenced blocks."""
    if not options.drop_artifacts:
        return text, 0

    output: list[str] = []
    removed = 0
    fence = FenceTracker()
    for line in text.split("\n"):
        if fence.feed(line):
            output.append(line)
            continue
        if not fence.inside and is_attachment_artifact_line(line):
            removed += 1
            continue
        output.append(line)

    return "\n".join(output), removed
