# -*- coding: utf-8 -*-
"""
Outline extraction and size metrics.
"""
import math

from .markdown_tree import (
    Block,
    BlockQuote,
    BulletList,
    Document,
    Heading,
    OrderedList,
    inline_text,
    normalize_text,
)
from .models import PrepareStats

CHARS_PER_TOKEN = 4


def _walk(blocks: list[Block]):
    for block in blocks:
        yield block
        if isinstance(block, BlockQuote):
            yield from _walk(block.children)
        elif isinstance(block, (BulletList, OrderedList)):
            for item in block.items:
                yield from _walk(item.children)


def build_outline(document: Document, max_heading_depth: int = 6) -> list[str]:
    """
    Heading texts at or above max_heading_depth, in document order.

    Entries are the visible heading text with inline markup and escapes
    removed.
    """
    outline: list[str] = []
    for block in _walk(document.children):
        if isinstance(block, Heading) and block.level <= max_heading_depth:
            title = normalize_text(inline_text(block.children))
            if title:
                outline.append(title)
    return outline


def build_stats(text: str) -> PrepareStats:
    chars = len(text)
    return PrepareStats(
        chars=chars,
        lines=text.count("\n") + 1 if text else 0,
        approx_tokens=math.ceil(chars / CHARS_PER_TOKEN),
    )
