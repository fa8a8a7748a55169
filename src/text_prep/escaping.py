# -*- coding: utf-8 -*-
"""
Backslash escaping of literal text.

Text that came out of a parsed tree (or out of an HTML text node) has lost
its escapes. Writing it back verbatim would turn `\\#`, `\\*` or `2\\.` into
live markup, so every character that could start a construct is escaped
again before output.
"""
import re

_INLINE_RE = re.compile(
    r"[`*\[\]]"
    r"|\\(?=[!-/:-@\[-`{-~]|$)"
    r"|<(?=[A-Za-z/!?])"
    r"|&(?=#?\w+;)"
    r"|~(?=~)|(?<=~)~"
    r"|(?<![^\W_])_|_(?![^\W_])"
)

# Constructs recognized only at the start of a line
_LINE_START_RES = (
    # ATX heading
    re.compile(r"^([ \t]*)(#{1,6})(?=[ \t]|$)", re.MULTILINE),
    # block quote
    re.compile(r"^([ \t]*)(>)", re.MULTILINE),
    # bullet item
    re.compile(r"^([ \t]*)([-+])(?=[ \t]|$)", re.MULTILINE),
    # ordered item
    re.compile(r"^([ \t]*\d{1,9})([.)])(?=[ \t]|$)", re.MULTILINE),
    # setext underline or thematic break
    re.compile(r"^([ \t]*)([=-])(?=[=\- \t]*$)", re.MULTILINE),
)

_CLOSING_HASHES_RE = re.compile(r"(^|[ \t])(#+)$")


def escape_inline(text: str, in_table: bool = False) -> str:
    """Escape characters that open inline constructs anywhere in a line."""
    escaped = _INLINE_RE.sub(r"\\\g<0>", text)
    if in_table:
        escaped = escaped.replace("|", "\\|")
    return escaped


def escape_line_starts(text: str) -> str:
    """Escape block markers at the start of each line of rendered inline text."""
    for pattern in _LINE_START_RES:
        text = pattern.sub(r"\1\\\2", text)
    return text


def escape_heading_text(text: str) -> str:
    """Keep a trailing run of `#` from being read as a closing sequence."""
    return _CLOSING_HASHES_RE.sub(r"\1\\\2", text)


def escape_markdown(text: str) -> str:
    return escape_line_starts(escape_inline(text))
