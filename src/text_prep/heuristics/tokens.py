# -*- coding: utf-8 -*-
"""
Inline technical-token wrapping.

Wraps URLs, API endpoints, array field paths and UPPER_SNAKE enum values in
inline code. Text inside fences, existing code spans, Markdown links and
autolinks is left alone.
"""
import re
from dataclasses import dataclass

from ..fencing import FenceTracker

URL_RE = re.compile(r"https?://[^\s)<>`]+")
API_PATH_RE = re.compile(
    r"(^|[ \t])(?:(GET|POST|PUT|PATCH|DELETE)\s+)?(/(?:api|v\d+)/[^\s)`]+(?:\?[^\s)`]+)?)"
)
FIELD_PATH_RE = re.compile(
    r"\b[A-Za-z_]\w*(?:\[\])?(?:\.[A-Za-z_]\w*(?:\[\])?)+\b", re.ASCII
)
ENUM_RE = re.compile(r"\b[A-Z][A-Z0-9]+(?:_[A-Z0-9]+)+\b", re.ASCII)
LINK_SYNTAX_RE = re.compile(r"!?\[[^\]]*\]\([^)]*\)|<https?://[^>\s]+>")

_CODE_SPAN_SPLIT_RE = re.compile(r"(`[^`]*`)")
_ADJACENT_SPANS_RE = re.compile(r"`([^`]+)``([^`]+)`")
_URL_TRAILING_PUNCT = ".,;:!?"


@dataclass
class TokenRange:
    start: int
    end: int

    def overlaps(self, other: "TokenRange") -> bool:
        return self.start < other.end and self.end > other.start


def select_ranges(ranges: list[TokenRange]) -> list[TokenRange]:
    """Earliest start wins; on equal starts the longest span wins."""
    selected: list[TokenRange] = []
    for candidate in sorted(ranges, key=lambda item: (item.start, -item.end)):
        if not selected or candidate.start >= selected[-1].end:
            selected.append(candidate)
        elif candidate.start == selected[-1].start and candidate.end > selected[-1].end:
            selected[-1] = candidate
    return selected


def _url_ranges(segment: str) -> list[TokenRange]:
    ranges = []
    for match in URL_RE.finditer(segment):
        url = match.group(0).rstrip(_URL_TRAILING_PUNCT)
        if len(url) > len("https://"):
            ranges.append(TokenRange(match.start(), match.start() + len(url)))
    return ranges


def collect_candidates(segment: str) -> list[TokenRange]:
    protected = [TokenRange(m.start(), m.end()) for m in LINK_SYNTAX_RE.finditer(segment)]
    urls = [url for url in _url_ranges(segment) if not any(url.overlaps(p) for p in protected)]
    blocked = protected + urls

    candidates: list[TokenRange] = []
    for match in API_PATH_RE.finditer(segment):
        prefix, method, path = match.group(1), match.group(2), match.group(3)
        base = match.start() + len(prefix)
        if method:
            candidates.append(TokenRange(base, base + len(method)))
        path_start = match.start(3)
        candidates.append(TokenRange(path_start, path_start + len(path)))
    for match in FIELD_PATH_RE.finditer(segment):
        if "[]" in match.group(0):
            candidates.append(TokenRange(match.start(), match.end()))
    for match in ENUM_RE.finditer(segment):
        candidates.append(TokenRange(match.start(), match.end()))

    kept = [
        candidate
        for candidate in candidates
        if not any(candidate.overlaps(item) for item in blocked)
    ]
    return urls + kept


def wrap_segment(segment: str) -> tuple[str, int]:
    selected = select_ranges(collect_candidates(segment))
    if not selected:
        return segment, 0

    parts: list[str] = []
    cursor = 0
    for token in selected:
        parts.append(segment[cursor:token.start])
        parts.append(f"`{segment[token.start:token.end]}`")
        cursor = token.end
    parts.append(segment[cursor:])
    return "".join(parts), len(selected)


def separate_adjacent_code_spans(line: str) -> str:
    previous = None
    while previous != line:
        previous = line
        line = _ADJACENT_SPANS_RE.sub(r"`\1` `\2`", line)
    return line


def wrap_line(line: str) -> tuple[str, int]:
    parts = _CODE_SPAN_SPLIT_RE.split(line)
    wrapped = 0
    for position in range(0, len(parts), 2):
        parts[position], count = wrap_segment(parts[position])
        wrapped += count
    if not wrapped:
        return line, 0
    return separate_adjacent_code_spans("".join(parts)), wrapped


def wrap_technical_tokens(text: str, options=None) -> tuple[str, int]:
    output: list[str] = []
    wrapped = 0
    fence = FenceTracker()
    for line in text.split("\n"):
        if fence.feed(line):
            output.append(line)
            continue
        if fence.inside:
            output.append(line)
            continue
        line, count = wrap_line(line)
        wrapped += count
        output.append(line)
    return "\n".join(output), wrapped
