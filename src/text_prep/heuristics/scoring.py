# -*- coding: utf-8 -*-
"""
Pseudo-table scoring.

Every scorer is a pure function of the candidate cells. The vertical
(transposed) table chooser tries each plausible header count and keeps the
best composite score when it clears both the minimum and the margin over the
runner-up.
"""
import re
from dataclasses import dataclass
from typing import Literal

from .lines import (
    has_strong_header_uniqueness,
    is_code_like_line,
    is_header_like_line,
)

CellShape = Literal["numeric", "identifier", "pathlike", "sentence", "short"]

# Vertical chooser
VERTICAL_MIN_LINES = 6
VERTICAL_MAX_HEADERS = 12
VERTICAL_MIN_SCORE = 0.72
VERTICAL_MIN_MARGIN = 0.08
HEADER_RUN_MAX_WORDS = 3
TWO_COLUMN_PENALTY = 0.7

# Composite weights
HEADER_WEIGHT = 0.4
CONSISTENCY_WEIGHT = 0.4
CELL_WEIGHT = 0.2

# Header quality split
HEADER_VALID_WEIGHT = 0.7
HEADER_UNIQUE_WEIGHT = 0.3

# A column is consistent when one shape covers this share of its rows
COLUMN_DOMINANCE = 0.65

# Cell quality limits
CELL_MAX_AVG_CHARS = 100
CELL_MAX_PUNCT_FRACTION = 0.5
CELL_MAX_LIST_FRACTION = 0.3
LOOSE_CELL_MAX_AVG_CHARS = 400
LOOSE_CELL_MAX_PUNCT_FRACTION = 0.7
CODE_CELL_MAX_FRACTION = 0.3

_NUMERIC_RE = re.compile(r"^\d+(?:[.,]\d+)?$")
_IDENTIFIER_RE = re.compile(r"^\w+$", re.ASCII)
_PATH_MARK_RE = re.compile(r"[.\[]")
_WHITESPACE_RE = re.compile(r"\s")
_SENTENCE_PUNCT_RE = re.compile(r"[.!?]")
_LIST_CELL_RE = re.compile(r"^\d+[.)]\s")


@dataclass
class VerticalTableScore:
    """Score breakdown for one header-count guess."""
    header_count: int
    header_quality: float
    column_consistency: float
    cell_quality: float
    total: float


@dataclass
class VerticalTable:
    headers: list[str]
    rows: list[list[str]]
    score: VerticalTableScore | None = None


def classify_cell_shape(value: str) -> CellShape:
    trimmed = value.strip()
    if _NUMERIC_RE.match(trimmed):
        return "numeric"
    if _IDENTIFIER_RE.match(trimmed):
        return "identifier"
    if trimmed and not _WHITESPACE_RE.search(trimmed) and _PATH_MARK_RE.search(trimmed):
        return "pathlike"
    if _WHITESPACE_RE.search(trimmed) and _SENTENCE_PUNCT_RE.search(trimmed):
        return "sentence"
    return "short"


def column_consistency_score(rows: list[list[str]]) -> float:
    """
    Average dominant-shape ratio over columns.

    Returns 0.0 as soon as one column has no shape covering
    COLUMN_DOMINANCE of the rows.
    """
    if not rows:
        return 0.0
    column_count = max(len(row) for row in rows)
    if column_count == 0:
        return 0.0

    total = 0.0
    for column in range(column_count):
        tally: dict[str, int] = {}
        for row in rows:
            cell = row[column] if column < len(row) else ""
            shape = classify_cell_shape(cell)
            tally[shape] = tally.get(shape, 0) + 1
        ratio = max(tally.values()) / len(rows)
        if ratio < COLUMN_DOMINANCE:
            return 0.0
        total += ratio
    return total / column_count


def header_quality_score(headers: list[str]) -> float:
    if not headers:
        return 0.0
    valid = sum(1 for header in headers if is_header_like_line(header))
    unique = 1.0 if has_strong_header_uniqueness(headers) else 0.0
    return (valid / len(headers)) * HEADER_VALID_WEIGHT + unique * HEADER_UNIQUE_WEIGHT


def _average_length(cells: list[str]) -> float:
    return sum(len(cell) for cell in cells) / len(cells)


def _fraction(cells: list[str], pattern: re.Pattern) -> float:
    return sum(1 for cell in cells if pattern.search(cell)) / len(cells)


def passes_cell_quality(cells: list[str]) -> bool:
    if not cells:
        return False
    return (
        _average_length(cells) <= CELL_MAX_AVG_CHARS
        and _fraction(cells, _SENTENCE_PUNCT_RE) <= CELL_MAX_PUNCT_FRACTION
        and _fraction(cells, _LIST_CELL_RE) <= CELL_MAX_LIST_FRACTION
    )


def passes_cell_quality_loose(cells: list[str]) -> bool:
    """Relaxed check for multiline cells, which legitimately hold prose."""
    if not cells:
        return False
    return (
        _average_length(cells) <= LOOSE_CELL_MAX_AVG_CHARS
        and _fraction(cells, _SENTENCE_PUNCT_RE) <= LOOSE_CELL_MAX_PUNCT_FRACTION
    )


def cell_quality_score(cells: list[str]) -> float:
    if not passes_cell_quality(cells):
        return 0.0
    return max(0.0, min(1.0, (CELL_MAX_AVG_CHARS - _average_length(cells)) / CELL_MAX_AVG_CHARS))


def has_code_like_cells(cells: list[str]) -> bool:
    if not cells:
        return False
    code_like = sum(1 for cell in cells if is_code_like_line(cell))
    return code_like / len(cells) > CODE_CELL_MAX_FRACTION


def score_vertical_guess(headers: list[str], values: list[str]) -> VerticalTableScore | None:
    """Score one header-count guess; None when a hard requirement fails."""
    header_count = len(headers)
    rows = [values[start:start + header_count] for start in range(0, len(values), header_count)]

    consistency = column_consistency_score(rows)
    if consistency <= 0:
        return None
    cell_score = cell_quality_score(values)
    if cell_score <= 0:
        return None

    header_score = header_quality_score(headers)
    total = (
        header_score * HEADER_WEIGHT
        + consistency * CONSISTENCY_WEIGHT
        + cell_score * CELL_WEIGHT
    )
    if header_count == 2:
        total *= TWO_COLUMN_PENALTY
    return VerticalTableScore(
        header_count=header_count,
        header_quality=header_score,
        column_consistency=consistency,
        cell_quality=cell_score,
        total=total,
    )


def _is_header_run_line(line: str) -> bool:
    if not is_header_like_line(line):
        return False
    if len(line.split()) > HEADER_RUN_MAX_WORDS:
        return False
    return classify_cell_shape(line) == "short"


def detect_vertical_table(lines: list[str]) -> VerticalTable | None:
    """
    Detect a transposed table: header lines followed by value lines, one
    row's values after another.
    """
    if len(lines) < VERTICAL_MIN_LINES:
        return None

    header_run = len(lines)
    for index, line in enumerate(lines):
        if not _is_header_run_line(line):
            header_run = index
            break
    min_header_count = header_run if header_run >= 3 else 2
    max_headers = min(VERTICAL_MAX_HEADERS, len(lines) - 2)

    best: VerticalTableScore | None = None
    second_total = 0.0
    for header_count in range(min_header_count, max_headers + 1):
        headers = lines[:header_count]
        values = lines[header_count:]
        if len(values) < header_count * 2:
            continue
        if header_count == 2 and len(values) < header_count * 3:
            continue
        if len(values) % header_count != 0:
            continue
        if not all(is_header_like_line(header) for header in headers):
            continue
        if not has_strong_header_uniqueness(headers):
            continue

        score = score_vertical_guess(headers, values)
        if score is None:
            continue
        if best is None or score.total > best.total:
            second_total = best.total if best else 0.0
            best = score
        elif score.total > second_total:
            second_total = score.total

    if best is None:
        return None
    if best.total < VERTICAL_MIN_SCORE:
        return None
    if best.total - second_total < VERTICAL_MIN_MARGIN:
        return None

    header_count = best.header_count
    values = lines[header_count:]
    rows = [values[start:start + header_count] for start in range(0, len(values), header_count)]
    return VerticalTable(headers=lines[:header_count], rows=rows, score=best)
