# -*- coding: utf-8 -*-
"""
Pseudo-table detection and conversion.

Recognizes two layouts of tabular data pasted as plain lines:

- aligned rows, cells separated by tabs or runs of two or more spaces;
- vertical (transposed) blocks, a run of header lines followed by the
  values of each row in turn, optionally with multiline cells.

Accepted blocks are rewritten as pipe tables followed by a blank line.
Existing pipe tables pass through untouched.
"""
import logging
import re
from dataclasses import dataclass

from ..fencing import FenceTracker
from .lines import (
    HEADER_MAX_CHARS,
    count_code_like_lines,
    ends_with_terminal_punctuation,
    get_list_number,
    has_explicit_alignment,
    has_strong_header_uniqueness,
    is_cell_like_line,
    is_continuation_line,
    is_fence_line,
    is_header_like_horizontal,
    is_header_like_line,
    is_list_block_start,
    is_list_line,
    is_markdown_heading,
    is_markdown_table_start,
    is_paragraph_like_line,
    is_request_response_marker,
    make_heading_line,
    split_pseudo_row,
)
from .scoring import (
    COLUMN_DOMINANCE,
    VerticalTable,
    column_consistency_score,
    detect_vertical_table,
    has_code_like_cells,
    passes_cell_quality,
    passes_cell_quality_loose,
)

logger = logging.getLogger(__name__)

TITLE_HEADING_LEVEL = 3
MIN_BLOCK_LINES = 3
MIN_ALIGNED_COLUMNS = 3
# Explicitly aligned lines needed to override the code-like and API checks
ALIGNMENT_OVERRIDE_LINES = 3
CODE_SAMPLE_LINES = 8
CODE_LIKE_REJECT_LINES = 2
MULTILINE_MIN_HEADERS = 3
MULTILINE_MAX_HEADERS = 12
BLOCK_TITLE_MAX_CHARS = 60
API_SAMPLE_LINES = 8
API_MIN_SAMPLE = 3
API_LIKE_RATIO = 0.7

EMPTY_CELL = "—"
CELL_LINE_BREAK = "<br>"

_HTTP_METHOD_RE = re.compile(r"^(GET|POST|PUT|PATCH|DELETE)$", re.IGNORECASE)
_PATH_START_RE = re.compile(r"^/\S+")
_API_LIKE_RES = (
    re.compile(r"^[A-Z]{2,8}$"),
    re.compile(r"^/\S+$"),
    re.compile(r"^[A-Za-z]{3,12}$"),
)


@dataclass
class CandidateBlock:
    start: int
    end: int
    lines: list[str]
    alignment_lines: int


@dataclass
class MultilineTable:
    headers: list[str]
    rows: list[list[str]]
    end: int


def is_api_stanza_start(lines: list[str], index: int) -> bool:
    current = lines[index].strip() if index < len(lines) else ""
    following = lines[index + 1].strip() if index + 1 < len(lines) else ""
    return bool(_HTTP_METHOD_RE.match(current)) and bool(_PATH_START_RE.match(following))


def is_api_like_line(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed:
        return False
    return any(pattern.match(trimmed) for pattern in _API_LIKE_RES)


def is_api_stanza_like_region(lines: list[str]) -> bool:
    sample = [line for line in lines[:API_SAMPLE_LINES] if line.strip()]
    if len(sample) < API_MIN_SAMPLE:
        return False
    api_like = sum(1 for line in sample if is_api_like_line(line))
    return api_like / len(sample) >= API_LIKE_RATIO


def escape_cell(value: str) -> str:
    return value.replace("|", "\\|").strip()


def build_markdown_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    safe_headers = [escape_cell(header or EMPTY_CELL) for header in headers]
    lines = [
        f"| {' | '.join(safe_headers)} |",
        f"| {' | '.join('---' for _ in safe_headers)} |",
    ]
    for row in rows:
        cells = [
            escape_cell((row[index] if index < len(row) else "") or EMPTY_CELL)
            for index in range(len(safe_headers))
        ]
        lines.append(f"| {' | '.join(cells)} |")
    return lines


def is_plausible_title(line: str) -> bool:
    """A short label line directly above a table, never a prose sentence."""
    trimmed = line.strip()
    if not trimmed or len(trimmed) > HEADER_MAX_CHARS:
        return False
    if is_markdown_heading(trimmed) or is_fence_line(trimmed) or is_list_line(trimmed):
        return False
    if has_explicit_alignment(trimmed) or "|" in trimmed:
        return False
    return not is_paragraph_like_line(trimmed) and not ends_with_terminal_punctuation(trimmed)


def detect_vertical_table_multiline(lines: list[str], start: int) -> MultilineTable | None:
    """
    Detect a vertical table whose cells may span several lines.

    Header lines come first; each following non-blank line starts a new cell
    unless it is an indented or bulleted continuation of the current one.
    The block ends at a fence, heading or request/response marker, or at
    blank lines once at least one full row has been collected.
    """
    if start < 0 or start >= len(lines):
        return None
    first = lines[start]
    if not is_header_like_line(first) or is_request_response_marker(first):
        return None
    if has_explicit_alignment(first):
        return None

    headers: list[str] = []
    cursor = start
    while cursor < len(lines) and len(headers) < MULTILINE_MAX_HEADERS:
        line = lines[cursor]
        if not line.strip() or not is_header_like_line(line) or has_explicit_alignment(line):
            break
        headers.append(line.strip())
        cursor += 1
    if len(headers) < MULTILINE_MIN_HEADERS or not has_strong_header_uniqueness(headers):
        return None

    cells: list[list[str]] = []
    current: list[str] = []
    blank_run = 0
    last_list_number: int | None = None
    in_list_block = False
    end = len(lines)

    index = cursor
    while index < len(lines):
        line = lines[index]
        if is_fence_line(line) or is_markdown_heading(line) or is_request_response_marker(line):
            end = index
            break

        if not line.strip():
            blank_run += 1
            if len(cells) >= len(headers):
                lookahead = index + 1
                while lookahead < len(lines) and not lines[lookahead].strip():
                    lookahead += 1
                next_line = lines[lookahead] if lookahead < len(lines) else ""
                if (
                    is_request_response_marker(next_line)
                    or is_markdown_heading(next_line)
                    or is_header_like_line(next_line)
                    or blank_run >= 2
                ):
                    end = index + 1
                    break
            index += 1
            continue
        blank_run = 0

        list_number = get_list_number(line)
        restarts_list = (
            in_list_block and list_number == 1 and last_list_number is not None and last_list_number > 1
        )
        if current and is_continuation_line(line) and not restarts_list:
            current.append(line)
            if list_number:
                in_list_block = True
                last_list_number = list_number
            index += 1
            continue

        if current:
            cells.append(current)
        current = [line]
        in_list_block = list_number is not None
        last_list_number = list_number
        index += 1

    if current:
        cells.append(current)

    header_count = len(headers)
    if not cells or len(cells) % header_count != 0:
        return None

    texts = [CELL_LINE_BREAK.join(part.strip() for part in cell) for cell in cells]
    rows = [texts[offset:offset + header_count] for offset in range(0, len(texts), header_count)]
    if not passes_cell_quality_loose(texts):
        return None
    return MultilineTable(headers=headers, rows=rows, end=end)


class PseudoTableConverter:
    """Single scan over the text, rewriting each accepted block in place."""

    def __init__(self, text: str, max_heading_depth: int):
        self.lines = text.split("\n")
        self.heading_level = min(max_heading_depth, TITLE_HEADING_LEVEL)
        self.output: list[str] = []
        self.converted = 0

    def convert(self) -> tuple[str, int]:
        lines = self.lines
        fence = FenceTracker()
        index = 0
        while index < len(lines):
            line = lines[index]
            if fence.feed(line):
                self.output.append(line)
                index += 1
                continue
            if fence.inside or is_markdown_heading(line):
                self.output.append(line)
                index += 1
                continue
            if is_markdown_table_start(lines, index):
                index = self._pass_through_table(index)
                continue

            multiline = detect_vertical_table_multiline(lines, index)
            if multiline:
                self._apply_title(self._title_before(index))
                self._emit_table(multiline.headers, multiline.rows)
                index = max(multiline.end, index + 1)
                continue

            candidate = self._find_candidate_block(index)
            if candidate is None:
                self.output.append(line)
                index += 1
                continue

            if not self._convert_candidate(candidate):
                self.output.extend(candidate.lines)
            index = candidate.end

        return "\n".join(self.output).rstrip(), self.converted

    def _pass_through_table(self, index: int) -> int:
        lines = self.lines
        while index < len(lines) and lines[index].strip() and "|" in lines[index]:
            self.output.append(lines[index])
            index += 1
        return index

    def _title_before(self, index: int) -> str | None:
        if index <= 0:
            return None
        previous = self.lines[index - 1]
        return previous.strip() if is_plausible_title(previous) else None

    def _apply_title(self, title: str | None) -> None:
        if not title:
            return
        heading = make_heading_line(self.heading_level, title)
        if self.output and self.output[-1].strip() == title:
            self.output[-1] = heading
        else:
            self.output.append(heading)

    def _emit_table(self, headers: list[str], rows: list[list[str]]) -> None:
        self.output.extend(build_markdown_table(headers, rows))
        self.output.append("")
        self.converted += 1

    def _find_candidate_block(self, start: int) -> CandidateBlock | None:
        lines = self.lines
        first = lines[start]
        if not first.strip() or is_markdown_heading(first) or is_fence_line(first):
            return None
        if is_list_block_start(lines, start) or not is_cell_like_line(first):
            return None
        following = lines[start + 1] if start + 1 < len(lines) else ""
        if not has_explicit_alignment(first) and has_explicit_alignment(following):
            return None
        if is_api_stanza_start(lines, start):
            aligned = sum(1 for line in lines[start:start + 3] if has_explicit_alignment(line))
            if aligned < 2:
                return None

        block: list[str] = []
        alignment_lines = 0
        index = start
        while index < len(lines):
            current = lines[index]
            if not current.strip() or is_fence_line(current) or is_markdown_heading(current):
                break
            if is_list_block_start(lines, index) or not is_cell_like_line(current):
                break
            if is_api_stanza_start(lines, index) and alignment_lines < ALIGNMENT_OVERRIDE_LINES:
                break
            if has_explicit_alignment(current):
                alignment_lines += 1
            block.append(current)
            index += 1

        # A header plus a single data row is enough when both are aligned
        if len(block) < MIN_BLOCK_LINES and not (len(block) == 2 and alignment_lines == 2):
            return None
        return CandidateBlock(start=start, end=index, lines=block, alignment_lines=alignment_lines)

    def _convert_candidate(self, candidate: CandidateBlock) -> bool:
        block = candidate.lines
        has_alignment = candidate.alignment_lines >= min(ALIGNMENT_OVERRIDE_LINES, len(block))

        if candidate.alignment_lines < ALIGNMENT_OVERRIDE_LINES:
            if count_code_like_lines(block[:CODE_SAMPLE_LINES]) >= CODE_LIKE_REJECT_LINES:
                logger.debug(f"Skipping code-like block at line {candidate.start}")
                return False
            if is_api_stanza_like_region(block):
                logger.debug(f"Skipping API stanza block at line {candidate.start}")
                return False

        title = self._title_before(candidate.start)
        if has_alignment:
            return self._convert_aligned(block, title)
        return self._convert_vertical(block, title)

    def _convert_aligned(self, block: list[str], title: str | None) -> bool:
        rows = [split_pseudo_row(line) for line in block]
        if any(row is None for row in rows):
            return False
        column_count = len(rows[0])
        if column_count < MIN_ALIGNED_COLUMNS or any(len(row) != column_count for row in rows):
            return False

        headers = [cell.strip() or f"Col{position + 1}" for position, cell in enumerate(rows[0])]
        data_rows = rows[1:]
        data_cells = [cell.strip() for row in data_rows for cell in row]
        if not data_rows:
            return False
        if not all(is_header_like_horizontal(header) for header in headers):
            return False
        if not has_strong_header_uniqueness(headers):
            return False
        if not passes_cell_quality(data_cells) or has_code_like_cells(headers + data_cells):
            return False
        if column_consistency_score(data_rows) < COLUMN_DOMINANCE:
            return False

        self._apply_title(title)
        self._emit_table(headers, data_rows)
        return True

    def _convert_vertical(self, block: list[str], title: str | None) -> bool:
        stripped = [line.strip() for line in block]
        vertical: VerticalTable | None = detect_vertical_table(stripped)
        if vertical is None and len(block) >= 4:
            first = stripped[0]
            if (
                len(first) <= BLOCK_TITLE_MAX_CHARS
                and not is_list_line(first)
                and not is_markdown_heading(first)
                and not is_paragraph_like_line(first)
            ):
                vertical = detect_vertical_table(stripped[1:])
                if vertical is not None:
                    title = first
        if vertical is None:
            return False

        logger.debug(
            f"Vertical table with {len(vertical.headers)} columns "
            f"(score {vertical.score.total:.2f})"
        )
        self._apply_title(title)
        self._emit_table(vertical.headers, vertical.rows)
        return True


def convert_pseudo_tables(text: str, options) -> tuple[str, int]:
    """Rewrite aligned and vertical pseudo-tables as pipe tables."""
    return PseudoTableConverter(text, options.max_heading_depth).convert()
