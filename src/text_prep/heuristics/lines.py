# -*- coding: utf-8 -*-
"""
Line predicates shared by the heuristic passes.
"""
import re

from ..fencing import is_fence_line

_HEADING_RE = re.compile(r"^\s*(#{1,6})\s+")
_TERMINAL_PUNCT_RE = re.compile(r"[.!?]$")
_NUMBERED_PREFIX_RE = re.compile(r"^\d+([.)]|\.)\s+")
_LIST_LINE_RE = re.compile(r"^\s*([-*+•]|\d+[.)])\s+")
_CONTINUATION_RE = re.compile(r"^\s*([-•*]|\d+[.)])\s+")
_LIST_NUMBER_RE = re.compile(r"^(\d+)[.)]\s+")
_TABLE_DIVIDER_RE = re.compile(r"^\s*\|?\s*:?-{2,}")
_REQUEST_RESPONSE_RE = re.compile(
    r"^\s*(Запрос|Ответ|Формат ошибок|Request|Response)\s*:?\s*$", re.IGNORECASE
)
_LETTER_RE = re.compile(r"[A-Za-zА-Яа-яЁё]")
_SYMBOL_RE = re.compile(r"[^A-Za-zА-Яа-яЁё0-9\s]")
_DIGIT_RE = re.compile(r"\d")

# Header-like line limits (vertical and horizontal pseudo-table headers)
HEADER_MAX_CHARS = 80
HEADER_MAX_WORDS = 6
HEADER_MAX_DIGITS = 4
HORIZONTAL_HEADER_MAX_CHARS = 60
HEADER_UNIQUENESS_RATIO = 0.8

# Symbols per letter above which a line reads as code
CODE_SYMBOL_RATIO = 0.6

PARAGRAPH_MIN_CHARS = 120
PARAGRAPH_MIN_WORDS = 12


def is_markdown_heading(line: str) -> bool:
    return bool(_HEADING_RE.match(line))


def heading_level(line: str) -> int | None:
    match = _HEADING_RE.match(line)
    return len(match.group(1)) if match else None


def make_heading_line(level: int, text: str) -> str:
    return f"{'#' * level} {text.strip()}"


def ends_with_terminal_punctuation(text: str) -> bool:
    return bool(_TERMINAL_PUNCT_RE.search(text.strip()))


def split_pseudo_row(line: str) -> list[str] | None:
    """Split on tabs, else on runs of 2+ spaces; None when neither occurs."""
    if "\t" in line:
        return [cell.strip() for cell in re.split(r"\t+", line)]
    if re.search(r"\s{2,}", line):
        return [cell.strip() for cell in re.split(r"\s{2,}", line)]
    return None


def has_explicit_alignment(line: str) -> bool:
    return split_pseudo_row(line) is not None


def is_pseudo_table_line(line: str) -> bool:
    if not line.strip():
        return False
    if "|" in line:
        return False
    if is_markdown_heading(line):
        return False
    cells = split_pseudo_row(line)
    if cells is None:
        return False
    return len([cell for cell in cells if cell]) >= 3


def is_pseudo_table_start(lines: list[str], index: int) -> bool:
    if index < 0 or index + 2 >= len(lines):
        return False
    return all(is_pseudo_table_line(lines[index + offset]) for offset in range(3))


def is_markdown_table_start(lines: list[str], index: int) -> bool:
    if index < 0 or index >= len(lines) - 1:
        return False
    header, divider = lines[index], lines[index + 1]
    if "|" not in header or not divider:
        return False
    return bool(_TABLE_DIVIDER_RE.match(divider))


def is_list_line(line: str) -> bool:
    return bool(_LIST_LINE_RE.match(line))


def is_list_block_start(lines: list[str], index: int) -> bool:
    if index >= len(lines) or not is_list_line(lines[index]):
        return False
    return index + 1 < len(lines) and is_list_line(lines[index + 1])


def get_list_number(line: str) -> int | None:
    match = _LIST_NUMBER_RE.match(line.strip())
    return int(match.group(1)) if match else None


def is_continuation_line(line: str) -> bool:
    if not line.strip():
        return False
    return line[:1].isspace() or bool(_CONTINUATION_RE.match(line))


def is_paragraph_like_line(line: str) -> bool:
    trimmed = line.strip()
    if len(trimmed) > PARAGRAPH_MIN_CHARS:
        return True
    return len(trimmed.split()) >= PARAGRAPH_MIN_WORDS and bool(re.search(r"[.!?]", trimmed))


def is_header_like_line(line: str) -> bool:
    """Short label-like line: no terminal punctuation, few words and digits."""
    trimmed = line.strip()
    if not trimmed:
        return False
    if len(trimmed) > HEADER_MAX_CHARS:
        return False
    if ends_with_terminal_punctuation(trimmed):
        return False
    if _NUMBERED_PREFIX_RE.match(trimmed):
        return False
    if trimmed.count(",") >= 2:
        return False
    if len(trimmed.split()) > HEADER_MAX_WORDS:
        return False
    return len(_DIGIT_RE.findall(trimmed)) <= HEADER_MAX_DIGITS


def is_header_like_horizontal(line: str) -> bool:
    return is_header_like_line(line) and len(line.strip()) <= HORIZONTAL_HEADER_MAX_CHARS


def has_strong_header_uniqueness(headers: list[str]) -> bool:
    normalized = [header.strip().lower() for header in headers]
    if not normalized:
        return False
    unique = {header for header in normalized if header}
    return len(unique) / len(normalized) >= HEADER_UNIQUENESS_RATIO


def is_code_like_line(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed:
        return False
    if re.search(r"[{}]", trimmed):
        return True
    if "=>" in trimmed or ";" in trimmed:
        return True
    if "`" in trimmed:
        return True
    if re.search(r"[\[\]]", trimmed) and re.search(r"[^\w\s]", trimmed):
        return True
    if "::" in trimmed or "<>" in trimmed:
        return True
    if trimmed.count(",") >= 2:
        return True
    if re.match(r"^\s*(enum|type|interface)\b", trimmed, re.IGNORECASE):
        return True
    if re.search(r":\s*\S", trimmed) and re.search(r"[{}\[\]]", trimmed):
        return True

    letters = len(_LETTER_RE.findall(trimmed))
    symbols = len(_SYMBOL_RE.findall(trimmed))
    return letters > 0 and symbols / letters > CODE_SYMBOL_RATIO


def count_code_like_lines(lines: list[str]) -> int:
    return sum(1 for line in lines if is_code_like_line(line))


def is_request_response_marker(line: str) -> bool:
    return bool(_REQUEST_RESPONSE_RE.match(line.strip()))


def is_cell_like_line(line: str) -> bool:
    if not line.strip():
        return False
    if is_markdown_heading(line) or is_list_line(line) or is_fence_line(line):
        return False
    return not is_paragraph_like_line(line)
