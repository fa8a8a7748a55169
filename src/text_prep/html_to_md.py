# -*- coding: utf-8 -*-
"""
Convert sanitized HTML into canonical structured text.

Conversion is delegated to markdownify. The subclass below pins the output
conventions (ATX headings, `-` bullets, backtick fences tagged with the
class language) and replaces the pieces markdownify does differently:
literal text escaping, table layout, empty wrappers and links without text.
"""
import re

from bs4 import BeautifulSoup
from bs4.element import Tag
from markdownify import ATX, SPACES, MarkdownConverter

from .escaping import escape_markdown
from .fencing import FenceTracker

_WHITESPACE_RE = re.compile(r"\s+")
_BACKTICK_RUN_RE = re.compile(r"`+")
_EMPTY_HEADING_RE = re.compile(r"^#{1,6}\s*$")
_CODE_LANGUAGE_RE = re.compile(r"^(?:language|lang)-([\w+#.-]+)$")


def collapse_inline_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def escape_pipe(value: str) -> str:
    return value.replace("|", "\\|")


def format_row(cells: list[str]) -> str:
    return "| " + " | ".join(escape_pipe(cell) for cell in cells) + " |"


def normalize_cells(cells: list[str], width: int) -> list[str]:
    filled = list(cells) + [""] * max(0, width - len(cells))
    return filled[:width]


def tidy_output(text: str) -> str:
    """Trim trailing spaces, drop empty headings and collapse blank runs outside fences."""
    output: list[str] = []
    fence = FenceTracker()
    for line in text.split("\n"):
        if fence.feed(line) or fence.inside:
            output.append(line)
            continue
        line = line.rstrip()
        if _EMPTY_HEADING_RE.match(line):
            continue
        if not line and output and not output[-1]:
            continue
        output.append(line)
    return "\n".join(output).strip()


def code_language(pre: Tag) -> str:
    """Language named by a `language-*` or `lang-*` class on the block or its code."""
    for candidate in (pre.find("code"), pre):
        if candidate is None:
            continue
        for css_class in candidate.get("class", []) or []:
            match = _CODE_LANGUAGE_RE.match(css_class)
            if match:
                return match.group(1)
    return ""


class CanonicalMarkdownConverter(MarkdownConverter):
    """markdownify converter emitting the canonical text conventions."""

    class Options(MarkdownConverter.DefaultOptions):
        autolinks = False
        bullets = "-"
        heading_style = ATX
        newline_style = SPACES

    def escape(self, text, parent_tags):
        if not text:
            return ""
        return escape_markdown(text)

    def convert_a(self, el, text, parent_tags):
        href = el.get("href") or ""
        if href and not text.strip():
            text = self.escape(href, parent_tags)
        return super().convert_a(el, text, parent_tags)

    def convert_div(self, el, text, parent_tags):
        if not text.strip():
            return ""
        return super().convert_div(el, text, parent_tags)

    def convert_span(self, el, text, parent_tags):
        if not text.strip():
            return " " if text else ""
        return text

    def convert_pre(self, el, text, parent_tags):
        content = text.strip("\n")
        if not content.strip():
            return ""
        longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(content)), default=0)
        fence = "`" * max(3, longest + 1)
        return f"\n\n{fence}{code_language(el)}\n{content}\n{fence}\n\n"

    def convert_table(self, el, text, parent_tags):
        """
        Lay the table out as a pipe table.

        The header is the first thead row, else the first row overall.
        Every row is padded to the widest row.
        """
        all_rows = [row for row in el.find_all("tr") if row.find_parent("table") is el]
        if not all_rows:
            return ""
        head_rows = [row for row in all_rows if row.find_parent("thead") is not None]
        header_row = head_rows[0] if head_rows else all_rows[0]
        body_rows = [row for row in all_rows if row is not header_row]

        header_cells = self._cells_of(header_row)
        body_cells = [self._cells_of(row) for row in body_rows]
        width = max([len(header_cells), *(len(row) for row in body_cells), 1])

        lines = [
            format_row(normalize_cells(header_cells, width)),
            "| " + " | ".join(["---"] * width) + " |",
        ]
        lines.extend(format_row(normalize_cells(row, width)) for row in body_cells)
        return "\n\n" + "\n".join(lines) + "\n\n"

    def _cells_of(self, row: Tag) -> list[str]:
        cells = []
        for cell in row.find_all(["th", "td"], recursive=False):
            parent_tags = {cell.name, "_inline"}
            content = "".join(
                self.process_element(child, parent_tags=parent_tags) for child in cell.children
            )
            cells.append(collapse_inline_whitespace(content))
        return cells

    def convert(self, html):
        soup = BeautifulSoup(html or "", "lxml")
        return tidy_output(self.convert_soup(soup))


def html_to_markdown(safe_html: str) -> str:
    """Convert sanitized HTML to canonical structured text."""
    return CanonicalMarkdownConverter().convert(safe_html)
