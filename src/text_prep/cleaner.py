# -*- coding: utf-8 -*-
"""
Structural cleanup of the parsed document.

Steps, in order:
1. Node cleanup - drop empty inline/blocks, artifact and noise lines,
   optionally turn tables into key-value paragraphs
2. Section split - partition top-level blocks by heading
3. Empty heading merge - content of a heading without text joins the
   previous section
4. Empty section removal - heading sections without content are dropped
   unless a deeper heading follows
5. Deduplication - adjacent same-depth headings with the same text collapse
"""
import logging
import re
from dataclasses import dataclass, field

from .heuristics.artifacts import is_attachment_artifact_line
from .markdown_tree import (
    CONTAINER_INLINES,
    Block,
    BlockQuote,
    BulletList,
    Code,
    Document,
    HardBreak,
    Heading,
    Image,
    Inline,
    ListItem,
    OrderedList,
    Paragraph,
    SoftBreak,
    Table,
    TableCell,
    Text,
    block_text,
    inline_text,
    normalize_text,
)
from .models import NormalizationOptions

logger = logging.getLogger(__name__)

_LETTER_OR_DIGIT_RE = re.compile(r"[^\W_]")


@dataclass
class CleanStats:
    removed_attachment_artifacts: int = 0
    removed_noise_lines: int = 0
    removed_empty_headings: int = 0
    removed_empty_sections: int = 0
    removed_empty_blocks: int = 0
    collapsed_duplicate_headings: int = 0
    converted_tables: int = 0

    def warnings(self) -> list[str]:
        messages = [
            (self.removed_attachment_artifacts, "Removed {} attachment artifacts"),
            (self.removed_noise_lines, "Removed {} noise lines"),
            (self.removed_empty_headings, "Removed {} empty headings"),
            (self.removed_empty_sections, "Removed {} empty sections"),
            (self.removed_empty_blocks, "Removed {} empty blocks"),
            (self.collapsed_duplicate_headings, "Collapsed {} duplicate headings"),
            (self.converted_tables, "Converted {} tables to key-value blocks"),
        ]
        return [message.format(count) for count, message in messages if count > 0]


@dataclass
class Section:
    heading: Heading | None
    heading_text: str = ""
    content: list[Block] = field(default_factory=list)

    @property
    def depth(self) -> int | None:
        return self.heading.level if self.heading else None


@dataclass
class CleanResult:
    document: Document
    warnings: list[str] = field(default_factory=list)


def has_visible_content(nodes: list[Inline]) -> bool:
    if normalize_text(inline_text(nodes)):
        return True
    return any(isinstance(node, Image) and node.src for node in nodes)


def sections_text(blocks: list[Block]) -> str:
    return normalize_text("\n".join(block_text(block) for block in blocks))


def _split_lines(nodes: list[Inline]) -> list[list[Inline]]:
    lines: list[list[Inline]] = [[]]
    for node in nodes:
        if isinstance(node, (SoftBreak, HardBreak)):
            lines.append([])
        else:
            lines[-1].append(node)
    return lines


def _is_noise_line(nodes: list[Inline]) -> bool:
    """Text-only line without a single letter or digit, e.g. '-----' or '***'."""
    if any(not isinstance(node, Text) for node in nodes):
        return False
    text = inline_text(nodes).strip()
    return bool(text) and not _LETTER_OR_DIGIT_RE.search(text)


class DocumentCleaner:
    """Applies the cleanup steps to one document; holds per-call counters."""

    def __init__(self, options: NormalizationOptions):
        self.options = options
        self.stats = CleanStats()

    def clean(self, document: Document) -> CleanResult:
        blocks = self._clean_blocks(document.children)
        sections = self._split_sections(blocks)
        sections = self._merge_empty_headings(sections)
        sections = self._remove_empty_sections(sections)
        if self.options.dedupe_headings:
            sections = self._dedupe_sections(sections)

        children: list[Block] = []
        for section in sections:
            if section.heading:
                children.append(section.heading)
            children.extend(section.content)

        warnings = self.stats.warnings()
        if warnings:
            logger.debug(f"Cleaner: {', '.join(warnings)}")
        return CleanResult(document=Document(children=children), warnings=warnings)

    # ------------------------------------------------------------------
    # Node cleanup
    # ------------------------------------------------------------------

    def _clean_blocks(self, blocks: list[Block]) -> list[Block]:
        cleaned: list[Block] = []
        for block in blocks:
            cleaned.extend(self._clean_block(block))
        return cleaned

    def _clean_block(self, block: Block) -> list[Block]:
        if isinstance(block, Table):
            return self._clean_table(block)
        if isinstance(block, Heading):
            return self._clean_heading(block)
        if isinstance(block, Paragraph):
            return self._clean_paragraph(block)
        if isinstance(block, (BulletList, OrderedList)):
            items = [item for item in (self._clean_list_item(item) for item in block.items) if item]
            if not items:
                self.stats.removed_empty_blocks += 1
                return []
            block.items = items
            return [block]
        if isinstance(block, BlockQuote):
            block.children = self._clean_blocks(block.children)
            return [block] if block.children else []
        return [block]

    def _clean_inlines(self, nodes: list[Inline]) -> list[Inline]:
        cleaned: list[Inline] = []
        for node in nodes:
            if isinstance(node, Text):
                if node.content:
                    cleaned.append(node)
            elif isinstance(node, CONTAINER_INLINES):
                node.children = self._clean_inlines(node.children)
                if node.children:
                    cleaned.append(node)
            elif isinstance(node, Code):
                if node.content.strip():
                    cleaned.append(node)
            else:
                cleaned.append(node)
        return cleaned

    def _is_artifact(self, text: str) -> bool:
        if self.options.drop_artifacts and is_attachment_artifact_line(text):
            self.stats.removed_attachment_artifacts += 1
            return True
        return False

    def _clean_heading(self, heading: Heading) -> list[Block]:
        heading.children = self._clean_inlines(heading.children)
        if not has_visible_content(heading.children):
            self.stats.removed_empty_headings += 1
            return []
        if self._is_artifact(normalize_text(inline_text(heading.children))):
            return []
        return [heading]

    def _clean_paragraph(self, paragraph: Paragraph) -> list[Block]:
        children = self._clean_inlines(paragraph.children)
        if self.options.drop_noise_lines:
            children = self._drop_noise_lines(children)
        paragraph.children = children
        if not has_visible_content(children):
            self.stats.removed_empty_blocks += 1
            return []
        if self._is_artifact(normalize_text(inline_text(children))):
            return []
        return [paragraph]

    def _drop_noise_lines(self, nodes: list[Inline]) -> list[Inline]:
        lines = _split_lines(nodes)
        kept = [line for line in lines if not _is_noise_line(line)]
        removed = len(lines) - len(kept)
        if not removed:
            return nodes
        self.stats.removed_noise_lines += removed
        joined: list[Inline] = []
        for index, line in enumerate(kept):
            if index:
                joined.append(SoftBreak())
            joined.extend(line)
        return joined

    def _clean_list_item(self, item: ListItem) -> ListItem | None:
        item.children = self._clean_blocks(item.children)
        if not item.children:
            self.stats.removed_empty_blocks += 1
            return None
        if self._is_artifact(sections_text(item.children)):
            return None
        return item

    def _clean_table(self, table: Table) -> list[Block]:
        if self.options.table_mode == "kv":
            paragraphs = table_to_key_value_blocks(table)
            if paragraphs:
                self.stats.converted_tables += 1
                return paragraphs

        for cell in [*table.header, *(cell for row in table.rows for cell in row)]:
            cell.children = self._clean_inlines(cell.children)
        return [table]

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _split_sections(self, blocks: list[Block]) -> list[Section]:
        sections = [Section(heading=None)]
        for block in blocks:
            if isinstance(block, Heading):
                sections.append(
                    Section(heading=block, heading_text=normalize_text(inline_text(block.children)))
                )
            else:
                sections[-1].content.append(block)
        return sections

    def _merge_empty_headings(self, sections: list[Section]) -> list[Section]:
        merged: list[Section] = []
        for section in sections:
            if section.heading and not section.heading_text:
                self.stats.removed_empty_headings += 1
                if merged:
                    merged[-1].content.extend(section.content)
                else:
                    merged.append(Section(heading=None, content=list(section.content)))
                continue
            merged.append(section)
        return merged

    def _remove_empty_sections(self, sections: list[Section]) -> list[Section]:
        kept: list[Section] = []
        for index, section in enumerate(sections):
            if sections_text(section.content) or _has_media(section.content):
                kept.append(section)
                continue
            if not section.heading:
                continue
            following = sections[index + 1] if index + 1 < len(sections) else None
            if following and following.depth and following.depth > section.depth:
                kept.append(section)
                continue
            self.stats.removed_empty_sections += 1
        return kept

    def _dedupe_sections(self, sections: list[Section]) -> list[Section]:
        deduped: list[Section] = []
        for section in sections:
            previous = deduped[-1] if deduped else None
            if (
                section.heading
                and previous is not None
                and previous.heading
                and section.heading_text
                and previous.depth == section.depth
                and previous.heading_text.lower() == section.heading_text.lower()
            ):
                self.stats.collapsed_duplicate_headings += 1
                fingerprint = sections_text(previous.content)
                if not fingerprint or fingerprint != sections_text(section.content):
                    previous.content.extend(section.content)
                continue
            deduped.append(section)
        return deduped


def _has_media(blocks: list[Block]) -> bool:
    return any(
        isinstance(block, Paragraph) and any(isinstance(node, Image) for node in block.children)
        for block in blocks
    )


def _cell_text(cells: list[TableCell], index: int) -> str:
    if index >= len(cells):
        return ""
    return normalize_text(inline_text(cells[index].children))


def table_to_key_value_blocks(table: Table) -> list[Block] | None:
    """
    Rewrite a table as `key: value` paragraphs.

    Two columns give one pair per row; wider tables with a header give one
    `Header: cell; ...` paragraph per row. None when neither applies.
    """
    rows = [table.header, *table.rows] if table.header else list(table.rows)
    if not rows:
        return None
    column_count = max(len(row) for row in rows)
    if column_count == 0:
        return None
    has_header = len(rows) > 1

    lines: list[str] = []
    if column_count == 2:
        for row in rows[1:] if has_header else rows:
            key, value = _cell_text(row, 0), _cell_text(row, 1)
            if key and value:
                lines.append(f"{key}: {value}")
            elif key:
                lines.append(f"{key}:")
            elif value:
                lines.append(value)
    elif has_header:
        headers = [
            _cell_text(rows[0], index) or f"Column {index + 1}"
            for index in range(len(rows[0]))
        ]
        for row in rows[1:]:
            pairs = [f"{header}: {_cell_text(row, index)}".strip() for index, header in enumerate(headers)]
            line = "; ".join(pairs).strip()
            if line:
                lines.append(line)
    else:
        return None

    if not lines:
        return None
    return [Paragraph(children=[Text(line)]) for line in lines]


def clean_document(document: Document, options: NormalizationOptions) -> CleanResult:
    return DocumentCleaner(options).clean(document)
