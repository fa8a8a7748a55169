# -*- coding: utf-8 -*-
"""
Structural tree for canonical text.

Parsing is delegated to markdown-it-py (CommonMark plus tables and
strikethrough). The token stream is folded into plain dataclasses, one per
node kind, each owning its children. render_markdown serializes the tree
back to canonical text: `-` bullets, backtick fences, list content indented
by the marker width, pipe tables, literal text escaped again.
"""
import re
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from .escaping import escape_heading_text, escape_inline, escape_line_starts

_WHITESPACE_RE = re.compile(r"\s+")
_BACKTICK_RUN_RE = re.compile(r"`+")


# ----------------------------------------------------------------------
# Inline nodes
# ----------------------------------------------------------------------


@dataclass
class Text:
    content: str


@dataclass
class Code:
    content: str


@dataclass
class Emphasis:
    children: list["Inline"] = field(default_factory=list)


@dataclass
class Strong:
    children: list["Inline"] = field(default_factory=list)


@dataclass
class Strike:
    children: list["Inline"] = field(default_factory=list)


@dataclass
class Link:
    href: str
    children: list["Inline"] = field(default_factory=list)
    title: str = ""
    autolink: bool = False


@dataclass
class Image:
    src: str
    alt: str = ""
    title: str = ""


@dataclass
class SoftBreak:
    pass


@dataclass
class HardBreak:
    pass


@dataclass
class HtmlInline:
    content: str


Inline = Text | Code | Emphasis | Strong | Strike | Link | Image | SoftBreak | HardBreak | HtmlInline
CONTAINER_INLINES = (Emphasis, Strong, Strike, Link)


# ----------------------------------------------------------------------
# Block nodes
# ----------------------------------------------------------------------


@dataclass
class Heading:
    level: int
    children: list[Inline] = field(default_factory=list)


@dataclass
class Paragraph:
    children: list[Inline] = field(default_factory=list)


@dataclass
class ListItem:
    children: list["Block"] = field(default_factory=list)


@dataclass
class BulletList:
    items: list[ListItem] = field(default_factory=list)
    tight: bool = True


@dataclass
class OrderedList:
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    tight: bool = True


@dataclass
class CodeBlock:
    content: str
    info: str = ""


@dataclass
class BlockQuote:
    children: list["Block"] = field(default_factory=list)


@dataclass
class ThematicBreak:
    pass


@dataclass
class TableCell:
    children: list[Inline] = field(default_factory=list)


@dataclass
class Table:
    header: list[TableCell] = field(default_factory=list)
    rows: list[list[TableCell]] = field(default_factory=list)
    align: list[str] = field(default_factory=list)


@dataclass
class HtmlBlock:
    content: str


Block = (
    Heading | Paragraph | BulletList | OrderedList | CodeBlock
    | BlockQuote | ThematicBreak | Table | HtmlBlock
)


@dataclass
class Document:
    children: list[Block] = field(default_factory=list)


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------


def create_parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("table").enable("strikethrough")


def parse_markdown(text: str, parser: MarkdownIt | None = None) -> Document:
    """Parse canonical text into a Document tree."""
    md = parser or create_parser()
    root = SyntaxTreeNode(md.parse(text or ""))
    return Document(children=_convert_blocks(root.children))


def _convert_blocks(nodes: list[SyntaxTreeNode]) -> list[Block]:
    blocks: list[Block] = []
    for node in nodes:
        block = _convert_block(node)
        if block is not None:
            blocks.append(block)
    return blocks


def _convert_block(node: SyntaxTreeNode) -> Block | None:
    kind = node.type
    if kind == "heading":
        return Heading(level=int(node.tag[1]), children=_inline_of(node))
    if kind == "paragraph":
        return Paragraph(children=_inline_of(node))
    if kind == "bullet_list":
        return BulletList(items=_list_items(node), tight=_is_tight(node))
    if kind == "ordered_list":
        start = node.attrGet("start")
        return OrderedList(
            items=_list_items(node),
            start=int(start) if start is not None else 1,
            tight=_is_tight(node),
        )
    if kind == "fence":
        return CodeBlock(content=node.content, info=(node.info or "").strip())
    if kind == "code_block":
        return CodeBlock(content=node.content)
    if kind == "blockquote":
        return BlockQuote(children=_convert_blocks(node.children))
    if kind == "hr":
        return ThematicBreak()
    if kind == "table":
        return _convert_table(node)
    if kind == "html_block":
        return HtmlBlock(content=node.content)
    return None


def _list_items(node: SyntaxTreeNode) -> list[ListItem]:
    return [
        ListItem(children=_convert_blocks(child.children))
        for child in node.children
        if child.type == "list_item"
    ]


def _is_tight(node: SyntaxTreeNode) -> bool:
    """markdown-it hides the paragraphs of tight lists."""
    for item in node.children:
        for child in item.children:
            if child.type == "paragraph" and not child.hidden:
                return False
    return True


def _convert_table(node: SyntaxTreeNode) -> Table:
    table = Table()
    for section in node.children:
        for row in section.children:
            cells = [TableCell(children=_inline_of(cell)) for cell in row.children]
            if section.type == "thead" and not table.header:
                table.header = cells
                table.align = [_cell_alignment(cell) for cell in row.children]
            else:
                table.rows.append(cells)
    return table


def _cell_alignment(cell: SyntaxTreeNode) -> str:
    style = str(cell.attrGet("style") or "")
    if "text-align:" in style:
        return style.split("text-align:", 1)[1].strip()
    return ""


def _inline_of(node: SyntaxTreeNode) -> list[Inline]:
    for child in node.children:
        if child.type == "inline":
            return _convert_inlines(child.children)
    return []


def _convert_inlines(nodes: list[SyntaxTreeNode]) -> list[Inline]:
    inlines: list[Inline] = []
    for node in nodes:
        kind = node.type
        if kind in ("text", "text_special"):
            if inlines and isinstance(inlines[-1], Text):
                inlines[-1].content += node.content
            else:
                inlines.append(Text(node.content))
        elif kind == "code_inline":
            inlines.append(Code(node.content))
        elif kind == "em":
            inlines.append(Emphasis(_convert_inlines(node.children)))
        elif kind == "strong":
            inlines.append(Strong(_convert_inlines(node.children)))
        elif kind == "s":
            inlines.append(Strike(_convert_inlines(node.children)))
        elif kind == "link":
            inlines.append(
                Link(
                    href=str(node.attrGet("href") or ""),
                    children=_convert_inlines(node.children),
                    title=str(node.attrGet("title") or ""),
                    autolink=node.markup == "autolink",
                )
            )
        elif kind == "image":
            inlines.append(
                Image(
                    src=str(node.attrGet("src") or ""),
                    alt=node.content,
                    title=str(node.attrGet("title") or ""),
                )
            )
        elif kind == "softbreak":
            inlines.append(SoftBreak())
        elif kind == "hardbreak":
            inlines.append(HardBreak())
        elif kind == "html_inline":
            inlines.append(HtmlInline(node.content))
    return inlines


# ----------------------------------------------------------------------
# Plain text
# ----------------------------------------------------------------------


def inline_text(nodes: list[Inline]) -> str:
    """Visible text of inline nodes, without markup."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, (Text, Code)):
            parts.append(node.content)
        elif isinstance(node, CONTAINER_INLINES):
            parts.append(inline_text(node.children))
        elif isinstance(node, Image):
            parts.append(node.alt)
        elif isinstance(node, (SoftBreak, HardBreak)):
            parts.append("\n")
    return "".join(parts)


def normalize_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def block_text(block: Block) -> str:
    """Visible text of a block and everything it contains."""
    if isinstance(block, (Heading, Paragraph)):
        return inline_text(block.children)
    if isinstance(block, (BulletList, OrderedList)):
        return "\n".join(block_text(child) for item in block.items for child in item.children)
    if isinstance(block, BlockQuote):
        return "\n".join(block_text(child) for child in block.children)
    if isinstance(block, CodeBlock):
        return block.content
    if isinstance(block, Table):
        rows = [block.header, *block.rows]
        return "\n".join(" ".join(inline_text(cell.children) for cell in row) for row in rows)
    if isinstance(block, HtmlBlock):
        return block.content
    return ""


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------


def render_markdown(document: Document) -> str:
    """Serialize a Document back to canonical text."""
    return _render_blocks(document.children, "\n\n").strip()


def _render_blocks(blocks: list[Block], separator: str) -> str:
    rendered = [_render_block(block) for block in blocks]
    return separator.join(part for part in rendered if part)


def _render_block(block: Block) -> str:
    if isinstance(block, Heading):
        return f"{'#' * block.level} {heading_markup(block)}"
    if isinstance(block, Paragraph):
        return escape_line_starts(render_inlines(block.children).strip())
    if isinstance(block, BulletList):
        return _render_list(block.items, block.tight, lambda index: "- ")
    if isinstance(block, OrderedList):
        return _render_list(block.items, block.tight, lambda index: f"{block.start + index}. ")
    if isinstance(block, CodeBlock):
        return _render_code_block(block)
    if isinstance(block, BlockQuote):
        inner = _render_blocks(block.children, "\n\n")
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
    if isinstance(block, ThematicBreak):
        return "---"
    if isinstance(block, Table):
        return _render_table(block)
    if isinstance(block, HtmlBlock):
        return block.content.rstrip("\n")
    return ""


def _render_list(items: list[ListItem], tight: bool, marker_for) -> str:
    separator = "\n" if tight else "\n\n"
    rendered: list[str] = []
    for index, item in enumerate(items):
        marker = marker_for(index)
        body = _render_blocks(item.children, separator)
        indent = " " * len(marker)
        lines = body.split("\n") if body else [""]
        first = f"{marker}{lines[0]}".rstrip()
        rest = [f"{indent}{line}" if line else "" for line in lines[1:]]
        rendered.append("\n".join([first, *rest]))
    return separator.join(rendered)


def _render_code_block(block: CodeBlock) -> str:
    content = block.content.rstrip("\n")
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(content)), default=0)
    fence = "`" * max(3, longest + 1)
    return f"{fence}{block.info}\n{content}\n{fence}"


def _render_table(table: Table) -> str:
    width = max([len(table.header), *(len(row) for row in table.rows)])
    if width == 0:
        return ""

    def row_line(cells: list[TableCell]) -> str:
        values = [render_cell(cell) for cell in cells]
        values += [""] * (width - len(values))
        return "| " + " | ".join(values) + " |"

    separators = []
    for index in range(width):
        align = table.align[index] if index < len(table.align) else ""
        separators.append({"left": ":---", "right": "---:", "center": ":---:"}.get(align, "---"))

    lines = [row_line(table.header), "| " + " | ".join(separators) + " |"]
    lines.extend(row_line(row) for row in table.rows)
    return "\n".join(lines)


def heading_markup(heading: Heading) -> str:
    """Heading content as it appears after the `#` marker."""
    return escape_heading_text(normalize_text(render_inlines(heading.children)))


def render_cell(cell: TableCell) -> str:
    return normalize_text(render_inlines(cell.children, in_table=True))


def render_inlines(nodes: list[Inline], in_table: bool = False) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, Text):
            parts.append(escape_inline(node.content, in_table))
        elif isinstance(node, Code):
            parts.append(_render_code_span(node.content))
        elif isinstance(node, Emphasis):
            parts.append(f"*{render_inlines(node.children, in_table)}*")
        elif isinstance(node, Strong):
            parts.append(f"**{render_inlines(node.children, in_table)}**")
        elif isinstance(node, Strike):
            parts.append(f"~~{render_inlines(node.children, in_table)}~~")
        elif isinstance(node, Link):
            if node.autolink:
                parts.append(f"<{inline_text(node.children) or node.href}>")
            else:
                title = f' "{node.title}"' if node.title else ""
                parts.append(f"[{render_inlines(node.children, in_table)}]({node.href}{title})")
        elif isinstance(node, Image):
            title = f' "{node.title}"' if node.title else ""
            parts.append(f"![{escape_inline(node.alt, in_table)}]({node.src}{title})")
        elif isinstance(node, SoftBreak):
            parts.append(" " if in_table else "\n")
        elif isinstance(node, HardBreak):
            parts.append(" " if in_table else "\\\n")
        elif isinstance(node, HtmlInline):
            parts.append(node.content)
    return "".join(parts)


def _render_code_span(content: str) -> str:
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(content)), default=0)
    ticks = "`" * (longest + 1)
    if content.startswith("`") or content.endswith("`"):
        return f"{ticks} {content} {ticks}"
    return f"{ticks}{content}{ticks}"
