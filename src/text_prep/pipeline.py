# -*- coding: utf-8 -*-
"""
Text preparation pipeline.

Turns pasted content into canonical text, an outline and warnings:
0. Truncation - cut input to max_chars before any parsing
1. HTML conversion - sanitize and convert when the input is HTML
2. Raw normalization - line endings, trailing whitespace (alignment kept)
3. Heuristics - artifacts, pseudo-headings, pseudo-tables, fences, tokens
4. Tree cleanup - parse, drop empties, merge and dedupe sections
5. Canonical normalization - full whitespace and list canonicalization
6. Formatting - block spacing and table pipe compaction (never raises)
"""
import logging
from dataclasses import dataclass, field

from .cleaner import clean_document
from .detect import looks_like_html
from .formatter import compact_table_pipes, format_markdown
from .heuristics import run_heuristics
from .html_to_md import html_to_markdown
from .markdown_tree import Document, create_parser, parse_markdown, render_markdown
from .models import NormalizationOptions, PrepareResult
from .normalize import normalize_markdown
from .outline import build_outline, build_stats
from .sanitize import sanitize_html

logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    """Working state of one prepare() call."""

    text: str
    options: NormalizationOptions
    document: Document | None = None
    warnings: list[str] = field(default_factory=list)
    steps_applied: list[str] = field(default_factory=list)


class PreparePipeline:
    """
    Preparation pipeline for pasted HTML and plain text.

    Holds no per-call state; every call works on its own PipelineState.
    """

    def __init__(self):
        self._parser = create_parser()

    def process(self, text: str | None, options: NormalizationOptions | None = None) -> PrepareResult:
        """
        Run every stage over the input.

        Args:
            text: Raw pasted content, HTML or plain text
            options: Normalization options, defaults when omitted

        Returns:
            PrepareResult with cleaned text, outline, stats and warnings
        """
        state = PipelineState(text=text or "", options=options or NormalizationOptions())

        self._step_truncate(state)

        if looks_like_html(state.text):
            self._step_convert_html(state)

        state.text = normalize_markdown(
            state.text,
            collapse_spaces=False,
            format_lists=False,
            normalize_whitespace=False,
        )
        state.steps_applied.append("normalize_raw")

        heuristics = run_heuristics(state.text, state.options)
        state.text = heuristics.text
        state.warnings.extend(heuristics.warnings)
        state.steps_applied.append("heuristics")

        self._step_clean_tree(state)

        state.text = normalize_markdown(render_markdown(state.document))
        state.steps_applied.append("normalize_canonical")

        state.text = compact_table_pipes(format_markdown(state.text)).strip()
        state.steps_applied.append("format")

        outline = build_outline(state.document, state.options.max_heading_depth)
        stats = build_stats(state.text)
        logger.debug(
            f"Prepared {stats.chars} chars, {len(outline)} outline entries "
            f"(steps: {', '.join(state.steps_applied)})"
        )
        return PrepareResult(
            cleaned_text=state.text,
            outline=outline,
            stats=stats,
            warnings=state.warnings,
        )

    def _step_truncate(self, state: PipelineState) -> None:
        """Step 0: Cut the input to max_chars; always warns when it cuts."""
        max_chars = state.options.max_chars
        if len(state.text) > max_chars:
            state.text = state.text[:max_chars]
            state.warnings.append(f"Truncated input to {max_chars} chars")
            state.steps_applied.append("truncate")
            logger.debug(f"Input truncated to {max_chars} chars")

    def _step_convert_html(self, state: PipelineState) -> None:
        """Step 1: Sanitize HTML to the allow-list, then convert it to text."""
        safe_html = sanitize_html(state.text)
        state.text = html_to_markdown(safe_html)
        state.steps_applied.append("html_to_markdown")
        logger.debug(f"Converted HTML input to {len(state.text)} chars of text")

    def _step_clean_tree(self, state: PipelineState) -> None:
        """Step 4: Parse into the structural tree and clean it."""
        document = parse_markdown(state.text, self._parser)
        cleaned = clean_document(document, state.options)
        state.document = cleaned.document
        state.warnings.extend(cleaned.warnings)
        state.steps_applied.append("clean_tree")


# Global pipeline instance
prepare_pipeline = PreparePipeline()


def prepare(text: str | None, options: NormalizationOptions | dict | None = None) -> PrepareResult:
    """
    Prepare pasted content for downstream consumers.

    Options may be given as a NormalizationOptions instance or as a dict
    using either the snake_case names or the camelCase aliases.
    """
    if isinstance(options, dict):
        options = NormalizationOptions.model_validate(options)
    return prepare_pipeline.process(text, options)
