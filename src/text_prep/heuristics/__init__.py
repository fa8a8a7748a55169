# -*- coding: utf-8 -*-
"""
Heuristic structure recovery.

Ordered chain of text-to-text passes run between the two normalization
passes:
a. Attachment artifacts - drop file-name, size-caption and glyph lines
b. Pseudo-headings - promote numbered, table-title and hinted lines
c. Pseudo-tables - rewrite aligned and vertical blocks as pipe tables
d. Accidental fences - unwrap unlabelled fences around prose
e. Process blocks - split step/requirement runs (opt-in)
f. Request/response payloads - fence the lines after markers
g. Technical tokens - wrap URLs, endpoints, field paths and enums in code

Each pass returns the rewritten text and a count; non-zero counts become
warnings.
"""
import logging
from dataclasses import dataclass, field

from .artifacts import remove_attachment_artifacts
from .fences import unwrap_accidental_fences, wrap_request_response_blocks
from .headings import promote_pseudo_headings
from .process_blocks import restructure_process_blocks
from .tables import convert_pseudo_tables
from .tokens import wrap_technical_tokens

logger = logging.getLogger(__name__)

HEURISTIC_PASSES = [
    (remove_attachment_artifacts, "Removed {count} attachment artifact lines"),
    (promote_pseudo_headings, "Promoted {count} pseudo-headings"),
    (convert_pseudo_tables, "Converted {count} pseudo-tables to Markdown tables"),
    (unwrap_accidental_fences, "Unwrapped {count} accidental fenced blocks"),
    (restructure_process_blocks, "Restructured {count} process blocks"),
    (wrap_request_response_blocks, "Fenced {count} request/response blocks"),
    (wrap_technical_tokens, "Wrapped {count} technical tokens in inline code"),
]


@dataclass
class HeuristicResult:
    """Text after every pass plus the warnings they reported."""

    text: str
    warnings: list[str] = field(default_factory=list)


def run_heuristics(text: str, options) -> HeuristicResult:
    result = HeuristicResult(text=text)
    for heuristic, message in HEURISTIC_PASSES:
        result.text, count = heuristic(result.text, options)
        if count:
            logger.debug(f"{heuristic.__name__}: {count}")
            result.warnings.append(message.format(count=count))
    return result


__all__ = ["HeuristicResult", "run_heuristics"]
