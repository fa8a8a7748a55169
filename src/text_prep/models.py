# -*- coding: utf-8 -*-
"""
Pydantic data models for the preparation pipeline and the API.
"""
from re import Pattern
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .config import settings

TableMode = Literal["keep", "kv"]


class NormalizationOptions(BaseModel):
    """
    Options accepted by prepare().

    Field names are snake_case in Python; the JSON payload uses the
    camelCase aliases. Unknown keys are rejected.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    max_heading_depth: int = Field(
        default=settings.DEFAULT_MAX_HEADING_DEPTH,
        ge=1,
        le=6,
        alias="maxHeadingDepth",
        description="Deepest heading level kept in the outline",
    )
    table_mode: TableMode = Field(
        default=settings.DEFAULT_TABLE_MODE,
        alias="tableMode",
        description="keep pipe tables, or flatten them to key: value lines",
    )
    dedupe_headings: bool = Field(default=True, alias="dedupeHeadings")
    drop_artifacts: bool = Field(default=True, alias="dropArtifacts")
    drop_noise_lines: bool = Field(default=True, alias="dropNoiseLines")
    max_chars: int = Field(
        default=settings.DEFAULT_MAX_CHARS,
        gt=0,
        alias="maxChars",
        description="Input is truncated to this many characters",
    )
    promote_pseudo_headings: bool = Field(default=True, alias="promotePseudoHeadings")
    heading_hints: list[str | Pattern[str]] = Field(
        default_factory=list,
        alias="headingHints",
        description="Literal substrings (case-insensitive) or compiled patterns",
    )
    restructure_process_blocks: bool = Field(
        default=False, alias="restructureProcessBlocks"
    )
    unwrap_accidental_fences: bool = Field(default=True, alias="unwrapAccidentalFences")


class PrepareStats(BaseModel):
    """Size metrics of the cleaned text."""

    chars: int = 0
    lines: int = 0
    approx_tokens: int = Field(default=0, serialization_alias="approxTokens")


class PrepareResult(BaseModel):
    """Output of prepare()."""

    cleaned_text: str = Field(default="", serialization_alias="cleanedText")
    outline: list[str] = Field(default_factory=list)
    stats: PrepareStats = Field(default_factory=PrepareStats)
    warnings: list[str] = Field(default_factory=list)


class PrepareRequest(BaseModel):
    """Request body of POST /api/prepare-text."""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., description="Raw pasted content (HTML or plain text)")
    options: NormalizationOptions | None = None


class ErrorResponse(BaseModel):
    """Error payload returned with HTTP 400."""

    error: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
