"""
Analysis Schemas — Serializable Results

Pydantic models for everything the engine hands back to a host.
AnalysisResult is the only structure meant to cross a process or
serialization boundary; it holds no node references and no functions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ============================================================
# BREAKDOWN
# ============================================================

class CategoryScore(BaseModel):
    """Matches in one anchor category and their weighted contribution."""
    count: int = 0
    weight: float = 0.0


class AnchorBreakdown(BaseModel):
    headings: CategoryScore = Field(default_factory=CategoryScore)
    emphasis: CategoryScore = Field(default_factory=CategoryScore)
    code_blocks: CategoryScore = Field(default_factory=CategoryScore)
    inline_code: CategoryScore = Field(default_factory=CategoryScore)
    standalone_links: CategoryScore = Field(default_factory=CategoryScore)
    inline_links: CategoryScore = Field(default_factory=CategoryScore)
    images: CategoryScore = Field(default_factory=CategoryScore)
    lists: CategoryScore = Field(default_factory=CategoryScore)
    platform: dict[str, CategoryScore] = Field(default_factory=dict)


# ============================================================
# PROBLEMS, FINDINGS, SUGGESTIONS
# ============================================================

class Problem(BaseModel):
    """A penalty source that actually reduced the score."""
    id: str
    type: str
    description: str
    count: int
    penalty: int


class Finding(BaseModel):
    """A text block carrying unformatted technical content."""
    type: str
    description: str
    snippet: str


class TriggeredSuggestion(BaseModel):
    id: str
    name: str
    description: str = ""


# ============================================================
# RESULT
# ============================================================

class AnalysisResult(BaseModel):
    """Output of one scoring pass."""
    score: int = Field(..., ge=0, le=100)
    preset_id: str
    total_text_blocks: int
    total_anchors_raw: int
    weighted_total: float
    problem_blocks: int = 0
    unformatted_blocks: int = 0
    breakdown: AnchorBreakdown = Field(default_factory=AnchorBreakdown)
    problems: list[Problem] = Field(default_factory=list)
    suggestions: list[TriggeredSuggestion] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
    timestamp: float

    model_config = {"json_schema_extra": {"examples": [
        {
            "score": 64,
            "preset_id": "global",
            "total_text_blocks": 8,
            "total_anchors_raw": 9,
            "weighted_total": 6.4,
            "problem_blocks": 1,
            "unformatted_blocks": 1,
            "problems": [
                {"id": "dense-paragraphs", "type": "dense-paragraph",
                 "description": "Dense paragraphs without visual anchors",
                 "count": 1, "penalty": 6},
            ],
            "timestamp": 1760000000.0,
        },
    ]}}
