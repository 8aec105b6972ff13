"""
Scannability Score Calculator

Computes a 0-100 score for how easily a reader can scan a document.

Score = anchor ratio score - penalties + bonuses, where:
  - Ratio score:  weighted anchors per text block against an ideal ratio
                  (capped at 70)
  - Dense paragraphs:  blocks longer than 5 lines with no inline anchor
                       (capped at 30)
  - Unformatted code:  -5 per offending block (capped at 25)
  - Bonuses:  headings (x3, max 15), images (x5, max 15),
              code blocks (x2, max 10)
  Floor at 0, cap at 100. A document with no text blocks scores 100.

Every tuning constant lives in ScoringConstants. The current values are
hand-tuned; override them per call rather than editing them here.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Optional

from scannability.anchors import WeightedAnchorBreakdown, classify
from scannability.antipatterns import AntiPatternMatch, detect
from scannability.content import ContentNode, estimate_lines, round_half_up
from scannability.matcher import Matcher
from scannability.preset import Preset
from scannability.schemas.analysis import AnalysisResult, Problem
from scannability.suggestions import PredicateRegistry, evaluate_suggestions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringConstants:
    ideal_anchor_ratio: float = 1.5
    ratio_score_max: float = 70.0

    problem_penalty_cap: float = 30.0
    problem_penalty_scale: float = 50.0
    unformatted_penalty_cap: float = 25.0
    unformatted_penalty_per_block: float = 5.0

    heading_bonus_cap: float = 15.0
    heading_bonus_factor: float = 3.0
    image_bonus_cap: float = 15.0
    image_bonus_factor: float = 5.0
    code_bonus_cap: float = 10.0
    code_bonus_factor: float = 2.0

    max_lines_without_anchor: int = 5

    score_min: int = 0
    score_max: int = 100

    def with_overrides(self, **changes) -> ScoringConstants:
        return replace(self, **changes)


DEFAULT_CONSTANTS = ScoringConstants()


@dataclass
class ScoreOptions:
    """Per-call overrides. Unset matchers fall back to the preset's."""
    text_blocks: Optional[Matcher] = None
    code_blocks: Optional[Matcher] = None
    ignore: Optional[Matcher] = None
    constants: ScoringConstants = field(default_factory=lambda: DEFAULT_CONSTANTS)
    registry: Optional[PredicateRegistry] = None


# ============================================================
# PIECES
# ============================================================

def inline_anchor_matcher(preset: Preset, code_blocks: Matcher) -> Matcher:
    """Anything that breaks up a wall of text inside a single block."""
    anchors = preset.matchers.anchors
    return Matcher.any_of([
        anchors.emphasis, anchors.inline_code, code_blocks, anchors.links, anchors.images,
    ])


def count_problem_blocks(
    blocks: list[ContentNode],
    inline_anchors: Matcher,
    max_lines: int,
) -> int:
    problems = 0
    for block in blocks:
        if block.find(inline_anchors) is not None:
            continue
        if estimate_lines(block) > max_lines:
            problems += 1
    return problems


def compute_score(
    weighted: WeightedAnchorBreakdown,
    total_text_blocks: int,
    problem_blocks: int,
    unformatted_blocks: int,
    constants: ScoringConstants = DEFAULT_CONSTANTS,
) -> tuple[int, list[Problem]]:
    """
    Combine the measured signals into the final score.

    Returns:
        (score, problems) where problems lists only the penalty sources
        that were actually present.
    """
    c = constants
    if total_text_blocks == 0:
        return c.score_max, []

    anchor_ratio = weighted.total_weighted / total_text_blocks
    ratio_score = min(c.ratio_score_max, anchor_ratio / c.ideal_anchor_ratio * c.ratio_score_max)

    problem_penalty = round_half_up(min(
        c.problem_penalty_cap,
        problem_blocks / total_text_blocks * c.problem_penalty_scale,
    ))
    unformatted_penalty = min(
        c.unformatted_penalty_cap,
        unformatted_blocks * c.unformatted_penalty_per_block,
    )

    problems: list[Problem] = []
    if problem_blocks > 0:
        problems.append(Problem(
            id="dense-paragraphs",
            type="dense-paragraph",
            description="Dense paragraphs without visual anchors",
            count=problem_blocks,
            penalty=problem_penalty,
        ))
    if unformatted_blocks > 0:
        problems.append(Problem(
            id="unformatted-code",
            type="unformatted-code",
            description="Code that should be in code blocks",
            count=unformatted_blocks,
            penalty=round_half_up(unformatted_penalty),
        ))

    heading_bonus = min(c.heading_bonus_cap, weighted.headings.weight * c.heading_bonus_factor)
    image_bonus = min(c.image_bonus_cap, weighted.images.weight * c.image_bonus_factor)
    code_bonus = min(c.code_bonus_cap, weighted.code_blocks.weight * c.code_bonus_factor)

    raw = (
        ratio_score
        - problem_penalty
        - unformatted_penalty
        + heading_bonus
        + image_bonus
        + code_bonus
    )
    score = round_half_up(max(c.score_min, min(c.score_max, raw)))
    return score, problems


# ============================================================
# ENTRY POINTS
# ============================================================

def score_document(
    root: ContentNode,
    preset: Preset,
    options: Optional[ScoreOptions] = None,
) -> AnalysisResult:
    """
    Score the content area ``root`` under ``preset``.

    Never raises for malformed presets or documents: invalid selectors
    match nothing and failing suggestion predicates do not trigger.
    """
    options = options or ScoreOptions()
    started = time.perf_counter()

    text_matcher = options.text_blocks or preset.matchers.text_blocks
    code_matcher = options.code_blocks or preset.matchers.anchors.code_blocks
    ignore = options.ignore if options.ignore is not None else preset.matchers.ignore_matcher

    weighted = classify(root, preset, ignore=ignore, code_blocks=code_matcher)

    blocks = [b for b in root.find_all(text_matcher) if b.closest(ignore) is None]
    problem_blocks = count_problem_blocks(
        blocks,
        inline_anchor_matcher(preset, code_matcher),
        options.constants.max_lines_without_anchor,
    )
    unformatted: list[AntiPatternMatch] = detect(root, preset, text_blocks=text_matcher, ignore=ignore)

    final, problems = compute_score(
        weighted, len(blocks), problem_blocks, len(unformatted), options.constants,
    )
    suggestions = evaluate_suggestions(root, preset.analysis.suggestions, options.registry)

    result = AnalysisResult(
        score=final,
        preset_id=preset.id,
        total_text_blocks=len(blocks),
        total_anchors_raw=weighted.total_raw,
        weighted_total=weighted.total_weighted,
        problem_blocks=problem_blocks,
        unformatted_blocks=len(unformatted),
        breakdown=weighted.to_schema(),
        problems=problems,
        suggestions=suggestions,
        findings=[m.to_schema() for m in unformatted],
        timestamp=time.time(),
    )

    logger.debug(
        "Scored content area: %d", final,
        extra={
            "preset_id": preset.id,
            "score": final,
            "text_blocks": len(blocks),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return result


def score(
    root: ContentNode,
    preset: Preset,
    text_blocks: Optional[Matcher] = None,
    code_blocks: Optional[Matcher] = None,
    ignore: Optional[Matcher] = None,
) -> AnalysisResult:
    """Shorthand for score_document with matcher overrides."""
    return score_document(root, preset, ScoreOptions(
        text_blocks=text_blocks, code_blocks=code_blocks, ignore=ignore,
    ))
