"""
Preset Models

A Preset is the platform-tunable configuration the engine reads: which
nodes form the content area, text blocks and anchors, what to ignore,
how much each anchor is worth, which anti-patterns to look for, and
which advisory suggestions to evaluate.

Presets are frozen pydantic models. They carry no function values:
suggestion predicates are referenced by name and resolved from a local
registry (scannability.suggestions), so a Preset survives a JSON round
trip intact.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Annotated, Any, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    field_validator,
)

from scannability.matcher import Matcher

logger = logging.getLogger(__name__)


# ============================================================
# FIELD TYPES
# ============================================================

_NEVER_MATCHES = "(?!)"


def _compile_pattern(value: Any) -> re.Pattern:
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a regular expression, got {type(value).__name__}")
    try:
        return re.compile(value)
    except re.error as e:
        logger.warning("Invalid anti-pattern %r: %s", value, e, extra={"error": str(e)})
        return re.compile(_NEVER_MATCHES)


MatcherField = Annotated[
    Matcher,
    PlainValidator(Matcher.coerce),
    PlainSerializer(lambda m: m.selector, return_type=str, when_used="json"),
]

PatternField = Annotated[
    re.Pattern,
    PlainValidator(_compile_pattern),
    PlainSerializer(lambda p: p.pattern, return_type=str, when_used="json"),
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


# ============================================================
# WEIGHTS
# ============================================================

# Key for the fallback weight of platform anchors without their own entry
PLATFORM_DEFAULT = "platform_default"

DEFAULT_WEIGHTS: dict[str, float] = {
    # Structure: clear visual hierarchy
    "heading": 1.0,
    "code_block": 1.0,
    "image": 0.9,
    # Emphasis: highlights key information
    "emphasis": 0.7,
    "inline_code": 0.6,
    "list": 0.5,
    # Links: a link alone on its line is easier to spot
    "link_standalone": 0.6,
    "link_inline": 0.3,
    PLATFORM_DEFAULT: 0.7,
}

REQUIRED_WEIGHTS = tuple(DEFAULT_WEIGHTS)


# ============================================================
# RULES
# ============================================================

class AntiPatternRule(_Frozen):
    """Signature of technical content that escaped code formatting."""
    pattern: PatternField
    type: str
    description: str = ""


class SuggestionRule(_Frozen):
    """
    Advisory heuristic. Never affects the score.

    Checked in order until one triggers:
      1. missing_matcher: nothing under the content area matches
      2. present_matcher: something under the content area matches
      3. predicate: name of a registered predicate returning True
    """
    id: str
    name: str
    description: str = ""
    missing_matcher: Optional[MatcherField] = None
    present_matcher: Optional[MatcherField] = None
    predicate: Optional[str] = None


# ============================================================
# MATCHER GROUPS
# ============================================================

class AnchorMatchers(_Frozen):
    """Standard HTML anchors, the same on every platform unless overridden."""
    headings: MatcherField = Matcher.compile("h1, h2, h3, h4, h5, h6")
    emphasis: MatcherField = Matcher.compile("strong, b, mark")
    code_blocks: MatcherField = Matcher.compile("pre")
    inline_code: MatcherField = Matcher.compile("code, kbd")
    links: MatcherField = Matcher.compile("a[href]")
    images: MatcherField = Matcher.compile("img, picture, video, svg")
    lists: MatcherField = Matcher.compile("ul, ol")


class PresetMatchers(_Frozen):
    content_area: MatcherField = Matcher.compile(
        'main, article, [role="main"], .content, #content, body'
    )
    text_blocks: MatcherField = Matcher.compile("p")
    anchors: AnchorMatchers = Field(default_factory=AnchorMatchers)
    platform_anchors: dict[str, MatcherField] = Field(default_factory=dict)
    ignore: tuple[MatcherField, ...] = ()

    @property
    def ignore_matcher(self) -> Matcher:
        return Matcher.any_of(self.ignore)


class AnalysisSettings(_Frozen):
    anti_patterns: tuple[AntiPatternRule, ...] = ()
    weights: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    suggestions: tuple[SuggestionRule, ...] = ()

    @field_validator("weights")
    @classmethod
    def _complete_non_negative(cls, weights: dict[str, float]) -> dict[str, float]:
        cleaned = {key: DEFAULT_WEIGHTS[key] for key in REQUIRED_WEIGHTS if key not in weights}
        for key, value in weights.items():
            if not math.isfinite(value):
                logger.warning(
                    "Non-finite weight for %s (%s) clamped to 0", key, value,
                    extra={"error": "non_finite_weight"},
                )
                value = 0.0
            elif value < 0:
                logger.warning(
                    "Negative weight for %s (%s) clamped to 0", key, value,
                    extra={"error": "negative_weight"},
                )
                value = 0.0
            cleaned[key] = float(value)
        return cleaned

    def weight_for(self, name: str) -> float:
        """Unit weight of an anchor category, falling back to the platform default."""
        return self.weights.get(name, self.weights[PLATFORM_DEFAULT])


# ============================================================
# PRESET
# ============================================================

class Preset(_Frozen):
    """Complete, normalized configuration for one target platform."""
    id: str
    name: str = ""
    description: str = ""
    domain_rules: tuple[str, ...] = ()
    matchers: PresetMatchers = Field(default_factory=PresetMatchers)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)

    def matches_host(self, hostname: str) -> bool:
        return any(rule in hostname for rule in self.domain_rules)


# A partial preset: same shape as Preset, every key optional
PartialPreset = Mapping[str, Any]
