"""
Scannability — Document Scannability Scoring Engine

Scores how easily a reader can scan a document (0-100) from its
structural anchors, dense paragraphs and unformatted technical content,
tuned per platform through presets.

Public API:
  - score_document:        Score a content tree under a preset
  - ScannabilityService:   Active preset + analysis cache for a host
  - merge_preset:          Merge a partial platform override onto a base preset
  - evaluate_suggestions:  Advisory platform suggestions (never affect the score)
  - parse_html:            Build a content tree from HTML
  - get_preset_by_id / detect_preset: Built-in presets

Usage:
    from scannability import ScannabilityService, parse_html
    service = ScannabilityService()
    result = service.analyze(parse_html(html, chars_per_line=90))
"""

__version__ = "0.3.0"

from scannability.content import ContentNode, LayoutMetrics, estimate_lines, node
from scannability.matcher import Matcher
from scannability.preset import (
    AnalysisSettings,
    AnchorMatchers,
    AntiPatternRule,
    Preset,
    PresetMatchers,
    SuggestionRule,
)
from scannability.merge import deep_merge, merge_preset
from scannability.anchors import classify
from scannability.antipatterns import detect
from scannability.suggestions import PredicateRegistry, evaluate_suggestions, predicate_registry
from scannability.scorer import ScoreOptions, ScoringConstants, score, score_document
from scannability.cache import AnalysisCache, content_fingerprint
from scannability.presets import PRESETS, detect_preset, get_preset_by_id
from scannability.service import ScannabilityService
from scannability.html_tree import parse_html
from scannability.schemas.analysis import AnalysisResult

__all__ = [
    "ContentNode",
    "LayoutMetrics",
    "estimate_lines",
    "node",
    "Matcher",
    "AnalysisSettings",
    "AnchorMatchers",
    "AntiPatternRule",
    "Preset",
    "PresetMatchers",
    "SuggestionRule",
    "deep_merge",
    "merge_preset",
    "classify",
    "detect",
    "PredicateRegistry",
    "evaluate_suggestions",
    "predicate_registry",
    "ScoreOptions",
    "ScoringConstants",
    "score",
    "score_document",
    "AnalysisCache",
    "content_fingerprint",
    "PRESETS",
    "detect_preset",
    "get_preset_by_id",
    "ScannabilityService",
    "parse_html",
    "AnalysisResult",
]
