"""
Scannability Service — Scoring Session

Owns everything that changes between calls: the active preset, the
analysis cache, the scoring constants and the predicate registry.
Hosts create one service per document view and call analyze() whenever
they need a fresh score.

Usage:
    from scannability.service import ScannabilityService
    service = ScannabilityService()
    service.use_preset_id("notion")
    result = service.analyze(document)
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from scannability.cache import AnalysisCache, content_fingerprint
from scannability.config import settings
from scannability.content import ContentNode
from scannability.matcher import Matcher
from scannability.preset import Preset
from scannability.presets import get_preset_by_id
from scannability.schemas.analysis import AnalysisResult
from scannability.scorer import DEFAULT_CONSTANTS, ScoreOptions, ScoringConstants, score_document
from scannability.suggestions import PredicateRegistry, predicate_registry

logger = logging.getLogger(__name__)


def find_content_area(document: ContentNode, preset: Preset) -> ContentNode:
    """
    First content-area alternative (in declaration order) that matches,
    else the document itself. Invalid alternatives are skipped.
    """
    for alternative in Matcher.each(preset.matchers.content_area.selector):
        if alternative.is_empty:
            continue
        if alternative.matches(document):
            return document
        found = document.find(alternative)
        if found is not None:
            return found
    return document


class ScannabilityService:
    """Scores documents under one active preset, with a single-slot cache."""

    def __init__(
        self,
        preset: Optional[Preset] = None,
        *,
        cache: Optional[AnalysisCache] = None,
        constants: Optional[ScoringConstants] = None,
        registry: Optional[PredicateRegistry] = None,
    ):
        self._lock = threading.Lock()
        self._preset = preset or get_preset_by_id(settings.DEFAULT_PRESET)
        self._cache = cache or AnalysisCache()
        self._constants = constants or DEFAULT_CONSTANTS.with_overrides(
            max_lines_without_anchor=settings.MAX_LINES_WITHOUT_ANCHOR,
        )
        self._registry = registry if registry is not None else predicate_registry

    @property
    def preset(self) -> Preset:
        return self._preset

    @property
    def cache(self) -> AnalysisCache:
        return self._cache

    @property
    def registry(self) -> PredicateRegistry:
        return self._registry

    def set_preset(self, preset: Preset) -> bool:
        """
        Switch the active preset. The cache is invalidated before the new
        preset is stored whenever the id changes.

        Returns:
            True if the cache was invalidated.
        """
        with self._lock:
            changed = preset.id != self._preset.id
            if changed:
                self._cache.invalidate()
            self._preset = preset
        if changed:
            logger.info("Active preset changed", extra={"preset_id": preset.id})
        return changed

    def use_preset_id(self, preset_id: str) -> Preset:
        """Activate a built-in preset. Unknown ids select the global preset."""
        preset = get_preset_by_id(preset_id)
        if preset.id != preset_id:
            logger.warning(
                "Unknown preset %r, using %s", preset_id, preset.id,
                extra={"preset_id": preset_id},
            )
        self.set_preset(preset)
        return preset

    def analyze(self, document: ContentNode, force_refresh: bool = False) -> AnalysisResult:
        """Score ``document`` under the active preset, reusing a fresh cached result."""
        with self._lock:
            preset = self._preset
            root = find_content_area(document, preset)
            fingerprint = content_fingerprint(root, preset.id)
            options = ScoreOptions(constants=self._constants, registry=self._registry)
            return self._cache.get_or_compute(
                fingerprint,
                lambda: score_document(root, preset, options),
                force_refresh=force_refresh,
            )
