"""
Analysis Cache

Single-slot TTL cache for the last AnalysisResult.
Key = "{element child count}-{text length}-{preset id}". TTL = 1 second.

The fingerprint is a cheap structural proxy: an edit that keeps the
same child count and text length is not noticed until the TTL runs out.
Not thread-safe on its own; ScannabilityService serializes access.

Usage:
    from scannability.cache import AnalysisCache, content_fingerprint
    cache = AnalysisCache()
    result = cache.get_or_compute(content_fingerprint(root, preset.id), compute)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from scannability.config import settings
from scannability.content import ContentNode
from scannability.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)


def content_fingerprint(root: ContentNode, preset_id: str) -> str:
    return f"{len(root.element_children)}-{len(root.text_content())}-{preset_id}"


class AnalysisCache:
    """Holds one (fingerprint, result) pair until it expires."""

    def __init__(
        self,
        ttl_ms: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = (settings.CACHE_TTL_MS if ttl_ms is None else ttl_ms) / 1000.0
        self._clock = clock
        self._fingerprint: Optional[str] = None
        self._result: Optional[AnalysisResult] = None
        self._stored_at = 0.0
        self._hits = 0
        self._misses = 0

    def get(self, fingerprint: str) -> Optional[AnalysisResult]:
        """Return the cached result if the fingerprint matches and it has not expired."""
        if self._result is None or self._fingerprint != fingerprint:
            self._misses += 1
            return None
        if self._clock() - self._stored_at >= self._ttl:
            self._misses += 1
            return None
        self._hits += 1
        return self._result

    def put(self, fingerprint: str, result: AnalysisResult) -> None:
        self._fingerprint = fingerprint
        self._result = result
        self._stored_at = self._clock()

    def get_or_compute(
        self,
        fingerprint: str,
        compute: Callable[[], AnalysisResult],
        force_refresh: bool = False,
    ) -> AnalysisResult:
        if not force_refresh:
            cached = self.get(fingerprint)
            if cached is not None:
                logger.debug(
                    "Analysis cache hit",
                    extra={"fingerprint": fingerprint, "cache_hit": True},
                )
                return cached
        else:
            self._misses += 1

        result = compute()
        self.put(fingerprint, result)
        logger.debug(
            "Analysis cache miss",
            extra={"fingerprint": fingerprint, "cache_hit": False},
        )
        return result

    def invalidate(self) -> None:
        self._fingerprint = None
        self._result = None
        self._stored_at = 0.0

    @property
    def stats(self) -> dict:
        """Cache hit/miss statistics."""
        total = self._hits + self._misses
        return {
            "entries": 0 if self._result is None else 1,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }
