"""
Tests for the analysis cache and the scoring service.
"""

import logging

import pytest

from scannability.cache import AnalysisCache, content_fingerprint
from scannability.content import node
from scannability.presets import CONFLUENCE_PRESET, GLOBAL_PRESET, NOTION_PRESET
from scannability.schemas.analysis import AnalysisResult
from scannability.service import ScannabilityService, find_content_area


def make_result(value: int = 50) -> AnalysisResult:
    return AnalysisResult(
        score=value, preset_id="global", total_text_blocks=0,
        total_anchors_raw=0, weighted_total=0.0, timestamp=0.0,
    )


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self) -> AnalysisResult:
        self.calls += 1
        return make_result(self.calls)


class TestFingerprint:

    def test_format(self):
        root = node("article", node("p", "abc"), "xy", node("h2", "d"))
        assert content_fingerprint(root, "notion") == "2-6-notion"

    def test_same_length_edit_not_detected(self):
        a = node("article", node("p", "cat"))
        b = node("article", node("p", "dog"))
        assert content_fingerprint(a, "global") == content_fingerprint(b, "global")


class TestAnalysisCache:

    def test_hit_within_ttl(self):
        clock, compute = FakeClock(), Counter()
        cache = AnalysisCache(ttl_ms=1000, clock=clock)
        first = cache.get_or_compute("1-10-global", compute)
        clock.now += 0.5
        second = cache.get_or_compute("1-10-global", compute)
        assert first is second
        assert compute.calls == 1
        assert cache.stats["hits"] == 1
        assert cache.stats["misses"] == 1

    def test_expired_after_ttl(self):
        clock, compute = FakeClock(), Counter()
        cache = AnalysisCache(ttl_ms=1000, clock=clock)
        cache.get_or_compute("fp", compute)
        clock.now += 1.0
        cache.get_or_compute("fp", compute)
        assert compute.calls == 2

    def test_fingerprint_change_recomputes(self):
        compute = Counter()
        cache = AnalysisCache(ttl_ms=1000, clock=FakeClock())
        cache.get_or_compute("a", compute)
        result = cache.get_or_compute("b", compute)
        assert compute.calls == 2
        assert result.score == 2

    def test_force_refresh(self):
        compute = Counter()
        cache = AnalysisCache(ttl_ms=1000, clock=FakeClock())
        cache.get_or_compute("fp", compute)
        cache.get_or_compute("fp", compute, force_refresh=True)
        assert compute.calls == 2

    def test_invalidate(self):
        compute = Counter()
        cache = AnalysisCache(ttl_ms=1000, clock=FakeClock())
        cache.get_or_compute("fp", compute)
        cache.invalidate()
        assert cache.get("fp") is None
        assert cache.stats["entries"] == 0

    def test_single_slot(self):
        cache = AnalysisCache(ttl_ms=1000, clock=FakeClock())
        cache.put("a", make_result(1))
        cache.put("b", make_result(2))
        assert cache.get("a") is None
        assert cache.get("b").score == 2

    def test_default_ttl_from_settings(self, monkeypatch):
        from scannability import cache as cache_module
        from scannability.config import Settings

        monkeypatch.setattr(cache_module, "settings", Settings(CACHE_TTL_MS=0))
        compute = Counter()
        cache = AnalysisCache(clock=FakeClock())
        cache.get_or_compute("fp", compute)
        cache.get_or_compute("fp", compute)
        assert compute.calls == 2

    def test_stats_hit_rate(self):
        cache = AnalysisCache(ttl_ms=1000, clock=FakeClock())
        assert cache.stats["hit_rate"] == 0.0
        cache.put("fp", make_result())
        cache.get("fp")
        cache.get("other")
        assert cache.stats["hit_rate"] == 0.5


class TestContentArea:

    def test_first_alternative_wins(self):
        main = node("main", node("p", "m"))
        document = node("body", node("article", node("p", "a")), main)
        assert find_content_area(document, GLOBAL_PRESET) is main

    def test_document_itself_may_match(self):
        document = node("main", node("p", "x"))
        assert find_content_area(document, GLOBAL_PRESET) is document

    def test_falls_back_to_document(self):
        document = node("div", node("p", "x"))
        assert find_content_area(document, NOTION_PRESET) is document

    def test_invalid_alternative_skipped(self):
        from scannability.merge import merge_preset

        preset = merge_preset(GLOBAL_PRESET, {"matchers": {"content_area": "main, div > p"}})
        main = node("main", node("p", "x"))
        document = node("body", node("nav", node("p", "menu")), main)
        assert find_content_area(document, preset) is main

    def test_invalid_first_alternative_falls_through(self):
        from scannability.merge import merge_preset

        preset = merge_preset(GLOBAL_PRESET, {"matchers": {"content_area": "section:first-child, article"}})
        article = node("article", node("p", "x"))
        document = node("body", node("section", node("p", "s")), article)
        assert find_content_area(document, preset) is article

    def test_platform_content_area(self):
        page = node("div", node("p", "x"), class_="notion-page-content")
        document = node("div", node("div", "sidebar", class_="notion-sidebar"), page)
        assert find_content_area(document, NOTION_PRESET) is page


class TestScannabilityService:

    def doc(self):
        return node(
            "html",
            node("body",
                 node("nav", node("h2", "Menu")),
                 node("main", node("h2", "Guide"), node("p", "Read this first."))),
        )

    def test_analyze_scores_content_area(self):
        service = ScannabilityService(GLOBAL_PRESET)
        result = service.analyze(self.doc())
        assert result.total_text_blocks == 1
        assert result.breakdown.headings.count == 1  # nav heading is outside main
        assert result.preset_id == "global"

    def test_analyze_uses_cache(self):
        service = ScannabilityService(GLOBAL_PRESET, cache=AnalysisCache(ttl_ms=1000, clock=FakeClock()))
        document = self.doc()
        first = service.analyze(document)
        assert service.analyze(document) is first
        assert service.analyze(document, force_refresh=True) is not first

    def test_set_preset_invalidates_on_change(self):
        service = ScannabilityService(GLOBAL_PRESET, cache=AnalysisCache(ttl_ms=1000, clock=FakeClock()))
        service.analyze(self.doc())
        assert service.set_preset(GLOBAL_PRESET) is False
        assert service.cache.stats["entries"] == 1
        assert service.set_preset(NOTION_PRESET) is True
        assert service.cache.stats["entries"] == 0
        assert service.preset is NOTION_PRESET

    def test_invalidate_happens_before_swap(self):
        seen = []

        class RecordingCache(AnalysisCache):
            def invalidate(self):
                seen.append(service.preset.id)
                super().invalidate()

        service = ScannabilityService(GLOBAL_PRESET, cache=RecordingCache(ttl_ms=1000))
        service.set_preset(CONFLUENCE_PRESET)
        assert seen == ["global"]
        assert service.preset.id == "confluence"

    def test_use_preset_id(self):
        service = ScannabilityService(GLOBAL_PRESET)
        assert service.use_preset_id("notion").id == "notion"
        assert service.preset.id == "notion"

    def test_unknown_preset_id_falls_back(self, caplog):
        service = ScannabilityService(NOTION_PRESET)
        with caplog.at_level(logging.WARNING, logger="scannability"):
            preset = service.use_preset_id("wordpress")
        assert preset.id == "global"
        assert service.preset.id == "global"
        assert any("Unknown preset" in r.getMessage() for r in caplog.records)

    def test_default_preset(self):
        assert ScannabilityService().preset.id == "global"

    @pytest.mark.parametrize("preset", [GLOBAL_PRESET, CONFLUENCE_PRESET, NOTION_PRESET])
    def test_score_in_bounds_for_every_preset(self, preset):
        result = ScannabilityService(preset).analyze(self.doc())
        assert 0 <= result.score <= 100

    def test_keeps_given_registry(self):
        from scannability.suggestions import PredicateRegistry

        local = PredicateRegistry()
        service = ScannabilityService(GLOBAL_PRESET, registry=local)
        assert service.registry is local

    def test_predicates_registered_after_construction_are_used(self):
        from scannability.preset import SuggestionRule
        from scannability.suggestions import PredicateRegistry

        local = PredicateRegistry()
        preset = GLOBAL_PRESET.model_copy(update={
            "analysis": GLOBAL_PRESET.analysis.model_copy(update={
                "suggestions": (SuggestionRule(id="host", name="Host advice", predicate="host-check"),),
            }),
        })
        service = ScannabilityService(preset, registry=local)
        local.register("host-check", lambda root: True)
        result = service.analyze(self.doc())
        assert [s.id for s in result.suggestions] == ["host"]
