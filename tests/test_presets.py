"""
Tests for the built-in presets and their suggestion predicates.
"""

import pytest

from scannability.content import node
from scannability.preset import DEFAULT_WEIGHTS, Preset
from scannability.presets import (
    CONFLUENCE_PRESET,
    GLOBAL_PRESET,
    NOTION_PRESET,
    PRESETS,
    detect_preset,
    get_preset_by_id,
)
from scannability.scorer import score_document
from scannability.suggestions import evaluate_suggestions, predicate_registry


class TestLookup:

    def test_preset_order(self):
        assert [p.id for p in PRESETS] == ["global", "confluence", "notion"]

    @pytest.mark.parametrize("preset_id", ["global", "confluence", "notion"])
    def test_get_by_id(self, preset_id):
        assert get_preset_by_id(preset_id).id == preset_id

    def test_unknown_id_falls_back_to_global(self):
        assert get_preset_by_id("sharepoint") is GLOBAL_PRESET

    @pytest.mark.parametrize("url,expected", [
        ("https://acme.atlassian.net/wiki/spaces/ENG/pages/1", "confluence"),
        ("https://docs.confluence.com/page", "confluence"),
        ("https://www.notion.so/acme/Roadmap-123", "notion"),
        ("https://acme.notion.site/Handbook", "notion"),
        ("https://example.com/blog/post", "global"),
        ("not a url", "global"),
        ("http://[::1", "global"),
        ("", "global"),
    ])
    def test_detect_preset(self, url, expected):
        assert detect_preset(url).id == expected

    def test_global_has_no_domain_rules(self):
        assert GLOBAL_PRESET.domain_rules == ()
        assert not GLOBAL_PRESET.matches_host("example.com")


class TestMergedPresets:

    @pytest.mark.parametrize("preset", [CONFLUENCE_PRESET, NOTION_PRESET])
    def test_global_anti_patterns_come_first(self, preset):
        n = len(GLOBAL_PRESET.analysis.anti_patterns)
        assert preset.analysis.anti_patterns[:n] == GLOBAL_PRESET.analysis.anti_patterns
        assert len(preset.analysis.anti_patterns) == n + 2

    @pytest.mark.parametrize("preset", PRESETS)
    def test_weights_complete(self, preset):
        assert set(DEFAULT_WEIGHTS) <= set(preset.analysis.weights)

    def test_confluence_weights_keyed_by_platform_anchor(self):
        weights = CONFLUENCE_PRESET.analysis.weights
        anchors = CONFLUENCE_PRESET.matchers.platform_anchors
        assert weights["callouts"] == 1.0
        assert weights["badges"] == 0.9
        assert weights["toggles"] == 0.8
        assert {"callouts", "badges", "toggles"} <= set(anchors)

    def test_notion_overrides_anchors(self):
        anchors = NOTION_PRESET.matchers.anchors
        assert anchors.headings.matches(node("div", class_="notion-header-block"))
        assert anchors.emphasis == GLOBAL_PRESET.matchers.anchors.emphasis

    def test_confluence_ignores_comments(self):
        assert CONFLUENCE_PRESET.matchers.ignore_matcher.matches(
            node("div", attrs={"data-testid": "object-comment-wrapper"})
        )

    @pytest.mark.parametrize("preset", PRESETS)
    def test_predicates_registered(self, preset):
        for rule in preset.analysis.suggestions:
            if rule.predicate:
                assert rule.predicate in predicate_registry

    @pytest.mark.parametrize("preset", PRESETS)
    def test_json_round_trip(self, preset):
        restored = Preset.model_validate_json(preset.model_dump_json())
        assert restored == preset


class TestConfluence:

    def test_jira_key_flagged(self):
        root = node("div", node("p", "This was fixed in PLAT-1234 last sprint."))
        result = score_document(root, CONFLUENCE_PRESET)
        assert [f.type for f in result.findings] == ["jira-key"]

    def test_info_panel_suggestion(self):
        root = node("div", node("p", "Warning: this deletes the space."))
        ids = [s.id for s in evaluate_suggestions(root, CONFLUENCE_PRESET.analysis.suggestions)]
        assert ids == ["confluence-info-panels"]

    def test_info_panel_present(self):
        root = node(
            "div",
            node("div", node("p", "Warning: this deletes the space."), class_="confluence-information-macro"),
        )
        assert evaluate_suggestions(root, CONFLUENCE_PRESET.analysis.suggestions) == []

    def test_status_suggestion(self):
        root = node("div", node("p", "Status: in progress"))
        ids = [s.id for s in evaluate_suggestions(root, CONFLUENCE_PRESET.analysis.suggestions)]
        assert ids == ["confluence-status"]

    def test_status_panel_counts_as_platform_anchor(self):
        root = node("div", node("span", "DONE", class_="status-macro-lozenge"), node("p", "Shipped."))
        result = score_document(root, CONFLUENCE_PRESET)
        assert result.breakdown.platform["badges"].count == 1
        assert result.breakdown.platform["badges"].weight == pytest.approx(0.9)


class TestNotion:

    def test_callout_suggestion(self):
        root = node("div", node("div", "Note: back up first.", class_="notion-text-block"))
        ids = [s.id for s in evaluate_suggestions(root, NOTION_PRESET.analysis.suggestions)]
        assert ids == ["notion-callouts"]

    def test_long_list_suggests_toggles(self):
        items = [node("div", f"item {i}", class_="notion-bulleted_list-block") for i in range(9)]
        root = node("div", node("div", *items))
        ids = [s.id for s in evaluate_suggestions(root, NOTION_PRESET.analysis.suggestions)]
        assert ids == ["notion-toggles"]

    def test_short_list_or_existing_toggle_is_fine(self):
        items = [node("div", f"item {i}", class_="notion-bulleted_list-block") for i in range(8)]
        assert evaluate_suggestions(node("div", node("div", *items)), NOTION_PRESET.analysis.suggestions) == []

        items = [node("div", f"item {i}", class_="notion-bulleted_list-block") for i in range(9)]
        root = node("div", node("div", *items), node("div", class_="notion-toggle-block"))
        assert evaluate_suggestions(root, NOTION_PRESET.analysis.suggestions) == []

    def test_code_block_suggestion(self):
        root = node("div", node("div", "Then docker compose up in the repo.", class_="notion-text-block"))
        ids = [s.id for s in evaluate_suggestions(root, NOTION_PRESET.analysis.suggestions)]
        assert ids == ["notion-code-blocks"]

    def test_callouts_weighted(self):
        root = node(
            "div",
            node("div", "Tip", class_="notion-callout-block"),
            node("div", "Body text here.", class_="notion-text-block"),
        )
        result = score_document(root, NOTION_PRESET)
        assert result.total_text_blocks == 1
        assert result.breakdown.platform["callouts"].count == 1
        assert result.breakdown.platform["callouts"].weight == pytest.approx(1.0)
