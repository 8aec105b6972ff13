"""
Confluence Preset

Atlassian Confluence (cloud and server). Info panels, status lozenges and
expand sections count as platform anchors; navigation, page chrome and
comment threads are ignored.
"""

from __future__ import annotations

import re

from scannability.content import ContentNode
from scannability.matcher import Matcher
from scannability.suggestions import predicate_registry

CONFLUENCE_ID = "confluence"

INFO_PANEL = Matcher.compile(".confluence-information-macro")
STATUS_MACRO = Matcher.compile('[class*="status-macro"]')

_WARNING_TEXT_RE = re.compile(r"\b(?:note|warning|important|caution)\b[:\s]", re.IGNORECASE)
_STATUS_TEXT_RE = re.compile(
    r"\b(?:status|state|phase)\s*:\s*(?:done|complete|in progress|pending|blocked)\b",
    re.IGNORECASE,
)


# ============================================================
# SUGGESTION PREDICATES
# ============================================================

@predicate_registry.register("confluence-info-panels")
def warning_text_without_panel(root: ContentNode) -> bool:
    """Warning-style prose that would stand out more in an info panel."""
    return bool(_WARNING_TEXT_RE.search(root.text_content())) and root.find(INFO_PANEL) is None


@predicate_registry.register("confluence-status")
def status_text_without_macro(root: ContentNode) -> bool:
    return bool(_STATUS_TEXT_RE.search(root.text_content())) and root.find(STATUS_MACRO) is None


# ============================================================
# OVERRIDE
# ============================================================

CONFLUENCE_OVERRIDE = {
    "id": CONFLUENCE_ID,
    "name": "Confluence",
    "description": "Atlassian Confluence pages and the Confluence editor",
    "domain_rules": ["atlassian.net", "confluence.com"],
    "matchers": {
        "content_area": (
            '.ak-editor-content-area, #content-body, [data-testid="page-content"], .wiki-content'
        ),
        "text_blocks": 'p, [data-node-type="text"], [data-node-type="paragraph"]',
        "anchors": {
            "code_blocks": 'pre, [data-prosemirror-node-name="codeBlock"]',
        },
        "platform_anchors": {
            "callouts": ".confluence-information-macro, .panel",
            "badges": '[class*="status-macro"]',
            "toggles": ".expand-control",
            "emojis": '[data-testid*="emoji"]',
        },
        "ignore": [
            # Navigation and header
            '[data-testid="grid-left-sidebar"]',
            '[data-testid="space-navigation"]',
            '[data-testid="toolbar-above-title-wrapper"]',
            '[data-vc="space-navigation"]',
            "nav[aria-label]",
            "header",
            '[role="navigation"]',
            '[role="banner"]',
            # Atlaskit portals (modals, tooltips, dialogs)
            ".atlaskit-portal-container",
            '[data-testid="help-widget"]',
            '[data-testid="confluence-account-menu"]',
            '[data-testid="right-sidebar-panel"]',
            '[role="dialog"]',
            # Page byline
            '[data-testid="object-header-container"]',
            '[data-testid="content-topper-wrapper"]',
            '[data-testid="byline-single-line"]',
            '[data-testid="object-sidebar-container"]',
            # Related content, comments and reactions
            '[data-testid="end-page-rec-wrapper"]',
            '[data-testid="object-comment-wrapper"]',
            '[data-testid="footer-reply-container"]',
            '[data-testid="reactions-container"]',
            '[data-testid="render-reactions"]',
            ".ak-renderer-wrapper.is-comment",
        ],
    },
    "analysis": {
        "anti_patterns": [
            {
                "pattern": r"@[a-zA-Z][a-zA-Z0-9._-]+(?!\])",
                "type": "mention",
                "description": "Unlinked @mention",
            },
            {
                "pattern": r"\b[A-Z]{2,10}-\d{1,6}\b(?![^\[]*\])",
                "type": "jira-key",
                "description": "Unlinked Jira issue key",
            },
        ],
        "weights": {
            "callouts": 1.0,
            "badges": 0.9,
            "toggles": 0.8,
        },
        "suggestions": [
            {
                "id": "confluence-info-panels",
                "name": "Use info panels",
                "description": "Put notes and warnings in an Info, Note or Warning panel "
                               "so they stand out from the body text.",
                "predicate": "confluence-info-panels",
            },
            {
                "id": "confluence-status",
                "name": "Use status macros",
                "description": "Replace written statuses with a Status macro so the "
                               "state of the work is visible at a glance.",
                "predicate": "confluence-status",
            },
        ],
    },
}
