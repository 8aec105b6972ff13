"""
Notion Preset

Notion renders every block as a div with a ``notion-*`` class, so text
blocks and anchors are matched by class substring. Callouts, toggles
and bookmarks count as platform anchors.
"""

from __future__ import annotations

import re

from scannability.content import ContentNode
from scannability.matcher import Matcher
from scannability.suggestions import predicate_registry

NOTION_ID = "notion"

# A bulleted list longer than this reads better folded into toggles
LONG_LIST_ITEMS = 8

CALLOUT = Matcher.compile('[class*="notion-callout"]')
TOGGLE = Matcher.compile('[class*="notion-toggle"]')
CODE_BLOCK = Matcher.compile('[class*="notion-code"]')
BULLETED_ITEM = Matcher.compile('[class*="notion-bulleted_list"]')

_IMPORTANT_TEXT_RE = re.compile(r"\b(?:important|note|tip|warning|caution)\b[:\s]", re.IGNORECASE)
_JSON_RE = re.compile(r'\{"\w+":\s*["{\[\d]')
_COMMAND_RE = re.compile(r"\b(?:curl|npm|git|docker)\s+\w+", re.IGNORECASE)


# ============================================================
# SUGGESTION PREDICATES
# ============================================================

@predicate_registry.register("notion-callouts")
def important_text_without_callout(root: ContentNode) -> bool:
    return bool(_IMPORTANT_TEXT_RE.search(root.text_content())) and root.find(CALLOUT) is None


@predicate_registry.register("notion-toggles")
def long_list_without_toggles(root: ContentNode) -> bool:
    """More than LONG_LIST_ITEMS bullets under one parent and no toggle anywhere."""
    if root.find(TOGGLE) is not None:
        return False
    for item in root.find_all(BULLETED_ITEM):
        parent = item.parent
        if parent is not None and len(parent.find_all(BULLETED_ITEM)) > LONG_LIST_ITEMS:
            return True
    return False


@predicate_registry.register("notion-code-blocks")
def code_text_without_code_block(root: ContentNode) -> bool:
    text = root.text_content()
    has_code = bool(_JSON_RE.search(text) or _COMMAND_RE.search(text))
    return has_code and root.find(CODE_BLOCK) is None


# ============================================================
# OVERRIDE
# ============================================================

NOTION_OVERRIDE = {
    "id": NOTION_ID,
    "name": "Notion",
    "description": "Notion pages, published sites and wikis",
    "domain_rules": ["notion.so", "notion.site"],
    "matchers": {
        "content_area": ".notion-page-content",
        "text_blocks": (
            '[class*="notion-text-block"], [class*="notion-bulleted_list"],'
            ' [class*="notion-numbered_list"]'
        ),
        "anchors": {
            "headings": '[class*="notion-header"], h1, h2, h3, h4, h5, h6',
            "code_blocks": '[class*="notion-code-block"]',
            "images": 'img, picture, video, svg, [class*="notion-image"]',
        },
        "platform_anchors": {
            "callouts": '[class*="notion-callout"]',
            "toggles": '[class*="notion-toggle"]',
            "embeds": '[class*="notion-bookmark"]',
            "emojis": ".notion-emoji",
            "databases": '[class*="notion-collection"]',
        },
    },
    "analysis": {
        "anti_patterns": [
            {
                "pattern": r"/[a-z]{2,}(?:\s|$)",
                "type": "command",
                "description": "Notion slash command in plain text",
            },
            {
                "pattern": r"@[a-zA-Z][a-zA-Z0-9._-]+(?!\])",
                "type": "mention",
                "description": "Unlinked @mention",
            },
        ],
        "weights": {
            "callouts": 1.0,
            "toggles": 1.0,
            "embeds": 0.8,
        },
        "suggestions": [
            {
                "id": "notion-callouts",
                "name": "Use callouts",
                "description": "Highlight notes, tips and warnings with a callout block.",
                "predicate": "notion-callouts",
            },
            {
                "id": "notion-toggles",
                "name": "Fold long lists into toggles",
                "description": "Group long bulleted lists under toggle blocks so readers "
                               "can expand only what they need.",
                "predicate": "notion-toggles",
            },
            {
                "id": "notion-code-blocks",
                "name": "Use code blocks",
                "description": "Commands and JSON belong in a code block with syntax highlighting.",
                "predicate": "notion-code-blocks",
            },
        ],
    },
}
