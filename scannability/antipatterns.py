"""
Anti-Pattern Detector — Unformatted Technical Content

Finds text blocks that carry shell commands, JSON literals, tokens,
HTTP headers or source code written as plain prose instead of inside a
code block. Each preset supplies an ordered list of AntiPatternRule;
the first rule that matches a block wins, so a block yields at most one
finding.

Blocks already inside formatted code (or a code-editor widget) are
skipped, and nested code is stripped before matching so a paragraph
that legitimately wraps a short snippet is not flagged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from scannability.content import ContentNode
from scannability.matcher import Matcher
from scannability.preset import Preset
from scannability.schemas.analysis import Finding

logger = logging.getLogger(__name__)


# Blocks shorter than this (after stripping code) are not tested
MIN_TEXT_LENGTH = 10
SNIPPET_LENGTH = 100

# Already-formatted code on the common platforms
FORMATTED_CODE = Matcher.compile(
    "pre, code, kbd, samp, .highlight, .code-block,"
    " .cm-editor, .cm-content, .blob-code, .fabric-editor-breakout-mark,"
    ' [data-prosemirror-node-name="codeBlock"], [data-prosemirror-content-type="node"],'
    ' [class*="notion-code"],'
    " [data-language]"
)

# Class names used by code editors (CodeMirror, Monaco, Ace, highlighters)
EDITOR_CLASS_RE = re.compile(r"\b(cm-|monaco-|ace-|code|editor|highlight)\b", re.IGNORECASE)

EDITOR_ANCESTOR = Matcher.compile(
    '[class*="cm-"], [class*="monaco-"], [class*="ace-"], [class*="code-block"]'
)


@dataclass
class AntiPatternMatch:
    type: str
    description: str
    node: ContentNode
    snippet: str

    def to_schema(self) -> Finding:
        return Finding(type=self.type, description=self.description, snippet=self.snippet)


def _formatted_code(preset: Preset) -> Matcher:
    anchors = preset.matchers.anchors
    return Matcher.any_of([anchors.code_blocks, anchors.inline_code, FORMATTED_CODE])


def _in_formatted_region(block: ContentNode, formatted: Matcher) -> bool:
    if block.closest(formatted) is not None:
        return True
    if EDITOR_CLASS_RE.search(block.attrs.get("class", "")):
        return True
    return any(EDITOR_ANCESTOR.matches(a) for a in block.ancestors())


def detect(
    root: ContentNode,
    preset: Preset,
    text_blocks: Optional[Matcher] = None,
    ignore: Optional[Matcher] = None,
) -> list[AntiPatternMatch]:
    """
    Scan text blocks for unformatted technical content.

    Args:
        root: The content area.
        preset: Supplies the ordered anti-pattern rules and code matchers.
        text_blocks: Overrides the preset's text-block matcher.
        ignore: Overrides the preset's ignore list.

    Returns:
        One match per offending block, in document order.
    """
    if text_blocks is None:
        text_blocks = preset.matchers.text_blocks
    if ignore is None:
        ignore = preset.matchers.ignore_matcher

    formatted = _formatted_code(preset)
    rules = preset.analysis.anti_patterns
    matches: list[AntiPatternMatch] = []

    for block in root.find_all(text_blocks):
        if _in_formatted_region(block, formatted):
            continue
        if block.closest(ignore) is not None:
            continue

        text = block.text_content(exclude=formatted)
        if len(text) < MIN_TEXT_LENGTH:
            continue

        for rule in rules:
            if rule.pattern.search(text):
                matches.append(AntiPatternMatch(
                    type=rule.type,
                    description=rule.description,
                    node=block,
                    snippet=text[:SNIPPET_LENGTH],
                ))
                break

    if matches:
        logger.debug(
            "Found %d unformatted block(s)", len(matches),
            extra={"preset_id": preset.id, "text_blocks": len(matches)},
        )
    return matches
