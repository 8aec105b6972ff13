"""HTML -> ContentNode adapter.

Parses markup with BeautifulSoup and converts it to the engine's content
tree. Comments, doctypes, processing instructions, ``script`` and
``style`` are dropped.

There is no rendering engine here, so layout is approximated when
``chars_per_line`` is given: every element is assumed to wrap at that
many characters with a fixed line height.
"""

from __future__ import annotations

import math
from typing import Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
)

from scannability.content import TEXT_TAG, ContentNode, LayoutMetrics

DOCUMENT_TAG = "#document"

SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template"})
SKIPPED_STRINGS = (Comment, Doctype, Declaration, ProcessingInstruction, CData)

# Approximate line box: 16px text with a 1.5 line height
APPROX_FONT_SIZE = 16.0
APPROX_LINE_HEIGHT = 24.0


def _attrs(tag: Tag) -> dict[str, str]:
    attrs = {}
    for name, value in tag.attrs.items():
        # bs4 returns multi-valued attributes (class, rel) as lists
        attrs[name] = " ".join(value) if isinstance(value, list) else str(value)
    return attrs


def _approximate_layout(content: ContentNode, chars_per_line: int) -> None:
    stack = [content]
    while stack:
        current = stack.pop()
        if current.is_element:
            text = " ".join(current.text_content().split())
            lines = max(1, math.ceil(len(text) / chars_per_line))
            current.layout = LayoutMetrics(
                content_height=lines * APPROX_LINE_HEIGHT,
                line_height=APPROX_LINE_HEIGHT,
                font_size=APPROX_FONT_SIZE,
            )
        stack.extend(current.children)


def _convert(tag: Tag) -> ContentNode:
    converted = ContentNode(tag.name, attrs=_attrs(tag))
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name.lower() in SKIPPED_TAGS:
                continue
            converted.append(_convert(child))
        elif isinstance(child, NavigableString) and not isinstance(child, SKIPPED_STRINGS):
            if child:
                converted.append(ContentNode(TEXT_TAG, text=str(child)))
    return converted


def soup_to_tree(soup: BeautifulSoup, chars_per_line: Optional[int] = None) -> ContentNode:
    root = _convert(soup)
    root.tag = DOCUMENT_TAG
    root.attrs = {}
    if chars_per_line:
        _approximate_layout(root, chars_per_line)
    return root


def parse_html(markup: str, chars_per_line: Optional[int] = None) -> ContentNode:
    """
    Build a content tree from an HTML string.

    Args:
        markup: HTML document or fragment.
        chars_per_line: When set, attach approximate layout metrics so
            line-based checks (dense paragraphs) have something to measure.
            Without it every block counts as a single line.

    Returns:
        A ``#document`` node whose children are the top-level elements.
    """
    if chars_per_line is not None and chars_per_line <= 0:
        raise ValueError("chars_per_line must be positive")
    return soup_to_tree(BeautifulSoup(markup, "html.parser"), chars_per_line)
