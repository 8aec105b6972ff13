"""
Content Tree — Read-only Document Model

The engine never touches a live document. The host hands it a tree of
ContentNode objects: tag, own text, ordered children, attributes, and
whatever layout metrics the host measured. Text runs can be stored as
``#text`` children so mixed content keeps its reading order.

The only layout primitive the engine consumes is estimate_lines().

Usage:
    from scannability.content import node
    root = node("article", node("h2", "Install"), node("p", "Run the installer."))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional, Union

if TYPE_CHECKING:
    from scannability.matcher import Matcher


TEXT_TAG = "#text"

# line-height "normal" resolves to font-size * 1.2
NORMAL_LINE_HEIGHT_FACTOR = 1.2


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (matches layout engines)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class LayoutMetrics:
    """Layout measurements supplied by the host. Units are opaque (usually px)."""
    content_height: float = 0.0
    line_height: Optional[float] = None  # None means "normal"
    font_size: float = 16.0

    def resolved_line_height(self) -> float:
        if self.line_height is None:
            return self.font_size * NORMAL_LINE_HEIGHT_FACTOR
        return self.line_height


@dataclass(eq=False)
class ContentNode:
    """
    A node in the content tree.

    Nodes compare by identity. ``parent`` is wired automatically for
    children passed to the constructor or to append().
    """
    tag: str
    text: str = ""
    children: list[ContentNode] = field(default_factory=list)
    attrs: dict[str, str] = field(default_factory=dict)
    layout: Optional[LayoutMetrics] = None
    parent: Optional[ContentNode] = field(default=None, repr=False)

    def __post_init__(self):
        self.tag = self.tag.lower()
        for child in self.children:
            child.parent = self

    # --- Structure ---

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT_TAG

    @property
    def is_element(self) -> bool:
        return not self.tag.startswith("#")

    @property
    def classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    @property
    def element_children(self) -> list[ContentNode]:
        return [c for c in self.children if c.is_element]

    def append(self, child: ContentNode) -> ContentNode:
        child.parent = self
        self.children.append(child)
        return child

    def ancestors(self) -> Iterator[ContentNode]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def iter_descendants(self) -> Iterator[ContentNode]:
        """Depth-first, document order, excluding self."""
        stack = list(reversed(self.children))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    # --- Queries ---

    def closest(self, matcher: Matcher) -> Optional[ContentNode]:
        """Self or nearest ancestor matching ``matcher``."""
        if matcher.is_empty:
            return None
        if matcher.matches(self):
            return self
        for ancestor in self.ancestors():
            if matcher.matches(ancestor):
                return ancestor
        return None

    def find(self, matcher: Matcher) -> Optional[ContentNode]:
        if matcher.is_empty:
            return None
        for descendant in self.iter_descendants():
            if matcher.matches(descendant):
                return descendant
        return None

    def find_all(self, matcher: Matcher) -> list[ContentNode]:
        if matcher.is_empty:
            return []
        return [d for d in self.iter_descendants() if matcher.matches(d)]

    # --- Text ---

    def text_content(self, exclude: Optional[Matcher] = None) -> str:
        """
        Concatenated text of this node and its subtree.

        Subtrees whose root matches ``exclude`` are left out; the node
        itself is never excluded.
        """
        parts = [self.text]
        for child in self.children:
            if exclude is not None and not exclude.is_empty and exclude.matches(child):
                continue
            parts.append(child.text_content(exclude))
        return "".join(parts)


def estimate_lines(content: ContentNode) -> int:
    """
    Estimate rendered line count from host-supplied layout metrics.

    lines = max(1, round(content_height / line_height)). Missing metrics
    or a non-positive line height count as a single line.
    """
    metrics = content.layout
    if metrics is None:
        return 1
    line_height = metrics.resolved_line_height()
    if line_height <= 0:
        return 1
    return max(1, round_half_up(metrics.content_height / line_height))


Child = Union[ContentNode, str]


def node(
    tag: str,
    *children: Child,
    attrs: Optional[dict[str, str]] = None,
    layout: Optional[LayoutMetrics] = None,
    **kwargs: object,
) -> ContentNode:
    """
    Build an element node. String children become ``#text`` nodes.

    Keyword attributes follow the BeautifulSoup convention: ``class_``
    becomes ``class`` and underscores become dashes (``data_language``).
    """
    merged = dict(attrs or {})
    for key, value in kwargs.items():
        merged[key.rstrip("_").replace("_", "-")] = str(value)
    built = [ContentNode(TEXT_TAG, text=c) if isinstance(c, str) else c for c in children]
    return ContentNode(tag, children=built, attrs=merged, layout=layout)
