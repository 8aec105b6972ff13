"""
Anchor Classifier — Weighted Structural Anchors

Walks the content area and counts the structural elements that help a
reader scan: headings, emphasis, code, links, images, lists, and any
platform-specific blocks the preset declares. Not every anchor is worth
the same, so each count is scaled by the preset's weights.

Rules:
  - Nodes inside an ignored region are never counted
  - Inline code inside a code block was already counted with the block
  - Decorative images (avatars, emoji, favicons, icons, < 32 units) are dropped
  - A link that is the only real content of its parent is "standalone"
    and outweighs a link buried in prose
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from scannability.content import ContentNode
from scannability.matcher import Matcher
from scannability.preset import Preset
from scannability.schemas.analysis import AnchorBreakdown, CategoryScore

logger = logging.getLogger(__name__)


# Extra characters a parent may hold around a standalone link
LINK_TEXT_SLACK = 10
LIST_ITEM_LINK_SLACK = 15  # room for bullets and numbering

# Images smaller than this on either declared side are icons
MIN_CONTENT_IMAGE_SIZE = 32

DECORATIVE_SRC_MARKERS = ("aa-avatar", "/avatar", "/emoji/", "emoji-service", "favicon")


@dataclass(frozen=True)
class AnchorCount:
    count: int = 0
    weight: float = 0.0  # count x unit weight


@dataclass
class WeightedAnchorBreakdown:
    headings: AnchorCount
    emphasis: AnchorCount
    code_blocks: AnchorCount
    inline_code: AnchorCount
    standalone_links: AnchorCount
    inline_links: AnchorCount
    images: AnchorCount
    lists: AnchorCount
    platform: dict[str, AnchorCount] = field(default_factory=dict)

    def standard(self) -> dict[str, AnchorCount]:
        return {
            "headings": self.headings,
            "emphasis": self.emphasis,
            "code_blocks": self.code_blocks,
            "inline_code": self.inline_code,
            "standalone_links": self.standalone_links,
            "inline_links": self.inline_links,
            "images": self.images,
            "lists": self.lists,
        }

    @property
    def total_weighted(self) -> float:
        counts = [*self.standard().values(), *self.platform.values()]
        return sum(c.weight for c in counts)

    @property
    def total_raw(self) -> int:
        counts = [*self.standard().values(), *self.platform.values()]
        return sum(c.count for c in counts)

    def to_schema(self) -> AnchorBreakdown:
        def convert(c: AnchorCount) -> CategoryScore:
            return CategoryScore(count=c.count, weight=c.weight)

        return AnchorBreakdown(
            **{name: convert(c) for name, c in self.standard().items()},
            platform={name: convert(c) for name, c in self.platform.items()},
        )


# ============================================================
# HELPERS
# ============================================================

def is_ignored(content: ContentNode, ignore: Matcher) -> bool:
    return content.closest(ignore) is not None


def is_standalone_link(link: ContentNode) -> bool:
    """True when the link is the only significant content of its parent."""
    parent = link.parent
    if parent is None:
        return False

    parent_text = parent.text_content().strip()
    link_text = link.text_content().strip()

    if parent.tag == "li":
        return len(parent_text) < len(link_text) + LIST_ITEM_LINK_SLACK
    return parent_text == link_text or len(parent_text) < len(link_text) + LINK_TEXT_SLACK


def _declared_size(content: ContentNode, name: str) -> Optional[float]:
    raw = content.attrs.get(name, "").strip().lower()
    if raw.endswith("px"):
        raw = raw[:-2]
    try:
        return float(raw)
    except ValueError:
        return None


def is_content_image(image: ContentNode) -> bool:
    """Filter out avatars, emoji, favicons and icon-sized media."""
    if image.tag == "img":
        src = image.attrs.get("src", "")
        if any(marker in src for marker in DECORATIVE_SRC_MARKERS):
            return False
    if image.tag == "svg" and "icon" in image.attrs.get("class", "").lower():
        return False
    for side in ("width", "height"):
        size = _declared_size(image, side)
        if size is not None and 0 < size < MIN_CONTENT_IMAGE_SIZE:
            return False
    return True


# ============================================================
# CLASSIFIER
# ============================================================

def classify(
    root: ContentNode,
    preset: Preset,
    ignore: Optional[Matcher] = None,
    code_blocks: Optional[Matcher] = None,
) -> WeightedAnchorBreakdown:
    """
    Count and weight every anchor category under ``root``.

    Args:
        root: The content area.
        preset: Supplies anchor matchers and weights.
        ignore: Regions to skip. Defaults to the preset's ignore list.
        code_blocks: Overrides the preset's code-block matcher.

    Returns:
        Per-category counts with their weighted contribution.
    """
    anchors = preset.matchers.anchors
    analysis = preset.analysis
    if ignore is None:
        ignore = preset.matchers.ignore_matcher
    if code_blocks is None:
        code_blocks = anchors.code_blocks

    def collect(matcher: Matcher) -> list[ContentNode]:
        return [n for n in root.find_all(matcher) if not is_ignored(n, ignore)]

    def weighted(count: int, key: str) -> AnchorCount:
        return AnchorCount(count=count, weight=count * analysis.weight_for(key))

    inline_code = [n for n in collect(anchors.inline_code) if n.closest(code_blocks) is None]

    standalone = inline = 0
    for link in collect(anchors.links):
        if is_standalone_link(link):
            standalone += 1
        else:
            inline += 1

    images = [n for n in collect(anchors.images) if is_content_image(n)]

    platform: dict[str, AnchorCount] = {}
    for name, matcher in preset.matchers.platform_anchors.items():
        if not matcher.valid:
            logger.debug("Skipping platform anchor %s with invalid selector", name)
        platform[name] = weighted(len(collect(matcher)), name)

    return WeightedAnchorBreakdown(
        headings=weighted(len(collect(anchors.headings)), "heading"),
        emphasis=weighted(len(collect(anchors.emphasis)), "emphasis"),
        code_blocks=weighted(len(collect(code_blocks)), "code_block"),
        inline_code=weighted(len(inline_code), "inline_code"),
        standalone_links=weighted(standalone, "link_standalone"),
        inline_links=weighted(inline, "link_inline"),
        images=weighted(len(images), "image"),
        lists=weighted(len(collect(anchors.lists)), "list"),
        platform=platform,
    )
