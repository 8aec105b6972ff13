"""
Matcher — Node Predicates from Selector Strings

Presets describe which nodes belong to a category with compact selector
strings. A Matcher is the compiled form: a predicate over element nodes.

Supported grammar (a deliberate subset of CSS):
  - comma-separated alternatives: ``h1, h2, .title``
  - per alternative, a compound of:
      tag or ``*`` (first only), ``.class``, ``#id``,
      ``[attr]``, ``[attr=v]``, ``[attr*=v]``, ``[attr^=v]``,
      ``[attr$=v]``, ``[attr~=v]`` (values quoted or bare)

Combinators and pseudo-classes are not supported. A selector that fails
to compile produces a Matcher that matches nothing. It never raises;
the failure is logged once per distinct selector.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Iterable, NamedTuple, Optional

if TYPE_CHECKING:
    from scannability.content import ContentNode

logger = logging.getLogger(__name__)


class MatcherSyntaxError(ValueError):
    """Raised internally while compiling a selector. Never escapes Matcher.compile."""


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<comma>,)
    |(?P<universal>\*)
    |(?P<tag>[A-Za-z][A-Za-z0-9-]*)
    |\.(?P<cls>-?[A-Za-z_][\w-]*)
    |\#(?P<id>-?[A-Za-z_][\w-]*)
    |\[\s*(?P<attr>[A-Za-z_][\w:.-]*)\s*
        (?:(?P<op>[*^$~]?=)\s*
            (?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'\]]+))\s*
        )?\]
    """,
    re.VERBOSE,
)

NodeTest = Callable[["ContentNode"], bool]


class _Compound(NamedTuple):
    source: str
    tag: Optional[str]
    tests: tuple[NodeTest, ...]

    def matches(self, content: ContentNode) -> bool:
        if not content.is_element:
            return False
        if self.tag is not None and content.tag != self.tag:
            return False
        return all(test(content) for test in self.tests)


def _has_class(name: str) -> NodeTest:
    return lambda content: name in content.classes


def _attribute_test(name: str, op: Optional[str], value: str) -> NodeTest:
    if op is None:
        return lambda content: name in content.attrs
    if op == "=":
        return lambda content: content.attrs.get(name) == value
    if not value:
        # Empty substring/prefix/suffix tests never match
        return lambda content: False
    if op == "*=":
        return lambda content: value in content.attrs.get(name, "")
    if op == "^=":
        return lambda content: content.attrs.get(name, "").startswith(value)
    if op == "$=":
        return lambda content: content.attrs.get(name, "").endswith(value)
    return lambda content: value in content.attrs.get(name, "").split()


def _parse(selector: str) -> tuple[_Compound, ...]:
    alternatives: list[_Compound] = []
    tag: Optional[str] = None
    tests: list[NodeTest] = []
    start = 0
    started = False
    spaced = False
    pos = 0

    while pos < len(selector):
        m = _TOKEN_RE.match(selector, pos)
        if m is None:
            raise MatcherSyntaxError(f"unexpected {selector[pos]!r} at position {pos}")
        pos = m.end()

        if m.group("space") is not None:
            spaced = True
            continue

        if m.group("comma") is not None:
            if not started:
                raise MatcherSyntaxError("empty alternative")
            source = selector[start:m.start()].strip()
            alternatives.append(_Compound(source, tag, tuple(tests)))
            tag, tests, started, spaced = None, [], False, False
            start = pos
            continue

        if spaced and started:
            raise MatcherSyntaxError("combinators are not supported")
        spaced = False

        if m.group("universal") is not None or m.group("tag") is not None:
            if started:
                raise MatcherSyntaxError("type selector must come first")
            tag = m.group("tag").lower() if m.group("tag") else None
        elif m.group("cls") is not None:
            tests.append(_has_class(m.group("cls")))
        elif m.group("id") is not None:
            tests.append(_attribute_test("id", "=", m.group("id")))
        else:
            value = next(
                (v for v in (m.group("dq"), m.group("sq"), m.group("bare")) if v is not None),
                "",
            )
            tests.append(_attribute_test(m.group("attr"), m.group("op"), value))
        started = True

    if started:
        alternatives.append(_Compound(selector[start:].strip(), tag, tuple(tests)))
    elif alternatives:
        raise MatcherSyntaxError("trailing comma")
    return tuple(alternatives)


def split_alternatives(selector: str) -> list[str]:
    """Split on commas outside attribute brackets and quotes. Blank parts are dropped."""
    parts: list[str] = []
    current: list[str] = []
    quote: Optional[str] = None
    depth = 0
    for char in selector:
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "[":
            depth += 1
        elif char == "]" and depth:
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


@functools.lru_cache(maxsize=1024)
def _compile(selector: str) -> tuple[tuple[_Compound, ...], Optional[str]]:
    try:
        return _parse(selector), None
    except MatcherSyntaxError as e:
        logger.warning(
            "Invalid selector %r: %s", selector, e,
            extra={"selector": selector, "error": str(e)},
        )
        return (), str(e)


class Matcher:
    """Compiled node predicate. Immutable; compares by selector text."""

    __slots__ = ("selector", "error", "_alternatives")

    def __init__(
        self,
        selector: str = "",
        alternatives: tuple[_Compound, ...] = (),
        error: Optional[str] = None,
    ):
        self.selector = selector
        self.error = error
        self._alternatives = alternatives

    @classmethod
    def compile(cls, selector: str) -> Matcher:
        selector = selector.strip()
        alternatives, error = _compile(selector)
        return cls(selector, alternatives, error)

    @classmethod
    def each(cls, selector: str) -> list[Matcher]:
        """
        Compile every comma-separated alternative on its own, in order.

        An invalid alternative yields an empty Matcher in its slot without
        affecting its siblings.
        """
        return [cls.compile(part) for part in split_alternatives(selector)]

    @classmethod
    def never(cls) -> Matcher:
        return cls()

    @classmethod
    def any_of(cls, matchers: Iterable[Matcher]) -> Matcher:
        """Union of matchers. Invalid or empty members contribute nothing."""
        kept = [m for m in matchers if not m.is_empty]
        return cls(
            ", ".join(m.selector for m in kept),
            tuple(c for m in kept for c in m._alternatives),
        )

    @classmethod
    def coerce(cls, value: Any) -> Matcher:
        """Build a Matcher from a Matcher, selector string, None, or a sequence of those."""
        if isinstance(value, Matcher):
            return value
        if value is None:
            return cls.never()
        if isinstance(value, str):
            return cls.compile(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls.any_of(cls.coerce(v) for v in value)
        raise ValueError(f"cannot build a Matcher from {type(value).__name__}")

    @property
    def valid(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        """True when the matcher can never match (empty or invalid selector)."""
        return not self._alternatives

    def alternatives(self) -> list[Matcher]:
        """One Matcher per comma-separated alternative, in declaration order."""
        return [Matcher(c.source, (c,)) for c in self._alternatives]

    def matches(self, content: ContentNode) -> bool:
        return any(c.matches(content) for c in self._alternatives)

    # Immutable: copies share the compiled alternatives
    def __copy__(self) -> Matcher:
        return self

    def __deepcopy__(self, memo: dict) -> Matcher:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matcher):
            return NotImplemented
        return self.selector == other.selector

    def __hash__(self) -> int:
        return hash(self.selector)

    def __repr__(self) -> str:
        return f"Matcher({self.selector!r})"

    def __str__(self) -> str:
        return self.selector
