"""
Suggestion Evaluator

Platform-specific advice ("use an info panel for that warning") shown
next to the score. Suggestions never change the score.

Each SuggestionRule is checked in order until one test triggers:
missing_matcher (nothing matches), present_matcher (something matches),
then a named predicate looked up in a PredicateRegistry. Rules name
their predicate instead of holding a function, so presets stay plain
data and the receiving side resolves the name against its own registry.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional

from scannability.content import ContentNode
from scannability.preset import SuggestionRule
from scannability.schemas.analysis import TriggeredSuggestion

logger = logging.getLogger(__name__)

Predicate = Callable[[ContentNode], bool]


class PredicateRegistry:
    """Name -> predicate lookup for suggestion rules."""

    def __init__(self, predicates: Optional[dict[str, Predicate]] = None):
        self._predicates: dict[str, Predicate] = dict(predicates or {})

    def register(self, name: str, predicate: Optional[Predicate] = None):
        """
        Register ``predicate`` under ``name``. Without a predicate, returns
        a decorator:

            @registry.register("notion-callouts")
            def has_bare_callout_text(root): ...
        """
        if predicate is not None:
            self._predicates[name] = predicate
            return predicate

        def decorator(fn: Predicate) -> Predicate:
            self._predicates[name] = fn
            return fn
        return decorator

    def resolve(self, name: str) -> Optional[Predicate]:
        return self._predicates.get(name)

    def copy(self) -> PredicateRegistry:
        return PredicateRegistry(self._predicates)

    @property
    def names(self) -> list[str]:
        return sorted(self._predicates)

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def __iter__(self) -> Iterator[str]:
        return iter(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)


# Built-in presets register their predicates here on import
predicate_registry = PredicateRegistry()


def _run_predicate(rule: SuggestionRule, root: ContentNode, registry: PredicateRegistry) -> bool:
    predicate = registry.resolve(rule.predicate)
    if predicate is None:
        logger.warning(
            "Unknown suggestion predicate %r", rule.predicate,
            extra={"rule_id": rule.id, "error": "unknown_predicate"},
        )
        return False
    try:
        return bool(predicate(root))
    except Exception as e:
        logger.warning(
            "Suggestion predicate %r failed: %s", rule.predicate, e,
            extra={"rule_id": rule.id, "error": str(e)},
        )
        return False


def is_triggered(
    rule: SuggestionRule,
    root: ContentNode,
    registry: Optional[PredicateRegistry] = None,
) -> bool:
    # An invalid or empty selector is not evidence that something is missing
    if rule.missing_matcher is not None and not rule.missing_matcher.is_empty:
        if root.find(rule.missing_matcher) is None:
            return True
    if rule.present_matcher is not None:
        if root.find(rule.present_matcher) is not None:
            return True
    if rule.predicate:
        if registry is None:
            registry = predicate_registry
        return _run_predicate(rule, root, registry)
    return False


def evaluate_suggestions(
    root: ContentNode,
    rules: Iterable[SuggestionRule],
    registry: Optional[PredicateRegistry] = None,
) -> list[TriggeredSuggestion]:
    """Triggered suggestions in rule order."""
    triggered = []
    for rule in rules:
        if is_triggered(rule, root, registry):
            triggered.append(TriggeredSuggestion(
                id=rule.id, name=rule.name, description=rule.description,
            ))
    return triggered
