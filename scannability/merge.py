"""
Preset Merger

Combines a base preset (usually the global one) with a platform-specific
partial override into one complete, normalized Preset.

  - Mappings are merged recursively, key by key
  - Sequences are concatenated: base entries first, then override entries
    (global anti-patterns are kept, platform ones are appended)
  - Scalars take the override value when it is defined (not None)

A normalization pass then guarantees every required nested structure is
populated, falling back to the base's value. The merger has no error
path: override values that fail validation are discarded and logged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from scannability.preset import PartialPreset, Preset

logger = logging.getLogger(__name__)

# Upper bound on validate/repair rounds for a malformed override
_MAX_REPAIRS = 50


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``. Neither input is modified."""
    result = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = deep_merge(current, value)
        elif _is_sequence(value) and _is_sequence(current):
            result[key] = [*current, *value]
        else:
            result[key] = value
    return result


def _as_tree(value: Any) -> Any:
    """Plain-container view of an override. Models contribute only the fields that were set."""
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True)
    if isinstance(value, Mapping):
        return {key: _as_tree(v) for key, v in value.items()}
    if _is_sequence(value):
        return [_as_tree(v) for v in value]
    return value


def _fill(tree: dict[str, Any], reference: Mapping[str, Any]) -> dict[str, Any]:
    """Populate keys missing from ``tree`` (or holding the wrong shape) from ``reference``."""
    for key, ref_value in reference.items():
        value = tree.get(key)
        if isinstance(ref_value, Mapping):
            if isinstance(value, Mapping):
                tree[key] = _fill(dict(value), ref_value)
            else:
                tree[key] = ref_value
        elif value is None:
            tree[key] = ref_value
    return tree


def _discard(tree: dict[str, Any], reference: Mapping[str, Any], loc: tuple) -> None:
    """
    Undo the override at ``loc``: sequence items are dropped, mapping
    entries revert to the base value (or are removed when the base has none).
    """
    container: Any = tree
    ref: Any = reference
    for depth, part in enumerate(loc):
        if _is_sequence(container):
            if isinstance(container, list) and isinstance(part, int) and 0 <= part < len(container):
                del container[part]
            return
        if not isinstance(container, dict) or part not in container:
            return
        last = depth == len(loc) - 1
        ref_next = ref.get(part) if isinstance(ref, Mapping) else None
        if last or not isinstance(container[part], (dict, list)):
            if ref_next is not None:
                container[part] = ref_next
            else:
                del container[part]
            return
        container, ref = container[part], ref_next


def _normalize(tree: dict[str, Any], base: Preset) -> Preset:
    reference = base.model_dump()
    tree = _fill(tree, reference)
    for _ in range(_MAX_REPAIRS):
        try:
            return Preset.model_validate(tree)
        except ValidationError as e:
            error = e.errors()[0]
            logger.warning(
                "Discarding invalid preset override at %s: %s",
                ".".join(str(p) for p in error["loc"]), error["msg"],
                extra={"preset_id": tree.get("id"), "error": error["msg"]},
            )
            _discard(tree, reference, tuple(error["loc"]))
    logger.warning("Preset override could not be repaired; using base preset %s", base.id)
    return base


def merge_preset(base: Preset, override: PartialPreset) -> Preset:
    """
    Merge a partial override into a complete base preset.

    Args:
        base: Complete preset (usually the global preset).
        override: Partial preset mapping. Leaves may be selector strings,
            Matcher objects, rule mappings or rule models.

    Returns:
        A new, fully populated Preset. ``merge_preset(base, {}) == base``.
    """
    tree = deep_merge(base.model_dump(), _as_tree(override))
    return _normalize(tree, base)
