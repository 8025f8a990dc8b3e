"""Identity-key detection for arrays of objects.

``find_identity_key`` decides whether one property, or a combination of two
or three, identifies the elements of two arrays well enough to correlate
them across reorders, insertions and deletions.

**Candidates** come from a single sample object (the first object on the
left, else on the right), ordered by ``preferred_keys`` first and then
alphabetically. Singles are tried before pairs, pairs before triples, and
combinations follow the candidate order, so detection is deterministic.

**A candidate passes** when every object on both sides holds a string or
number for each key part, the identities are unique within each side, and
the two identity sets overlap by at least ``min_overlap_ratio`` of the
smaller set. The overlap test keeps unrelated arrays that happen to share
a unique field from being aligned.

A failed detection is not an error: the caller compares positionally.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from itertools import combinations
from typing import Any

from jsoncompare.core.constants import COMPOSITE_KEY_SEPARATOR
from jsoncompare.core.settings import DetectorSettings

logger = logging.getLogger(__name__)

Identity = tuple[str, ...]


def is_identity_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def identity_text(value: str | int | float) -> str:
    """Path text of one identity value; ``1`` and ``1.0`` are the same JSON number."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def identity_of(item: Any, key_parts: Sequence[str]) -> Identity | None:
    """Identity text of ``item`` under ``key_parts``, or None if it has none."""
    if not isinstance(item, Mapping):
        return None
    values: list[str] = []
    for part in key_parts:
        if part not in item:
            return None
        value = item[part]
        if not is_identity_scalar(value):
            return None
        values.append(identity_text(value))
    return tuple(values)


def split_identity_key(identity_key: str) -> tuple[str, ...]:
    return tuple(identity_key.split(COMPOSITE_KEY_SEPARATOR))


def rank_candidates(names: Iterable[Any], preferred_keys: Sequence[str]) -> list[str]:
    preference = {name.lower(): position for position, name in enumerate(preferred_keys)}

    def _rank(name: str) -> tuple[int, int, str]:
        position = preference.get(name.lower())
        if position is None:
            return (1, 0, name)
        return (0, position, name)

    # A property whose name contains the composite separator cannot be spelled as a key.
    usable = [name for name in names if isinstance(name, str) and COMPOSITE_KEY_SEPARATOR not in name]
    return sorted(usable, key=_rank)


def _unique_identities(objects: list[Mapping[str, Any]], key_parts: Sequence[str]) -> set[Identity] | None:
    seen: set[Identity] = set()
    for item in objects:
        identity = identity_of(item, key_parts)
        if identity is None or identity in seen:
            return None
        seen.add(identity)
    return seen


def _accepts(
    key_parts: Sequence[str],
    left_objects: list[Mapping[str, Any]],
    right_objects: list[Mapping[str, Any]],
    settings: DetectorSettings,
) -> bool:
    left_ids = _unique_identities(left_objects, key_parts)
    if left_ids is None:
        return False
    right_ids = _unique_identities(right_objects, key_parts)
    if right_ids is None:
        return False
    if left_ids and right_ids:
        overlap = len(left_ids & right_ids) / min(len(left_ids), len(right_ids))
        if overlap < settings.min_overlap_ratio:
            return False
    return True


def _object_proportion_ok(items: Sequence[Any], objects: list[Mapping[str, Any]], minimum: float) -> bool:
    if not items:
        return True
    return len(objects) / len(items) >= minimum


def find_identity_key(
    left: Sequence[Any],
    right: Sequence[Any],
    settings: DetectorSettings | None = None,
) -> str | None:
    settings = settings or DetectorSettings()
    if len(left) <= 1 and len(right) <= 1:
        return None

    left_objects = [item for item in left if isinstance(item, Mapping)]
    right_objects = [item for item in right if isinstance(item, Mapping)]
    if not _object_proportion_ok(left, left_objects, settings.min_object_proportion):
        return None
    if not _object_proportion_ok(right, right_objects, settings.min_object_proportion):
        return None
    if not left_objects and not right_objects:
        return None

    sample = left_objects[0] if left_objects else right_objects[0]
    candidates = rank_candidates(sample.keys(), settings.preferred_keys)

    for size in range(1, settings.max_composite_size + 1):
        for key_parts in combinations(candidates, size):
            if _accepts(key_parts, left_objects, right_objects, settings):
                identity_key = COMPOSITE_KEY_SEPARATOR.join(key_parts)
                logger.debug(
                    "identity key %r accepted (left=%d right=%d)",
                    identity_key,
                    len(left),
                    len(right),
                )
                return identity_key

    logger.debug("no identity key among %d candidate(s)", len(candidates))
    return None


__all__ = [
    "Identity",
    "find_identity_key",
    "identity_of",
    "identity_text",
    "is_identity_scalar",
    "rank_candidates",
    "split_identity_key",
]
