from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from jsoncompare.core.diff.models import DiffRecord
from jsoncompare.core.paths.grammar import strip_prefixes

logger = logging.getLogger(__name__)


def matches_ignore_pattern(path: str, pattern: str) -> bool:
    """Case-insensitive substring match against the prefix-free path."""
    if not pattern:
        return False
    return pattern.lower() in strip_prefixes(path).lower()


def filter_ignored(diffs: Sequence[DiffRecord], patterns: Iterable[str]) -> list[DiffRecord]:
    active = [pattern for pattern in patterns if pattern]
    if not active:
        return list(diffs)
    kept: list[DiffRecord] = []
    for diff in diffs:
        if any(matches_ignore_pattern(diff.path.value, pattern) for pattern in active):
            logger.debug("ignoring diff at %s", diff.path.value)
            continue
        kept.append(diff)
    return kept


__all__ = ["filter_ignored", "matches_ignore_pattern"]
