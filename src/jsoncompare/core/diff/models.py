from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Literal

from jsoncompare.core.canonical import fingerprint
from jsoncompare.core.constants import (
    COMPOSITE_KEY_SEPARATOR,
    DIFF_ADDED,
    DIFF_CHANGED,
    DIFF_KINDS,
    DIFF_REMOVED,
    VIEWER_IDS,
)
from jsoncompare.core.paths.types import ArrayPatternPath, IdentityPath

DiffKind = Literal["added", "removed", "changed"]


@dataclass(slots=True, frozen=True)
class DiffRecord:
    """One leaf-level divergence between the two trees.

    ``before`` is meaningful for removed and changed records, ``after`` for
    added and changed ones. JSON ``null`` is a real value, so presence is
    decided by ``kind`` rather than by ``None``.

    ``side`` is set when an index hop of ``path`` only holds on one tree (an
    unkeyed element of a keyed array); such a path must not be resolved
    against the other tree.
    """

    path: IdentityPath
    kind: DiffKind
    before: Any = None
    after: Any = None
    identity_key_used: str | None = None
    side: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in DIFF_KINDS:
            raise ValueError(f"Unknown diff kind: {self.kind!r}. Supported: {', '.join(DIFF_KINDS)}")
        if self.side is not None and self.side not in VIEWER_IDS:
            raise ValueError(f"Unknown viewer side: {self.side!r}. Supported: {', '.join(VIEWER_IDS)}")

    @property
    def has_before(self) -> bool:
        return self.kind in (DIFF_REMOVED, DIFF_CHANGED)

    @property
    def has_after(self) -> bool:
        return self.kind in (DIFF_ADDED, DIFF_CHANGED)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"path": self.path.value, "kind": self.kind}
        if self.has_before:
            payload["before"] = self.before
        if self.has_after:
            payload["after"] = self.after
        if self.identity_key_used is not None:
            payload["identity_key_used"] = self.identity_key_used
        if self.side is not None:
            payload["side"] = self.side
        return payload


@dataclass(slots=True, frozen=True)
class IdentityKeyInfo:
    array_pattern_path: ArrayPatternPath
    identity_key: str
    is_composite: bool
    size_left: int
    size_right: int

    @property
    def key_parts(self) -> tuple[str, ...]:
        return tuple(self.identity_key.split(COMPOSITE_KEY_SEPARATOR))

    def to_dict(self) -> dict[str, Any]:
        return {
            "array_pattern_path": self.array_pattern_path.value,
            "identity_key": self.identity_key,
            "is_composite": self.is_composite,
            "size_left": self.size_left,
            "size_right": self.size_right,
        }


@dataclass(slots=True, frozen=True)
class CompareResult:
    diffs: tuple[DiffRecord, ...]
    identity_keys: tuple[IdentityKeyInfo, ...]

    @property
    def has_differences(self) -> bool:
        return bool(self.diffs)

    def summary(self) -> dict[str, Any]:
        counts = Counter(diff.kind for diff in self.diffs)
        return {
            "diff_count": len(self.diffs),
            "kinds": {kind: counts.get(kind, 0) for kind in DIFF_KINDS},
            "keyed_arrays": len(self.identity_keys),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "diffs": [diff.to_dict() for diff in self.diffs],
            "identity_keys": [info.to_dict() for info in self.identity_keys],
        }

    def fingerprint(self) -> str:
        """Stable digest of the diff list and key catalog, usable as a cache version."""
        return fingerprint(
            {
                "diffs": [diff.to_dict() for diff in self.diffs],
                "identity_keys": [info.to_dict() for info in self.identity_keys],
            }
        )


__all__ = [
    "CompareResult",
    "DiffKind",
    "DiffRecord",
    "IdentityKeyInfo",
]
