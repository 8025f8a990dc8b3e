"""Highlight classification of tree locations against a diff list.

Given the diffs of one comparison and any location (either dialect, any
viewer prefix), ``classify`` answers one question: is the location itself a
diff, inside a diff, or a container of a diff?

Matching works on normalized variants (see ``normalized_variants``): the
query and every diff path are expanded into their prefix-free index and
identity spellings against the viewer's tree, then compared as parsed
segment tuples. Exact match is set intersection. Descendant and ancestor
need a strict segment prefix, so ``obj.contributions`` never claims
``obj.contributionType`` and siblings at the same depth never match.

Priority is exact, then descendant, then ancestor. Every function here is
pure; callers that classify once per rendered node can memoize on
``(CompareResult.fingerprint(), path, side)``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from jsoncompare.core.constants import (
    CLASSIFICATION_ANCESTOR,
    CLASSIFICATION_DESCENDANT,
    CLASSIFICATION_EXACT,
    CLASSIFICATION_NONE,
    DIFF_ADDED,
    DIFF_CHANGED,
    DIFF_REMOVED,
    VIEWER_IDS,
    VIEWER_LEFT,
    VIEWER_RIGHT,
)
from jsoncompare.core.diff.models import DiffKind, DiffRecord, IdentityKeyInfo
from jsoncompare.core.paths.converter import PathContext, normalized_variants
from jsoncompare.core.paths.grammar import (
    IndexSegment,
    ParsedPath,
    PropertySegment,
    Segment,
    is_strict_prefix,
    parse_path,
)
from jsoncompare.core.paths.types import AnyPath, IndexPath, path_text

ClassificationStatus = Literal["exact", "descendant", "ancestor", "none"]

LABEL_PARENT_CHANGED = "parent_changed"


@dataclass(slots=True, frozen=True)
class Classification:
    status: ClassificationStatus
    kind: DiffKind | None = None

    @property
    def is_highlighted(self) -> bool:
        return self.status != CLASSIFICATION_NONE


NO_MATCH = Classification(status=CLASSIFICATION_NONE)
ANCESTOR = Classification(status=CLASSIFICATION_ANCESTOR)


class _DiffVariants:
    """Normalized segment spellings of every diff path for one viewer context.

    A diff whose path only holds on the other tree is kept literal and can
    only make its containers ancestors on this side.
    """

    __slots__ = ("_entries", "_own")

    def __init__(self, diffs: Iterable[DiffRecord], side: str, context: PathContext | None) -> None:
        self._entries: list[tuple[DiffRecord, frozenset[tuple[Segment, ...]]]] = []
        self._own: list[tuple[DiffRecord, frozenset[tuple[Segment, ...]]]] = []
        for diff in diffs:
            parsed = diff.path.parsed()
            if diff.side is not None and diff.side != side:
                self._entries.append((diff, frozenset({parsed.stripped().segments})))
                continue
            entry = (diff, frozenset(variant.segments for variant in normalized_variants(parsed, context)))
            self._entries.append(entry)
            self._own.append(entry)

    def classify(self, query: frozenset[tuple[Segment, ...]]) -> Classification:
        for diff, spellings in self._own:
            if spellings & query:
                return Classification(status=CLASSIFICATION_EXACT, kind=diff.kind)
        for diff, spellings in self._own:
            if any(is_strict_prefix(spelling, candidate) for spelling in spellings for candidate in query):
                return Classification(status=CLASSIFICATION_DESCENDANT, kind=diff.kind)
        for _, spellings in self._entries:
            if any(is_strict_prefix(candidate, spelling) for spelling in spellings for candidate in query):
                return ANCESTOR
        return NO_MATCH


def _check_side(side: str) -> None:
    if side not in VIEWER_IDS:
        raise ValueError(f"Unknown viewer side: {side!r}. Supported: {', '.join(VIEWER_IDS)}")


def _query_spellings(parsed: ParsedPath, side: str, context: PathContext | None) -> frozenset[tuple[Segment, ...]]:
    if parsed.viewer is not None and parsed.viewer != side:
        raise ValueError(f"Path is addressed to the {parsed.viewer} viewer but was classified for {side}")
    return frozenset(variant.segments for variant in normalized_variants(parsed, context))


def classify(
    diffs: Sequence[DiffRecord],
    path: AnyPath,
    side: str,
    context: PathContext | None = None,
) -> Classification:
    """Relationship of ``path`` to the diff set, as seen in the ``side`` tree.

    ``context`` carries that side's tree and the identity-key catalog; without
    it only literal (prefix-stripped) spellings are compared.
    """
    _check_side(side)
    query = _query_spellings(parse_path(path_text(path)), side, context)
    return _DiffVariants(diffs, side, context).classify(query)


def _walk_locations(node: Any, path: ParsedPath) -> Iterator[ParsedPath]:
    yield path
    if isinstance(node, Mapping):
        for key, value in node.items():
            yield from _walk_locations(value, path.child(PropertySegment(str(key))))
    elif isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray)):
        for index, value in enumerate(node):
            yield from _walk_locations(value, path.child(IndexSegment(index)))


def classify_tree(
    diffs: Sequence[DiffRecord],
    tree: Any,
    side: str,
    identity_keys: Iterable[IdentityKeyInfo] = (),
) -> Iterator[tuple[IndexPath, Classification]]:
    """Classify every node of ``tree`` (depth-first, root first)."""
    _check_side(side)
    context = PathContext(tree=tree, identity_keys=tuple(identity_keys))
    variants = _DiffVariants(diffs, side, context)
    for location in _walk_locations(tree, ParsedPath(has_root=True)):
        query = _query_spellings(location, side, context)
        yield IndexPath.from_parsed(location), variants.classify(query)


def highlight_label(classification: Classification, side: str) -> str | None:
    """UI-agnostic label for a classification on one side.

    Additions only show on the right, removals only on the left; changes show
    on both sides and containers of any diff are ``parent_changed``.
    """
    _check_side(side)
    if classification.status == CLASSIFICATION_ANCESTOR:
        return LABEL_PARENT_CHANGED
    if classification.status in (CLASSIFICATION_EXACT, CLASSIFICATION_DESCENDANT):
        if classification.kind == DIFF_ADDED:
            return DIFF_ADDED if side == VIEWER_RIGHT else None
        if classification.kind == DIFF_REMOVED:
            return DIFF_REMOVED if side == VIEWER_LEFT else None
        if classification.kind == DIFF_CHANGED:
            return DIFF_CHANGED
    return None


__all__ = [
    "ANCESTOR",
    "NO_MATCH",
    "Classification",
    "ClassificationStatus",
    "LABEL_PARENT_CHANGED",
    "classify",
    "classify_tree",
    "highlight_label",
]
