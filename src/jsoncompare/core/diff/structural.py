from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from jsoncompare.core.canonical import value_token
from jsoncompare.core.constants import (
    COMPOSITE_KEY_SEPARATOR,
    DIFF_ADDED,
    DIFF_CHANGED,
    DIFF_REMOVED,
    EVENT_DIFF_EMITTED,
    EVENT_IDENTITY_KEY_DETECTED,
    EVENT_POSITIONAL_ARRAY,
    ROOT_MARKER,
    VIEWER_LEFT,
    VIEWER_RIGHT,
)
from jsoncompare.core.diff.identity import Identity, find_identity_key, identity_of, split_identity_key
from jsoncompare.core.diff.models import CompareResult, DiffKind, DiffRecord, IdentityKeyInfo
from jsoncompare.core.paths.grammar import (
    IdentitySegment,
    IndexSegment,
    ParsedPath,
    PatternSegment,
    PropertySegment,
    array_pattern_segments,
)
from jsoncompare.core.paths.types import ArrayPatternPath, IdentityPath
from jsoncompare.core.settings import DEFAULT_COMPARE_SETTINGS, CompareSettings

logger = logging.getLogger(__name__)

CompareObserver = Callable[[str, Mapping[str, Any]], None]


def json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return "array"
    return "other"


def _scalars_equal(left: Any, right: Any) -> bool:
    if isinstance(left, float) and isinstance(right, float) and math.isnan(left) and math.isnan(right):
        return True
    return bool(left == right)


class _StructuralDiffer:
    __slots__ = ("_diffs", "_identity_keys", "_observer", "_settings")

    def __init__(self, settings: CompareSettings, observer: CompareObserver | None) -> None:
        self._settings = settings
        self._observer = observer
        self._diffs: list[DiffRecord] = []
        self._identity_keys: dict[tuple[str, str], IdentityKeyInfo] = {}

    def result(self) -> CompareResult:
        return CompareResult(diffs=tuple(self._diffs), identity_keys=tuple(self._identity_keys.values()))

    def _notify(self, event: str, **details: Any) -> None:
        if self._observer is not None:
            self._observer(event, details)

    def _emit(
        self,
        path: ParsedPath,
        kind: DiffKind,
        *,
        before: Any = None,
        after: Any = None,
        identity_key: str | None = None,
        side: str | None = None,
    ) -> None:
        record = DiffRecord(
            path=IdentityPath.from_parsed(path),
            kind=kind,
            before=before,
            after=after,
            identity_key_used=identity_key,
            side=side,
        )
        self._diffs.append(record)
        logger.debug("%s at %s", kind, record.path.value)
        self._notify(EVENT_DIFF_EMITTED, path=record.path.value, kind=kind)

    def walk(self, left: Any, right: Any, path: ParsedPath) -> None:
        if left is right:
            return

        left_kind = json_kind(left)
        right_kind = json_kind(right)
        if left_kind != right_kind:
            self._emit(path, DIFF_CHANGED, before=left, after=right)
            return

        if left_kind == "array":
            self._compare_arrays(left, right, path)
            return
        if left_kind == "object":
            self._compare_objects(left, right, path)
            return

        if not _scalars_equal(left, right):
            self._emit(path, DIFF_CHANGED, before=left, after=right)

    def _compare_objects(self, left: Mapping[str, Any], right: Mapping[str, Any], path: ParsedPath) -> None:
        keys = list(left.keys())
        keys.extend(key for key in right.keys() if key not in left)
        for key in keys:
            child = path.child(PropertySegment(str(key)))
            if key in left and key in right:
                self.walk(left[key], right[key], child)
            elif key in left:
                self._emit(child, DIFF_REMOVED, before=left[key])
            else:
                self._emit(child, DIFF_ADDED, after=right[key])

    def _compare_arrays(self, left: Sequence[Any], right: Sequence[Any], path: ParsedPath) -> None:
        identity_key = find_identity_key(left, right, self._settings.detector)
        if identity_key is None:
            self._notify(EVENT_POSITIONAL_ARRAY, path=_display(path), size_left=len(left), size_right=len(right))
            self._compare_positional(left, right, path)
            return

        self._record_identity_key(path, identity_key, len(left), len(right))
        self._compare_keyed(left, right, path, identity_key)

    def _record_identity_key(self, path: ParsedPath, identity_key: str, size_left: int, size_right: int) -> None:
        pattern = ArrayPatternPath.from_parsed(
            ParsedPath(segments=(*array_pattern_segments(path.segments), PatternSegment()))
        )
        dedup_key = (pattern.value, identity_key)
        if dedup_key in self._identity_keys:
            return
        self._identity_keys[dedup_key] = IdentityKeyInfo(
            array_pattern_path=pattern,
            identity_key=identity_key,
            is_composite=COMPOSITE_KEY_SEPARATOR in identity_key,
            size_left=size_left,
            size_right=size_right,
        )
        self._notify(
            EVENT_IDENTITY_KEY_DETECTED,
            array_pattern_path=pattern.value,
            identity_key=identity_key,
            size_left=size_left,
            size_right=size_right,
        )

    def _compare_positional(self, left: Sequence[Any], right: Sequence[Any], path: ParsedPath) -> None:
        shared = min(len(left), len(right))
        for index in range(shared):
            self.walk(left[index], right[index], path.child(IndexSegment(index)))
        for index in range(shared, len(left)):
            self._emit(path.child(IndexSegment(index)), DIFF_REMOVED, before=left[index])
        for index in range(shared, len(right)):
            self._emit(path.child(IndexSegment(index)), DIFF_ADDED, after=right[index])

    def _compare_keyed(self, left: Sequence[Any], right: Sequence[Any], path: ParsedPath, identity_key: str) -> None:
        key_parts = split_identity_key(identity_key)
        left_keyed, left_rest = _partition(left, key_parts)
        right_keyed, right_rest = _partition(right, key_parts)
        right_by_identity = {identity: item for identity, _, item in right_keyed}
        matched: set[Identity] = set()

        for identity, _, item in left_keyed:
            child = path.child(IdentitySegment(tuple(zip(key_parts, identity))))
            if identity in right_by_identity:
                matched.add(identity)
                self.walk(item, right_by_identity[identity], child)
            else:
                self._emit(child, DIFF_REMOVED, before=item, identity_key=identity_key)

        for identity, _, item in right_keyed:
            if identity in matched:
                continue
            child = path.child(IdentitySegment(tuple(zip(key_parts, identity))))
            self._emit(child, DIFF_ADDED, after=item, identity_key=identity_key)

        self._compare_leftovers(left_rest, right_rest, path)

    def _compare_leftovers(
        self,
        left_rest: list[tuple[int, Any]],
        right_rest: list[tuple[int, Any]],
        path: ParsedPath,
    ) -> None:
        # Non-object elements of a keyed array have no identity; they are
        # matched by value and reported at their own index on their own side.
        if not left_rest and not right_rest:
            return
        available_right = Counter(value_token(item) for _, item in right_rest)
        available_left = Counter(value_token(item) for _, item in left_rest)
        for index, item in left_rest:
            token = value_token(item)
            if available_right[token] > 0:
                available_right[token] -= 1
                continue
            self._emit(path.child(IndexSegment(index)), DIFF_REMOVED, before=item, side=VIEWER_LEFT)
        for index, item in right_rest:
            token = value_token(item)
            if available_left[token] > 0:
                available_left[token] -= 1
                continue
            self._emit(path.child(IndexSegment(index)), DIFF_ADDED, after=item, side=VIEWER_RIGHT)


def _partition(
    items: Sequence[Any],
    key_parts: tuple[str, ...],
) -> tuple[list[tuple[Identity, int, Any]], list[tuple[int, Any]]]:
    keyed: list[tuple[Identity, int, Any]] = []
    rest: list[tuple[int, Any]] = []
    for index, item in enumerate(items):
        identity = identity_of(item, key_parts)
        if identity is None:
            rest.append((index, item))
        else:
            keyed.append((identity, index, item))
    keyed.sort(key=lambda entry: entry[0])
    return keyed, rest


def _display(path: ParsedPath) -> str:
    return IdentityPath.from_parsed(path).value


def compare(
    left: Any,
    right: Any,
    *,
    settings: CompareSettings | None = None,
    prefix: str | IdentityPath = ROOT_MARKER,
    observer: CompareObserver | None = None,
) -> CompareResult:
    """Compare two tree values and return their diff records and identity-key catalog.

    ``prefix`` is the identity path both values sit at; emitted paths extend it.
    ``observer`` receives ``(event, details)`` for keyed arrays, positional
    arrays and every emitted diff.
    """
    start = prefix if isinstance(prefix, IdentityPath) else IdentityPath(prefix)
    differ = _StructuralDiffer(settings or DEFAULT_COMPARE_SETTINGS, observer)
    differ.walk(left, right, start.parsed())
    result = differ.result()
    logger.debug(
        "compared %s: %d diff(s), %d keyed array pattern(s)",
        start.value,
        len(result.diffs),
        len(result.identity_keys),
    )
    return result


__all__ = [
    "CompareObserver",
    "compare",
    "json_kind",
]
