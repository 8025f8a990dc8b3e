"""Context-aware conversion between path dialects.

An identity path (``items[id=a].qty``) names the same element on both sides
of a comparison; an index path (``items[1].qty``) is only meaningful against
one concrete tree. Every conversion here therefore takes a ``PathContext``:
the tree of one side plus the identity-key catalog of the comparison.

Unresolvable references (an identity absent from the tree, an index out of
range, a missing property) return ``None``. That is the normal outcome for
nodes that exist on only one side, not an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from jsoncompare.core.diff.identity import identity_of
from jsoncompare.core.diff.models import IdentityKeyInfo
from jsoncompare.core.errors import PathDialectError
from jsoncompare.core.paths.grammar import (
    IdentitySegment,
    IndexSegment,
    ParsedPath,
    PatternSegment,
    PropertySegment,
    Segment,
    format_path,
    join_segments,
    parse_path,
)
from jsoncompare.core.paths.types import (
    AnyPath,
    ArrayPatternPath,
    IdentityPath,
    IndexPath,
    ViewerPath,
    path_text,
)

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(slots=True, frozen=True)
class PathContext:
    tree: Any
    identity_keys: tuple[IdentityKeyInfo, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.identity_keys, tuple):
            object.__setattr__(self, "identity_keys", tuple(self.identity_keys))

    def keys_for_pattern(self, pattern: str) -> list[IdentityKeyInfo]:
        return [info for info in self.identity_keys if info.array_pattern_path.value == pattern]


def _is_array(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))


def _property(node: Any, name: str) -> Any:
    if isinstance(node, Mapping) and name in node:
        return node[name]
    return _MISSING


def _element(node: Any, index: int) -> Any:
    if _is_array(node) and 0 <= index < len(node):
        return node[index]
    return _MISSING


def _find_identity(array: Sequence[Any], segment: IdentitySegment) -> int | None:
    for index, item in enumerate(array):
        if identity_of(item, segment.key_parts) == segment.values:
            return index
    return None


def _parse_location(path: AnyPath) -> ParsedPath:
    parsed = parse_path(path_text(path))
    if parsed.has_pattern_segments():
        raise PathDialectError(path_text(path), "location path", "'[]' describes a shape, not a location")
    return parsed


def _identity_to_index(parsed: ParsedPath, tree: Any) -> ParsedPath | None:
    node = tree
    converted: list[Segment] = []
    for segment in parsed.segments:
        if isinstance(segment, PropertySegment):
            node = _property(node, segment.name)
            converted.append(segment)
        elif isinstance(segment, IndexSegment):
            node = _element(node, segment.index)
            converted.append(segment)
        elif isinstance(segment, IdentitySegment):
            if not _is_array(node):
                return None
            index = _find_identity(node, segment)
            if index is None:
                return None
            node = node[index]
            converted.append(IndexSegment(index))
        if node is _MISSING:
            return None
    return ParsedPath(segments=tuple(converted), has_root=parsed.has_root)


def identity_to_index(path: AnyPath, context: PathContext) -> IndexPath | None:
    """Resolve every identity hop of ``path`` to the index it occupies in ``context.tree``."""
    resolved = _identity_to_index(_parse_location(path), context.tree)
    if resolved is None:
        logger.debug("identity path %s does not resolve against this tree", path_text(path))
        return None
    return IndexPath.from_parsed(resolved)


def _identity_segment_for(array: Sequence[Any], index: int, candidates: Iterable[IdentityKeyInfo]) -> Segment | None:
    item = array[index]
    for info in candidates:
        key_parts = info.key_parts
        identity = identity_of(item, key_parts)
        if identity is None:
            continue
        # A duplicated identity could not be resolved back to this element.
        occurrences = sum(1 for other in array if identity_of(other, key_parts) == identity)
        if occurrences != 1:
            continue
        return IdentitySegment(tuple(zip(key_parts, identity)))
    return None


def _index_to_identity(parsed: ParsedPath, context: PathContext) -> ParsedPath | None:
    node = context.tree
    converted: list[Segment] = []
    shape: list[Segment] = []
    for segment in parsed.segments:
        if isinstance(segment, PropertySegment):
            node = _property(node, segment.name)
            converted.append(segment)
            shape.append(segment)
        elif isinstance(segment, IndexSegment):
            if _element(node, segment.index) is _MISSING:
                return None
            pattern = join_segments((*shape, PatternSegment()))
            identity_segment = _identity_segment_for(node, segment.index, context.keys_for_pattern(pattern))
            converted.append(identity_segment or segment)
            shape.append(PatternSegment())
            node = node[segment.index]
        else:
            raise PathDialectError(format_path(parsed), "IndexPath", "identity segments need identity_to_index")
        if node is _MISSING:
            return None
    return ParsedPath(segments=tuple(converted), has_root=parsed.has_root)


def index_to_identity(path: IndexPath | ViewerPath | str, context: PathContext) -> IdentityPath | None:
    """Rewrite array hops of ``path`` as identity segments wherever the catalog knows a key.

    Arrays without a catalog entry, and elements whose identity is missing or
    duplicated, keep their ``[n]`` hop.
    """
    if isinstance(path, ViewerPath):
        index_path = path.index_path
    elif isinstance(path, IndexPath):
        index_path = path
    else:
        parsed = parse_path(path)
        index_path = IndexPath.from_parsed(ParsedPath(segments=parsed.segments, has_root=parsed.has_root))
    converted = _index_to_identity(index_path.parsed(), context)
    if converted is None:
        logger.debug("index path %s does not resolve against this tree", index_path.value)
        return None
    return IdentityPath.from_parsed(converted)


def normalized_variants(parsed: ParsedPath, context: PathContext | None = None) -> set[ParsedPath]:
    """Prefix-free spellings of one location: as given, plus index and identity forms."""
    stripped = parsed.stripped()
    variants = {stripped}
    if context is None or stripped.has_pattern_segments():
        return variants

    if stripped.has_identity_segments():
        index_form = _identity_to_index(stripped, context.tree)
    else:
        index_form = stripped
    if index_form is None:
        return variants
    variants.add(index_form)

    if index_form.has_index_segments():
        identity_form = _index_to_identity(index_form, context)
        if identity_form is not None:
            variants.add(identity_form)
    return variants


def normalize_for_comparison(path: AnyPath, context: PathContext | None = None) -> frozenset[str]:
    """Every known spelling of ``path``, for matching by set intersection."""
    parsed = parse_path(path_text(path))
    return frozenset(format_path(variant) for variant in normalized_variants(parsed, context))


def are_paths_equivalent(first: AnyPath, second: AnyPath, context: PathContext | None = None) -> bool:
    return bool(normalize_for_comparison(first, context) & normalize_for_comparison(second, context))


def identity_to_viewer_path(path: AnyPath, side: str, context: PathContext) -> ViewerPath | None:
    """Index-addressed location of ``path`` in the ``side`` tree held by ``context``."""
    index_path = identity_to_index(path, context)
    if index_path is None:
        return None
    return ViewerPath.for_side(side, index_path)


def viewer_path_to_identity(path: ViewerPath | str, context: PathContext) -> IdentityPath | None:
    viewer_path = path if isinstance(path, ViewerPath) else ViewerPath(path)
    return index_to_identity(viewer_path, context)


def _contains(node: Any, segments: tuple[Segment, ...]) -> bool:
    for position, segment in enumerate(segments):
        if isinstance(segment, PropertySegment):
            node = _property(node, segment.name)
        elif _is_array(node):
            remainder = segments[position + 1 :]
            return any(_contains(item, remainder) for item in node)
        else:
            return False
        if node is _MISSING:
            return False
    return True


def resolve_array_pattern(pattern: ArrayPatternPath | str, tree: Any) -> IndexPath:
    """Concrete index path for a shape-only pattern such as ``a[].b[]``.

    At every ``[]`` hop the first element whose subtree contains the rest of
    the pattern is chosen; when no element qualifies the hop falls back to 0.
    """
    pattern_path = pattern if isinstance(pattern, ArrayPatternPath) else ArrayPatternPath(pattern)
    parsed = pattern_path.parsed()
    segments = parsed.segments
    node = tree
    resolved: list[Segment] = []
    for position, segment in enumerate(segments):
        if isinstance(segment, PropertySegment):
            resolved.append(segment)
            node = _property(node, segment.name)
            continue
        chosen = 0
        if _is_array(node):
            remainder = segments[position + 1 :]
            chosen = next((index for index, item in enumerate(node) if _contains(item, remainder)), 0)
        resolved.append(IndexSegment(chosen))
        node = _element(node, chosen)
    return IndexPath.from_parsed(ParsedPath(segments=tuple(resolved), has_root=parsed.has_root))


__all__ = [
    "PathContext",
    "are_paths_equivalent",
    "identity_to_index",
    "identity_to_viewer_path",
    "index_to_identity",
    "normalize_for_comparison",
    "normalized_variants",
    "resolve_array_pattern",
    "viewer_path_to_identity",
]
