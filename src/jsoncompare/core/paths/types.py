"""Nominal path dialects.

Each dialect wraps a plain string and validates it on construction. The
wrappers never compare equal to each other or to ``str``; crossing from one
dialect to another goes through an explicit method here or through the
context-aware converter.
"""

from __future__ import annotations

from dataclasses import dataclass

from jsoncompare.core.constants import VIEWER_IDS
from jsoncompare.core.errors import PathDialectError
from jsoncompare.core.paths.grammar import (
    IdentitySegment,
    IndexSegment,
    ParsedPath,
    PatternSegment,
    format_path,
    parse_path,
)


def _reject_viewer(value: str, parsed: ParsedPath, dialect: str) -> None:
    if parsed.viewer is not None:
        raise PathDialectError(value, dialect, "viewer prefixes are only valid on ViewerPath")


@dataclass(slots=True, frozen=True)
class IndexPath:
    value: str

    def __post_init__(self) -> None:
        parsed = parse_path(self.value)
        _reject_viewer(self.value, parsed, "IndexPath")
        for segment in parsed.segments:
            if isinstance(segment, IdentitySegment):
                raise PathDialectError(self.value, "IndexPath", "identity segments need a tree to resolve")
            if isinstance(segment, PatternSegment):
                raise PathDialectError(self.value, "IndexPath", "'[]' describes a shape, not a location")

    @classmethod
    def from_parsed(cls, parsed: ParsedPath) -> IndexPath:
        return cls(format_path(parsed))

    def parsed(self) -> ParsedPath:
        return parse_path(self.value)

    def as_identity_path(self) -> IdentityPath:
        # Every index path is also a valid identity path.
        return IdentityPath(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class IdentityPath:
    value: str

    def __post_init__(self) -> None:
        parsed = parse_path(self.value)
        _reject_viewer(self.value, parsed, "IdentityPath")
        if parsed.has_pattern_segments():
            raise PathDialectError(self.value, "IdentityPath", "'[]' describes a shape, not a location")

    @classmethod
    def from_parsed(cls, parsed: ParsedPath) -> IdentityPath:
        return cls(format_path(parsed))

    def parsed(self) -> ParsedPath:
        return parse_path(self.value)

    def has_identity_segments(self) -> bool:
        return self.parsed().has_identity_segments()

    def as_index_path(self) -> IndexPath:
        """Reinterpret as an index path; only valid when no identity segment is present."""
        if self.has_identity_segments():
            raise PathDialectError(
                self.value,
                "IndexPath",
                "identity segments need a tree to resolve; use identity_to_index",
            )
        return IndexPath(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class ArrayPatternPath:
    value: str

    def __post_init__(self) -> None:
        parsed = parse_path(self.value)
        _reject_viewer(self.value, parsed, "ArrayPatternPath")
        if not parsed.has_pattern_segments():
            raise PathDialectError(self.value, "ArrayPatternPath", "at least one '[]' hop is required")
        for segment in parsed.segments:
            if isinstance(segment, (IndexSegment, IdentitySegment)):
                raise PathDialectError(self.value, "ArrayPatternPath", "concrete array hops are not allowed")

    @classmethod
    def from_parsed(cls, parsed: ParsedPath) -> ArrayPatternPath:
        return cls(format_path(parsed))

    def parsed(self) -> ParsedPath:
        return parse_path(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class ViewerPath:
    value: str

    def __post_init__(self) -> None:
        parsed = parse_path(self.value)
        if parsed.viewer is None:
            raise PathDialectError(self.value, "ViewerPath", f"must start with one of {_viewer_prefixes()}")
        # Validates the remainder as an index path.
        IndexPath.from_parsed(ParsedPath(segments=parsed.segments, has_root=parsed.has_root))

    @classmethod
    def for_side(cls, side: str, path: IndexPath) -> ViewerPath:
        if side not in VIEWER_IDS:
            raise ValueError(f"Unknown viewer side: {side!r}. Supported: {', '.join(VIEWER_IDS)}")
        return cls(f"{side}_{path.value}")

    @property
    def side(self) -> str:
        viewer = parse_path(self.value).viewer
        assert viewer is not None
        return viewer

    @property
    def index_path(self) -> IndexPath:
        parsed = parse_path(self.value)
        return IndexPath.from_parsed(ParsedPath(segments=parsed.segments, has_root=parsed.has_root))

    def __str__(self) -> str:
        return self.value


def _viewer_prefixes() -> str:
    return ", ".join(f"'{viewer}_'" for viewer in VIEWER_IDS)


AnyPath = str | IndexPath | IdentityPath | ViewerPath


def path_text(path: AnyPath | ArrayPatternPath) -> str:
    if isinstance(path, str):
        return path
    if isinstance(path, (IndexPath, IdentityPath, ViewerPath, ArrayPatternPath)):
        return path.value
    raise TypeError(f"Unsupported path type: {type(path).__name__}")


__all__ = [
    "AnyPath",
    "ArrayPatternPath",
    "IdentityPath",
    "IndexPath",
    "ViewerPath",
    "path_text",
]
