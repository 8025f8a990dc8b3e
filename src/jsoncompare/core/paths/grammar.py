"""Path grammar: tokenizes path strings into segments and joins them back.

Grammar (escapes omitted)::

    path     := [viewer "_"] [root] segment *( "." segment | bracket )
    bracket  := "[" ( index | identity | "" ) "]"
    index    := 1*DIGIT
    identity := key "=" value *( "|" key "=" value )

Property names escape ``\\ . [ ]`` with a backslash, identity keys escape
``\\ = | ]`` and identity values escape ``\\ | ]``. Only reserved characters
may be escaped, which keeps ``format_path(parse_path(text)) == text`` for
every string ``parse_path`` accepts, with two exceptions that cannot be
spelled without the root marker: a lone empty top-level key, and a
top-level key that itself looks like a viewer prefix or the root marker.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from jsoncompare.core.constants import (
    COMPOSITE_KEY_SEPARATOR,
    IDENTITY_ASSIGN,
    IDENTITY_PAIR_SEPARATOR,
    ROOT_MARKER,
    VIEWER_IDS,
)
from jsoncompare.core.errors import PathSyntaxError

_ESCAPE = "\\"
_PROPERTY_RESERVED = frozenset("\\.[]")
_IDENTITY_KEY_RESERVED = frozenset("\\=|]")
_IDENTITY_VALUE_RESERVED = frozenset("\\|]")


@dataclass(slots=True, frozen=True)
class PropertySegment:
    name: str


@dataclass(slots=True, frozen=True)
class IndexSegment:
    index: int


@dataclass(slots=True, frozen=True)
class IdentitySegment:
    pairs: tuple[tuple[str, str], ...]

    @property
    def key(self) -> str:
        return COMPOSITE_KEY_SEPARATOR.join(name for name, _ in self.pairs)

    @property
    def key_parts(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.pairs)

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(value for _, value in self.pairs)


@dataclass(slots=True, frozen=True)
class PatternSegment:
    pass


Segment = PropertySegment | IndexSegment | IdentitySegment | PatternSegment


@dataclass(slots=True, frozen=True)
class ParsedPath:
    segments: tuple[Segment, ...] = ()
    viewer: str | None = None
    has_root: bool = False

    def stripped(self) -> ParsedPath:
        return ParsedPath(segments=self.segments)

    def child(self, segment: Segment) -> ParsedPath:
        return replace(self, segments=(*self.segments, segment))

    def has_identity_segments(self) -> bool:
        return any(isinstance(segment, IdentitySegment) for segment in self.segments)

    def has_index_segments(self) -> bool:
        return any(isinstance(segment, IndexSegment) for segment in self.segments)

    def has_pattern_segments(self) -> bool:
        return any(isinstance(segment, PatternSegment) for segment in self.segments)


def parse_path(path: str) -> ParsedPath:
    if not isinstance(path, str):
        raise TypeError(f"path must be a string, got {type(path).__name__}")

    viewer: str | None = None
    position = 0
    for candidate in VIEWER_IDS:
        prefix = f"{candidate}_"
        if path.startswith(prefix):
            viewer = candidate
            position = len(prefix)
            break

    has_root = False
    if path.startswith(ROOT_MARKER, position):
        end = position + len(ROOT_MARKER)
        if end == len(path) or path[end] in ".[":
            has_root = True
            position = end

    segments = _parse_segments(path, position, leading_property=not has_root)
    return ParsedPath(segments=segments, viewer=viewer, has_root=has_root)


def _parse_segments(path: str, position: int, *, leading_property: bool) -> tuple[Segment, ...]:
    segments: list[Segment] = []
    length = len(path)
    if position == length:
        return ()

    if leading_property and path[position] != "[":
        name, position = _read_property(path, position)
        segments.append(PropertySegment(name))

    while position < length:
        char = path[position]
        if char == ".":
            name, position = _read_property(path, position + 1)
            segments.append(PropertySegment(name))
        elif char == "[":
            segment, position = _read_bracket(path, position)
            segments.append(segment)
        else:
            raise PathSyntaxError(path, f"expected '.' or '[' but found {char!r}", position)
    return tuple(segments)


def _read_property(path: str, position: int) -> tuple[str, int]:
    chars: list[str] = []
    length = len(path)
    while position < length:
        char = path[position]
        if char == _ESCAPE:
            chars.append(_read_escape(path, position, _PROPERTY_RESERVED))
            position += 2
            continue
        if char in ".[":
            break
        if char == "]":
            raise PathSyntaxError(path, "unbalanced ']'", position)
        chars.append(char)
        position += 1
    return "".join(chars), position


def _read_escape(path: str, position: int, reserved: frozenset[str]) -> str:
    if position + 1 >= len(path):
        raise PathSyntaxError(path, "dangling escape character", position)
    escaped = path[position + 1]
    if escaped not in reserved:
        raise PathSyntaxError(path, f"{escaped!r} does not need escaping here", position)
    return escaped


def _read_bracket(path: str, start: int) -> tuple[Segment, int]:
    # Raw content is kept as (char, escaped) pairs; separators only count when unescaped.
    content: list[tuple[str, bool]] = []
    position = start + 1
    length = len(path)
    while True:
        if position >= length:
            raise PathSyntaxError(path, "unterminated '['", start)
        char = path[position]
        if char == _ESCAPE:
            if position + 1 >= length:
                raise PathSyntaxError(path, "dangling escape character", position)
            content.append((path[position + 1], True))
            position += 2
            continue
        if char == "]":
            break
        content.append((char, False))
        position += 1
    end = position + 1

    if not content:
        return PatternSegment(), end

    text = "".join(char for char, _ in content)
    escaped_any = any(escaped for _, escaped in content)
    if not escaped_any and text.isascii() and text.isdigit():
        if len(text) > 1 and text[0] == "0":
            raise PathSyntaxError(path, f"index {text!r} has leading zeros", start)
        return IndexSegment(int(text)), end

    return IdentitySegment(_identity_pairs(path, content, start)), end


def _identity_pairs(path: str, content: list[tuple[str, bool]], start: int) -> tuple[tuple[str, str], ...]:
    chunks: list[list[tuple[str, bool]]] = [[]]
    for char, escaped in content:
        if char == IDENTITY_PAIR_SEPARATOR and not escaped:
            chunks.append([])
        else:
            chunks[-1].append((char, escaped))

    pairs: list[tuple[str, str]] = []
    for chunk in chunks:
        split_at = next(
            (offset for offset, (char, escaped) in enumerate(chunk) if char == IDENTITY_ASSIGN and not escaped),
            None,
        )
        if split_at is None:
            raise PathSyntaxError(path, "bracket must hold an index, key=value pairs, or nothing", start)
        key_chars = chunk[:split_at]
        value_chars = chunk[split_at + 1 :]
        if not key_chars:
            raise PathSyntaxError(path, "identity key is empty", start)
        for char, escaped in key_chars:
            if escaped and char not in _IDENTITY_KEY_RESERVED:
                raise PathSyntaxError(path, f"{char!r} does not need escaping in an identity key", start)
        for char, escaped in value_chars:
            if escaped and char not in _IDENTITY_VALUE_RESERVED:
                raise PathSyntaxError(path, f"{char!r} does not need escaping in an identity value", start)
        pairs.append(
            (
                "".join(char for char, _ in key_chars),
                "".join(char for char, _ in value_chars),
            )
        )
    return tuple(pairs)


def _escape(text: str, reserved: frozenset[str]) -> str:
    return "".join(f"{_ESCAPE}{char}" if char in reserved else char for char in text)


def format_segment(segment: Segment) -> str:
    if isinstance(segment, PropertySegment):
        return _escape(segment.name, _PROPERTY_RESERVED)
    if isinstance(segment, IndexSegment):
        return f"[{segment.index}]"
    if isinstance(segment, IdentitySegment):
        body = IDENTITY_PAIR_SEPARATOR.join(
            f"{_escape(key, _IDENTITY_KEY_RESERVED)}{IDENTITY_ASSIGN}{_escape(value, _IDENTITY_VALUE_RESERVED)}"
            for key, value in segment.pairs
        )
        return f"[{body}]"
    if isinstance(segment, PatternSegment):
        return "[]"
    raise TypeError(f"unknown segment type: {type(segment).__name__}")


def join_segments(segments: tuple[Segment, ...] | list[Segment], *, after_root: bool = False) -> str:
    """Join segments: '.' before property names, nothing before brackets."""
    parts: list[str] = []
    for position, segment in enumerate(segments):
        text = format_segment(segment)
        if isinstance(segment, PropertySegment) and (position > 0 or after_root):
            parts.append(f".{text}")
        else:
            parts.append(text)
    return "".join(parts)


def format_path(parsed: ParsedPath) -> str:
    text = join_segments(parsed.segments, after_root=parsed.has_root)
    if parsed.has_root:
        text = f"{ROOT_MARKER}{text}"
    if parsed.viewer is not None:
        text = f"{parsed.viewer}_{text}"
    return text


def strip_prefixes(path: str) -> str:
    return join_segments(parse_path(path).segments)


def count_segments(path: str) -> int:
    """Structural hop count: one per property and one per bracket."""
    return len(parse_path(path).segments)


def has_identity_segments(path: str) -> bool:
    return parse_path(path).has_identity_segments()


def is_index_only(path: str) -> bool:
    """True when no array hop is addressed by identity or by pattern."""
    parsed = parse_path(path)
    return not parsed.has_identity_segments() and not parsed.has_pattern_segments()


def array_pattern_segments(segments: tuple[Segment, ...]) -> tuple[Segment, ...]:
    return tuple(
        PatternSegment() if isinstance(segment, (IndexSegment, IdentitySegment)) else segment
        for segment in segments
    )


def to_array_pattern(path: str) -> str:
    """Index-agnostic shape of a path: every array hop becomes '[]', prefixes are dropped."""
    return join_segments(array_pattern_segments(parse_path(path).segments))


def parent_array_pattern(pattern: str) -> str | None:
    """Pattern of the array whose elements hold the pattern's last array.

    ``a[].b[].c[]`` -> ``a[].b[]``; ``None`` when there is no enclosing array.
    """
    segments = parse_path(pattern).segments
    hops = [position for position, segment in enumerate(segments) if isinstance(segment, PatternSegment)]
    if len(hops) < 2:
        return None
    return join_segments(segments[: hops[-2] + 1])


def is_strict_prefix(prefix: tuple[Segment, ...], segments: tuple[Segment, ...]) -> bool:
    return len(prefix) < len(segments) and segments[: len(prefix)] == prefix


__all__ = [
    "IdentitySegment",
    "IndexSegment",
    "ParsedPath",
    "PatternSegment",
    "PropertySegment",
    "Segment",
    "array_pattern_segments",
    "count_segments",
    "format_path",
    "format_segment",
    "has_identity_segments",
    "is_index_only",
    "is_strict_prefix",
    "join_segments",
    "parent_array_pattern",
    "parse_path",
    "strip_prefixes",
    "to_array_pattern",
]
