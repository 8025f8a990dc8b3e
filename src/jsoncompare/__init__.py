"""jsoncompare: identity-aware structural diff for JSON documents."""
from __future__ import annotations

from jsoncompare.core.diff.identity import find_identity_key
from jsoncompare.core.diff.models import CompareResult, DiffRecord, IdentityKeyInfo
from jsoncompare.core.diff.structural import compare
from jsoncompare.core.errors import PathDialectError, PathSyntaxError, SettingsError
from jsoncompare.core.highlight import Classification, classify, classify_tree, highlight_label
from jsoncompare.core.ignore import filter_ignored
from jsoncompare.core.paths.converter import (
    PathContext,
    are_paths_equivalent,
    identity_to_index,
    identity_to_viewer_path,
    index_to_identity,
    normalize_for_comparison,
    resolve_array_pattern,
    viewer_path_to_identity,
)
from jsoncompare.core.paths.grammar import format_path, join_segments, parse_path
from jsoncompare.core.paths.types import ArrayPatternPath, IdentityPath, IndexPath, ViewerPath
from jsoncompare.core.settings import CompareSettings, DetectorSettings

__version__ = "0.1.0"

__all__ = [
    "ArrayPatternPath",
    "Classification",
    "CompareResult",
    "CompareSettings",
    "DetectorSettings",
    "DiffRecord",
    "IdentityKeyInfo",
    "IdentityPath",
    "IndexPath",
    "PathContext",
    "PathDialectError",
    "PathSyntaxError",
    "SettingsError",
    "ViewerPath",
    "__version__",
    "are_paths_equivalent",
    "classify",
    "classify_tree",
    "compare",
    "filter_ignored",
    "find_identity_key",
    "format_path",
    "highlight_label",
    "identity_to_index",
    "identity_to_viewer_path",
    "index_to_identity",
    "join_segments",
    "normalize_for_comparison",
    "parse_path",
    "resolve_array_pattern",
    "viewer_path_to_identity",
]
