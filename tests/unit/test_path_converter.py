from __future__ import annotations

import pytest

from jsoncompare.core.diff.models import IdentityKeyInfo
from jsoncompare.core.diff.structural import compare
from jsoncompare.core.errors import PathDialectError
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
from jsoncompare.core.paths.types import ArrayPatternPath, IdentityPath, IndexPath, ViewerPath

LEFT = {"contributions": [{"id": "a", "amt": 10}, {"id": "b", "amt": 5}]}
RIGHT = {"contributions": [{"id": "b", "amt": 5}, {"id": "a", "amt": 12}]}


def _contexts() -> tuple[PathContext, PathContext]:
    catalog = compare(LEFT, RIGHT).identity_keys
    return PathContext(LEFT, catalog), PathContext(RIGHT, catalog)


def test_identity_to_index_resolves_per_side() -> None:
    left, right = _contexts()

    assert identity_to_index("root.contributions[id=a].amt", right) == IndexPath("root.contributions[1].amt")
    assert identity_to_index("root.contributions[id=a].amt", left) == IndexPath("root.contributions[0].amt")
    assert identity_to_index(IdentityPath("root.contributions[1]"), right) == IndexPath("root.contributions[1]")


def test_identity_to_index_returns_none_when_unresolvable() -> None:
    _, right = _contexts()

    assert identity_to_index("root.contributions[id=zz]", right) is None
    assert identity_to_index("root.contributions[id=a].missing", right) is None
    assert identity_to_index("root.contributions[5]", right) is None
    assert identity_to_index("root.contributions[0].amt[id=x]", right) is None


def test_identity_to_index_rejects_patterns() -> None:
    _, right = _contexts()

    with pytest.raises(PathDialectError):
        identity_to_index("root.contributions[]", right)


def test_index_to_identity_uses_the_catalog() -> None:
    _, right = _contexts()

    assert index_to_identity(IndexPath("root.contributions[1].amt"), right) == IdentityPath(
        "root.contributions[id=a].amt"
    )
    assert index_to_identity("root.contributions[0]", right) == IdentityPath("root.contributions[id=b]")
    assert index_to_identity(ViewerPath("right_root.contributions[1]"), right) == IdentityPath(
        "root.contributions[id=a]"
    )


def test_index_to_identity_without_catalog_keeps_indexes() -> None:
    assert index_to_identity("root.contributions[1].amt", PathContext(RIGHT)) == IdentityPath(
        "root.contributions[1].amt"
    )


def test_index_to_identity_out_of_range_is_none() -> None:
    _, right = _contexts()

    assert index_to_identity("root.contributions[9]", right) is None
    assert index_to_identity("root.nothing", right) is None


def test_index_to_identity_rejects_identity_segments() -> None:
    _, right = _contexts()

    with pytest.raises(PathDialectError):
        index_to_identity("root.contributions[id=a]", right)


def test_duplicate_identities_fall_back_to_index() -> None:
    catalog = (IdentityKeyInfo(ArrayPatternPath("xs[]"), "id", False, 2, 2),)
    context = PathContext({"xs": [{"id": 1}, {"id": 1}]}, catalog)

    assert index_to_identity("xs[1]", context) == IdentityPath("xs[1]")


def test_numeric_identities_round_trip_as_text() -> None:
    catalog = (IdentityKeyInfo(ArrayPatternPath("xs[]"), "id", False, 2, 2),)
    context = PathContext({"xs": [{"id": 1}, {"id": 2}]}, catalog)

    assert index_to_identity("root.xs[1]", context) == IdentityPath("root.xs[id=2]")
    assert identity_to_index("root.xs[id=2]", context) == IndexPath("root.xs[1]")


def test_catalog_entries_only_apply_to_their_exact_pattern() -> None:
    catalog = (IdentityKeyInfo(ArrayPatternPath("outer[].xs[]"), "id", False, 2, 2),)
    context = PathContext({"xs": [{"id": 1}, {"id": 2}]}, catalog)

    assert index_to_identity("xs[0]", context) == IdentityPath("xs[0]")


def test_round_trip_through_both_dialects() -> None:
    left, right = _contexts()

    for context in (left, right):
        for index in range(2):
            index_path = IndexPath(f"root.contributions[{index}].amt")
            identity_path = index_to_identity(index_path, context)
            assert identity_path is not None
            assert identity_to_index(identity_path, context) == index_path


def test_viewer_helpers() -> None:
    _, right = _contexts()

    assert identity_to_viewer_path("root.contributions[id=a]", "right", right) == ViewerPath(
        "right_root.contributions[1]"
    )
    assert identity_to_viewer_path("root.contributions[id=zz]", "right", right) is None
    assert viewer_path_to_identity("right_root.contributions[1].amt", right) == IdentityPath(
        "root.contributions[id=a].amt"
    )


def test_normalize_for_comparison() -> None:
    left, _ = _contexts()

    assert normalize_for_comparison("left_root.contributions[id=a].amt", left) == frozenset(
        {"contributions[id=a].amt", "contributions[0].amt"}
    )
    assert normalize_for_comparison("root.a.b") == frozenset({"a.b"})
    assert normalize_for_comparison("root.contributions[id=zz]", left) == frozenset({"contributions[id=zz]"})


def test_are_paths_equivalent() -> None:
    _, right = _contexts()

    assert are_paths_equivalent("root.contributions[1]", "right_root.contributions[id=a]", right)
    assert not are_paths_equivalent("root.contributions[0]", "root.contributions[id=a]", right)


def test_resolve_array_pattern_skips_elements_without_the_structure() -> None:
    tree = {"a": [{"x": 1}, {"b": []}, {"b": [5, 6]}]}

    assert resolve_array_pattern("a[].b[]", tree) == IndexPath("a[2].b[0]")
    assert resolve_array_pattern(ArrayPatternPath("a[]"), tree) == IndexPath("a[0]")


def test_resolve_array_pattern_falls_back_to_zero() -> None:
    assert resolve_array_pattern("a[]", {"a": []}) == IndexPath("a[0]")
    assert resolve_array_pattern("missing[].b[]", {}) == IndexPath("missing[0].b[0]")


def test_resolve_array_pattern_requires_pattern_dialect() -> None:
    with pytest.raises(PathDialectError):
        resolve_array_pattern("a[0]", {"a": [1]})


def test_compare_paths_round_trip_on_both_sides() -> None:
    left = {
        "orders": [
            {"id": 1, "lines": [{"sku": "a", "q": 1}, {"sku": "b", "q": 1}]},
            {"id": 2, "lines": [{"sku": "a", "q": 2}, {"sku": "c", "q": 2}]},
        ],
        "rows": [
            {"k1": "a", "k2": 1, "v": "x"},
            {"k1": "a", "k2": 2, "v": "x"},
            {"k1": "b", "k2": 1, "v": "x"},
        ],
    }
    right = {
        "orders": [
            {"id": 2, "lines": [{"sku": "c", "q": 2}, {"sku": "a", "q": 2}]},
            {"id": 1, "lines": [{"sku": "b", "q": 1}, {"sku": "a", "q": 3}]},
        ],
        "rows": [
            {"k1": "b", "k2": 1, "v": "x"},
            {"k1": "a", "k2": 2, "v": "y"},
            {"k1": "a", "k2": 1, "v": "x"},
        ],
    }
    result = compare(left, right)
    assert [diff.path.value for diff in result.diffs] == [
        "root.orders[id=1].lines[sku=a].q",
        "root.rows[k1=a|k2=2].v",
    ]

    expected_index = {
        "left": ["root.orders[0].lines[0].q", "root.rows[1].v"],
        "right": ["root.orders[1].lines[1].q", "root.rows[1].v"],
    }
    for side, tree in (("left", left), ("right", right)):
        context = PathContext(tree, result.identity_keys)
        for diff, index_text in zip(result.diffs, expected_index[side]):
            index_path = identity_to_index(diff.path, context)
            assert index_path == IndexPath(index_text)
            identity_path = index_to_identity(index_path, context)
            assert identity_path == diff.path
            assert normalize_for_comparison(identity_path, context) & normalize_for_comparison(diff.path, context)


def test_integral_float_identities_resolve_like_integers() -> None:
    catalog = (IdentityKeyInfo(ArrayPatternPath("xs[]"), "id", False, 2, 2),)
    context = PathContext({"xs": [{"id": 1.0}, {"id": 2.5}]}, catalog)

    assert identity_to_index("root.xs[id=1]", context) == IndexPath("root.xs[0]")
    assert index_to_identity("root.xs[0]", context) == IdentityPath("root.xs[id=1]")
    assert index_to_identity("root.xs[1]", context) == IdentityPath("root.xs[id=2.5]")
