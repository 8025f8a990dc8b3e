from __future__ import annotations

from jsoncompare.core.diff.structural import compare
from jsoncompare.core.ignore import filter_ignored, matches_ignore_pattern


def test_matches_ignore_pattern_is_case_insensitive_on_stripped_path() -> None:
    assert matches_ignore_pattern("root.meta.updatedAt", "UPDATEDAT")
    assert matches_ignore_pattern("left_root.items[id=a].ts", "items[id=a]")
    assert not matches_ignore_pattern("root.meta.updatedAt", "root")
    assert not matches_ignore_pattern("root.meta", "")


def test_filter_ignored_drops_matching_diffs() -> None:
    result = compare(
        {"meta": {"updatedAt": 1}, "value": 1},
        {"meta": {"updatedAt": 2}, "value": 2},
    )

    kept = filter_ignored(result.diffs, ["updatedat"])

    assert [diff.path.value for diff in kept] == ["root.value"]
    assert filter_ignored(result.diffs, []) == list(result.diffs)
    assert filter_ignored(result.diffs, [""]) == list(result.diffs)
