from __future__ import annotations

import pytest

from jsoncompare.core.diff.identity import (
    find_identity_key,
    identity_of,
    is_identity_scalar,
    rank_candidates,
    split_identity_key,
)
from jsoncompare.core.settings import DetectorSettings


def test_partial_overlap_still_detects_name() -> None:
    left = [{"name": "X", "v": 1}, {"name": "Y", "v": 2}]
    right = [{"name": "X", "v": 1}, {"name": "Z", "v": 3}]

    assert find_identity_key(left, right) == "name"


def test_preferred_key_beats_alphabetical_order() -> None:
    left = [{"a": 1, "id": "x"}, {"a": 2, "id": "y"}]
    right = [{"a": 2, "id": "y"}, {"a": 1, "id": "x"}]

    assert find_identity_key(left, right) == "id"


def test_alphabetical_order_without_preferred_keys() -> None:
    left = [{"sku": "a", "code": 1}, {"sku": "b", "code": 2}]

    assert find_identity_key(left, list(reversed(left))) == "code"


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ([], []),
        ([{"id": 1}], [{"id": 2}]),
        ([1, 2, 3], [3, 2, 1]),
        ([{"id": 1}, 2, 3], [{"id": 1}, 2, 3]),
        ([{"flag": True}, {"flag": False}], [{"flag": False}, {"flag": True}]),
        ([{"id": 1}, {"id": 2}], [{"id": 3}, {"id": 4}]),
        ([{"id": 1}, {"id": 1}], [{"id": 1}, {"id": 2}]),
    ],
)
def test_no_identity_key(left: list, right: list) -> None:
    assert find_identity_key(left, right) is None


def test_empty_side_skips_overlap_check() -> None:
    assert find_identity_key([{"id": 1}, {"id": 2}], []) == "id"
    assert find_identity_key([], [{"id": 1}, {"id": 2}]) == "id"


def test_object_proportion_threshold_is_inclusive() -> None:
    items = [{"id": "a"}, {"id": "b"}, {"id": "c"}, {"id": "d"}, "note"]

    assert find_identity_key(items, items) == "id"


def test_composite_key_when_no_single_key_is_unique() -> None:
    left = [{"k1": "a", "k2": 1}, {"k1": "a", "k2": 2}, {"k1": "b", "k2": 1}]
    right = [left[2], left[0], left[1]]

    assert find_identity_key(left, right) == "k1+k2"
    assert find_identity_key(left, right, DetectorSettings(max_composite_size=1)) is None


def test_custom_preferred_keys() -> None:
    items = [{"id": 1, "sku": "a"}, {"id": 2, "sku": "b"}]

    assert find_identity_key(items, items, DetectorSettings(preferred_keys=("sku",))) == "sku"


def test_overlap_ratio_setting() -> None:
    left = [{"id": 1}, {"id": 2}, {"id": 3}, {"id": 4}]
    right = [{"id": 1}, {"id": 5}, {"id": 6}, {"id": 7}]

    assert find_identity_key(left, right) is None
    assert find_identity_key(left, right, DetectorSettings(min_overlap_ratio=0.25)) == "id"


def test_rank_candidates_skips_unusable_names() -> None:
    assert rank_candidates(["b", "ID", "a", "x+y", 7], ("id",)) == ["ID", "a", "b"]


def test_identity_of() -> None:
    assert identity_of({"id": 1, "n": "x"}, ("id", "n")) == ("1", "x")
    assert identity_of({"id": None}, ("id",)) is None
    assert identity_of({"n": "x"}, ("id",)) is None
    assert identity_of(["id"], ("id",)) is None


def test_identity_scalars_exclude_booleans() -> None:
    assert is_identity_scalar("a")
    assert is_identity_scalar(1.5)
    assert not is_identity_scalar(True)
    assert not is_identity_scalar(None)


def test_split_identity_key() -> None:
    assert split_identity_key("id") == ("id",)
    assert split_identity_key("k1+k2") == ("k1", "k2")
