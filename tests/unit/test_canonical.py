from __future__ import annotations

from jsoncompare.core.canonical import canonical_dumps, canonical_value, fingerprint, value_token


def test_canonical_dumps_sorts_keys_and_normalizes_floats() -> None:
    assert canonical_dumps({"b": 1, "a": [1.0, 2.5]}) == '{"a":[1,2.5],"b":1}'


def test_non_finite_floats_become_strings() -> None:
    assert canonical_value([float("nan"), float("inf"), float("-inf")]) == ["NaN", "Infinity", "-Infinity"]


def test_value_token_ignores_key_order() -> None:
    assert value_token({"a": 1, "b": [True, None]}) == value_token({"b": [True, None], "a": 1})
    assert value_token([1, 2]) != value_token([2, 1])


def test_fingerprint_is_stable_sha256() -> None:
    digest = fingerprint({"x": 1})

    assert digest == fingerprint({"x": 1.0})
    assert len(digest) == 64
