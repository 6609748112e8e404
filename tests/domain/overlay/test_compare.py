from __future__ import annotations

import pytest

from tarkov_overlay.domain.overlay import ABSENT, compare_subset


@pytest.mark.parametrize(
    "value",
    [
        None,
        0,
        "Customs",
        [3, 1, 2],
        {"map": {"id": "woods", "name": "Woods"}, "levels": [1, 2]},
    ],
)
def test_compare_subset_is_reflexive(value: object) -> None:
    assert compare_subset(value, value)


def test_absent_override_is_always_satisfied() -> None:
    assert compare_subset(ABSENT, None)
    assert compare_subset(ABSENT, {"anything": True})


def test_null_override_requires_null() -> None:
    assert compare_subset(None, None)
    assert not compare_subset(None, ABSENT)
    assert not compare_subset(None, 0)


def test_object_override_ignores_extra_live_keys() -> None:
    override = {"map": {"id": "woods"}}
    live = {"map": {"id": "woods", "name": "Woods"}, "experience": 1200}

    assert compare_subset(override, live)


def test_object_override_fails_on_missing_live_key() -> None:
    assert not compare_subset({"count": 5}, {"description": "Find items"})


def test_object_override_requires_object_live_value() -> None:
    assert not compare_subset({"id": "woods"}, "woods")
    assert not compare_subset({"id": "woods"}, [{"id": "woods"}])
    assert not compare_subset({}, None)


def test_empty_object_override_matches_any_object() -> None:
    assert compare_subset({}, {"id": "woods"})


def test_arrays_need_exact_order_insensitive_match() -> None:
    assert compare_subset([{"id": "a"}, {"id": "b"}], [{"id": "b"}, {"id": "a"}])
    assert not compare_subset([{"id": "a"}], [{"id": "a", "name": "A"}])


def test_extending_live_object_keeps_match() -> None:
    override = {"items": [{"count": 2}], "nested": {"a": 1}}
    live = {"items": [{"count": 2}], "nested": {"a": 1}}
    extended = {**live, "nested": {"a": 1, "b": 2}, "other": True}

    assert compare_subset(override, live)
    assert compare_subset(override, extended)
