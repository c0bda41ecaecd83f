"""Tests for dynamic value helpers."""

from __future__ import annotations

import pytest

from graphrun.dsl.types import (
    UNDEFINED,
    get_path,
    is_nullish,
    loose_compare,
    safe_compare,
    strict_equals,
    to_display,
)


class TestUndefined:
    """Tests for the UNDEFINED sentinel."""

    def test_is_falsy_and_distinct_from_none(self) -> None:
        assert not UNDEFINED
        assert UNDEFINED is not None
        assert is_nullish(UNDEFINED)
        assert is_nullish(None)
        assert not is_nullish(0)


class TestStrictEquals:
    """Tests for strict_equals()."""

    @pytest.mark.parametrize(
        ("left", "right", "expected"),
        [
            (1, 1.0, True),
            (1, "1", False),
            (True, 1, False),
            (False, False, True),
            (None, None, True),
            (None, UNDEFINED, False),
            (UNDEFINED, UNDEFINED, True),
            ({"a": [1]}, {"a": [1]}, True),
            ("a", "a", True),
        ],
    )
    def test_values(self, left: object, right: object, expected: bool) -> None:
        assert strict_equals(left, right) is expected


class TestComparisons:
    """Tests for safe_compare() and loose_compare()."""

    def test_numbers(self) -> None:
        assert safe_compare(">", 3, 2)
        assert safe_compare("<=", 2, 2)
        assert not safe_compare("<", 3, 2)

    def test_nullish_and_incomparable_are_false(self) -> None:
        assert not safe_compare(">", None, 1)
        assert not safe_compare("<", UNDEFINED, 1)
        assert not safe_compare(">", "10", 5)

    def test_non_ordering_operator_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            safe_compare("=", 1, 1)

    def test_loose_compare(self) -> None:
        assert loose_compare(1, 2) == -1
        assert loose_compare("b", "a") == 1
        assert loose_compare("a", 1) == 0


class TestToDisplay:
    """Tests for to_display()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "text"),
            (None, "null"),
            (UNDEFINED, "undefined"),
            (True, "true"),
            (3, "3"),
            (3.0, "3"),
            (2.5, "2.5"),
            ({"a": [1, "x"]}, '{"a":[1,"x"]}'),
        ],
    )
    def test_values(self, value: object, expected: str) -> None:
        assert to_display(value) == expected

    def test_nested_undefined_follows_json_rules(self) -> None:
        value = {"a": UNDEFINED, "b": [1, UNDEFINED], "c": {"d": UNDEFINED}}

        assert to_display(value) == '{"b":[1,null],"c":{}}'
        assert to_display([UNDEFINED, (UNDEFINED,)]) == "[null,[null]]"


class TestGetPath:
    """Tests for get_path()."""

    def test_nested_and_list_index(self) -> None:
        data = {"user": {"tags": ["a", "b"]}}
        assert get_path(data, "user.tags.1") == "b"

    def test_missing_steps_are_undefined(self) -> None:
        assert get_path({"user": None}, "user.name") is UNDEFINED
        assert get_path({"items": [1]}, "items.5") is UNDEFINED
        assert get_path({}, "a") is UNDEFINED

    def test_explicit_null_is_returned(self) -> None:
        assert get_path({"a": None}, "a") is None
