"""Tests for scalar and path functions."""

from __future__ import annotations

import pytest

from graphrun.dsl.expressions.errors import ExpressionEvaluationError
from graphrun.dsl.expressions.functions import (
    filter_items,
    find,
    first,
    last,
    sort_items,
)
from graphrun.dsl.types import UNDEFINED


class TestFind:
    """Tests for find()."""

    def test_mapping_criteria_matches_all_fields(self) -> None:
        items = [{"id": "a", "v": 1}, {"id": "b", "v": 2}]
        assert find(items, {"id": "b"}) == {"id": "b", "v": 2}
        assert find(items, {"id": "b", "v": 1}) is UNDEFINED

    def test_scalar_criteria_on_primitives(self) -> None:
        assert find(["x", "y"], "y") == "y"
        assert find([1, 2, 3], 2) == 2

    def test_scalar_criteria_uses_property_name(self) -> None:
        items = [{"slug": "a"}, {"slug": "b", "id": "a"}]
        assert find(items, "b", "slug") == {"slug": "b", "id": "a"}

    def test_scalar_criteria_falls_back_to_common_keys(self) -> None:
        items = [{"name": "n1"}, {"type": "t1"}, {"key": "k1"}, {"id": "i1"}]
        assert find(items, "t1") == {"type": "t1"}
        assert find(items, "k1") == {"key": "k1"}
        assert find(items, "i1") == {"id": "i1"}

    def test_strict_equality(self) -> None:
        assert find([{"id": 1}], {"id": "1"}) is UNDEFINED
        assert find([{"id": True}], {"id": 1}) is UNDEFINED

    def test_non_list_receiver(self) -> None:
        assert find({"id": "a"}, "a") is UNDEFINED
        assert find(None, "a") is UNDEFINED


class TestFilter:
    """Tests for filter_items()."""

    def test_operator_mapping(self) -> None:
        rows = [{"salary": 90}, {"salary": 150}]
        assert filter_items(rows, {"salary": {"<=": 100}}) == [{"salary": 90}]

    def test_operator_aliases_combine(self) -> None:
        rows = [{"n": 1}, {"n": 5}, {"n": 9}]
        assert filter_items(rows, {"n": {"$gt": 1, "$lt": 9}}) == [{"n": 5}]
        assert filter_items(rows, {"n": {"$ne": 5}}) == [{"n": 1}, {"n": 9}]
        assert filter_items(rows, {"n": {"==": 9}}) == [{"n": 9}]

    def test_scalar_equality_and_dotted_paths(self) -> None:
        rows = [
            {"user": {"role": "admin"}, "active": True},
            {"user": {"role": "admin"}, "active": False},
            {"user": {"role": "dev"}, "active": True},
        ]
        result = filter_items(rows, {"user.role": "admin", "active": True})
        assert result == [rows[0]]

    def test_missing_field_fails_ordering(self) -> None:
        assert filter_items([{"other": 1}], {"n": {">": 0}}) == []

    def test_unknown_operator_is_an_error(self) -> None:
        with pytest.raises(ExpressionEvaluationError, match="Unknown filter operator: ~"):
            filter_items([{"n": 1}], {"n": {"~": 1}})

    def test_non_list_receiver(self) -> None:
        assert filter_items("abc", {"n": 1}) == []


class TestSort:
    """Tests for sort_items()."""

    def test_nulls_first_ascending(self) -> None:
        rows = [{"n": 2}, {"n": None}, {"n": 1}]
        assert sort_items(rows, "n", "asc") == [{"n": None}, {"n": 1}, {"n": 2}]

    def test_nulls_last_descending(self) -> None:
        rows = [{"n": 2}, {}, {"n": 1}]
        assert sort_items(rows, "n", "desc") == [{"n": 2}, {"n": 1}, {}]

    def test_sort_is_stable_and_copies(self) -> None:
        rows = [{"k": 1, "i": "a"}, {"k": 0, "i": "b"}, {"k": 1, "i": "c"}]
        result = sort_items(rows, "k")
        assert [row["i"] for row in result] == ["b", "a", "c"]
        assert rows[0]["i"] == "a"

    def test_dotted_key(self) -> None:
        rows = [{"u": {"age": 40}}, {"u": {"age": 20}}]
        assert sort_items(rows, "u.age") == [{"u": {"age": 20}}, {"u": {"age": 40}}]


class TestFirstLast:
    """Tests for first() and last()."""

    def test_values(self) -> None:
        assert first([1, 2]) == 1
        assert last([1, 2]) == 2

    def test_empty_or_non_list(self) -> None:
        assert first([]) is UNDEFINED
        assert last("abc") is UNDEFINED
