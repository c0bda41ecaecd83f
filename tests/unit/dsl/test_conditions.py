"""Tests for edge condition evaluation."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import TypeAdapter

from graphrun.dsl.conditions import ConditionEvaluator, resolve_path
from graphrun.dsl.errors import UnknownConditionError, UnknownOperatorError
from graphrun.dsl.serialization.schema import ConditionRecord, SimpleCondition
from graphrun.dsl.types import UNDEFINED

_adapter: TypeAdapter[Any] = TypeAdapter(ConditionRecord)


def condition(data: Any) -> Any:
    """Validate raw condition data the way a graph document would."""
    return _adapter.validate_python(data)


@pytest.fixture
def state() -> dict[str, Any]:
    return {
        "x": {"y": 7},
        "status": "active",
        "expected": "active",
        "count": 0,
        "nothing": None,
        "users": [{"id": "u1", "age": 30}, {"id": "u2", "age": 50}],
    }


@pytest.fixture
def evaluator(state: dict[str, Any]) -> ConditionEvaluator:
    named = {
        "is_active": condition({"path": "status", "operator": "=", "value": "active"}),
        "big_x": condition({"path": "x.y", "operator": ">", "value": 5}),
        "both": condition({"and": ["is_active", "big_x"]}),
    }
    return ConditionEvaluator(named, state)


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_dotted_path(self, state: dict[str, Any]) -> None:
        assert resolve_path("x.y", state) == 7

    def test_expression_path(self, state: dict[str, Any]) -> None:
        assert resolve_path('users.find({id: "u2"}).age', state) == 50
        assert resolve_path("users[0].id", state) == "u1"

    def test_broken_expression_path_is_undefined(self, state: dict[str, Any]) -> None:
        assert resolve_path("users.find(", state) is UNDEFINED

    def test_failing_native_method_path_is_undefined(self, state: dict[str, Any]) -> None:
        assert resolve_path('users[0].id.encode("no-such-codec")', state) is UNDEFINED

    def test_deeply_nested_path_is_undefined(self, state: dict[str, Any]) -> None:
        path = "(" * 5000 + "x" + ")" * 5000
        assert resolve_path(path, state) is UNDEFINED


class TestSimpleConditions:
    """Tests for simple comparisons."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"path": "x.y", "operator": ">", "value": 5}, True),
            ({"path": "x.y", "operator": "<", "value": 5}, False),
            ({"path": "x.y", "operator": ">=", "value": 7}, True),
            ({"path": "x.y", "operator": "<=", "value": 6}, False),
            ({"path": "x.y", "operator": "=", "value": 7}, True),
            ({"path": "x.y", "operator": "!=", "value": 7}, False),
            ({"path": "count", "operator": "=", "value": False}, False),
        ],
    )
    def test_operators(
        self, evaluator: ConditionEvaluator, data: dict[str, Any], expected: bool
    ) -> None:
        assert evaluator.evaluate(condition(data)) is expected

    def test_undefined_ordering_against_number_is_false(
        self, evaluator: ConditionEvaluator
    ) -> None:
        data = {"path": "x.missing", "operator": ">", "value": 5}
        assert evaluator.evaluate(condition(data)) is False
        data = {"path": "nothing", "operator": "<=", "value": 5}
        assert evaluator.evaluate(condition(data)) is False

    def test_equality_with_null(self, evaluator: ConditionEvaluator) -> None:
        data = {"path": "nothing", "operator": "=", "value": None}
        assert evaluator.evaluate(condition(data)) is True
        data = {"path": "x.missing", "operator": "=", "value": None}
        assert evaluator.evaluate(condition(data)) is False

    def test_operand_resolved_as_path(self, evaluator: ConditionEvaluator) -> None:
        data = {"path": "status", "operator": "=", "value": "expected"}
        assert evaluator.evaluate(condition(data)) is True

    def test_unresolvable_operand_stays_literal(
        self, evaluator: ConditionEvaluator
    ) -> None:
        data = {"path": "status", "operator": "=", "value": "active"}
        assert evaluator.evaluate(condition(data)) is True

    def test_state_changes_are_visible(
        self, evaluator: ConditionEvaluator, state: dict[str, Any]
    ) -> None:
        check = condition({"path": "count", "operator": ">", "value": 0})
        assert evaluator.evaluate(check) is False
        state["count"] = 1
        assert evaluator.evaluate(check) is True

    def test_unknown_operator_is_an_error(self, evaluator: ConditionEvaluator) -> None:
        bad = SimpleCondition.model_construct(path="x.y", operator="~", value=1)
        with pytest.raises(UnknownOperatorError, match="~"):
            evaluator.evaluate(bad)


class TestCompoundConditions:
    """Tests for AND/OR composition and named conditions."""

    def test_empty_and_is_true(self, evaluator: ConditionEvaluator) -> None:
        assert evaluator.evaluate(condition({"and": []})) is True

    def test_empty_or_is_false(self, evaluator: ConditionEvaluator) -> None:
        assert evaluator.evaluate(condition({"or": []})) is False

    def test_nested_composition(self, evaluator: ConditionEvaluator) -> None:
        data = {
            "or": [
                {"path": "x.y", "operator": "<", "value": 0},
                {
                    "and": [
                        {"path": "status", "operator": "=", "value": "active"},
                        {"path": "x.y", "operator": "=", "value": 7},
                    ]
                },
            ]
        }
        assert evaluator.evaluate(condition(data)) is True

    def test_and_short_circuits(self, evaluator: ConditionEvaluator) -> None:
        data = {
            "and": [
                {"path": "x.y", "operator": "<", "value": 0},
                "does_not_exist",
            ]
        }
        assert evaluator.evaluate(condition(data)) is False

    def test_or_short_circuits(self, evaluator: ConditionEvaluator) -> None:
        data = {"or": ["is_active", "does_not_exist"]}
        assert evaluator.evaluate(condition(data)) is True

    def test_named_conditions_resolve_recursively(
        self, evaluator: ConditionEvaluator
    ) -> None:
        assert evaluator.evaluate("both") is True

    def test_unknown_named_condition(self, evaluator: ConditionEvaluator) -> None:
        with pytest.raises(UnknownConditionError) as exc_info:
            evaluator.evaluate("nope")
        assert exc_info.value.condition_name == "nope"
        assert "is_active" in str(exc_info.value)
