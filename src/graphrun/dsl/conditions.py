"""Condition evaluation for graph edges.

A condition is one of:
- a SimpleCondition comparing the value at a state path with an operand,
- an AndCondition / OrCondition composing other conditions,
- a string naming an entry of the graph's ``conditions`` table.

Named conditions are resolved recursively; a condition that refers to
itself is not detected.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from graphrun.dsl.errors import UnknownConditionError, UnknownOperatorError
from graphrun.dsl.expressions import ExpressionError, evaluate_expression
from graphrun.dsl.serialization.schema import (
    AndCondition,
    ConditionRecord,
    OrCondition,
    SimpleCondition,
)
from graphrun.dsl.types import (
    UNDEFINED,
    get_path,
    is_nullish,
    is_number,
    safe_compare,
    strict_equals,
    to_display,
)
from graphrun.logging import get_logger

__all__ = ["ConditionEvaluator", "resolve_path"]

logger = get_logger(__name__)

ORDERING_OPERATORS = frozenset({">", "<", ">=", "<="})

# Operand strings that may name a state path
PATH_LIKE = re.compile(r"^[a-zA-Z_]")


def resolve_path(path: str, state: dict[str, Any]) -> Any:
    """Resolve a path against the run state.

    Plain dotted paths are walked directly. Paths containing call or index
    syntax (``users.find({id: 1}).age``, ``items[0]``) are evaluated as
    expressions; evaluation errors are logged and yield UNDEFINED.

    Examples:
        >>> resolve_path("user.age", {"user": {"age": 30}})
        30
        >>> resolve_path("items[1]", {"items": ["a", "b"]})
        'b'
    """
    if "(" not in path and "[" not in path:
        return get_path(state, path)

    try:
        return evaluate_expression(path, state)
    except (ExpressionError, RecursionError) as e:
        logger.warning(f"Error evaluating path '{path}': {e}", path=path)
        return UNDEFINED


class ConditionEvaluator:
    """Resolves conditions to booleans against the live run state.

    The evaluator keeps a reference to the state mapping, so changes made
    by before-hooks between evaluations are visible.

    Attributes:
        conditions: Named conditions of the graph.
        state: The run state.
        trace_level: Log level for evaluation trace messages.

    Example:
        ```python
        evaluator = ConditionEvaluator(config.conditions, state)
        if evaluator.evaluate(edge.condition):
            ...
        ```
    """

    def __init__(
        self,
        conditions: Mapping[str, ConditionRecord],
        state: dict[str, Any],
        trace_level: int = logging.DEBUG,
    ) -> None:
        self.conditions = conditions
        self.state = state
        self.trace_level = trace_level

    def evaluate(self, condition: ConditionRecord) -> bool:
        """Evaluate a condition.

        Raises:
            UnknownConditionError: If a named condition does not exist.
            UnknownOperatorError: If a simple condition has an unsupported
                operator.
        """
        if isinstance(condition, str):
            named = self.conditions.get(condition)
            if named is None:
                raise UnknownConditionError(condition, self.conditions.keys())
            return self.evaluate(named)

        if isinstance(condition, AndCondition):
            return self._evaluate_and(condition)

        if isinstance(condition, OrCondition):
            return self._evaluate_or(condition)

        return self._evaluate_simple(condition)

    def _evaluate_and(self, condition: AndCondition) -> bool:
        for index, sub_condition in enumerate(condition.and_):
            result = self.evaluate(sub_condition)
            logger.log(self.trace_level, f"AND[{index}]: {result}")
            if not result:
                return False
        return True

    def _evaluate_or(self, condition: OrCondition) -> bool:
        for index, sub_condition in enumerate(condition.or_):
            result = self.evaluate(sub_condition)
            logger.log(self.trace_level, f"OR[{index}]: {result}")
            if result:
                return True
        return False

    def _evaluate_simple(self, condition: SimpleCondition) -> bool:
        value = resolve_path(condition.path, self.state)

        operand = condition.value
        if isinstance(operand, str) and PATH_LIKE.match(operand):
            resolved = resolve_path(operand, self.state)
            if resolved is not UNDEFINED:
                operand = resolved

        operator = condition.operator
        logger.log(
            self.trace_level,
            f"Evaluating condition: {condition.path} = {to_display(value)} "
            f"{operator} {to_display(operand)}",
        )

        if operator == "=":
            return strict_equals(value, operand)
        if operator == "!=":
            return not strict_equals(value, operand)
        if operator in ORDERING_OPERATORS:
            if is_nullish(value) and is_number(operand):
                logger.log(
                    self.trace_level,
                    f"Condition path '{condition.path}' is {to_display(value)}; "
                    f"'{operator} {to_display(operand)}' is false",
                )
                return False
            return safe_compare(operator, value, operand)

        raise UnknownOperatorError(operator)
