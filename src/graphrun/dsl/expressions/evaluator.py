"""Expression evaluator for the graphrun DSL.

This module provides the ExpressionEvaluator class for walking a parsed
expression AST against a context (normally the current run state).

Evaluation rules:
- Identifiers resolve against the context; unknown names yield UNDEFINED.
- ``a.b`` on null/undefined yields UNDEFINED instead of failing.
- ``items.first`` / ``items.last`` apply the path function on lists.
- ``a[i]`` indexes lists by integer and mappings by key.
- ``name(...)`` calls a scalar function (``min``, ``max``).
- ``a.method(...)`` calls a path function with ``a`` as first argument, or
  a public method of the receiver's Python type (``"x".upper()``).
"""

from __future__ import annotations

from typing import Any

from graphrun.dsl.expressions.errors import ExpressionEvaluationError
from graphrun.dsl.expressions.functions import PATH_FUNCTIONS, SCALAR_FUNCTIONS
from graphrun.dsl.expressions.parser import (
    ArrayAccessNode,
    ExpressionNode,
    FunctionCallNode,
    IdentifierNode,
    LiteralNode,
    MemberAccessNode,
    MethodCallNode,
    ObjectNode,
    parse_expression,
)
from graphrun.dsl.types import UNDEFINED, is_nullish, is_number, to_display

__all__ = ["ExpressionEvaluator", "evaluate_expression", "type_name"]

# Member names applied as path functions on lists without parentheses
LIST_PROPERTY_FUNCTIONS = frozenset({"first", "last"})

# Methods that can reach object internals through format specifiers
BLOCKED_METHODS = frozenset({"format", "format_map"})


def type_name(value: Any) -> str:
    """Return the name used for a value's type in error messages."""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    return type(value).__name__


class ExpressionEvaluator:
    """Evaluates expression ASTs against a context mapping.

    Attributes:
        context: Names visible to identifiers (the run state).
        expression: Source text, used in error messages only.

    Example:
        ```python
        evaluator = ExpressionEvaluator({"users": [{"id": 1, "name": "Ann"}]})
        evaluator.evaluate(parse_expression("users.find({id: 1}).name"))  # "Ann"
        ```
    """

    def __init__(self, context: dict[str, Any], expression: str | None = None) -> None:
        self.context = context
        self.expression = expression

    def evaluate(self, node: ExpressionNode) -> Any:
        """Evaluate an AST node.

        Returns:
            The resulting value; UNDEFINED for absent values.

        Raises:
            ExpressionEvaluationError: For unknown functions, method calls on
                null/undefined, unsupported methods and failing calls.
        """
        if isinstance(node, LiteralNode):
            return node.value

        if isinstance(node, IdentifierNode):
            return self.context.get(node.name, UNDEFINED)

        if isinstance(node, ObjectNode):
            return {key: self.evaluate(value) for key, value in node.properties}

        if isinstance(node, MemberAccessNode):
            return self._member_access(node)

        if isinstance(node, ArrayAccessNode):
            return self._array_access(node)

        if isinstance(node, FunctionCallNode):
            return self._function_call(node)

        if isinstance(node, MethodCallNode):
            return self._method_call(node)

        raise ExpressionEvaluationError(
            f"Unknown AST node type: {type(node).__name__}", self.expression
        )

    def _member_access(self, node: MemberAccessNode) -> Any:
        target = self.evaluate(node.object)
        if is_nullish(target):
            return UNDEFINED

        if isinstance(target, list):
            if node.property in LIST_PROPERTY_FUNCTIONS:
                return PATH_FUNCTIONS[node.property](target)
            if node.property == "length":
                return len(target)
            return UNDEFINED

        if isinstance(target, dict):
            return target.get(node.property, UNDEFINED)

        if isinstance(target, str) and node.property == "length":
            return len(target)

        return UNDEFINED

    def _array_access(self, node: ArrayAccessNode) -> Any:
        target = self.evaluate(node.object)
        if is_nullish(target):
            return UNDEFINED

        index = self.evaluate(node.index)

        if isinstance(target, list):
            if is_number(index) and (isinstance(index, int) or index.is_integer()):
                position = int(index)
                if 0 <= position < len(target):
                    return target[position]
            return UNDEFINED

        if isinstance(target, dict):
            if isinstance(index, str):
                return target.get(index, UNDEFINED)
            # Keys read from JSON are always strings
            if is_number(index):
                return target.get(to_display(index), UNDEFINED)
            return UNDEFINED

        return UNDEFINED

    def _function_call(self, node: FunctionCallNode) -> Any:
        function = SCALAR_FUNCTIONS.get(node.name)
        if function is None:
            raise ExpressionEvaluationError(
                f"Unknown function: {node.name}", self.expression
            )
        args = [self.evaluate(arg) for arg in node.arguments]
        return self._invoke(node.name, function, args)

    def _method_call(self, node: MethodCallNode) -> Any:
        target = self.evaluate(node.object)
        if is_nullish(target):
            raise ExpressionEvaluationError(
                f"Cannot call method '{node.method}' on {type_name(target)}",
                self.expression,
            )

        path_function = PATH_FUNCTIONS.get(node.method)
        if path_function is not None:
            args = [self.evaluate(arg) for arg in node.arguments]
            return self._invoke(node.method, path_function, [target, *args])

        method = None
        if not node.method.startswith("_") and node.method not in BLOCKED_METHODS:
            method = getattr(target, node.method, None)
        if not callable(method):
            raise ExpressionEvaluationError(
                f"'{node.method}' is not a function on {type_name(target)}",
                self.expression,
            )

        args = [self.evaluate(arg) for arg in node.arguments]
        return self._invoke(node.method, method, args)

    def _invoke(self, name: str, function: Any, args: list[Any]) -> Any:
        try:
            return function(*args)
        except ExpressionEvaluationError:
            raise
        except Exception as e:
            raise ExpressionEvaluationError(
                f"Call to '{name}' failed: {e}", self.expression
            ) from e


def evaluate_expression(expression: str, context: dict[str, Any]) -> Any:
    """Parse and evaluate an expression string against a context.

    Raises:
        ExpressionSyntaxError: If the expression does not parse.
        ExpressionEvaluationError: If evaluation fails.

    Examples:
        >>> evaluate_expression("max(a, 3)", {"a": 7})
        7
        >>> evaluate_expression("user.missing.deeper", {"user": {}})
        UNDEFINED
    """
    return ExpressionEvaluator(context, expression).evaluate(
        parse_expression(expression)
    )
