"""Built-in functions available inside ``{{ }}`` expressions.

Two tables are exposed:

- ``SCALAR_FUNCTIONS``: callable by bare name, e.g. ``max(a, b)``.
- ``PATH_FUNCTIONS``: array/query helpers callable with method syntax, the
  receiver becoming the first argument, e.g. ``users.find({id: "42"})``.

Path functions never raise for a receiver that is not a list; they return
``UNDEFINED`` (``find``, ``first``, ``last``) or an empty list (``filter``,
``sort``) instead.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import cmp_to_key
from typing import Any

from graphrun.dsl.expressions.errors import ExpressionEvaluationError
from graphrun.dsl.types import (
    UNDEFINED,
    get_path,
    is_nullish,
    is_number,
    loose_compare,
    safe_compare,
    strict_equals,
)

__all__ = [
    "SCALAR_FUNCTIONS",
    "PATH_FUNCTIONS",
    "find",
    "filter_items",
    "sort_items",
    "first",
    "last",
]

# Properties checked, in order, when find() gets a scalar and no property name
FIND_FALLBACK_KEYS = ("id", "name", "type", "key")

# Filter operator spellings mapped to their canonical form
FILTER_OPERATORS: dict[str, str] = {
    "<": "<",
    "$lt": "<",
    "<=": "<=",
    "$lte": "<=",
    ">": ">",
    "$gt": ">",
    ">=": ">=",
    "$gte": ">=",
    "!=": "!=",
    "$ne": "!=",
    "==": "==",
    "$eq": "==",
}


def _max(*values: Any) -> Any:
    return max(values)


def _min(*values: Any) -> Any:
    return min(values)


SCALAR_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "max": _max,
    "min": _min,
}


def find(array: Any, criteria: Any = UNDEFINED, property_name: Any = UNDEFINED) -> Any:
    """Return the first element of ``array`` matching ``criteria``.

    Args:
        array: List to search.
        criteria: Either a mapping whose entries must all match the element's
            fields by strict equality, or a scalar compared against primitive
            elements directly or against a property of mapping elements.
        property_name: Property compared against a scalar criteria. When
            omitted, ``id``, ``name``, ``type`` and ``key`` are tried in turn.

    Returns:
        The matching element, or UNDEFINED when nothing matches.

    Examples:
        >>> find([{"id": "a", "v": 1}, {"id": "b", "v": 2}], {"id": "b"})
        {'id': 'b', 'v': 2}
        >>> find(["x", "y"], "y")
        'y'
    """
    if not isinstance(array, list):
        return UNDEFINED

    for item in array:
        if _find_matches(item, criteria, property_name):
            return item
    return UNDEFINED


def _find_matches(item: Any, criteria: Any, property_name: Any) -> bool:
    if isinstance(criteria, dict):
        return isinstance(item, dict) and all(
            strict_equals(item.get(key, UNDEFINED), value)
            for key, value in criteria.items()
        )

    if is_nullish(criteria) or isinstance(criteria, list):
        return False

    if isinstance(item, str) or is_number(item):
        return strict_equals(item, criteria)

    if isinstance(item, dict):
        if isinstance(property_name, str) and property_name:
            return strict_equals(item.get(property_name, UNDEFINED), criteria)
        return any(
            strict_equals(item.get(key, UNDEFINED), criteria)
            for key in FIND_FALLBACK_KEYS
        )

    return False


def filter_items(array: Any, query: Any) -> list[Any]:
    """Return the elements of ``array`` satisfying every entry of ``query``.

    ``query`` maps a (possibly dotted) field path either to a scalar, which
    must be strictly equal to the field, or to an operator mapping such as
    ``{"<=": 100}`` or ``{"$ne": "draft"}``. Every entry must hold.

    Raises:
        ExpressionEvaluationError: For an unknown filter operator.

    Examples:
        >>> filter_items([{"salary": 90}, {"salary": 150}], {"salary": {"<=": 100}})
        [{'salary': 90}]
    """
    if not isinstance(array, list):
        return []
    if not isinstance(query, dict):
        raise ExpressionEvaluationError(
            f"filter() expects a mapping query, got {type(query).__name__}"
        )

    return [item for item in array if _filter_matches(item, query)]


def _filter_matches(item: Any, query: dict[str, Any]) -> bool:
    for field_path, condition in query.items():
        if not isinstance(item, dict):
            return False

        field_value = get_path(item, field_path)

        if isinstance(condition, dict):
            for operator, value in condition.items():
                if not _apply_filter_operator(operator, field_value, value):
                    return False
        elif not strict_equals(field_value, condition):
            return False
    return True


def _apply_filter_operator(operator: str, field_value: Any, value: Any) -> bool:
    canonical = FILTER_OPERATORS.get(operator)
    if canonical is None:
        raise ExpressionEvaluationError(f"Unknown filter operator: {operator}")
    if canonical == "==":
        return strict_equals(field_value, value)
    if canonical == "!=":
        return not strict_equals(field_value, value)
    return safe_compare(canonical, field_value, value)


def sort_items(array: Any, key: str, direction: str = "asc") -> list[Any]:
    """Return a sorted copy of ``array`` ordered by a (dotted) field path.

    The sort is stable. Null or missing values go first for ``asc`` and last
    for ``desc``.

    Examples:
        >>> sort_items([{"n": 2}, {"n": None}, {"n": 1}], "n")
        [{'n': None}, {'n': 1}, {'n': 2}]
    """
    if not isinstance(array, list):
        return []

    ascending = direction != "desc"

    def compare(a: Any, b: Any) -> int:
        a_value = get_path(a, key) if isinstance(a, (dict, list)) else UNDEFINED
        b_value = get_path(b, key) if isinstance(b, (dict, list)) else UNDEFINED
        a_null = is_nullish(a_value)
        b_null = is_nullish(b_value)

        if a_null and b_null:
            return 0
        if a_null:
            return -1 if ascending else 1
        if b_null:
            return 1 if ascending else -1

        result = loose_compare(a_value, b_value)
        return result if ascending else -result

    return sorted(array, key=cmp_to_key(compare))


def first(array: Any) -> Any:
    """Return the first element, or UNDEFINED for an empty or non-list value."""
    if not isinstance(array, list) or not array:
        return UNDEFINED
    return array[0]


def last(array: Any) -> Any:
    """Return the last element, or UNDEFINED for an empty or non-list value."""
    if not isinstance(array, list) or not array:
        return UNDEFINED
    return array[-1]


PATH_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "find": find,
    "filter": filter_items,
    "sort": sort_items,
    "first": first,
    "last": last,
}
