"""Dynamic value helpers for the graphrun DSL.

Run state and expression results are plain JSON-shaped Python values
(None, bool, int, float, str, list, dict). Lookups that find nothing return
the ``UNDEFINED`` sentinel, which is distinct from ``None`` (an explicit
``null`` in a document or an HTTP response).

This module also defines the comparison and display rules shared by the
expression evaluator, the path functions, the interpolation engine and the
condition evaluator, so that all of them agree on what "equal", "less than"
and "the string form of a value" mean.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Final

__all__ = [
    "Undefined",
    "UNDEFINED",
    "is_nullish",
    "is_number",
    "strict_equals",
    "safe_compare",
    "loose_compare",
    "to_display",
    "get_path",
]


class Undefined(Enum):
    """Marker type for an absent value."""

    UNDEFINED = "undefined"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = Undefined.UNDEFINED


def is_nullish(value: Any) -> bool:
    """Return True for ``None`` and ``UNDEFINED``."""
    return value is None or value is UNDEFINED


def is_number(value: Any) -> bool:
    """Return True for int/float values, excluding bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two values without type coercion.

    Numbers compare by value (``1 == 1.0``) but never equal a bool, strings
    only equal strings, and ``None`` only equals ``None``. Lists and dicts
    compare structurally.
    """
    if left is UNDEFINED or right is UNDEFINED:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def safe_compare(operator: str, left: Any, right: Any) -> bool:
    """Apply an ordering operator, returning False for incomparable values.

    Args:
        operator: One of ``<``, ``<=``, ``>``, ``>=``.
        left: Left operand.
        right: Right operand.

    Returns:
        The comparison result, or False when either side is None/UNDEFINED
        or the operands cannot be ordered against each other.
    """
    if is_nullish(left) or is_nullish(right):
        return False
    try:
        if operator == "<":
            return bool(left < right)
        if operator == "<=":
            return bool(left <= right)
        if operator == ">":
            return bool(left > right)
        if operator == ">=":
            return bool(left >= right)
    except TypeError:
        return False
    raise ValueError(f"Not an ordering operator: {operator}")


def loose_compare(left: Any, right: Any) -> int:
    """Three-way compare for sorting; incomparable values compare equal."""
    try:
        if left < right:
            return -1
        if left > right:
            return 1
    except TypeError:
        return 0
    return 0


def _json_ready(value: Any) -> Any:
    # Mirrors JSON.stringify: undefined members vanish, undefined items become null
    if isinstance(value, dict):
        return {
            key: _json_ready(item) for key, item in value.items() if item is not UNDEFINED
        }
    if isinstance(value, (list, tuple)):
        return [None if item is UNDEFINED else _json_ready(item) for item in value]
    return value


def to_display(value: Any) -> str:
    """Render a value as the text substituted into an interpolated string.

    Strings are used verbatim, ``None`` renders as ``null``, bools as
    ``true``/``false``, integral floats without a trailing ``.0``, and lists
    or dicts as compact JSON (UNDEFINED members are dropped, UNDEFINED list
    items become ``null``).
    """
    if isinstance(value, str):
        return value
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(_json_ready(value), separators=(",", ":"), default=str)
    return str(value)


def get_path(value: Any, path: str) -> Any:
    """Walk a dotted path through nested dicts and lists.

    Numeric segments index into lists. Any missing step yields UNDEFINED.

    Examples:
        >>> get_path({"user": {"tags": ["a", "b"]}}, "user.tags.1")
        'b'
        >>> get_path({"user": None}, "user.name")
        UNDEFINED
    """
    current = value
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part, UNDEFINED)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else UNDEFINED
        else:
            return UNDEFINED
    return current
