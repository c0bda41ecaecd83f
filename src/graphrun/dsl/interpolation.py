"""String interpolation for executor payloads.

Strings scheduled for execution-time substitution (HTTP url, headers and
body, before-hook payloads) go through three passes, in order:

1. ``${var.NAME}`` - value of ``NAME`` in the run state's ``var`` namespace.
2. ``${secret.NAME}`` / ``${SECRET.NAME}`` - value from the secret resolver
   (the process environment by default).
3. ``{{ expression }}`` - an expression evaluated against the run state.

Unresolvable placeholders and failing expressions are left verbatim and
logged as warnings; interpolation itself never fails.

``{{ }}`` spans are located with a brace-depth scanner, so expressions that
contain object literals (``{{ {a: {b: 1}} }}``) are matched as a whole.
After every successful substitution the scan restarts from the beginning of
the string, which means a substituted value containing ``{{`` is expanded
again. The number of substitutions per string is bounded by
``RunnerSettings.max_interpolation_passes``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from typing import Any

from graphrun.dsl.expressions import (
    ExpressionError,
    ExpressionEvaluator,
    parse_expression,
)
from graphrun.dsl.types import UNDEFINED, to_display
from graphrun.logging import get_logger

__all__ = [
    "SecretResolver",
    "Interpolator",
    "find_expression_end",
    "environment_secret_resolver",
]

logger = get_logger(__name__)

SecretResolver = Callable[[str], str | None]

VAR_PATTERN = re.compile(r"\$\{var\.([a-zA-Z_][a-zA-Z0-9_]*)\}")
SECRET_PATTERNS = (
    re.compile(r"\$\{secret\.([a-zA-Z_][a-zA-Z0-9_]*)\}"),
    re.compile(r"\$\{SECRET\.([a-zA-Z_][a-zA-Z0-9_]*)\}"),
)

EXPRESSION_OPEN = "{{"

DEFAULT_MAX_PASSES = 1000


def environment_secret_resolver(name: str) -> str | None:
    """Resolve a secret from the process environment."""
    return os.environ.get(name)


def find_expression_end(text: str, start: int) -> int | None:
    """Find the end of the ``{{ ... }}`` span opening at ``start``.

    Counts single braces from the opening ``{{`` (depth 2) until the depth
    returns to zero.

    Args:
        text: Text to scan.
        start: Index of the opening ``{{``.

    Returns:
        Index just past the closing ``}}``, or None if the braces never
        balance.

    Examples:
        >>> find_expression_end("a {{ x }} b", 2)
        9
        >>> find_expression_end("{{ {k: 1} }}", 0)
        12
        >>> find_expression_end("{{ x }", 0) is None
        True
    """
    depth = 2
    end = start + 2
    while end < len(text) and depth > 0:
        char = text[end]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        end += 1
    return end if depth == 0 else None


class Interpolator:
    """Applies variable, secret and expression substitution.

    Attributes:
        secret_resolver: Callable returning a secret value or None.
        max_passes: Upper bound on ``{{ }}`` substitutions per string.
    """

    def __init__(
        self,
        secret_resolver: SecretResolver | None = None,
        max_passes: int = DEFAULT_MAX_PASSES,
    ) -> None:
        self.secret_resolver = secret_resolver or environment_secret_resolver
        self.max_passes = max_passes

    def interpolate_value(self, value: Any, state: dict[str, Any]) -> Any:
        """Interpolate a nested structure.

        Strings are interpolated, lists element-wise, and mappings over both
        keys and values. Other values are returned unchanged.
        """
        if isinstance(value, str):
            return self.interpolate_string(value, state)
        if isinstance(value, list):
            return [self.interpolate_value(item, state) for item in value]
        if isinstance(value, dict):
            return {
                self.interpolate_string(str(key), state): self.interpolate_value(
                    item, state
                )
                for key, item in value.items()
            }
        return value

    def interpolate_string(self, template: str, state: dict[str, Any]) -> str:
        """Interpolate all placeholders in a single string.

        Args:
            template: Text containing placeholders.
            state: Current run state.

        Returns:
            The interpolated text.
        """
        result = self._substitute_variables(template, state)
        result = self._substitute_secrets(result)
        return self._substitute_expressions(result, state)

    def _substitute_variables(self, text: str, state: dict[str, Any]) -> str:
        variables = state.get("var")

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            value = UNDEFINED
            if isinstance(variables, dict):
                value = variables.get(name, UNDEFINED)
            if value is UNDEFINED:
                logger.warning(
                    f"Variable '{name}' not found in variables", variable=name
                )
                return match.group(0)
            return to_display(value)

        return VAR_PATTERN.sub(replace, text)

    def _substitute_secrets(self, text: str) -> str:
        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            value = self.secret_resolver(name)
            if value is None:
                logger.warning(
                    f"Secret '{name}' not found in environment", secret=name
                )
                return match.group(0)
            return value

        for pattern in SECRET_PATTERNS:
            text = pattern.sub(replace, text)
        return text

    def _substitute_expressions(self, text: str, state: dict[str, Any]) -> str:
        result = text
        position = 0
        passes = 0

        while True:
            start = result.find(EXPRESSION_OPEN, position)
            if start == -1:
                return result

            end = find_expression_end(result, start)
            if end is None:
                position = start + 2
                continue

            expression = result[start + 2 : end - 2].strip()
            try:
                value = ExpressionEvaluator(state, expression).evaluate(
                    parse_expression(expression)
                )
            except (ExpressionError, RecursionError) as e:
                # Deeply nested expressions overflow the recursive parser
                logger.warning(
                    f"Error interpolating '{expression}': {e}",
                    expression=expression,
                )
                position = start + 2
                continue

            if passes >= self.max_passes:
                logger.warning(
                    f"Stopped interpolating after {self.max_passes} substitutions",
                    template=text,
                )
                return result

            result = result[:start] + to_display(value) + result[end:]
            passes += 1
            position = 0
