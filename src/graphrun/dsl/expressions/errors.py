"""Expression-specific error types for the graphrun DSL.

This module defines exceptions for expression tokenizing, parsing and
evaluation, following the pattern from graphrun.dsl.errors.
"""

from __future__ import annotations

from graphrun.exceptions import GraphRunError


class ExpressionError(GraphRunError):
    """Base exception for all expression-related errors.

    Attributes:
        message: Human-readable error message.
        expression: The expression that caused the error (if known).
    """

    def __init__(
        self,
        message: str,
        expression: str | None = None,
    ) -> None:
        self.expression = expression
        super().__init__(message)


class ExpressionSyntaxError(ExpressionError):
    """Exception raised for syntax errors in ``{{ }}`` expressions.

    Raised by the tokenizer for unexpected characters and unterminated
    strings, and by the parser when a token does not fit the grammar (for
    example an unmatched bracket).

    Attributes:
        message: Human-readable error message.
        expression: The expression that failed to parse.
        position: Character offset in the expression where the error occurred.
    """

    def __init__(
        self,
        message: str,
        expression: str,
        position: int = 0,
    ) -> None:
        self.position = position
        # Caret line pointing at the offending character
        if expression:
            error_line = f"{expression}\n{' ' * position}^"
            full_message = f"{message} at position {position}:\n{error_line}"
        else:
            full_message = f"{message} at position {position}"
        super().__init__(full_message, expression=expression)


class ExpressionEvaluationError(ExpressionError):
    """Exception raised for runtime evaluation errors in expressions.

    Raised when an expression parses correctly but fails during evaluation,
    such as calling an unknown function, calling a method on null, or using
    an unknown filter operator.

    Attributes:
        message: Human-readable error message.
        expression: The expression that failed to evaluate.
    """

    def __init__(
        self,
        message: str,
        expression: str | None = None,
    ) -> None:
        full_message = f"{message} in expression: {expression}" if expression else message
        super().__init__(full_message, expression=expression)
