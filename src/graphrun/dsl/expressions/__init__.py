"""Expression language for graphrun ``{{ }}`` placeholders.

Expression Syntax
-----------------
The text between ``{{`` and ``}}`` supports:
- Identifiers resolved from run state: ``{{ token }}``
- Member and index access: ``{{ user.profile.name }}``, ``{{ items[0] }}``
- Scalar functions: ``{{ max(a, b) }}``, ``{{ min(a, b) }}``
- Path functions with method syntax:
  ``{{ users.find({id: "42"}) }}``, ``{{ rows.filter({age: {">": 30}}) }}``,
  ``{{ rows.sort("age", "desc") }}``, ``{{ rows.first }}``
- Methods of the receiver's Python type: ``{{ name.upper() }}``
- Object literals: ``{{ {page: 1, size: limit} }}``
- Literals: ``"text"``, ``'text'``, ``42``, ``3.5``, ``true``, ``false``, ``null``

Numbers have no sign or exponent syntax.

Module Structure
----------------
- tokenizer.py: Expression text to tokens
- parser.py: Recursive-descent parser and AST node types
- evaluator.py: AST evaluation against a context
- functions.py: Scalar and path functions
- errors.py: Expression-specific error types
"""

from __future__ import annotations

from graphrun.dsl.expressions.errors import (
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
)
from graphrun.dsl.expressions.evaluator import ExpressionEvaluator, evaluate_expression
from graphrun.dsl.expressions.functions import PATH_FUNCTIONS, SCALAR_FUNCTIONS
from graphrun.dsl.expressions.parser import (
    ExpressionNode,
    ExpressionParser,
    parse_expression,
)
from graphrun.dsl.expressions.tokenizer import Token, TokenType, tokenize

__all__: list[str] = [
    # Error types
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
    # Tokenizer
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "ExpressionNode",
    "ExpressionParser",
    "parse_expression",
    # Evaluator
    "ExpressionEvaluator",
    "evaluate_expression",
    # Function tables
    "SCALAR_FUNCTIONS",
    "PATH_FUNCTIONS",
]
