"""Expression parser models and functions.

This module turns the token stream produced by the tokenizer into an
expression AST using a recursive-descent parser.

Expression syntax:
- ``{{ user.name }}`` - Member access on a state value
- ``{{ items[0] }}`` / ``{{ headers["x-id"] }}`` - Indexed access
- ``{{ max(a, b) }}`` - Call of a built-in scalar function
- ``{{ users.find({id: "42"}) }}`` - Method call (path functions or
  methods of the receiver's Python type)
- ``{{ items.first }}`` - First/last element sugar on lists
- ``{{ {page: 1, size: limit} }}`` - Object literal
- ``{{ "text" }}``, ``{{ 42 }}``, ``{{ true }}``, ``{{ null }}`` - Literals

Grammar:
    expression := postfix
    postfix    := primary ( "." IDENT [ "(" args ")" ]
                          | "(" args ")"
                          | "[" expression "]" )*
    primary    := STRING | NUMBER | KEYWORD | IDENT | object | "(" expression ")"
    object     := "{" [ (STRING | IDENT) ":" expression ("," ...)* ] "}"
    args       := [ expression ( "," expression )* ]

A bare call ``name(...)`` is only valid directly on an identifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from graphrun.dsl.expressions.errors import ExpressionSyntaxError
from graphrun.dsl.expressions.tokenizer import Token, TokenType, tokenize

__all__ = [
    "LiteralNode",
    "IdentifierNode",
    "ObjectNode",
    "MemberAccessNode",
    "ArrayAccessNode",
    "FunctionCallNode",
    "MethodCallNode",
    "ExpressionNode",
    "ExpressionParser",
    "parse_expression",
]


@dataclass(frozen=True, slots=True)
class LiteralNode:
    """String, number, boolean or null literal."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class IdentifierNode:
    """Bare name looked up in the evaluation context."""

    name: str


@dataclass(frozen=True, slots=True)
class ObjectNode:
    """Object literal ``{key: expr, ...}``.

    Attributes:
        properties: Key/value-expression pairs in source order. Duplicate
            keys are kept; the last one wins on evaluation.
    """

    properties: tuple[tuple[str, ExpressionNode], ...]


@dataclass(frozen=True, slots=True)
class MemberAccessNode:
    """``object.property``."""

    object: ExpressionNode
    property: str


@dataclass(frozen=True, slots=True)
class ArrayAccessNode:
    """``object[index]``."""

    object: ExpressionNode
    index: ExpressionNode


@dataclass(frozen=True, slots=True)
class FunctionCallNode:
    """``name(arg, ...)`` on a bare identifier."""

    name: str
    arguments: tuple[ExpressionNode, ...]


@dataclass(frozen=True, slots=True)
class MethodCallNode:
    """``object.method(arg, ...)``."""

    object: ExpressionNode
    method: str
    arguments: tuple[ExpressionNode, ...]


ExpressionNode = (
    LiteralNode
    | IdentifierNode
    | ObjectNode
    | MemberAccessNode
    | ArrayAccessNode
    | FunctionCallNode
    | MethodCallNode
)


class ExpressionParser:
    """Recursive-descent parser over a token list.

    Example:
        ```python
        parser = ExpressionParser(tokenize("users.find({id: 1}).name"), source)
        ast = parser.parse()
        ```
    """

    def __init__(self, tokens: list[Token], source: str = "") -> None:
        self._tokens = tokens
        self._source = source
        self._current = 0

    def parse(self) -> ExpressionNode:
        """Parse a single expression consuming every token.

        Raises:
            ExpressionSyntaxError: If the tokens do not form one expression.
        """
        node = self._parse_expression()
        if not self._is_at_end():
            token = self._peek()
            raise self._error(
                f"Unexpected token {token.type.value} '{token.value}' after expression",
                token,
            )
        return node

    def _parse_expression(self) -> ExpressionNode:
        return self._parse_postfix()

    def _parse_postfix(self) -> ExpressionNode:
        node = self._parse_primary()

        while True:
            if self._match(TokenType.DOT):
                name = self._consume(
                    TokenType.IDENTIFIER, 'Expected property name after "."'
                ).value
                if self._match(TokenType.LPAREN):
                    args = self._parse_arguments()
                    self._consume(TokenType.RPAREN, 'Expected ")" after arguments')
                    node = MethodCallNode(object=node, method=name, arguments=args)
                else:
                    node = MemberAccessNode(object=node, property=name)
            elif self._check(TokenType.LPAREN):
                paren = self._advance()
                if not isinstance(node, IdentifierNode):
                    raise self._error(
                        "Only identifiers can be called as functions", paren
                    )
                args = self._parse_arguments()
                self._consume(TokenType.RPAREN, 'Expected ")" after arguments')
                node = FunctionCallNode(name=node.name, arguments=args)
            elif self._match(TokenType.LBRACKET):
                index = self._parse_expression()
                self._consume(TokenType.RBRACKET, 'Expected "]" after index')
                node = ArrayAccessNode(object=node, index=index)
            else:
                return node

    def _parse_primary(self) -> ExpressionNode:
        token = self._peek()

        if self._match(TokenType.STRING):
            return LiteralNode(token.value)

        if self._match(TokenType.NUMBER):
            return LiteralNode(self._number_value(token))

        if self._match(TokenType.KEYWORD):
            keywords: dict[str, Any] = {"true": True, "false": False, "null": None}
            return LiteralNode(keywords[token.value])

        if self._match(TokenType.IDENTIFIER):
            return IdentifierNode(token.value)

        if self._match(TokenType.LBRACE):
            return self._parse_object()

        if self._match(TokenType.LPAREN):
            expr = self._parse_expression()
            self._consume(TokenType.RPAREN, 'Expected ")" after expression')
            return expr

        description = "end of expression" if token.type is TokenType.EOF else (
            f"token {token.type.value} '{token.value}'"
        )
        raise self._error(f"Unexpected {description}", token)

    def _parse_object(self) -> ObjectNode:
        properties: list[tuple[str, ExpressionNode]] = []

        if not self._check(TokenType.RBRACE):
            while True:
                if self._check(TokenType.STRING) or self._check(TokenType.IDENTIFIER):
                    key = self._advance().value
                else:
                    raise self._error("Expected property name", self._peek())
                self._consume(TokenType.COLON, 'Expected ":" after property name')
                properties.append((key, self._parse_expression()))
                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RBRACE, 'Expected "}" after object properties')
        return ObjectNode(properties=tuple(properties))

    def _parse_arguments(self) -> tuple[ExpressionNode, ...]:
        args: list[ExpressionNode] = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())
        return tuple(args)

    def _number_value(self, token: Token) -> int | float:
        text = token.value
        try:
            return float(text) if "." in text else int(text)
        except ValueError:
            raise self._error(f"Malformed number literal '{text}'", token) from None

    # Token helpers

    def _peek(self) -> Token:
        return self._tokens[self._current]

    def _is_at_end(self) -> bool:
        return self._peek().type is TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type is token_type

    def _advance(self) -> Token:
        token = self._peek()
        if not self._is_at_end():
            self._current += 1
        return token

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        found = self._peek()
        raise self._error(
            f"{message}. Got {found.type.value} '{found.value}'", found
        )

    def _error(self, message: str, token: Token) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(
            message, expression=self._source, position=token.position
        )


@lru_cache(maxsize=512)
def parse_expression(expression: str) -> ExpressionNode:
    """Tokenize and parse an expression string into an AST.

    Results are cached; AST nodes are immutable so sharing them is safe.

    Args:
        expression: Expression text (without ``{{ }}`` delimiters).

    Returns:
        Root node of the expression AST.

    Raises:
        ExpressionSyntaxError: For invalid expression syntax.

    Examples:
        >>> parse_expression("user.name")
        MemberAccessNode(object=IdentifierNode(name='user'), property='name')
        >>> parse_expression("max(1, 2)")
        FunctionCallNode(name='max', arguments=(LiteralNode(value=1), LiteralNode(value=2)))
    """
    return ExpressionParser(tokenize(expression), expression).parse()
