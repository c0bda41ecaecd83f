"""Tokenizer for ``{{ }}`` expressions.

Splits the text between the interpolation delimiters into a flat token list
terminated by an EOF token. Recognized tokens:

- Punctuation: ``( ) { } [ ] . , :``
- Strings in single or double quotes; a backslash escapes the next character
- Numbers made of digits and dots (no sign, no exponent)
- Identifiers ``[A-Za-z_][A-Za-z0-9_]*``
- Keywords ``true``, ``false`` and ``null``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from graphrun.dsl.expressions.errors import ExpressionSyntaxError

__all__ = [
    "TokenType",
    "Token",
    "KEYWORDS",
    "tokenize",
]


class TokenType(str, Enum):
    """Kind of lexical token."""

    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    DOT = "DOT"
    COMMA = "COMMA"
    COLON = "COLON"
    STRING = "STRING"
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"
    EOF = "EOF"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    Attributes:
        type: Token kind.
        value: Token text (string contents without quotes for STRING).
        position: Offset of the first character of the token.
    """

    type: TokenType
    value: str
    position: int


KEYWORDS = frozenset({"true", "false", "null"})

_PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}


def _is_ident_start(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_ident_char(char: str) -> bool:
    return _is_ident_start(char) or ("0" <= char <= "9")


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def tokenize(expression: str) -> list[Token]:
    """Tokenize an expression string.

    Args:
        expression: Expression text (without the ``{{ }}`` delimiters).

    Returns:
        List of tokens, always ending with an EOF token.

    Raises:
        ExpressionSyntaxError: For unexpected characters and unterminated
            string literals.

    Examples:
        >>> [t.value for t in tokenize("user.name")]
        ['user', '.', 'name', '']
        >>> [t.type.value for t in tokenize("max(1, 2)")][:3]
        ['IDENTIFIER', 'LPAREN', 'NUMBER']
    """
    tokens: list[Token] = []
    length = len(expression)
    i = 0

    while i < length:
        char = expression[i]

        if char.isspace():
            i += 1
            continue

        if char in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[char], char, i))
            i += 1
            continue

        # String literal
        if char in ("'", '"'):
            quote = char
            start = i
            i += 1
            chars: list[str] = []
            while i < length and expression[i] != quote:
                if expression[i] == "\\":
                    i += 1
                    if i < length:
                        chars.append(expression[i])
                else:
                    chars.append(expression[i])
                i += 1
            if i >= length:
                raise ExpressionSyntaxError(
                    "Unterminated string literal",
                    expression=expression,
                    position=start,
                )
            i += 1  # closing quote
            tokens.append(Token(TokenType.STRING, "".join(chars), start))
            continue

        # Number literal
        if _is_digit(char):
            start = i
            while i < length and (_is_digit(expression[i]) or expression[i] == "."):
                i += 1
            tokens.append(Token(TokenType.NUMBER, expression[start:i], start))
            continue

        # Identifier or keyword
        if _is_ident_start(char):
            start = i
            while i < length and _is_ident_char(expression[i]):
                i += 1
            word = expression[start:i]
            token_type = TokenType.KEYWORD if word in KEYWORDS else TokenType.IDENTIFIER
            tokens.append(Token(token_type, word, start))
            continue

        raise ExpressionSyntaxError(
            f"Unexpected character '{char}'",
            expression=expression,
            position=i,
        )

    tokens.append(Token(TokenType.EOF, "", length))
    return tokens
