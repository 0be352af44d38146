"""
Tokenizer for the expression language.

Converts an expression string into a sequence of typed tokens.
"""

from __future__ import annotations

from enum import StrEnum, auto

from expreval.errors import make_parse_error
from expreval.expressions import Operator


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    NUMBER = auto()
    STRING = auto()
    BOOLEAN = auto()

    # Names
    IDENTIFIER = auto()
    VARIABLE = auto()

    OPERATOR = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    LBRACKET = auto()
    RBRACKET = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos", "text")

    def __init__(
        self,
        kind: TokenKind,
        value: float | str | bool | Operator,
        pos: int,
        text: str,
    ) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos
        self.text = text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_WHITESPACE = " \t\n"
_VARIABLE_PREFIXES = "#$"
_BOOLEANS = (("true", True), ("false", False))

# Longest spellings first so "==" is never read as two tokens
_MULTI_CHAR_OPERATORS = ("==", "!=", "&&", "||", ">=", "<=")

_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
}

# A '-' after one of these is subtraction, never part of a number
_OPERAND_ENDINGS = frozenset(
    {
        TokenKind.NUMBER,
        TokenKind.STRING,
        TokenKind.BOOLEAN,
        TokenKind.VARIABLE,
        TokenKind.RPAREN,
        TokenKind.RBRACKET,
    }
)


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Raises:
        ParseError: On an unexpected character, an unterminated string,
            a malformed number or a malformed variable name.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in _WHITESPACE:
            i += 1
            continue

        # Boolean literals win over identifiers: "trueish" is true + ish
        boolean = _match_boolean(source, i)
        if boolean is not None:
            word, value = boolean
            tokens.append(Token(TokenKind.BOOLEAN, value, i, word))
            i += len(word)
            continue

        if c in _VARIABLE_PREFIXES:
            i, tok = _read_variable(source, i)
            tokens.append(tok)
            continue

        if c == "'":
            i, tok = _read_string(source, i)
            tokens.append(tok)
            continue

        if c.isdigit() or (c == "-" and _starts_negative_number(source, i, tokens)):
            i, tok = _read_number(source, i)
            tokens.append(tok)
            continue

        if c in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[c], c, i, c))
            i += 1
            continue

        op = _match_operator(source, i)
        if op is not None:
            tokens.append(Token(TokenKind.OPERATOR, op, i, op.value))
            i += len(op.value)
            continue

        if c.isalpha():
            start = i
            i += 1
            while i < n and (source[i].isalnum() or source[i] == "_"):
                i += 1
            name = source[start:i]
            tokens.append(Token(TokenKind.IDENTIFIER, name, start, name))
            continue

        raise make_parse_error(f"Unexpected character: {c!r}", source, i)

    return tokens


def _match_boolean(source: str, i: int) -> tuple[str, bool] | None:
    for word, value in _BOOLEANS:
        if source.startswith(word, i):
            return word, value
    return None


def _match_operator(source: str, i: int) -> Operator | None:
    for spelling in _MULTI_CHAR_OPERATORS:
        if source.startswith(spelling, i):
            return Operator(spelling)
    try:
        return Operator(source[i])
    except ValueError:
        return None


def _starts_negative_number(source: str, i: int, tokens: list[Token]) -> bool:
    """A '-' is part of a number only directly before a digit, in operand position."""
    if i + 1 >= len(source) or not source[i + 1].isdigit():
        return False
    return not tokens or tokens[-1].kind not in _OPERAND_ENDINGS


def _read_variable(source: str, start: int) -> tuple[int, Token]:
    """Read '#name' or '$name'; dots may only separate name segments."""
    i = start + 1
    n = len(source)

    if i >= n or not (source[i].isalnum() or source[i] == "_"):
        raise make_parse_error(
            "Invalid variable name: must start with a letter, a number, or '_'",
            source,
            start,
        )

    while i < n and (source[i].isalnum() or source[i] in "_."):
        i += 1

    name = source[start:i]
    if name.endswith("."):
        raise make_parse_error(
            "Invalid variable name: '.' cannot be at the beginning or end",
            source,
            start,
        )
    return i, Token(TokenKind.VARIABLE, name, start, name)


def _read_string(source: str, start: int) -> tuple[int, Token]:
    """Read a single-quoted string literal. There are no escape sequences."""
    end = source.find("'", start + 1)
    if end == -1:
        raise make_parse_error("Unterminated string literal", source, start)
    text = source[start : end + 1]
    return end + 1, Token(TokenKind.STRING, source[start + 1 : end], start, text)


def _read_number(source: str, start: int) -> tuple[int, Token]:
    """Read a decimal literal, including a fused leading '-'."""
    i = start + 1 if source[start] == "-" else start
    n = len(source)
    while i < n and (source[i].isdigit() or source[i] == "."):
        i += 1

    text = source[start:i]
    try:
        value = float(text)
    except ValueError:
        raise make_parse_error(f"Invalid number: {text}", source, start) from None
    return i, Token(TokenKind.NUMBER, value, start, text)
