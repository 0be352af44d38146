"""
Recursive descent parser for the expression language.

Grammar (precedence low to high, every binary tier left-associative):
    expr           → or_expr
    or_expr        → and_expr ("||" and_expr)*
    and_expr       → equality ("&&" equality)*
    equality       → comparison (("==" | "!=") comparison)*
    comparison     → bitwise_or ((">" | ">=" | "<" | "<=") bitwise_or)*
    bitwise_or     → bitwise_and ("|" bitwise_and)*
    bitwise_and    → additive ("&" additive)*
    additive       → multiplicative (("+" | "-") multiplicative)*
    multiplicative → primary (("*" | "/" | "%") primary)*
    primary        → "!" primary
                   | NUMBER | STRING | BOOLEAN
                   | VARIABLE ("[" expr "]")?
                   | IDENTIFIER "(" (expr ("," expr)*)? ")"
                   | "(" expr ")"

``!`` binds to a single primary, so ``!a && b`` is ``(!a) && b`` and
``!1 + 2`` negates only ``1``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from expreval.config import DEFAULT_OPTIONS, EvaluatorOptions
from expreval.errors import MissingOperandError, ParseError, make_parse_error
from expreval.expressions import (
    ArrayAccess,
    BinaryExpr,
    Expr,
    FuncCall,
    Literal,
    Operator,
    Precedence,
    UnaryExpr,
    Variable,
)
from expreval.tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


class _Parser:
    """Recursive descent parser for expressions.

    The cursor only moves forward.
    """

    def __init__(self, tokens: Sequence[Token], source: str | None = None) -> None:
        self.tokens = tokens
        self.source = source
        self.pos = 0

    def peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise MissingOperandError("Unexpected end of expression")
        self.pos += 1
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.advance()
        if tok.kind != kind:
            raise self.error(f"Expected {kind}, got {tok.text!r}", tok)
        return tok

    def check(self, kind: TokenKind) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind == kind

    def error(self, message: str, tok: Token) -> ParseError:
        return make_parse_error(message, self.source, tok.pos)

    def _fold(self, operand: Callable[[], Expr], tier: Precedence) -> Expr:
        """Left-associative fold of ``operand`` over operators of one tier."""
        left = operand()
        while True:
            tok = self.peek()
            if tok is None or tok.kind != TokenKind.OPERATOR or tok.value.precedence != tier:
                return left
            self.advance()
            right = operand()
            left = BinaryExpr(left=left, op=tok.value, right=right)

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        return self.parse_or()

    def parse_or(self) -> Expr:
        """and_expr ("||" and_expr)*"""
        return self._fold(self.parse_and, Precedence.LOGICAL_OR)

    def parse_and(self) -> Expr:
        """equality ("&&" equality)*"""
        return self._fold(self.parse_equality, Precedence.LOGICAL_AND)

    def parse_equality(self) -> Expr:
        return self._fold(self.parse_comparison, Precedence.EQUALITY)

    def parse_comparison(self) -> Expr:
        return self._fold(self.parse_bitwise_or, Precedence.COMPARISON)

    def parse_bitwise_or(self) -> Expr:
        return self._fold(self.parse_bitwise_and, Precedence.BITWISE_OR)

    def parse_bitwise_and(self) -> Expr:
        return self._fold(self.parse_additive, Precedence.BITWISE_AND)

    def parse_additive(self) -> Expr:
        return self._fold(self.parse_multiplicative, Precedence.ADDITIVE)

    def parse_multiplicative(self) -> Expr:
        return self._fold(self.parse_primary, Precedence.MULTIPLICATIVE)

    def parse_primary(self) -> Expr:
        """'!' primary | literal | variable | array access | call | '(' expr ')'"""
        tok = self.advance()

        if tok.kind == TokenKind.OPERATOR and tok.value == Operator.NOT:
            operand = self.parse_primary()
            return UnaryExpr(op=Operator.NOT, operand=operand)

        if tok.kind in (TokenKind.NUMBER, TokenKind.STRING, TokenKind.BOOLEAN):
            return Literal(value=tok.value)

        if tok.kind == TokenKind.VARIABLE:
            if self.check(TokenKind.LBRACKET):
                self.advance()
                index = self.parse_expr()
                self.expect(TokenKind.RBRACKET)
                return ArrayAccess(variable=tok.value, index=index)
            return Variable(name=tok.value)

        if tok.kind == TokenKind.IDENTIFIER:
            if not self.check(TokenKind.LPAREN):
                raise self.error(f"Unexpected identifier: {tok.value}", tok)
            return self._parse_func_call(tok)

        if tok.kind == TokenKind.LPAREN:
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN)
            return expr

        raise self.error(f"Unexpected token: {tok.text!r}", tok)

    def _parse_func_call(self, name_tok: Token) -> FuncCall:
        """IDENTIFIER '(' (expr (',' expr)*)? ')'"""
        self.expect(TokenKind.LPAREN)

        args: list[Expr] = []
        if self.check(TokenKind.RPAREN):
            self.advance()
            return FuncCall(name=name_tok.value, args=args)

        while True:
            args.append(self.parse_expr())
            tok = self.advance()
            if tok.kind == TokenKind.RPAREN:
                return FuncCall(name=name_tok.value, args=args)
            if tok.kind != TokenKind.COMMA:
                raise self.error(f"Expected ',' or ')' in call to {name_tok.value}", tok)


def parse(
    tokens: Sequence[Token],
    source: str | None = None,
    options: EvaluatorOptions | None = None,
) -> Expr:
    """Parse a token sequence into an AST.

    Args:
        tokens: Output of ``tokenize``.
        source: Expression text, used only to locate errors.
        options: Parsing options; trailing tokens are rejected by default.

    Raises:
        ParseError: If the grammar is violated or ``tokens`` is empty.
        MissingOperandError: If the tokens run out mid-expression.
    """
    options = options or DEFAULT_OPTIONS
    if not tokens:
        raise make_parse_error("Empty expression", source, 0)

    parser = _Parser(tokens, source)
    expr = parser.parse_expr()

    trailing = parser.peek()
    if trailing is not None:
        if not options.allow_trailing_tokens:
            raise parser.error(f"Unexpected token after expression: {trailing.text!r}", trailing)
        logger.debug("Ignoring %d trailing token(s)", len(tokens) - parser.pos)

    return expr


def parse_expr(source: str, options: EvaluatorOptions | None = None) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "#price * (1 + #vat)")

    Returns:
        Parsed expression AST.

    Raises:
        ParseError: If the expression is invalid.
        MissingOperandError: If the expression ends early.
    """
    expr = parse(tokenize(source), source, options)
    logger.debug("Parsed %r into %s", source, expr)
    return expr
