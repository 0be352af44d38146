"""
Error types raised while tokenizing, parsing and evaluating expressions.

Every failure aborts the whole call. Errors compare equal when they have the
same type and message, which keeps assertions in tests short:

    with pytest.raises(InvalidOperationError) as exc:
        evaluate("5 / 0")
    assert exc.value == InvalidOperationError("Division by zero")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expreval.arguments import Arity


class ExpressionError(Exception):
    """Base exception for all expression engine errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExpressionError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ParseError(ExpressionError):
    """
    Raised when an expression cannot be tokenized or parsed.

    Examples:
    - Unexpected characters
    - Unterminated string literals
    - Unbalanced parentheses or brackets
    - Tokens left over after a complete expression
    """


class MissingOperandError(ExpressionError):
    """Raised when the token stream ends while a token is still required."""


class VariableNotFoundError(ExpressionError):
    """Raised by the default variable resolver for every name."""


class FunctionNotFoundError(ExpressionError):
    """Raised when no function resolver knows the called name."""


class TypeMismatchError(ExpressionError):
    """
    Raised when a value lacks the capability an operation needs.

    Examples:
    - ``10.5 & 3`` (non-integral operand for a bitwise operator)
    - ``true + false`` (no numeric or string capability)
    - requesting an integer result from ``1.5``
    """


class InvalidOperationError(ExpressionError):
    """
    Raised when an operation is well-typed but cannot be performed.

    Examples:
    - Division or modulo by zero
    - Array index out of bounds
    - Comparison the comparator resolver does not support
    """


class InvalidArityError(ExpressionError):
    """Raised when a function receives the wrong number of arguments."""

    def __init__(self, arity: Arity, context: ErrorContext | None = None):
        self.arity = arity
        super().__init__(f"Invalid number of arguments: expected {arity}", context)


@dataclass(frozen=True)
class ErrorContext:
    """
    Location of an error inside the expression source.

    Attributes:
        source: The full expression text
        pos: 0-based character offset of the offending token
    """

    source: str
    pos: int

    @property
    def line(self) -> int:
        """1-indexed line of ``pos``."""
        return self.source.count("\n", 0, self.pos) + 1

    @property
    def column(self) -> int:
        """1-indexed column of ``pos``."""
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        return self.pos - line_start + 1

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Location line followed by the source line and a caret marker.
        """
        return f"line {self.line}, column {self.column}\n{self._format_snippet()}"

    def _format_snippet(self) -> str:
        """Format the offending source line with an error marker."""
        lines = self.source.split("\n")
        text = lines[self.line - 1] if self.line <= len(lines) else ""
        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^"
        return f"{prefix}{text}\n{marker}"


def make_parse_error(message: str, source: str | None, pos: int) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        source: Expression text, or None when only tokens are available
        pos: 0-based offset of the error

    Returns:
        ParseError with context attached when the source is known
    """
    if source is None:
        return ParseError(message)
    return ParseError(message, ErrorContext(source=source, pos=pos))
