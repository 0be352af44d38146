"""Tests for error types and source context."""

from __future__ import annotations

import pytest

from expreval import (
    ExpressionError,
    InvalidArityError,
    InvalidOperationError,
    MissingOperandError,
    ParseError,
    TypeMismatchError,
    evaluate,
)
from expreval.arguments import Arity
from expreval.errors import ErrorContext, make_parse_error


class TestErrorEquality:
    def test_same_type_and_message(self) -> None:
        assert InvalidOperationError("Division by zero") == InvalidOperationError("Division by zero")

    def test_different_message(self) -> None:
        assert InvalidOperationError("a") != InvalidOperationError("b")

    def test_different_type(self) -> None:
        assert TypeMismatchError("x") != InvalidOperationError("x")

    def test_context_is_ignored(self) -> None:
        with_context = ParseError("Bad", ErrorContext(source="1 @", pos=2))
        assert with_context == ParseError("Bad")

    def test_hashable(self) -> None:
        errors = {TypeMismatchError("x"), TypeMismatchError("x"), ParseError("x")}
        assert len(errors) == 2

    def test_repr(self) -> None:
        assert repr(MissingOperandError("gone")) == "MissingOperandError('gone')"

    def test_hierarchy(self) -> None:
        for cls in (ParseError, MissingOperandError, TypeMismatchError, InvalidOperationError):
            assert issubclass(cls, ExpressionError)

    def test_invalid_arity_message(self) -> None:
        error = InvalidArityError(Arity.exactly(1))
        assert error.message == "Invalid number of arguments: expected exactly 1 argument"
        assert error.arity == Arity.exactly(1)


class TestErrorContext:
    def test_line_and_column(self) -> None:
        ctx = ErrorContext(source="1 +\n  @", pos=6)
        assert ctx.line == 2
        assert ctx.column == 3

    def test_format(self) -> None:
        ctx = ErrorContext(source="1 +\n  @", pos=6)
        assert ctx.format() == "line 2, column 3\n   2 |   @\n         ^"

    def test_message_includes_context(self) -> None:
        error = make_parse_error("Unexpected character: '@'", "1 @", 2)
        assert error.context == ErrorContext(source="1 @", pos=2)
        assert str(error).startswith("line 1, column 3\n")
        assert str(error).endswith("Unexpected character: '@'")

    def test_without_source(self) -> None:
        error = make_parse_error("Empty expression", None, 0)
        assert error.context is None
        assert str(error) == "Empty expression"

    def test_evaluate_reports_position(self) -> None:
        with pytest.raises(ParseError) as exc:
            evaluate("1 + @")
        assert exc.value.context is not None
        assert exc.value.context.column == 5
