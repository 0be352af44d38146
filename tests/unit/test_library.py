"""Tests for the default math function library."""

from __future__ import annotations

import math
from typing import Any

import pytest

from expreval import (
    FunctionNotFoundError,
    InvalidArityError,
    TypeMismatchError,
    evaluate,
)
from expreval.arguments import Arity
from expreval.library import LIBRARY_FUNCTION_NAMES, chain_functions, library_functions


def run(expression: str) -> Any:
    return evaluate(expression, functions=library_functions)


class TestLibraryFunctions:
    def test_names(self) -> None:
        assert LIBRARY_FUNCTION_NAMES == {
            "sqrt", "floor", "ceil", "round", "cos", "acos", "sin", "asin",
            "tan", "atan", "abs", "log", "pow", "atan2", "max", "min",
        }  # fmt: skip

    def test_sqrt(self) -> None:
        assert run("sqrt(4)") == 2.0
        assert run("sqrt(2)") == math.sqrt(2.0)
        assert math.isnan(run("sqrt(-1)"))

    def test_floor_ceil(self) -> None:
        assert run("floor(4.8)") == 4.0
        assert run("floor(-3.2)") == -4.0
        assert run("ceil(4.2)") == 5.0
        assert run("ceil(-3.8)") == -3.0
        assert isinstance(run("floor(1.5)"), float)

    def test_round_half_away_from_zero(self) -> None:
        assert run("round(4.4)") == 4.0
        assert run("round(4.6)") == 5.0
        assert run("round(2.5)") == 3.0
        assert run("round(-3.5)") == -4.0

    def test_round_near_half_and_large_values(self) -> None:
        assert run("round(0.49999999999999994)") == 0.0
        assert run("round(-0.49999999999999994)") == 0.0
        assert run("round(4503599627370497)") == 4503599627370497.0
        assert run("round(-4503599627370497)") == -4503599627370497.0

    def test_trigonometry(self) -> None:
        assert run("cos(0)") == 1.0
        assert run("cos(3.14159265358979)") == pytest.approx(math.cos(math.pi), abs=1e-10)
        assert run("sin(3.14159265358979/2)") == pytest.approx(1.0, abs=1e-10)
        assert run("tan(3.14159265358979/4)") == pytest.approx(1.0, abs=1e-10)
        assert run("acos(1)") == 0.0
        assert run("asin(0)") == 0.0
        assert run("atan(1)") == pytest.approx(math.atan(1.0), abs=1e-10)
        assert math.isnan(run("acos(2)"))
        assert math.isnan(run("asin(2)"))

    def test_atan2(self) -> None:
        assert run("atan2(1, 1)") == pytest.approx(math.atan2(1.0, 1.0), abs=1e-10)
        assert run("atan2(0, 1)") == 0.0

    def test_abs(self) -> None:
        assert run("abs(-5)") == 5.0
        assert run("abs(5)") == 5.0

    def test_log(self) -> None:
        assert run("log(1)") == 0.0
        assert run("log(2.718281828459)") == pytest.approx(math.log(2.718281828459), abs=1e-10)
        assert math.isnan(run("log(-1)"))
        assert run("log(0)") == -math.inf

    def test_pow(self) -> None:
        assert run("pow(2, 3)") == 8.0
        assert run("pow(4, 0.5)") == 2.0
        assert run("pow(10, 400)") == math.inf
        assert run("pow(0, -1)") == math.inf

    def test_pow_overflow_keeps_sign(self) -> None:
        assert run("pow(-10, 309)") == -math.inf
        assert run("pow(-10, 310)") == math.inf
        assert math.isnan(run("pow(-10, 309.5)"))
        assert run("pow(-0.1, -309)") == -math.inf

    def test_max_min(self) -> None:
        assert run("max(5, 10, 3, -1, 4)") == 10.0
        assert run("max(7, 7)") == 7.0
        assert run("max(-1, -10)") == -1.0
        assert run("min(5, 10, 3, -1, 4)") == -1.0
        assert run("min(7, 7)") == 7.0
        assert run("min(-1, -10)") == -10.0

    def test_min_requires_two_arguments(self) -> None:
        with pytest.raises(InvalidArityError) as exc:
            run("min(7)")
        assert exc.value == InvalidArityError(Arity.at_least(2))

    def test_unary_arity(self) -> None:
        with pytest.raises(InvalidArityError):
            run("sqrt()")
        with pytest.raises(InvalidArityError):
            run("sqrt(1, 2)")

    def test_binary_arity(self) -> None:
        with pytest.raises(InvalidArityError) as exc:
            run("pow(2)")
        assert exc.value.arity == Arity.exactly(2)

    def test_arguments_must_be_numeric(self) -> None:
        with pytest.raises(TypeMismatchError):
            run("sqrt('4')")

    def test_unknown_function(self) -> None:
        with pytest.raises(FunctionNotFoundError) as exc:
            run("median(1, 2)")
        assert exc.value == FunctionNotFoundError("median")

    def test_combined_with_operators(self) -> None:
        assert run("max(1, 2) * 3 + sqrt(16)") == 10.0


class TestChainFunctions:
    def test_host_function_overrides_library(self) -> None:
        def host(name: str, args: list[Any]) -> Any:
            if name == "sqrt":
                return "Overridden sqrt function!"
            raise FunctionNotFoundError(name)

        functions = chain_functions(host, library_functions)
        assert evaluate("sqrt(4)", functions=functions) == "Overridden sqrt function!"
        assert evaluate("abs(-2)", functions=functions) == 2.0

    def test_unknown_everywhere(self) -> None:
        functions = chain_functions(library_functions)
        with pytest.raises(FunctionNotFoundError):
            evaluate("nope()", functions=functions)

    def test_other_errors_propagate(self) -> None:
        calls: list[str] = []

        def fallback(name: str, args: list[Any]) -> Any:
            calls.append(name)
            return 0.0

        functions = chain_functions(library_functions, fallback)
        with pytest.raises(InvalidArityError):
            evaluate("min(1)", functions=functions)
        assert calls == []

    def test_nested_lookup_failure_is_not_swallowed(self) -> None:
        def host(name: str, args: list[Any]) -> Any:
            if name == "outer":
                raise FunctionNotFoundError("inner")
            raise FunctionNotFoundError(name)

        functions = chain_functions(host, library_functions)
        with pytest.raises(FunctionNotFoundError) as exc:
            evaluate("outer()", functions=functions)
        assert exc.value == FunctionNotFoundError("inner")
