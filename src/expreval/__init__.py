"""
expreval - embeddable expression engine.

Tokenizer, parser and evaluator for a small expression language with
arithmetic, logical, comparison and bitwise operators, host variables,
function calls and array indexing.

Usage:
    from expreval import ResultType, evaluate

    def variables(name):
        return {"#price": 120, "$qty": 3}[name]

    total = evaluate("#price * $qty", variables, result_type=ResultType.INT)
    # total == 360
"""

from __future__ import annotations

from expreval._version import get_version
from expreval.arguments import ArgumentsHelper, Arity, ArityKind
from expreval.capabilities import (
    BoolConvertible,
    DoubleConvertible,
    IntConvertible,
    StringConvertible,
)
from expreval.coercion import ResultType, coerce
from expreval.config import EvaluatorOptions
from expreval.errors import (
    ErrorContext,
    ExpressionError,
    FunctionNotFoundError,
    InvalidArityError,
    InvalidOperationError,
    MissingOperandError,
    ParseError,
    TypeMismatchError,
    VariableNotFoundError,
)
from expreval.evaluator import (
    ComparatorResolver,
    FunctionResolver,
    VariableResolver,
    evaluate,
    evaluate_expr,
)
from expreval.expressions import ComparisonOperator, Expr, Operator
from expreval.library import chain_functions, library_functions
from expreval.parser import parse, parse_expr
from expreval.tokenizer import Token, TokenKind, tokenize

__version__ = get_version()

__all__ = [
    "__version__",
    # Entry points
    "evaluate",
    "evaluate_expr",
    "parse",
    "parse_expr",
    "tokenize",
    "coerce",
    # Resolvers and library
    "VariableResolver",
    "FunctionResolver",
    "ComparatorResolver",
    "library_functions",
    "chain_functions",
    "ArgumentsHelper",
    "Arity",
    "ArityKind",
    # Types
    "ComparisonOperator",
    "EvaluatorOptions",
    "Expr",
    "Operator",
    "ResultType",
    "Token",
    "TokenKind",
    # Capabilities
    "BoolConvertible",
    "DoubleConvertible",
    "IntConvertible",
    "StringConvertible",
    # Errors
    "ErrorContext",
    "ExpressionError",
    "FunctionNotFoundError",
    "InvalidArityError",
    "InvalidOperationError",
    "MissingOperandError",
    "ParseError",
    "TypeMismatchError",
    "VariableNotFoundError",
]
