"""
Expression evaluator.

Walks an expression AST and resolves variables, functions and custom
comparisons through caller-supplied callbacks. Does NOT use Python's eval().
Resolvers are referenced only for the duration of one call; nothing is
cached between calls.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from expreval.capabilities import (
    supports_bool,
    supports_double,
    supports_int,
    supports_string,
    to_bool,
    to_double,
    to_int,
    to_string,
)
from expreval.coercion import ResultType, coerce
from expreval.config import EvaluatorOptions
from expreval.errors import (
    FunctionNotFoundError,
    InvalidOperationError,
    TypeMismatchError,
    VariableNotFoundError,
)
from expreval.expressions import (
    ArrayAccess,
    BinaryExpr,
    ComparisonOperator,
    Expr,
    FuncCall,
    Literal,
    Operator,
    UnaryExpr,
    Variable,
)
from expreval.parser import parse_expr

logger = logging.getLogger(__name__)

VariableResolver = Callable[[str], Any]
FunctionResolver = Callable[[str, list[Any]], Any]
ComparatorResolver = Callable[[Any, Any, ComparisonOperator], bool]


def default_variables(name: str) -> Any:
    raise VariableNotFoundError(name)


def default_functions(name: str, args: list[Any]) -> Any:
    raise FunctionNotFoundError(name)


def default_comparator(lhs: Any, rhs: Any, op: ComparisonOperator) -> bool:
    raise InvalidOperationError(
        f"Comparison impossible for type {type(lhs).__name__} and {type(rhs).__name__}"
    )


class _Resolvers(NamedTuple):
    variables: VariableResolver
    functions: FunctionResolver
    comparator: ComparatorResolver


def evaluate(
    expression: str,
    variables: VariableResolver | None = None,
    functions: FunctionResolver | None = None,
    comparator: ComparatorResolver | None = None,
    *,
    result_type: ResultType | type = ResultType.ANY,
    options: EvaluatorOptions | None = None,
) -> Any:
    """Parse and evaluate an expression string.

    Args:
        expression: Expression source, e.g. ``"#a + max($b, 3) > 10"``.
        variables: Resolves ``#name``/``$name`` (prefix included).
        functions: Resolves ``name(args...)`` with evaluated arguments.
        comparator: Compares operands the built-in rules cannot.
        result_type: Type to coerce the result to; ``ANY`` returns it as-is.
        options: Parsing options.

    Returns:
        The evaluated value, coerced to ``result_type``.

    Raises:
        ExpressionError: Any engine failure (parse, type, arity, ...).
            Exceptions raised by the resolvers propagate unchanged.
    """
    expr = parse_expr(expression, options)
    value = evaluate_expr(expr, variables, functions, comparator)
    result = coerce(value, result_type)
    logger.debug("Evaluated %r -> %r", expression, result)
    return result


def evaluate_expr(
    expr: Expr,
    variables: VariableResolver | None = None,
    functions: FunctionResolver | None = None,
    comparator: ComparatorResolver | None = None,
) -> Any:
    """Evaluate an already-parsed AST and return its dynamic value."""
    resolvers = _Resolvers(
        variables=variables or default_variables,
        functions=functions or default_functions,
        comparator=comparator or default_comparator,
    )
    return _interpret(expr, resolvers)


def _interpret(expr: Expr, res: _Resolvers) -> Any:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, Variable):
        return res.variables(expr.name)

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, res)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, res)

    if isinstance(expr, FuncCall):
        # Arguments are always evaluated, left to right
        args = [_interpret(a, res) for a in expr.args]
        return res.functions(expr.name, args)

    if isinstance(expr, ArrayAccess):
        return _interpret_array_access(expr, res)

    raise InvalidOperationError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_array_access(expr: ArrayAccess, res: _Resolvers) -> Any:
    array = res.variables(expr.variable)
    if not isinstance(array, Sequence) or isinstance(array, (str, bytes, bytearray)):
        raise TypeMismatchError(f"{expr.variable} is not an array")

    index_value = _interpret(expr.index, res)
    if not supports_int(index_value):
        raise TypeMismatchError("Array index must be Int")
    index = to_int(index_value)

    if not 0 <= index < len(array):
        raise InvalidOperationError(f"Index {index} out of bounds")
    return array[index]


def _interpret_unary(expr: UnaryExpr, res: _Resolvers) -> Any:
    value = _interpret(expr.operand, res)
    if expr.op == Operator.NOT:
        if not supports_bool(value):
            raise TypeMismatchError("Operand must be Bool for NOT operator")
        return not to_bool(value)
    raise InvalidOperationError(f"Unsupported unary operator: {expr.op.value}")


def _logical_operand(expr: Expr, res: _Resolvers, side: str, op: Operator) -> bool:
    value = _interpret(expr, res)
    if not supports_bool(value):
        raise TypeMismatchError(f"{side} operand of {op.value} must be Bool")
    return to_bool(value)


def _interpret_binary(expr: BinaryExpr, res: _Resolvers) -> Any:
    """Evaluate a binary expression."""
    # Short-circuit: the right side is not evaluated once the result is known
    if expr.op == Operator.AND:
        if not _logical_operand(expr.left, res, "Left", expr.op):
            return False
        return _logical_operand(expr.right, res, "Right", expr.op)

    if expr.op == Operator.OR:
        if _logical_operand(expr.left, res, "Left", expr.op):
            return True
        return _logical_operand(expr.right, res, "Right", expr.op)

    left = _interpret(expr.left, res)
    right = _interpret(expr.right, res)
    return _apply(expr.op, left, right, res.comparator)


_COMPARISONS: dict[Operator, ComparisonOperator] = {
    Operator.EQUAL: ComparisonOperator.EQUAL,
    Operator.GREATER_THAN: ComparisonOperator.GREATER_THAN,
    Operator.GREATER_THAN_OR_EQUAL: ComparisonOperator.GREATER_THAN_OR_EQUAL,
    Operator.LESS_THAN: ComparisonOperator.LESS_THAN,
    Operator.LESS_THAN_OR_EQUAL: ComparisonOperator.LESS_THAN_OR_EQUAL,
}


def _apply(op: Operator, left: Any, right: Any, comparator: ComparatorResolver) -> Any:
    if op == Operator.PLUS:
        return _add(left, right)

    # Arithmetic
    if op == Operator.MINUS:
        return to_double(left) - to_double(right)
    if op == Operator.MULTIPLY:
        return to_double(left) * to_double(right)
    if op == Operator.DIVIDE:
        dividend, divisor = to_double(left), to_double(right)
        if divisor == 0:
            raise InvalidOperationError("Division by zero")
        return dividend / divisor
    if op == Operator.MODULO:
        dividend, divisor = to_double(left), to_double(right)
        if divisor == 0:
            raise InvalidOperationError("Modulo by zero")
        return math.fmod(dividend, divisor)

    # Bitwise
    if op == Operator.BITWISE_AND:
        return to_int(left) & to_int(right)
    if op == Operator.BITWISE_OR:
        return to_int(left) | to_int(right)

    # Comparison
    if op == Operator.NOT_EQUAL:
        return not _compare(left, right, ComparisonOperator.EQUAL, comparator)
    if op in _COMPARISONS:
        return _compare(left, right, _COMPARISONS[op], comparator)

    raise InvalidOperationError(f"Unsupported operator: {op.value}")


def _add(left: Any, right: Any) -> Any:
    """Numeric addition wins over string concatenation."""
    if supports_double(left) and supports_double(right):
        return to_double(left) + to_double(right)
    if supports_string(left) and supports_string(right):
        return to_string(left) + to_string(right)
    if type(left) is not type(right):
        raise TypeMismatchError("Incompatible operands for concatenation")
    raise TypeMismatchError("Operands must be numeric or string")


def _compare(
    left: Any, right: Any, op: ComparisonOperator, comparator: ComparatorResolver
) -> bool:
    if supports_double(left) and supports_double(right):
        return op.compare(to_double(left), to_double(right))
    if isinstance(left, str) and isinstance(right, str):
        return op.compare(left, right)
    if isinstance(left, bool) and isinstance(right, bool) and op == ComparisonOperator.EQUAL:
        return left == right
    return comparator(left, right, op)
