"""
Expression AST and operator definitions.

Supports:
- Arithmetic: +, -, *, /, %
- Bitwise: &, |
- Comparison: ==, !=, <, >, <=, >=
- Logic: &&, ||, !
- Variables: #name, $name, $a.b.c
- Array indexing: $items[0]
- Function calls: max(#a, #b, 3)
- Literals: 42, -1.5, 'text', true, false
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Precedence(IntEnum):
    """Binding tiers, lowest to highest."""

    LOGICAL_OR = 1
    LOGICAL_AND = 2
    EQUALITY = 3
    COMPARISON = 4
    BITWISE_OR = 5
    BITWISE_AND = 6
    ADDITIVE = 7
    MULTIPLICATIVE = 8
    UNARY = 9


class Operator(StrEnum):
    """Every operator the tokenizer recognises, keyed by its spelling."""

    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    EQUAL = "=="
    NOT_EQUAL = "!="
    OR = "||"
    AND = "&&"
    BITWISE_OR = "|"
    BITWISE_AND = "&"
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    NOT = "!"

    @property
    def precedence(self) -> Precedence:
        return _PRECEDENCE[self]


_PRECEDENCE: dict[Operator, Precedence] = {
    Operator.OR: Precedence.LOGICAL_OR,
    Operator.AND: Precedence.LOGICAL_AND,
    Operator.EQUAL: Precedence.EQUALITY,
    Operator.NOT_EQUAL: Precedence.EQUALITY,
    Operator.GREATER_THAN: Precedence.COMPARISON,
    Operator.GREATER_THAN_OR_EQUAL: Precedence.COMPARISON,
    Operator.LESS_THAN: Precedence.COMPARISON,
    Operator.LESS_THAN_OR_EQUAL: Precedence.COMPARISON,
    Operator.BITWISE_OR: Precedence.BITWISE_OR,
    Operator.BITWISE_AND: Precedence.BITWISE_AND,
    Operator.PLUS: Precedence.ADDITIVE,
    Operator.MINUS: Precedence.ADDITIVE,
    Operator.MULTIPLY: Precedence.MULTIPLICATIVE,
    Operator.DIVIDE: Precedence.MULTIPLICATIVE,
    Operator.MODULO: Precedence.MULTIPLICATIVE,
    Operator.NOT: Precedence.UNARY,
}


class ComparisonOperator(StrEnum):
    """Comparison kinds handed to a comparator resolver.

    ``!=`` never reaches a comparator: it is evaluated as ``not EQUAL``.
    """

    EQUAL = "=="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="

    def compare(self, lhs: Any, rhs: Any) -> bool:
        return _COMPARE[self](lhs, rhs)


_COMPARE: dict[ComparisonOperator, Callable[[Any, Any], bool]] = {
    ComparisonOperator.EQUAL: operator.eq,
    ComparisonOperator.GREATER_THAN: operator.gt,
    ComparisonOperator.GREATER_THAN_OR_EQUAL: operator.ge,
    ComparisonOperator.LESS_THAN: operator.lt,
    ComparisonOperator.LESS_THAN_OR_EQUAL: operator.le,
}


def format_number(value: float) -> str:
    """Render a double without a trailing ``.0`` when it is integral."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A literal value fixed at parse time: number, string or boolean."""

    value: bool | float | str = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return f"'{self.value}'"
        return format_number(self.value)


class Variable(BaseModel):
    """
    Reference to a host variable.

    The name keeps its prefix character, e.g. ``#count`` or ``$user.name``.
    """

    name: str = Field(description="Variable name including '#' or '$'")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class ArrayAccess(BaseModel):
    """Indexing into a variable: ``$items[expr]``."""

    variable: str = Field(description="Variable name including '#' or '$'")
    index: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.variable}[{self.index}]"


class FuncCall(BaseModel):
    """Function call: name(arg1, arg2, ...)."""

    name: str = Field(description="Function name")
    args: list[Expr] = Field(default_factory=list, description="Arguments")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: Operator
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    left: Expr
    op: Operator
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | Variable | ArrayAccess | FuncCall | UnaryExpr | BinaryExpr

# Rebuild models for recursive forward references
ArrayAccess.model_rebuild()
FuncCall.model_rebuild()
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
