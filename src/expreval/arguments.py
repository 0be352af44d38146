"""
Typed access to the evaluated arguments of one function call.

Usage inside a function resolver:

    def functions(name: str, arguments: list[Any]) -> Any:
        args = ArgumentsHelper(arguments)
        if name == "clamp":
            args.ensure_arity(Arity.exactly(3))
            return min(max(args.get_double(0), args.get_double(1)), args.get_double(2))
        raise FunctionNotFoundError(name)
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

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
from expreval.errors import InvalidArityError, TypeMismatchError

T = TypeVar("T")


class ArityKind(StrEnum):
    """How an arity count is interpreted."""

    EXACTLY = "exactly"
    AT_LEAST = "at least"
    AT_MOST = "at most"


class Arity(BaseModel):
    """Constraint on the number of arguments a function accepts."""

    kind: ArityKind
    count: int = Field(ge=0, description="Argument count the constraint refers to")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def exactly(cls, count: int) -> Arity:
        return cls(kind=ArityKind.EXACTLY, count=count)

    @classmethod
    def at_least(cls, count: int) -> Arity:
        return cls(kind=ArityKind.AT_LEAST, count=count)

    @classmethod
    def at_most(cls, count: int) -> Arity:
        return cls(kind=ArityKind.AT_MOST, count=count)

    def is_satisfied_by(self, count: int) -> bool:
        if self.kind == ArityKind.EXACTLY:
            return count == self.count
        if self.kind == ArityKind.AT_LEAST:
            return count >= self.count
        return count <= self.count

    def __str__(self) -> str:
        noun = "argument" if self.count == 1 else "arguments"
        return f"{self.kind.value} {self.count} {noun}"


class ArgumentsHelper:
    """Wraps a call's evaluated arguments with arity checks and conversions."""

    def __init__(self, args: Sequence[Any]) -> None:
        self._args = list(args)

    def __len__(self) -> int:
        return len(self._args)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._args)

    def ensure_arity(self, arity: Arity) -> None:
        """Raise InvalidArityError unless the argument count satisfies ``arity``."""
        if not arity.is_satisfied_by(len(self._args)):
            raise InvalidArityError(arity)

    def _at(self, index: int) -> Any:
        if index < 0:
            raise TypeMismatchError(f"Invalid argument index: {index}")
        self.ensure_arity(Arity.at_least(index + 1))
        return self._args[index]

    def get_double(self, index: int) -> float:
        arg = self._at(index)
        if not supports_double(arg):
            raise TypeMismatchError("Expected double convertible argument")
        return to_double(arg)

    def get_int(self, index: int) -> int:
        arg = self._at(index)
        if not supports_int(arg):
            raise TypeMismatchError("Expected int convertible argument")
        return to_int(arg)

    def get_string(self, index: int) -> str:
        arg = self._at(index)
        if not supports_string(arg):
            raise TypeMismatchError("Expected string convertible argument")
        return to_string(arg)

    def get_bool(self, index: int) -> bool:
        arg = self._at(index)
        if not supports_bool(arg):
            raise TypeMismatchError("Expected boolean convertible argument")
        return to_bool(arg)

    def get(self, index: int, as_type: type[T]) -> T:
        """Return the argument unconverted, checking only that it is an ``as_type``.

        Intended for host-defined types that have no conversion capability.
        """
        arg = self._at(index)
        if isinstance(arg, bool) and as_type in (int, float):
            raise TypeMismatchError(f"Expected argument of type {as_type.__name__}")
        if not isinstance(arg, as_type):
            raise TypeMismatchError(f"Expected argument of type {as_type.__name__}")
        return arg
