"""
Conversion capabilities for runtime values.

A value takes part in numeric, string or boolean contexts only through four
optional capabilities. Native ``int``, ``float``, ``str`` and ``bool`` carry
a fixed subset; host objects opt in by implementing any of the protocols:

    class Money:
        def __init__(self, cents: int) -> None:
            self.cents = cents

        def convert_to_double(self) -> float:
            return self.cents / 100

With that, ``$price * 2`` works while ``$price & 1`` is a type mismatch.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from expreval.errors import TypeMismatchError
from expreval.expressions import format_number

# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class DoubleConvertible(Protocol):
    """Value usable in arithmetic and numeric comparisons."""

    def convert_to_double(self) -> float: ...


@runtime_checkable
class IntConvertible(Protocol):
    """Value usable as a bitwise operand or array index."""

    def convert_to_int(self) -> int: ...


@runtime_checkable
class StringConvertible(Protocol):
    """Value usable in string concatenation."""

    def convert_to_string(self) -> str: ...


@runtime_checkable
class BoolConvertible(Protocol):
    """Value usable with !, && and ||."""

    def convert_to_bool(self) -> bool: ...


# =============================================================================
# Probes
# =============================================================================


def _is_native_number(value: Any) -> bool:
    # bool is an int subclass but only carries the bool capability
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def supports_double(value: Any) -> bool:
    return _is_native_number(value) or isinstance(value, DoubleConvertible)


def supports_int(value: Any) -> bool:
    return _is_native_number(value) or isinstance(value, IntConvertible)


def supports_string(value: Any) -> bool:
    return isinstance(value, str) or _is_native_number(value) or isinstance(value, StringConvertible)


def supports_bool(value: Any) -> bool:
    return isinstance(value, bool) or isinstance(value, BoolConvertible)


# =============================================================================
# Conversions
# =============================================================================


def to_double(value: Any) -> float:
    """Convert through the to-double capability."""
    if _is_native_number(value):
        return _as_float(value)
    if isinstance(value, DoubleConvertible):
        return _as_float(value.convert_to_double())
    raise TypeMismatchError(f"Non numeric value: {value!r}")


def _as_float(number: Any) -> float:
    # ints beyond the double range
    try:
        return float(number)
    except OverflowError:
        raise TypeMismatchError("Integer value is too large for a double") from None


def to_int(value: Any) -> int:
    """Convert through the to-int capability.

    Doubles convert only when they have no fractional part.
    """
    if isinstance(value, float):
        if not value.is_integer():
            raise TypeMismatchError("Double value has decimals")
        return int(value)
    if _is_native_number(value):
        return int(value)
    if isinstance(value, IntConvertible):
        return value.convert_to_int()
    raise TypeMismatchError(f"Non integer value: {value!r}")


def to_string(value: Any) -> str:
    """Convert through the to-string capability."""
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return format_number(value)
    if _is_native_number(value):
        return str(value)
    if isinstance(value, StringConvertible):
        return value.convert_to_string()
    raise TypeMismatchError(f"Non string value: {value!r}")


def to_bool(value: Any) -> bool:
    """Convert through the to-bool capability."""
    if isinstance(value, bool):
        return value
    if isinstance(value, BoolConvertible):
        return value.convert_to_bool()
    raise TypeMismatchError(f"Non boolean value: {value!r}")
