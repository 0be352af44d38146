"""
Final coercion of an evaluated value to the type the caller asked for.
"""

from __future__ import annotations

import math
import struct
from enum import StrEnum
from typing import Any

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
from expreval.errors import TypeMismatchError


class ResultType(StrEnum):
    """Result types ``evaluate`` can coerce to."""

    ANY = "any"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    STR = "str"


# Inclusive bounds; None means unbounded
_INTEGER_BOUNDS: dict[ResultType, tuple[int | None, int | None]] = {
    ResultType.INT: (None, None),
    ResultType.INT8: (-(2**7), 2**7 - 1),
    ResultType.INT16: (-(2**15), 2**15 - 1),
    ResultType.INT32: (-(2**31), 2**31 - 1),
    ResultType.INT64: (-(2**63), 2**63 - 1),
    ResultType.UINT: (0, None),
    ResultType.UINT8: (0, 2**8 - 1),
    ResultType.UINT16: (0, 2**16 - 1),
    ResultType.UINT32: (0, 2**32 - 1),
    ResultType.UINT64: (0, 2**64 - 1),
}

_FLOAT_TYPES = frozenset({ResultType.FLOAT, ResultType.FLOAT32, ResultType.FLOAT64})

_PYTHON_TYPES: dict[type, ResultType] = {
    object: ResultType.ANY,
    int: ResultType.INT,
    float: ResultType.FLOAT64,
    bool: ResultType.BOOL,
    str: ResultType.STR,
}


def _native_result_type(value: Any) -> ResultType | None:
    # Exact types only: bool must not look like int
    if type(value) is bool:
        return ResultType.BOOL
    if type(value) is int:
        return ResultType.INT
    if type(value) is float:
        return ResultType.FLOAT64
    if type(value) is str:
        return ResultType.STR
    return None


def coerce(value: Any, result_type: ResultType | type = ResultType.ANY) -> Any:
    """Convert ``value`` to ``result_type``.

    ``result_type`` is a ``ResultType`` or a Python class. ``int``, ``float``,
    ``bool``, ``str`` and ``object`` map onto ``ResultType`` members; any
    other class is checked with ``isinstance`` and never converted.

    Raises:
        TypeMismatchError: If the value has no capability for the requested
            type or does not fit a fixed-width integer.
    """
    if isinstance(result_type, type):
        if result_type not in _PYTHON_TYPES:
            if isinstance(value, result_type):
                return value
            raise _mismatch(result_type.__name__, value)
        result_type = _PYTHON_TYPES[result_type]
    else:
        result_type = ResultType(result_type)

    if result_type == ResultType.ANY or _native_result_type(value) == result_type:
        return value

    if result_type in _INTEGER_BOUNDS and supports_int(value):
        return _checked_int(to_int(value), result_type)
    if result_type in _FLOAT_TYPES and supports_double(value):
        number = to_double(value)
        return _to_float32(number) if result_type == ResultType.FLOAT32 else number
    if result_type == ResultType.BOOL and supports_bool(value):
        return to_bool(value)
    if result_type == ResultType.STR and supports_string(value):
        return to_string(value)

    raise _mismatch(result_type.value, value)


def _checked_int(number: int, result_type: ResultType) -> int:
    low, high = _INTEGER_BOUNDS[result_type]
    if (low is not None and number < low) or (high is not None and number > high):
        raise TypeMismatchError(f"Value {number} does not fit in {result_type.value}")
    return number


def _to_float32(number: float) -> float:
    """Round to the nearest IEEE single-precision value."""
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def _mismatch(expected: str, value: Any) -> TypeMismatchError:
    return TypeMismatchError(f"Expected return type {expected} instead of {type(value).__name__}")
