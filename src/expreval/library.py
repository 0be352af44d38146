"""
Default math function library.

Opt-in: pass ``library_functions`` as the function resolver, or combine it
with host functions through ``chain_functions``:

    evaluate("max(#a, sqrt(#b))", variables, library_functions)
    evaluate("tax(#a) + abs(#b)", variables, chain_functions(host, library_functions))

Every function converts its arguments through the to-double capability and
returns a float. Results follow IEEE semantics where Python's ``math`` would
raise: domain errors give NaN and overflow gives infinity.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any

from expreval.arguments import ArgumentsHelper, Arity
from expreval.errors import FunctionNotFoundError


def _ieee(fn: Callable[..., float]) -> Callable[..., float]:
    def wrapper(*args: float) -> float:
        try:
            return float(fn(*args))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    return wrapper


def _rounding(fn: Callable[[float], float]) -> Callable[[float], float]:
    # math.floor and friends return int and reject nan/inf
    def wrapper(x: float) -> float:
        return float(fn(x)) if math.isfinite(x) else x

    return wrapper


def _round_half_away(x: float) -> float:
    # abs(x) - floor(abs(x)) is exact, x + 0.5 is not
    magnitude = abs(x)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(whole, x)


def _log(x: float) -> float:
    if x == 0:
        return -math.inf
    return math.log(x)


def _is_odd_integer(y: float) -> bool:
    return y.is_integer() and y % 2 == 1


def _pow(x: float, y: float) -> float:
    if x == 0 and y < 0:
        return math.copysign(math.inf, x) if _is_odd_integer(y) else math.inf
    try:
        return math.pow(x, y)
    except OverflowError:
        # A negative base keeps its sign only under an odd exponent
        return -math.inf if x < 0 and _is_odd_integer(y) else math.inf


_UNARY: dict[str, Callable[[float], float]] = {
    "sqrt": _ieee(math.sqrt),
    "floor": _rounding(math.floor),
    "ceil": _rounding(math.ceil),
    "round": _rounding(_round_half_away),
    "cos": _ieee(math.cos),
    "acos": _ieee(math.acos),
    "sin": _ieee(math.sin),
    "asin": _ieee(math.asin),
    "tan": _ieee(math.tan),
    "atan": _ieee(math.atan),
    "abs": math.fabs,
    "log": _ieee(_log),
}

_BINARY: dict[str, Callable[[float, float], float]] = {
    "pow": _ieee(_pow),
    "atan2": _ieee(math.atan2),
}

_VARIADIC: dict[str, Callable[..., float]] = {
    "max": max,
    "min": min,
}

LIBRARY_FUNCTION_NAMES = frozenset(_UNARY) | frozenset(_BINARY) | frozenset(_VARIADIC)


def library_functions(name: str, arguments: Sequence[Any]) -> float:
    """Function resolver for the built-in math functions."""
    args = ArgumentsHelper(arguments)

    if name in _UNARY:
        args.ensure_arity(Arity.exactly(1))
        return _UNARY[name](args.get_double(0))

    if name in _BINARY:
        args.ensure_arity(Arity.exactly(2))
        return _BINARY[name](args.get_double(0), args.get_double(1))

    if name in _VARIADIC:
        args.ensure_arity(Arity.at_least(2))
        return _VARIADIC[name](args.get_double(i) for i in range(len(args)))

    raise FunctionNotFoundError(name)


def chain_functions(*resolvers: Callable[[str, list[Any]], Any]) -> Callable[[str, list[Any]], Any]:
    """Combine function resolvers; earlier ones shadow later ones.

    A resolver that raises ``FunctionNotFoundError`` for the requested name
    hands over to the next one. Any other error propagates.
    """

    def resolve(name: str, args: list[Any]) -> Any:
        for resolver in resolvers:
            try:
                return resolver(name, args)
            except FunctionNotFoundError as e:
                if e.message != name:
                    raise
        raise FunctionNotFoundError(name)

    return resolve
