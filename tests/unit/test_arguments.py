"""Tests for ArgumentsHelper and Arity."""

from __future__ import annotations

import pytest

from expreval.arguments import ArgumentsHelper, Arity, ArityKind
from expreval.errors import InvalidArityError, TypeMismatchError


class Handle:
    """Opaque host type."""


class TestArity:
    def test_constructors(self) -> None:
        assert Arity.exactly(2) == Arity(kind=ArityKind.EXACTLY, count=2)
        assert Arity.at_least(1).kind == ArityKind.AT_LEAST
        assert Arity.at_most(3).count == 3

    @pytest.mark.parametrize(
        ("arity", "count", "expected"),
        [
            (Arity.exactly(2), 2, True),
            (Arity.exactly(2), 3, False),
            (Arity.at_least(2), 5, True),
            (Arity.at_least(2), 1, False),
            (Arity.at_most(1), 0, True),
            (Arity.at_most(1), 2, False),
        ],
    )
    def test_is_satisfied_by(self, arity: Arity, count: int, expected: bool) -> None:
        assert arity.is_satisfied_by(count) is expected

    def test_str(self) -> None:
        assert str(Arity.at_least(2)) == "at least 2 arguments"
        assert str(Arity.exactly(1)) == "exactly 1 argument"


class TestArgumentsHelper:
    def test_ensure_arity(self) -> None:
        args = ArgumentsHelper([1.0, 2.0])
        args.ensure_arity(Arity.exactly(2))
        args.ensure_arity(Arity.at_most(2))
        with pytest.raises(InvalidArityError) as exc:
            args.ensure_arity(Arity.at_least(3))
        assert exc.value.arity == Arity.at_least(3)
        assert exc.value == InvalidArityError(Arity.at_least(3))

    def test_len_and_iter(self) -> None:
        args = ArgumentsHelper(("a", 1))
        assert len(args) == 2
        assert list(args) == ["a", 1]

    def test_typed_getters(self) -> None:
        args = ArgumentsHelper([2.0, 7, "text", True])
        assert args.get_double(0) == 2.0
        assert args.get_double(1) == 7.0
        assert args.get_int(0) == 2
        assert args.get_string(1) == "7"
        assert args.get_string(2) == "text"
        assert args.get_bool(3) is True

    def test_missing_argument_is_arity_error(self) -> None:
        args = ArgumentsHelper([1.0])
        with pytest.raises(InvalidArityError) as exc:
            args.get_double(1)
        assert exc.value.arity == Arity.at_least(2)

    @pytest.mark.parametrize("index", [-1, -2])
    def test_negative_index(self, index: int) -> None:
        args = ArgumentsHelper([1.0, 2.0])
        with pytest.raises(TypeMismatchError, match="Invalid argument index"):
            args.get_double(index)
        with pytest.raises(TypeMismatchError, match="Invalid argument index"):
            args.get(index, float)

    def test_missing_capability(self) -> None:
        args = ArgumentsHelper(["text", 1.5])
        with pytest.raises(TypeMismatchError, match="Expected double convertible argument"):
            args.get_double(0)
        with pytest.raises(TypeMismatchError, match="Expected boolean convertible argument"):
            args.get_bool(0)
        with pytest.raises(TypeMismatchError, match="Double value has decimals"):
            args.get_int(1)

    def test_exact_type(self) -> None:
        handle = Handle()
        args = ArgumentsHelper([handle, True, 3])
        assert args.get(0, Handle) is handle
        assert args.get(2, int) == 3
        assert args.get(1, bool) is True

    def test_exact_type_mismatch(self) -> None:
        args = ArgumentsHelper([Handle(), True])
        with pytest.raises(TypeMismatchError, match="Expected argument of type str"):
            args.get(0, str)
        with pytest.raises(TypeMismatchError, match="Expected argument of type int"):
            args.get(1, int)
