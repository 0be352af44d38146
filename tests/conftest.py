"""Shared pytest fixtures for expreval tests."""

from collections.abc import Callable
from typing import Any

import pytest

from expreval import VariableNotFoundError


class Recorder:
    """Variable resolver backed by a dict that records every lookup."""

    def __init__(self, values: dict[str, Any]) -> None:
        self.values = values
        self.calls: list[str] = []

    def __call__(self, name: str) -> Any:
        self.calls.append(name)
        if name not in self.values:
            raise VariableNotFoundError(name)
        return self.values[name]


@pytest.fixture
def make_variables() -> Callable[..., Recorder]:
    """Return a factory for recording variable resolvers."""

    def factory(**values: Any) -> Recorder:
        return Recorder(values)

    return factory


@pytest.fixture
def variables() -> Recorder:
    """A resolver with one value of each native kind."""
    return Recorder(
        {
            "#int": 5,
            "#double": 3.5,
            "$str": "hello",
            "#bool": True,
            "#my_var": 777,
            "#a.b": 42,
            "$0": 88,
            "$array": [10, 20, 30],
        }
    )
