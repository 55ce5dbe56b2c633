"""Pytest fixtures for the evolink suites."""

import itertools
from dataclasses import dataclass
from typing import Optional

import pytest

from evolink.neural import BaseActor
from evolink.randomness import RandomSource


@dataclass
class Props:
    ident: int
    value: float = 0.0
    last_input: Optional[float] = None


class ReadValue:
    name = "RV"

    def read(self, properties: Props) -> float:
        return properties.value


class AlwaysOn:
    name = "AL"

    def read(self, properties: Props) -> float:
        return 1.0


class RecordLastInput:
    """Raw sink: stores exactly what the link delivered."""
    name = "RL"

    def write(self, raw_input: float, properties: Props) -> None:
        properties.last_input = raw_input


class Accumulate(BaseActor):
    def __init__(self):
        super().__init__("AC")

    def _inner_write(self, value: float, properties: Props) -> None:
        properties.value += value


@pytest.fixture
def rng():
    """Deterministic randomness for tests."""
    return RandomSource(42)


@pytest.fixture
def props_factory():
    counter = itertools.count()
    return lambda: Props(ident=next(counter))


@pytest.fixture
def receptors():
    return [ReadValue(), AlwaysOn()]


@pytest.fixture
def actors():
    return [RecordLastInput(), Accumulate()]
