"""
evolink — Wiring Primitives

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

The "brain" of an agent is not a weight matrix, it is a list of links:

  sensor ──(strength)──▶ effector

  Receptor  pure read of agent properties into [0, 1]
  Actor     named sink that mutates agent properties from a scalar
  Neuron    both at once: accumulates raw input on write, squashes on read

A link fires by reading its sensor, adding its strength, and writing the
sum into its effector. Catalogue effectors squash through tanh before
touching properties; neurons store the raw sum and squash lazily when
they are next read. That is the whole activation rule.
"""

from __future__ import annotations

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Protocol, Sequence, Tuple, TypeVar, Union, runtime_checkable

from .errors import InvariantError

P = TypeVar("P")

STRENGTH_RANGE = (-4.0, 4.0)

EdgeKey = Tuple[str, str]


@runtime_checkable
class Receptor(Protocol[P]):
    name: str

    def read(self, properties: P) -> float:
        """From 0 to 1.0"""
        ...


@runtime_checkable
class Actor(Protocol[P]):
    name: str

    def write(self, raw_input: float, properties: P) -> None:
        ...


class Neuron:
    """
    Stateful scratch register owned by exactly one agent.

    Acts as a Receptor and an Actor at the same time: `write` adds the raw
    input to the accumulator, `read` returns tanh of whatever has been
    accumulated so far. The agent clears it after every step.
    """

    __slots__ = ("index", "name", "accumulator")

    def __init__(self, index: int):
        self.index = index
        self.name = f"N{index}"
        self.accumulator = 0.0

    def emit(self) -> float:
        return float(np.tanh(self.accumulator))

    def absorb(self, value: float) -> None:
        self.accumulator += value

    def reset(self) -> None:
        self.accumulator = 0.0

    # Receptor / Actor capability surface. Properties are ignored.
    def read(self, properties: Any = None) -> float:
        return self.emit()

    def write(self, raw_input: float, properties: Any = None) -> None:
        self.absorb(raw_input)

    def __repr__(self) -> str:
        return f"Neuron({self.index}, accumulator={self.accumulator})"


class BaseActor(ABC, Generic[P]):
    """Canonical effector: squash the raw input, then mutate properties."""

    def __init__(self, name: str):
        self.name = name

    def write(self, raw_input: float, properties: P) -> None:
        self._inner_write(float(np.tanh(raw_input)), properties)

    @abstractmethod
    def _inner_write(self, value: float, properties: P) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


Sensor = Union[Receptor, Neuron]
Effector = Union[Actor, Neuron]


@dataclass(frozen=True)
class NeuralLink:
    """Directed, strength-weighted edge. Never mutated; mutation builds a new link."""

    sensor: Sensor
    effector: Effector
    strength: float

    def __post_init__(self):
        lo, hi = STRENGTH_RANGE
        if not lo <= self.strength <= hi:
            raise InvariantError(
                f"link {self.sensor.name}-{self.effector.name} strength "
                f"{self.strength} outside [{lo}, {hi}]"
            )

    def act(self, properties) -> None:
        self.effector.write(self.sensor.read(properties) + self.strength, properties)

    @property
    def edge(self) -> EdgeKey:
        """Identity for inheritance bookkeeping. Strength is not part of it."""
        return (self.sensor.name, self.effector.name)

    @property
    def short_repr(self) -> str:
        return f"{self.sensor.name}-{self.effector.name}"

    def rebind(self, neurons: Sequence[Neuron]) -> "NeuralLink":
        """Same edge and strength, with neuron endpoints swapped for `neurons`."""
        sensor = neurons[self.sensor.index] if isinstance(self.sensor, Neuron) else self.sensor
        effector = neurons[self.effector.index] if isinstance(self.effector, Neuron) else self.effector
        if sensor is self.sensor and effector is self.effector:
            return self
        return NeuralLink(sensor, effector, self.strength)

    def to_record(self) -> dict:
        return {
            'sensor_name': self.sensor.name,
            'effector_name': self.effector.name,
            'strength': self.strength,
        }

    @classmethod
    def with_random_strength(cls, sensor: Sensor, effector: Effector, rng) -> "NeuralLink":
        return cls(sensor, effector, rng.uniform(*STRENGTH_RANGE))

    @classmethod
    def random(cls, sensors: Sequence[Sensor], effectors: Sequence[Effector], rng) -> "NeuralLink":
        return cls.with_random_strength(rng.choice(sensors), rng.choice(effectors), rng)
