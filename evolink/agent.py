"""
evolink — Entity and Link-Graph Reproduction

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

ENTITY:
  properties   domain state (position, heading, ...), owned by the world
  neurons      fixed array N0..N(k-1), fresh for every entity, never shared
  links        ordered list; order is evaluation order

  step():  fire every link in stored order, then zero every neuron.
  A neuron read later in the list sees what earlier links wrote into it
  during this step; nothing carries over to the next step.

REPRODUCTION:
  Offspring never inherit properties or neurons, only wiring.

  1. Link count: uniform in [lo, hi] of the parents' counts, or with
     probability mutation_rate a +/-1 drift past the bounds (clamped to
     [0, max_links]).
  2. Pool: both parents' links grouped by edge identity (sensor name,
     effector name). Built per offspring, consumed as it is drawn from.
  3. Draw: pick a bucket, remove it, then either inherit one of its links
     as-is or (mutation_rate) keep the edge and re-roll the strength.
     An empty pool falls back to a fully random link.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Sequence, Tuple, TypeVar

from .neural import Actor, EdgeKey, NeuralLink, Neuron, Receptor
from .randomness import RandomSource

P = TypeVar("P")


@dataclass
class Entity(Generic[P]):
    properties: P
    neurons: Tuple[Neuron, ...]
    links: List[NeuralLink] = field(default_factory=list)

    def step(self) -> None:
        for link in self.links:
            link.act(self.properties)
        for neuron in self.neurons:
            neuron.reset()

    @property
    def link_count(self) -> int:
        return len(self.links)

    def dump_links(self) -> List[dict]:
        return [link.to_record() for link in self.links]


# ─── Construction ────────────────────────────────────────

def spawn_neurons(count: int) -> Tuple[Neuron, ...]:
    return tuple(Neuron(i) for i in range(count))


def endpoint_pools(neurons: Sequence[Neuron],
                   receptors: Sequence[Receptor],
                   actors: Sequence[Actor]) -> Tuple[list, list]:
    """Everything a link may read from / write to: own neurons first, then the catalogue."""
    return [*neurons, *receptors], [*neurons, *actors]


def random_link(neurons: Sequence[Neuron], receptors: Sequence[Receptor],
                actors: Sequence[Actor], rng: RandomSource) -> NeuralLink:
    sensors, effectors = endpoint_pools(neurons, receptors, actors)
    return NeuralLink.random(sensors, effectors, rng)


def random_entity(properties: P, receptors: Sequence[Receptor], actors: Sequence[Actor],
                  neuron_count: int, max_links: int, rng: RandomSource) -> Entity[P]:
    """Genesis: 0..floor(max_links/2) random links over catalogue and own neurons."""
    neurons = spawn_neurons(neuron_count)
    count = rng.integer_inclusive(0, max_links // 2)
    links = [random_link(neurons, receptors, actors, rng) for _ in range(count)]
    return Entity(properties, neurons, links)


# ─── Reproduction ────────────────────────────────────────

def offspring_link_count(parent_a: Entity, parent_b: Entity, max_links: int,
                         mutation_rate: float, rng: RandomSource) -> int:
    lo = min(parent_a.link_count, parent_b.link_count)
    hi = max(parent_a.link_count, parent_b.link_count)
    if rng.boolean(mutation_rate):
        if rng.boolean():
            return max(lo - 1, 0)
        return min(hi + 1, max_links)
    return rng.integer_inclusive(lo, hi)


def group_links(parent_a: Entity, parent_b: Entity) -> Dict[EdgeKey, List[NeuralLink]]:
    """Multimap edge identity → member links, parent A's links first."""
    pool: Dict[EdgeKey, List[NeuralLink]] = {}
    for link in [*parent_a.links, *parent_b.links]:
        pool.setdefault(link.edge, []).append(link)
    return pool


def draw_link(pool: Dict[EdgeKey, List[NeuralLink]], neurons: Sequence[Neuron],
              receptors: Sequence[Receptor], actors: Sequence[Actor],
              mutation_rate: float, rng: RandomSource) -> NeuralLink:
    """Take one link out of the pool. The chosen edge identity leaves the pool for good."""
    if not pool:
        return random_link(neurons, receptors, actors, rng)

    key = rng.choice(list(pool))
    bucket = pool.pop(key)
    if rng.boolean(mutation_rate):
        template = bucket[0].rebind(neurons)
        return NeuralLink.with_random_strength(template.sensor, template.effector, rng)
    return rng.choice(bucket).rebind(neurons)


def crossover(parent_a: Entity, parent_b: Entity, properties: P,
              receptors: Sequence[Receptor], actors: Sequence[Actor],
              neuron_count: int, max_links: int, mutation_rate: float,
              rng: RandomSource) -> Entity[P]:
    """
    Sexual reproduction on the wiring graph. Properties are fresh, neurons
    are fresh, links come from the parents' shared edge pool.
    """
    neurons = spawn_neurons(neuron_count)
    count = offspring_link_count(parent_a, parent_b, max_links, mutation_rate, rng)
    pool = group_links(parent_a, parent_b)
    links = [draw_link(pool, neurons, receptors, actors, mutation_rate, rng)
             for _ in range(count)]
    return Entity(properties, neurons, links)
