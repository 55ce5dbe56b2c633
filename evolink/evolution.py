"""
evolink — Population Engine

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

THE BOARD:
  Owns the live generation and everything needed to make the next one:
  the shared sensor and effector catalogues, the neuron count, the link
  cap, the mutation rate and the random stream.

LIFECYCLE:
  genesis      size random entities, 0..floor(max_links/2) links each
  tick         every entity steps once; entities never see each other
  kill         keep entities whose properties pass the predicate
  repopulate   breed back to size from the survivors, pairing
               survivors[i % S] with survivors[(i + 1) % S]

  A single survivor breeds with itself. Zero survivors is extinction:
  repopulate refuses (ExtinctionError) and the caller decides whether to
  reseed from genesis.
"""

import logging
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .agent import Entity, crossover, random_entity, spawn_neurons
from .errors import ConfigurationError, ExtinctionError, InvariantError, SnapshotError
from .neural import STRENGTH_RANGE, Actor, Receptor
from .randomness import RandomSource
from .snapshot import parse_population, resolve_links

logger = logging.getLogger(__name__)

P = TypeVar("P")


class Board(Generic[P]):
    """
    Generational population of link-wired entities.
    """

    def __init__(self, population_size: int, generate_props: Callable[[], P],
                 receptors: Sequence[Receptor], actors: Sequence[Actor],
                 neuron_count: int, max_links: int, mutation_rate: float,
                 rng: Optional[RandomSource] = None):
        self._validate(population_size, receptors, actors, neuron_count, max_links, mutation_rate)
        self.population_size = population_size
        self.generate_props = generate_props
        self.receptors: Tuple[Receptor, ...] = tuple(receptors)
        self.actors: Tuple[Actor, ...] = tuple(actors)
        self.neuron_count = neuron_count
        self.max_links = max_links
        self.mutation_rate = mutation_rate
        self.rng = rng if rng is not None else RandomSource()

        self.events: list[dict] = []
        self._population: List[Entity[P]] = []
        self.reseed()

    @staticmethod
    def _validate(population_size, receptors, actors, neuron_count, max_links, mutation_rate):
        if population_size <= 0:
            raise ConfigurationError(f"population size must be positive, got {population_size}")
        if neuron_count <= 0:
            raise ConfigurationError(f"neuron count must be positive, got {neuron_count}")
        if max_links < 0:
            raise ConfigurationError(f"max links must be non-negative, got {max_links}")
        if not 0.0 <= mutation_rate <= 1.0:
            raise ConfigurationError(f"mutation rate must be in [0, 1], got {mutation_rate}")

        # Dumps identify endpoints by name only.
        neuron_names = {n.name for n in spawn_neurons(neuron_count)}
        for kind, catalogue in (("sensor", receptors), ("effector", actors)):
            names = [c.name for c in catalogue]
            if len(set(names)) != len(names):
                raise ConfigurationError(f"duplicate {kind} names in catalogue: {names}")
            clash = neuron_names.intersection(names)
            if clash:
                raise ConfigurationError(f"{kind} names collide with neuron names: {sorted(clash)}")

    # ─── Genesis ─────────────────────────────────────────

    def _random_entity(self) -> Entity[P]:
        return random_entity(self.generate_props(), self.receptors, self.actors,
                             self.neuron_count, self.max_links, self.rng)

    def reseed(self):
        """Replace the population with a fully random genesis."""
        self._population = [self._random_entity() for _ in range(self.population_size)]
        self._check_invariants()
        logger.debug("genesis: %d entities", len(self._population))
        self.events.append({'type': 'genesis', 'size': len(self._population)})

    # ─── Core Loop ───────────────────────────────────────

    def tick(self):
        for entity in self._population:
            entity.step()

    def kill(self, condition: Callable[[P], bool]):
        """Keep entities whose properties satisfy `condition`. Order is preserved."""
        before = len(self._population)
        self._population = [e for e in self._population if condition(e.properties)]
        self.events.append({'type': 'kill', 'before': before, 'survivors': len(self._population)})

    def repopulate(self):
        """Breed a full generation from the current survivors."""
        survivors = self._population
        count = len(survivors)
        if count == 0:
            raise ExtinctionError("no survivors to repopulate from")

        new_population = []
        for i in range(self.population_size):
            new_population.append(crossover(
                survivors[i % count],
                survivors[(i + 1) % count],
                self.generate_props(),
                self.receptors,
                self.actors,
                self.neuron_count,
                self.max_links,
                self.mutation_rate,
                self.rng,
            ))
        self._population = new_population
        self._check_invariants()
        logger.debug("repopulated %d entities from %d survivors", len(new_population), count)
        self.events.append({'type': 'repopulate', 'parents': count, 'size': len(new_population)})

    def _check_invariants(self):
        lo, hi = STRENGTH_RANGE
        for entity in self._population:
            if entity.link_count > self.max_links:
                raise InvariantError(f"entity has {entity.link_count} links, cap is {self.max_links}")
            if len(entity.neurons) != self.neuron_count:
                raise InvariantError(f"entity has {len(entity.neurons)} neurons, expected {self.neuron_count}")
            for link in entity.links:
                if not lo <= link.strength <= hi:
                    raise InvariantError(f"link {link.short_repr} strength {link.strength} out of range")

    # ─── Query ───────────────────────────────────────────

    @property
    def population(self) -> Tuple[P, ...]:
        """Properties of the live entities, in population order."""
        return tuple(e.properties for e in self._population)

    @property
    def entities(self) -> Tuple[Entity[P], ...]:
        return tuple(self._population)

    def __len__(self) -> int:
        return len(self._population)

    def dump_population(self) -> List[List[dict]]:
        return [entity.dump_links() for entity in self._population]

    def restore_population(self, payload) -> None:
        """
        Rebuild entities from a dump. Properties and neurons are fresh; the
        restored list stands in for a survivor list until the next repopulate.
        """
        rows = parse_population(payload)
        if not rows:
            raise SnapshotError("cannot restore an empty population")
        receptors = {r.name: r for r in self.receptors}
        actors = {a.name: a for a in self.actors}

        population = []
        for row in rows:
            if len(row) > self.max_links:
                raise SnapshotError(f"entity with {len(row)} links exceeds cap {self.max_links}")
            neurons = spawn_neurons(self.neuron_count)
            population.append(Entity(self.generate_props(), neurons,
                                     resolve_links(row, neurons, receptors, actors)))
        self._population = population
        logger.debug("restored %d entities", len(population))
        self.events.append({'type': 'restore', 'size': len(population)})

    def pop_events(self) -> list[dict]:
        events = self.events
        self.events = []
        return events
