"""
evolink — Grid Creature World

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

The reference world that drives a Board:

  - A W x H grid. Every creature has a position and a heading.
  - Sensors:   IU facing up · TB touching a border · RN noise
               TP time through the generation · AL always on
  - Effectors: LT turn left · RT turn right · FD forward 2 · BW back 1
               (each acts only when its squashed input is positive)
  - A generation lasts `turns_per_generation` turns. At the boundary the
    selection condition culls the board, the survivor count is recorded,
    the board is rebuilt from the survivors and the generation advances.

Default condition: survive on the right half of the board.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from .config import WorldConfig
from .errors import ExtinctionError
from .evolution import Board
from .neural import BaseActor
from .randomness import RandomSource
from .snapshot import GenerationDump

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def right(self) -> "Direction":
        members = list(Direction)
        return members[(members.index(self) + 1) % len(members)]

    def left(self) -> "Direction":
        members = list(Direction)
        return members[(members.index(self) - 1) % len(members)]


@dataclass
class GameClock:
    """Shared by every creature. Only the world advances it."""
    max_x: int
    max_y: int
    turn: int
    max_turn: int


@dataclass
class CreatureProperties:
    x: int
    y: int
    direction: Direction
    clock: GameClock

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'direction': self.direction.name}


# ─── Sensors ─────────────────────────────────────────────

class IsUp:
    name = "IU"

    def read(self, properties: CreatureProperties) -> float:
        return 1.0 if properties.direction is Direction.UP else 0.0


class TouchingBorder:
    name = "TB"

    def read(self, properties: CreatureProperties) -> float:
        clock = properties.clock
        on_border = (properties.x == 0 or properties.x == clock.max_x or
                     properties.y == 0 or properties.y == clock.max_y)
        return 1.0 if on_border else 0.0


class Always:
    name = "AL"

    def read(self, properties: CreatureProperties) -> float:
        return 1.0


class TimePerception:
    name = "TP"

    def read(self, properties: CreatureProperties) -> float:
        return properties.clock.turn / properties.clock.max_turn


class RandomSense:
    """Noise channel. Draws from the world's stream, never the board's."""
    name = "RN"

    def __init__(self, rng: RandomSource):
        self.rng = rng

    def read(self, properties: CreatureProperties) -> float:
        return self.rng.random()


# ─── Effectors ───────────────────────────────────────────

def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(value, hi))


class MoveForward(BaseActor[CreatureProperties]):
    def __init__(self):
        super().__init__("FD")

    def _inner_write(self, value: float, properties: CreatureProperties) -> None:
        if value > 0:
            d, clock = properties.direction, properties.clock
            properties.x = clamp(properties.x + d.dx * 2, 0, clock.max_x)
            properties.y = clamp(properties.y + d.dy * 2, 0, clock.max_y)


class MoveBackward(BaseActor[CreatureProperties]):
    def __init__(self):
        super().__init__("BW")

    def _inner_write(self, value: float, properties: CreatureProperties) -> None:
        if value > 0:
            d, clock = properties.direction, properties.clock
            properties.x = clamp(properties.x - d.dx, 0, clock.max_x)
            properties.y = clamp(properties.y - d.dy, 0, clock.max_y)


class TurnRight(BaseActor[CreatureProperties]):
    def __init__(self):
        super().__init__("RT")

    def _inner_write(self, value: float, properties: CreatureProperties) -> None:
        if value > 0:
            properties.direction = properties.direction.right()


class TurnLeft(BaseActor[CreatureProperties]):
    def __init__(self):
        super().__init__("LT")

    def _inner_write(self, value: float, properties: CreatureProperties) -> None:
        if value > 0:
            properties.direction = properties.direction.left()


# ─── Selection Conditions ────────────────────────────────

Condition = Callable[[CreatureProperties], bool]

CONDITIONS: Dict[str, Condition] = {
    'right_half': lambda p: p.x > p.clock.max_x / 2,
    'left_half': lambda p: p.x < p.clock.max_x / 2,
    'top_half': lambda p: p.y < p.clock.max_y / 2,
    'bottom_half': lambda p: p.y > p.clock.max_y / 2,
}


# ─── World ───────────────────────────────────────────────

class GridWorld:
    """
    Generational clock around a Board of grid creatures.
    """

    def __init__(self, config: Optional[WorldConfig] = None,
                 condition: Optional[Condition] = None):
        self.config = config or WorldConfig()
        if condition is None:
            condition = CONDITIONS[self.config.condition]
        self.condition = condition

        root = RandomSource(self.config.seed)
        board_rng = root.spawn()
        self.rng = root.spawn()

        self.clock = GameClock(
            max_x=self.config.width - 1,
            max_y=self.config.height - 1,
            turn=0,
            max_turn=self.config.turns_per_generation,
        )
        self.generation_number = 0
        self.survivors_last_gen = 0
        self.history: list[dict] = []
        self.events: list[dict] = []

        self.board: Board[CreatureProperties] = Board(
            self.config.population_size,
            self._generate_props,
            [IsUp(), TouchingBorder(), RandomSense(self.rng), TimePerception(), Always()],
            [TurnLeft(), TurnRight(), MoveForward(), MoveBackward()],
            self.config.neuron_count,
            self.config.max_links,
            self.config.mutation_rate,
            rng=board_rng,
        )

    def _generate_props(self) -> CreatureProperties:
        return CreatureProperties(
            x=self.rng.integer(0, self.config.width),
            y=self.rng.integer(0, self.config.height),
            direction=self.rng.choice(list(Direction)),
            clock=self.clock,
        )

    # ─── Core Loop ───────────────────────────────────────

    def do_turn(self):
        if self.clock.turn > self.clock.max_turn:
            self._end_generation()
        self.board.tick()
        self.clock.turn += 1

    def _end_generation(self):
        self.clock.turn = 0
        self.board.kill(self.condition)
        self.survivors_last_gen = len(self.board)
        try:
            self.board.repopulate()
        except ExtinctionError:
            logger.warning("generation %d went extinct; reseeding from random genesis",
                           self.generation_number)
            self.events.append({'type': 'extinction', 'generation': self.generation_number})
            self.board.reseed()

        record = {
            'generation': self.generation_number,
            'survivors': self.survivors_last_gen,
            'population_size': self.config.population_size,
            'survival_rate': self.survivors_last_gen / self.config.population_size,
        }
        self.history.append(record)
        self.events.append({'type': 'generation', **record})
        logger.info("generation %d: %d/%d survived", self.generation_number,
                    self.survivors_last_gen, self.config.population_size)
        self.generation_number += 1

    def run_generation(self):
        """Turn until the next generation boundary has been crossed."""
        start = self.generation_number
        while self.generation_number == start:
            self.do_turn()

    # ─── Query ───────────────────────────────────────────

    @property
    def population(self):
        return self.board.population

    def dump_generation(self) -> dict:
        dump = GenerationDump.model_validate({
            'generation_number': self.generation_number,
            'generation': self.board.dump_population(),
        })
        return dump.model_dump()

    def get_state(self) -> dict:
        return {
            'generation': self.generation_number,
            'turn': self.clock.turn,
            'max_turn': self.clock.max_turn,
            'survivors_last_gen': self.survivors_last_gen,
            'population_size': len(self.board),
            'width': self.config.width,
            'height': self.config.height,
            'creatures': [p.to_dict() for p in self.population],
        }

    def pop_events(self) -> list[dict]:
        events = self.events + self.board.pop_events()
        self.events = []
        return events
