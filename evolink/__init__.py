# evolink — link-graph evolution engine
# Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

from .errors import ConfigurationError, EvolinkError, ExtinctionError, InvariantError, SnapshotError
from .randomness import RandomSource
from .neural import Actor, BaseActor, NeuralLink, Neuron, Receptor, STRENGTH_RANGE
from .agent import Entity, crossover, random_entity
from .evolution import Board
from .config import WorldConfig, load_config
from .world import GridWorld, Direction

__author__ = "SolisHQ"
__version__ = "0.1.0"
