"""
evolink — Population Snapshot Format

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

A dump is one row per agent, one record per link, in evaluation order:

  [[{"sensor_name": "AL", "effector_name": "N0", "strength": 1.25}, ...], ...]

Names are the only identity. Loading a dump resolves them against the
catalogue plus a fresh set of neurons.
"""

from typing import Dict, List, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import SnapshotError
from .neural import STRENGTH_RANGE, Actor, NeuralLink, Neuron, Receptor


class LinkRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    sensor_name: str
    effector_name: str
    strength: float = Field(ge=STRENGTH_RANGE[0], le=STRENGTH_RANGE[1])


class GenerationDump(BaseModel):
    """Export payload of a world: generation counter plus the population dump."""
    generation_number: int = Field(ge=0)
    generation: List[List[LinkRecord]]


_population_adapter = TypeAdapter(List[List[LinkRecord]])


def parse_population(payload) -> List[List[LinkRecord]]:
    """Validate raw dump data (as produced by `Board.dump_population`)."""
    try:
        return _population_adapter.validate_python(payload)
    except ValidationError as e:
        raise SnapshotError(f"invalid population dump: {e}") from e


def parse_generation(text: str) -> GenerationDump:
    try:
        return GenerationDump.model_validate_json(text)
    except ValidationError as e:
        raise SnapshotError(f"invalid generation dump: {e}") from e


def resolve_links(records: Sequence[LinkRecord], neurons: Sequence[Neuron],
                  receptors: Dict[str, Receptor], actors: Dict[str, Actor]) -> List[NeuralLink]:
    by_name = {n.name: n for n in neurons}
    links = []
    for record in records:
        sensor = by_name.get(record.sensor_name) or receptors.get(record.sensor_name)
        effector = by_name.get(record.effector_name) or actors.get(record.effector_name)
        if sensor is None:
            raise SnapshotError(f"unknown sensor {record.sensor_name!r}")
        if effector is None:
            raise SnapshotError(f"unknown effector {record.effector_name!r}")
        links.append(NeuralLink(sensor, effector, record.strength))
    return links
