"""
evolink — World Configuration

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.
"""

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

ConditionName = Literal["right_half", "left_half", "top_half", "bottom_half"]


class WorldConfig(BaseModel):
    """Grid world parameters. Defaults reproduce the reference scenario."""
    model_config = ConfigDict(extra="forbid")

    width: int = Field(default=200, ge=2, le=10_000)
    height: int = Field(default=200, ge=2, le=10_000)
    population_size: int = Field(default=1000, ge=1, le=100_000)
    turns_per_generation: int = Field(default=60, ge=1)
    neuron_count: int = Field(default=4, ge=1, le=64)
    max_links: int = Field(default=10, ge=0, le=1000)
    mutation_rate: float = Field(default=0.01, ge=0.0, le=1.0)
    condition: ConditionName = "right_half"
    seed: Optional[int] = None


def load_config(path: Union[str, Path], **overrides) -> WorldConfig:
    """Read a JSON config file. Keyword overrides that are not None win."""
    try:
        config = WorldConfig.model_validate_json(Path(path).read_text())
        updates = {k: v for k, v in overrides.items() if v is not None}
        return WorldConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigurationError(f"invalid config {path}: {e}") from e
