"""Weight vectors and their per-season evolution records."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Iterator, Mapping, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pyleague.config.league import WEIGHT_FACTORS, WEIGHT_SCHEMA_VERSION, LeagueClass
from pyleague.exceptions import WeightVectorError


class WeightVector(BaseModel):
    """Relative scoring weights over the fixed factor schema.

    Weights are not required to sum to one; only finiteness is enforced.
    """

    market: float
    impact: float
    scarcity: float
    demand: float
    schema_version: str = WEIGHT_SCHEMA_VERSION

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "WeightVector":
        missing = [name for name in WEIGHT_FACTORS if name not in values]
        if missing:
            raise WeightVectorError(f"Weight vector missing factors: {', '.join(missing)}")
        unknown = sorted(set(values) - set(WEIGHT_FACTORS))
        if unknown:
            raise WeightVectorError(f"Unknown weight factors: {', '.join(unknown)}")
        coerced: Dict[str, float] = {}
        for name in WEIGHT_FACTORS:
            try:
                value = float(values[name])
            except (TypeError, ValueError) as exc:
                raise WeightVectorError(f"Weight for {name} is not numeric: {values[name]!r}") from exc
            if not math.isfinite(value):
                raise WeightVectorError(f"Weight for {name} is not finite: {value!r}")
            coerced[name] = value
        return cls(**coerced)

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in WEIGHT_FACTORS}

    def items(self) -> Iterator[Tuple[str, float]]:
        for name in WEIGHT_FACTORS:
            yield name, getattr(self, name)

    def normalized(self) -> "WeightVector":
        total = sum(value for _, value in self.items())
        if total <= 0:
            share = 1.0 / len(WEIGHT_FACTORS)
            return WeightVector.from_mapping({name: share for name in WEIGHT_FACTORS})
        return WeightVector.from_mapping({name: value / total for name, value in self.items()})


class WeightEvolutionRecord(BaseModel):
    record_id: str
    league_class: LeagueClass
    season: int
    weights: WeightVector
    n_samples: int = Field(default=0, ge=0)
    correlations: Dict[str, float] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(frozen=True)
