from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ClassifyRequest(BaseModel):
    league_type: str | None = None
    specialty_format: str | None = None
    is_superflex: bool = False
    user_goal: str | None = None


class ClassifyResponse(BaseModel):
    league_class: str
    baseline_weights: dict[str, float]
    effective_weights: dict[str, float]
    goal_weights: dict[str, float] | None = None


class EvolutionEntryResponse(BaseModel):
    record_id: str
    season: int
    weights: dict[str, float]
    n_samples: int
    created_at: datetime


class WeightsResponse(BaseModel):
    league_class: str
    baseline_weights: dict[str, float]
    effective_weights: dict[str, float]
    evolution: list[EvolutionEntryResponse] = Field(default_factory=list)
