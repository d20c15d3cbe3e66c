"""Observed trade outcomes used to recalibrate class weights."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pyleague.config.league import LeagueClass


class TradeOutcome(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    PENDING = "pending"


class TradeFeedback(BaseModel):
    """Feature snapshot of an offered trade plus how it resolved.

    Feature values are the per-factor scores the offer was built on, in [0, 1].
    """

    league_class: LeagueClass
    season: int
    outcome: TradeOutcome
    market: float = Field(default=0.5, ge=0.0, le=1.0)
    impact: float = Field(default=0.5, ge=0.0, le=1.0)
    scarcity: float = Field(default=0.5, ge=0.0, le=1.0)
    demand: float = Field(default=0.5, ge=0.0, le=1.0)
    observed_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @property
    def is_labelled(self) -> bool:
        return self.outcome is not TradeOutcome.PENDING

    @property
    def accepted(self) -> bool:
        return self.outcome is TradeOutcome.ACCEPTED
