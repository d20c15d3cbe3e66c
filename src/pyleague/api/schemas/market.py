from __future__ import annotations

from pydantic import BaseModel


class LiquidityRequest(BaseModel):
    league_id: str | None = None
    metrics: dict | None = None


class LiquidityResponse(BaseModel):
    score: int
    confidence: str
    source: str
