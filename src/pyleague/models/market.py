"""Manager tendency and league liquidity models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TendencyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Confidence(str, Enum):
    LEARNING = "LEARNING"
    MODERATE = "MODERATE"


class ManagerTendency(BaseModel):
    manager_id: str = Field(..., min_length=1)
    leagues_played: int = Field(default=0, ge=0)
    trades_sent: int = Field(default=0, ge=0)
    trades_accepted: int = Field(default=0, ge=0)
    avg_overpay_ratio: float = Field(default=1.0, ge=0.0)
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @property
    def acceptance_ratio(self) -> float:
        if self.trades_sent <= 0:
            return 0.0
        return self.trades_accepted / self.trades_sent

    def record_trade_outcome(
        self,
        *,
        accepted: bool,
        overpay_ratio: float | None = None,
        observed_at: datetime | None = None,
    ) -> "ManagerTendency":
        """Fold one sent trade into the tendency, returning a new instance.

        The overpay ratio is a running mean over accepted trades only.
        """

        trades_sent = self.trades_sent + 1
        trades_accepted = self.trades_accepted + (1 if accepted else 0)
        avg_overpay = self.avg_overpay_ratio
        if accepted and overpay_ratio is not None:
            avg_overpay = (
                overpay_ratio
                if self.trades_accepted == 0
                else (self.avg_overpay_ratio * self.trades_accepted + overpay_ratio) / trades_accepted
            )
        return self.model_copy(
            update={
                "trades_sent": trades_sent,
                "trades_accepted": trades_accepted,
                "avg_overpay_ratio": avg_overpay,
                "updated_at": observed_at or datetime.now(timezone.utc),
            }
        )


class LiquidityMetrics(BaseModel):
    trades_last_30: int = Field(default=0, ge=0)
    active_managers: int = Field(default=0, ge=0)
    total_managers: int = Field(default=0, ge=0)
    avg_assets_per_trade: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class LiquidityResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    confidence: Confidence

    model_config = ConfigDict(frozen=True)
