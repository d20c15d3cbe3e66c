"""Trade candidate model and acceptance labels."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pyleague.models.assets import Asset


class AcceptanceLabel(str, Enum):
    STRONG = "Strong"
    AGGRESSIVE = "Aggressive"
    SPECULATIVE = "Speculative"
    LONG_SHOT = "Long Shot"


ACCEPTANCE_RANK: Dict[AcceptanceLabel, int] = {
    AcceptanceLabel.STRONG: 4,
    AcceptanceLabel.AGGRESSIVE: 3,
    AcceptanceLabel.SPECULATIVE: 2,
    AcceptanceLabel.LONG_SHOT: 1,
}


def acceptance_rank(label: Any) -> int:
    """Rank an acceptance label; unlabeled or unknown values rank 0."""

    if label is None:
        return 0
    if not isinstance(label, AcceptanceLabel):
        try:
            label = AcceptanceLabel(str(label).strip())
        except ValueError:
            return 0
    return ACCEPTANCE_RANK[label]


class TradeCandidate(BaseModel):
    """Proposed trade as seen from the requesting manager."""

    give: List[Asset] = Field(default_factory=list)
    receive: List[Asset] = Field(default_factory=list)
    fairness_score: float = 0.0
    acceptance_label: Optional[AcceptanceLabel] = None
    acceptance_probability: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)
