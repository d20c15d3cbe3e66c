"""Market-activity signals derived from manager and league behaviour."""

from .liquidity import NEUTRAL_LIQUIDITY, compute_liquidity
from .tendency import infer_aggression, infer_risk_tolerance

__all__ = [
    "NEUTRAL_LIQUIDITY",
    "compute_liquidity",
    "infer_aggression",
    "infer_risk_tolerance",
]
