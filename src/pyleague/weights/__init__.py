"""League classification and per-class scoring weights."""

from .blending import DEFAULT_BLEND_WINDOW, blend_multi_year_weights, recency_weights
from .classifier import classify_league
from .scoring import apply_goal_modifier, apply_team_fit_multiplier, compute_adaptive_score, get_goal_weights
from .store import WeightStore, get_baseline_weights

__all__ = [
    "DEFAULT_BLEND_WINDOW",
    "blend_multi_year_weights",
    "recency_weights",
    "classify_league",
    "apply_goal_modifier",
    "apply_team_fit_multiplier",
    "compute_adaptive_score",
    "get_goal_weights",
    "WeightStore",
    "get_baseline_weights",
]
