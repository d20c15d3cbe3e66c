"""Goal-adjusted weights and adaptive asset scores."""

from __future__ import annotations

import math
from typing import Any, Mapping

from pyleague.config.league import WEIGHT_FACTORS, UserGoal, goal_weights_for
from pyleague.config.settings import EngineSettings
from pyleague.exceptions import WeightVectorError
from pyleague.models import WeightVector


_DEFAULT_SETTINGS = EngineSettings()


def get_goal_weights(goal: UserGoal | str | None) -> WeightVector:
    return WeightVector.from_mapping(goal_weights_for(goal))


def apply_goal_modifier(
    learned: WeightVector,
    goal: WeightVector,
    settings: EngineSettings | None = None,
) -> WeightVector:
    """Mix ``goal_alpha`` of the learned vector with the rest from the goal, then normalize."""

    alpha = (settings or _DEFAULT_SETTINGS).goal_alpha
    mixed = {
        name: alpha * getattr(learned, name) + (1.0 - alpha) * getattr(goal, name)
        for name in WEIGHT_FACTORS
    }
    return WeightVector.from_mapping(mixed).normalized()


def apply_team_fit_multiplier(score: float, team_fit: float, settings: EngineSettings | None = None) -> float:
    """Scale ``score`` by up to +/- half of ``team_fit_strength``; a team fit of 50 is neutral."""

    strength = (settings or _DEFAULT_SETTINGS).team_fit_strength
    return score * (1.0 + strength * (team_fit / 100.0 - 0.5))


def compute_adaptive_score(
    factor_scores: Mapping[str, Any],
    weights: WeightVector,
    team_fit: float,
    settings: EngineSettings | None = None,
) -> float:
    """Weighted factor sum adjusted for team fit. Missing factor scores count as zero."""

    try:
        values = {name: float(factor_scores.get(name, 0.0)) for name in WEIGHT_FACTORS}
    except (TypeError, ValueError) as exc:
        raise WeightVectorError(f"Factor scores must be numeric: {exc}") from exc
    raw = math.fsum(getattr(weights, name) * values[name] for name in WEIGHT_FACTORS)
    score = apply_team_fit_multiplier(raw, team_fit, settings)
    if not math.isfinite(score):
        raise WeightVectorError("Adaptive score is not finite")
    return score
