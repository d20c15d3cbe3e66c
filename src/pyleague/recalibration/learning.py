"""Derive a class weight vector from labelled trade outcomes.

Each factor is scored by its point-biserial correlation with acceptance.
Negative correlations contribute nothing; the remaining mass is normalised
and then smoothed toward the class baseline so a single season cannot swing
the vector too far.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pyleague.config.league import WEIGHT_FACTORS
from pyleague.models import TradeFeedback, WeightVector


@dataclass(frozen=True)
class LearnedWeights:
    weights: WeightVector
    correlations: Dict[str, float]
    n_samples: int


def correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    n = min(len(xs), len(ys))
    if n < 2:
        return 0.0
    mean_x = math.fsum(xs[:n]) / n
    mean_y = math.fsum(ys[:n]) / n
    cov = var_x = var_y = 0.0
    for x, y in zip(xs[:n], ys[:n]):
        dx = x - mean_x
        dy = y - mean_y
        cov += dx * dy
        var_x += dx * dx
        var_y += dy * dy
    denom = math.sqrt(var_x * var_y)
    if denom == 0:
        return 0.0
    return cov / denom


def smooth_weights(baseline: WeightVector, learned: WeightVector, alpha: float) -> WeightVector:
    mixed = {
        name: alpha * getattr(baseline, name) + (1.0 - alpha) * getattr(learned, name)
        for name in WEIGHT_FACTORS
    }
    return WeightVector.from_mapping(mixed).normalized()


def learn_weights(
    feedback: Sequence[TradeFeedback],
    baseline: WeightVector,
    *,
    min_samples: int = 30,
    smoothing: float = 0.6,
) -> Optional[LearnedWeights]:
    """Return learned weights, or None when too few outcomes are labelled."""

    labelled = [item for item in feedback if item.is_labelled]
    if len(labelled) < min_samples:
        return None

    outcomes: List[float] = [1.0 if item.accepted else 0.0 for item in labelled]
    correlations = {
        name: correlation([float(getattr(item, name)) for item in labelled], outcomes)
        for name in WEIGHT_FACTORS
    }
    clipped = {name: max(value, 0.0) for name, value in correlations.items()}
    mass = math.fsum(clipped.values())
    if mass == 0:
        learned = baseline
    else:
        learned = WeightVector.from_mapping({name: value / mass for name, value in clipped.items()})

    return LearnedWeights(
        weights=smooth_weights(baseline, learned, smoothing),
        correlations=correlations,
        n_samples=len(labelled),
    )
