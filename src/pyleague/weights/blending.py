"""Blend multiple seasons of learned weights into one effective vector."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from pyleague.config.league import WEIGHT_FACTORS
from pyleague.exceptions import BlendingError, WeightVectorError
from pyleague.models import WeightEvolutionRecord, WeightVector


DEFAULT_BLEND_WINDOW = 3


def recency_weights(count: int) -> List[float]:
    """Linear recency weights for ``count`` seasons, oldest first (1, 2, ... n)."""

    return [float(index + 1) for index in range(count)]


def blend_multi_year_weights(
    evolution: Sequence[WeightEvolutionRecord],
    window_size: int = DEFAULT_BLEND_WINDOW,
) -> WeightVector:
    """Weighted average of the most recent ``window_size`` seasons.

    ``evolution`` must be ordered oldest to newest. Callers fall back to the
    baseline when there is no history; an empty sequence here is a bug.
    """

    if window_size < 1:
        raise BlendingError(f"window_size must be at least 1, got {window_size}")
    if not evolution:
        raise BlendingError("Cannot blend an empty weight evolution")

    recent = list(evolution)[-window_size:]
    factors = recency_weights(len(recent))
    total = math.fsum(factors)

    blended: Dict[str, float] = {}
    for name in WEIGHT_FACTORS:
        try:
            value = math.fsum(
                factor * getattr(record.weights, name) for factor, record in zip(factors, recent)
            ) / total
        except OverflowError as exc:
            raise WeightVectorError(f"Blended weight for {name} overflowed") from exc
        if not math.isfinite(value):
            raise WeightVectorError(f"Blended weight for {name} is not finite")
        blended[name] = value
    return WeightVector.from_mapping(blended)
