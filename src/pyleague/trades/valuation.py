"""Score trade candidates and pick the best one.

Fairness compares the market value each side sends. Acceptance probability is
a logistic estimate from the opponent's point of view, bucketed into the
``Strong / Aggressive / Speculative / Long Shot`` labels. Candidate selection
orders by label rank first and fairness second; a canonical asset key breaks
any remaining tie so the pick never depends on input order.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from pyleague.models import (
    AcceptanceLabel,
    Asset,
    ManagerTendency,
    TendencyLevel,
    TradeCandidate,
    WeightVector,
    acceptance_rank,
    asset_key,
)
from pyleague.market.tendency import infer_risk_tolerance


logger = logging.getLogger(__name__)

ACCEPT_INTERCEPT = -1.10
ACCEPT_MARKET_WEIGHT = 0.90
ACCEPT_LINEUP_PROXY_WEIGHT = 1.25
ACCEPT_NEED_PROXY_WEIGHT = 0.70
ACCEPT_MANAGER_WEIGHT = 0.85
ACCEPT_PROBABILITY_FLOOR = 0.02
ACCEPT_PROBABILITY_CEILING = 0.95
LOPSIDED_DELTA_PCT = -25.0
LOPSIDED_PROBABILITY_CAP = 0.35

HEADLINE_MAX_NAMES = 2
HEADLINE_FALLBACK = "assets"

_LABEL_THRESHOLDS: Tuple[Tuple[float, AcceptanceLabel], ...] = (
    (0.65, AcceptanceLabel.STRONG),
    (0.45, AcceptanceLabel.AGGRESSIVE),
    (0.25, AcceptanceLabel.SPECULATIVE),
)

_RISK_ALIGNMENT = {
    TendencyLevel.HIGH: 0.5,
    TendencyLevel.MEDIUM: 0.0,
    TendencyLevel.LOW: -0.5,
}


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _sigmoid(z: float) -> float:
    if z > 20:
        return 1.0
    if z < -20:
        return 0.0
    return 1.0 / (1.0 + math.exp(-z))


def asset_value(asset: Asset, weights: WeightVector | None = None) -> float:
    """Market value of an asset, tilted by the class weights when scored.

    Factor scores are in [0, 1]; the weighted mean distance from 0.5 moves the
    value by up to half in either direction.
    """

    base = float(asset.market_value)
    scores = getattr(asset, "factor_scores", None) or {}
    if weights is None or not scores:
        return base
    total_weight = 0.0
    tilt = 0.0
    for name, weight in weights.items():
        if name not in scores or weight <= 0:
            continue
        total_weight += weight
        tilt += weight * (_clamp(float(scores[name]), 0.0, 1.0) - 0.5)
    if total_weight <= 0:
        return base
    return base * (1.0 + tilt / total_weight)


def side_value(assets: Iterable[Asset], weights: WeightVector | None = None) -> float:
    return math.fsum(asset_value(asset, weights) for asset in assets)


def fairness_score(give_value: float, receive_value: float) -> float:
    """100 for an even swap, falling linearly with the relative gap."""

    largest = max(give_value, receive_value)
    if largest <= 0:
        return 100.0
    gap = abs(receive_value - give_value) / largest
    return round(_clamp(100.0 * (1.0 - gap), 0.0, 100.0), 1)


def acceptance_label(probability: float) -> AcceptanceLabel:
    for threshold, label in _LABEL_THRESHOLDS:
        if probability >= threshold:
            return label
    return AcceptanceLabel.LONG_SHOT


def acceptance_probability(
    give_value: float,
    receive_value: float,
    tendency: ManagerTendency | None = None,
) -> float:
    """Estimated chance the opponent accepts.

    The opponent receives ``give_value`` and sends ``receive_value``.
    """

    total = max(give_value + receive_value, 1.0)
    delta_opp_pct = (give_value - receive_value) / total * 100.0
    market_term = _clamp(delta_opp_pct / 12.0, -2.0, 2.0)
    gap_pct = abs(delta_opp_pct)
    lineup_proxy = 0.3 if gap_pct < 15 else 0.1 if gap_pct < 25 else -0.2
    need_proxy = 0.2 if gap_pct < 20 else 0.0
    manager_term = 0.0
    if tendency is not None:
        manager_term = _RISK_ALIGNMENT[infer_risk_tolerance(tendency)]

    z = (
        ACCEPT_INTERCEPT
        + ACCEPT_LINEUP_PROXY_WEIGHT * lineup_proxy
        + ACCEPT_NEED_PROXY_WEIGHT * need_proxy
        + ACCEPT_MARKET_WEIGHT * market_term
        + ACCEPT_MANAGER_WEIGHT * manager_term
    )
    probability = _clamp(_sigmoid(z), ACCEPT_PROBABILITY_FLOOR, ACCEPT_PROBABILITY_CEILING)
    if delta_opp_pct <= LOPSIDED_DELTA_PCT:
        probability = min(probability, LOPSIDED_PROBABILITY_CAP)
    return probability


def score_trade(
    give: Sequence[Asset],
    receive: Sequence[Asset],
    *,
    weights: WeightVector | None = None,
    tendency: ManagerTendency | None = None,
) -> TradeCandidate:
    """Build a fresh, fully scored candidate for one proposed trade."""

    give_value = side_value(give, weights)
    receive_value = side_value(receive, weights)
    probability = acceptance_probability(give_value, receive_value, tendency)
    return TradeCandidate(
        give=list(give),
        receive=list(receive),
        fairness_score=fairness_score(give_value, receive_value),
        acceptance_label=acceptance_label(probability),
        acceptance_probability=round(probability, 4),
    )


def _candidate_sort_key(candidate: TradeCandidate) -> Tuple[Any, ...]:
    return (
        -acceptance_rank(candidate.acceptance_label),
        -candidate.fairness_score,
        tuple(sorted(asset_key(asset) for asset in candidate.give)),
        tuple(sorted(asset_key(asset) for asset in candidate.receive)),
        -(candidate.acceptance_probability or 0.0),
    )


def _coerce_candidates(candidates: Any) -> List[TradeCandidate]:
    if candidates is None or isinstance(candidates, (str, bytes, Mapping)):
        return []
    if not isinstance(candidates, Sequence):
        return []
    coerced: List[TradeCandidate] = []
    for item in candidates:
        if isinstance(item, TradeCandidate):
            coerced.append(item)
            continue
        try:
            coerced.append(TradeCandidate.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed trade candidate: %s", exc.errors()[:1])
    return coerced


def rank_candidates(candidates: Any) -> List[TradeCandidate]:
    """Candidates best-first; malformed entries are dropped."""

    return sorted(_coerce_candidates(candidates), key=_candidate_sort_key)


def select_top_candidate(candidates: Any) -> Optional[TradeCandidate]:
    ranked = _coerce_candidates(candidates)
    if not ranked:
        return None
    return min(ranked, key=_candidate_sort_key)


def _side_names(assets: Sequence[Asset]) -> str:
    names = [asset.display_name for asset in assets if asset.display_name]
    if not names:
        return HEADLINE_FALLBACK
    return ", ".join(names[:HEADLINE_MAX_NAMES])


def format_headline(candidate: TradeCandidate) -> str:
    return f"Send: {_side_names(candidate.give)} → Get: {_side_names(candidate.receive)}"
