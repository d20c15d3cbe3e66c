"""Market liquidity score and its statistical confidence."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from pydantic import ValidationError

from pyleague.config.settings import EngineSettings
from pyleague.models import Confidence, LiquidityMetrics, LiquidityResult


logger = logging.getLogger(__name__)

NEUTRAL_LIQUIDITY = LiquidityResult(score=50, confidence=Confidence.LEARNING)
NEUTRAL_PARTICIPATION = 0.5

_DEFAULT_SETTINGS = EngineSettings()


def _participation_ratio(metrics: LiquidityMetrics) -> float:
    if metrics.total_managers <= 0:
        return NEUTRAL_PARTICIPATION
    return min(1.0, metrics.active_managers / metrics.total_managers)


def _coerce_metrics(metrics: LiquidityMetrics | Mapping[str, Any] | None) -> LiquidityMetrics | None:
    if metrics is None or isinstance(metrics, LiquidityMetrics):
        return metrics
    try:
        return LiquidityMetrics.model_validate(dict(metrics))
    except (TypeError, ValueError, ValidationError) as exc:
        logger.warning("Discarding malformed liquidity metrics: %s", exc)
        return None


def compute_liquidity(
    metrics: LiquidityMetrics | Mapping[str, Any] | None,
    settings: EngineSettings | None = None,
) -> LiquidityResult:
    """Score league trade activity on 0-100.

    Missing or malformed metrics (including an unreachable activity source)
    yield the neutral ``50 / LEARNING`` result rather than an error.
    """

    resolved = _coerce_metrics(metrics)
    if resolved is None:
        return NEUTRAL_LIQUIDITY
    settings = settings or _DEFAULT_SETTINGS
    trade_weight, participation_weight, asset_weight = settings.liquidity_weights

    trade_component = min(1.0, resolved.trades_last_30 / settings.liquidity_trade_saturation)
    asset_component = min(1.0, resolved.avg_assets_per_trade / settings.liquidity_asset_saturation)
    raw = 100 * (
        trade_weight * trade_component
        + participation_weight * _participation_ratio(resolved)
        + asset_weight * asset_component
    )
    score = max(0, min(100, int(math.floor(raw + 0.5))))

    moderate = resolved.trades_last_30 >= settings.confidence_min_trades and resolved.total_managers > 0
    confidence = Confidence.MODERATE if moderate else Confidence.LEARNING
    return LiquidityResult(score=score, confidence=confidence)
