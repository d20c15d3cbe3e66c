"""Tunable engine settings resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, get_type_hints

from pydantic import TypeAdapter, ValidationError


logger = logging.getLogger(__name__)

_ENV_PREFIX = "PYLEAGUE_"
_DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "pyleague.sqlite"

# (minimum, maximum) applied to environment values and overrides alike.
_LIMITS: Dict[str, Tuple[Optional[float], Optional[float]]] = {
    "blend_window": (1, None),
    "liquidity_trade_saturation": (1.0, None),
    "liquidity_asset_saturation": (1.0, None),
    "confidence_min_trades": (0, None),
    "aggression_high_trades": (1, None),
    "aggression_medium_trades": (0, None),
    "aggression_simplified_trades": (1, None),
    "aggression_simplified_accept_ratio": (0.0, 1.0),
    "recalibration_min_samples": (2, None),
    "recalibration_smoothing": (0.0, 1.0),
    "recalibration_max_errors": (0, None),
    "fetch_timeout": (0.1, None),
    "goal_alpha": (0.0, 1.0),
    "team_fit_strength": (0.0, None),
}


@dataclass(frozen=True)
class EngineSettings:
    blend_window: int = 3
    liquidity_weights: Tuple[float, float, float] = (0.4, 0.3, 0.3)
    liquidity_trade_saturation: float = 20.0
    liquidity_asset_saturation: float = 5.0
    confidence_min_trades: int = 10
    aggression_high_trades: int = 8
    aggression_medium_trades: int = 3
    aggression_simplified: bool = False
    aggression_simplified_trades: int = 5
    aggression_simplified_accept_ratio: float = 0.6
    risk_high_overpay: float = 1.12
    risk_low_overpay: float = 0.95
    recalibration_min_samples: int = 30
    recalibration_smoothing: float = 0.6
    recalibration_max_errors: int = 20
    goal_alpha: float = 0.7
    team_fit_strength: float = 0.15
    # Total budget for one league activity fetch, across every request it makes.
    fetch_timeout: float = 5.0
    db_path: Path = _DEFAULT_DB_PATH

    def with_overrides(self, overrides: Mapping[str, Any]) -> "EngineSettings":
        """Return a copy with known fields replaced.

        Values are coerced to the field's declared type and clamped to the same
        limits ``load_settings`` applies. Unknown keys and values that cannot be
        coerced are logged and ignored.
        """

        types = _field_types()
        accepted: dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in types:
                logger.warning("Ignoring unknown setting %s", key)
                continue
            if key == "liquidity_weights":
                accepted[key] = _coerce_triple(value, self.liquidity_weights)
                continue
            try:
                coerced = TypeAdapter(types[key]).validate_python(value)
            except ValidationError:
                logger.warning("Invalid value for setting %s: %r; keeping %r", key, value, getattr(self, key))
                continue
            accepted[key] = _clamp(key, coerced)
        return replace(self, **accepted)


def _field_types() -> Dict[str, Any]:
    hints = get_type_hints(EngineSettings)
    return {field.name: hints[field.name] for field in fields(EngineSettings)}


def _clamp(name: str, value: Any) -> Any:
    low, high = _LIMITS.get(name, (None, None))
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_triple(value: Any, default: Tuple[float, float, float]) -> Tuple[float, float, float]:
    if isinstance(value, str):
        parts: Any = [part.strip() for part in value.split(",") if part.strip()]
    else:
        try:
            parts = list(value)
        except TypeError:
            logger.warning("Invalid liquidity weights %r; using default", value)
            return default
    if len(parts) != 3:
        logger.warning("Liquidity weights need three values, got %r; using default", value)
        return default
    try:
        first, second, third = (float(part) for part in parts)
    except (TypeError, ValueError):
        logger.warning("Invalid liquidity weights %r; using default", value)
        return default
    return (first, second, third)


def _int_setting(base: EngineSettings, name: str, env: str) -> int:
    low, _ = _LIMITS.get(name, (None, None))
    return _env_int(f"{_ENV_PREFIX}{env}", getattr(base, name), min_value=low)


def _float_setting(base: EngineSettings, name: str, env: str) -> float:
    low, high = _LIMITS.get(name, (None, None))
    return _env_float(f"{_ENV_PREFIX}{env}", getattr(base, name), clamp_min=low, clamp_max=high)


def load_settings(base: EngineSettings | None = None) -> EngineSettings:
    """Build settings from ``PYLEAGUE_*`` environment variables."""

    base = base or EngineSettings()
    weights_raw = os.getenv(f"{_ENV_PREFIX}LIQUIDITY_WEIGHTS")
    liquidity_weights = (
        _coerce_triple(weights_raw, base.liquidity_weights) if weights_raw else base.liquidity_weights
    )
    db_raw = os.getenv(f"{_ENV_PREFIX}DB_PATH")
    return replace(
        base,
        blend_window=_int_setting(base, "blend_window", "BLEND_WINDOW"),
        liquidity_weights=liquidity_weights,
        liquidity_trade_saturation=_float_setting(base, "liquidity_trade_saturation", "LIQUIDITY_TRADE_SATURATION"),
        liquidity_asset_saturation=_float_setting(base, "liquidity_asset_saturation", "LIQUIDITY_ASSET_SATURATION"),
        confidence_min_trades=_int_setting(base, "confidence_min_trades", "CONFIDENCE_MIN_TRADES"),
        aggression_high_trades=_int_setting(base, "aggression_high_trades", "AGGRESSION_HIGH"),
        aggression_medium_trades=_int_setting(base, "aggression_medium_trades", "AGGRESSION_MEDIUM"),
        aggression_simplified=_env_bool(f"{_ENV_PREFIX}AGGRESSION_SIMPLIFIED", base.aggression_simplified),
        risk_high_overpay=_float_setting(base, "risk_high_overpay", "RISK_HIGH"),
        risk_low_overpay=_float_setting(base, "risk_low_overpay", "RISK_LOW"),
        recalibration_min_samples=_int_setting(base, "recalibration_min_samples", "RECAL_MIN_SAMPLES"),
        recalibration_smoothing=_float_setting(base, "recalibration_smoothing", "RECAL_SMOOTHING"),
        goal_alpha=_float_setting(base, "goal_alpha", "GOAL_ALPHA"),
        team_fit_strength=_float_setting(base, "team_fit_strength", "TEAM_FIT_STRENGTH"),
        fetch_timeout=_float_setting(base, "fetch_timeout", "FETCH_TIMEOUT"),
        db_path=Path(db_raw) if db_raw else base.db_path,
    )
