"""Classify a manager's trade aggression and risk tolerance."""

from __future__ import annotations

from pyleague.config.settings import EngineSettings
from pyleague.models import ManagerTendency, TendencyLevel


_DEFAULT_SETTINGS = EngineSettings()


def infer_aggression(tendency: ManagerTendency, settings: EngineSettings | None = None) -> TendencyLevel:
    settings = settings or _DEFAULT_SETTINGS
    sent = tendency.trades_sent
    if sent >= settings.aggression_high_trades:
        return TendencyLevel.HIGH
    if (
        settings.aggression_simplified
        and sent >= settings.aggression_simplified_trades
        and tendency.acceptance_ratio > settings.aggression_simplified_accept_ratio
    ):
        return TendencyLevel.HIGH
    if sent >= settings.aggression_medium_trades:
        return TendencyLevel.MEDIUM
    return TendencyLevel.LOW


def infer_risk_tolerance(tendency: ManagerTendency, settings: EngineSettings | None = None) -> TendencyLevel:
    settings = settings or _DEFAULT_SETTINGS
    ratio = tendency.avg_overpay_ratio
    if ratio > settings.risk_high_overpay:
        return TendencyLevel.HIGH
    if ratio < settings.risk_low_overpay:
        return TendencyLevel.LOW
    return TendencyLevel.MEDIUM
