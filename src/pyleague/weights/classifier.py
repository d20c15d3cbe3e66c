"""Map raw league attributes onto a coarse league class."""

from __future__ import annotations

from typing import Any, Optional

from pyleague.config.league import DEFAULT_LEAGUE_CLASS, LeagueClass


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def classify_league(
    league_type: Optional[str],
    specialty_format: Optional[str] = None,
    is_superflex: Optional[bool] = False,
) -> LeagueClass:
    """Classify a league; never raises.

    Any non-standard specialty format wins over the league type. Types that
    are neither dynasty nor redraft (keeper included) fall back to ``UNK`` so
    each class accumulates enough feedback to learn from.
    """

    league = _normalize(league_type)
    specialty = _normalize(specialty_format)
    superflex = bool(is_superflex)

    if specialty and specialty != "standard":
        return LeagueClass.SPC
    if "dyn" in league:
        return LeagueClass.DYN_SF if superflex else LeagueClass.DYN_1QB
    if "red" in league:
        return LeagueClass.RED_SF if superflex else LeagueClass.RED_1QB
    return DEFAULT_LEAGUE_CLASS
