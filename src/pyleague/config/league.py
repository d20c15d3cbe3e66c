"""League classes and the baseline weight vectors seeded for each."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple


WEIGHT_SCHEMA_VERSION = "v1"
WEIGHT_FACTORS: Tuple[str, ...] = ("market", "impact", "scarcity", "demand")


class LeagueClass(str, Enum):
    DYN_SF = "DYN_SF"
    DYN_1QB = "DYN_1QB"
    RED_SF = "RED_SF"
    RED_1QB = "RED_1QB"
    SPC = "SPC"
    UNK = "UNK"


DEFAULT_LEAGUE_CLASS = LeagueClass.UNK

_BASELINE_WEIGHTS: Dict[LeagueClass, Mapping[str, float]] = {
    LeagueClass.DYN_SF: {"market": 0.35, "impact": 0.25, "scarcity": 0.20, "demand": 0.20},
    LeagueClass.DYN_1QB: {"market": 0.40, "impact": 0.25, "scarcity": 0.15, "demand": 0.20},
    LeagueClass.RED_SF: {"market": 0.25, "impact": 0.45, "scarcity": 0.20, "demand": 0.10},
    LeagueClass.RED_1QB: {"market": 0.20, "impact": 0.50, "scarcity": 0.20, "demand": 0.10},
    LeagueClass.SPC: {"market": 0.10, "impact": 0.60, "scarcity": 0.25, "demand": 0.05},
    LeagueClass.UNK: {"market": 0.35, "impact": 0.35, "scarcity": 0.15, "demand": 0.15},
}


def iter_league_classes() -> Iterable[LeagueClass]:
    """Return every configured league class in declaration order."""

    return iter(LeagueClass)


def parse_league_class(value: str | LeagueClass | None) -> Optional[LeagueClass]:
    """Resolve a class from its name, returning None when unrecognised."""

    if isinstance(value, LeagueClass):
        return value
    if not isinstance(value, str):
        return None
    try:
        return LeagueClass(value.strip().upper())
    except ValueError:
        return None


def baseline_weights_for(league_class: LeagueClass | str) -> Mapping[str, float]:
    resolved = parse_league_class(league_class) or DEFAULT_LEAGUE_CLASS
    return _BASELINE_WEIGHTS[resolved]


class UserGoal(str, Enum):
    WIN_NOW = "win_now"
    REBUILD = "rebuild"
    BALANCED = "balanced"


DEFAULT_USER_GOAL = UserGoal.BALANCED

_GOAL_WEIGHTS: Dict[UserGoal, Mapping[str, float]] = {
    UserGoal.WIN_NOW: {"market": 0.20, "impact": 0.50, "scarcity": 0.20, "demand": 0.10},
    UserGoal.REBUILD: {"market": 0.50, "impact": 0.10, "scarcity": 0.20, "demand": 0.20},
    UserGoal.BALANCED: {"market": 0.30, "impact": 0.30, "scarcity": 0.20, "demand": 0.20},
}


def parse_user_goal(value: str | UserGoal | None) -> Optional[UserGoal]:
    if isinstance(value, UserGoal):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UserGoal(value.strip().lower())
    except ValueError:
        return None


def goal_weights_for(goal: UserGoal | str | None) -> Mapping[str, float]:
    """Goal preference table; unknown or missing goals resolve to ``balanced``."""

    return _GOAL_WEIGHTS[parse_user_goal(goal) or DEFAULT_USER_GOAL]
