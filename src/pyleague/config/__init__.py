"""Configuration helpers for league classes and engine tuning."""

from .league import (
    DEFAULT_LEAGUE_CLASS,
    DEFAULT_USER_GOAL,
    WEIGHT_FACTORS,
    WEIGHT_SCHEMA_VERSION,
    LeagueClass,
    UserGoal,
    baseline_weights_for,
    goal_weights_for,
    iter_league_classes,
    parse_league_class,
    parse_user_goal,
)
from .settings import EngineSettings, load_settings

__all__ = [
    "DEFAULT_LEAGUE_CLASS",
    "DEFAULT_USER_GOAL",
    "WEIGHT_FACTORS",
    "WEIGHT_SCHEMA_VERSION",
    "LeagueClass",
    "UserGoal",
    "baseline_weights_for",
    "goal_weights_for",
    "iter_league_classes",
    "parse_league_class",
    "parse_user_goal",
    "EngineSettings",
    "load_settings",
]
