"""Baseline weights and the per-season learned weight history."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from pyleague.config.league import DEFAULT_LEAGUE_CLASS, LeagueClass, UserGoal, baseline_weights_for, parse_league_class
from pyleague.config.settings import EngineSettings
from pyleague.models import WeightEvolutionRecord, WeightVector
from pyleague.persistence import EngineStore
from pyleague.weights.blending import DEFAULT_BLEND_WINDOW, blend_multi_year_weights
from pyleague.weights.scoring import apply_goal_modifier, get_goal_weights


logger = logging.getLogger(__name__)


def get_baseline_weights(league_class: LeagueClass | str) -> WeightVector:
    """Fixed seed vector for a class; unknown classes resolve to ``UNK``."""

    return WeightVector.from_mapping(baseline_weights_for(league_class))


def _resolve(league_class: LeagueClass | str) -> LeagueClass:
    return parse_league_class(league_class) or DEFAULT_LEAGUE_CLASS


class WeightStore:
    """Read baseline and evolution data; append learned vectors.

    Only the recalibration job should call :meth:`append_evolution`.
    """

    def __init__(self, store: EngineStore, *, window_size: int = DEFAULT_BLEND_WINDOW):
        self._store = store
        self.window_size = window_size

    def get_baseline_weights(self, league_class: LeagueClass | str) -> WeightVector:
        return get_baseline_weights(league_class)

    def get_weight_evolution(self, league_class: LeagueClass | str) -> List[WeightEvolutionRecord]:
        """One record per season (the newest written), oldest season first."""

        latest: Dict[int, WeightEvolutionRecord] = {}
        for record in self._store.list_weight_records(_resolve(league_class)):
            latest[record.season] = record
        return [latest[season] for season in sorted(latest)]

    def append_evolution(
        self,
        league_class: LeagueClass,
        season: int,
        weights: WeightVector,
        *,
        n_samples: int,
        correlations: Optional[Mapping[str, float]] = None,
    ) -> WeightEvolutionRecord:
        record = self._store.append_weight_record(
            league_class=league_class,
            season=season,
            weights=weights,
            n_samples=n_samples,
            correlations=dict(correlations or {}),
        )
        logger.info(
            "Appended %s weights for season %d (n=%d, record=%s)",
            league_class.value,
            season,
            n_samples,
            record.record_id,
        )
        return record

    def effective_weights(self, league_class: LeagueClass | str) -> WeightVector:
        resolved = _resolve(league_class)
        evolution = self.get_weight_evolution(resolved)
        if not evolution:
            return self.get_baseline_weights(resolved)
        return blend_multi_year_weights(evolution, self.window_size)

    def goal_adjusted_weights(
        self,
        league_class: LeagueClass | str,
        goal: UserGoal | str | None,
        settings: EngineSettings | None = None,
    ) -> WeightVector:
        return apply_goal_modifier(self.effective_weights(league_class), get_goal_weights(goal), settings)
