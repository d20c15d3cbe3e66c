import pytest

from pyleague.config import EngineSettings, LeagueClass, UserGoal
from pyleague.exceptions import WeightVectorError
from pyleague.models import WeightVector
from pyleague.persistence import EngineStore
from pyleague.weights import (
    WeightStore,
    apply_goal_modifier,
    apply_team_fit_multiplier,
    compute_adaptive_score,
    get_goal_weights,
)


def test_goal_weights_fall_back_to_balanced():
    assert get_goal_weights("rebuild").market == 0.5
    assert get_goal_weights(UserGoal.WIN_NOW).impact == 0.5
    assert get_goal_weights("tank") == get_goal_weights(UserGoal.BALANCED)
    assert get_goal_weights(None) == get_goal_weights("balanced")


def test_goal_modifier_keeps_most_of_the_learned_vector():
    learned = WeightVector(market=0.4, impact=0.3, scarcity=0.2, demand=0.1)
    adjusted = apply_goal_modifier(learned, get_goal_weights("win_now"))

    assert adjusted.market == pytest.approx(0.7 * 0.4 + 0.3 * 0.2)
    assert adjusted.impact == pytest.approx(0.7 * 0.3 + 0.3 * 0.5)
    assert sum(adjusted.as_dict().values()) == pytest.approx(1.0)


def test_goal_modifier_reads_alpha_from_settings():
    learned = WeightVector(market=1.0, impact=0.0, scarcity=0.0, demand=0.0)
    goal = get_goal_weights("rebuild")

    assert apply_goal_modifier(learned, goal, EngineSettings(goal_alpha=1.0)) == learned
    assert apply_goal_modifier(learned, goal, EngineSettings(goal_alpha=0.0)).as_dict() == pytest.approx(goal.as_dict())


@pytest.mark.parametrize(
    ("team_fit", "expected"),
    [(50.0, 80.0), (100.0, 86.0), (0.0, 74.0)],
)
def test_team_fit_multiplier(team_fit, expected):
    assert apply_team_fit_multiplier(80.0, team_fit) == pytest.approx(expected)


def test_team_fit_strength_is_configurable():
    assert apply_team_fit_multiplier(80.0, 100.0, EngineSettings(team_fit_strength=0.0)) == 80.0


def test_adaptive_score_is_weighted_sum_times_team_fit():
    weights = WeightVector(market=0.4, impact=0.3, scarcity=0.2, demand=0.1)
    scores = {"market": 90.0, "impact": 70.0, "scarcity": 50.0}

    raw = 0.4 * 90.0 + 0.3 * 70.0 + 0.2 * 50.0
    assert compute_adaptive_score(scores, weights, 50.0) == pytest.approx(raw)
    assert compute_adaptive_score(scores, weights, 100.0) == pytest.approx(raw * 1.075)


def test_adaptive_score_rejects_non_numeric_factors():
    weights = WeightVector(market=0.25, impact=0.25, scarcity=0.25, demand=0.25)
    with pytest.raises(WeightVectorError):
        compute_adaptive_score({"market": "elite"}, weights, 50.0)


def test_goal_adjusted_weights_start_from_effective_weights(tmp_path):
    weight_store = WeightStore(EngineStore(tmp_path / "engine.sqlite"))
    adjusted = weight_store.goal_adjusted_weights(LeagueClass.RED_1QB, "rebuild")

    assert adjusted.market == pytest.approx(0.7 * 0.20 + 0.3 * 0.50)
    assert adjusted.impact == pytest.approx(0.7 * 0.50 + 0.3 * 0.10)
