import math

import pytest
from pydantic import ValidationError

from pyleague.exceptions import WeightVectorError
from pyleague.models import (
    AcceptanceLabel,
    FaabAsset,
    PickAsset,
    PlayerAsset,
    TradeCandidate,
    WeightVector,
    acceptance_rank,
    asset_key,
    parse_asset,
)


def test_weight_vector_from_mapping_requires_every_factor():
    with pytest.raises(WeightVectorError):
        WeightVector.from_mapping({"market": 0.5, "impact": 0.5, "scarcity": 0.0})


def test_weight_vector_rejects_unknown_factors():
    with pytest.raises(WeightVectorError):
        WeightVector.from_mapping({"market": 0.25, "impact": 0.25, "scarcity": 0.25, "demand": 0.25, "hype": 1.0})


@pytest.mark.parametrize("bad", [math.inf, math.nan, "heavy"])
def test_weight_vector_rejects_non_finite_values(bad):
    with pytest.raises(WeightVectorError):
        WeightVector.from_mapping({"market": bad, "impact": 0.25, "scarcity": 0.25, "demand": 0.25})


def test_weight_vector_is_frozen():
    weights = WeightVector(market=0.25, impact=0.25, scarcity=0.25, demand=0.25)
    with pytest.raises((TypeError, ValidationError)):
        weights.market = 0.5  # type: ignore[misc]


def test_normalized_handles_zero_total():
    weights = WeightVector(market=0.0, impact=0.0, scarcity=0.0, demand=0.0).normalized()
    assert weights.as_dict() == {"market": 0.25, "impact": 0.25, "scarcity": 0.25, "demand": 0.25}


def test_parse_asset_dispatches_on_kind():
    assert isinstance(parse_asset({"kind": "PLAYER", "player_id": "p1"}), PlayerAsset)
    assert isinstance(parse_asset({"kind": "PICK", "season": 2025, "round": 2}), PickAsset)
    assert isinstance(parse_asset({"kind": "FAAB", "amount": 10}), FaabAsset)
    with pytest.raises(ValidationError):
        parse_asset({"kind": "COACH"})
    with pytest.raises(ValidationError):
        parse_asset({"kind": "PICK", "season": 2025, "round": 0})


def test_asset_keys_are_distinct_per_variant():
    keys = {
        asset_key(PlayerAsset(player_id="1")),
        asset_key(PickAsset(season=2025, round=1)),
        asset_key(PickAsset(season=2025, round=1, original_roster_id=3)),
        asset_key(FaabAsset(amount=1)),
    }
    assert len(keys) == 4


def test_acceptance_rank_accepts_strings_and_unknowns():
    assert acceptance_rank(AcceptanceLabel.STRONG) == 4
    assert acceptance_rank("Long Shot") == 1
    assert acceptance_rank("maybe") == 0
    assert acceptance_rank(None) == 0


def test_trade_candidate_probability_bounds():
    with pytest.raises(ValidationError):
        TradeCandidate(acceptance_probability=1.5)
