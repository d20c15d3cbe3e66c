import pytest

from pyleague.config import LeagueClass
from pyleague.weights import classify_league


@pytest.mark.parametrize(
    ("league_type", "specialty", "superflex", "expected"),
    [
        ("dynasty", None, True, LeagueClass.DYN_SF),
        ("Dynasty", None, False, LeagueClass.DYN_1QB),
        ("  DYN  ", "standard", True, LeagueClass.DYN_SF),
        ("redraft", None, True, LeagueClass.RED_SF),
        ("REDRAFT", "Standard", False, LeagueClass.RED_1QB),
        ("dynasty", "bestball", True, LeagueClass.SPC),
        ("redraft", "guillotine", False, LeagueClass.SPC),
        ("keeper", None, True, LeagueClass.UNK),
        ("", None, False, LeagueClass.UNK),
        (None, None, False, LeagueClass.UNK),
    ],
)
def test_classify_league_matrix(league_type, specialty, superflex, expected):
    assert classify_league(league_type, specialty, superflex) is expected


def test_specialty_format_wins_over_league_type():
    assert classify_league("dynasty", "idp", is_superflex=True) is LeagueClass.SPC


def test_classify_league_tolerates_missing_superflex():
    assert classify_league("dynasty", None, None) is LeagueClass.DYN_1QB


def test_classify_league_is_total_over_odd_inputs():
    for league_type in ["weird", "123", "keeper dynasty", "dyn-red"]:
        assert isinstance(classify_league(league_type), LeagueClass)
