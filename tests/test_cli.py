import json

import pytest

from pyleague import cli
from pyleague.config import LeagueClass
from pyleague.models import TradeFeedback, TradeOutcome
from pyleague.persistence import EngineStore


def _run(capsys, *argv: str) -> str:
    cli.main(list(argv))
    return capsys.readouterr().out


def test_classify_command(capsys):
    assert _run(capsys, "classify", "redraft", "--superflex").strip() == "RED_SF"
    assert _run(capsys, "classify", "keeper").strip() == "UNK"


def test_liquidity_command_with_metrics(capsys):
    out = _run(
        capsys,
        "liquidity",
        "--metric",
        "trades_last_30=25",
        "--metric",
        "active_managers=12",
        "--metric",
        "total_managers=12",
        "--metric",
        "avg_assets_per_trade=6",
    )
    assert json.loads(out) == {"score": 100, "confidence": "MODERATE"}


def test_liquidity_command_without_metrics_is_neutral(capsys):
    assert json.loads(_run(capsys, "liquidity")) == {"score": 50, "confidence": "LEARNING"}


def test_weights_command_reports_baseline(tmp_path, capsys):
    out = _run(capsys, "--db", str(tmp_path / "cli.sqlite"), "weights", "spc")
    body = json.loads(out)
    assert body["league_class"] == "SPC"
    assert body["effective"] == body["baseline"]


def test_weights_command_rejects_unknown_class(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["--db", str(tmp_path / "cli.sqlite"), "weights", "XYZ"])


def test_recalibrate_then_weights_history(tmp_path, capsys):
    db_path = tmp_path / "cli.sqlite"
    store = EngineStore(db_path)
    for index in range(30):
        store.record_feedback(
            TradeFeedback(
                league_class=LeagueClass.DYN_1QB,
                season=2024,
                outcome=TradeOutcome.ACCEPTED if index % 2 else TradeOutcome.REJECTED,
                impact=1.0 if index % 2 else 0.0,
            )
        )

    report = json.loads(_run(capsys, "--db", str(db_path), "recalibrate", "2024", "--class", "dyn_1qb"))
    assert report["classes_processed"] == 1
    assert report["errors"] == []

    history = json.loads(_run(capsys, "--db", str(db_path), "weights", "DYN_1QB", "--history"))
    assert [entry["season"] for entry in history["evolution"]] == [2024]
    assert history["effective"]["impact"] > history["baseline"]["impact"]


def test_settings_profile_and_overrides(tmp_path, capsys):
    profile = tmp_path / "profile.json"
    out = _run(
        capsys,
        "--set",
        "liquidity_weights=1,0,0",
        "--save-settings",
        str(profile),
        "liquidity",
        "--metric",
        "trades_last_30=20",
    )
    assert "Saved settings profile" in out
    assert json.loads(profile.read_text())["overrides"]["liquidity_weights"] == "1,0,0"

    loaded = _run(capsys, "--settings", str(profile), "liquidity", "--metric", "trades_last_30=20")
    assert json.loads(loaded)["score"] == 100


def test_set_overrides_are_coerced_and_clamped(tmp_path, capsys):
    db_path = str(tmp_path / "cli.sqlite")
    out = _run(capsys, "--db", db_path, "--set", "blend_window=0", "weights", "DYN_SF")
    assert json.loads(out)["league_class"] == "DYN_SF"

    score = _run(capsys, "--set", "liquidity_trade_saturation=10", "liquidity", "--metric", "trades_last_30=10")
    # 100 * (0.4 * 10/10 + 0.3 * 0.5)
    assert json.loads(score)["score"] == 55


def test_weights_command_with_goal(tmp_path, capsys):
    out = _run(capsys, "--db", str(tmp_path / "cli.sqlite"), "weights", "SPC", "--goal", "win_now")
    body = json.loads(out)
    assert body["goal_adjusted"]["impact"] == pytest.approx(0.7 * 0.60 + 0.3 * 0.50)
