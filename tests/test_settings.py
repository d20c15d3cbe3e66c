import json
from pathlib import Path

from pyleague.config import EngineSettings, LeagueClass, load_settings
from pyleague.config_loader import SettingsProfile
from pyleague.models import WeightVector
from pyleague.persistence import EngineStore
from pyleague.weights import WeightStore


def test_defaults_without_environment(monkeypatch):
    for name in ("PYLEAGUE_BLEND_WINDOW", "PYLEAGUE_LIQUIDITY_WEIGHTS", "PYLEAGUE_DB_PATH"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.blend_window == 3
    assert settings.liquidity_weights == (0.4, 0.3, 0.3)
    assert settings.recalibration_min_samples == 30


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PYLEAGUE_BLEND_WINDOW", "5")
    monkeypatch.setenv("PYLEAGUE_LIQUIDITY_WEIGHTS", "0.5, 0.25, 0.25")
    monkeypatch.setenv("PYLEAGUE_AGGRESSION_SIMPLIFIED", "true")
    monkeypatch.setenv("PYLEAGUE_RECAL_SMOOTHING", "1.7")
    monkeypatch.setenv("PYLEAGUE_DB_PATH", str(tmp_path / "custom.sqlite"))

    settings = load_settings()

    assert settings.blend_window == 5
    assert settings.liquidity_weights == (0.5, 0.25, 0.25)
    assert settings.aggression_simplified is True
    assert settings.recalibration_smoothing == 1.0
    assert settings.db_path == tmp_path / "custom.sqlite"


def test_invalid_environment_values_keep_defaults(monkeypatch, caplog):
    monkeypatch.setenv("PYLEAGUE_BLEND_WINDOW", "many")
    monkeypatch.setenv("PYLEAGUE_RISK_HIGH", "abc")
    monkeypatch.setenv("PYLEAGUE_LIQUIDITY_WEIGHTS", "0.5,0.5")

    with caplog.at_level("WARNING"):
        settings = load_settings()

    assert settings.blend_window == 3
    assert settings.risk_high_overpay == 1.12
    assert settings.liquidity_weights == (0.4, 0.3, 0.3)
    assert "PYLEAGUE_BLEND_WINDOW" in caplog.text


def test_with_overrides_ignores_unknown_keys():
    settings = EngineSettings().with_overrides({"blend_window": 2, "bogus": 1, "db_path": "x.sqlite"})
    assert settings.blend_window == 2
    assert settings.db_path == Path("x.sqlite")
    assert not hasattr(settings, "bogus")


def test_settings_profile_round_trip(tmp_path):
    path = tmp_path / "profile.json"
    SettingsProfile({"blend_window": 4, "liquidity_weights": [0.6, 0.2, 0.2]}).save(path)

    loaded = SettingsProfile.load(path)
    settings = loaded.apply(EngineSettings())

    assert settings.blend_window == 4
    assert settings.liquidity_weights == (0.6, 0.2, 0.2)


def _blend_with(settings: EngineSettings, tmp_path) -> WeightVector:
    weight_store = WeightStore(EngineStore(tmp_path / "engine.sqlite"), window_size=settings.blend_window)
    for season, market in ((2022, 0.2), (2023, 0.4)):
        weight_store.append_evolution(
            LeagueClass.DYN_SF,
            season,
            WeightVector(market=market, impact=0.3, scarcity=0.2, demand=0.1),
            n_samples=30,
        )
    return weight_store.effective_weights(LeagueClass.DYN_SF)


def test_with_overrides_coerces_string_values(tmp_path):
    settings = EngineSettings().with_overrides(
        {"blend_window": "2", "recalibration_smoothing": "0.5", "aggression_simplified": "true"}
    )

    assert settings.blend_window == 2
    assert isinstance(settings.blend_window, int)
    assert settings.recalibration_smoothing == 0.5
    assert settings.aggression_simplified is True
    assert _blend_with(settings, tmp_path).market > 0.0


def test_with_overrides_applies_environment_limits(tmp_path):
    settings = EngineSettings().with_overrides(
        {"blend_window": 0, "recalibration_smoothing": 3, "fetch_timeout": 0, "goal_alpha": -1}
    )

    assert settings.blend_window == 1
    assert settings.recalibration_smoothing == 1.0
    assert settings.fetch_timeout == 0.1
    assert settings.goal_alpha == 0.0
    assert _blend_with(settings, tmp_path).market == 0.4


def test_with_overrides_keeps_current_value_for_bad_input(caplog):
    with caplog.at_level("WARNING"):
        settings = EngineSettings().with_overrides(
            {"blend_window": "many", "confidence_min_trades": 2.5, "liquidity_weights": 7}
        )

    assert settings.blend_window == 3
    assert settings.confidence_min_trades == 10
    assert settings.liquidity_weights == (0.4, 0.3, 0.3)
    assert "blend_window" in caplog.text


def test_profile_values_are_coerced_on_apply(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"overrides": {"blend_window": "0", "liquidity_trade_saturation": "10"}}))

    settings = SettingsProfile.load(path).apply(EngineSettings())

    assert settings.blend_window == 1
    assert settings.liquidity_trade_saturation == 10.0
