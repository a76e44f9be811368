"""
Tests for engine configuration and process settings.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from athlete_risk.config import EngineConfig, RiskThresholds, Settings


# Test Cases


def test_default_thresholds():
    thresholds = EngineConfig().risk_thresholds
    assert (thresholds.low, thresholds.medium, thresholds.high, thresholds.critical) == (30, 60, 80, 90)


def test_default_decay_factors():
    decay = EngineConfig().decay
    assert (decay.workload, decay.cumulative_7day, decay.cumulative_30day, decay.avg_intensity) == (
        0.92, 0.92, 0.97, 0.95
    )


def test_detraining_guard_is_configurable():
    config = EngineConfig(risk_scoring={"detraining_chronic_floor": 5.0})
    assert config.risk_scoring.detraining_chronic_floor == 5.0
    assert config.risk_scoring.spike_ratio == 1.5


def test_config_is_immutable():
    config = EngineConfig()
    with pytest.raises(ValidationError):
        config.recovery_per_day = 10


def test_thresholds_must_be_ordered():
    with pytest.raises(ValidationError):
        RiskThresholds(low=50, medium=40, high=80, critical=90)


def test_partial_override_from_file(tmp_path):
    """Test that a JSON file overrides only the keys it names."""
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({
        "recovery_per_day": 10,
        "risk_thresholds": {"low": 25, "medium": 50, "high": 75, "critical": 90},
    }))

    config = EngineConfig.from_file(path)

    assert config.recovery_per_day == 10
    assert config.risk_thresholds.medium == 50
    assert config.history_window_rows == 30
    assert config.intensity_multipliers["hard"] == 1.5


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EngineConfig.from_file(tmp_path / "nope.json")


def test_invalid_config_file(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"risk_thresholds": {"low": 90, "medium": 10}}))
    with pytest.raises(ValueError):
        EngineConfig.from_file(path)


def test_settings_from_env(monkeypatch, tmp_path):
    engine_path = tmp_path / "engine.json"
    engine_path.write_text(json.dumps({"recovery_per_day": 12}))

    monkeypatch.setenv("ATHLETE_RISK_DATABASE_URL", "sqlite:///custom.db")
    monkeypatch.setenv("ATHLETE_RISK_ENGINE_CONFIG", str(engine_path))
    monkeypatch.setenv("ATHLETE_RISK_STORE_TIMEOUT", "2.5")
    monkeypatch.setenv("ATHLETE_RISK_LOG_LEVEL", "debug")
    monkeypatch.setenv("ATHLETE_RISK_CORS_ORIGINS", "http://a.example, http://b.example")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///custom.db"
    assert settings.engine_config_path == Path(engine_path)
    assert settings.store_timeout_seconds == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.cors_allow_origins == ["http://a.example", "http://b.example"]
    assert settings.load_engine_config().recovery_per_day == 12


def test_settings_defaults(monkeypatch):
    for name in (
        "ATHLETE_RISK_DATABASE_URL",
        "ATHLETE_RISK_ENGINE_CONFIG",
        "ATHLETE_RISK_CATALOG",
        "ATHLETE_RISK_STORE_TIMEOUT",
        "ATHLETE_RISK_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///athlete_risk.db"
    assert settings.engine_config_path is None
    assert settings.load_engine_config() == EngineConfig()
