"""Tests for centralized configuration (settings)."""

from claim_lifecycle.config import settings


def test_get_orchestrator_config_defaults(monkeypatch):
    """get_orchestrator_config returns defaults when env is unset."""
    for key in (
        "CLAIM_LIFECYCLE_BACKGROUND_WORKERS",
        "CLAIM_LIFECYCLE_SERIALIZE_SCREENING",
        "CLAIM_LIFECYCLE_RETRY_ATTEMPTS",
    ):
        monkeypatch.delenv(key, raising=False)
    config = settings.get_orchestrator_config()
    assert config["background_workers"] == 4
    assert config["serialize_screening"] is True
    assert config["retry_attempts"] == 3
    assert config["retry_min_wait"] <= config["retry_max_wait"]


def test_get_orchestrator_config_respects_env(monkeypatch):
    """Environment overrides are parsed and clamped."""
    monkeypatch.setenv("CLAIM_LIFECYCLE_BACKGROUND_WORKERS", "0")
    monkeypatch.setenv("CLAIM_LIFECYCLE_SERIALIZE_SCREENING", "no")
    monkeypatch.setenv("CLAIM_LIFECYCLE_RETRY_ATTEMPTS", "5")
    config = settings.get_orchestrator_config()
    assert config["background_workers"] == 1
    assert config["serialize_screening"] is False
    assert config["retry_attempts"] == 5


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    """Unparseable numeric env values use the default."""
    monkeypatch.setenv("FRAUD_THRESHOLD", "high")
    monkeypatch.setenv("CLAIM_LIFECYCLE_RETRY_MIN_WAIT", "soon")
    assert settings.get_fraud_config()["fraud_threshold"] == 50
    assert settings.get_orchestrator_config()["retry_min_wait"] == 0.5


def test_get_fraud_config_returns_dict():
    """get_fraud_config returns a dict with expected keys."""
    config = settings.get_fraud_config()
    assert isinstance(config, dict)
    assert "keyword_score" in config
    assert "fraud_threshold" in config
    assert "model_version" in config


def test_get_oracle_config_parses_perils(monkeypatch):
    """ORACLE_EXCLUDED_PERILS is a comma-separated, lower-cased list."""
    monkeypatch.setenv("ORACLE_EXCLUDED_PERILS", "Flood, Mold ,")
    assert settings.get_oracle_config()["excluded_perils"] == ("flood", "mold")
    monkeypatch.setenv("ORACLE_EXCLUDED_PERILS", " , ")
    assert settings.get_oracle_config()["excluded_perils"] == settings.DEFAULT_EXCLUDED_PERILS
