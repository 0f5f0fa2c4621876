"""Centralized configuration from environment variables with defaults."""

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


def _list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(key)
    if raw is None:
        return default
    items = tuple(part.strip().lower() for part in raw.split(",") if part.strip())
    return items or default


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

def get_orchestrator_config() -> dict[str, Any]:
    """Worker pool, screening serialization, and collaborator retry settings."""
    return {
        "background_workers": max(1, _int("CLAIM_LIFECYCLE_BACKGROUND_WORKERS", 4)),
        "serialize_screening": _bool("CLAIM_LIFECYCLE_SERIALIZE_SCREENING", True),
        "retry_attempts": max(1, _int("CLAIM_LIFECYCLE_RETRY_ATTEMPTS", 3)),
        "retry_min_wait": _float("CLAIM_LIFECYCLE_RETRY_MIN_WAIT", 0.5),
        "retry_max_wait": _float("CLAIM_LIFECYCLE_RETRY_MAX_WAIT", 5.0),
    }


# ---------------------------------------------------------------------------
# Fraud screening
# ---------------------------------------------------------------------------

def get_fraud_config() -> dict[str, Any]:
    """Keyword fraud screener scores and thresholds."""
    return {
        "keyword_score": _int("FRAUD_KEYWORD_SCORE", 20),
        "pattern_score": _int("FRAUD_PATTERN_SCORE", 25),
        "fraud_threshold": _int("FRAUD_THRESHOLD", 50),
        "max_score": _int("FRAUD_MAX_SCORE", 100),
        "model_version": os.environ.get("FRAUD_MODEL_VERSION", "keyword-v1"),
    }


# ---------------------------------------------------------------------------
# Verdict oracle
# ---------------------------------------------------------------------------

DEFAULT_EXCLUDED_PERILS = (
    "wear and tear",
    "intentional",
    "war",
    "nuclear",
    "gradual deterioration",
)


def get_oracle_config() -> dict[str, Any]:
    """Rule-based verdict oracle settings."""
    return {
        "min_description_length": _int("ORACLE_MIN_DESCRIPTION_LENGTH", 5),
        "excluded_perils": _list("ORACLE_EXCLUDED_PERILS", DEFAULT_EXCLUDED_PERILS),
    }
