"""Shared pytest fixtures for all test files."""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from claim_lifecycle.db.database import init_db
from claim_lifecycle.db.repository import ClaimRepository, OwnerRepository
from claim_lifecycle.models.claim import FraudMetadata, FraudResult
from claim_lifecycle.services.orchestrator import ClaimLifecycleOrchestrator

# Retries disabled and a single worker so tests are fast and deterministic
TEST_ORCHESTRATOR_CONFIG = {
    "background_workers": 1,
    "serialize_screening": True,
    "retry_attempts": 1,
    "retry_min_wait": 0.0,
    "retry_max_wait": 0.0,
}


def make_fraud_result(is_fraudulent: bool = False, confidence: float = 0.1) -> FraudResult:
    return FraudResult(
        is_fraudulent=is_fraudulent,
        confidence_score=confidence,
        reason="fraud indicators matched" if is_fraudulent else "no indicators",
        metadata=FraudMetadata(
            risk_factors=["staged_incident_keywords"] if is_fraudulent else [],
            model_version="test-model",
            timestamp=datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture(autouse=True)
def temp_db():
    """Use a temporary SQLite DB for tests."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_db(path)
    prev = os.environ.get("CLAIMS_DB_PATH")
    os.environ["CLAIMS_DB_PATH"] = path
    try:
        yield path
    finally:
        if prev is None:
            os.environ.pop("CLAIMS_DB_PATH", None)
        else:
            os.environ["CLAIMS_DB_PATH"] = prev
        try:
            os.unlink(path)
        except OSError:
            # Ignore errors when cleaning up the temporary DB file (e.g., if already removed).
            pass


@pytest.fixture
def store(temp_db):
    return ClaimRepository(db_path=temp_db)


@pytest.fixture
def owners(temp_db):
    repo = OwnerRepository(db_path=temp_db)
    repo.add_owner("u1", name="Uma Owner", email="u1@example.com")
    repo.add_owner("u2", name="Second Owner", email="u2@example.com")
    return repo


@pytest.fixture
def screener():
    """Fraud screener double without the status-reporting capability."""
    double = MagicMock(spec=["detect_fraud"])
    double.detect_fraud.return_value = make_fraud_result()
    return double


@pytest.fixture
def oracle():
    double = MagicMock(spec=["verify_claim"])
    double.verify_claim.return_value = "approved"
    return double


@pytest.fixture
def notifier():
    return MagicMock(spec=["send_submitted", "send_status_changed", "send_processed"])


@pytest.fixture
def make_orchestrator(store, owners, screener, oracle, notifier):
    """Factory building orchestrators over the temp DB; shuts them down after the test."""
    created = []

    def _make(**overrides):
        kwargs = {
            "store": store,
            "fraud_screener": screener,
            "verdict_oracle": oracle,
            "notifier": notifier,
            "owner_lookup": owners,
            "config": dict(TEST_ORCHESTRATOR_CONFIG),
        }
        kwargs.update(overrides)
        orchestrator = ClaimLifecycleOrchestrator(**kwargs)
        created.append(orchestrator)
        return orchestrator

    yield _make
    for orchestrator in created:
        orchestrator.shutdown(wait=True)


@pytest.fixture
def orchestrator(make_orchestrator):
    return make_orchestrator()


@pytest.fixture
def fraud_result():
    """Factory for FraudResult values returned by screener doubles."""
    return make_fraud_result
