"""Claim lifecycle services: orchestrator, state machine, and default collaborators."""

from claim_lifecycle.services.fraud_screener import KeywordFraudScreener
from claim_lifecycle.services.notifier import LoggingNotifier
from claim_lifecycle.services.oracle import RuleBasedVerdictOracle
from claim_lifecycle.services.orchestrator import ClaimLifecycleOrchestrator


def build_orchestrator(db_path: str | None = None, **overrides) -> ClaimLifecycleOrchestrator:
    """Wire an orchestrator with the SQLite store and the built-in collaborators.

    Keyword overrides replace individual collaborators or constructor options
    (e.g. ``fraud_screener=...``, ``config={...}``).
    """
    from claim_lifecycle.db.repository import ClaimRepository, OwnerRepository

    kwargs = {
        "store": ClaimRepository(db_path=db_path),
        "fraud_screener": KeywordFraudScreener(),
        "verdict_oracle": RuleBasedVerdictOracle(),
        "notifier": LoggingNotifier(),
        "owner_lookup": OwnerRepository(db_path=db_path),
    }
    kwargs.update(overrides)
    return ClaimLifecycleOrchestrator(**kwargs)


__all__ = [
    "ClaimLifecycleOrchestrator",
    "KeywordFraudScreener",
    "LoggingNotifier",
    "RuleBasedVerdictOracle",
    "build_orchestrator",
]
