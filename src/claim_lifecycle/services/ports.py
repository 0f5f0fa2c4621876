"""Collaborator contracts the orchestrator depends on."""

from typing import Any, Optional, Protocol, runtime_checkable

from claim_lifecycle.models.claim import (
    Claim,
    ClaimInput,
    ClaimStatus,
    FraudResult,
    Owner,
    ServiceStatus,
)


@runtime_checkable
class ClaimStore(Protocol):
    """Durable keyed storage of claim records."""

    def create(self, claim_input: ClaimInput, owner_id: str) -> Claim: ...

    def get(self, claim_id: str) -> Optional[Claim]: ...

    def list_by_owner(self, owner_id: str) -> list[Claim]: ...

    def list_all(self) -> list[Claim]: ...

    def update(self, claim: Claim) -> Claim: ...

    def delete(self, claim: Claim) -> None: ...

    def count_where(self, **criteria: Any) -> int: ...


@runtime_checkable
class FraudScreener(Protocol):
    """Scores a claim for fraud indicators."""

    def detect_fraud(self, claim: Claim) -> FraudResult: ...


@runtime_checkable
class StatusReportingFraudScreener(FraudScreener, Protocol):
    """Fraud screener that can also report its own health."""

    def get_service_status(self) -> ServiceStatus: ...


@runtime_checkable
class VerdictOracle(Protocol):
    """External decision source consulted after a claim clears screening."""

    def verify_claim(self, claim_id: str, description: str) -> str: ...


@runtime_checkable
class Notifier(Protocol):
    """Delivers claim notifications to owners."""

    def send_submitted(self, claim: Claim, owner: Owner) -> None: ...

    def send_status_changed(
        self,
        claim: Claim,
        owner: Owner,
        previous_status: ClaimStatus,
        new_status: ClaimStatus,
        remarks: Optional[str] = None,
    ) -> None: ...

    def send_processed(self, claim: Claim, owner: Owner, verdict: str) -> None: ...


@runtime_checkable
class OwnerLookup(Protocol):
    """Resolves owner profiles for notifications."""

    def find_owner(self, owner_id: str) -> Optional[Owner]: ...
