"""Notifier that renders claim notifications into the application log."""

from typing import Optional

from claim_lifecycle.models.claim import Claim, ClaimStatus, Owner
from claim_lifecycle.observability.logger import ClaimLogger, get_logger, log_claim_event


class LoggingNotifier:
    """Writes each notification as a structured ``notification_sent`` event."""

    def __init__(self, logger: ClaimLogger | None = None):
        self._logger = logger or get_logger(__name__)

    def _send(self, kind: str, claim: Claim, owner: Owner, message: str, **data) -> None:
        log_claim_event(
            self._logger,
            "notification_sent",
            claim_id=claim.id,
            kind=kind,
            recipient=owner.email or owner.id,
            message=message,
            **data,
        )

    def send_submitted(self, claim: Claim, owner: Owner) -> None:
        greeting = owner.name or owner.id
        self._send(
            "claim_submitted",
            claim,
            owner,
            f"Hello {greeting}, your claim {claim.id} has been received and is pending review.",
        )

    def send_status_changed(
        self,
        claim: Claim,
        owner: Owner,
        previous_status: ClaimStatus,
        new_status: ClaimStatus,
        remarks: Optional[str] = None,
    ) -> None:
        message = (
            f"Claim {claim.id} status changed from {previous_status.value} "
            f"to {new_status.value}."
        )
        if remarks:
            message = f"{message} {remarks}"
        self._send(
            "claim_status_changed",
            claim,
            owner,
            message,
            previous_status=previous_status.value,
            new_status=new_status.value,
        )

    def send_processed(self, claim: Claim, owner: Owner, verdict: str) -> None:
        self._send(
            "claim_processed",
            claim,
            owner,
            f"Claim {claim.id} was verified with verdict '{verdict}'; "
            f"current status is {claim.status.value}.",
            verdict=verdict,
        )
