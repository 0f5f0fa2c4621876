"""Error taxonomy for claim lifecycle operations."""

from typing import Any


class ClaimLifecycleError(Exception):
    """Base class for all claim lifecycle errors."""


class ClaimNotFoundError(ClaimLifecycleError, LookupError):
    """Referenced claim does not exist."""

    def __init__(self, claim_id: str):
        super().__init__(f"Claim with ID {claim_id} not found")
        self.claim_id = claim_id


class InvalidClaimStateError(ClaimLifecycleError):
    """Operation attempted on a claim that is not in the required state."""

    def __init__(self, message: str, claim_id: str | None = None):
        super().__init__(message)
        self.claim_id = claim_id


class ForbiddenError(ClaimLifecycleError):
    """Ownership or privilege check failed."""


class CollaboratorFailure(ClaimLifecycleError):
    """The fraud screener or verdict oracle failed for a claim.

    Always raised ``from`` the collaborator's own exception so the original
    traceback stays attached.
    """

    def __init__(self, collaborator: str, claim_id: str, reason: str):
        super().__init__(f"{collaborator} failed for claim {claim_id}: {reason}")
        self.collaborator = collaborator
        self.claim_id = claim_id
        self.reason = reason


class NotificationFailure(ClaimLifecycleError):
    """A notification could not be delivered.

    Only used to carry context into the log; the orchestrator never lets it
    escape to callers.
    """

    def __init__(
        self,
        event: str,
        claim_id: str,
        owner_id: str | None,
        reason: str,
        **context: Any,
    ):
        super().__init__(
            f"Failed to send {event} notification for claim {claim_id}: {reason}"
        )
        self.event = event
        self.claim_id = claim_id
        self.owner_id = owner_id
        self.reason = reason
        self.context = context

    def to_log_data(self) -> dict[str, Any]:
        """Fields to attach to the error log record."""
        return {
            "claim_id": self.claim_id,
            "owner_id": self.owner_id,
            "event_type": self.event,
            "error": self.reason,
            **self.context,
        }
