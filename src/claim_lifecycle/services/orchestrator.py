"""Claim lifecycle orchestrator.

Coordinates the claim store, fraud screener, verdict oracle, notifier, and
owner lookup:

- submission creates a pending claim and schedules fraud screening in the
  background;
- fraud screening runs at most once per claim and flags fraudulent claims;
- advancing a claim screens it first if needed, then consults the verdict
  oracle unless the claim was flagged;
- notifications are best-effort and never affect an operation's outcome.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Optional

from claim_lifecycle.config.settings import get_orchestrator_config
from claim_lifecycle.exceptions import (
    ClaimLifecycleError,
    ClaimNotFoundError,
    CollaboratorFailure,
    ForbiddenError,
    InvalidClaimStateError,
    NotificationFailure,
)
from claim_lifecycle.models.claim import (
    AdminClaimUpdate,
    Claim,
    ClaimInput,
    ClaimStatistics,
    ClaimStatus,
    FraudDetectionData,
    FraudResult,
    ServiceStatus,
    VerdictData,
)
from claim_lifecycle.observability.logger import (
    ClaimLogger,
    claim_context,
    get_logger,
    log_claim_event,
)
from claim_lifecycle.services.ports import (
    ClaimStore,
    FraudScreener,
    Notifier,
    OwnerLookup,
    StatusReportingFraudScreener,
    VerdictOracle,
)
from claim_lifecycle.services.state_machine import (
    status_for_screening,
    status_for_verdict,
    transition,
)
from claim_lifecycle.utils.retry import call_with_retry


class ClaimLifecycleOrchestrator:
    """Owns the claim state machine and drives collaborators through it."""

    def __init__(
        self,
        store: ClaimStore,
        fraud_screener: FraudScreener,
        verdict_oracle: VerdictOracle,
        notifier: Notifier,
        owner_lookup: OwnerLookup,
        logger: ClaimLogger | logging.Logger | None = None,
        config: dict[str, Any] | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        cfg = {**get_orchestrator_config(), **(config or {})}
        self._store = store
        self._screener = fraud_screener
        self._oracle = verdict_oracle
        self._notifier = notifier
        self._owners = owner_lookup
        self._logger = logger or get_logger(__name__)
        self._serialize_screening = cfg["serialize_screening"]
        self._retry_kwargs = {
            "max_attempts": cfg["retry_attempts"],
            "min_wait": cfg["retry_min_wait"],
            "max_wait": cfg["retry_max_wait"],
        }
        # Status reporting is a construction-time capability of the screener
        self._screener_reports_status = isinstance(
            fraud_screener, StatusReportingFraudScreener
        )
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=cfg["background_workers"],
            thread_name_prefix="fraud-screening",
        )
        self._locks_guard = threading.Lock()
        self._screening_locks: dict[str, list] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background worker pool, optionally draining queued screenings."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ClaimLifecycleOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Submission and access
    # ------------------------------------------------------------------

    def submit_claim(self, claim_input: ClaimInput, owner_id: str) -> Claim:
        """Create a pending claim, notify its owner, and queue fraud screening."""
        claim = self._store.create(claim_input, owner_id)
        log_claim_event(
            self._logger, "claim_submitted", claim_id=claim.id, owner_id=owner_id
        )
        self._notify("claim_submitted", claim, self._notifier.send_submitted)
        self.schedule_fraud_screening(claim.id)
        return claim

    def list_claims_for_owner(self, owner_id: str) -> list[Claim]:
        return self._store.list_by_owner(owner_id)

    def list_claims(self) -> list[Claim]:
        """Every claim, newest first, with owner profiles resolved."""
        return [self._with_owner(claim) for claim in self._store.list_all()]

    def get_claim(
        self,
        claim_id: str,
        requester_id: str | None = None,
        is_admin: bool = False,
    ) -> Claim:
        claim = self._load(claim_id)
        if not is_admin and claim.owner_id != requester_id:
            raise ForbiddenError("You can only access your own claims")
        return self._with_owner(claim)

    def update_claim(
        self,
        claim_id: str,
        update: AdminClaimUpdate,
        is_admin: bool = False,
    ) -> Claim:
        """Administrative override of status and/or description.

        Bypasses the state machine and never re-runs screening or the oracle.
        """
        claim = self._load(claim_id)
        if not is_admin:
            raise ForbiddenError("Only administrators can update claims")

        previous_status = claim.status
        saved = self._store.update(
            claim.model_copy(update=update.model_dump(exclude_none=True))
        )
        log_claim_event(
            self._logger,
            "claim_updated_by_admin",
            claim_id=claim_id,
            previous_status=previous_status.value,
            new_status=saved.status.value,
        )

        if update.status is not None and update.status != previous_status:
            remarks = (
                f"Updated description: {update.description}" if update.description else None
            )
            self._notify(
                "claim_status_changed",
                saved,
                self._notifier.send_status_changed,
                previous_status,
                update.status,
                remarks,
                previous_status=previous_status.value,
                new_status=update.status.value,
            )
        return self._with_owner(saved)

    def remove_claim(
        self,
        claim_id: str,
        requester_id: str | None = None,
        is_admin: bool = False,
    ) -> None:
        claim = self._load(claim_id)
        if not is_admin and claim.owner_id != requester_id:
            raise ForbiddenError("You can only delete your own claims")
        self._store.delete(claim)
        log_claim_event(self._logger, "claim_removed", claim_id=claim_id)

    # ------------------------------------------------------------------
    # Fraud screening
    # ------------------------------------------------------------------

    def run_fraud_screening(self, claim_id: str) -> Claim:
        """Screen a claim for fraud once.

        Returns the stored claim unchanged when screening already completed.
        If the screener fails, the claim is still marked as screened (so it is
        never retried) and a CollaboratorFailure is raised.
        """
        with self._screening_lock(claim_id), claim_context(claim_id=claim_id):
            claim = self._load(claim_id)

            if claim.fraud_check_completed:
                self._logger.warning(
                    "Fraud detection already completed for claim %s", claim_id
                )
                return claim

            self._logger.info("Starting fraud detection for claim %s", claim_id)
            try:
                result = FraudResult.model_validate(
                    self._call_collaborator(self._screener.detect_fraud, claim)
                )
                metadata = result.metadata
                detection = FraudDetectionData(
                    reason=result.reason,
                    risk_factors=list(metadata.risk_factors),
                    model_version=metadata.model_version,
                    detected_at=metadata.timestamp or datetime.now(timezone.utc),
                    metadata=metadata.model_dump(mode="json"),
                )
            except Exception as exc:
                self._logger.error(
                    "Fraud detection failed for claim %s: %s",
                    claim_id,
                    exc,
                    exc_info=exc,
                )
                self._store.update(claim.model_copy(update={"fraud_check_completed": True}))
                raise CollaboratorFailure("fraud_screener", claim_id, str(exc)) from exc

            saved = self._store.update(
                claim.model_copy(
                    update={
                        "fraud_check_completed": True,
                        "is_fraudulent": result.is_fraudulent,
                        "fraud_confidence_score": result.confidence_score,
                        "fraud_detection_data": detection,
                        "status": status_for_screening(result.is_fraudulent, claim.status),
                    }
                )
            )

            if result.is_fraudulent:
                self._logger.warning(
                    "Claim %s flagged as fraudulent (confidence: %.2f)",
                    claim_id,
                    result.confidence_score,
                )
            log_claim_event(
                self._logger,
                "fraud_screening_completed",
                claim_id=claim_id,
                outcome="FRAUDULENT" if result.is_fraudulent else "LEGITIMATE",
                confidence=result.confidence_score,
            )
            return saved

    def schedule_fraud_screening(self, claim_id: str) -> Optional[Future]:
        """Queue fraud screening on the worker pool without waiting for it.

        The returned future always resolves (to the claim, or None on failure);
        it exists for shutdown and tests, callers are not expected to use it.
        Returns None when the pool no longer accepts work; the claim then
        stays unscreened until screened synchronously.
        """
        try:
            return self._executor.submit(self._screen_in_background, claim_id)
        except Exception as exc:
            log_claim_event(
                self._logger,
                "screening_not_scheduled",
                claim_id=claim_id,
                level=logging.WARNING,
                error=str(exc),
            )
            return None

    def _screen_in_background(self, claim_id: str) -> Optional[Claim]:
        try:
            return self.run_fraud_screening(claim_id)
        except Exception as exc:
            # Screener failures are already logged inside run_fraud_screening
            log_claim_event(
                self._logger,
                "background_screening_failed",
                claim_id=claim_id,
                level=logging.DEBUG if isinstance(exc, CollaboratorFailure) else logging.WARNING,
                error=str(exc),
            )
            return None

    def get_fraud_screening_status(self) -> ServiceStatus:
        if not self._screener_reports_status:
            return ServiceStatus(
                healthy=True, message="Service status check not implemented"
            )
        try:
            return self._screener.get_service_status()
        except Exception as exc:
            return ServiceStatus(healthy=False, message=str(exc))

    # ------------------------------------------------------------------
    # Verdict processing
    # ------------------------------------------------------------------

    def advance_claim(self, claim_id: str) -> Claim:
        """Screen if needed, then ask the verdict oracle to decide a pending claim."""
        claim = self._load(claim_id)
        if claim.status != ClaimStatus.PENDING:
            raise InvalidClaimStateError(
                f"Claim {claim_id} already processed (status: {claim.status.value})",
                claim_id=claim_id,
            )

        try:
            if not claim.fraud_check_completed:
                self.run_fraud_screening(claim_id)
                claim = self._load(claim_id)

            if claim.is_fraudulent:
                self._logger.warning(
                    "Claim %s flagged as fraudulent, skipping oracle verification",
                    claim_id,
                )
                return self._with_owner(claim)

            if claim.status != ClaimStatus.PENDING:
                raise InvalidClaimStateError(
                    f"Claim {claim_id} left pending during processing "
                    f"(status: {claim.status.value})",
                    claim_id=claim_id,
                )

            try:
                verdict = self._call_collaborator(
                    self._oracle.verify_claim, claim.id, claim.description
                )
            except Exception as exc:
                raise CollaboratorFailure("verdict_oracle", claim_id, str(exc)) from exc

            previous_status = claim.status
            new_status = transition(previous_status, status_for_verdict(verdict))
            saved = self._store.update(
                claim.model_copy(
                    update={
                        "status": new_status,
                        "verdict_data": VerdictData(
                            verified_at=datetime.now(timezone.utc), verdict=verdict
                        ),
                    }
                )
            )
        except ClaimLifecycleError as exc:
            self._logger.error("Failed to process claim %s: %s", claim_id, exc)
            raise

        self._notify(
            "claim_processed",
            saved,
            self._notifier.send_processed,
            verdict,
            verdict=verdict,
        )
        log_claim_event(
            self._logger,
            "claim_processed",
            claim_id=claim_id,
            previous_status=previous_status.value,
            new_status=new_status.value,
            verdict=verdict,
        )
        return self._with_owner(saved)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self) -> ClaimStatistics:
        """Counts by status and screening state, each from its own query."""
        count = self._store.count_where
        total = count()
        completed = count(fraud_check_completed=True)
        return ClaimStatistics(
            total=total,
            pending=count(status=ClaimStatus.PENDING),
            approved=count(status=ClaimStatus.APPROVED),
            rejected=count(status=ClaimStatus.REJECTED),
            flagged=count(status=ClaimStatus.FLAGGED),
            fraudulent=count(is_fraudulent=True),
            fraud_check_completed=completed,
            fraud_check_pending=max(total - completed, 0),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, claim_id: str) -> Claim:
        claim = self._store.get(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim

    def _with_owner(self, claim: Claim) -> Claim:
        try:
            owner = self._owners.find_owner(claim.owner_id)
        except Exception as exc:
            self._logger.warning(
                "Owner lookup failed for claim %s: %s", claim.id, exc
            )
            return claim
        return claim.model_copy(update={"owner": owner})

    def _call_collaborator(self, func: Callable[..., Any], *args: Any) -> Any:
        return call_with_retry(func, *args, **self._retry_kwargs)

    @contextmanager
    def _screening_lock(self, claim_id: str) -> Iterator[None]:
        """Serialize screenings of one claim; a no-op when serialization is off."""
        if not self._serialize_screening:
            yield
            return
        with self._locks_guard:
            entry = self._screening_locks.setdefault(claim_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._screening_locks[claim_id]

    def _notify(
        self,
        event: str,
        claim: Claim,
        send: Callable[..., None],
        *args: Any,
        **context: Any,
    ) -> None:
        """Best-effort notification: failures are logged, never raised."""
        try:
            owner = self._owners.find_owner(claim.owner_id)
            if owner is None:
                self._logger.debug(
                    "No owner profile for %s; skipping %s notification",
                    claim.owner_id,
                    event,
                )
                return
            send(claim, owner, *args)
        except Exception as exc:
            failure = NotificationFailure(
                event, claim.id, claim.owner_id, str(exc), **context
            )
            data = failure.to_log_data()
            data.pop("claim_id")
            log_claim_event(
                self._logger,
                "notification_failed",
                claim_id=claim.id,
                level=logging.ERROR,
                exc_info=exc,
                **data,
            )
