"""Pydantic models for claims, fraud screening results, and verdicts."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ClaimStatus(str, Enum):
    """Lifecycle status of a claim."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class Owner(BaseModel):
    """Profile of the user who submitted a claim."""

    id: str = Field(..., description="Owner (user) ID")
    name: str = Field(default="", description="Display name")
    email: Optional[str] = Field(default=None, description="Contact email")


class ClaimInput(BaseModel):
    """Submission payload for a new claim."""

    description: str = Field(..., min_length=1, description="What happened")


class FraudMetadata(BaseModel):
    """Metadata returned by a fraud screener alongside its verdict."""

    model_config = ConfigDict(extra="allow")

    risk_factors: list[str] = Field(default_factory=list, description="Matched risk factors")
    model_version: Optional[str] = Field(default=None, description="Screener model version")
    timestamp: Optional[datetime] = Field(default=None, description="When screening ran")


class FraudResult(BaseModel):
    """Output of a fraud screener for one claim."""

    is_fraudulent: bool = Field(..., description="Positive fraud determination")
    confidence_score: float = Field(..., ge=0.0, le=1.0, description="Confidence 0.0-1.0")
    reason: str = Field(default="", description="Human-readable explanation")
    metadata: FraudMetadata = Field(default_factory=FraudMetadata)


class FraudDetectionData(BaseModel):
    """Fraud screening record stored on the claim."""

    reason: str = ""
    risk_factors: list[str] = Field(default_factory=list)
    model_version: Optional[str] = None
    detected_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class VerdictData(BaseModel):
    """Verdict oracle record stored on the claim."""

    verified_at: datetime
    verdict: str


class Claim(BaseModel):
    """A claim record as held by the claim store."""

    id: str = Field(..., description="Claim ID assigned by the store")
    owner_id: str = Field(..., description="Submitting user ID")
    description: str = Field(..., description="Claim description")
    status: ClaimStatus = Field(default=ClaimStatus.PENDING)
    fraud_check_completed: bool = Field(default=False)
    is_fraudulent: bool = Field(default=False)
    fraud_confidence_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    fraud_detection_data: Optional[FraudDetectionData] = None
    verdict_data: Optional[VerdictData] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[Owner] = Field(
        default=None, description="Resolved owner profile; never persisted"
    )

    @property
    def fraud_flag_consistent(self) -> bool:
        """True when flagged status agrees with the fraud screening outcome."""
        flagged = self.status == ClaimStatus.FLAGGED
        return flagged == (self.is_fraudulent and self.fraud_check_completed)


class AdminClaimUpdate(BaseModel):
    """Administrative override: only status and description may change."""

    model_config = ConfigDict(extra="forbid")

    status: Optional[ClaimStatus] = None
    description: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _require_a_field(self) -> "AdminClaimUpdate":
        if self.status is None and self.description is None:
            raise ValueError("update must set status or description")
        return self


class ServiceStatus(BaseModel):
    """Health report of a collaborator service."""

    healthy: bool
    message: Optional[str] = None


class ClaimStatistics(BaseModel):
    """Claim counts by status and screening state.

    Each counter comes from its own query, so under concurrent writes the
    counters can disagree slightly with each other (e.g. ``pending + approved +
    rejected + flagged`` may differ from ``total``).
    """

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    flagged: int = 0
    fraudulent: int = 0
    fraud_check_completed: int = 0
    fraud_check_pending: int = 0
