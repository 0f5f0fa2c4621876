"""Pydantic models for claims."""

from claim_lifecycle.models.claim import (
    AdminClaimUpdate,
    Claim,
    ClaimInput,
    ClaimStatistics,
    ClaimStatus,
    FraudDetectionData,
    FraudMetadata,
    FraudResult,
    Owner,
    ServiceStatus,
    VerdictData,
)

__all__ = [
    "AdminClaimUpdate",
    "Claim",
    "ClaimInput",
    "ClaimStatistics",
    "ClaimStatus",
    "FraudDetectionData",
    "FraudMetadata",
    "FraudResult",
    "Owner",
    "ServiceStatus",
    "VerdictData",
]
