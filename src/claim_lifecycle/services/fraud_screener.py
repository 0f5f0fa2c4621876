"""Keyword-based fraud screener.

Scores a claim description against known fraud indicator phrases and converts
the score into a fraud determination with a confidence in [0, 1].
"""

import logging
from datetime import datetime, timezone
from typing import Any

from claim_lifecycle.config.settings import get_fraud_config
from claim_lifecycle.models.claim import Claim, FraudMetadata, FraudResult, ServiceStatus

logger = logging.getLogger(__name__)

# Known fraud patterns and indicators
KNOWN_FRAUD_PATTERNS = {
    "staged_incident_keywords": [
        "multiple occupants",
        "all passengers injured",
        "witnesses left",
        "witness left",
        "no witnesses",
        "brake checked",
        "sudden stop",
    ],
    "suspicious_claim_keywords": [
        "staged",
        "inflated",
        "pre-existing",
        "inconsistent",
        "misrepresentation",
        "exaggerated",
        "fabricated",
        "prior claims",
        "suspicious damage",
    ],
    "timing_red_flags": [
        "new policy",
        "policy just started",
        "recently insured",
        "just purchased",
        "first day",
    ],
    "damage_fraud_keywords": [
        "total destruction",
        "complete loss",
        "beyond repair",
        "catastrophic",
        "all components damaged",
    ],
}

# Pattern groups scored once per group rather than per keyword
_PATTERN_GROUPS = ("staged_incident_keywords", "timing_red_flags")


class KeywordFraudScreener:
    """Fraud screener that matches description text against known patterns."""

    def __init__(self, config: dict[str, Any] | None = None):
        self._config = config or get_fraud_config()

    def detect_fraud(self, claim: Claim) -> FraudResult:
        text = (claim.description or "").lower()
        cfg = self._config
        score = 0
        risk_factors: list[str] = []
        keywords_found: list[str] = []

        for group in _PATTERN_GROUPS:
            matched = [kw for kw in KNOWN_FRAUD_PATTERNS[group] if kw in text]
            if matched:
                risk_factors.append(group)
                keywords_found.extend(matched)
                score += cfg["pattern_score"]

        for group in ("suspicious_claim_keywords", "damage_fraud_keywords"):
            for keyword in KNOWN_FRAUD_PATTERNS[group]:
                if keyword in text:
                    keywords_found.append(keyword)
                    score += cfg["keyword_score"]
                    if group not in risk_factors:
                        risk_factors.append(group)

        is_fraudulent = score >= cfg["fraud_threshold"]
        confidence = min(score / cfg["max_score"], 1.0) if cfg["max_score"] > 0 else 0.0
        if is_fraudulent:
            reason = f"Fraud indicators matched: {', '.join(keywords_found)}"
        elif keywords_found:
            reason = f"Indicators below threshold: {', '.join(keywords_found)}"
        else:
            reason = "No fraud indicators found"

        logger.debug(
            "Keyword screening for claim %s scored %d (threshold %d)",
            claim.id,
            score,
            cfg["fraud_threshold"],
        )
        return FraudResult(
            is_fraudulent=is_fraudulent,
            confidence_score=confidence,
            reason=reason,
            metadata=FraudMetadata(
                risk_factors=risk_factors,
                model_version=cfg["model_version"],
                timestamp=datetime.now(timezone.utc),
                score=score,
                keywords_found=keywords_found,
            ),
        )

    def get_service_status(self) -> ServiceStatus:
        return ServiceStatus(
            healthy=True,
            message=f"Keyword screener {self._config['model_version']} ready",
        )
