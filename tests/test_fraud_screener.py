"""Tests for the keyword fraud screener."""

from claim_lifecycle.models.claim import Claim, ClaimStatus
from claim_lifecycle.services.fraud_screener import KNOWN_FRAUD_PATTERNS, KeywordFraudScreener


def _claim(description: str) -> Claim:
    return Claim(id="CLM-TEST0001", owner_id="u1", description=description)


def test_clean_description_is_legitimate():
    """No indicators gives a zero-confidence negative result."""
    result = KeywordFraudScreener().detect_fraud(_claim("Pipe burst in the kitchen"))
    assert result.is_fraudulent is False
    assert result.confidence_score == 0.0
    assert result.reason == "No fraud indicators found"
    assert result.metadata.risk_factors == []
    assert result.metadata.model_version == "keyword-v1"
    assert result.metadata.timestamp is not None


def test_single_keyword_below_threshold():
    """One suspicious keyword is reported but does not flag."""
    result = KeywordFraudScreener().detect_fraud(_claim("Damage looks exaggerated"))
    assert result.is_fraudulent is False
    assert result.confidence_score == 0.2
    assert "exaggerated" in result.reason
    assert result.metadata.risk_factors == ["suspicious_claim_keywords"]


def test_multiple_indicators_flag_claim():
    """Enough indicators cross the fraud threshold."""
    description = (
        "Staged collision on a new policy, witnesses left and damage is beyond repair"
    )
    result = KeywordFraudScreener().detect_fraud(_claim(description))
    assert result.is_fraudulent is True
    assert result.confidence_score >= 0.5
    assert set(result.metadata.risk_factors) >= {
        "staged_incident_keywords",
        "timing_red_flags",
        "suspicious_claim_keywords",
        "damage_fraud_keywords",
    }
    assert result.metadata.model_extra["score"] >= 50


def test_confidence_is_capped():
    """Confidence never exceeds 1.0."""
    every_keyword = " ".join(kw for group in KNOWN_FRAUD_PATTERNS.values() for kw in group)
    result = KeywordFraudScreener().detect_fraud(_claim(every_keyword))
    assert result.confidence_score == 1.0


def test_custom_config():
    """Thresholds come from the injected config."""
    config = {
        "keyword_score": 10,
        "pattern_score": 10,
        "fraud_threshold": 10,
        "max_score": 20,
        "model_version": "strict",
    }
    result = KeywordFraudScreener(config).detect_fraud(_claim("inflated invoice"))
    assert result.is_fraudulent is True
    assert result.confidence_score == 0.5
    assert result.metadata.model_version == "strict"


def test_service_status_is_healthy():
    """The keyword screener reports itself healthy."""
    status = KeywordFraudScreener().get_service_status()
    assert status.healthy is True
    assert "keyword-v1" in status.message


def test_status_is_unused_by_screening():
    """Screening does not depend on claim status."""
    claim = _claim("inflated").model_copy(update={"status": ClaimStatus.APPROVED})
    assert KeywordFraudScreener().detect_fraud(claim).is_fraudulent is False
