"""Rule-based verdict oracle."""

import re
from typing import Any

from claim_lifecycle.config.settings import get_oracle_config
from claim_lifecycle.services.state_machine import VERDICT_APPROVED, VERDICT_REJECTED

VERDICT_NEEDS_REVIEW = "needs_review"


class RuleBasedVerdictOracle:
    """Decides claims from their description.

    Descriptions naming an excluded peril are rejected; descriptions too short
    to assess get ``needs_review`` (the claim stays pending); everything else is
    approved.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        self._config = config or get_oracle_config()
        self._excluded = [
            re.compile(rf"\b{re.escape(peril)}\b", re.I)
            for peril in self._config["excluded_perils"]
        ]

    def verify_claim(self, claim_id: str, description: str) -> str:
        text = (description or "").strip()
        if any(pattern.search(text) for pattern in self._excluded):
            return VERDICT_REJECTED
        if len(text) < self._config["min_description_length"]:
            return VERDICT_NEEDS_REVIEW
        return VERDICT_APPROVED
