"""Insight service: natural-language text about fraud records.

Every method makes exactly one generator call and never raises because of it.
When the call fails, record creation falls back to a deterministic
acknowledgment built from the record; the analytic methods fall back to a
fixed "try again later" sentence.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from . import prompts
from .narrative import NarrativeGenerator
from .records import FraudRecord

logger = logging.getLogger(__name__)


class InsightService:
    """Builds prompts, calls the narrative generator, substitutes fallbacks."""

    def __init__(self, generator: NarrativeGenerator) -> None:
        self.generator = generator

    def _generate(self, what: str, system_prompt: str, user_prompt: str) -> str | None:
        """Return the generator's text, or None if the call failed."""
        try:
            text = self.generator.complete(system_prompt, user_prompt)
        except Exception as e:
            logger.warning("Error generating %s: %s", what, e)
            return None
        logger.info("Generated %s", what)
        return text

    def narrate_record_creation(self, reference_id: UUID, record: FraudRecord) -> str:
        """Acknowledge a newly recorded incident."""
        logger.info("Generating AI response for fraud record: %s", reference_id)
        text = self._generate(
            "fraud record response",
            prompts.RECORD_CREATION_SYSTEM,
            prompts.record_creation_prompt(reference_id, record),
        )
        if text is None:
            return prompts.record_creation_fallback(reference_id, record)
        return text

    def summarize_patterns(self, records: Sequence[FraudRecord]) -> str:
        """Analyze a set of records for patterns and trends."""
        if not records:
            return prompts.NO_RECORDS_MESSAGE
        logger.info("Analyzing fraud patterns for %d records", len(records))
        text = self._generate(
            "fraud pattern analysis",
            prompts.PATTERN_ANALYSIS_SYSTEM,
            prompts.pattern_analysis_prompt(records),
        )
        return prompts.PATTERN_ANALYSIS_UNAVAILABLE if text is None else text

    def assess_user_risk(self, user_id: str, records: Sequence[FraudRecord]) -> str:
        """Risk profile for one user based on their incident history."""
        logger.info("Generating risk assessment for user: %s", user_id)
        text = self._generate(
            "risk assessment",
            prompts.RISK_ASSESSMENT_SYSTEM,
            prompts.risk_assessment_prompt(user_id, records),
        )
        return prompts.RISK_ASSESSMENT_UNAVAILABLE if text is None else text

    def prevention_tips(self, fraud_type: str, risk_level: str) -> str:
        logger.info(
            "Generating fraud prevention tips for type: %s, risk: %s",
            fraud_type, risk_level,
        )
        text = self._generate(
            "fraud prevention tips",
            prompts.PREVENTION_TIPS_SYSTEM,
            prompts.prevention_tips_prompt(fraud_type, risk_level),
        )
        return prompts.PREVENTION_TIPS_UNAVAILABLE if text is None else text
