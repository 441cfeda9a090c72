"""Tests for the AI-assisted tools, with working and failing generators."""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

import pytest

from fraud_records import prompts
from fraud_records.insights import InsightService
from fraud_records.tools import build_registry


@pytest.fixture()
def offline_registry(records, failing_generator):
    """Registry whose generator always fails."""
    return build_registry(records, InsightService(failing_generator))


class TestCreateWithAi:
    """Tests for create_fraud_record_with_ai."""

    def test_returns_record_and_narrative(self, registry, report_args, generator) -> None:
        result = registry.dispatch("create_fraud_record_with_ai", report_args())
        assert result["success"] is True
        assert result["ai_response"] == "Generated narrative."
        assert result["fraud_record"]["id"] == result["reference_id"]
        assert result["fraud_record"]["risk_level"] == "HIGH"
        assert result["message"] == "Fraud record created successfully with AI-generated response"
        assert len(generator.calls) == 1

    def test_generator_failure_uses_fallback(self, offline_registry, report_args) -> None:
        result = offline_registry.dispatch("create_fraud_record_with_ai", report_args())
        assert result["success"] is True
        assert result["ai_response"].startswith("Fraud Incident Recorded")
        assert result["reference_id"] in result["ai_response"]

    def test_validation_failure_skips_generator(self, registry, report_args, generator) -> None:
        result = registry.dispatch("create_fraud_record_with_ai", report_args(amount=0))
        assert result["success"] is False
        assert result["field"] == "amount"
        assert generator.calls == []


class TestAnalyzeFraudPatterns:
    """Tests for analyze_fraud_patterns."""

    def _seed(self, registry, report_args) -> None:
        registry.dispatch("create_fraud_record", report_args(transaction_id="h1", risk_level="HIGH"))
        registry.dispatch(
            "create_fraud_record",
            report_args(transaction_id="l1", risk_level="LOW", fraud_type="phishing"),
        )

    def test_no_filters(self, registry, report_args) -> None:
        self._seed(registry, report_args)
        result = registry.dispatch("analyze_fraud_patterns", {})
        assert result["success"] is True
        assert result["total_records_analyzed"] == 2
        assert result["analysis_period"] == "Last 30 days"
        assert result["ai_analysis"] == "Generated narrative."

    def test_filters_case_insensitive(self, registry, report_args) -> None:
        self._seed(registry, report_args)
        result = registry.dispatch("analyze_fraud_patterns", {"risk_level": "low", "fraud_type": "PHISHING"})
        assert result["total_records_analyzed"] == 1

    def test_days_is_informational(self, registry, report_args, clock) -> None:
        self._seed(registry, report_args)
        clock.advance(days=10)
        result = registry.dispatch("analyze_fraud_patterns", {"days": 7})
        assert result["total_records_analyzed"] == 2
        assert result["analysis_period"] == "Last 30 days"

    def test_empty_selection_skips_generator(self, registry, generator) -> None:
        result = registry.dispatch("analyze_fraud_patterns", {"risk_level": "HIGH"})
        assert result["total_records_analyzed"] == 0
        assert result["ai_analysis"] == prompts.NO_RECORDS_MESSAGE
        assert generator.calls == []

    def test_generator_failure(self, offline_registry, report_args) -> None:
        self._seed(offline_registry, report_args)
        result = offline_registry.dispatch("analyze_fraud_patterns", {})
        assert result["success"] is True
        assert result["ai_analysis"] == prompts.PATTERN_ANALYSIS_UNAVAILABLE

    def test_invalid_days(self, registry) -> None:
        result = registry.dispatch("analyze_fraud_patterns", {"days": "week"})
        assert result["success"] is False
        assert result["message"] == "Failed to analyze fraud patterns"


class TestUserRiskAssessment:
    """Tests for generate_user_risk_assessment."""

    def test_statistics(self, registry, report_args) -> None:
        for tx, level, amount in [("a", "HIGH", 100.0), ("b", "HIGH", 50.5), ("c", "LOW", 9.5)]:
            registry.dispatch(
                "create_fraud_record",
                report_args(transaction_id=tx, risk_level=level, amount=amount),
            )
        result = registry.dispatch("generate_user_risk_assessment", {"user_id": "u1"})
        assert result["success"] is True
        assert result["statistics"] == {
            "total_incidents": 3,
            "high_risk_incidents": 2,
            "medium_risk_incidents": 0,
            "low_risk_incidents": 1,
            "total_amount": 160.0,
        }
        assert result["risk_assessment"] == "Generated narrative."

    def test_user_without_records(self, registry) -> None:
        result = registry.dispatch("generate_user_risk_assessment", {"user_id": "ghost"})
        assert result["success"] is True
        assert result["statistics"]["total_incidents"] == 0
        assert result["statistics"]["total_amount"] == 0.0

    def test_generator_failure(self, offline_registry) -> None:
        result = offline_registry.dispatch("generate_user_risk_assessment", {"user_id": "u1"})
        assert result["risk_assessment"] == prompts.RISK_ASSESSMENT_UNAVAILABLE


class TestPreventionTips:
    def test_echoes_parameters(self, registry) -> None:
        result = registry.dispatch(
            "get_fraud_prevention_tips", {"fraud_type": "phishing", "risk_level": "MEDIUM"}
        )
        assert result["success"] is True
        assert result["fraud_type"] == "phishing"
        assert result["risk_level"] == "MEDIUM"
        assert result["prevention_tips"] == "Generated narrative."

    def test_missing_argument(self, registry) -> None:
        result = registry.dispatch("get_fraud_prevention_tips", {"fraud_type": "phishing"})
        assert result["success"] is False
        assert result["message"] == "Failed to generate fraud prevention tips"

    def test_generator_failure(self, offline_registry) -> None:
        result = offline_registry.dispatch(
            "get_fraud_prevention_tips", {"fraud_type": "phishing", "risk_level": "LOW"}
        )
        assert result["prevention_tips"] == prompts.PREVENTION_TIPS_UNAVAILABLE


class TestDashboard:
    """Tests for get_fraud_dashboard."""

    def test_empty_store(self, registry, generator) -> None:
        result = registry.dispatch("get_fraud_dashboard", {})
        data = result["dashboard_data"]
        assert result["success"] is True
        assert data["statistics"]["total_records"] == 0
        assert data["recent_records_count"] == 0
        assert data["high_risk_unverified_count"] == 0
        assert data["ai_insights"] == prompts.NO_RECORDS_MESSAGE
        assert generator.calls == []

    def test_counts(self, registry, records, report_args, clock) -> None:
        clock.now = clock.now - timedelta(days=40)
        registry.dispatch("create_fraud_record", report_args(transaction_id="old"))
        clock.now = clock.now + timedelta(days=40)
        registry.dispatch("create_fraud_record", report_args(transaction_id="new"))
        verified = registry.dispatch("create_fraud_record", report_args(transaction_id="checked"))
        records.update_verification(UUID(verified["reference_id"]), True)

        data = registry.dispatch("get_fraud_dashboard", {})["dashboard_data"]
        assert data["statistics"]["total_records"] == 3
        assert data["recent_records_count"] == 2
        assert data["high_risk_unverified_count"] == 2
        assert data["ai_insights"] == "Generated narrative."
