"""AI-assisted tools combining record queries with generated narrative.

Generator failures never fail these tools: the insight service already
substitutes fallback text.
"""

from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal
from typing import Any

from ..errors import NotFoundError
from ..insights import InsightService
from ..records import RiskLevel
from ..service import RECENT_WINDOW_DAYS, RecordService
from .record_tools import FRAUD_REPORT_ARGUMENTS, RECENT_PERIOD, report_request
from .registry import Tool, timestamp
from .schema import NUMBER, STRING, ArgumentSpec, DecodedArguments
from .serializers import record_details

logger = logging.getLogger(__name__)


def _matches(value: str, wanted: str | None) -> bool:
    """Case-insensitive exact match; an empty filter matches everything."""
    if not wanted or not wanted.strip():
        return True
    return value.casefold() == wanted.strip().casefold()


def insight_tools(records: RecordService, insights: InsightService) -> list[Tool]:
    """Build the AI-assisted tools bound to the record and insight services."""

    def create_fraud_record_with_ai(args: DecodedArguments) -> dict[str, Any]:
        record_id = records.create_record(report_request(args))
        record = records.get_record(record_id)
        if record is None:
            raise NotFoundError(f"Fraud record not found with ID: {record_id}")
        return {
            "reference_id": str(record_id),
            "fraud_record": record_details(record),
            "ai_response": insights.narrate_record_creation(record_id, record),
            "message": "Fraud record created successfully with AI-generated response",
        }

    def analyze_fraud_patterns(args: DecodedArguments) -> dict[str, Any]:
        # The window is fixed; ``days`` is accepted for compatibility only
        logger.debug(
            "Pattern analysis requested for %s days, using %d",
            args.get("days"), RECENT_WINDOW_DAYS,
        )
        selected = [
            r for r in records.get_recent_records()
            if _matches(r.risk_level, args.get("risk_level"))
            and _matches(r.fraud_type, args.get("fraud_type"))
        ]
        return {
            "total_records_analyzed": len(selected),
            "analysis_period": RECENT_PERIOD,
            "ai_analysis": insights.summarize_patterns(selected),
            "generated_at": timestamp(records.clock),
        }

    def generate_user_risk_assessment(args: DecodedArguments) -> dict[str, Any]:
        user_id = args["user_id"]
        user_records = records.get_records_by_user(user_id)
        by_level = Counter(r.risk_level for r in user_records)
        total_amount = sum((r.amount for r in user_records), Decimal("0"))
        return {
            "user_id": user_id,
            "risk_assessment": insights.assess_user_risk(user_id, user_records),
            "statistics": {
                "total_incidents": len(user_records),
                "high_risk_incidents": by_level[RiskLevel.HIGH.value],
                "medium_risk_incidents": by_level[RiskLevel.MEDIUM.value],
                "low_risk_incidents": by_level[RiskLevel.LOW.value],
                "total_amount": float(total_amount),
            },
            "generated_at": timestamp(records.clock),
        }

    def get_fraud_prevention_tips(args: DecodedArguments) -> dict[str, Any]:
        fraud_type = args["fraud_type"]
        risk_level = args["risk_level"]
        return {
            "fraud_type": fraud_type,
            "risk_level": risk_level,
            "prevention_tips": insights.prevention_tips(fraud_type, risk_level),
            "generated_at": timestamp(records.clock),
        }

    def get_fraud_dashboard(args: DecodedArguments) -> dict[str, Any]:
        statistics = records.get_statistics()
        recent = records.get_recent_records()
        high_risk_unverified = records.get_high_risk_unverified()
        return {
            "dashboard_data": {
                "statistics": statistics.to_dict(),
                "recent_records_count": len(recent),
                "high_risk_unverified_count": len(high_risk_unverified),
                "ai_insights": insights.summarize_patterns(recent),
            },
            "generated_at": timestamp(records.clock),
        }

    return [
        Tool(
            name="create_fraud_record_with_ai",
            description=(
                "Create a new fraud record and generate an AI-powered "
                "natural language response"
            ),
            arguments=FRAUD_REPORT_ARGUMENTS,
            handler=create_fraud_record_with_ai,
            failure_message="Failed to create fraud record",
        ),
        Tool(
            name="analyze_fraud_patterns",
            description=(
                "Analyze recent fraud records for patterns and trends, "
                "optionally filtered by risk level and fraud type"
            ),
            arguments=[
                ArgumentSpec(
                    "days", NUMBER,
                    f"Number of days to analyze (informational; the window is "
                    f"always {RECENT_WINDOW_DAYS} days)",
                    required=False, default=RECENT_WINDOW_DAYS,
                ),
                ArgumentSpec("risk_level", STRING, "Filter by risk level", required=False),
                ArgumentSpec("fraud_type", STRING, "Filter by fraud type", required=False),
            ],
            handler=analyze_fraud_patterns,
            failure_message="Failed to analyze fraud patterns",
        ),
        Tool(
            name="generate_user_risk_assessment",
            description="Generate an AI-powered risk assessment for a specific user",
            arguments=[ArgumentSpec("user_id", STRING, "User ID to assess")],
            handler=generate_user_risk_assessment,
            failure_message="Failed to generate risk assessment",
        ),
        Tool(
            name="get_fraud_prevention_tips",
            description="Get AI-generated fraud prevention tips for a fraud type and risk level",
            arguments=[
                ArgumentSpec("fraud_type", STRING, "Type of fraud"),
                ArgumentSpec("risk_level", STRING, "Risk level: HIGH, MEDIUM, or LOW"),
            ],
            handler=get_fraud_prevention_tips,
            failure_message="Failed to generate fraud prevention tips",
        ),
        Tool(
            name="get_fraud_dashboard",
            description=(
                "Get a fraud dashboard with statistics, recent activity "
                "and AI insights"
            ),
            handler=get_fraud_dashboard,
            failure_message="Failed to generate fraud dashboard",
        ),
    ]
