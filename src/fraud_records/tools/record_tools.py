"""Record tools: create, fetch, list and count fraud records."""

from __future__ import annotations

from typing import Any

from ..records import FraudReportRequest
from ..service import RECENT_WINDOW_DAYS, RecordService
from .registry import Tool, failure, timestamp
from .schema import DATETIME, NUMBER, STRING, UUID_TYPE, ArgumentSpec, DecodedArguments
from .serializers import record_details, record_summary

RECENT_PERIOD = f"Last {RECENT_WINDOW_DAYS} days"

FRAUD_REPORT_ARGUMENTS = [
    ArgumentSpec("user_id", STRING, "User ID associated with the fraud"),
    ArgumentSpec("transaction_id", STRING, "Transaction ID of the fraudulent transaction"),
    ArgumentSpec("amount", NUMBER, "Amount involved in the fraud"),
    ArgumentSpec("currency", STRING, "Currency of the transaction"),
    ArgumentSpec("merchant_name", STRING, "Name of the merchant"),
    ArgumentSpec(
        "fraud_type", STRING,
        "Type of fraud (e.g., credit_card_fraud, identity_theft)",
    ),
    ArgumentSpec("description", STRING, "Description of the fraud incident"),
    ArgumentSpec("risk_level", STRING, "Risk level: HIGH, MEDIUM, or LOW"),
    ArgumentSpec(
        "detected_at", DATETIME, "Detection timestamp (ISO format)", required=False
    ),
    ArgumentSpec("ip_address", STRING, "IP address of the fraudster", required=False),
    ArgumentSpec("location", STRING, "Geographic location", required=False),
    ArgumentSpec("additional_info", STRING, "Additional information", required=False),
]


def report_request(args: DecodedArguments) -> FraudReportRequest:
    """Typed fraud report from decoded create arguments."""
    return FraudReportRequest(
        user_id=args["user_id"],
        transaction_id=args["transaction_id"],
        amount=args["amount"],
        currency=args["currency"],
        merchant_name=args["merchant_name"],
        fraud_type=args["fraud_type"],
        description=args["description"],
        risk_level=args["risk_level"],
        detected_at=args.get("detected_at"),
        ip_address=args.get("ip_address"),
        location=args.get("location"),
        additional_info=args.get("additional_info"),
    )


def record_tools(records: RecordService) -> list[Tool]:
    """Build the record tools bound to a record service."""

    def create_fraud_record(args: DecodedArguments) -> dict[str, Any]:
        record_id = records.create_record(report_request(args))
        return {
            "reference_id": str(record_id),
            "message": "Fraud record created successfully",
            "created_at": timestamp(records.clock),
        }

    def get_fraud_record(args: DecodedArguments) -> dict[str, Any]:
        reference_id = args["reference_id"]
        record = records.get_record(reference_id)
        if record is None:
            return failure(f"Fraud record not found with ID: {reference_id}")
        return {"fraud_record": record_details(record)}

    def get_user_fraud_records(args: DecodedArguments) -> dict[str, Any]:
        user_id = args["user_id"]
        user_records = records.get_records_by_user(user_id)
        return {
            "user_id": user_id,
            "total_records": len(user_records),
            "fraud_records": [record_summary(r) for r in user_records],
        }

    def get_fraud_statistics(args: DecodedArguments) -> dict[str, Any]:
        return {
            "statistics": records.get_statistics().to_dict(),
            "generated_at": timestamp(records.clock),
        }

    def get_recent_fraud_records(args: DecodedArguments) -> dict[str, Any]:
        recent = records.get_recent_records()
        return {
            "total_records": len(recent),
            "period": RECENT_PERIOD,
            "fraud_records": [record_summary(r, include_user=True) for r in recent],
        }

    return [
        Tool(
            name="create_fraud_record",
            description="Create a new fraud record with the provided fraud data",
            arguments=FRAUD_REPORT_ARGUMENTS,
            handler=create_fraud_record,
            failure_message="Failed to create fraud record",
        ),
        Tool(
            name="get_fraud_record",
            description="Retrieve a fraud record by its reference ID",
            arguments=[
                ArgumentSpec("reference_id", UUID_TYPE, "Reference ID of the fraud record"),
            ],
            handler=get_fraud_record,
            failure_message="Failed to retrieve fraud record",
        ),
        Tool(
            name="get_user_fraud_records",
            description="Retrieve all fraud records associated with a specific user ID",
            arguments=[ArgumentSpec("user_id", STRING, "User ID to search for")],
            handler=get_user_fraud_records,
            failure_message="Failed to retrieve user fraud records",
        ),
        Tool(
            name="get_fraud_statistics",
            description=(
                "Retrieve fraud statistics including total records, "
                "risk levels, and verification status"
            ),
            handler=get_fraud_statistics,
            failure_message="Failed to retrieve fraud statistics",
        ),
        Tool(
            name="get_recent_fraud_records",
            description=f"Retrieve fraud records from the last {RECENT_WINDOW_DAYS} days",
            handler=get_recent_fraud_records,
            failure_message="Failed to retrieve recent fraud records",
        ),
    ]
