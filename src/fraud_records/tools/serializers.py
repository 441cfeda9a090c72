"""Record-to-response-map conversion."""

from __future__ import annotations

from typing import Any

from ..records import FraudRecord, format_timestamp


def record_details(record: FraudRecord) -> dict[str, Any]:
    """Every field of a record."""
    return {
        "id": str(record.id),
        "user_id": record.user_id,
        "transaction_id": record.transaction_id,
        "amount": float(record.amount),
        "currency": record.currency,
        "merchant_name": record.merchant_name,
        "fraud_type": record.fraud_type,
        "description": record.description,
        "risk_level": record.risk_level,
        "created_at": format_timestamp(record.created_at),
        "detected_at": format_timestamp(record.detected_at),
        "ip_address": record.ip_address,
        "location": record.location,
        "is_verified": record.is_verified,
        "additional_info": record.additional_info,
    }


def record_summary(record: FraudRecord, include_user: bool = False) -> dict[str, Any]:
    """Listing entry for a record; ``include_user`` adds the user id."""
    summary: dict[str, Any] = {"id": str(record.id)}
    if include_user:
        summary["user_id"] = record.user_id
    summary.update({
        "transaction_id": record.transaction_id,
        "amount": float(record.amount),
        "currency": record.currency,
        "merchant_name": record.merchant_name,
        "fraud_type": record.fraud_type,
        "risk_level": record.risk_level,
        "created_at": format_timestamp(record.created_at),
        "is_verified": record.is_verified,
    })
    return summary
