"""Fraud incident data model.

``FraudRecord`` is the persisted entity, ``FraudReportRequest`` the transient
input that the record service validates before anything is stored, and
``FraudStatistics`` a snapshot derived from the store on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

# Local date-time, second precision, no offset
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

DESCRIPTION_MAX_LENGTH = 1000
ADDITIONAL_INFO_MAX_LENGTH = 2000

# Accepted amounts are below 10**15 with at most 8 decimal places
AMOUNT_MAX_INTEGER_DIGITS = 15
AMOUNT_MAX_SCALE = 8


class RiskLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def parse(cls, value: str) -> RiskLevel:
        """Normalize a risk level string, raising ValueError if unknown."""
        return cls(value.strip().upper())


def to_decimal(value: Any) -> Decimal:
    """Coerce an int, float, Decimal or numeric string to a finite Decimal.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    else:
        raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def format_timestamp(value: datetime) -> str:
    """Format a timestamp the way every response and prompt shows it."""
    return value.strftime(TIMESTAMP_FORMAT)


@dataclass
class FraudReportRequest:
    """Incoming fraud report, before validation."""

    user_id: str | None
    transaction_id: str | None
    amount: Decimal | int | float | str | None
    currency: str | None
    merchant_name: str | None
    fraud_type: str | None
    risk_level: str | None
    description: str | None = None
    detected_at: datetime | None = None
    ip_address: str | None = None
    location: str | None = None
    additional_info: str | None = None


@dataclass
class FraudRecord:
    """A stored fraud incident."""

    user_id: str
    transaction_id: str
    amount: Decimal
    currency: str
    merchant_name: str
    fraud_type: str
    risk_level: str
    created_at: datetime
    detected_at: datetime
    description: str | None = None
    ip_address: str | None = None
    location: str | None = None
    additional_info: str | None = None
    is_verified: bool = False
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict for storage."""
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "transaction_id": self.transaction_id,
            "amount": str(self.amount),
            "currency": self.currency,
            "merchant_name": self.merchant_name,
            "fraud_type": self.fraud_type,
            "description": self.description,
            "risk_level": self.risk_level,
            "created_at": self.created_at.isoformat(),
            "detected_at": self.detected_at.isoformat(),
            "ip_address": self.ip_address,
            "location": self.location,
            "is_verified": self.is_verified,
            "additional_info": self.additional_info,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FraudRecord:
        """Deserialize a record written by :meth:`to_dict`."""
        return cls(
            id=UUID(data["id"]),
            user_id=data["user_id"],
            transaction_id=data["transaction_id"],
            amount=Decimal(data["amount"]),
            currency=data["currency"],
            merchant_name=data["merchant_name"],
            fraud_type=data["fraud_type"],
            description=data.get("description"),
            risk_level=data["risk_level"],
            created_at=datetime.fromisoformat(data["created_at"]),
            detected_at=datetime.fromisoformat(data["detected_at"]),
            ip_address=data.get("ip_address"),
            location=data.get("location"),
            is_verified=bool(data.get("is_verified", False)),
            additional_info=data.get("additional_info"),
        )


@dataclass(frozen=True)
class FraudStatistics:
    """Aggregate counts computed from the store at call time."""

    total_records: int
    high_risk_records: int
    medium_risk_records: int
    low_risk_records: int
    unverified_records: int

    @property
    def verified_records(self) -> int:
        return self.total_records - self.unverified_records

    def to_dict(self) -> dict[str, int]:
        return {
            "total_records": self.total_records,
            "high_risk_records": self.high_risk_records,
            "medium_risk_records": self.medium_risk_records,
            "low_risk_records": self.low_risk_records,
            "unverified_records": self.unverified_records,
            "verified_records": self.verified_records,
        }
