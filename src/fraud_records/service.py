"""Record service: validation, idempotent creation, queries and statistics."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

from .errors import DuplicateTransactionError, NotFoundError, ValidationError
from .records import (
    ADDITIONAL_INFO_MAX_LENGTH,
    AMOUNT_MAX_INTEGER_DIGITS,
    AMOUNT_MAX_SCALE,
    DESCRIPTION_MAX_LENGTH,
    FraudRecord,
    FraudReportRequest,
    FraudStatistics,
    RiskLevel,
    to_decimal,
)
from .store import RecordStore

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 30

_REQUIRED_TEXT_FIELDS = (
    ("user_id", "User ID is required"),
    ("transaction_id", "Transaction ID is required"),
    ("currency", "Currency is required"),
    ("merchant_name", "Merchant name is required"),
    ("fraud_type", "Fraud type is required"),
)


def _newest_first(records: list[FraudRecord]) -> list[FraudRecord]:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


class RecordService:
    """Owns the business rules for fraud records.

    Args:
        store: Backing record store.
        clock: Returns the current local time. Injected so time windows
            can be tested.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.clock = clock

    def create_record(self, request: FraudReportRequest) -> UUID:
        """Validate and store a fraud report.

        A report for a transaction that is already recorded is a duplicate
        delivery: the existing record's id is returned and nothing is written.

        Returns:
            Id of the new or the pre-existing record.

        Raises:
            ValidationError: If a required field is missing or invalid.
        """
        logger.info(
            "Creating fraud record for user: %s, transaction: %s",
            request.user_id, request.transaction_id,
        )
        risk_level, amount = self._validate(request)

        existing = self.get_record_by_transaction(request.transaction_id)
        if existing is not None:
            logger.warning(
                "Fraud record already exists for transaction: %s",
                request.transaction_id,
            )
            return existing.id

        now = self.clock()
        record = FraudRecord(
            id=uuid4(),
            user_id=request.user_id,
            transaction_id=request.transaction_id,
            amount=amount,
            currency=request.currency,
            merchant_name=request.merchant_name,
            fraud_type=request.fraud_type,
            description=request.description,
            risk_level=risk_level.value,
            created_at=now,
            detected_at=request.detected_at or now,
            ip_address=request.ip_address,
            location=request.location,
            additional_info=request.additional_info,
            is_verified=False,
        )
        try:
            saved = self.store.insert(record)
        except DuplicateTransactionError:
            # A concurrent report for the same transaction won the insert
            winner = self.get_record_by_transaction(request.transaction_id)
            if winner is None:
                raise
            logger.warning(
                "Lost insert race for transaction %s, returning %s",
                request.transaction_id, winner.id,
            )
            return winner.id

        logger.info("Fraud record created successfully with ID: %s", saved.id)
        return saved.id

    def get_record(self, record_id: UUID) -> FraudRecord | None:
        logger.debug("Retrieving fraud record with ID: %s", record_id)
        return self.store.find_by_id(record_id)

    def get_record_by_transaction(self, transaction_id: str) -> FraudRecord | None:
        logger.debug("Retrieving fraud record for transaction: %s", transaction_id)
        matches = self.store.find_by_field("transaction_id", transaction_id)
        return matches[0] if matches else None

    def get_records_by_user(self, user_id: str) -> list[FraudRecord]:
        logger.debug("Retrieving fraud records for user: %s", user_id)
        return self.store.find_by_field("user_id", user_id)

    def get_records_by_risk_level(self, risk_level: str) -> list[FraudRecord]:
        logger.debug("Retrieving fraud records for risk level: %s", risk_level)
        return self.store.find_by_field("risk_level", risk_level.strip().upper())

    def get_recent_records(self) -> list[FraudRecord]:
        """Records created within the last 30 days, newest first."""
        now = self.clock()
        since = now - timedelta(days=RECENT_WINDOW_DAYS)
        logger.debug("Retrieving fraud records from the last %d days", RECENT_WINDOW_DAYS)
        return _newest_first(self.store.find_by_date_range("created_at", since, now))

    def get_high_risk_unverified(self) -> list[FraudRecord]:
        """Unverified HIGH risk records, newest first."""
        logger.debug("Retrieving high-risk unverified fraud records")
        records = self.store.find_by_field("risk_level", RiskLevel.HIGH.value)
        return _newest_first([r for r in records if not r.is_verified])

    def update_verification(self, record_id: UUID, verified: bool) -> None:
        """Set the verification flag of a record.

        Raises:
            NotFoundError: If no record has this id.
        """
        logger.info(
            "Updating verification status for fraud record: %s to %s",
            record_id, verified,
        )
        record = self.store.find_by_id(record_id)
        if record is None:
            logger.warning("Fraud record not found with ID: %s", record_id)
            raise NotFoundError(f"Fraud record not found with ID: {record_id}")
        self.store.update(replace(record, is_verified=bool(verified)))
        logger.info("Verification status updated successfully")

    def get_statistics(self) -> FraudStatistics:
        """Compute counts from the store's current state."""
        logger.debug("Calculating fraud statistics")
        return FraudStatistics(
            total_records=self.store.count(),
            high_risk_records=self.store.count_by_field("risk_level", RiskLevel.HIGH.value),
            medium_risk_records=self.store.count_by_field("risk_level", RiskLevel.MEDIUM.value),
            low_risk_records=self.store.count_by_field("risk_level", RiskLevel.LOW.value),
            unverified_records=self.store.count_by_field("is_verified", False),
        )

    @staticmethod
    def _validate(request: FraudReportRequest) -> tuple[RiskLevel, Decimal]:
        """Check required fields, return the normalized risk level and amount."""
        for name, message in _REQUIRED_TEXT_FIELDS:
            value = getattr(request, name)
            if value is None or not str(value).strip():
                raise ValidationError(name, message)

        if request.amount is None:
            raise ValidationError("amount", "Amount is required")
        try:
            amount = to_decimal(request.amount)
        except ValueError:
            raise ValidationError("amount", "Amount must be a number") from None
        if amount <= 0:
            raise ValidationError("amount", "Amount must be positive")
        if amount.adjusted() >= AMOUNT_MAX_INTEGER_DIGITS:
            raise ValidationError(
                "amount",
                f"Amount must have at most {AMOUNT_MAX_INTEGER_DIGITS} integer digits",
            )
        if -amount.normalize().as_tuple().exponent > AMOUNT_MAX_SCALE:
            raise ValidationError(
                "amount", f"Amount must have at most {AMOUNT_MAX_SCALE} decimal places"
            )

        if request.risk_level is None or not request.risk_level.strip():
            raise ValidationError("risk_level", "Risk level is required")
        try:
            risk_level = RiskLevel.parse(request.risk_level)
        except ValueError:
            raise ValidationError(
                "risk_level", "Risk level must be HIGH, MEDIUM, or LOW"
            ) from None

        if request.description and len(request.description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                "description",
                f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters",
            )
        if (
            request.additional_info
            and len(request.additional_info) > ADDITIONAL_INFO_MAX_LENGTH
        ):
            raise ValidationError(
                "additional_info",
                f"Additional info must be at most {ADDITIONAL_INFO_MAX_LENGTH} characters",
            )
        return risk_level, amount
