"""Tests for fraud_records.records — data model and coercion helpers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

import pytest

from fraud_records.records import (
    FraudRecord,
    FraudStatistics,
    RiskLevel,
    format_timestamp,
    to_decimal,
)


def _make_record(**overrides: object) -> FraudRecord:
    defaults: dict = {
        "user_id": "u1",
        "transaction_id": "t1",
        "amount": Decimal("42.50"),
        "currency": "EUR",
        "merchant_name": "Acme",
        "fraud_type": "card_fraud",
        "risk_level": "LOW",
        "created_at": datetime(2026, 1, 2, 3, 4, 5),
        "detected_at": datetime(2026, 1, 1, 23, 0, 0),
    }
    defaults.update(overrides)
    return FraudRecord(**defaults)


class TestToDecimal:
    """Tests for to_decimal()."""

    def test_int(self) -> None:
        assert to_decimal(5) == Decimal("5")

    def test_float_keeps_short_repr(self) -> None:
        assert to_decimal(0.1) == Decimal("0.1")

    def test_numeric_string(self) -> None:
        assert to_decimal(" 12.34 ") == Decimal("12.34")

    def test_decimal_passthrough(self) -> None:
        value = Decimal("7.00")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("value", ["abc", "", True, None, [1], "NaN", "Infinity", float("inf")])
    def test_rejects_non_numbers(self, value: object) -> None:
        with pytest.raises(ValueError):
            to_decimal(value)


class TestRiskLevel:
    """Tests for RiskLevel.parse()."""

    def test_normalizes_case_and_whitespace(self) -> None:
        assert RiskLevel.parse(" high ") is RiskLevel.HIGH
        assert RiskLevel.parse("Medium") is RiskLevel.MEDIUM

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError):
            RiskLevel.parse("CRITICAL")

    def test_value_is_plain_string(self) -> None:
        assert RiskLevel.LOW.value == "LOW"


class TestFormatTimestamp:
    def test_second_precision_without_offset(self) -> None:
        assert format_timestamp(datetime(2026, 3, 15, 9, 5, 7, 123456)) == "2026-03-15T09:05:07"


class TestFraudRecord:
    """Tests for FraudRecord serialization."""

    def test_defaults(self) -> None:
        record = _make_record()
        assert isinstance(record.id, UUID)
        assert record.is_verified is False
        assert record.description is None

    def test_ids_are_unique(self) -> None:
        assert _make_record().id != _make_record().id

    def test_round_trip(self) -> None:
        record = _make_record(location="Berlin", is_verified=True)
        restored = FraudRecord.from_dict(record.to_dict())
        assert restored == record

    def test_amount_stored_as_string(self) -> None:
        data = _make_record().to_dict()
        assert data["amount"] == "42.50"
        assert data["id"] == str(UUID(data["id"]))


class TestFraudStatistics:
    def test_verified_is_total_minus_unverified(self) -> None:
        stats = FraudStatistics(10, 3, 4, 3, 6)
        assert stats.verified_records == 4
        assert stats.to_dict()["verified_records"] == 4

    def test_to_dict_keys(self) -> None:
        assert set(FraudStatistics(0, 0, 0, 0, 0).to_dict()) == {
            "total_records",
            "high_risk_records",
            "medium_risk_records",
            "low_risk_records",
            "unverified_records",
            "verified_records",
        }
