"""Shared pytest fixtures for the fraud-records test suite."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest

from fraud_records.insights import InsightService
from fraud_records.records import FraudReportRequest
from fraud_records.service import RecordService
from fraud_records.store import InMemoryRecordStore
from fraud_records.tools import ToolRegistry, build_registry


class FakeClock:
    """Controllable replacement for ``datetime.now``."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


class FakeGenerator:
    """Narrative generator that records prompts and returns canned text."""

    def __init__(self, reply: str = "Generated narrative.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 15, 12, 0, 0))


@pytest.fixture()
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture()
def records(store: InMemoryRecordStore, clock: FakeClock) -> RecordService:
    return RecordService(store, clock=clock)


@pytest.fixture()
def make_generator() -> callable:
    """Factory fixture for FakeGenerator instances."""
    return FakeGenerator


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def failing_generator() -> FakeGenerator:
    return FakeGenerator(error=RuntimeError("provider down"))


@pytest.fixture()
def insights(generator: FakeGenerator) -> InsightService:
    return InsightService(generator)


@pytest.fixture()
def registry(records: RecordService, insights: InsightService) -> ToolRegistry:
    return build_registry(records, insights)


@pytest.fixture()
def report_request() -> callable:
    """Factory fixture that returns FraudReportRequest objects."""

    def _factory(**overrides: Any) -> FraudReportRequest:
        defaults: dict[str, Any] = {
            "user_id": "u1",
            "transaction_id": "t1",
            "amount": Decimal("100.00"),
            "currency": "USD",
            "merchant_name": "Acme",
            "fraud_type": "card_fraud",
            "description": "Unrecognized charge",
            "risk_level": "HIGH",
        }
        defaults.update(overrides)
        return FraudReportRequest(**defaults)

    return _factory


@pytest.fixture()
def report_args() -> callable:
    """Factory fixture that returns create_fraud_record argument maps."""

    def _factory(**overrides: Any) -> dict[str, Any]:
        defaults: dict[str, Any] = {
            "user_id": "u1",
            "transaction_id": "t1",
            "amount": 100.0,
            "currency": "USD",
            "merchant_name": "Acme",
            "fraud_type": "card_fraud",
            "description": "x",
            "risk_level": "high",
        }
        defaults.update(overrides)
        return defaults

    return _factory
