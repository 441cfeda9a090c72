"""Tests for fraud_records.tools.schema — argument decoding."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from fraud_records.tools.schema import (
    BOOLEAN,
    DATETIME,
    NUMBER,
    STRING,
    UUID_TYPE,
    ArgumentSpec,
    DecodedArguments,
    DecodeError,
    decode_arguments,
    input_schema,
)

SPECS = [
    ArgumentSpec("name", STRING, "A name"),
    ArgumentSpec("amount", NUMBER, "An amount"),
    ArgumentSpec("flag", BOOLEAN, "A flag", required=False, default=False),
]


class TestArgumentSpec:
    """Tests for ArgumentSpec construction and schema output."""

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown argument type 'integer'"):
            ArgumentSpec("x", "integer", "bad")

    def test_json_schema_includes_format_and_default(self) -> None:
        spec = ArgumentSpec("when", DATETIME, "When", required=False, default="now")
        assert spec.json_schema() == {
            "type": "string",
            "format": "date-time",
            "description": "When",
            "default": "now",
        }

    def test_input_schema_lists_required(self) -> None:
        schema = input_schema(SPECS)
        assert schema["type"] == "object"
        assert set(schema["properties"]) == {"name", "amount", "flag"}
        assert schema["required"] == ["name", "amount"]


class TestDecodeArguments:
    """Tests for decode_arguments()."""

    def test_decodes_all_declared(self) -> None:
        decoded = decode_arguments(SPECS, {"name": "a", "amount": 12.5, "flag": "true"})
        assert isinstance(decoded, DecodedArguments)
        assert decoded["name"] == "a"
        assert decoded["amount"] == Decimal("12.5")
        assert decoded["flag"] is True

    def test_optional_missing_takes_default(self) -> None:
        decoded = decode_arguments(SPECS, {"name": "a", "amount": 1})
        assert decoded["flag"] is False

    def test_optional_null_takes_default(self) -> None:
        decoded = decode_arguments(SPECS, {"name": "a", "amount": 1, "flag": None})
        assert decoded["flag"] is False

    def test_undeclared_arguments_ignored(self) -> None:
        decoded = decode_arguments(SPECS, {"name": "a", "amount": 1, "extra": object()})
        assert decoded.get("extra") is None

    def test_missing_required(self) -> None:
        decoded = decode_arguments(SPECS, {"amount": 1})
        assert decoded == DecodeError("name", "Missing required argument: name")

    def test_none_arguments_treated_as_empty(self) -> None:
        assert decode_arguments([], None) == DecodedArguments({})
        assert isinstance(decode_arguments(SPECS, None), DecodeError)

    def test_non_mapping_rejected(self) -> None:
        decoded = decode_arguments(SPECS, ["name", "a"])
        assert isinstance(decoded, DecodeError)
        assert str(decoded) == "Arguments must be a key/value map"

    @pytest.mark.parametrize(
        ("spec_type", "raw"),
        [
            (STRING, 42),
            (NUMBER, "lots"),
            (NUMBER, True),
            (NUMBER, "nan"),
            (BOOLEAN, "yes"),
            (BOOLEAN, 1),
            (DATETIME, "yesterday"),
            (DATETIME, 1700000000),
            (UUID_TYPE, "not-a-uuid"),
            (UUID_TYPE, 123),
        ],
    )
    def test_wrong_type_names_argument(self, spec_type: str, raw: object) -> None:
        decoded = decode_arguments([ArgumentSpec("value", spec_type, "v")], {"value": raw})
        assert isinstance(decoded, DecodeError)
        assert decoded.argument == "value"
        assert decoded.message.startswith("Invalid value for 'value':")

    def test_datetime_naive_kept(self) -> None:
        decoded = decode_arguments(
            [ArgumentSpec("when", DATETIME, "w")], {"when": "2026-03-14T22:30:00"}
        )
        assert decoded["when"] == datetime(2026, 3, 14, 22, 30, 0)

    def test_datetime_with_offset_becomes_local_naive(self) -> None:
        decoded = decode_arguments(
            [ArgumentSpec("when", DATETIME, "w")], {"when": "2026-03-14T22:30:00+00:00"}
        )
        expected = datetime(2026, 3, 14, 22, 30, tzinfo=timezone.utc).astimezone()
        assert decoded["when"] == expected.replace(tzinfo=None)
        assert decoded["when"].tzinfo is None

    def test_uuid_parsed(self) -> None:
        raw = "12345678-1234-5678-1234-567812345678"
        decoded = decode_arguments([ArgumentSpec("id", UUID_TYPE, "i")], {"id": raw})
        assert decoded["id"] == UUID(raw)
