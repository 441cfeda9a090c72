"""Schema-driven decoding of untyped tool argument maps.

Each tool declares its arguments as :class:`ArgumentSpec` values. Decoding an
incoming map yields either :class:`DecodedArguments` (every declared argument
present and coerced) or a :class:`DecodeError` naming the offending argument.
Decoding never raises.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from ..records import to_decimal

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
DATETIME = "datetime"
UUID_TYPE = "uuid"

# Argument type -> JSON schema fragment advertised to callers
_JSON_TYPES: dict[str, dict[str, str]] = {
    STRING: {"type": "string"},
    NUMBER: {"type": "number"},
    BOOLEAN: {"type": "boolean"},
    DATETIME: {"type": "string", "format": "date-time"},
    UUID_TYPE: {"type": "string", "format": "uuid"},
}


@dataclass(frozen=True)
class ArgumentSpec:
    """Declaration of a single tool argument."""

    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None

    def __post_init__(self) -> None:
        if self.type not in _JSON_TYPES:
            raise ValueError(
                f"Unknown argument type '{self.type}'. "
                f"Available: {', '.join(_JSON_TYPES)}"
            )

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = dict(_JSON_TYPES[self.type])
        schema["description"] = self.description
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class DecodedArguments:
    """Successfully decoded arguments, keyed by argument name."""

    values: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)


@dataclass(frozen=True)
class DecodeError:
    """Why an argument map could not be decoded."""

    argument: str
    message: str

    def __str__(self) -> str:
        return self.message


def _to_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("expected a string")
    return value


def _to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError("expected a boolean")


def _to_number(value: Any):
    try:
        return to_decimal(value)
    except ValueError:
        raise ValueError("expected a number") from None


def _to_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError("expected an ISO-8601 date-time string")
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValueError("expected an ISO-8601 date-time string") from None
    if parsed.tzinfo is not None:
        # Stored timestamps are local and offset-free
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _to_uuid(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValueError("expected a UUID string")
    try:
        return UUID(value.strip())
    except ValueError:
        raise ValueError("expected a UUID string") from None


_COERCERS: dict[str, Callable[[Any], Any]] = {
    STRING: _to_string,
    NUMBER: _to_number,
    BOOLEAN: _to_boolean,
    DATETIME: _to_datetime,
    UUID_TYPE: _to_uuid,
}


def decode_arguments(
    specs: Sequence[ArgumentSpec], arguments: Mapping[str, Any] | None
) -> DecodedArguments | DecodeError:
    """Extract and coerce declared arguments from an untyped map.

    Missing or null optional arguments take their declared default. Arguments
    that are not declared are ignored.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        return DecodeError("", "Arguments must be a key/value map")

    values: dict[str, Any] = {}
    for spec in specs:
        raw = arguments.get(spec.name)
        if raw is None:
            if spec.required:
                return DecodeError(
                    spec.name, f"Missing required argument: {spec.name}"
                )
            values[spec.name] = spec.default
            continue
        try:
            values[spec.name] = _COERCERS[spec.type](raw)
        except ValueError as e:
            return DecodeError(
                spec.name, f"Invalid value for '{spec.name}': {e}"
            )
    return DecodedArguments(values)


def input_schema(specs: Sequence[ArgumentSpec]) -> dict[str, Any]:
    """JSON schema object describing a tool's arguments."""
    return {
        "type": "object",
        "properties": {spec.name: spec.json_schema() for spec in specs},
        "required": [spec.name for spec in specs if spec.required],
    }
