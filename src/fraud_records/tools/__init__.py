"""Tool dispatch layer: named, schema-described operations over the services."""

from __future__ import annotations

from ..insights import InsightService
from ..service import RecordService
from .insight_tools import insight_tools
from .record_tools import record_tools
from .registry import Tool, ToolRegistry, failure
from .schema import ArgumentSpec, DecodedArguments, DecodeError, decode_arguments


def build_registry(records: RecordService, insights: InsightService) -> ToolRegistry:
    """Create the registry holding every fraud tool."""
    return ToolRegistry(record_tools(records) + insight_tools(records, insights))


__all__ = [
    "ArgumentSpec",
    "DecodeError",
    "DecodedArguments",
    "Tool",
    "ToolRegistry",
    "build_registry",
    "decode_arguments",
    "failure",
]
