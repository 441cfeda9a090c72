"""Tool registry and the dispatch boundary.

A :class:`ToolRegistry` instance holds the callable tools, maps names to
tools, and turns every call into a response map. Nothing raised by a handler
crosses :meth:`ToolRegistry.dispatch`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..errors import ValidationError
from ..records import format_timestamp
from .schema import ArgumentSpec, DecodedArguments, DecodeError, decode_arguments, input_schema

logger = logging.getLogger(__name__)

Handler = Callable[[DecodedArguments], dict[str, Any]]


def failure(message: str, error: str | None = None, **extra: Any) -> dict[str, Any]:
    """Build a ``{"success": False, ...}`` response."""
    response: dict[str, Any] = {"success": False}
    if error is not None:
        response["error"] = error
    response["message"] = message
    response.update(extra)
    return response


def timestamp(clock: Callable[[], datetime] = datetime.now) -> str:
    """Current time in response format."""
    return format_timestamp(clock())


@dataclass
class Tool:
    """A named, schema-described callable operation."""

    name: str
    description: str
    handler: Handler
    failure_message: str
    arguments: list[ArgumentSpec] = field(default_factory=list)

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": input_schema(self.arguments),
        }


class ToolRegistry:
    """Instance-level registry mapping tool names to tools."""

    def __init__(self, tools: list[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        """Look up a tool by name.

        Raises:
            ValueError: If the tool is not registered.
        """
        if name not in self._tools:
            available = ", ".join(self._tools.keys()) or "(none)"
            raise ValueError(f"Unknown tool '{name}'. Available: {available}")
        return self._tools[name]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> list[str]:
        """Registered tool names in registration order."""
        return list(self._tools.keys())

    def describe(self) -> list[dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Decode arguments, run the tool and build its response map."""
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Call to unknown tool: %s", name)
            return failure("Tool not found", error=f"Unknown tool '{name}'")

        decoded = decode_arguments(tool.arguments, arguments)
        if isinstance(decoded, DecodeError):
            logger.info("Rejected %s call: %s", name, decoded.message)
            return failure(tool.failure_message, error=decoded.message)

        try:
            result = tool.handler(decoded)
        except ValidationError as e:
            logger.info("Validation failed for %s: %s", name, e)
            return failure(tool.failure_message, error=str(e), field=e.field)
        except Exception as e:
            logger.exception("Error in tool %s: %s", name, e)
            return failure(tool.failure_message, error=str(e))

        if "success" in result:
            return result
        return {"success": True, **result}
