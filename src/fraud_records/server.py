"""HTTP transport for the tool registry (FastAPI)."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .config import Config
from .insights import InsightService
from .narrative import NarrativeGenerator, OpenRouterGenerator
from .service import RecordService
from .store import InMemoryRecordStore, JsonFileRecordStore, RecordStore
from .tools import ToolRegistry, build_registry, failure

logger = logging.getLogger(__name__)


def create_store(config: Config) -> RecordStore:
    """JSON file store when ``FRAUD_STORE_PATH`` is set, in-memory otherwise."""
    if config.persistent:
        return JsonFileRecordStore(config.store_path)
    return InMemoryRecordStore()


def create_registry(
    config: Config,
    store: RecordStore | None = None,
    generator: NarrativeGenerator | None = None,
) -> ToolRegistry:
    """Wire store, services and tools together.

    Args:
        config: Application configuration.
        store: Record store to use instead of the configured one.
        generator: Narrative generator to use instead of OpenRouter.
    """
    records = RecordService(store if store is not None else create_store(config))
    insights = InsightService(
        generator if generator is not None else OpenRouterGenerator(config)
    )
    return build_registry(records, insights)


def create_app(registry: ToolRegistry) -> FastAPI:
    """Create a FastAPI application exposing the registry.

    Routes:

    * ``GET /health`` — health check
    * ``GET /tools`` — registered tools with their argument schemas
    * ``POST /tools/{name}`` — call a tool with a JSON object of arguments
    """
    app = FastAPI(title="fraud-records")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/tools")
    async def list_tools() -> list[dict[str, Any]]:
        """Describe every registered tool."""
        return registry.describe()

    @app.post("/tools/{name}")
    async def call_tool(name: str, request: Request) -> JSONResponse:
        """Dispatch a tool call and return its response map."""
        if name not in registry:
            return JSONResponse(
                status_code=404,
                content=failure("Tool not found", error=f"Unknown tool '{name}'"),
            )

        body = await request.body()
        try:
            arguments = json.loads(body) if body.strip() else {}
        except json.JSONDecodeError:
            return JSONResponse(
                status_code=400, content=failure("Invalid JSON", error="Invalid JSON")
            )
        if not isinstance(arguments, dict):
            return JSONResponse(
                status_code=400,
                content=failure("Invalid JSON", error="Arguments must be a JSON object"),
            )

        logger.debug("HTTP call to tool %s", name)
        # Services block on storage and the generator
        result = await run_in_threadpool(registry.dispatch, name, arguments)
        return JSONResponse(content=result)

    return app
