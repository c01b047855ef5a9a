"""FastAPI application serving every loaded bridge under its own path."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bridges.bridge.client import HTTPCaller, OutboundCaller
from bridges.bridge.errors import BridgeCallError, BridgeConfigurationError
from bridges.bridge.executor import JSONBridge
from bridges.bridge.loader import load_bridges
from bridges.bridge.models import RunResult, RunStatus
from bridges.bridge.params import InboundRequest
from bridges.bridge.registry import BridgeRegistry
from bridges.core.config import Settings
from bridges.web.bridge_router import router as bridge_router

logger = logging.getLogger(__name__)

BRIDGE_METHODS = ["GET", "POST"]


def _result_response(result: RunResult, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(by_alias=True, mode="json"),
    )


def make_bridge_endpoint(bridge: JSONBridge) -> Callable[[Request], Awaitable[JSONResponse]]:
    """Build the route handler that runs ``bridge`` for each inbound request."""

    async def endpoint(request: Request) -> JSONResponse:
        payload = None
        body = await request.body()
        if body:
            try:
                payload = json.loads(body)
            except ValueError:
                return _result_response(
                    RunResult(status=RunStatus.ERRORED, error="Request body is not valid JSON"),
                    status_code=400,
                )

        inbound = InboundRequest.from_payload(payload, query=dict(request.query_params))
        try:
            data = await bridge.run(inbound)
        except BridgeCallError as exc:
            logger.warning("Bridge %s failed: %s", bridge.name, exc)
            return _result_response(
                RunResult(
                    job_run_id=inbound.job_run_id,
                    status=RunStatus.ERRORED,
                    error=str(exc),
                ),
                status_code=502,
            )
        return _result_response(RunResult(job_run_id=inbound.job_run_id, data=data))

    endpoint.__name__ = f"run_{bridge.name}"
    return endpoint


def create_app(
    settings: Settings | None = None,
    bridges: Sequence[JSONBridge] | None = None,
    caller: OutboundCaller | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can pass pre-built bridges, and so the
    app can be served with ``uvicorn bridges.web.app:create_app --factory``.

    Args:
        settings: Application settings. Defaults to Settings().
        bridges: Pre-loaded bridges. Loaded from ``settings.bridge`` when omitted.
        caller: Outbound caller for bridges loaded here.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    if bridges is None:
        if not settings.bridge:
            raise BridgeConfigurationError("No bridge set")
        bridges = load_bridges(
            settings.bridge,
            caller=caller or HTTPCaller(timeout_seconds=settings.timeout_seconds),
            timeout_seconds=settings.timeout_seconds,
        )

    registry = BridgeRegistry()
    for bridge in bridges:
        registry.register(bridge)

    app = FastAPI(
        title="JSON Bridges",
        description="Declarative HTTP bridge adapters",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.bridge_registry = registry

    app.include_router(bridge_router)

    for bridge in bridges:
        descriptor = bridge.descriptor
        app.add_api_route(
            descriptor.path,
            make_bridge_endpoint(bridge),
            methods=BRIDGE_METHODS,
            name=descriptor.name,
        )

    return app
