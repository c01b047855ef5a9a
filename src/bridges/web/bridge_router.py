"""FastAPI router for bridge introspection endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    bridges: int
    version: str = "0.1.0"


@router.get("/api/bridges")
async def list_bridges(request: Request) -> list[dict[str, Any]]:
    """List all mounted bridges."""
    registry = request.app.state.bridge_registry
    return [d.model_dump(by_alias=True) for d in registry.list_bridges()]


@router.get("/api/bridges/{name}")
async def get_bridge(name: str, request: Request) -> dict[str, Any]:
    """Describe one bridge: its mount point and outbound method/target."""
    registry = request.app.state.bridge_registry
    bridge = registry.get(name)
    if bridge is None:
        raise HTTPException(status_code=404, detail=f"Bridge {name!r} not found")
    definition = bridge.definition
    return {
        **bridge.descriptor.model_dump(by_alias=True),
        "method": definition.method,
        "url": definition.url or None,
        "auth": bridge.auth.type.value,
        "query": dict(definition.query_template),
    }


@router.get("/api/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service="json-bridges",
        bridges=len(request.app.state.bridge_registry),
    )
