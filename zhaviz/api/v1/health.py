"""Health and readiness probe endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from zhaviz.api.dependencies import get_topology
from zhaviz.services.topology_service import TopologyService

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(topology: TopologyService = Depends(get_topology)) -> dict:
    if not topology.loaded:
        return {"status": "not_ready", "topology_loaded": False}
    return {
        "status": "ready",
        "topology_loaded": True,
        "devices": len(topology.snapshot.index),
        "built_at": topology.snapshot.built_at.isoformat(),
    }
