"""Topology API endpoints: current graph, reloads and exports."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from zhaviz.adapters.event_stream import StreamingRenderingAdapter
from zhaviz.api.dependencies import get_adapter, get_controller, get_topology
from zhaviz.api.v1.schemas.topology import DeviceChoice, ReloadResponse, TopologyResponse
from zhaviz.controller.interaction import InteractionController
from zhaviz.services.topology_service import TopologyService
from zhaviz.topology.builder import TopologySnapshot
from zhaviz.topology.export import to_graphml, to_json
from zhaviz.topology.image import render_topology_image
from zhaviz.utils.exceptions import DataFetchError, ExportError
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/topology", tags=["topology"])


@router.get("", response_model=TopologyResponse)
async def get_topology_graph(
    topology: TopologyService = Depends(get_topology),
) -> TopologyResponse:
    """Current graph as renderer (vis-network) payload."""
    snapshot = topology.snapshot
    payload = snapshot.to_vis()
    return TopologyResponse(
        loaded=topology.loaded,
        built_at=snapshot.built_at,
        nodes=payload["nodes"],
        edges=payload["edges"],
        node_count=len(snapshot.nodes),
        edge_count=len(snapshot.edges),
    )


@router.get("/devices", response_model=list[DeviceChoice])
async def list_zoom_devices(
    topology: TopologyService = Depends(get_topology),
) -> list[DeviceChoice]:
    """Devices the view can zoom to, for a device picker."""
    return [
        DeviceChoice(device_reg_id=reg_id, name=name)
        for reg_id, name in topology.snapshot.index.zoom_choices()
    ]


@router.post("/reload", response_model=ReloadResponse)
async def reload_topology(
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ReloadResponse:
    """Re-fetch devices and rebuild the graph."""
    try:
        snapshot = await controller.load()
    except DataFetchError as exc:
        raise _fetch_failure("reload", exc, adapter) from exc
    return _reload_response(snapshot, controller.snapshot)


@router.post("/refresh", response_model=ReloadResponse)
async def refresh_topology(
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ReloadResponse:
    """Have the gateway rescan neighbor tables, then rebuild the graph."""
    try:
        snapshot = await controller.refresh_topology()
    except DataFetchError as exc:
        raise _fetch_failure("refresh", exc, adapter) from exc
    return _reload_response(snapshot, controller.snapshot)


@router.get("/export")
async def export_topology(
    format: Literal["json", "graphml", "png", "jpeg"] = "json",
    topology: TopologyService = Depends(get_topology),
) -> Response:
    """Export the current graph as JSON, GraphML or a static image."""
    snapshot = topology.snapshot

    if format == "json":
        return Response(
            content=to_json(snapshot),
            media_type="application/json",
            headers={"Content-Disposition": "attachment; filename=zha_topology.json"},
        )

    if format == "graphml":
        return Response(
            content=to_graphml(snapshot),
            media_type="application/xml",
            headers={"Content-Disposition": "attachment; filename=zha_topology.graphml"},
        )

    try:
        image = render_topology_image(snapshot, format=format)
    except ExportError as exc:
        logger.error("topology_image_failed", format=format, error=str(exc))
        raise HTTPException(status_code=500, detail="Image rendering failed") from exc
    return Response(
        content=image,
        media_type=f"image/{format}",
        headers={"Content-Disposition": f"attachment; filename=zha_topology.{format}"},
    )


def _fetch_failure(
    action: str, exc: DataFetchError, adapter: StreamingRenderingAdapter
) -> HTTPException:
    """Surface a failed fetch once: log it, tell the browser, answer 502."""
    logger.error("topology_fetch_failed", action=action, error=str(exc))
    adapter.report_error(str(exc))
    return HTTPException(status_code=502, detail=str(exc))


def _reload_response(
    snapshot: TopologySnapshot | None, current: TopologySnapshot
) -> ReloadResponse:
    shown = snapshot or current
    return ReloadResponse(
        status="loaded" if snapshot is not None else "stale",
        node_count=len(shown.nodes),
        edge_count=len(shown.edges),
        built_at=shown.built_at,
    )
