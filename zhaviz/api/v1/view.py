"""Interactive view endpoints: user intent in, renderer commands out over SSE."""

from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from zhaviz.adapters.event_stream import StreamingRenderingAdapter
from zhaviz.api.dependencies import get_adapter, get_controller
from zhaviz.api.v1.schemas.view import (
    FilterRequest,
    FilterResponse,
    RendererEventRequest,
    ToggleRequest,
    ViewState,
    ZoomRequest,
)
from zhaviz.config import get_settings
from zhaviz.controller.interaction import InteractionController
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/view", tags=["view"])


def _view_state(
    controller: InteractionController, adapter: StreamingRenderingAdapter
) -> ViewState:
    return ViewState(
        **controller.state.model_dump(),
        stream_subscribers=adapter.subscriber_count,
    )


@router.get("/state", response_model=ViewState)
async def get_view_state(
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ViewState:
    return _view_state(controller, adapter)


@router.put("/filter", response_model=FilterResponse)
async def set_filter(
    request: FilterRequest,
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> FilterResponse:
    """Highlight nodes whose label contains the text; empty text clears the selection."""
    matched = controller.set_filter(request.text)
    return FilterResponse(matched=matched, state=_view_state(controller, adapter))


@router.put("/zoom", response_model=ViewState)
async def zoom_to_device(
    request: ZoomRequest,
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ViewState:
    """Zoom onto a device by registry id; no id zooms out to the whole mesh."""
    controller.zoom_to_device(request.device_reg_id)
    return _view_state(controller, adapter)


@router.put("/physics", response_model=ViewState)
async def set_physics(
    request: ToggleRequest,
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ViewState:
    controller.set_physics_enabled(request.enabled)
    return _view_state(controller, adapter)


@router.post("/physics/toggle", response_model=ViewState)
async def toggle_physics(
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ViewState:
    controller.toggle_physics()
    return _view_state(controller, adapter)


@router.put("/auto-zoom", response_model=ViewState)
async def set_auto_zoom(
    request: ToggleRequest,
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ViewState:
    controller.set_auto_zoom(request.enabled)
    return _view_state(controller, adapter)


@router.post("/events", response_model=ViewState)
async def post_renderer_event(
    request: RendererEventRequest,
    controller: InteractionController = Depends(get_controller),
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> ViewState:
    """Renderer callbacks (click, doubleClick, stabilized) posted by the browser."""
    adapter.dispatch(request.event, request.nodes)
    return _view_state(controller, adapter)


@router.get("/stream")
async def stream_view(
    adapter: StreamingRenderingAdapter = Depends(get_adapter),
) -> EventSourceResponse:
    """SSE endpoint streaming renderer commands and host notifications for one browser.

    The stream opens with ``init`` (network options), the current ``setData``
    and ``setOptions``; after that every controller command is forwarded as
    it happens. ``ping`` keeps idle connections alive.
    """
    ping_interval = get_settings().STREAM_PING_INTERVAL_S

    async def event_generator():
        queue = adapter.subscribe()
        try:
            while True:
                try:
                    event_type, data = await asyncio.wait_for(queue.get(), timeout=ping_interval)
                except asyncio.TimeoutError:
                    yield {"event": "ping", "data": ""}
                    continue
                yield {"event": event_type, "data": json.dumps(data)}
        finally:
            adapter.unsubscribe(queue)

    return EventSourceResponse(event_generator())
