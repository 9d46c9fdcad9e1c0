"""Shared FastAPI dependency injection."""

from __future__ import annotations

from zhaviz.adapters.event_stream import StreamingRenderingAdapter
from zhaviz.controller.interaction import InteractionController
from zhaviz.services.topology_service import TopologyService

_topology: TopologyService | None = None
_adapter: StreamingRenderingAdapter | None = None
_controller: InteractionController | None = None


def set_topology(topology: TopologyService) -> None:
    global _topology
    _topology = topology


def set_adapter(adapter: StreamingRenderingAdapter) -> None:
    global _adapter
    _adapter = adapter


def set_controller(controller: InteractionController) -> None:
    global _controller
    _controller = controller


def get_topology() -> TopologyService:
    if _topology is None:
        raise RuntimeError("Topology service not initialized")
    return _topology


def get_adapter() -> StreamingRenderingAdapter:
    if _adapter is None:
        raise RuntimeError("Rendering adapter not initialized")
    return _adapter


def get_controller() -> InteractionController:
    if _controller is None:
        raise RuntimeError("Interaction controller not initialized")
    return _controller
