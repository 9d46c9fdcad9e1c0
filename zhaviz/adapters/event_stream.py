"""Renderer adapter that streams commands to browser clients over SSE.

Every command becomes an ``(event, payload)`` pair pushed to each
subscriber queue; the ``/view/stream`` endpoint drains the queues. The
browser posts renderer events back, and :meth:`dispatch` hands them to the
registered handlers.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from zhaviz.adapters.base import (
    DEFAULT_NETWORK_OPTIONS,
    RENDERER_EVENTS,
    EventHandler,
    FitAnimation,
    RendererEvent,
    RenderingEngine,
)
from zhaviz.models.schemas import GraphEdge, GraphNode
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)

StreamEvent = tuple[str, dict[str, Any]]

DEVICE_PAGE_PATH = "/config/devices/device/{}"


class StreamingRenderingAdapter(RenderingEngine):
    def __init__(self, network_options: dict[str, Any] | None = None) -> None:
        self._network_options = network_options or DEFAULT_NETWORK_OPTIONS
        self._subscribers: set[asyncio.Queue[StreamEvent]] = set()
        self._handlers: dict[str, list[EventHandler]] = {event: [] for event in RENDERER_EVENTS}
        self._last_data: dict[str, list[dict]] | None = None
        self._physics_enabled = True

    # ── Commands ──

    def set_data(self, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> None:
        self._last_data = {
            "nodes": [node.to_vis() for node in nodes],
            "edges": [edge.to_vis() for edge in edges],
        }
        self._publish("setData", self._last_data)

    def set_options(self, physics_enabled: bool) -> None:
        self._physics_enabled = physics_enabled
        self._publish("setOptions", self._physics_payload())

    def select_nodes(self, node_ids: Sequence[str], focus: bool = True) -> None:
        self._publish("selectNodes", {"nodes": list(node_ids), "highlightEdges": focus})

    def unselect_all(self) -> None:
        self._publish("unselectAll", {})

    def fit(self, node_ids: Sequence[str], animation: FitAnimation) -> None:
        self._publish("fit", {"nodes": list(node_ids), "animation": animation.to_vis()})

    # ── Host notifications ──

    def navigate(self, device_reg_id: str) -> None:
        self._publish(
            "navigate",
            {"device_reg_id": device_reg_id, "path": DEVICE_PAGE_PATH.format(device_reg_id)},
        )

    def report_error(self, message: str) -> None:
        self._publish("error", {"message": message})

    # ── Events ──

    def on(self, event: RendererEvent, handler: EventHandler) -> None:
        if event not in self._handlers:
            raise ValueError(f"Unknown renderer event: {event}")
        self._handlers[event].append(handler)

    def dispatch(self, event: str, node_ids: Sequence[str] = ()) -> None:
        handlers = self._handlers.get(event)
        if handlers is None:
            raise ValueError(f"Unknown renderer event: {event}")
        for handler in handlers:
            handler(list(node_ids))

    # ── Subscriptions ──

    def subscribe(self) -> asyncio.Queue[StreamEvent]:
        """Register a client queue, primed with what it needs to draw the current view."""
        queue: asyncio.Queue[StreamEvent] = asyncio.Queue()
        queue.put_nowait(("init", {"options": self._network_options}))
        if self._last_data is not None:
            queue.put_nowait(("setData", self._last_data))
        queue.put_nowait(("setOptions", self._physics_payload()))
        self._subscribers.add(queue)
        logger.info("stream_subscribed", subscribers=len(self._subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue[StreamEvent]) -> None:
        self._subscribers.discard(queue)
        logger.info("stream_unsubscribed", subscribers=len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _physics_payload(self) -> dict[str, Any]:
        return {"physics": {"enabled": self._physics_enabled}}

    def _publish(self, event: str, payload: dict[str, Any]) -> None:
        for queue in self._subscribers:
            queue.put_nowait((event, payload))
        logger.debug("renderer_command", command=event, subscribers=len(self._subscribers))
