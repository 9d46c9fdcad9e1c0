"""Contract between the interaction controller and a force-directed renderer.

The renderer (vis-network in the browser) owns layout, physics and
animation. The controller only sends it commands and reacts to the events
it reports back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from zhaviz.models.schemas import GraphEdge, GraphNode

RendererEvent = Literal["click", "doubleClick", "stabilized"]
RENDERER_EVENTS: tuple[str, ...] = ("click", "doubleClick", "stabilized")

EventHandler = Callable[[list[str]], None]

# Options the renderer is mounted with before any data arrives.
DEFAULT_NETWORK_OPTIONS: dict[str, Any] = {
    "autoResize": True,
    "layout": {"improvedLayout": True},
    "physics": {
        "barnesHut": {
            "springConstant": 0,
            "avoidOverlap": 10,
            "damping": 0.09,
        },
    },
    "nodes": {"font": {"multi": "html"}},
    "edges": {
        "smooth": {
            "enabled": True,
            "type": "continuous",
            "forceDirection": "none",
            "roundness": 0.6,
        },
    },
}


class FitAnimation(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration_ms: int = 500
    easing: str = "easeInOutQuad"

    def to_vis(self) -> dict[str, Any]:
        return {"duration": self.duration_ms, "easingFunction": self.easing}


class RenderingEngine(ABC):
    """Commands accepted by the renderer, plus event handler registration.

    Event handlers receive the ids of the nodes under the pointer (empty for
    ``stabilized``) and run synchronously on the event loop.
    """

    @abstractmethod
    def set_data(self, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> None:
        """Replace the whole rendered graph."""

    @abstractmethod
    def set_options(self, physics_enabled: bool) -> None:
        """Switch the global physics simulation on or off."""

    @abstractmethod
    def select_nodes(self, node_ids: Sequence[str], focus: bool = True) -> None: ...

    @abstractmethod
    def unselect_all(self) -> None: ...

    @abstractmethod
    def fit(self, node_ids: Sequence[str], animation: FitAnimation) -> None:
        """Animate the viewport onto ``node_ids``; an empty list means all nodes."""

    @abstractmethod
    def on(self, event: RendererEvent, handler: EventHandler) -> None: ...
