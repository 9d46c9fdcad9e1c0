"""Translates user intent and renderer events into renderer commands."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from zhaviz.adapters.base import FitAnimation, RenderingEngine
from zhaviz.controller.state import InteractionState
from zhaviz.services.topology_service import TopologyService
from zhaviz.topology.builder import TopologySnapshot
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)

ZOOM_DURATION_MS = 500
ZOOM_IN_ANIMATION = FitAnimation(duration_ms=ZOOM_DURATION_MS, easing="easeInQuad")
ZOOM_OUT_ANIMATION = FitAnimation(duration_ms=ZOOM_DURATION_MS, easing="easeOutQuad")

Navigator = Callable[[str], None]


class InteractionController:
    """One view session over the topology graph.

    Renderer handlers are registered once here and run synchronously, so the
    state needs no locking. Lookups always go through the current snapshot;
    ids that are no longer in it are ignored.
    """

    def __init__(
        self,
        adapter: RenderingEngine,
        topology: TopologyService,
        *,
        navigate: Navigator | None = None,
        state: InteractionState | None = None,
    ) -> None:
        self._adapter = adapter
        self._topology = topology
        self._navigate = navigate
        self.state = state or InteractionState()

        adapter.on("click", self.on_click)
        adapter.on("doubleClick", self.on_double_click)
        adapter.on("stabilized", self.on_stabilized)

    @property
    def snapshot(self) -> TopologySnapshot:
        return self._topology.snapshot

    # ── Data ──

    async def load(self) -> TopologySnapshot | None:
        snapshot = await self._topology.load()
        if snapshot is not None:
            self._adapter.set_data(snapshot.nodes, snapshot.edges)
        return snapshot

    async def refresh_topology(self) -> TopologySnapshot | None:
        snapshot = await self._topology.refresh_topology()
        if snapshot is not None:
            self._adapter.set_data(snapshot.nodes, snapshot.edges)
        return snapshot

    # ── User intent ──

    def set_filter(self, text: str | None) -> list[str]:
        """Select every node whose label contains ``text``; returns their ids."""
        self.state.filter_text = text or None
        if not text:
            self._adapter.unselect_all()
            return []

        needle = text.lower()
        matched = [node.id for node in self.snapshot.nodes if needle in node.label.lower()]
        self.state.zoomed_device_id = None
        self._zoom_out()
        self._adapter.select_nodes(matched, focus=True)
        logger.debug("filter_applied", matches=len(matched))
        return matched

    def zoom_to_device(self, device_reg_id: str | None) -> None:
        self.state.zoomed_device_id = device_reg_id or None
        self._zoom_to_target()

    def set_physics_enabled(self, enabled: bool) -> None:
        self.state.physics_enabled = enabled
        self._adapter.set_options(enabled)
        logger.info("physics_toggled", enabled=enabled)

    def toggle_physics(self) -> bool:
        self.set_physics_enabled(not self.state.physics_enabled)
        return self.state.physics_enabled

    def set_auto_zoom(self, enabled: bool) -> None:
        self.state.auto_zoom = enabled

    # ── Renderer events ──

    def on_click(self, node_ids: Sequence[str]) -> None:
        if not node_ids:
            return
        device = self.snapshot.index.get_by_ieee(node_ids[0])
        if device is None or not device.device_reg_id:
            logger.debug("click_target_unknown", ieee=node_ids[0])
            return
        if self.state.auto_zoom:
            self.state.zoomed_device_id = device.device_reg_id
            self._zoom_to_target()

    def on_double_click(self, node_ids: Sequence[str]) -> None:
        if not node_ids:
            return
        device = self.snapshot.index.get_by_ieee(node_ids[0])
        if device is None or not device.device_reg_id:
            logger.debug("double_click_target_unknown", ieee=node_ids[0])
            return
        if self._navigate is not None:
            self._navigate(device.device_reg_id)

    def on_stabilized(self, node_ids: Sequence[str] = ()) -> None:
        # Node positions may only now be final; aim again at the pending target
        if self.state.zoomed_device_id:
            self._zoom_to_target()

    # ── Viewport ──

    def _zoom_to_target(self) -> None:
        self.state.filter_text = None
        if not self.state.zoomed_device_id:
            self._zoom_out()
            return

        device = self.snapshot.index.get_by_reg_id(self.state.zoomed_device_id)
        if device is None:
            logger.debug("zoom_target_unknown", device_reg_id=self.state.zoomed_device_id)
            return
        self._adapter.fit([device.ieee], ZOOM_IN_ANIMATION)

    def _zoom_out(self) -> None:
        self._adapter.fit([], ZOOM_OUT_ANIMATION)
