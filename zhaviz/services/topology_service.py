"""Fetch sequencing and atomic snapshot replacement for the topology graph."""

from __future__ import annotations

from zhaviz.services.device_source import DeviceSource
from zhaviz.topology.builder import TopologySnapshot, build_snapshot
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)


class TopologyService:
    """Owns the current :class:`TopologySnapshot`.

    Each fetch is numbered when it starts. A response that finishes after a
    newer one has already been applied is dropped, so overlapping refreshes
    can never roll the graph back to older data. The snapshot is swapped by a
    single assignment; readers see either the old graph or the new one.
    """

    def __init__(self, source: DeviceSource) -> None:
        self._source = source
        self._snapshot = TopologySnapshot.empty()
        self._loaded = False
        self._issued = 0
        self._applied = 0

    @property
    def snapshot(self) -> TopologySnapshot:
        return self._snapshot

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> TopologySnapshot | None:
        """Fetch devices and rebuild. Returns None when the response was stale.

        Raises DataFetchError from the source; the current snapshot is kept.
        """
        self._issued += 1
        request_id = self._issued

        devices = await self._source.fetch_devices()

        if request_id < self._applied:
            logger.warning(
                "stale_topology_discarded",
                request_id=request_id,
                applied_request_id=self._applied,
            )
            return None

        snapshot = build_snapshot(devices)
        self._snapshot = snapshot
        self._applied = request_id
        self._loaded = True
        logger.info(
            "topology_loaded",
            request_id=request_id,
            nodes=len(snapshot.nodes),
            edges=len(snapshot.edges),
        )
        return snapshot

    async def refresh_topology(self) -> TopologySnapshot | None:
        """Have the backend rescan neighbor tables, then reload."""
        await self._source.refresh_topology()
        return await self.load()
