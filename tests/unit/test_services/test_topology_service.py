"""Unit tests for the topology service."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from zhaviz.services.device_source import DeviceSource
from zhaviz.services.topology_service import TopologyService
from zhaviz.utils.exceptions import DataFetchError


class GatedSource(DeviceSource):
    """Answers each fetch with a queued device list once its gate opens."""

    def __init__(self) -> None:
        self.pending: list[tuple[asyncio.Event, list]] = []

    def queue(self, devices: list) -> asyncio.Event:
        gate = asyncio.Event()
        self.pending.append((gate, devices))
        return gate

    async def fetch_devices(self):
        gate, devices = self.pending.pop(0)
        await gate.wait()
        return devices

    async def refresh_topology(self) -> None:
        return None


def test_starts_empty():
    service = TopologyService(AsyncMock(spec=DeviceSource))
    assert service.loaded is False
    assert service.snapshot.nodes == ()
    assert len(service.snapshot.index) == 0


@pytest.mark.asyncio
async def test_load_replaces_snapshot(devices):
    source = AsyncMock(spec=DeviceSource)
    source.fetch_devices = AsyncMock(return_value=devices)
    service = TopologyService(source)

    snapshot = await service.load()

    assert service.loaded is True
    assert service.snapshot is snapshot
    assert len(snapshot.nodes) == 3


@pytest.mark.asyncio
async def test_stale_response_is_discarded(devices, make_device):
    source = GatedSource()
    older_gate = source.queue([make_device("old")])
    newer_gate = source.queue(devices)
    service = TopologyService(source)

    older = asyncio.create_task(service.load())
    newer = asyncio.create_task(service.load())
    await asyncio.sleep(0)

    newer_gate.set()
    applied = await newer
    older_gate.set()
    discarded = await older

    assert discarded is None
    assert service.snapshot is applied
    assert len(service.snapshot.nodes) == 3


@pytest.mark.asyncio
async def test_in_order_responses_both_apply(devices, make_device):
    source = GatedSource()
    first_gate = source.queue([make_device("first")])
    second_gate = source.queue(devices)
    service = TopologyService(source)

    first = asyncio.create_task(service.load())
    second = asyncio.create_task(service.load())
    await asyncio.sleep(0)

    first_gate.set()
    assert await first is not None
    second_gate.set()
    assert await second is not None
    assert len(service.snapshot.nodes) == 3


@pytest.mark.asyncio
async def test_fetch_error_propagates_and_keeps_snapshot(devices):
    source = AsyncMock(spec=DeviceSource)
    source.fetch_devices = AsyncMock(return_value=devices)
    service = TopologyService(source)
    loaded = await service.load()

    source.fetch_devices.side_effect = DataFetchError("boom")
    with pytest.raises(DataFetchError):
        await service.load()

    assert service.snapshot is loaded


@pytest.mark.asyncio
async def test_refresh_topology_failure_skips_reload():
    source = AsyncMock(spec=DeviceSource)
    source.refresh_topology = AsyncMock(side_effect=DataFetchError("rescan failed"))
    service = TopologyService(source)

    with pytest.raises(DataFetchError):
        await service.refresh_topology()

    source.fetch_devices.assert_not_called()
