"""Unit tests for the SSE streaming renderer adapter."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from zhaviz.adapters.base import DEFAULT_NETWORK_OPTIONS, FitAnimation
from zhaviz.adapters.event_stream import StreamingRenderingAdapter
from zhaviz.topology.builder import build_snapshot


def _drain(queue) -> list[tuple[str, dict]]:
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
    return events


@pytest.mark.asyncio
async def test_new_subscriber_is_primed():
    adapter = StreamingRenderingAdapter()
    queue = adapter.subscribe()

    events = _drain(queue)

    assert events == [
        ("init", {"options": DEFAULT_NETWORK_OPTIONS}),
        ("setOptions", {"physics": {"enabled": True}}),
    ]


@pytest.mark.asyncio
async def test_late_subscriber_gets_current_graph(devices):
    adapter = StreamingRenderingAdapter()
    snapshot = build_snapshot(devices)
    adapter.set_data(snapshot.nodes, snapshot.edges)
    adapter.set_options(False)

    events = _drain(adapter.subscribe())

    assert [name for name, _ in events] == ["init", "setData", "setOptions"]
    assert len(events[1][1]["nodes"]) == 3
    assert events[2][1] == {"physics": {"enabled": False}}


@pytest.mark.asyncio
async def test_commands_fan_out_to_subscribers():
    adapter = StreamingRenderingAdapter()
    first, second = adapter.subscribe(), adapter.subscribe()
    _drain(first), _drain(second)

    adapter.fit(["a"], FitAnimation(duration_ms=500, easing="easeInQuad"))
    adapter.select_nodes(["a", "b"], focus=True)
    adapter.unselect_all()

    expected = [
        ("fit", {"nodes": ["a"], "animation": {"duration": 500, "easingFunction": "easeInQuad"}}),
        ("selectNodes", {"nodes": ["a", "b"], "highlightEdges": True}),
        ("unselectAll", {}),
    ]
    assert _drain(first) == expected
    assert _drain(second) == expected


@pytest.mark.asyncio
async def test_unsubscribed_queue_stops_receiving():
    adapter = StreamingRenderingAdapter()
    queue = adapter.subscribe()
    adapter.unsubscribe(queue)
    _drain(queue)

    adapter.unselect_all()

    assert queue.empty()
    assert adapter.subscriber_count == 0


@pytest.mark.asyncio
async def test_host_notifications():
    adapter = StreamingRenderingAdapter()
    queue = adapter.subscribe()
    _drain(queue)

    adapter.navigate("reg-router")
    adapter.report_error("gateway down")

    assert _drain(queue) == [
        ("navigate", {"device_reg_id": "reg-router", "path": "/config/devices/device/reg-router"}),
        ("error", {"message": "gateway down"}),
    ]


def test_dispatch_calls_registered_handlers():
    adapter = StreamingRenderingAdapter()
    handler = MagicMock()
    adapter.on("click", handler)

    adapter.dispatch("click", ("a",))
    adapter.dispatch("stabilized")

    handler.assert_called_once_with(["a"])


def test_unknown_events_rejected():
    adapter = StreamingRenderingAdapter()
    with pytest.raises(ValueError):
        adapter.on("hover", MagicMock())
    with pytest.raises(ValueError):
        adapter.dispatch("hover")
