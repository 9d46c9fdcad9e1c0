"""Topology graph construction: device index, LQI classifier and graph builder."""

from __future__ import annotations

from zhaviz.topology.builder import TopologySnapshot, build_edges, build_graph, build_nodes, build_snapshot
from zhaviz.topology.classifier import classify_lqi, parse_lqi
from zhaviz.topology.device_index import DeviceIndex

__all__ = [
    "DeviceIndex",
    "TopologySnapshot",
    "build_edges",
    "build_graph",
    "build_nodes",
    "build_snapshot",
    "classify_lqi",
    "parse_lqi",
]
