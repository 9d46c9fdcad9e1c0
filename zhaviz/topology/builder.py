"""Device list + neighbor reports -> deduplicated, styled topology graph."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from zhaviz.models.schemas import Device, GraphEdge, GraphNode, NeighborReport, NodeColor
from zhaviz.topology.classifier import classify_lqi, parse_lqi
from zhaviz.topology.device_index import DeviceIndex
from zhaviz.utils.formatting import format_as_padded_hex
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)

AVAILABLE_COLOR = "#66FF99"
UNAVAILABLE_COLOR = "#FF9999"

UNKNOWN_DEVICE_LINE = "<b>Device is not in <i>'zigbee.db'</i></b>"


@dataclass(frozen=True)
class TopologySnapshot:
    """Device index and graph built from the same fetch; replaced as a whole."""

    index: DeviceIndex
    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    built_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls) -> TopologySnapshot:
        return cls(index=DeviceIndex.from_devices([]), nodes=(), edges=())

    def to_vis(self) -> dict[str, list[dict]]:
        return {
            "nodes": [node.to_vis() for node in self.nodes],
            "edges": [edge.to_vis() for edge in self.edges],
        }


# ── Nodes ────────────────────────────────────────────────────────────


def build_label(device: Device) -> str:
    label = f"<b>{device.user_given_name}</b>\n" if device.user_given_name is not None else ""
    label += f"<b>IEEE: </b>{device.ieee}"
    label += f"\n<b>Device Type: </b>{device.device_type.replace('_', ' ', 1)}"
    if device.nwk is not None:
        nwk = format_as_padded_hex(device.nwk)
        if nwk is not None:
            label += f"\n<b>NWK: </b>{nwk}"
    if device.manufacturer is not None and device.model is not None:
        label += f"\n<b>Device: </b>{device.manufacturer} {device.model}"
    else:
        label += f"\n{UNKNOWN_DEVICE_LINE}"
    if device.area_id:
        label += f"\n<b>Area ID: </b>{device.area_id}"
    return label


def node_shape(device: Device) -> str:
    if device.device_type == "Coordinator":
        return "box"
    if device.device_type == "Router":
        return "ellipse"
    return "circle"


def node_mass(device: Device) -> int:
    if not device.available:
        return 6
    if device.device_type == "Coordinator":
        return 2
    if device.device_type == "Router":
        return 4
    return 5


def build_node(device: Device) -> GraphNode:
    return GraphNode(
        id=device.ieee,
        label=build_label(device),
        shape=node_shape(device),
        mass=node_mass(device),
        fixed=device.device_type == "Coordinator",
        color=NodeColor(background=AVAILABLE_COLOR if device.available else UNAVAILABLE_COLOR),
    )


def build_nodes(devices: Iterable[Device]) -> list[GraphNode]:
    return [build_node(device) for device in devices]


# ── Edges ────────────────────────────────────────────────────────────


def _pair_key(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


def _weaker(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return min(a, b)


def _new_edge(device: Device, neighbor: NeighborReport) -> GraphEdge:
    style = classify_lqi(parse_lqi(neighbor.lqi))
    directed = neighbor.relationship != "Child"
    return GraphEdge(
        source=device.ieee,
        target=neighbor.ieee,
        label=neighbor.lqi,
        tier=style.tier,
        color=style.color,
        width=style.width,
        length=style.length,
        physics=style.physics,
        arrows={"from": {"enabled": directed}},
        dashes=directed,
    )


def _merge_reverse(edge: GraphEdge, neighbor: NeighborReport) -> None:
    edge.apply_style(classify_lqi(_weaker(parse_lqi(edge.label), parse_lqi(neighbor.lqi))))
    edge.label = f"{edge.label} & {neighbor.lqi}"
    edge.arrows = None
    edge.dashes = None


def build_edges(devices: Iterable[Device]) -> list[GraphEdge]:
    """Fold every neighbor report into one edge per unordered device pair.

    Devices and their reports are visited in input order. The first report of
    a pair creates the edge in that direction; a report from the other end
    merges into it, keeping the weaker quality and dropping the direction
    markers. A repeated report in the already-recorded direction is ignored.
    """
    edges: list[GraphEdge] = []
    by_pair: dict[tuple[str, str], GraphEdge] = {}

    for device in devices:
        for neighbor in device.neighbors:
            key = _pair_key(device.ieee, neighbor.ieee)
            existing = by_pair.get(key)
            if existing is None:
                edge = _new_edge(device, neighbor)
                edges.append(edge)
                by_pair[key] = edge
            elif existing.source == neighbor.ieee and existing.target == device.ieee:
                _merge_reverse(existing, neighbor)
            else:
                logger.debug(
                    "duplicate_neighbor_report_ignored",
                    ieee=device.ieee,
                    neighbor=neighbor.ieee,
                    lqi=neighbor.lqi,
                )

    return edges


def build_graph(devices: Sequence[Device]) -> tuple[list[GraphNode], list[GraphEdge]]:
    return build_nodes(devices), build_edges(devices)


def build_snapshot(devices: Sequence[Device]) -> TopologySnapshot:
    nodes, edges = build_graph(devices)
    return TopologySnapshot(
        index=DeviceIndex.from_devices(devices),
        nodes=tuple(nodes),
        edges=tuple(edges),
    )
