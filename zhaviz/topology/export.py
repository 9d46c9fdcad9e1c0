"""Serialize a topology snapshot to JSON or GraphML."""

from __future__ import annotations

import json
import math
import re

from zhaviz.topology.builder import TopologySnapshot

_TAG = re.compile(r"<[^>]+>")


def plain_label(label: str) -> str:
    """Node label without the renderer's HTML markup, one line per field."""
    return _TAG.sub("", label)


def to_json(snapshot: TopologySnapshot) -> str:
    return json.dumps(
        {"built_at": snapshot.built_at.isoformat(), **snapshot.to_vis()},
        indent=2,
    )


def to_graphml(snapshot: TopologySnapshot) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<graphml xmlns="http://graphml.graphdrawing.org/xmlns">',
        '  <key id="label" for="node" attr.name="label" attr.type="string"/>',
        '  <key id="shape" for="node" attr.name="shape" attr.type="string"/>',
        '  <key id="mass" for="node" attr.name="mass" attr.type="int"/>',
        '  <key id="lqi" for="edge" attr.name="lqi" attr.type="string"/>',
        '  <key id="tier" for="edge" attr.name="tier" attr.type="string"/>',
        '  <key id="length" for="edge" attr.name="length" attr.type="double"/>',
        '  <key id="bidirectional" for="edge" attr.name="bidirectional" attr.type="boolean"/>',
        '  <graph id="G" edgedefault="undirected">',
    ]

    for node in snapshot.nodes:
        lines.append(f'    <node id="{_xml_escape(node.id)}">')
        lines.append(f'      <data key="label">{_xml_escape(plain_label(node.label))}</data>')
        lines.append(f'      <data key="shape">{node.shape}</data>')
        lines.append(f'      <data key="mass">{node.mass}</data>')
        lines.append("    </node>")

    for i, edge in enumerate(snapshot.edges):
        lines.append(
            f'    <edge id="e{i}" source="{_xml_escape(edge.source)}" target="{_xml_escape(edge.target)}">'
        )
        lines.append(f'      <data key="lqi">{_xml_escape(edge.label)}</data>')
        lines.append(f'      <data key="tier">{edge.tier}</data>')
        if math.isfinite(edge.length):
            lines.append(f'      <data key="length">{edge.length:g}</data>')
        lines.append(f'      <data key="bidirectional">{str(edge.bidirectional).lower()}</data>')
        lines.append("    </edge>")

    lines.append("  </graph>")
    lines.append("</graphml>")
    return "\n".join(lines)


def _xml_escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")
