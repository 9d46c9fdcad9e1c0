"""Unit tests for topology exports."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from zhaviz.topology.builder import TopologySnapshot, build_snapshot
from zhaviz.topology.export import plain_label, to_graphml, to_json
from zhaviz.topology.image import render_topology_image
from zhaviz.utils.exceptions import ExportError


def test_plain_label_strips_markup():
    assert plain_label("<b>IEEE: </b>aa\n<b>Device is not in <i>'zigbee.db'</i></b>") == (
        "IEEE: aa\nDevice is not in 'zigbee.db'"
    )


def test_json_export(devices):
    data = json.loads(to_json(build_snapshot(devices)))
    assert len(data["nodes"]) == 3
    assert len(data["edges"]) == 2
    assert "built_at" in data


def test_graphml_export(devices, mesh_ieee):
    xml = to_graphml(build_snapshot(devices))
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert '<node id="{}">'.format(mesh_ieee["coordinator"]) in xml
    assert '<data key="lqi">150 &amp; 200</data>' in xml
    assert '<data key="bidirectional">true</data>' in xml
    assert xml.count("<edge ") == 2


@pytest.mark.parametrize(("fmt", "magic"), [("png", b"\x89PNG"), ("jpeg", b"\xff\xd8")])
def test_image_export(devices, fmt, magic):
    image = render_topology_image(build_snapshot(devices), format=fmt, dpi=40, figsize=(4, 3))
    assert image.startswith(magic)


def test_image_export_empty_snapshot():
    assert render_topology_image(TopologySnapshot.empty(), dpi=40).startswith(b"\x89PNG")


def test_image_export_failure_raises_export_error(devices):
    with patch("networkx.draw_networkx_nodes", side_effect=ValueError("bad marker")):
        with pytest.raises(ExportError, match="bad marker"):
            render_topology_image(build_snapshot(devices), dpi=40, figsize=(4, 3))
