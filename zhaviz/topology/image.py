"""Render a topology snapshot to PNG/JPEG bytes for static export."""

from __future__ import annotations

import io
import math
from typing import Literal

from zhaviz.topology.builder import TopologySnapshot
from zhaviz.utils.exceptions import ExportError

# matplotlib markers for the renderer's node shapes
_MARKERS = {"box": "s", "ellipse": "o", "circle": "o"}
_SIZES = {"box": 1400, "ellipse": 1000, "circle": 700}


def render_topology_image(
    snapshot: TopologySnapshot,
    format: Literal["png", "jpeg", "jpg"] = "png",
    dpi: int = 100,
    figsize: tuple[float, float] = (12, 8),
) -> bytes:
    """Render the mesh with NetworkX + Matplotlib.

    Coordinators are pinned at the origin, edges are weighted by link
    quality so strong links pull their ends together, and edge color, width
    and dashing follow the same tiers as the interactive view.

    Raises:
        ExportError: drawing or encoding the image failed.
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    try:
        if not snapshot.nodes:
            return _empty_image_bytes(format, dpi)
        return _draw_topology(snapshot, format, dpi, figsize)
    except Exception as exc:
        plt.close("all")
        raise ExportError(f"Could not render topology as {format}: {exc}") from exc


def _draw_topology(
    snapshot: TopologySnapshot,
    format: Literal["png", "jpeg", "jpg"],
    dpi: int,
    figsize: tuple[float, float],
) -> bytes:
    import matplotlib.pyplot as plt
    import networkx as nx

    G = nx.Graph()
    for node in snapshot.nodes:
        G.add_node(node.id)
    for edge in snapshot.edges:
        # Edges may point at neighbors that were not in the device list
        if edge.source in G and edge.target in G:
            weight = 2000 / edge.length if math.isfinite(edge.length) and edge.length > 0 else 1.0
            G.add_edge(edge.source, edge.target, weight=weight)

    fixed = [node.id for node in snapshot.nodes if node.fixed]
    initial = {node_id: (0.0, 0.0) for node_id in fixed[:1]}
    try:
        pos = nx.spring_layout(
            G,
            pos=initial or None,
            fixed=list(initial) or None,
            weight="weight",
            iterations=100,
            seed=42,
        )
    except Exception:
        pos = nx.shell_layout(G)

    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")

    for shape, marker in _MARKERS.items():
        group = [node for node in snapshot.nodes if node.shape == shape]
        if not group:
            continue
        nx.draw_networkx_nodes(
            G,
            pos,
            nodelist=[node.id for node in group],
            node_color=[node.color.background for node in group],
            node_shape=marker,
            node_size=_SIZES[shape],
            edgecolors="#444444",
            ax=ax,
        )

    drawable = [edge for edge in snapshot.edges if G.has_edge(edge.source, edge.target)]
    for dashed in (False, True):
        group = [edge for edge in drawable if bool(edge.dashes) is dashed]
        if not group:
            continue
        nx.draw_networkx_edges(
            G,
            pos,
            edgelist=[(edge.source, edge.target) for edge in group],
            edge_color=[edge.color.color for edge in group],
            width=[max(edge.width / 3, 0.5) for edge in group],
            style="dashed" if dashed else "solid",
            ax=ax,
        )
    nx.draw_networkx_edge_labels(
        G,
        pos,
        edge_labels={(edge.source, edge.target): edge.label for edge in drawable},
        font_size=6,
        ax=ax,
    )

    labels = {}
    for node in snapshot.nodes:
        device = snapshot.index.get_by_ieee(node.id)
        name = device.display_name if device else node.id
        if len(name) > 20:
            name = name[:17] + "..."
        labels[node.id] = name
    nx.draw_networkx_labels(G, pos, labels=labels, font_size=7, font_color="black", ax=ax)

    ax.axis("off")
    plt.tight_layout(pad=0.5)

    buf = io.BytesIO()
    save_fmt = "jpg" if format in ("jpeg", "jpg") else "png"
    plt.savefig(buf, format=save_fmt, bbox_inches="tight", facecolor="white", dpi=dpi)
    plt.close(fig)
    buf.seek(0)
    return buf.read()


def _empty_image_bytes(format: Literal["png", "jpeg", "jpg"], dpi: int) -> bytes:
    """Placeholder image when no devices have been loaded."""
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(4, 2), dpi=dpi)
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")
    ax.text(0.5, 0.5, "No devices in topology", ha="center", va="center", fontsize=12)
    ax.axis("off")
    buf = io.BytesIO()
    save_fmt = "jpg" if format in ("jpeg", "jpg") else "png"
    plt.savefig(buf, format=save_fmt, bbox_inches="tight", facecolor="white", dpi=dpi)
    plt.close(fig)
    buf.seek(0)
    return buf.read()
