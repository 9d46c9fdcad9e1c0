"""Export the ZHA mesh topology from the configured source to a JSON or GraphML file."""

from __future__ import annotations

import argparse
import asyncio
import sys

from zhaviz.config import get_settings
from zhaviz.services.device_source import build_device_source
from zhaviz.services.topology_service import TopologyService
from zhaviz.topology.export import to_graphml, to_json
from zhaviz.utils.exceptions import DataFetchError
from zhaviz.utils.logging import setup_logging


async def main(fmt: str, refresh: bool) -> None:
    setup_logging(log_level="INFO", log_format="console")
    settings = get_settings()

    source = build_device_source(settings)
    topology = TopologyService(source)

    try:
        if refresh:
            await topology.refresh_topology()
        else:
            await topology.load()
    except DataFetchError as exc:
        print(f"Topology fetch failed: {exc}")
        sys.exit(1)
    finally:
        await source.close()

    snapshot = topology.snapshot
    if not snapshot.nodes:
        print("No devices found.")
        sys.exit(0)

    filename = f"zha_topology.{fmt}"
    content = to_graphml(snapshot) if fmt == "graphml" else to_json(snapshot)
    with open(filename, "w") as f:
        f.write(content)
    print(f"Topology exported to {filename}")
    print(f"  Nodes: {len(snapshot.nodes)}")
    print(f"  Edges: {len(snapshot.edges)}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--format", choices=["json", "graphml"], default="json")
    parser.add_argument("--refresh", action="store_true", help="rescan neighbor tables first")
    args = parser.parse_args()
    asyncio.run(main(args.format, args.refresh))
