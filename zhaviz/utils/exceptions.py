"""Exception hierarchy for the topology visualizer."""

from __future__ import annotations


class TopologyVizError(Exception):
    """Base exception for all topology visualizer errors."""


class DataFetchError(TopologyVizError):
    """Device data source failure (transport, HTTP status, unreadable snapshot)."""


class InvalidPayloadError(DataFetchError):
    """The data source answered, but not with a device list."""


class ExportError(TopologyVizError):
    """Graph export or image rendering failure."""
