"""Request/response models for the topology API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class TopologyResponse(BaseModel):
    loaded: bool
    built_at: datetime
    nodes: list[dict] = Field(default_factory=list)
    edges: list[dict] = Field(default_factory=list)
    node_count: int = 0
    edge_count: int = 0


class DeviceChoice(BaseModel):
    device_reg_id: str
    name: str


class ReloadResponse(BaseModel):
    status: Literal["loaded", "stale"]
    node_count: int = 0
    edge_count: int = 0
    built_at: datetime
