"""Pydantic models for ZHA device payloads and the derived topology graph."""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)


# ── Device payloads (read-only input) ─────────────────────────────────


class NeighborReport(BaseModel):
    """One entry of a device's neighbor table, as that device reports it."""

    model_config = ConfigDict(extra="ignore")

    ieee: str
    lqi: str = ""
    relationship: str = ""
    nwk: int | str | None = None
    depth: int | str | None = None
    device_type: str | None = None

    @field_validator("lqi", mode="before")
    @classmethod
    def _lqi_as_string(cls, value: Any) -> str:
        # Gateways disagree on whether LQI is a JSON number or a string
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


class Device(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ieee: str
    device_reg_id: str | None = None
    name: str = ""
    user_given_name: str | None = None
    device_type: str = "EndDevice"
    nwk: int | str | None = None
    manufacturer: str | None = None
    model: str | None = None
    area_id: str | None = None
    available: bool = True
    neighbors: list[NeighborReport] = Field(default_factory=list)

    @field_validator("name", "device_type", "available", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("neighbors", mode="before")
    @classmethod
    def _valid_neighbors_only(cls, value: Any) -> Any:
        # One unreadable neighbor entry drops that entry, not the whole device
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("neighbor_table_ignored", type=type(value).__name__)
            return []

        neighbors: list[NeighborReport] = []
        for position, entry in enumerate(value):
            try:
                neighbors.append(NeighborReport.model_validate(entry))
            except ValidationError as exc:
                logger.warning(
                    "neighbor_entry_skipped",
                    position=position,
                    error=str(exc).splitlines()[0],
                )
        return neighbors

    @property
    def display_name(self) -> str:
        return self.user_given_name or self.name or self.ieee


# ── Graph model (derived) ─────────────────────────────────────────────


EdgeTier = Literal["strong", "medium", "weak"]
NodeShape = Literal["box", "ellipse", "circle"]


class EdgeColor(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: str
    highlight: str


class EdgeStyle(BaseModel):
    """Visual tier of a link, derived from its link-quality value."""

    model_config = ConfigDict(frozen=True)

    tier: EdgeTier
    color: EdgeColor
    width: float
    length: float
    physics: bool = False


class NodeColor(BaseModel):
    background: str


class GraphNode(BaseModel):
    id: str
    label: str
    shape: NodeShape
    mass: int
    fixed: bool = False
    color: NodeColor

    def to_vis(self) -> dict[str, Any]:
        return self.model_dump()


class GraphEdge(BaseModel):
    """One link per unordered device pair.

    ``source``/``target`` keep the direction in which the link was first
    reported. ``arrows`` and ``dashes`` are None once both ends have
    reported the link.
    """

    source: str
    target: str
    label: str
    tier: EdgeTier
    color: EdgeColor
    width: float
    length: float
    physics: bool = False
    arrows: dict[str, dict[str, bool]] | None = None
    dashes: bool | None = None

    @property
    def bidirectional(self) -> bool:
        return self.arrows is None and self.dashes is None

    def apply_style(self, style: EdgeStyle) -> None:
        self.tier = style.tier
        self.color = style.color
        self.width = style.width
        self.length = style.length
        self.physics = style.physics

    def to_vis(self) -> dict[str, Any]:
        """Renderer payload: ``from``/``to`` keys, absent and non-finite fields dropped."""
        data = self.model_dump(exclude={"source", "target", "tier"}, exclude_none=True)
        for key in ("width", "length"):
            if not math.isfinite(data[key]):
                del data[key]
        return {"from": self.source, "to": self.target, **data}
