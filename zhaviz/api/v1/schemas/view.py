"""Request/response models for the interactive view API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ViewState(BaseModel):
    filter_text: str | None = None
    zoomed_device_id: str | None = None
    physics_enabled: bool = True
    auto_zoom: bool = True
    stream_subscribers: int = 0


class FilterRequest(BaseModel):
    text: str | None = Field(default=None, examples=["kitchen"])


class FilterResponse(BaseModel):
    matched: list[str] = Field(default_factory=list)
    state: ViewState


class ZoomRequest(BaseModel):
    device_reg_id: str | None = None


class ToggleRequest(BaseModel):
    enabled: bool


class RendererEventRequest(BaseModel):
    event: Literal["click", "doubleClick", "stabilized"]
    nodes: list[str] = Field(default_factory=list)
