"""Transient view state owned by one interaction controller."""

from __future__ import annotations

from pydantic import BaseModel


class InteractionState(BaseModel):
    """Created when a view mounts; survives data refreshes."""

    filter_text: str | None = None
    zoomed_device_id: str | None = None
    physics_enabled: bool = True
    auto_zoom: bool = True
