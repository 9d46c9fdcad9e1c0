"""Lookup tables over one fetched device list."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from zhaviz.models.schemas import Device


class DeviceIndex:
    """Devices keyed by IEEE address and by device registry id.

    Built once per fetch and never mutated afterwards. Duplicate keys in the
    input resolve last-write-wins.
    """

    def __init__(self, by_ieee: Mapping[str, Device], by_reg_id: Mapping[str, Device]) -> None:
        self._by_ieee = MappingProxyType(dict(by_ieee))
        self._by_reg_id = MappingProxyType(dict(by_reg_id))

    @classmethod
    def from_devices(cls, devices: Iterable[Device]) -> DeviceIndex:
        devices = list(devices)
        return cls(
            by_ieee={device.ieee: device for device in devices},
            by_reg_id={
                device.device_reg_id: device
                for device in devices
                if device.device_reg_id is not None
            },
        )

    @property
    def by_ieee(self) -> Mapping[str, Device]:
        return self._by_ieee

    @property
    def by_reg_id(self) -> Mapping[str, Device]:
        return self._by_reg_id

    def get_by_ieee(self, ieee: str) -> Device | None:
        return self._by_ieee.get(ieee)

    def get_by_reg_id(self, device_reg_id: str) -> Device | None:
        return self._by_reg_id.get(device_reg_id)

    def zoom_choices(self) -> list[tuple[str, str]]:
        """(device_reg_id, display name) pairs for a device picker, sorted by name."""
        return sorted(
            ((reg_id, device.display_name) for reg_id, device in self._by_reg_id.items()),
            key=lambda choice: (choice[1].lower(), choice[0]),
        )

    def __len__(self) -> int:
        return len(self._by_ieee)

    def __contains__(self, ieee: object) -> bool:
        return ieee in self._by_ieee
