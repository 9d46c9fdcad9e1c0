"""Unit tests for the device index."""

from __future__ import annotations

from zhaviz.topology.device_index import DeviceIndex


def test_lookups_by_both_keys(devices, mesh_ieee):
    index = DeviceIndex.from_devices(devices)
    assert len(index) == 3
    assert index.get_by_ieee(mesh_ieee["coordinator"]).device_reg_id == "reg-coordinator"
    assert index.get_by_reg_id("reg-sensor").ieee == mesh_ieee["end_device"]
    assert mesh_ieee["coordinator"] in index


def test_missing_keys_return_none(devices):
    index = DeviceIndex.from_devices(devices)
    assert index.get_by_ieee("ff:ff") is None
    assert index.get_by_reg_id("nope") is None


def test_devices_without_registry_id_are_only_keyed_by_ieee(make_device):
    index = DeviceIndex.from_devices([make_device("a", device_reg_id=None)])
    assert index.get_by_ieee("a") is not None
    assert dict(index.by_reg_id) == {}


def test_zoom_choices_sorted_by_display_name(devices):
    choices = DeviceIndex.from_devices(devices).zoom_choices()
    assert choices == [
        ("reg-router", "Hallway Plug"),
        ("reg-sensor", "lumi.sensor_magnet"),
        ("reg-coordinator", "Silicon Labs EZSP"),
    ]
