"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import HealthCheck, settings

# A cold run rebuilds Hypothesis' unicode cache during the first draw, which
# trips the input-generation speed health check on an otherwise healthy suite.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")

COORDINATOR_IEEE = "00:0d:6f:00:0a:90:69:e7"
ROUTER_IEEE = "00:17:88:01:02:03:04:05"
END_DEVICE_IEEE = "00:15:8d:00:01:02:03:04"


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Keep tests independent of any local .env or gateway."""
    monkeypatch.setenv("ZHA_GATEWAY_URL", "http://gateway.test/api/zha")
    monkeypatch.setenv("ZHA_GATEWAY_TOKEN", "test-token")
    monkeypatch.setenv("ZHA_SNAPSHOT_FILE", "")
    monkeypatch.setenv("DEFAULT_ZOOM_DEVICE_ID", "")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def device_payload() -> list[dict[str, Any]]:
    """A three-device mesh as the gateway reports it."""
    return [
        {
            "ieee": COORDINATOR_IEEE,
            "device_reg_id": "reg-coordinator",
            "name": "Silicon Labs EZSP",
            "user_given_name": None,
            "device_type": "Coordinator",
            "nwk": 0,
            "manufacturer": "Silicon Labs",
            "model": "EZSP",
            "area_id": None,
            "available": True,
            "neighbors": [
                {"ieee": ROUTER_IEEE, "lqi": "150", "relationship": "Sibling"},
            ],
        },
        {
            "ieee": ROUTER_IEEE,
            "device_reg_id": "reg-router",
            "name": "IKEA of Sweden TRADFRI control outlet",
            "user_given_name": "Hallway Plug",
            "device_type": "Router",
            "nwk": 6699,
            "manufacturer": "IKEA of Sweden",
            "model": "TRADFRI control outlet",
            "area_id": "hallway",
            "available": True,
            "neighbors": [
                {"ieee": COORDINATOR_IEEE, "lqi": "200", "relationship": "Sibling"},
                {"ieee": END_DEVICE_IEEE, "lqi": "90", "relationship": "Child"},
            ],
        },
        {
            "ieee": END_DEVICE_IEEE,
            "device_reg_id": "reg-sensor",
            "name": "lumi.sensor_magnet",
            "user_given_name": None,
            "device_type": "EndDevice",
            "nwk": "5f3a",
            "manufacturer": None,
            "model": None,
            "area_id": None,
            "available": False,
            "neighbors": [
                {"ieee": ROUTER_IEEE, "lqi": "50", "relationship": "Parent"},
            ],
        },
    ]


@pytest.fixture
def devices(device_payload):
    from zhaviz.models.schemas import Device

    return [Device.model_validate(record) for record in device_payload]


@pytest.fixture
def make_device():
    """Factory for single devices with sensible defaults."""
    from zhaviz.models.schemas import Device

    def _make(ieee: str, device_type: str = "Router", neighbors=None, **overrides) -> Device:
        data: dict[str, Any] = {
            "ieee": ieee,
            "device_reg_id": f"reg-{ieee}",
            "device_type": device_type,
            "manufacturer": "Acme",
            "model": "Relay",
            "available": True,
            "neighbors": [
                {"ieee": n[0], "lqi": n[1], "relationship": n[2]} for n in (neighbors or [])
            ],
        }
        data.update(overrides)
        return Device.model_validate(data)

    return _make


@pytest.fixture
def mesh_ieee() -> dict[str, str]:
    return {
        "coordinator": COORDINATOR_IEEE,
        "router": ROUTER_IEEE,
        "end_device": END_DEVICE_IEEE,
    }
