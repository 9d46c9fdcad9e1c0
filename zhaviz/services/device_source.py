"""Where device lists and neighbor tables come from.

``HttpDeviceSource`` talks to a ZHA gateway over HTTP; ``FileDeviceSource``
replays a JSON snapshot (a bare device list or ``{"devices": [...]}``).
Failures surface as :class:`DataFetchError` and are never retried here.
"""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from zhaviz.config import Settings
from zhaviz.models.schemas import Device
from zhaviz.utils.exceptions import DataFetchError, InvalidPayloadError
from zhaviz.utils.logging import get_logger

logger = get_logger(__name__)


def parse_devices(payload: Any) -> list[Device]:
    """Validate a device-list payload record by record.

    Null optional fields fall back to their defaults and unreadable neighbor
    entries are dropped on their own, so only a record without a usable
    ``ieee`` is logged and skipped.
    """
    if isinstance(payload, dict) and "devices" in payload:
        payload = payload["devices"]
    if not isinstance(payload, list):
        raise InvalidPayloadError(f"Expected a list of devices, got {type(payload).__name__}")

    devices: list[Device] = []
    for position, record in enumerate(payload):
        try:
            devices.append(Device.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "device_record_skipped",
                position=position,
                errors=exc.error_count(),
                error=str(exc).splitlines()[0],
            )
    return devices


class DeviceSource(ABC):
    @abstractmethod
    async def fetch_devices(self) -> list[Device]:
        """Current devices with their latest neighbor reports."""

    @abstractmethod
    async def refresh_topology(self) -> None:
        """Ask the backend to rescan neighbor tables; returns once it has."""

    async def close(self) -> None:
        return None


class HttpDeviceSource(DeviceSource):
    """ZHA gateway client: ``GET {base}/devices`` and ``POST {base}/topology/update``."""

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
        )

    async def fetch_devices(self) -> list[Device]:
        payload = await self._request("GET", "/devices")
        devices = parse_devices(payload)
        logger.info("devices_fetched", source="http", devices=len(devices))
        return devices

    async def refresh_topology(self) -> None:
        await self._request("POST", "/topology/update")
        logger.info("topology_refresh_requested", source="http")

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str) -> Any:
        try:
            resp = await self._client.request(method, path)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "gateway_http_error",
                method=method,
                path=path,
                status=exc.response.status_code,
            )
            raise DataFetchError(
                f"Gateway returned HTTP {exc.response.status_code} for {method} {path}"
            ) from exc
        except httpx.RequestError as exc:
            logger.error("gateway_unreachable", method=method, path=path, error=str(exc))
            raise DataFetchError(f"Gateway unreachable: {exc}") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except json.JSONDecodeError as exc:
            raise InvalidPayloadError(f"Gateway sent invalid JSON for {method} {path}") from exc


class FileDeviceSource(DeviceSource):
    """Serves a JSON snapshot; re-read on every fetch so edits show up on refresh."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def fetch_devices(self) -> list[Device]:
        try:
            raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except OSError as exc:
            logger.error("snapshot_unreadable", path=str(self._path), error=str(exc))
            raise DataFetchError(f"Cannot read snapshot {self._path}: {exc}") from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidPayloadError(f"Snapshot {self._path} is not valid JSON: {exc}") from exc

        devices = parse_devices(payload)
        logger.info("devices_fetched", source="file", path=str(self._path), devices=len(devices))
        return devices

    async def refresh_topology(self) -> None:
        # A static snapshot has nothing to rescan
        logger.info("topology_refresh_requested", source="file", path=str(self._path))


def build_device_source(settings: Settings) -> DeviceSource:
    if settings.ZHA_SNAPSHOT_FILE:
        return FileDeviceSource(settings.ZHA_SNAPSHOT_FILE)
    return HttpDeviceSource(
        settings.ZHA_GATEWAY_URL,
        token=settings.ZHA_GATEWAY_TOKEN,
        timeout=settings.REQUEST_TIMEOUT_S,
    )
