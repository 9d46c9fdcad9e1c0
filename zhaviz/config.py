from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ZHA gateway
    ZHA_GATEWAY_URL: str = "http://homeassistant.local:8123/api/zha"
    ZHA_GATEWAY_TOKEN: str = ""
    REQUEST_TIMEOUT_S: float = 30.0

    # Offline snapshot; takes precedence over the gateway when set
    ZHA_SNAPSHOT_FILE: str = ""

    # View
    DEFAULT_ZOOM_DEVICE_ID: str = ""
    STREAM_PING_INTERVAL_S: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()
