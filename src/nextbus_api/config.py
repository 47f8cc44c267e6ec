"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlencode

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# BusTracker only returns the full board for this exact query shape
_ETA_QUERY_TEMPLATE = {
    "route": "---",
    "direction": "---",
    "displaydirection": "---",
    "stop": "---",
    "findstop": "on",
    "selectedRtpiFeeds": "",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "NextBus API"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["auto", "console", "json"] = "auto"

    # Upstream feeds
    vehicle_positions_url: str = Field(
        default="https://bustracker.sbmtd.gov/gtfsrt/vehicles",
        validation_alias=AliasChoices("GTFS_RT_VEHICLES_URL", "VEHICLE_POSITIONS_URL"),
    )
    bustracker_base_url: str = Field(
        default="https://bustracker.sbmtd.gov/bustime/wireless/html/eta.jsp",
        validation_alias=AliasChoices("BUSTRACKER_URL", "BUSTRACKER_BASE_URL"),
    )
    user_agent: str = "nextbus-api/0.1"

    # Fetching
    fetch_timeout_sec: int = 15
    fetch_max_retries: int = 2
    fetch_backoff_base: float = 2.0

    # Vehicle refresh worker
    vehicle_refresh_interval_sec: int = 15
    vehicle_refresh_auto_start: bool = False

    # Stop boards
    max_predictions_per_stop: int = Field(default=6, ge=1, le=50)
    stop_catalog_path: str = ""

    def bustracker_eta_url(self, stop_id: str) -> str:
        """Build the arrival-board URL for a stop."""
        query = urlencode({**_ETA_QUERY_TEMPLATE, "id": stop_id})
        return f"{self.bustracker_base_url}?{query}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
