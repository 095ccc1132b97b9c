"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Subway Arrivals"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Stations of interest (JSON list in the environment, e.g. '["A32N","A32S"]')
    station_list: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("STATION_LIST", "STATIONS"),
    )

    # Display name used when presenting departures
    stop_name: str = ""

    def missing_required_env(self) -> list[str]:
        """Return required environment variables that are missing or empty."""
        missing: list[str] = []

        if not self.station_list:
            missing.append("STATION_LIST")
        if not self.stop_name:
            missing.append("STOP_NAME")

        return missing


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
