#!/usr/bin/env python3
"""Configuration for the FUTÁR client."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Final, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_BASE_URL: Final[str] = "https://futar.bkk.hu/api/query/v1/ws/otp/api/where"
API_TIMEOUT: Final[float] = 15.0
USER_AGENT: Final[str] = "futar-client/1.0"
SERVICE_TIMEZONE: Final[str] = "Europe/Budapest"

DEFAULT_VERSION: Final[int] = 3
DEFAULT_KEY: Final[str] = ""

DEFAULT_MINUTES_BEFORE: Final[int] = 0
DEFAULT_MINUTES_AFTER: Final[int] = 30
DEFAULT_IF_MODIFIED_SINCE: Final[int] = 0

DEFAULT_MAX_TRANSFERS: Final[int] = 5
DEFAULT_NUM_ITINERARIES: Final[int] = 10
DEFAULT_MAX_WALK_DISTANCE: Final[int] = 3000
DEFAULT_OPTIMIZE: Final[str] = "QUICK"
DEFAULT_MODES: Final[str] = "WALK,SUBWAY,RAIL,FERRY,TRAM,TROLLEYBUS,BUS"

OPTIMIZE_CHOICES: Final[tuple[str, ...]] = ("QUICK", "TRANSFERS", "WALK", "TRIANGLE")

TRIANGLE_DEFAULTS: Final[dict[str, float]] = {
    "triangleSafetyFactor": 1,
    "triangleTimeFactor": 0,
    "triangleSlopeFactor": 0,
}


class Settings(BaseSettings):
    """Process-wide settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="FUTAR_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default=API_BASE_URL, description="Base URL of the service")
    api_timeout: float = Field(
        default=API_TIMEOUT, ge=1.0, le=300.0, description="Request timeout in seconds"
    )
    user_agent: str = Field(default=USER_AGENT)
    timezone: str = Field(
        default=SERVICE_TIMEZONE,
        description="Time zone used for the service's calendar dates",
    )

    api_key: str = Field(default=DEFAULT_KEY)
    api_version: int = Field(default=DEFAULT_VERSION)
    include_references: bool = Field(default=True)

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["json", "text"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class ClientConfig(BaseModel):
    """Immutable per-client defaults, read by every endpoint call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(default=DEFAULT_KEY, alias="apiKey")
    api_version: int = Field(default=DEFAULT_VERSION, alias="apiVersion")
    include_references: bool = Field(default=True, alias="includeReferences")

    # Falsy key and version fall back to the defaults; only a missing
    # includeReferences does, so an explicit False is kept.
    @field_validator("api_key", mode="before")
    @classmethod
    def default_api_key(cls, v: Any) -> Any:
        return v or DEFAULT_KEY

    @field_validator("api_version", mode="before")
    @classmethod
    def default_api_version(cls, v: Any) -> Any:
        return v or DEFAULT_VERSION

    @field_validator("include_references", mode="before")
    @classmethod
    def default_include_references(cls, v: Any) -> Any:
        return True if v is None else v

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClientConfig":
        settings = settings or get_settings()
        return cls(
            api_key=settings.api_key,
            api_version=settings.api_version,
            include_references=settings.include_references,
        )

    @classmethod
    def coerce(cls, config: Union["ClientConfig", Mapping[str, Any]]) -> "ClientConfig":
        """Build a config from a mapping or return an existing instance."""
        if isinstance(config, cls):
            return config
        return cls.model_validate(dict(config))
