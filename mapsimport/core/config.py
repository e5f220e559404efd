"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    places_base_url: str
    places_api_key: str
    database_url: str
    worker_port: int = 8080
    short_link_timeout: float = 10.0
    nearby_radius_m: int = 100
    photo_max_width: int = 800

    @property
    def places_configured(self) -> bool:
        return bool(self.places_base_url and self.places_api_key)


@dataclass(frozen=True)
class PlacesConfig:
    """Explicit Places API configuration handed to the link resolver."""

    places_base_url: str
    places_api_key: str
    short_link_timeout: float = 10.0
    nearby_radius_m: int = 100

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlacesConfig":
        if not settings.places_base_url or not settings.places_api_key:
            raise ConfigError("GOOGLE_PLACE_URL and GOOGLE_PLACE_API_KEY must be set to resolve Google Maps links.")
        return cls(
            places_base_url=settings.places_base_url.rstrip("/"),
            places_api_key=settings.places_api_key,
            short_link_timeout=settings.short_link_timeout,
            nearby_radius_m=settings.nearby_radius_m,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    places_base_url = (os.getenv("GOOGLE_PLACE_URL") or DEFAULT_PLACES_BASE_URL).rstrip("/")
    places_api_key = os.getenv("GOOGLE_PLACE_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    worker_port = int(os.getenv("PORT") or os.getenv("WORKER_PORT") or "8080")
    short_link_timeout = float(os.getenv("SHORT_LINK_TIMEOUT", "10"))
    nearby_radius_m = int(os.getenv("NEARBY_RADIUS_M", "100"))
    photo_max_width = int(os.getenv("PLACE_PHOTO_MAX_WIDTH", "800"))

    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if not places_api_key:
        logger.warning("GOOGLE_PLACE_API_KEY is not configured; Google Places requests will fail.")

    return Settings(
        places_base_url=places_base_url,
        places_api_key=places_api_key,
        database_url=database_url,
        worker_port=worker_port,
        short_link_timeout=short_link_timeout,
        nearby_radius_m=nearby_radius_m,
        photo_max_width=photo_max_width,
    )
