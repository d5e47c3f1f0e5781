"""
Explicit runtime configuration for the scoring client and map/search widgets
"""
import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SCORE_URL = "http://localhost:8000/score"
DEFAULT_APPLICATION_YEAR = 2024

# Atlanta, centre of the scoring service's Georgia extent
DEFAULT_MAP_LATITUDE = 33.749
DEFAULT_MAP_LONGITUDE = -84.388
DEFAULT_MAP_ZOOM = 10


@dataclass
class AppConfig:
    score_url: str = DEFAULT_SCORE_URL
    score_api_key: str = ""
    geocoding_api_key: str = ""
    application_year: int = DEFAULT_APPLICATION_YEAR
    http_timeout: float = 30.0
    geocoding_country: str = "US"
    map_latitude: float = DEFAULT_MAP_LATITUDE
    map_longitude: float = DEFAULT_MAP_LONGITUDE
    map_zoom: int = DEFAULT_MAP_ZOOM
    transport_retries: int = 0

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "AppConfig":
        """
        Build a config from environment variables (and a .env file if present)

        Args:
            dotenv_path: Optional explicit .env location

        Returns:
            AppConfig populated from QAP_* and GOOGLE_MAPS_API_KEY variables

        Raises:
            ValueError: If a numeric variable cannot be parsed or is out of range
        """
        load_dotenv(dotenv_path)
        return cls(
            score_url=os.getenv("QAP_SCORE_URL", DEFAULT_SCORE_URL),
            score_api_key=os.getenv("QAP_SCORE_API_KEY", ""),
            geocoding_api_key=os.getenv("GOOGLE_MAPS_API_KEY", ""),
            application_year=_env_number("QAP_APPLICATION_YEAR", DEFAULT_APPLICATION_YEAR, int, positive=True),
            http_timeout=_env_number("QAP_HTTP_TIMEOUT", 30.0, float, positive=True),
            transport_retries=_env_number("QAP_TRANSPORT_RETRIES", 0, int),
        )


def _env_number(name: str, default, cast, positive: bool = False):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {raw!r}")
    if positive and value <= 0:
        raise ValueError(f"{name} must be greater than zero, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value
