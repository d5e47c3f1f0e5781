"""
Site selection: address search and map clicks that produce a Coordinate
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import requests

from .config import AppConfig
from .models import Coordinate

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_ENDPOINT = "https://maps.googleapis.com/maps/api/geocode/json"
SEARCH_RESULT_ZOOM = 14

SelectionCallback = Callable[[Coordinate], None]


@dataclass
class MapView:
    """Where the map is currently centred; display-only, never scored"""
    latitude: float
    longitude: float
    zoom: float


class GeoSelector:
    """Emits selectionMade(Coordinate) once per completed search or map click"""

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.view = MapView(config.map_latitude, config.map_longitude, config.map_zoom)
        self._session = session or requests.Session()
        self._listeners: List[SelectionCallback] = []
        self._last_click: Optional[Tuple[float, float]] = None

    def on_selection(self, callback: SelectionCallback) -> None:
        self._listeners.append(callback)

    def _emit(self, coordinate: Coordinate) -> None:
        for callback in self._listeners:
            callback(coordinate)

    def search(self, address: str) -> Optional[Coordinate]:
        """
        Geocode an address and fire selectionMade with the first match

        Args:
            address: Free-text site address

        Returns:
            The selected Coordinate, or None if nothing was selected
        """
        if not address or not address.strip():
            return None
        if not self.config.geocoding_api_key:
            logger.warning("Address search skipped: no geocoding API key configured")
            return None

        params = {
            "address": address.strip(),
            "components": f"country:{self.config.geocoding_country}",
            "key": self.config.geocoding_api_key,
        }
        try:
            resp = self._session.get(
                GOOGLE_GEOCODE_ENDPOINT, params=params, timeout=self.config.http_timeout
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Geocoding failed for %r: %s", address, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Geocoding returned unexpected body for %r", address)
            return None

        status = str(data.get("status", "")).upper()
        if status != "OK" or not data.get("results"):
            if status != "ZERO_RESULTS":
                logger.warning(
                    "Geocoding status %s for %r: %s",
                    status, address, data.get("error_message", ""),
                )
            return None

        try:
            location = data["results"][0]["geometry"]["location"]
            coordinate = Coordinate(float(location["lat"]), float(location["lng"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Geocoding result for %r has unexpected shape: %r", address, e)
            return None
        self.view.latitude, self.view.longitude = coordinate.as_latlng()
        self.view.zoom = max(self.view.zoom, SEARCH_RESULT_ZOOM)
        self._emit(coordinate)
        return coordinate

    def confirm(self, latitude: float, longitude: float) -> Optional[Coordinate]:
        """Fire selectionMade for a map click, ignoring repeats of the same click"""
        click = (latitude, longitude)
        if click == self._last_click:
            return None
        self._last_click = click
        coordinate = Coordinate(latitude, longitude)
        self._emit(coordinate)
        return coordinate

    def update_view(self, center: Optional[dict], zoom: Optional[float]) -> None:
        if center and center.get("lat") is not None and center.get("lng") is not None:
            self.view.latitude = float(center["lat"])
            self.view.longitude = float(center["lng"])
        if zoom is not None:
            self.view.zoom = float(zoom)
