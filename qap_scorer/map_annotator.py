"""
Map markers for the activities behind a score
"""
import logging
from typing import List

import folium

from .models import Marker, ScoreResult

logger = logging.getLogger(__name__)


def build_markers(result: ScoreResult) -> List[Marker]:
    """One marker per activity that has a location, in activity order"""
    return [
        Marker(location=activity.location, label=f"{activity.category}: {activity.name}")
        for activity in result.activities
        if activity.location is not None
    ]


class MarkerLayer:
    """The set of markers currently shown on the map"""

    def __init__(self, name: str = "Scored activities"):
        self.name = name
        self._markers: List[Marker] = []

    @property
    def markers(self) -> List[Marker]:
        return list(self._markers)

    def clear(self) -> None:
        self._markers = []

    def add(self, marker: Marker) -> None:
        self._markers.append(marker)

    def to_feature_group(self) -> folium.FeatureGroup:
        fg = folium.FeatureGroup(name=self.name)
        for marker in self._markers:
            folium.Marker(
                list(marker.location.as_latlng()),
                popup=folium.Popup(marker.label, max_width=250),
                tooltip=marker.label,
                icon=folium.Icon(color="blue", icon="map-marker"),
            ).add_to(fg)
        return fg


class MapAnnotator:
    """Replaces the marker layer contents with the markers for a result.

    Always a full clear-then-rebuild, never a diff, so marker order follows
    the activity order of the latest result.
    """

    def render(self, result: ScoreResult, layer: MarkerLayer) -> None:
        layer.clear()
        for marker in build_markers(result):
            layer.add(marker)
        logger.info("Plotted %d of %d activities", len(layer.markers), len(result.activities))
