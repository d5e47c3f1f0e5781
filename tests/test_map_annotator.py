"""Tests for marker derivation and the clear-then-rebuild marker layer."""

import folium

from qap_scorer.map_annotator import MapAnnotator, MarkerLayer, build_markers
from qap_scorer.models import Coordinate, Marker, ScoreResult


class TestBuildMarkers:
    def test_one_marker_per_located_activity(self, score_result):
        markers = build_markers(score_result)
        assert markers == [
            Marker(Coordinate(33.75, -84.39), "Grocery Store: Kroger"),
            Marker(Coordinate(33.78, -84.37), "Public School: Grady High School"),
        ]

    def test_never_more_markers_than_activities(self, score_result):
        assert len(build_markers(score_result)) <= len(score_result.activities)

    def test_no_activities_no_markers(self, payload):
        payload["scored_activity_table"] = []
        assert build_markers(ScoreResult.from_payload(payload)) == []


class TestMapAnnotator:
    def test_render_replaces_previous_markers(self, payload, score_result):
        layer = MarkerLayer()
        annotator = MapAnnotator()
        annotator.render(score_result, layer)
        assert len(layer.markers) == 2

        payload["scored_activity_table"] = [payload["scored_activity_table"][1]]
        annotator.render(ScoreResult.from_payload(payload), layer)

        assert [m.label for m in layer.markers] == ["Public School: Grady High School"]

    def test_render_with_no_located_activities_clears_layer(self, payload, score_result):
        layer = MarkerLayer()
        MapAnnotator().render(score_result, layer)

        payload["scored_activity_table"] = [payload["scored_activity_table"][2]]
        MapAnnotator().render(ScoreResult.from_payload(payload), layer)

        assert layer.markers == []

    def test_markers_property_is_a_copy(self, score_result):
        layer = MarkerLayer()
        MapAnnotator().render(score_result, layer)
        layer.markers.clear()
        assert len(layer.markers) == 2


class TestFeatureGroup:
    def test_feature_group_holds_folium_markers(self, score_result):
        layer = MarkerLayer()
        MapAnnotator().render(score_result, layer)

        fg = layer.to_feature_group()

        assert isinstance(fg, folium.FeatureGroup)
        children = [c for c in fg._children.values() if isinstance(c, folium.Marker)]
        assert len(children) == 2
        assert children[0].location == [33.75, -84.39]
