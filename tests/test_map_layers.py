# tests/test_map_layers.py
"""Marker building, bounds and the folium fleet map."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
from cybertaxi.client.fleet_map import AUSTIN, FleetMap, render_fleet_map, tile_url
from cybertaxi.client.map_layers import (
    build_garage_markers, build_vehicle_markers, compute_bounds,
    filter_valid_vehicles, is_valid_coords,
)


def make_vehicle(vid="CT-001", status="active", coords=(30.2672, -97.7431)):
    return {"id": vid, "type": "Model Y", "status": status, "coords": list(coords) if coords else coords,
            "battery": 90, "mileage": 120}


class TestFiltering:
    def test_valid_coords(self):
        assert is_valid_coords([30.2672, -97.7431])
        assert not is_valid_coords([91, 0])
        assert not is_valid_coords([0, 181])
        assert not is_valid_coords([True, 0])
        assert not is_valid_coords("30,-97")
        assert not is_valid_coords(None)

    def test_invalid_vehicles_dropped(self):
        vehicles = [
            make_vehicle("CT-001"),
            make_vehicle("CT-002", status="teleporting"),
            make_vehicle("CT-003", coords=None),
            make_vehicle("", status="active"),
        ]
        assert [v["id"] for v in filter_valid_vehicles(vehicles)] == ["CT-001"]


class TestMarkers:
    def test_own_vehicles_styled_by_status(self):
        markers = build_vehicle_markers([make_vehicle("CT-001", "fare"), make_vehicle("CT-002", "new")])
        assert [m.css_class for m in markers] == ["active-marker", "new-marker"]
        assert "Your Vehicle" in markers[0].popup

    def test_other_vehicles_grey(self):
        markers = build_vehicle_markers([make_vehicle()], owner="other")
        assert markers[0].css_class == "vehicle-marker-others"
        assert "Other Player" in markers[0].popup

    def test_garage_markers(self):
        markers = build_garage_markers([
            {"id": 1, "name": "Downtown", "type": "garage", "capacity": 5, "coords": [30.25, -97.75]},
            {"id": 2, "name": "Broken", "type": "lot", "capacity": 3, "coords": None},
        ])
        assert len(markers) == 1
        assert markers[0].css_class == "garage-marker"
        assert markers[0].kind == "garage"

    def test_bounds(self):
        markers = build_vehicle_markers([
            make_vehicle("CT-001", coords=(30.20, -97.80)),
            make_vehicle("CT-002", coords=(30.30, -97.70)),
        ])
        assert compute_bounds(markers) == ((30.20, -97.80), (30.30, -97.70))

    def test_popup_text_is_escaped(self):
        vehicle = make_vehicle()
        vehicle["type"] = "<img src=x onerror=alert(1)>"
        garage = {"id": 1, "name": "<script>x</script>", "type": "garage", "capacity": 5,
                  "coords": [30.25, -97.75]}

        vehicle_popup = build_vehicle_markers([vehicle])[0].popup
        garage_popup = build_garage_markers([garage])[0].popup

        assert "<img" not in vehicle_popup
        assert "&lt;img" in vehicle_popup
        assert "<script>" not in garage_popup
        assert "&lt;script&gt;" in garage_popup

    def test_bounds_empty(self):
        assert compute_bounds([]) is None


class TestFleetMap:
    def test_tile_url_points_at_proxy(self):
        assert tile_url("http://localhost:3000/api/") == "http://localhost:3000/api/tiles/dark/{z}/{x}/{y}.png"

    def test_empty_map_keeps_austin_view(self):
        fleet_map = FleetMap("http://localhost:3000/api")
        fleet_map.update([])
        assert fleet_map.bounds is None
        assert not fleet_map.bounds_fitted
        assert list(fleet_map.map.location) == list(AUSTIN)

    def test_bounds_fitted_only_once(self):
        fleet_map = FleetMap("http://localhost:3000/api")
        fleet_map.update([make_vehicle("CT-001", coords=(30.20, -97.80))])
        first = fleet_map.bounds

        fleet_map.update([make_vehicle("CT-001", coords=(31.50, -96.00))])
        assert fleet_map.bounds == first
        assert fleet_map.bounds_fitted

    def test_html_contains_clusters_and_styles(self):
        fleet_map = FleetMap("http://localhost:3000/api")
        fleet_map.update(
            [make_vehicle("CT-001", "active")],
            [make_vehicle("CT-009", "active", coords=(30.28, -97.74))],
            [{"id": 1, "name": "Downtown", "type": "garage", "capacity": 5, "coords": [30.25, -97.75]}],
        )
        html = fleet_map.html()
        assert "markerClusterGroup" in html
        assert "active-marker" in html
        assert "vehicle-marker-others" in html
        assert "garage-marker" in html
        assert fleet_map.marker_count == 3

    def test_render_fleet_map_uses_client(self, tmp_path):
        client = MagicMock()
        client.base_url = "http://localhost:3000/api"
        client.fetch_player_vehicles.return_value = [make_vehicle()]
        client.fetch_other_vehicles.return_value = []
        client.fetch_player_garages.return_value = []
        output = tmp_path / "map.html"

        fleet_map = render_fleet_map(client, str(output))

        assert fleet_map.marker_count == 1
        assert output.exists()
