# cybertaxi/client/fleet_map.py
"""
Leaflet fleet map rendered with folium.

Markers go into Leaflet.markercluster groups (folium's MarkerCluster plugin).
The view starts on Austin. Bounds are computed once, the first time non-empty
data arrives; later updates reuse them instead of re-fitting to new markers.
"""

from typing import Iterable, Optional

import folium
from folium.plugins import MarkerCluster

from cybertaxi.client.map_layers import (
    MarkerSpec, build_garage_markers, build_vehicle_markers, compute_bounds,
)
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)

AUSTIN = (30.2672, -97.7431)
DEFAULT_ZOOM = 12
MAX_CLUSTER_RADIUS = 50

CLUSTER_ICON_JS = """
function(cluster) {
    return L.divIcon({
        html: '<div class="custom-marker vehicle-cluster-custom">' + cluster.getChildCount() + '</div>',
        className: '',
        iconSize: [30, 30]
    });
}
"""

MARKER_CSS = """
<style>
.custom-marker { border-radius: 50%; border: 2px solid #0ff; box-shadow: 0 0 6px #0ff; }
.active-marker { background: #39ff14; }
.parked-marker { background: #ffd300; }
.new-marker { background: #00e5ff; }
.vehicle-marker-others { background: #888; border-color: #555; box-shadow: none; }
.garage-marker { background: #b026ff; border-radius: 3px; }
.vehicle-cluster-custom { width: 30px; height: 30px; line-height: 26px; text-align: center;
                          color: #fff; background: rgba(0, 229, 255, 0.6); }
</style>
"""


def tile_url(api_base_url: str, style: str = "dark") -> str:
    return f"{api_base_url.rstrip('/')}/tiles/{style}/{{z}}/{{x}}/{{y}}.png"


class FleetMap:
    def __init__(self, api_base_url: str, style: str = "dark"):
        self.api_base_url = api_base_url
        self.style = style
        self.bounds = None
        self.bounds_fitted = False
        self.marker_count = 0
        self.map = self._new_map()

    def _new_map(self) -> folium.Map:
        m = folium.Map(location=AUSTIN, zoom_start=DEFAULT_ZOOM, zoom_control=False,
                       tiles=None, control_scale=False)
        folium.TileLayer(
            tiles=tile_url(self.api_base_url, self.style),
            attr="Custom Tiles © CyberTaxi Team",
            max_zoom=18,
            name=self.style,
        ).add_to(m)
        m.get_root().header.add_child(folium.Element(MARKER_CSS))
        return m

    def _cluster(self, name: str) -> MarkerCluster:
        return MarkerCluster(
            name=name,
            options={
                "showCoverageOnHover": True,
                "zoomToBoundsOnClick": True,
                "spiderfyOnMaxZoom": True,
                "maxClusterRadius": MAX_CLUSTER_RADIUS,
            },
            icon_create_function=CLUSTER_ICON_JS,
        )

    @staticmethod
    def _add_marker(layer, spec: MarkerSpec):
        size = 20 if spec.kind == "garage" else 15
        folium.Marker(
            location=spec.coords,
            icon=folium.DivIcon(
                html=f'<div class="custom-marker {spec.css_class}"></div>',
                icon_size=(size, size),
                icon_anchor=(size / 2, size / 2),
            ),
            popup=folium.Popup(spec.popup, max_width=300),
        ).add_to(layer)

    def update(self, player_vehicles: Iterable[dict], other_vehicles: Iterable[dict] = (),
               garages: Iterable[dict] = ()):
        """Rebuild the marker layers from fresh API data."""
        own = build_vehicle_markers(player_vehicles, owner="player")
        others = build_vehicle_markers(other_vehicles, owner="other")
        garage_markers = build_garage_markers(garages)

        self.map = self._new_map()
        for name, specs in (("Your fleet", own), ("Other players", others)):
            cluster = self._cluster(name)
            for spec in specs:
                self._add_marker(cluster, spec)
            cluster.add_to(self.map)
        for spec in garage_markers:
            self._add_marker(self.map, spec)

        everything = own + others + garage_markers
        self.marker_count = len(everything)
        bounds = compute_bounds(everything)
        if bounds and not self.bounds_fitted:
            self.bounds = bounds
            self.bounds_fitted = True
            logger.info(f"Fitting map to {self.marker_count} markers: {bounds}")
        if self.bounds_fitted:
            self.map.fit_bounds([list(self.bounds[0]), list(self.bounds[1])])

    def html(self) -> str:
        return self.map.get_root().render()

    def save(self, path: str):
        self.map.save(path)
        logger.info(f"Fleet map written to {path} ({self.marker_count} markers)")


def render_fleet_map(client, output_path: Optional[str] = None) -> FleetMap:
    """Fetch the caller's fleet, other active vehicles and garages, and render them."""
    fleet_map = FleetMap(client.base_url)
    fleet_map.update(
        client.fetch_player_vehicles(),
        client.fetch_other_vehicles(),
        client.fetch_player_garages(),
    )
    if output_path:
        fleet_map.save(output_path)
    return fleet_map
