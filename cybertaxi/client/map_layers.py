# cybertaxi/client/map_layers.py
"""
Turns API vehicle/garage lists into marker descriptions for the map.
Pure functions; fleet_map.py does the folium rendering.
"""

import html
from dataclasses import dataclass
from numbers import Real
from typing import Iterable, List, Optional, Tuple

from cybertaxi.utils.vehicle_status import is_known_status, normalise_status, style_for_status
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)

Bounds = Tuple[Tuple[float, float], Tuple[float, float]]


@dataclass
class MarkerSpec:
    id: str
    coords: Tuple[float, float]
    css_class: str
    popup: str
    kind: str = "vehicle"      # vehicle | garage


def is_valid_coords(coords) -> bool:
    if not isinstance(coords, (list, tuple)) or len(coords) != 2:
        return False
    if any(isinstance(v, bool) or not isinstance(v, Real) for v in coords):
        return False
    lat, lng = coords
    return -90 <= lat <= 90 and -180 <= lng <= 180


def filter_valid_vehicles(vehicles: Iterable[dict]) -> List[dict]:
    """Drop vehicles without an id, with unknown status, or with unusable coordinates."""
    valid = []
    for v in vehicles:
        if v.get("id") and is_known_status(v.get("status")) and is_valid_coords(v.get("coords")):
            valid.append(v)
        else:
            logger.warning(f"Skipping vehicle with invalid data: {v.get('id')!r} coords={v.get('coords')!r}")
    return valid


def vehicle_popup(vehicle: dict, owner: str) -> str:
    label = "Your Vehicle" if owner == "player" else "Other Player"
    return (
        f"<b>{html.escape(str(vehicle.get('type', 'Vehicle')))} ({label})</b><br>"
        f"ID: {html.escape(str(vehicle['id']))}<br>"
        f"Status: {html.escape(normalise_status(vehicle.get('status')))}<br>"
        f"Battery: {vehicle.get('battery', 0)}%<br>"
        f"Mileage: {vehicle.get('mileage') or 0}"
    )


def build_vehicle_markers(vehicles: Iterable[dict], owner: str = "player") -> List[MarkerSpec]:
    return [
        MarkerSpec(
            id=str(v["id"]),
            coords=(float(v["coords"][0]), float(v["coords"][1])),
            css_class=style_for_status(v.get("status"), owner),
            popup=vehicle_popup(v, owner),
        )
        for v in filter_valid_vehicles(vehicles)
    ]


def build_garage_markers(garages: Iterable[dict]) -> List[MarkerSpec]:
    markers = []
    for g in garages:
        if not is_valid_coords(g.get("coords")):
            logger.warning(f"Skipping garage {g.get('id')!r} with invalid coords {g.get('coords')!r}")
            continue
        kind = "Garage" if g.get("type") == "garage" else "Lot"
        markers.append(MarkerSpec(
            id=str(g["id"]),
            coords=(float(g["coords"][0]), float(g["coords"][1])),
            css_class="garage-marker",
            popup=f"{kind}: {html.escape(str(g.get('name', '')))}<br>Capacity: {g.get('capacity', 0)}",
            kind="garage",
        ))
    return markers


def compute_bounds(markers: Iterable[MarkerSpec]) -> Optional[Bounds]:
    """[[south, west], [north, east]] around every marker, or None if empty."""
    points = [m.coords for m in markers]
    if not points:
        return None
    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    return (min(lats), min(lngs)), (max(lats), max(lngs))
