# cybertaxi/utils/vehicle_status.py
"""
Vehicle enums and the status → marker style table.
Shared by the API validators and the map client so both agree on one status set.
"""

VEHICLE_TYPES = ("Model Y", "Model X", "Model S", "Cybertruck")

VEHICLE_STATUSES = ("active", "fare", "parked", "maintenance", "cleaning", "new")
DEFAULT_PURCHASE_STATUS = "new"

GARAGE_TYPES = ("garage", "lot")

# status → CSS marker class for the owner's own vehicles
STATUS_STYLES = {
    "active": "active-marker",
    "fare": "active-marker",
    "parked": "parked-marker",
    "maintenance": "parked-marker",
    "cleaning": "parked-marker",
    "new": "new-marker",
}
FALLBACK_STYLE = "parked-marker"
OTHERS_STYLE = "vehicle-marker-others"


def normalise_status(status) -> str:
    return str(status or "").strip().lower()


def is_known_status(status) -> bool:
    return normalise_status(status) in STATUS_STYLES


def style_for_status(status, owner: str = "player") -> str:
    """Marker class for a vehicle. Other players' vehicles share one grey style."""
    if owner != "player":
        return OTHERS_STYLE
    return STATUS_STYLES.get(normalise_status(status), FALLBACK_STYLE)
