# cybertaxi/schemas/coords.py
"""Shared [lat, lng] validation for vehicle and garage bodies."""

from numbers import Real


def validate_coords(value, field_name: str = "coords"):
    """
    Accept exactly two real numbers within latitude/longitude range.
    Out-of-range values are rejected, never clamped.
    """
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or any(isinstance(v, bool) or not isinstance(v, Real) for v in value)
    ):
        raise ValueError(f"Invalid {field_name} format, must be [lat, lng]")
    lat, lng = float(value[0]), float(value[1])
    if not -90 <= lat <= 90:
        raise ValueError(f"Invalid {field_name} latitude {lat}, must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise ValueError(f"Invalid {field_name} longitude {lng}, must be between -180 and 180")
    return [lat, lng]
