"""Great-circle distance and coordinate checks.

All functions are pure with no side effects.
"""

from __future__ import annotations

import math

# Mean Earth radius in meters (for Haversine).
EARTH_RADIUS_M = 6_371_000.0


class InvalidCoordinateError(ValueError):
    """A latitude/longitude pair is non-finite or out of range."""


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two points.

    No validation: non-finite input yields NaN, which never satisfies a
    ``<=`` radius test.
    """
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """True for finite WGS-84 decimal degrees within range."""
    try:
        return (
            math.isfinite(lat) and math.isfinite(lng)
            and -90.0 <= lat <= 90.0
            and -180.0 <= lng <= 180.0
        )
    except TypeError:
        return False


def validate_coordinates(lat: float, lng: float) -> None:
    """Raise InvalidCoordinateError unless (lat, lng) is a usable position."""
    if not is_valid_coordinate(lat, lng):
        raise InvalidCoordinateError(f"invalid coordinates: lat={lat!r}, lng={lng!r}")
