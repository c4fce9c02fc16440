# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects, no imports from other project modules.

import math
from typing import Optional


EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lng1: Origin in decimal degrees.
        lat2, lng2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_valid_position(lat: Optional[float], lng: Optional[float]) -> bool:
    """True if (lat, lng) is a finite, in-range pair of real numbers."""
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (spoken distances)."""
    return int(math.floor(value + 0.5))
