# playback.py
# Simulated position source: evenly spaced fixes along a route polyline.

from typing import Iterator, List

import numpy as np

from .geo_utils import haversine_distance
from .models import Coord


def simulate_route(points: List[Coord], step_m: float = 20.0) -> Iterator[Coord]:
    """
    Yield positions every step_m metres along a polyline, ending on its last point.

    Segments are interpolated linearly in lat/lng, which is accurate enough
    at city scale.

    Args:
        points: Polyline vertices in travel order.
        step_m: Spacing between generated fixes.
    """
    if step_m <= 0:
        raise ValueError("step_m must be positive")
    if not points:
        return

    yield points[0]
    for start, end in zip(points, points[1:]):
        length = haversine_distance(start.lat, start.lng, end.lat, end.lng)
        count = max(1, int(np.ceil(length / step_m)))
        fractions = np.linspace(0.0, 1.0, count + 1)[1:]
        lats = start.lat + (end.lat - start.lat) * fractions
        lngs = start.lng + (end.lng - start.lng) * fractions
        for lat, lng in zip(lats, lngs):
            yield Coord(float(lat), float(lng))
