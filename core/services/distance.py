"""Distance metrics used by the clustering passes.

Both metrics take two `Photo` objects so that the generic clustering engine can
be instantiated with either of them.
"""

from __future__ import annotations

import math

from core.models import Photo

EARTH_RADIUS_M = 6_371_008.8


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two (lat, lon) points."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.asin(min(1.0, math.sqrt(a)))
    return EARTH_RADIUS_M * c


def geo_distance(a: Photo, b: Photo) -> float:
    """Distance in meters between the assigned coordinates of two photos.

    Photos without a coordinate are infinitely far from everything.
    """
    ca = a.coordinate
    cb = b.coordinate
    if ca is None or cb is None:
        return math.inf
    return haversine_m(ca.latitude, ca.longitude, cb.latitude, cb.longitude)


def time_distance(a: Photo, b: Photo) -> float:
    """Absolute difference in seconds between two capture dates."""
    if a.capture_date is None or b.capture_date is None:
        return math.inf
    return abs((a.capture_date - b.capture_date).total_seconds())
