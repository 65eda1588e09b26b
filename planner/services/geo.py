"""Great-circle helpers shared by the routing fallback and summaries."""

from __future__ import annotations

import math
from typing import Iterable, Protocol

EARTH_RADIUS_KM = 6371.0


class HasLatLng(Protocol):
    lat: float
    lng: float


def distance_km(a: HasLatLng, b: HasLatLng) -> float:
    """Haversine distance in kilometers."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    h = min(h, 1.0)  # rounding near antipodes
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def path_length_km(points: Iterable[HasLatLng]) -> float:
    """Sum of consecutive segment distances. 0 for fewer than two points."""
    pts = list(points)
    return sum(distance_km(pts[i], pts[i + 1]) for i in range(len(pts) - 1))
