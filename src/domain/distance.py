"""
Distance calculation using the Haversine formula.

Assumption
----------
We use great-circle (Haversine) distance instead of a real routing engine.
Sellers are ranked and delivery is priced on straight-line distance; the
storage layer's spatial index is only used as a coarse pre-filter.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math
from typing import TypedDict

from .entities import GeoPoint

EARTH_RADIUS_KM = 6_371.0


class BoundingBox(TypedDict):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def distance(p1: GeoPoint, p2: GeoPoint) -> float:
    return haversine_km(p1.latitude, p1.longitude, p2.latitude, p2.longitude)


def is_within_radius(point: GeoPoint, center: GeoPoint, radius_km: float) -> bool:
    return distance(point, center) <= radius_km


def bounding_box(center: GeoPoint, radius_km: float) -> BoundingBox:
    """
    Approximate lat/lon box enclosing a circle of *radius_km* around *center*.

    Near the poles the longitude delta is undefined, so latitude is clamped
    and longitude spans the whole globe.
    """
    ang = radius_km / EARTH_RADIUS_KM
    lat = math.radians(center.latitude)
    lon = math.radians(center.longitude)

    min_lat = lat - ang
    max_lat = lat + ang

    if min_lat > -math.pi / 2 and max_lat < math.pi / 2:
        delta_lon = math.asin(min(1.0, math.sin(ang) / math.cos(lat)))
        min_lon = lon - delta_lon
        max_lon = lon + delta_lon
        if min_lon < -math.pi:
            min_lon += 2 * math.pi
        if max_lon > math.pi:
            max_lon -= 2 * math.pi
    else:
        min_lat = max(min_lat, -math.pi / 2)
        max_lat = min(max_lat, math.pi / 2)
        min_lon = -math.pi
        max_lon = math.pi

    return BoundingBox(
        min_lat=math.degrees(min_lat),
        max_lat=math.degrees(max_lat),
        min_lon=math.degrees(min_lon),
        max_lon=math.degrees(max_lon),
    )
