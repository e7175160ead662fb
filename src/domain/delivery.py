"""
Delivery estimates and route ordering
=====================================

Fixed linear models
-------------------
* Delivery time  = round(30 + 2 x distance_km) minutes
* Delivery cost  = 0 inside the seller's free radius, else
  base_cost + round(5 x (distance_km - free_radius_km))
* Carbon         = distance_km x emission_factor[vehicle]  (kg CO2)

Route ordering
--------------
Nearest-neighbour heuristic starting at the first point: repeatedly hop to
the closest unvisited point.  Ties keep the lowest input index because only
a strictly smaller distance replaces the current best.

Complexity: O(n^2) for ``optimal_route``; everything else O(n) or O(1).

**Note:** nearest-neighbour does NOT guarantee the shortest tour.  An exact
answer is a TSP instance; the greedy order is good enough for a handful of
local drop-offs.
"""

from __future__ import annotations

import math
from typing import Sequence

from .distance import distance
from .entities import GeoPoint
from .enums import VehicleType
from .errors import ValidationError

BASE_DELIVERY_MINUTES = 30
MINUTES_PER_KM = 2
COST_PER_EXTRA_KM = 5
DEFAULT_BASE_COST = 50.0
DEFAULT_AVERAGE_SPEED_KMH = 30.0

EMISSION_FACTORS: dict[VehicleType, float] = {
    VehicleType.BICYCLE: 0.0,
    VehicleType.MOTORCYCLE: 0.12,
    VehicleType.CAR: 0.2,
    VehicleType.TRUCK: 0.3,
}


def _round_half_up(value: float) -> int:
    # 30.5 -> 31, unlike round()'s banker's rounding
    return math.floor(value + 0.5)


def delivery_time(distance_km: float) -> int:
    """Estimated delivery time in minutes."""
    return _round_half_up(BASE_DELIVERY_MINUTES + MINUTES_PER_KM * distance_km)


def delivery_cost(
    distance_km: float,
    free_radius_km: float,
    base_cost: float = DEFAULT_BASE_COST,
) -> float:
    """Delivery charge in INR; free within *free_radius_km*."""
    if distance_km <= free_radius_km:
        return 0.0
    extra = _round_half_up((distance_km - free_radius_km) * COST_PER_EXTRA_KM)
    return float(max(0, base_cost + extra))


def carbon_footprint(
    distance_km: float, vehicle_type: VehicleType | str = VehicleType.MOTORCYCLE
) -> float:
    try:
        vehicle = VehicleType(vehicle_type)
    except ValueError:
        raise ValidationError(f"Unknown vehicle type: {vehicle_type}") from None
    return distance_km * EMISSION_FACTORS[vehicle]


def optimal_route(points: Sequence[GeoPoint]) -> list[GeoPoint]:
    if len(points) <= 2:
        return list(points)

    unvisited = list(points)
    current = unvisited.pop(0)
    route = [current]

    while unvisited:
        nearest_idx = 0
        best = math.inf
        for i, candidate in enumerate(unvisited):
            d = distance(current, candidate)
            if d < best:
                best = d
                nearest_idx = i
        current = unvisited.pop(nearest_idx)
        route.append(current)

    return route


def route_distance(route: Sequence[GeoPoint]) -> float:
    """Total length in km of visiting *route* in order."""
    return sum(distance(a, b) for a, b in zip(route, route[1:]))


def route_delivery_time(
    route: Sequence[GeoPoint],
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
) -> int:
    if average_speed_kmh <= 0:
        raise ValidationError("Average speed must be positive")
    return _round_half_up(route_distance(route) / average_speed_kmh * 60)
