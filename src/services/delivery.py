"""Delivery planning built on the pure helpers in ``src.domain.delivery``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from src.config import settings
from src.domain.delivery import (
    DEFAULT_AVERAGE_SPEED_KMH,
    carbon_footprint,
    delivery_cost,
    delivery_time,
    optimal_route,
    route_delivery_time,
    route_distance,
)
from src.domain.entities import GeoPoint
from src.domain.enums import VehicleType


@dataclass
class DeliveryPlan:
    route: list[GeoPoint]
    distance_km: float
    duration_minutes: int
    carbon_kg: float


@dataclass
class DeliveryEstimate:
    distance_km: float
    delivery_minutes: int
    delivery_cost: float
    carbon_kg: float


def plan_delivery_route(
    points: Sequence[GeoPoint],
    vehicle: VehicleType = VehicleType.MOTORCYCLE,
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
) -> DeliveryPlan:
    """Order the stops greedily and summarise the resulting trip."""
    route = optimal_route(points)
    total = route_distance(route)
    return DeliveryPlan(
        route=route,
        distance_km=total,
        duration_minutes=route_delivery_time(route, average_speed_kmh),
        carbon_kg=carbon_footprint(total, vehicle),
    )


def estimate_delivery(
    distance_km: float,
    free_radius_km: float | None = None,
    vehicle: VehicleType = VehicleType.MOTORCYCLE,
) -> DeliveryEstimate:
    free_radius = (
        settings.default_free_delivery_radius_km if free_radius_km is None else free_radius_km
    )
    return DeliveryEstimate(
        distance_km=distance_km,
        delivery_minutes=delivery_time(distance_km),
        delivery_cost=delivery_cost(distance_km, free_radius, settings.base_delivery_cost),
        carbon_kg=carbon_footprint(distance_km, vehicle),
    )
