"""
Domain value objects.

Patterns used
-------------
- ``GeoPoint`` validates its range on construction so every downstream
  geometric helper can assume sane coordinates.
- ``Rating.add`` maintains the running average without re-reading reviews.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import BusinessType, VerificationStatus
from .errors import ValidationError


class InvalidStateTransition(Exception):
    """Raised when a subscription status change violates the state machine."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValidationError(
                f"Latitude {self.latitude} is out of range [-90, 90]",
                suggestion="Please check your location and try again",
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise ValidationError(
                f"Longitude {self.longitude} is out of range [-180, 180]",
                suggestion="Please check your location and try again",
            )


@dataclass(frozen=True)
class WorkingHours:
    start: str  # "HH:MM"
    end: str  # "HH:MM"
    days: tuple[int, ...] = (1, 2, 3, 4, 5, 6)  # 0 = Sunday

    @staticmethod
    def _minutes(value: str) -> int:
        hours, minutes = value.split(":")
        return int(hours) * 60 + int(minutes)

    @property
    def start_minutes(self) -> int:
        return self._minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return self._minutes(self.end)


@dataclass
class Rating:
    average: float = 0.0
    count: int = 0

    def add(self, rating: int) -> None:
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        self.average = (self.average * self.count + rating) / (self.count + 1)
        self.count += 1


# ── Query options ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class SellerFilters:
    """Optional narrowing applied on top of nearby / text seller queries."""

    city: Optional[str] = None
    business_type: Optional[BusinessType] = None
    verification_status: Optional[VerificationStatus] = None
    negotiation_enabled: Optional[bool] = None
