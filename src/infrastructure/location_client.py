"""
External location services: reverse geocoding, time zones and weather.

Every lookup degrades silently: network errors, non-200 responses and
malformed payloads are logged and replaced by a neutral default so seller
and delivery flows never fail because a third-party API is down.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from pydantic import BaseModel

from src.config import settings
from src.domain.entities import GeoPoint, WorkingHours
from src.domain.localization import (
    LANGUAGE_CODES,
    UNKNOWN_LOCATION,
    is_within_business_hours,
    languages_for_region,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_NAME = UNKNOWN_LOCATION["en"]
DEFAULT_TIME_ZONE = "UTC"
UNFRIENDLY_CONDITIONS = frozenset({"Thunderstorm", "Heavy Rain", "Snow"})


class LocationServiceError(Exception):
    """Raised internally when an upstream answer cannot be used."""


class WeatherReport(BaseModel):
    temperature: float = 0.0
    conditions: str = "Unknown"
    is_delivery_friendly: bool = True


class LocationClient:
    """
    Thin async wrapper over Nominatim, TimeZoneDB and OpenWeatherMap.

    A shared ``httpx.AsyncClient`` can be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise a short-lived client is opened per
    call.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._timeout = settings.http_timeout_seconds

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict:
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(
                    timeout=self._timeout,
                    headers={"User-Agent": "maala-backend"},
                ) as client:
                    response = await client.get(url, params=params)
        except httpx.TimeoutException:
            raise LocationServiceError(f"Timed out calling {url}")
        except httpx.RequestError as e:
            raise LocationServiceError(f"Network error calling {url}: {e}")

        if response.status_code != 200:
            raise LocationServiceError(
                f"{url} answered with HTTP {response.status_code}"
            )
        try:
            body = response.json()
        except ValueError:
            raise LocationServiceError(f"{url} returned a non-JSON body")
        if not isinstance(body, dict):
            raise LocationServiceError(f"{url} returned an unexpected payload")
        return body

    async def _reverse(self, point: GeoPoint, **extra) -> dict:
        data = await self._get_json(
            settings.nominatim_url,
            {
                "format": "json",
                "lat": point.latitude,
                "lon": point.longitude,
                "zoom": 10,
                **extra,
            },
        )
        address = data.get("address")
        if not isinstance(address, dict):
            raise LocationServiceError("Reverse geocoding returned no address")
        return address

    # ── public API ────────────────────────────────────────────────────

    async def location_name(self, point: GeoPoint) -> str:
        try:
            address = await self._reverse(point)
        except LocationServiceError as e:
            logger.warning("Location name lookup degraded: %s", e)
            return DEFAULT_LOCATION_NAME
        return (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or DEFAULT_LOCATION_NAME
        )

    async def location_names(self, point: GeoPoint) -> dict[str, str]:
        """Most specific place name keyed by every supported language code."""
        try:
            address = await self._reverse(
                point, **{"accept-language": ",".join(sorted(LANGUAGE_CODES))}
            )
        except LocationServiceError as e:
            logger.warning("Localized location lookup degraded: %s", e)
            return dict(UNKNOWN_LOCATION)
        name = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("state")
            or DEFAULT_LOCATION_NAME
        )
        return {code: name for code in sorted(LANGUAGE_CODES)}

    async def regional_languages(self, point: GeoPoint) -> list[str]:
        try:
            address = await self._reverse(point)
        except LocationServiceError as e:
            logger.warning("Regional language lookup degraded: %s", e)
            return languages_for_region(None)
        return languages_for_region(address.get("state") or address.get("region"))

    async def time_zone(self, point: GeoPoint) -> str:
        try:
            data = await self._get_json(
                settings.timezone_api_url,
                {
                    "key": settings.timezone_api_key,
                    "format": "json",
                    "by": "position",
                    "lat": point.latitude,
                    "lng": point.longitude,
                },
            )
        except LocationServiceError as e:
            logger.warning("Time zone lookup degraded: %s", e)
            return DEFAULT_TIME_ZONE
        return data.get("zoneName") or DEFAULT_TIME_ZONE

    async def weather(self, point: GeoPoint) -> WeatherReport:
        try:
            data = await self._get_json(
                settings.weather_api_url,
                {
                    "lat": point.latitude,
                    "lon": point.longitude,
                    "appid": settings.weather_api_key,
                    "units": "metric",
                },
            )
            temperature = float(data["main"]["temp"])
            conditions = str(data["weather"][0]["main"])
        except LocationServiceError as e:
            logger.warning("Weather lookup degraded: %s", e)
            return WeatherReport()
        except (KeyError, IndexError, TypeError, ValueError):
            logger.warning("Weather payload malformed for %s", point)
            return WeatherReport()

        return WeatherReport(
            temperature=temperature,
            conditions=conditions,
            is_delivery_friendly=conditions not in UNFRIENDLY_CONDITIONS,
        )

    async def is_open_now(
        self,
        point: GeoPoint,
        hours: WorkingHours,
        now: Optional[datetime] = None,
    ) -> bool:
        return is_open_in_zone(await self.time_zone(point), hours, now)


def is_open_in_zone(
    zone_name: str, hours: WorkingHours, now: Optional[datetime] = None
) -> bool:
    """Business-hours check at *now* (UTC by default) in the named zone."""
    try:
        zone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown time zone %r; treating seller as closed", zone_name)
        return False
    local_now = (now or datetime.now(timezone.utc)).astimezone(zone)
    return is_within_business_hours(hours, local_now)


def get_location_client() -> LocationClient:
    """FastAPI dependency; overridden in tests."""
    return LocationClient()
