"""
Location client tests.

Upstream APIs are replaced by ``httpx.MockTransport``; every failure mode
must degrade to the documented default instead of raising.
"""

from datetime import datetime, timezone

import httpx
import pytest

from src.domain.entities import GeoPoint, WorkingHours
from src.infrastructure.location_client import (
    DEFAULT_LOCATION_NAME,
    LocationClient,
    WeatherReport,
    is_open_in_zone,
)
from tests.conftest import stub_location_transport

MUMBAI = GeoPoint(19.0760, 72.8777)
SHOP_HOURS = WorkingHours(start="09:00", end="18:00", days=(1, 2, 3, 4, 5, 6))


def client_for(handler) -> LocationClient:
    return LocationClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def failing(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, text="upstream down")


def raising(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def not_json(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="<html>rate limited</html>")


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_location_name(self, location_client):
        assert await location_client.location_name(MUMBAI) == "Mumbai"

    @pytest.mark.asyncio
    async def test_regional_languages_from_state(self, location_client):
        assert await location_client.regional_languages(MUMBAI) == ["mr", "en"]

    @pytest.mark.asyncio
    async def test_localized_names(self, location_client):
        names = await location_client.location_names(MUMBAI)
        assert names["hi"] == "Mumbai"
        assert names["en"] == "Mumbai"

    @pytest.mark.asyncio
    async def test_time_zone(self, location_client):
        assert await location_client.time_zone(MUMBAI) == "Asia/Kolkata"

    @pytest.mark.asyncio
    async def test_weather(self, location_client):
        report = await location_client.weather(MUMBAI)
        assert report == WeatherReport(
            temperature=31.5, conditions="Clear", is_delivery_friendly=True
        )

    @pytest.mark.asyncio
    async def test_thunderstorm_is_not_delivery_friendly(self):
        async with httpx.AsyncClient(
            transport=stub_location_transport(conditions="Thunderstorm")
        ) as http:
            report = await LocationClient(http).weather(MUMBAI)
        assert report.is_delivery_friendly is False

    @pytest.mark.asyncio
    async def test_request_parameters(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params)
            return httpx.Response(200, json={"zoneName": "Asia/Kolkata"})

        await client_for(handler).time_zone(MUMBAI)
        assert seen[0]["by"] == "position"
        assert float(seen[0]["lat"]) == pytest.approx(19.076)
        assert float(seen[0]["lng"]) == pytest.approx(72.8777)


class TestDegradation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("handler", [failing, raising, not_json])
    async def test_defaults_on_upstream_failure(self, handler):
        client = client_for(handler)
        assert await client.location_name(MUMBAI) == DEFAULT_LOCATION_NAME
        assert await client.regional_languages(MUMBAI) == ["hi", "en"]
        assert await client.time_zone(MUMBAI) == "UTC"
        assert await client.weather(MUMBAI) == WeatherReport()
        assert (await client.location_names(MUMBAI))["hi"] == "अज्ञात स्थान"

    @pytest.mark.asyncio
    async def test_missing_address_falls_back(self):
        client = client_for(lambda request: httpx.Response(200, json={"error": "none"}))
        assert await client.location_name(MUMBAI) == DEFAULT_LOCATION_NAME

    @pytest.mark.asyncio
    async def test_malformed_weather_payload(self):
        client = client_for(lambda request: httpx.Response(200, json={"main": {}}))
        assert await client.weather(MUMBAI) == WeatherReport()

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        client = client_for(lambda request: httpx.Response(200, json=["Asia/Kolkata"]))
        assert await client.time_zone(MUMBAI) == "UTC"

    @pytest.mark.asyncio
    async def test_town_used_when_no_city(self):
        client = client_for(
            lambda request: httpx.Response(200, json={"address": {"town": "Alibag"}})
        )
        assert await client.location_name(MUMBAI) == "Alibag"


class TestOpenNow:
    def test_open_in_local_time(self):
        # 05:00 UTC Monday is 10:30 in Kolkata
        now = datetime(2026, 3, 2, 5, 0, tzinfo=timezone.utc)
        assert is_open_in_zone("Asia/Kolkata", SHOP_HOURS, now)

    def test_closed_in_local_time(self):
        # 13:00 UTC Monday is 18:30 in Kolkata
        now = datetime(2026, 3, 2, 13, 0, tzinfo=timezone.utc)
        assert not is_open_in_zone("Asia/Kolkata", SHOP_HOURS, now)

    def test_local_day_differs_from_utc_day(self):
        # 20:00 UTC Saturday is 01:30 Sunday in Kolkata
        hours = WorkingHours(start="00:00", end="23:59", days=(6,))
        now = datetime(2026, 2, 28, 20, 0, tzinfo=timezone.utc)
        assert not is_open_in_zone("Asia/Kolkata", hours, now)
        assert is_open_in_zone("UTC", hours, now)

    def test_unknown_zone_is_closed(self):
        now = datetime(2026, 3, 2, 5, 0, tzinfo=timezone.utc)
        assert not is_open_in_zone("Mars/Olympus_Mons", SHOP_HOURS, now)

    @pytest.mark.asyncio
    async def test_client_is_open_now(self, location_client):
        now = datetime(2026, 3, 2, 5, 0, tzinfo=timezone.utc)
        assert await location_client.is_open_now(MUMBAI, SHOP_HOURS, now)
