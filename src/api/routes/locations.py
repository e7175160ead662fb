"""
Location endpoints
==================

GET /api/v1/locations/info      -- place names, regional languages, zone, weather
GET /api/v1/locations/languages -- the supported Indian languages
"""

from fastapi import APIRouter, Depends, Query, Request

from src.api.middleware import DEFAULT_RATE, limiter
from src.api.schemas import LanguageOut, LocationInfoResponse, WeatherOut
from src.domain.entities import GeoPoint
from src.domain.localization import INDIAN_LANGUAGES
from src.infrastructure.location_client import LocationClient, get_location_client

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get(
    "/info",
    response_model=LocationInfoResponse,
    summary="Everything known about a point; upstream failures fall back to defaults",
)
@limiter.limit(DEFAULT_RATE)
async def location_info(
    request: Request,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    client: LocationClient = Depends(get_location_client),
):
    point = GeoPoint(latitude, longitude)
    weather = await client.weather(point)
    return LocationInfoResponse(
        name=await client.location_name(point),
        names=await client.location_names(point),
        languages=await client.regional_languages(point),
        time_zone=await client.time_zone(point),
        weather=WeatherOut(**weather.model_dump()),
    )


@router.get("/languages", response_model=list[LanguageOut], summary="Supported languages")
async def languages():
    return [
        LanguageOut(key=key, code=lang.code, name=lang.name)
        for key, lang in INDIAN_LANGUAGES.items()
    ]
