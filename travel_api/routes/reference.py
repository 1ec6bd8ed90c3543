"""
Reference data endpoints: airports, waypoints, nearest airport and the cached
METAR summary.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from travel_api.dependencies import get_cache_store, get_geo_index, get_travel_weather_service
from travel_api.models.reference import (
    AirportListResponse,
    Location,
    NearestAirportResponse,
    WaypointListResponse,
)
from travel_api.services.cache_keys import AVIATION_SUMMARY_KEY
from travel_api.services.cache_store import CacheStore
from travel_api.services.geo_index import GeoIndex
from travel_api.services.travel_weather_service import TravelWeatherService
from weather_feeds.models.records import Airport, AviationSummary, Waypoint
from weather_feeds.utils.logger import get_logger

router = APIRouter()
logger = get_logger()


@router.get("/airports", response_model=AirportListResponse, summary="List airports with METAR coverage")
async def list_airports(geo_index: GeoIndex = Depends(get_geo_index)):
    airports = geo_index.airports
    return AirportListResponse(airports=airports, count=len(airports))


@router.get("/airports/{code}", response_model=Airport, summary="Get one airport")
async def get_airport(code: str, geo_index: GeoIndex = Depends(get_geo_index)):
    """Airport by ICAO code (case-insensitive)."""
    airport = geo_index.get_airport(code.upper())
    if airport is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown airport '{code}'"
        )
    return airport


@router.get("/waypoints", response_model=WaypointListResponse, summary="List pre-cached waypoints")
async def list_waypoints(geo_index: GeoIndex = Depends(get_geo_index)):
    waypoints = geo_index.waypoints
    return WaypointListResponse(waypoints=waypoints, count=len(waypoints))


@router.get("/waypoints/{waypoint_id}", response_model=Waypoint, summary="Get one waypoint")
async def get_waypoint(waypoint_id: str, geo_index: GeoIndex = Depends(get_geo_index)):
    waypoint = geo_index.get_waypoint(waypoint_id)
    if waypoint is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown waypoint '{waypoint_id}'"
        )
    return waypoint


@router.get("/metar", response_model=AviationSummary, summary="Cached METAR for all airports")
async def cached_metar(cache: CacheStore = Depends(get_cache_store)):
    """
    Return the summary written by the last aviation refresh.

    A cold or unreadable cache yields an empty summary; this endpoint never
    triggers a live fetch.
    """
    raw = await cache.get(AVIATION_SUMMARY_KEY)
    if not raw:
        return AviationSummary()

    try:
        return AviationSummary.model_validate_json(raw)
    except ValidationError:
        logger.warning("Cached METAR summary is unreadable")
        return AviationSummary()


@router.get("/nearest-airport", response_model=NearestAirportResponse, summary="Find the nearest METAR airport")
async def nearest_airport(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    geo_index: GeoIndex = Depends(get_geo_index),
    service: TravelWeatherService = Depends(get_travel_weather_service),
):
    """
    Nearest airport to a coordinate, with its cached METAR when in range.

    Args:
        lat: Latitude
        lon: Longitude

    Returns:
        NearestAirportResponse
    """
    location = Location(lat=lat, lon=lon)
    nearest = geo_index.nearest_airport(lat, lon)

    if nearest is None:
        return NearestAirportResponse(location=location, in_metar_range=False, message="No airports found")

    airport = nearest.airport
    response = NearestAirportResponse(
        location=location,
        nearest_airport=airport,
        distance_km=round(nearest.distance_km, 1),
        in_metar_range=nearest.in_range,
        message="",
    )

    if nearest.in_range:
        metar = await service.get_cached_metar(airport.code)
        if metar is not None:
            response.metar = metar
            response.message = f"Within {airport.name} METAR coverage"
        else:
            response.message = f"Within {airport.name} range but no cached METAR"
    else:
        response.message = (
            f"Outside METAR coverage. Nearest: {airport.name} "
            f"({round(nearest.distance_km)}km away, needs to be within {airport.radius_km:g}km)"
        )

    return response
