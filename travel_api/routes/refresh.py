"""
Manual refresh triggers for operators.
"""
from fastapi import APIRouter, Depends

from travel_api.dependencies import get_refresh_service
from travel_api.models.reference import RefreshResponse
from travel_api.services.refresh_service import WeatherRefreshService
from weather_feeds.utils.helpers import utc_now_iso

router = APIRouter(prefix="/refresh")


@router.post("/metar", response_model=RefreshResponse, summary="Refresh METAR cache")
async def refresh_metar(service: WeatherRefreshService = Depends(get_refresh_service)):
    """Run the aviation refresh now and acknowledge with its counts."""
    result = await service.refresh_aviation()
    return RefreshResponse(
        status="metar_refreshed",
        timestamp=utc_now_iso(),
        succeeded={"metar": result.succeeded},
        failed={"metar": result.failed},
        failed_ids={"metar": result.failed_codes},
    )


@router.post("/weather", response_model=RefreshResponse, summary="Refresh waypoint weather cache")
async def refresh_weather(service: WeatherRefreshService = Depends(get_refresh_service)):
    """Run the waypoint refresh now and acknowledge with its counts."""
    result = await service.refresh_waypoints()
    return RefreshResponse(
        status="weather_refreshed",
        timestamp=utc_now_iso(),
        succeeded={"weather": result.succeeded},
        failed={"weather": result.failed},
        failed_ids={"weather": result.failed_ids},
    )


@router.post("/all", response_model=RefreshResponse, summary="Refresh all caches")
async def refresh_all(service: WeatherRefreshService = Depends(get_refresh_service)):
    """Run both refresh jobs now."""
    aviation, waypoints = await service.refresh_all()
    return RefreshResponse(
        status="all_refreshed",
        timestamp=utc_now_iso(),
        succeeded={"metar": aviation.succeeded, "weather": waypoints.succeeded},
        failed={"metar": aviation.failed, "weather": waypoints.failed},
        failed_ids={"metar": aviation.failed_codes, "weather": waypoints.failed_ids},
    )
