"""
Batch travel weather endpoint.
"""
from fastapi import APIRouter, Depends, status

from travel_api.dependencies import get_geo_index, get_travel_weather_service
from travel_api.models.travel import TravelWeatherRequest, TravelWeatherResponse
from travel_api.services.geo_index import GeoIndex
from travel_api.services.travel_weather_service import TravelWeatherService
from weather_feeds.utils.helpers import utc_now_iso

router = APIRouter()


@router.post(
    "/travel-weather",
    response_model=TravelWeatherResponse,
    status_code=status.HTTP_200_OK,
    summary="Batch weather for route points",
    description="Resolve weather for many route points from the cache only"
)
async def travel_weather(
    request: TravelWeatherRequest,
    service: TravelWeatherService = Depends(get_travel_weather_service),
    geo_index: GeoIndex = Depends(get_geo_index),
):
    """
    Resolve weather for a batch of route points.

    Points within an airport's coverage radius get METAR; others get the
    pre-fetched waypoint weather stored under their id. Missing data is
    reported per point, so the response is always 200.

    Args:
        request: Route points with caller-supplied ids

    Returns:
        TravelWeatherResponse: Weather keyed by point id
    """
    weather = await service.resolve(request.points)

    return TravelWeatherResponse(
        weather=weather,
        airports=[airport.code for airport in geo_index.airports],
        cached_at=utc_now_iso(),
    )
