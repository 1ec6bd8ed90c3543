"""
Health check endpoint for monitoring API and cache status.
"""
from fastapi import APIRouter, Depends, status
from pydantic import ValidationError

from travel_api.dependencies import (
    get_cache_store,
    get_geo_index,
    get_rate_limit_stats,
    get_weather_scheduler,
)
from travel_api.services.cache_keys import (
    AVIATION_SUMMARY_KEY,
    WAYPOINT_COUNT_KEY,
    WAYPOINT_UPDATED_KEY,
)
from travel_api.services.cache_store import CacheStore
from travel_api.services.geo_index import GeoIndex
from travel_api.services.weather_scheduler import WeatherScheduler
from weather_feeds.models.records import AviationSummary
from weather_feeds.utils.helpers import minutes_since, utc_now_iso

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(
    cache: CacheStore = Depends(get_cache_store),
    geo_index: GeoIndex = Depends(get_geo_index),
    scheduler: WeatherScheduler = Depends(get_weather_scheduler),
):
    """
    Health check endpoint to verify API and cache status.

    Returns:
        dict: Cache presence and age, scheduler state and upstream rate-limit usage
    """
    health_status = {
        "status": "ok",
        "timestamp": utc_now_iso(),
        "cache": {
            "metar": "empty",
            "metar_age_minutes": None,
            "metar_airports_ok": 0,
            "weather_points_cached": 0,
            "weather_last_updated": None,
            "weather_age_minutes": None,
        },
        "airport_count": len(geo_index.airports),
        "waypoint_count": len(geo_index.waypoints),
        "scheduler": scheduler.get_status(),
        "rate_limits": get_rate_limit_stats(),
    }

    # Check aviation summary
    try:
        metar_raw = await cache.get(AVIATION_SUMMARY_KEY)
        if metar_raw:
            summary = AviationSummary.model_validate_json(metar_raw)
            health_status["cache"]["metar"] = "available"
            health_status["cache"]["metar_age_minutes"] = minutes_since(summary.last_updated)
            health_status["cache"]["metar_airports_ok"] = summary.succeeded
    except ValidationError:
        health_status["cache"]["metar"] = "unreadable"
        health_status["status"] = "degraded"
    except Exception as e:
        health_status["cache"]["metar"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    # Check waypoint weather status keys
    try:
        weather_count = await cache.get(WAYPOINT_COUNT_KEY)
        health_status["cache"]["weather_points_cached"] = int(weather_count) if weather_count else 0
        weather_updated = await cache.get(WAYPOINT_UPDATED_KEY)
        health_status["cache"]["weather_last_updated"] = weather_updated
        health_status["cache"]["weather_age_minutes"] = minutes_since(weather_updated)
    except ValueError:
        health_status["status"] = "degraded"
    except Exception as e:
        health_status["cache"]["weather_points_cached"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    return health_status
