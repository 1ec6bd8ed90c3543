"""
Dependency injection for FastAPI.
Builds the cache store, reference index, upstream clients and services once
and hands them to the routes and the scheduler.
"""
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from travel_api.services.cache_store import CacheStore, build_cache_store
from travel_api.services.geo_index import GeoIndex, ReferenceDataError
from travel_api.services.refresh_service import WeatherRefreshService
from travel_api.services.travel_weather_service import TravelWeatherService
from travel_api.services.weather_scheduler import WeatherScheduler
from travel_api.settings import get_api_key, load_airports, load_settings, load_waypoints
from weather_feeds.data_collection.checkwx_client import CheckWXClient
from weather_feeds.data_collection.rate_limiter import RateLimiter, build_rate_limiter
from weather_feeds.data_collection.weatherapi_client import WeatherAPIClient
from weather_feeds.utils.logger import get_logger


CHECKWX_API_KEY_ENV = "CHECKWX_API_KEY"
WEATHER_API_KEY_ENV = "WEATHER_API_KEY"


class ConfigurationError(Exception):
    """Missing credentials or invalid reference data; reported before any job runs."""


@lru_cache()
def get_settings() -> Dict[str, Any]:
    """
    Load settings once and cache in memory.

    Returns:
        dict: Parsed api.yaml with environment overrides
    """
    return load_settings()


@lru_cache()
def get_geo_index() -> GeoIndex:
    """
    Load the airport and waypoint tables once.

    Raises:
        ConfigurationError: If the tables are malformed or violate uniqueness
    """
    try:
        return GeoIndex(load_airports(), load_waypoints())
    except (ReferenceDataError, ValidationError) as e:
        raise ConfigurationError(f"Invalid reference data: {e}")


@lru_cache()
def get_cache_store() -> CacheStore:
    """Shared cache store for the refresh jobs and readers."""
    backend = get_settings().get("cache", {}).get("backend", "memory")
    try:
        return build_cache_store(backend)
    except ValueError as e:
        raise ConfigurationError(str(e))


@lru_cache()
def _get_rate_limiter(provider: str) -> Optional[RateLimiter]:
    provider_config = get_settings().get("providers", {}).get(provider, {})
    return build_rate_limiter(provider_config.get("rate_limits"), provider, get_logger())


def get_rate_limit_stats() -> List[Dict[str, Any]]:
    """Usage of every provider limiter created so far."""
    stats = []
    for provider in ("checkwx", "weatherapi"):
        limiter = _get_rate_limiter(provider)
        if limiter is not None:
            stats.append(limiter.get_stats())
    return stats


def get_metar_client() -> CheckWXClient:
    """
    CheckWX client configured from settings.

    Raises:
        ConfigurationError: If CHECKWX_API_KEY is not set
    """
    api_key = get_api_key(CHECKWX_API_KEY_ENV)
    if not api_key:
        raise ConfigurationError(f"{CHECKWX_API_KEY_ENV} is not configured")

    config = get_settings().get("providers", {}).get("checkwx", {})
    return CheckWXClient(
        api_key=api_key,
        base_url=config.get("base_url", "https://api.checkwx.com/metar"),
        timeout=config.get("timeout", 10),
        rate_limiter=_get_rate_limiter("checkwx")
    )


def get_weather_client() -> WeatherAPIClient:
    """
    WeatherAPI.com client configured from settings.

    Raises:
        ConfigurationError: If WEATHER_API_KEY is not set
    """
    api_key = get_api_key(WEATHER_API_KEY_ENV)
    if not api_key:
        raise ConfigurationError(f"{WEATHER_API_KEY_ENV} is not configured")

    config = get_settings().get("providers", {}).get("weatherapi", {})
    return WeatherAPIClient(
        api_key=api_key,
        base_url=config.get("base_url", "https://api.weatherapi.com/v1/current.json"),
        timeout=config.get("timeout", 10),
        rate_limiter=_get_rate_limiter("weatherapi")
    )


def get_refresh_service() -> WeatherRefreshService:
    """
    Refresh jobs wired to the shared cache and both upstream clients.

    Raises:
        ConfigurationError: If either provider key is missing
    """
    settings = get_settings()
    cache_config = settings.get("cache", {})
    refresh_config = settings.get("refresh", {})

    return WeatherRefreshService(
        cache=get_cache_store(),
        geo_index=get_geo_index(),
        metar_client=get_metar_client(),
        weather_client=get_weather_client(),
        metar_ttl_seconds=cache_config.get("metar_ttl_seconds", 1200),
        waypoint_ttl_seconds=cache_config.get("waypoint_ttl_seconds", 2100),
        batch_size=refresh_config.get("waypoint_batch_size", 10),
        batch_pause_seconds=refresh_config.get("waypoint_batch_pause_seconds", 0.5)
    )


def get_travel_weather_service() -> TravelWeatherService:
    """Cache-only batch resolver."""
    return TravelWeatherService(cache=get_cache_store(), geo_index=get_geo_index())


@lru_cache()
def get_weather_scheduler() -> WeatherScheduler:
    """Global scheduler instance started by the application lifespan."""
    scheduler_config = get_settings().get("scheduler", {})
    return WeatherScheduler(
        service_provider=get_refresh_service,
        aviation_interval_seconds=scheduler_config.get("aviation_interval_seconds", 900),
        waypoint_interval_seconds=scheduler_config.get("waypoint_interval_seconds", 1800)
    )
