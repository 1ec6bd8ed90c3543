"""
Batch travel weather resolver.

Answers route weather queries purely from the cache: METAR when the point is
within an airport's coverage radius, otherwise the pre-fetched waypoint
weather stored under the point's own id. It never calls an upstream provider;
a point with nothing cached resolves to a cache miss.
"""
import asyncio
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from travel_api.models.travel import (
    CachedWeather,
    CacheMissWeather,
    ErrorWeather,
    MetarWeather,
    ResolvedWeather,
    RoutePoint,
)
from travel_api.services.cache_keys import metar_key, waypoint_key
from travel_api.services.cache_store import CacheStore
from travel_api.services.geo_index import GeoIndex, NearestAirport
from travel_api.services.metar_presentation import format_metar_condition, map_metar_to_icon
from weather_feeds.models.records import AviationWeatherRecord, decode_aviation_entry
from weather_feeds.utils.logger import get_logger


CACHE_MISS_MESSAGE = "Weather not pre-cached. Wait for the next scheduled refresh or trigger /refresh/weather"


class TravelWeatherService:
    """
    Read-only consumer of the cache for batch route queries.
    """

    def __init__(self, cache: CacheStore, geo_index: GeoIndex, logger=None):
        """
        Initialize resolver.

        Args:
            cache: Cache store written by the refresh jobs
            geo_index: Configured airports and waypoints
            logger: Logger instance
        """
        self.cache = cache
        self.geo_index = geo_index
        self.logger = logger or get_logger()

    async def resolve(self, points: Sequence[RoutePoint]) -> Dict[str, ResolvedWeather]:
        """
        Resolve weather for every point concurrently.

        Args:
            points: Route points; de-duplication is the caller's job

        Returns:
            Mapping of point id to resolved weather. Input order is not
            preserved; callers match results by id.
        """
        results: List[ResolvedWeather] = await asyncio.gather(
            *(self._resolve_point_safely(point) for point in points)
        )
        return {result.id: result for result in results}

    async def _resolve_point_safely(self, point: RoutePoint) -> ResolvedWeather:
        """One point's failure must not affect the others."""
        try:
            return await self.resolve_point(point)
        except Exception as e:
            self.logger.error(f"✗ Cache read error for {point.id}: {e}")
            return ErrorWeather(id=point.id, error=str(e) or type(e).__name__)

    async def resolve_point(self, point: RoutePoint) -> ResolvedWeather:
        """
        Resolve a single point.

        Args:
            point: Route point

        Returns:
            METAR-derived, waypoint-cache-derived or cache-miss weather
        """
        nearest = self.geo_index.nearest_airport(point.lat, point.lon)

        if nearest is not None and nearest.in_range:
            metar = await self.get_cached_metar(nearest.airport.code)
            if metar is not None:
                return self._metar_weather(point, nearest, metar)

        return await self._waypoint_weather(point)

    async def get_cached_metar(self, airport_code: str) -> Optional[AviationWeatherRecord]:
        """
        Read a usable METAR for an airport.

        Args:
            airport_code: ICAO code

        Returns:
            The cached record, or None if absent, a failure marker or unreadable
        """
        raw = await self.cache.get(metar_key(airport_code))
        if raw is None:
            return None

        try:
            entry = decode_aviation_entry(raw)
        except ValidationError:
            self.logger.warning(f"Ignoring unreadable METAR cache entry for {airport_code}")
            return None

        return entry if isinstance(entry, AviationWeatherRecord) else None

    @staticmethod
    def _metar_weather(point: RoutePoint, nearest: NearestAirport, metar: AviationWeatherRecord) -> MetarWeather:
        return MetarWeather(
            id=point.id,
            airport_icao=nearest.airport.code,
            airport_name=nearest.airport.name,
            distance_to_airport_km=round(nearest.distance_km, 1),
            temp_c=metar.temp_c,
            condition=format_metar_condition(metar.conditions, metar.clouds),
            icon=map_metar_to_icon(metar.conditions, metar.clouds, metar.visibility_km),
            humidity=metar.humidity,
            wind_kph=metar.wind_kph,
            wind_dir=metar.wind_dir,
            visibility_km=metar.visibility_km,
            pressure_mb=metar.pressure_hpa,
            flight_category=metar.flight_category,
            raw_metar=metar.raw_text,
            observed=metar.observed,
        )

    async def _waypoint_weather(self, point: RoutePoint) -> ResolvedWeather:
        """Direct key lookup by point id; no distance computation, no live fetch."""
        raw = await self.cache.get(waypoint_key(point.id))
        if raw is None:
            return CacheMissWeather(id=point.id, error=CACHE_MISS_MESSAGE)

        record = CachedWeather.model_validate_json(raw)
        return record.model_copy(update={"id": point.id})
