"""
Refresh jobs that pre-fetch upstream weather into the cache.

Two independent jobs:

- aviation refresh: concurrent fan-out over every configured airport
- waypoint refresh: fixed-size batches with a pause between batches to stay
  inside the generic weather provider's rate limits

Each job is the sole writer of its key namespace. Per-item failures are caught
at the item boundary and reported in the job result; they never abort sibling
fetches and never propagate out of the job.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from travel_api.services.cache_keys import (
    AVIATION_SUMMARY_KEY,
    WAYPOINT_COUNT_KEY,
    WAYPOINT_UPDATED_KEY,
    metar_key,
    waypoint_key,
)
from travel_api.services.cache_store import CacheStore
from travel_api.services.geo_index import GeoIndex
from weather_feeds.data_collection.errors import UpstreamFailure
from weather_feeds.models.records import (
    Airport,
    AviationFetchFailure,
    AviationOutcome,
    AviationSummary,
    AviationWeatherRecord,
    Waypoint,
)
from weather_feeds.utils.helpers import chunked, utc_now_iso
from weather_feeds.utils.logger import get_logger


@dataclass
class AviationRefreshResult:
    """Per-airport outcome map of one aviation refresh."""

    outcomes: Dict[str, AviationOutcome]
    last_updated: str

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes.values() if isinstance(outcome, AviationWeatherRecord))

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def failed_codes(self) -> List[str]:
        return [code for code, outcome in self.outcomes.items() if isinstance(outcome, AviationFetchFailure)]


@dataclass
class WaypointRefreshResult:
    """Success/failure breakdown of one waypoint refresh."""

    succeeded: int
    failed: int
    last_updated: str
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def failed_ids(self) -> List[str]:
        return list(self.errors)


class WeatherRefreshService:
    """
    Runs the aviation and waypoint refresh jobs against an injected cache.
    """

    def __init__(
        self,
        cache: CacheStore,
        geo_index: GeoIndex,
        metar_client,
        weather_client,
        metar_ttl_seconds: int = 1200,
        waypoint_ttl_seconds: int = 2100,
        batch_size: int = 10,
        batch_pause_seconds: float = 0.5,
        clock: Callable[[], str] = utc_now_iso,
        sleep=asyncio.sleep,
        logger=None
    ):
        """
        Initialize refresh service.

        Args:
            cache: Cache store the jobs write to
            geo_index: Configured airports and waypoints
            metar_client: Object with an async fetch_aviation(airport) method
            weather_client: Object with an async fetch_generic(waypoint) method
            metar_ttl_seconds: TTL of per-airport and summary keys
            waypoint_ttl_seconds: TTL of per-waypoint and status keys
            batch_size: Waypoints fetched concurrently per batch
            batch_pause_seconds: Pause between waypoint batches
            clock: Returns the current time as an ISO string
            sleep: Coroutine used for the inter-batch pause
            logger: Logger instance
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self.cache = cache
        self.geo_index = geo_index
        self.metar_client = metar_client
        self.weather_client = weather_client
        self.metar_ttl_seconds = metar_ttl_seconds
        self.waypoint_ttl_seconds = waypoint_ttl_seconds
        self.batch_size = batch_size
        self.batch_pause_seconds = batch_pause_seconds
        self.clock = clock
        self.sleep = sleep
        self.logger = logger or get_logger()

    async def refresh_aviation(self) -> AviationRefreshResult:
        """
        Fetch METAR for every airport and store the successes.

        Each success is written under metar_<CODE>. All outcomes, failure
        markers included, are then written to the summary key.

        Returns:
            AviationRefreshResult with one outcome per airport
        """
        airports = self.geo_index.airports
        timestamp = self.clock()
        self.logger.info(f"Fetching METAR for {len(airports)} airports...")

        outcomes = await asyncio.gather(
            *(self._refresh_airport(airport, timestamp) for airport in airports)
        )
        result = AviationRefreshResult(
            outcomes={outcome.icao: outcome for outcome in outcomes},
            last_updated=timestamp
        )

        summary = AviationSummary(
            airports=result.outcomes,
            last_updated=timestamp,
            count=len(result.outcomes),
            succeeded=result.succeeded,
            failed=result.failed
        )
        try:
            await self.cache.put(AVIATION_SUMMARY_KEY, summary.model_dump_json(), self.metar_ttl_seconds)
        except Exception as e:
            self.logger.error(f"✗ Failed to store METAR summary: {e}")

        self.logger.info(
            f"Stored METAR for {result.succeeded}/{len(airports)} airports ({result.failed} errors)"
        )
        return result

    async def _refresh_airport(self, airport: Airport, timestamp: str) -> AviationOutcome:
        """Fetch and store one airport; every failure becomes a marker."""
        try:
            record = await self.metar_client.fetch_aviation(airport)
        except UpstreamFailure as e:
            self.logger.warning(f"✗ METAR fetch error for {airport.code}: {e.reason}")
            return AviationFetchFailure(icao=airport.code, error=e.reason, fetched_at=timestamp)
        except Exception as e:
            self.logger.exception(f"✗ Unexpected METAR error for {airport.code}")
            return AviationFetchFailure(icao=airport.code, error=str(e) or type(e).__name__, fetched_at=timestamp)

        try:
            await self.cache.put(metar_key(airport.code), record.model_dump_json(), self.metar_ttl_seconds)
        except Exception as e:
            self.logger.error(f"✗ Failed to cache METAR for {airport.code}: {e}")
            return AviationFetchFailure(icao=airport.code, error=f"Cache write failed: {e}", fetched_at=timestamp)

        return record

    async def refresh_waypoints(self) -> WaypointRefreshResult:
        """
        Fetch generic weather for every waypoint in throttled batches.

        Returns:
            WaypointRefreshResult with success/error counts
        """
        waypoints = self.geo_index.waypoints
        timestamp = self.clock()
        self.logger.info(f"Fetching weather for {len(waypoints)} waypoints...")

        errors: Dict[str, str] = {}
        succeeded = 0

        batches = chunked(waypoints, self.batch_size) if waypoints else []
        for index, batch in enumerate(batches):
            outcomes = await asyncio.gather(*(self._refresh_waypoint(waypoint) for waypoint in batch))

            for waypoint_id, error in outcomes:
                if error is None:
                    succeeded += 1
                else:
                    errors[waypoint_id] = error

            # Small delay between batches to respect upstream rate limits
            if index < len(batches) - 1:
                await self.sleep(self.batch_pause_seconds)

        for key, value in ((WAYPOINT_COUNT_KEY, str(succeeded)), (WAYPOINT_UPDATED_KEY, timestamp)):
            try:
                await self.cache.put(key, value, self.waypoint_ttl_seconds)
            except Exception as e:
                self.logger.error(f"✗ Failed to store {key}: {e}")

        self.logger.info(
            f"Stored weather for {succeeded}/{len(waypoints)} waypoints ({len(errors)} errors)"
        )
        return WaypointRefreshResult(
            succeeded=succeeded,
            failed=len(errors),
            last_updated=timestamp,
            errors=errors
        )

    async def _refresh_waypoint(self, waypoint: Waypoint) -> Tuple[str, Optional[str]]:
        """Fetch and store one waypoint; returns (id, error or None)."""
        try:
            record = await self.weather_client.fetch_generic(waypoint)
            await self.cache.put(waypoint_key(waypoint.id), record.model_dump_json(), self.waypoint_ttl_seconds)
        except UpstreamFailure as e:
            self.logger.warning(f"✗ Weather fetch error for {waypoint.id}: {e.reason}")
            return waypoint.id, e.reason
        except Exception as e:
            self.logger.exception(f"✗ Unexpected weather error for {waypoint.id}")
            return waypoint.id, str(e) or type(e).__name__

        return waypoint.id, None

    async def refresh_all(self) -> Tuple[AviationRefreshResult, WaypointRefreshResult]:
        """
        Run both jobs concurrently.

        The jobs write disjoint key namespaces, so no ordering between them
        is needed.

        Returns:
            (aviation result, waypoint result)
        """
        aviation, waypoints = await asyncio.gather(self.refresh_aviation(), self.refresh_waypoints())
        return aviation, waypoints
