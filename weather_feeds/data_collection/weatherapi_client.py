"""
WeatherAPI.com Client
Fetches generic current weather for a coordinate
"""

from typing import Any, Dict, Optional

import httpx

from weather_feeds.data_collection.errors import UpstreamFailure
from weather_feeds.data_collection.rate_limiter import RateLimiter
from weather_feeds.models.records import Waypoint, WaypointWeatherRecord
from weather_feeds.utils.helpers import to_float, utc_now_iso
from weather_feeds.utils.logger import get_logger


PROVIDER = "WeatherAPI"


class WeatherAPIClient:
    """
    Client for the WeatherAPI.com current conditions endpoint

    One request per waypoint, no retries.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.weatherapi.com/v1/current.json",
        timeout: float = 10.0,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize API client

        Args:
            api_key: WeatherAPI.com key
            base_url: Current conditions endpoint URL
            timeout: Request timeout in seconds
            rate_limiter: RateLimiter instance
            transport: Optional httpx transport (used to stub the network in tests)
            logger: Logger instance
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.rate_limiter = rate_limiter
        self.transport = transport
        self.logger = logger or get_logger()

    async def fetch_generic(self, waypoint: Waypoint) -> WaypointWeatherRecord:
        """
        Fetch current weather at a waypoint's coordinates.

        Args:
            waypoint: Waypoint to fetch

        Returns:
            Normalised waypoint weather record

        Raises:
            UpstreamFailure: If the request fails or the body is unusable
        """
        params = {
            "key": self.api_key,
            "q": f"{waypoint.lat},{waypoint.lon}",
            "aqi": "no"
        }

        if self.rate_limiter:
            await self.rate_limiter.acquire()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException:
            raise UpstreamFailure(PROVIDER, "Request timed out")
        except httpx.HTTPError as e:
            raise UpstreamFailure(PROVIDER, f"Connection failed: {e}")

        if not response.is_success:
            raise UpstreamFailure(PROVIDER, f"WeatherAPI error: {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise UpstreamFailure(PROVIDER, "Invalid JSON response")

        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict):
            raise UpstreamFailure(PROVIDER, "Response has no current conditions")

        try:
            return self._parse_current(waypoint, current)
        except (AttributeError, TypeError, ValueError) as e:
            self.logger.debug(f"Unparseable weather for {waypoint.id}: {e}")
            raise UpstreamFailure(PROVIDER, "Malformed weather response")

    def _parse_current(self, waypoint: Waypoint, current: Dict[str, Any]) -> WaypointWeatherRecord:
        """
        Map the 'current' block onto the waypoint record.

        Args:
            waypoint: Waypoint the data belongs to
            current: 'current' object of the response

        Returns:
            Waypoint weather record
        """
        condition = current.get("condition") or {}
        is_day = current.get("is_day")

        return WaypointWeatherRecord(
            id=waypoint.id,
            name=waypoint.name,
            temp_c=to_float(current.get("temp_c")),
            condition=condition.get("text") or "Unknown",
            icon=condition.get("icon") or "",
            humidity=to_float(current.get("humidity")),
            wind_kph=to_float(current.get("wind_kph")),
            wind_dir=current.get("wind_dir") or "",
            feelslike_c=to_float(current.get("feelslike_c")),
            pressure_mb=to_float(current.get("pressure_mb")),
            vis_km=to_float(current.get("vis_km")),
            uv=to_float(current.get("uv")),
            cloud=to_float(current.get("cloud")),
            precip_mm=to_float(current.get("precip_mm")),
            is_day=int(is_day) if isinstance(is_day, (int, float)) else None,
            fetched_at=utc_now_iso()
        )
