"""
CheckWX API Client
Fetches decoded METAR observations for a single airport per call
"""

from typing import Any, Dict, List, Optional

import httpx

from weather_feeds.data_collection.errors import UpstreamFailure
from weather_feeds.data_collection.rate_limiter import RateLimiter
from weather_feeds.models.records import Airport, AviationWeatherRecord, CodedText
from weather_feeds.utils.helpers import to_float, utc_now_iso
from weather_feeds.utils.logger import get_logger


PROVIDER = "CheckWX"


class CheckWXClient:
    """
    Client for the CheckWX decoded METAR API

    Issues exactly one request per airport. Any failure (non-2xx status,
    timeout, connection error, malformed or empty body) is raised as
    UpstreamFailure; retrying is left to the next scheduled refresh.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.checkwx.com/metar",
        timeout: float = 10.0,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize API client

        Args:
            api_key: CheckWX API key
            base_url: Base URL of the METAR endpoint
            timeout: Request timeout in seconds
            rate_limiter: RateLimiter instance
            transport: Optional httpx transport (used to stub the network in tests)
            logger: Logger instance
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.rate_limiter = rate_limiter
        self.transport = transport
        self.logger = logger or get_logger()

    async def fetch_aviation(self, airport: Airport) -> AviationWeatherRecord:
        """
        Fetch the latest decoded METAR for an airport.

        Args:
            airport: Airport to fetch

        Returns:
            Normalised aviation weather record

        Raises:
            UpstreamFailure: If the request fails or the body is unusable
        """
        endpoint = f"{self.base_url}/{airport.code}/decoded"
        headers = {
            "X-API-Key": self.api_key,
            "Accept": "application/json"
        }

        if self.rate_limiter:
            await self.rate_limiter.acquire()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(endpoint, headers=headers)
        except httpx.TimeoutException:
            raise UpstreamFailure(PROVIDER, "Request timed out")
        except httpx.HTTPError as e:
            raise UpstreamFailure(PROVIDER, f"Connection failed: {e}")

        if not response.is_success:
            raise UpstreamFailure(PROVIDER, f"CheckWX error: {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise UpstreamFailure(PROVIDER, "Invalid JSON response")

        reports = data.get("data") if isinstance(data, dict) else None
        if not isinstance(reports, list) or not reports or not isinstance(reports[0], dict):
            raise UpstreamFailure(PROVIDER, "No METAR data")

        self.logger.debug(f"METAR received for {airport.code}")
        try:
            return self._parse_metar(airport, reports[0])
        except (AttributeError, TypeError, ValueError) as e:
            self.logger.debug(f"Unparseable METAR for {airport.code}: {e}")
            raise UpstreamFailure(PROVIDER, "Malformed METAR response")

    def _parse_metar(self, airport: Airport, metar: Dict[str, Any]) -> AviationWeatherRecord:
        """
        Map a CheckWX decoded report onto the aviation record.

        Args:
            airport: Airport the report belongs to
            metar: First element of the response 'data' array

        Returns:
            Aviation weather record
        """
        temperature = metar.get("temperature") or {}
        dewpoint = metar.get("dewpoint") or {}
        humidity = metar.get("humidity") or {}
        wind = metar.get("wind") or {}
        barometer = metar.get("barometer") or {}

        return AviationWeatherRecord(
            icao=airport.code,
            airport_name=airport.name,
            lat=airport.lat,
            lon=airport.lon,
            radius=airport.radius_km,
            raw_text=metar.get("raw_text") or "",
            temp_c=to_float(temperature.get("celsius")),
            dewpoint_c=to_float(dewpoint.get("celsius")),
            humidity=to_float(humidity.get("percent")),
            wind_kph=to_float(wind.get("speed_kph")),
            wind_degrees=to_float(wind.get("degrees")),
            wind_dir=str(wind.get("direction") or ""),
            visibility_km=self._parse_visibility_km(metar.get("visibility")),
            pressure_hpa=to_float(barometer.get("hpa")),
            clouds=self._parse_coded(metar.get("clouds")),
            conditions=self._parse_coded(metar.get("conditions")),
            flight_category=metar.get("flight_category") or "",
            observed=metar.get("observed") or "",
            fetched_at=utc_now_iso()
        )

    @staticmethod
    def _parse_visibility_km(visibility: Optional[Dict[str, Any]]) -> Optional[float]:
        """Visibility in km, preferring the metres value"""
        if not visibility:
            return None

        meters = to_float(visibility.get("meters_float"))
        if meters is None:
            meters = to_float(visibility.get("meters"))
        if meters is not None:
            return meters / 1000

        return to_float(visibility.get("kilometers"))

    @staticmethod
    def _parse_coded(items: Optional[List[Any]]) -> List[CodedText]:
        """Cloud layers and conditions as {code, text} pairs"""
        parsed = []
        for item in items or []:
            if isinstance(item, dict):
                parsed.append(CodedText(code=str(item.get("code") or ""), text=item.get("text")))
            elif isinstance(item, str):
                parsed.append(CodedText(code=item))
        return parsed
