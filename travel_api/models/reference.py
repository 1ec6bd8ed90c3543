"""
Pydantic models for reference data listings and operator responses.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from weather_feeds.models.records import Airport, AviationWeatherRecord, Waypoint


class AirportListResponse(BaseModel):
    """Configured airports with METAR coverage."""

    airports: List[Airport]
    count: int


class WaypointListResponse(BaseModel):
    """Configured waypoints with pre-cached weather."""

    waypoints: List[Waypoint]
    count: int


class Location(BaseModel):
    lat: float
    lon: float


class NearestAirportResponse(BaseModel):
    """Nearest airport to a coordinate and whether it is within METAR coverage."""

    location: Location
    nearest_airport: Optional[Airport] = None
    distance_km: Optional[float] = Field(default=None, description="Distance, 0.1 km precision")
    in_metar_range: bool
    metar: Optional[AviationWeatherRecord] = Field(default=None, description="Cached METAR when in range")
    message: str


class RefreshResponse(BaseModel):
    """Acknowledgement of a manual refresh."""

    status: str = Field(..., description="metar_refreshed, weather_refreshed or all_refreshed")
    timestamp: str
    succeeded: Dict[str, int] = Field(..., description="Successful keys per job")
    failed: Dict[str, int] = Field(..., description="Failed keys per job")
    failed_ids: Dict[str, List[str]] = Field(default_factory=dict, description="Failed airport codes / waypoint ids per job")
