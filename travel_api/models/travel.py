"""
Pydantic models for batch travel weather queries.
"""
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from weather_feeds.models.records import WaypointWeatherRecord


class RoutePoint(BaseModel):
    """A point along a route, identified by the caller."""

    id: str = Field(..., min_length=1, max_length=100, description="Caller-supplied point identifier")
    lat: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    lon: float = Field(..., ge=-180, le=180, description="Longitude coordinate")


class TravelWeatherRequest(BaseModel):
    """Request model for a batch weather query."""

    points: List[RoutePoint] = Field(..., description="Route points to resolve")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "points": [
                        {"id": "start", "lat": 33.58, "lon": 72.86},
                        {"id": "m2_07", "lat": 32.774, "lon": 72.7189}
                    ]
                }
            ]
        }
    }


class MetarWeather(BaseModel):
    """Weather derived from the cached METAR of an airport in range."""

    id: str
    source: Literal["metar"] = "metar"
    airport_icao: str
    airport_name: str
    distance_to_airport_km: float = Field(..., description="Distance to the airport, 0.1 km precision")
    temp_c: Optional[float] = None
    condition: str
    icon: str
    humidity: Optional[float] = None
    wind_kph: Optional[float] = None
    wind_dir: str = ""
    visibility_km: Optional[float] = None
    pressure_mb: Optional[float] = None
    flight_category: str = ""
    raw_metar: str = ""
    observed: str = ""
    cached: bool = True


class CachedWeather(WaypointWeatherRecord):
    """Weather read from the waypoint cache."""

    cached: bool = True


class CacheMissWeather(BaseModel):
    """No cached weather for this point. Not an error."""

    id: str
    source: Literal["cache_miss"] = "cache_miss"
    temp_c: None = None
    condition: str = "No cached data"
    humidity: None = None
    wind_kph: None = None
    cached: bool = False
    error: str = Field(..., min_length=1, description="Why no data is available")


class ErrorWeather(BaseModel):
    """Resolving this point failed; other points are unaffected."""

    id: str
    source: Literal["error"] = "error"
    temp_c: None = None
    condition: str = "Error"
    humidity: None = None
    wind_kph: None = None
    error: str


ResolvedWeather = Annotated[
    Union[MetarWeather, CachedWeather, CacheMissWeather, ErrorWeather],
    Field(discriminator="source")
]


class TravelWeatherResponse(BaseModel):
    """Response model for a batch weather query."""

    weather: Dict[str, ResolvedWeather] = Field(..., description="Resolved weather keyed by point id")
    airports: List[str] = Field(..., description="Airport codes with METAR coverage")
    cached_at: str = Field(..., description="Response timestamp (ISO 8601)")
    source: Literal["cache"] = "cache"
