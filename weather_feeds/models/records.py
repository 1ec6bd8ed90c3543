"""
Pydantic models for cached weather records.

These are the only payload shapes written to the cache. Provider-specific
field names and units are normalised into them by the upstream adapters.
"""
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Airport(BaseModel):
    """Airport with METAR coverage."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=3, max_length=4, description="ICAO airport code")
    name: str = Field(..., description="Display name")
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, description="Longitude")
    radius_km: float = Field(..., gt=0, description="METAR coverage radius (km)")


class Waypoint(BaseModel):
    """Road waypoint with pre-cached generic weather."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Waypoint identifier")
    name: str = Field(..., description="Display name")
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, description="Longitude")


class CodedText(BaseModel):
    """A METAR code with its decoded text, e.g. cloud layers and present weather."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(default="", description="METAR code (e.g. BKN, -RA, TS)")
    text: Optional[str] = Field(default=None, description="Decoded text")

    @property
    def label(self) -> str:
        return self.text or self.code


class AviationWeatherRecord(BaseModel):
    """One decoded METAR observation for an airport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    icao: str = Field(..., description="ICAO airport code")
    airport_name: str = Field(default="", description="Airport display name")
    lat: Optional[float] = Field(default=None, description="Airport latitude")
    lon: Optional[float] = Field(default=None, description="Airport longitude")
    radius: Optional[float] = Field(default=None, description="Airport coverage radius (km)")
    raw_text: str = Field(default="", description="Raw METAR report")
    temp_c: Optional[float] = Field(default=None, description="Temperature (°C)")
    dewpoint_c: Optional[float] = Field(default=None, description="Dew point (°C)")
    humidity: Optional[float] = Field(default=None, description="Relative humidity (%)")
    wind_kph: Optional[float] = Field(default=None, description="Wind speed (km/h)")
    wind_degrees: Optional[float] = Field(default=None, description="Wind direction (degrees)")
    wind_dir: str = Field(default="", description="Wind direction (compass text)")
    visibility_km: Optional[float] = Field(default=None, description="Visibility (km)")
    pressure_hpa: Optional[float] = Field(default=None, description="Pressure (hPa)")
    clouds: List[CodedText] = Field(default_factory=list, description="Cloud layers, lowest first")
    conditions: List[CodedText] = Field(default_factory=list, description="Present weather conditions")
    flight_category: str = Field(default="", description="VFR, MVFR, IFR or LIFR")
    observed: str = Field(default="", description="Observation timestamp")
    fetched_at: str = Field(..., description="Fetch timestamp (ISO 8601)")


class AviationFetchFailure(BaseModel):
    """Failure marker for an airport whose METAR could not be fetched."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    icao: str = Field(..., description="ICAO airport code")
    error: str = Field(..., description="Failure reason")
    fetched_at: str = Field(..., description="Attempt timestamp (ISO 8601)")


AviationOutcome = Union[AviationWeatherRecord, AviationFetchFailure]


class WaypointWeatherRecord(BaseModel):
    """One generic current-weather snapshot for a waypoint."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Waypoint identifier")
    name: str = Field(default="", description="Waypoint display name")
    source: Literal["weatherapi"] = Field(default="weatherapi", description="Data source")
    temp_c: Optional[float] = Field(default=None, description="Temperature (°C)")
    condition: str = Field(default="Unknown", description="Condition text")
    icon: str = Field(default="", description="Condition icon URL")
    humidity: Optional[float] = Field(default=None, description="Relative humidity (%)")
    wind_kph: Optional[float] = Field(default=None, description="Wind speed (km/h)")
    wind_dir: str = Field(default="", description="Wind direction (compass text)")
    feelslike_c: Optional[float] = Field(default=None, description="Feels-like temperature (°C)")
    pressure_mb: Optional[float] = Field(default=None, description="Pressure (mb)")
    vis_km: Optional[float] = Field(default=None, description="Visibility (km)")
    uv: Optional[float] = Field(default=None, description="UV index")
    cloud: Optional[float] = Field(default=None, description="Cloud cover (%)")
    precip_mm: Optional[float] = Field(default=None, description="Precipitation (mm)")
    is_day: Optional[int] = Field(default=None, description="1 for day, 0 for night")
    fetched_at: str = Field(..., description="Fetch timestamp (ISO 8601)")


class AviationSummary(BaseModel):
    """Aggregate of one aviation refresh run, stored for fleet-wide status."""

    airports: Dict[str, AviationOutcome] = Field(default_factory=dict)
    last_updated: Optional[str] = Field(default=None, description="Refresh timestamp (ISO 8601)")
    count: int = Field(default=0, description="Number of airports in the run")
    succeeded: int = Field(default=0, description="Airports fetched successfully")
    failed: int = Field(default=0, description="Airports that failed")


_aviation_outcome_adapter = TypeAdapter(AviationOutcome)


def decode_aviation_entry(raw: str) -> AviationOutcome:
    """
    Decode a cached per-airport value.

    Args:
        raw: Serialized cache value

    Returns:
        The stored record, or the failure marker if one was stored

    Raises:
        pydantic.ValidationError: If the value is neither shape
    """
    return _aviation_outcome_adapter.validate_json(raw)
