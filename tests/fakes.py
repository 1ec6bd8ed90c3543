"""
In-process fakes for upstream providers, clocks and sleeps.
"""
from typing import Iterable, List, Optional

from weather_feeds.data_collection.errors import UpstreamFailure
from weather_feeds.models.records import (
    Airport,
    AviationWeatherRecord,
    CodedText,
    Waypoint,
    WaypointWeatherRecord,
)


FIXED_TIMESTAMP = "2026-10-17T12:00:00+00:00"


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns immediately and remembers delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_metar_record(airport: Airport, **overrides) -> AviationWeatherRecord:
    values = dict(
        icao=airport.code,
        airport_name=airport.name,
        lat=airport.lat,
        lon=airport.lon,
        radius=airport.radius_km,
        raw_text=f"{airport.code} 171200Z 36010KT 9999 FEW030 25/10 Q1012",
        temp_c=25.0,
        dewpoint_c=10.0,
        humidity=38.0,
        wind_kph=18.5,
        wind_degrees=360.0,
        wind_dir="N",
        visibility_km=10.0,
        pressure_hpa=1012.0,
        clouds=[CodedText(code="FEW", text="Few")],
        conditions=[],
        flight_category="VFR",
        observed="2026-10-17T12:00:00",
        fetched_at=FIXED_TIMESTAMP,
    )
    values.update(overrides)
    return AviationWeatherRecord(**values)


def make_waypoint_record(waypoint: Waypoint, **overrides) -> WaypointWeatherRecord:
    values = dict(
        id=waypoint.id,
        name=waypoint.name,
        temp_c=28.4,
        condition="Sunny",
        icon="//cdn.weatherapi.com/weather/64x64/day/113.png",
        humidity=30.0,
        wind_kph=12.2,
        wind_dir="NW",
        feelslike_c=29.0,
        pressure_mb=1011.0,
        vis_km=10.0,
        uv=6.0,
        cloud=0.0,
        precip_mm=0.0,
        is_day=1,
        fetched_at=FIXED_TIMESTAMP,
    )
    values.update(overrides)
    return WaypointWeatherRecord(**values)


class FakeMetarClient:
    """Returns a canned record per airport; codes in `failures` raise UpstreamFailure."""

    def __init__(self, failures: Optional[Iterable[str]] = None, crashes: Optional[Iterable[str]] = None):
        self.failures = set(failures or [])
        self.crashes = set(crashes or [])
        self.calls: List[str] = []

    async def fetch_aviation(self, airport: Airport) -> AviationWeatherRecord:
        self.calls.append(airport.code)
        if airport.code in self.failures:
            raise UpstreamFailure("CheckWX", "CheckWX error: 503")
        if airport.code in self.crashes:
            raise RuntimeError("unexpected payload")
        return make_metar_record(airport)


class FakeWeatherClient:
    """Returns a canned record per waypoint; ids in `failures` raise UpstreamFailure."""

    def __init__(self, failures: Optional[Iterable[str]] = None):
        self.failures = set(failures or [])
        self.calls: List[str] = []

    async def fetch_generic(self, waypoint: Waypoint) -> WaypointWeatherRecord:
        self.calls.append(waypoint.id)
        if waypoint.id in self.failures:
            raise UpstreamFailure("WeatherAPI", "Request timed out")
        return make_waypoint_record(waypoint)
