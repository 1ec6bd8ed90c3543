"""
Tests for the cache-only batch resolver.
"""
import pytest

from tests.fakes import FIXED_TIMESTAMP, make_metar_record, make_waypoint_record
from travel_api.models.travel import (
    CachedWeather,
    CacheMissWeather,
    ErrorWeather,
    MetarWeather,
    RoutePoint,
)
from travel_api.services.metar_presentation import ICON_PARTLY_CLOUDY, ICON_THUNDER_RAIN
from travel_api.services.travel_weather_service import CACHE_MISS_MESSAGE, TravelWeatherService
from weather_feeds.models.records import AviationFetchFailure, CodedText


NEAR_ISLAMABAD = RoutePoint(id="start", lat=33.58, lon=72.86)
KALLAR_KAHAR = RoutePoint(id="m2_07", lat=32.774, lon=72.7189)


@pytest.fixture
def service(cache, geo_index):
    return TravelWeatherService(cache=cache, geo_index=geo_index)


async def store_metar(cache, geo_index, code, **overrides):
    record = make_metar_record(geo_index.get_airport(code), **overrides)
    await cache.put(f"metar_{code}", record.model_dump_json(), 1200)
    return record


class TestMetarPath:

    async def test_point_in_range_gets_metar(self, service, cache, geo_index):
        await store_metar(
            cache, geo_index, "OPIS",
            conditions=[CodedText(code="TSRA", text="Thunderstorm rain")],
            clouds=[CodedText(code="BKN", text="Broken")],
        )

        weather = await service.resolve_point(NEAR_ISLAMABAD)

        assert isinstance(weather, MetarWeather)
        assert weather.source == "metar"
        assert weather.airport_icao == "OPIS"
        assert weather.airport_name == "Islamabad"
        assert weather.distance_to_airport_km == round(weather.distance_to_airport_km, 1)
        assert weather.distance_to_airport_km < 5
        assert weather.temp_c == 25.0
        assert weather.condition == "Thunderstorm rain"
        assert weather.icon == ICON_THUNDER_RAIN
        assert weather.pressure_mb == 1012.0
        assert weather.raw_metar.startswith("OPIS")
        assert weather.cached is True

    async def test_cloud_only_metar(self, service, cache, geo_index):
        await store_metar(cache, geo_index, "OPIS", clouds=[CodedText(code="SCT", text="Scattered")])

        weather = await service.resolve_point(NEAR_ISLAMABAD)

        assert weather.condition == "Scattered"
        assert weather.icon == ICON_PARTLY_CLOUDY

    async def test_failure_marker_falls_through_to_waypoint_cache(self, service, cache):
        marker = AviationFetchFailure(icao="OPIS", error="CheckWX error: 503", fetched_at=FIXED_TIMESTAMP)
        await cache.put("metar_OPIS", marker.model_dump_json(), 1200)

        weather = await service.resolve_point(RoutePoint(id="m2_01", lat=33.5808, lon=72.8759))

        assert isinstance(weather, CacheMissWeather)

    async def test_get_cached_metar_ignores_garbage(self, service, cache):
        await cache.put("metar_OPIS", "not json", 1200)
        assert await service.get_cached_metar("OPIS") is None


class TestWaypointPath:

    async def test_in_range_without_metar_and_no_waypoint_data_is_a_miss(self, service):
        weather = await service.resolve_point(RoutePoint(id="m2_01", lat=33.5808, lon=72.8759))

        assert isinstance(weather, CacheMissWeather)
        assert weather.source == "cache_miss"
        assert weather.temp_c is None
        assert weather.humidity is None
        assert weather.wind_kph is None
        assert weather.cached is False
        assert weather.error == CACHE_MISS_MESSAGE

    async def test_out_of_range_reads_waypoint_cache(self, service, cache, geo_index):
        await store_metar(cache, geo_index, "OPIS")
        record = make_waypoint_record(geo_index.get_waypoint("m2_07"))
        await cache.put("weather_m2_07", record.model_dump_json(), 2100)

        weather = await service.resolve_point(KALLAR_KAHAR)

        assert isinstance(weather, CachedWeather)
        assert weather.source == "weatherapi"
        assert weather.id == "m2_07"
        assert weather.name == "Kallar Kahar"
        assert weather.temp_c == 28.4
        assert weather.cached is True

    async def test_lookup_is_by_id_not_by_location(self, service, cache, geo_index):
        record = make_waypoint_record(geo_index.get_waypoint("m2_07"))
        await cache.put("weather_m2_07", record.model_dump_json(), 2100)

        # Same coordinates, different id: no nearest-waypoint matching
        weather = await service.resolve_point(RoutePoint(id="somewhere", lat=32.774, lon=72.7189))

        assert isinstance(weather, CacheMissWeather)
        assert weather.id == "somewhere"


class TestBatch:

    async def test_results_keyed_by_id(self, service, cache, geo_index):
        await store_metar(cache, geo_index, "OPIS")
        points = [NEAR_ISLAMABAD, KALLAR_KAHAR]

        weather = await service.resolve(points)

        assert set(weather) == {"start", "m2_07"}
        assert weather["start"].source == "metar"
        assert weather["m2_07"].source == "cache_miss"

    async def test_empty_batch(self, service):
        assert await service.resolve([]) == {}

    async def test_one_failing_point_does_not_affect_others(self, geo_index, cache):
        class FlakyCache:
            async def get(self, key):
                if key == "weather_m2_07":
                    raise ConnectionError("cache unavailable")
                return await cache.get(key)

        service = TravelWeatherService(cache=FlakyCache(), geo_index=geo_index)
        await store_metar(cache, geo_index, "OPIS")

        weather = await service.resolve([NEAR_ISLAMABAD, KALLAR_KAHAR])

        assert isinstance(weather["m2_07"], ErrorWeather)
        assert weather["m2_07"].error == "cache unavailable"
        assert isinstance(weather["start"], MetarWeather)

    async def test_never_writes_to_cache(self, service, cache):
        await service.resolve([NEAR_ISLAMABAD, KALLAR_KAHAR])
        assert await cache.get_stats() == {"backend": "memory", "entries": 0}
