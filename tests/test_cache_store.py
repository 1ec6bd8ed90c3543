"""
Tests for the cache backends.
"""
from datetime import datetime, timedelta, timezone

import pytest
from tortoise import Tortoise

from travel_api.database import TORTOISE_ORM
from travel_api.services.cache_keys import metar_key, waypoint_key
from travel_api.services.cache_store import (
    DatabaseCacheStore,
    InMemoryCacheStore,
    build_cache_store,
)


class TestInMemoryCacheStore:

    async def test_round_trip(self, cache):
        await cache.put(metar_key("OPIS"), '{"icao": "OPIS"}', 1200)
        assert await cache.get("metar_OPIS") == '{"icao": "OPIS"}'

    async def test_missing_key(self, cache):
        assert await cache.get(waypoint_key("m2_01")) is None

    async def test_expired_entry_reads_as_absent(self, cache, clock):
        await cache.put("weather_m2_01", "{}", 2100)

        clock.advance(2099)
        assert await cache.get("weather_m2_01") == "{}"

        clock.advance(1)
        assert await cache.get("weather_m2_01") is None

    async def test_overwrite_is_last_write_wins(self, cache):
        await cache.put("metar_OPIS", "first", 1200)
        await cache.put("metar_OPIS", "second", 1200)
        assert await cache.get("metar_OPIS") == "second"

    async def test_overwrite_resets_ttl(self, cache, clock):
        await cache.put("metar_OPIS", "first", 100)
        clock.advance(90)
        await cache.put("metar_OPIS", "second", 100)
        clock.advance(90)
        assert await cache.get("metar_OPIS") == "second"

    async def test_keys_expire_independently(self, cache, clock):
        await cache.put("metar_OPIS", "short", 10)
        await cache.put("metar_OPLA", "long", 100)
        clock.advance(50)

        assert await cache.get("metar_OPIS") is None
        assert await cache.get("metar_OPLA") == "long"

    async def test_purge_and_stats(self, cache, clock):
        await cache.put("a", "1", 10)
        await cache.put("b", "2", 100)
        clock.advance(50)

        assert await cache.purge_expired() == 1
        assert await cache.get_stats() == {"backend": "memory", "entries": 1}

    async def test_rejects_non_positive_ttl(self, cache):
        with pytest.raises(ValueError):
            await cache.put("a", "1", 0)


class TestBuildCacheStore:

    def test_memory(self):
        assert isinstance(build_cache_store("memory"), InMemoryCacheStore)

    def test_database(self):
        assert isinstance(build_cache_store("Database"), DatabaseCacheStore)

    def test_unknown(self):
        with pytest.raises(ValueError):
            build_cache_store("redis")


class TestDatabaseCacheStore:

    async def test_put_get_expire_purge(self):
        config = {
            **TORTOISE_ORM,
            "connections": {"default": "sqlite://:memory:"},
        }
        await Tortoise.init(config=config)
        await Tortoise.generate_schemas()

        current = {"now": datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)}
        store = DatabaseCacheStore(now=lambda: current["now"])

        try:
            await store.put("metar_OPIS", '{"icao": "OPIS"}', 1200)
            await store.put("weather_m2_01", "{}", 60)
            await store.put("metar_OPIS", '{"icao": "OPIS", "temp_c": 20}', 1200)

            assert await store.get("metar_OPIS") == '{"icao": "OPIS", "temp_c": 20}'
            assert await store.get("missing") is None

            current["now"] += timedelta(seconds=120)
            assert await store.get("weather_m2_01") is None
            assert await store.get_stats() == {"backend": "database", "entries": 1}
            assert await store.purge_expired() == 1
        finally:
            await Tortoise.close_connections()
