"""
Shared fixtures for the travel weather tests.

The airport and waypoint tables are the real ones from config/, so distances
in the tests match what production sees. Upstream providers are replaced by
the fakes in tests/fakes.py; no test touches the network.
"""
from typing import List

import pytest

from tests.fakes import FakeClock, RecordingSleep
from travel_api.services.cache_store import InMemoryCacheStore
from travel_api.services.geo_index import GeoIndex
from travel_api.settings import load_airports, load_waypoints
from weather_feeds.models.records import Airport, Waypoint


@pytest.fixture
def airports() -> List[Airport]:
    return load_airports()


@pytest.fixture
def waypoints() -> List[Waypoint]:
    return load_waypoints()


@pytest.fixture
def geo_index(airports, waypoints) -> GeoIndex:
    return GeoIndex(airports, waypoints)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
