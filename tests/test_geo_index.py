"""
Tests for the geospatial index: distances, nearest airport, uniqueness rules.
"""
import math

import pytest

from travel_api.services.geo_index import GeoIndex, ReferenceDataError, haversine_km
from weather_feeds.models.records import Airport, Waypoint


def law_of_cosines_km(lat1, lon1, lat2, lon2):
    """Independent great-circle reference on the same 6371 km sphere."""
    p1, p2 = math.radians(lat1), math.radians(lat2)
    d_lon = math.radians(lon2 - lon1)
    cos_angle = math.sin(p1) * math.sin(p2) + math.cos(p1) * math.cos(p2) * math.cos(d_lon)
    return 6371.0 * math.acos(min(1.0, max(-1.0, cos_angle)))


class TestHaversine:

    def test_zero_distance(self):
        assert haversine_km(33.5605, 72.8495, 33.5605, 72.8495) == 0.0

    @pytest.mark.parametrize("a, b", [
        ((33.5605, 72.8495), (31.5216, 74.4039)),   # Islamabad - Lahore
        ((33.9939, 71.5147), (24.9065, 67.1608)),   # Peshawar - Karachi
        ((0.0, 0.0), (0.0, 90.0)),
    ])
    def test_matches_reference(self, a, b):
        expected = law_of_cosines_km(a[0], a[1], b[0], b[1])
        assert haversine_km(a[0], a[1], b[0], b[1]) == pytest.approx(expected, rel=1e-3)

    def test_symmetric(self):
        there = haversine_km(33.5605, 72.8495, 30.2033, 71.4192)
        back = haversine_km(30.2033, 71.4192, 33.5605, 72.8495)
        assert there == pytest.approx(back)

    def test_quarter_equator(self):
        assert haversine_km(0, 0, 0, 90) == pytest.approx(math.pi * 6371.0 / 2, rel=1e-6)


class TestNearestAirport:

    def test_point_near_islamabad_is_in_range(self, geo_index):
        nearest = geo_index.nearest_airport(33.58, 72.86)

        assert nearest.airport.code == "OPIS"
        assert nearest.in_range is True
        assert nearest.distance_km < 5

    def test_out_of_range_still_returns_nearest(self, geo_index):
        # Kallar Kahar on M2, far from every airport
        nearest = geo_index.nearest_airport(32.774, 72.7189)

        assert nearest.airport.code == "OPIS"
        assert nearest.in_range is False
        assert nearest.distance_km > nearest.airport.radius_km

    def test_boundary_is_inclusive(self):
        airport = Airport(code="TEST", name="Test", lat=0.0, lon=0.0, radius_km=50)
        index = GeoIndex([airport], [])
        lon = math.degrees(50 / 6371.0)

        nearest = index.nearest_airport(0.0, lon)

        assert nearest.distance_km == pytest.approx(50.0)
        # Floating point can land a hair either side of the radius; within it is in range
        assert index.nearest_airport(0.0, lon * 0.999).in_range is True
        assert index.nearest_airport(0.0, lon * 1.001).in_range is False

    def test_tie_goes_to_first_configured(self):
        west = Airport(code="WEST", name="West", lat=0.0, lon=-1.0, radius_km=200)
        east = Airport(code="EAST", name="East", lat=0.0, lon=1.0, radius_km=200)

        assert GeoIndex([west, east], []).nearest_airport(0.0, 0.0).airport.code == "WEST"
        assert GeoIndex([east, west], []).nearest_airport(0.0, 0.0).airport.code == "EAST"

    def test_no_airports(self):
        assert GeoIndex([], []).nearest_airport(33.0, 72.0) is None


class TestReferenceData:

    def test_loads_configured_tables(self, geo_index):
        assert [airport.code for airport in geo_index.airports] == [
            "OPPS", "OPIS", "OPFA", "OPST", "OPLA", "OPKC", "OPMT"
        ]
        assert len(geo_index.waypoints) == 32
        assert geo_index.get_waypoint("m2_01").name == "ISB Toll Plaza"
        assert geo_index.get_airport("OPLA").name == "Lahore"
        assert geo_index.get_airport("XXXX") is None

    def test_duplicate_airport_code(self):
        airport = Airport(code="OPIS", name="Islamabad", lat=33.5, lon=72.8, radius_km=40)
        with pytest.raises(ReferenceDataError):
            GeoIndex([airport, airport], [])

    def test_duplicate_waypoint_id(self):
        waypoint = Waypoint(id="m2_01", name="ISB", lat=33.58, lon=72.87)
        with pytest.raises(ReferenceDataError):
            GeoIndex([], [waypoint, waypoint])

    def test_waypoint_id_clashing_with_airport_code(self):
        airport = Airport(code="OPIS", name="Islamabad", lat=33.5, lon=72.8, radius_km=40)
        waypoint = Waypoint(id="OPIS", name="Clash", lat=33.58, lon=72.87)
        with pytest.raises(ReferenceDataError):
            GeoIndex([airport], [waypoint])

    def test_listing_is_a_copy(self, geo_index):
        geo_index.airports.clear()
        assert len(geo_index.airports) == 7
