"""
Geospatial index over the configured airports and waypoints.
"""
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from weather_feeds.models.records import Airport, Waypoint


EARTH_RADIUS_KM = 6371.0


class ReferenceDataError(ValueError):
    """The airport/waypoint tables violate a uniqueness rule."""


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points.

    Args:
        lat1: Latitude of the first point (degrees)
        lon1: Longitude of the first point (degrees)
        lat2: Latitude of the second point (degrees)
        lon2: Longitude of the second point (degrees)

    Returns:
        Distance in kilometres
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class NearestAirport:
    """Result of a nearest-airport lookup."""

    airport: Airport
    distance_km: float
    in_range: bool


class GeoIndex:
    """
    Static registry of airports and waypoints.

    Airports keep their configured order, which decides ties in
    nearest_airport (the first airport at the minimal distance wins).
    """

    def __init__(self, airports: Iterable[Airport], waypoints: Iterable[Waypoint]):
        """
        Args:
            airports: Airports in table order
            waypoints: Waypoints in table order

        Raises:
            ReferenceDataError: On duplicate codes/ids or a code shared by both sets
        """
        self._airports: List[Airport] = list(airports)
        self._waypoints: List[Waypoint] = list(waypoints)

        self._airports_by_code: Dict[str, Airport] = {}
        for airport in self._airports:
            if airport.code in self._airports_by_code:
                raise ReferenceDataError(f"Duplicate airport code: {airport.code}")
            self._airports_by_code[airport.code] = airport

        self._waypoints_by_id: Dict[str, Waypoint] = {}
        for waypoint in self._waypoints:
            if waypoint.id in self._waypoints_by_id:
                raise ReferenceDataError(f"Duplicate waypoint id: {waypoint.id}")
            if waypoint.id in self._airports_by_code:
                raise ReferenceDataError(f"Waypoint id clashes with airport code: {waypoint.id}")
            self._waypoints_by_id[waypoint.id] = waypoint

    @property
    def airports(self) -> List[Airport]:
        return list(self._airports)

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self._waypoints)

    def get_airport(self, code: str) -> Optional[Airport]:
        return self._airports_by_code.get(code)

    def get_waypoint(self, waypoint_id: str) -> Optional[Waypoint]:
        return self._waypoints_by_id.get(waypoint_id)

    def nearest_airport(self, lat: float, lon: float) -> Optional[NearestAirport]:
        """
        Find the globally nearest airport to a coordinate.

        The nearest airport is returned even when the point is outside its
        coverage radius; callers check in_range.

        Args:
            lat: Latitude (degrees)
            lon: Longitude (degrees)

        Returns:
            NearestAirport, or None when no airports are configured
        """
        nearest: Optional[Airport] = None
        nearest_distance = math.inf

        for airport in self._airports:
            distance = haversine_km(lat, lon, airport.lat, airport.lon)
            if distance < nearest_distance:
                nearest = airport
                nearest_distance = distance

        if nearest is None:
            return None

        return NearestAirport(
            airport=nearest,
            distance_km=nearest_distance,
            in_range=nearest_distance <= nearest.radius_km,
        )
