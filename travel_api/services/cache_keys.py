"""
Cache key layout shared by the refresh jobs and the readers.
"""

METAR_KEY_PREFIX = "metar_"
AVIATION_SUMMARY_KEY = "metar_all"

WAYPOINT_KEY_PREFIX = "weather_"
WAYPOINT_COUNT_KEY = "waypoint_weather_count"
WAYPOINT_UPDATED_KEY = "waypoint_weather_last_updated"


def metar_key(airport_code: str) -> str:
    return f"{METAR_KEY_PREFIX}{airport_code}"


def waypoint_key(waypoint_id: str) -> str:
    return f"{WAYPOINT_KEY_PREFIX}{waypoint_id}"
