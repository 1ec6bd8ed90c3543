"""
Configuration loading for the travel weather API.

Static settings and reference tables come from YAML files under config/;
secrets and deployment switches come from the environment (.env supported).
"""
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from weather_feeds.models.records import Airport, Waypoint
from weather_feeds.utils.helpers import load_yaml

load_dotenv()

DEFAULT_CONFIG_DIR = os.path.join(os.path.dirname(__file__), "../config")

TRUE_VALUES = {"1", "true", "yes", "on"}


def get_config_dir() -> str:
    return os.getenv("TRAVEL_WEATHER_CONFIG_DIR", DEFAULT_CONFIG_DIR)


def load_settings(config_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Load api.yaml and apply environment overrides.

    Args:
        config_dir: Directory holding api.yaml (defaults to config/)

    Returns:
        Settings dictionary
    """
    config_dir = config_dir or get_config_dir()
    settings = load_yaml(os.path.join(config_dir, "api.yaml"))

    cache = settings.setdefault("cache", {})
    if os.getenv("CACHE_BACKEND"):
        cache["backend"] = os.getenv("CACHE_BACKEND")

    scheduler = settings.setdefault("scheduler", {})
    if os.getenv("SCHEDULER_ENABLED"):
        scheduler["enabled"] = os.getenv("SCHEDULER_ENABLED").strip().lower() in TRUE_VALUES

    return settings


def load_airports(config_dir: Optional[str] = None) -> List[Airport]:
    """
    Load the airport table from airports.yaml, keeping file order.

    Args:
        config_dir: Directory holding airports.yaml

    Returns:
        List of airports
    """
    config_dir = config_dir or get_config_dir()
    data = load_yaml(os.path.join(config_dir, "airports.yaml"))
    return [Airport(**airport) for airport in data.get("airports", [])]


def load_waypoints(config_dir: Optional[str] = None) -> List[Waypoint]:
    """
    Load the waypoint table from waypoints.yaml, keeping file order.

    Args:
        config_dir: Directory holding waypoints.yaml

    Returns:
        List of waypoints
    """
    config_dir = config_dir or get_config_dir()
    data = load_yaml(os.path.join(config_dir, "waypoints.yaml"))
    return [Waypoint(**waypoint) for waypoint in data.get("waypoints", [])]


def get_api_key(env_var: str) -> Optional[str]:
    """Provider API key from the environment, None when unset or blank"""
    value = os.getenv(env_var, "").strip()
    return value or None
