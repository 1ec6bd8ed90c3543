"""
Helper utilities for the travel weather service
Common functions used across modules
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import yaml


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary with configuration (empty for an empty file)
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def utc_now() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string"""
    return utc_now().isoformat()


def parse_iso_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware datetime

    Args:
        value: Timestamp string (a trailing 'Z' is accepted)

    Returns:
        Aware datetime in UTC, or None if the value is empty or unparseable
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def minutes_since(value: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
    """
    Whole minutes elapsed since an ISO timestamp

    Args:
        value: ISO timestamp string
        now: Reference time (defaults to current UTC time)

    Returns:
        Rounded minutes, or None if the timestamp is missing
    """
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        return None
    now = now or utc_now()
    return round((now - parsed).total_seconds() / 60)


def to_float(value: Any) -> Optional[float]:
    """
    Convert a loosely typed upstream value to float

    Accepts numbers and numeric strings with thousands separators
    (e.g. "10,000"). NaN and infinity become None.

    Args:
        value: Raw value

    Returns:
        Float value, or None if the value is missing or not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def chunked(items, size: int):
    """
    Split a sequence into consecutive chunks

    Args:
        items: Sequence to split
        size: Chunk size (must be positive)

    Returns:
        List of lists
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
