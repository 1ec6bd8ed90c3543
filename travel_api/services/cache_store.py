"""
Key/value cache store with per-key expiration.

The refresh jobs are the only writers; the batch resolver and the status
endpoints only read. Every write is a full replacement of one key.
"""
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from travel_api.database.models import CacheEntry
from weather_feeds.utils.helpers import utc_now


class CacheStore(ABC):
    """
    Contract shared by all cache backends.

    A get after a key's TTL has elapsed behaves exactly like a get for a key
    that was never written. Keys are independent and same-key writes are
    last-write-wins.
    """

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """
        Store a serialized value.

        Args:
            key: Cache key
            value: Serialized value (JSON text)
            ttl_seconds: Seconds until the entry expires
        """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a serialized value.

        Args:
            key: Cache key

        Returns:
            The stored value, or None if absent or expired
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""

    @abstractmethod
    async def get_stats(self) -> Dict[str, Any]:
        """Backend name and live entry count."""


def _check_ttl(ttl_seconds: int) -> None:
    if ttl_seconds <= 0:
        raise ValueError("ttl_seconds must be positive")


class InMemoryCacheStore(CacheStore):
    """Process-local store; the default backend and the one used in tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Monotonic clock in seconds
        """
        self.clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        _check_ttl(ttl_seconds)
        self._entries[key] = (value, self.clock() + ttl_seconds)

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self.clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def purge_expired(self) -> int:
        now = self.clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def get_stats(self) -> Dict[str, Any]:
        await self.purge_expired()
        return {"backend": "memory", "entries": len(self._entries)}


class DatabaseCacheStore(CacheStore):
    """Store backed by the Tortoise ORM 'cache_entries' table."""

    def __init__(self, now: Callable[[], datetime] = utc_now):
        """
        Args:
            now: Returns the current aware UTC datetime
        """
        self.now = now

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        _check_ttl(ttl_seconds)
        await CacheEntry.update_or_create(
            key=key,
            defaults={
                "value": value,
                "expires_at": self.now() + timedelta(seconds=ttl_seconds),
            }
        )

    async def get(self, key: str) -> Optional[str]:
        entry = await CacheEntry.filter(key=key, expires_at__gt=self.now()).first()
        return entry.value if entry else None

    async def purge_expired(self) -> int:
        return await CacheEntry.filter(expires_at__lte=self.now()).delete()

    async def get_stats(self) -> Dict[str, Any]:
        entries = await CacheEntry.filter(expires_at__gt=self.now()).count()
        return {"backend": "database", "entries": entries}


def build_cache_store(backend: str) -> CacheStore:
    """
    Create the configured cache backend.

    Args:
        backend: 'memory' or 'database'

    Returns:
        CacheStore instance

    Raises:
        ValueError: For an unknown backend name
    """
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryCacheStore()
    if backend == "database":
        return DatabaseCacheStore()
    raise ValueError(f"Unknown cache backend: {backend}")
