"""
Rate Limiter for upstream weather providers
Manages API call limits to stay within free tier restrictions
"""

import asyncio
import time
from collections import deque
from typing import Callable, Dict, Optional

from weather_feeds.data_collection.errors import RateLimitExceeded
from weather_feeds.utils.logger import get_logger


class RateLimiter:
    """
    Manages API rate limits with safety buffer
    Tracks calls per minute and per day for one provider
    """

    def __init__(
        self,
        config: Dict,
        provider: str = "upstream",
        logger=None,
        clock: Callable[[], float] = time.monotonic,
        sleep=asyncio.sleep
    ):
        """
        Initialize rate limiter

        Args:
            config: Rate limit configuration (calls_per_minute, calls_per_day, safety_buffer)
            provider: Provider name used in logs and errors
            logger: Logger instance
            clock: Monotonic clock in seconds
            sleep: Coroutine used to wait out the minute window
        """
        self.config = config
        self.provider = provider
        self.logger = logger or get_logger()
        self.clock = clock
        self.sleep = sleep

        # Extract limits with safety buffer
        safety = config.get('safety_buffer', 0.8)
        self.limits = {
            'minute': max(1, int(config.get('calls_per_minute', 60) * safety)),
            'day': max(1, int(config.get('calls_per_day', 2000) * safety))
        }

        # Track API calls with timestamps
        self.call_history = {
            'minute': deque(),
            'day': deque()
        }

        # Statistics
        self.stats = {
            'total_calls': 0,
            'total_wait_time': 0.0,
            'rejected_calls': 0
        }

        self._lock = asyncio.Lock()

        self.logger.debug(f"Rate limiter for {provider} initialized with limits: {self.limits}")

    async def acquire(self):
        """
        Reserve one call, waiting out the minute window if needed

        Raises:
            RateLimitExceeded: If the daily budget is spent
        """
        async with self._lock:
            now = self.clock()
            self._clean_old_entries(now)

            # Check daily limit (hard stop)
            if len(self.call_history['day']) >= self.limits['day']:
                self.stats['rejected_calls'] += 1
                raise RateLimitExceeded(self.provider, "Daily API limit reached")

            # Check minute limit (wait)
            if len(self.call_history['minute']) >= self.limits['minute']:
                wait_time = self._calculate_wait_time(now)
                self.logger.warning(
                    f"{self.provider} minute limit reached. Waiting {wait_time:.1f} seconds..."
                )
                self.stats['total_wait_time'] += wait_time
                await self.sleep(wait_time)
                now = self.clock()
                self._clean_old_entries(now)

            self._record_call(now)

    def _record_call(self, now: float):
        """Record an API call"""
        self.call_history['minute'].append(now)
        self.call_history['day'].append(now)
        self.stats['total_calls'] += 1

    def _clean_old_entries(self, now: float):
        """Remove expired entries from tracking"""
        while self.call_history['minute'] and self.call_history['minute'][0] <= now - 60:
            self.call_history['minute'].popleft()

        while self.call_history['day'] and self.call_history['day'][0] <= now - 86400:
            self.call_history['day'].popleft()

    def _calculate_wait_time(self, now: float) -> float:
        """
        Calculate how long to wait before the oldest call leaves the minute window

        Args:
            now: Current clock value

        Returns:
            Wait time in seconds
        """
        if not self.call_history['minute']:
            return 0.0

        elapsed = now - self.call_history['minute'][0]
        return max(0.0, 60 - elapsed)

    def get_remaining_calls(self) -> Dict[str, int]:
        """
        Get remaining API calls for each period

        Returns:
            Dictionary with remaining calls
        """
        self._clean_old_entries(self.clock())

        return {
            'minute': self.limits['minute'] - len(self.call_history['minute']),
            'day': self.limits['day'] - len(self.call_history['day'])
        }

    def get_stats(self) -> Dict:
        """Get rate limiter statistics"""
        remaining = self.get_remaining_calls()

        return {
            'provider': self.provider,
            'total_calls': self.stats['total_calls'],
            'rejected_calls': self.stats['rejected_calls'],
            'total_wait_time': round(self.stats['total_wait_time'], 1),
            'remaining_this_minute': remaining['minute'],
            'remaining_today': remaining['day'],
            'limits': dict(self.limits)
        }


def build_rate_limiter(config: Optional[Dict], provider: str, logger=None) -> Optional[RateLimiter]:
    """
    Build a limiter from a provider config section

    Args:
        config: The provider's 'rate_limits' section, or None to disable limiting
        provider: Provider name
        logger: Logger instance

    Returns:
        RateLimiter, or None when no limits are configured
    """
    if not config:
        return None
    return RateLimiter(config, provider=provider, logger=logger)
