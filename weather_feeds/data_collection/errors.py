"""
Exceptions raised by the upstream weather data adapters.
"""


class UpstreamFailure(Exception):
    """An upstream weather provider returned an error, timed out or sent an unusable body."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class RateLimitExceeded(UpstreamFailure):
    """The provider's call budget for the current window is exhausted."""
