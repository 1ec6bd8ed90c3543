"""
Tortoise ORM models for the travel weather cache.
"""
from tortoise import fields
from tortoise.models import Model


class CacheEntry(Model):
    """Key/value cache entry with an absolute expiry."""

    key = fields.CharField(max_length=100, pk=True)
    value = fields.TextField()

    # Cache metadata
    written_at = fields.DatetimeField(auto_now=True)
    expires_at = fields.DatetimeField(index=True)

    class Meta:
        table = "cache_entries"

    def __str__(self):
        return f"CacheEntry(key={self.key}, expires_at={self.expires_at})"
