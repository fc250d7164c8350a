"""Cache entry model stored under a namespaced key."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class CacheEntry(BaseModel):
    """Body of a single user-visible cache key.

    Handed to the backing store as a plain dict with ``value`` left
    untouched; stores that persist to disk do their own encoding.
    """

    value: Any = None
    expires_at: datetime | None = Field(
        default=None, description="UTC expiry, whole seconds. None never expires"
    )
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, tags: list[str]) -> list[str]:
        return list(dict.fromkeys(tags))

    @field_validator("expires_at")
    @classmethod
    def _truncate_to_seconds(cls, expires_at: datetime | None) -> datetime | None:
        if expires_at is None:
            return None
        return expires_at.replace(microsecond=0)
