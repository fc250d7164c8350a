"""Pydantic models for tagcache."""

from tagcache.models.model_cache import CacheEntry

__all__ = [
    "CacheEntry",
]
