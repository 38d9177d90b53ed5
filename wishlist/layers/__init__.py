"""Layers package initialization."""
from wishlist.layers.resolution import resolve_metadata
from wishlist.layers.ingestion import IngestionLayer, InvalidURLError
from wishlist.layers.rate_limit import RateLimiter

__all__ = [
    "resolve_metadata",
    "IngestionLayer",
    "InvalidURLError",
    "RateLimiter",
]
