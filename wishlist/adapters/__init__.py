"""Adapters package initialization."""
from wishlist.adapters.fetcher import (
    PageFetcher,
    FetchedPage,
    FetchError,
    FetchStatusError,
    NotHTMLError,
    ResponseTooLargeError,
    FetchTimeoutError,
    BlockedRedirectError,
)
from wishlist.adapters.image_search import ImageSearchAdapter

__all__ = [
    "PageFetcher",
    "FetchedPage",
    "FetchError",
    "FetchStatusError",
    "NotHTMLError",
    "ResponseTooLargeError",
    "FetchTimeoutError",
    "BlockedRedirectError",
    "ImageSearchAdapter",
]
