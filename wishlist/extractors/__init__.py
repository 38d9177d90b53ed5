"""Extractors package initialization."""
from wishlist.extractors.structured_data import extract_structured_data
from wishlist.extractors.social_meta import extract_social_meta
from wishlist.extractors.heuristic import extract_heuristic, extract_image, extract_price_from_text, extract_title
from wishlist.extractors.site_selectors import extract_with_site_selectors

__all__ = [
    "extract_structured_data",
    "extract_social_meta",
    "extract_heuristic",
    "extract_image",
    "extract_price_from_text",
    "extract_title",
    "extract_with_site_selectors",
]
