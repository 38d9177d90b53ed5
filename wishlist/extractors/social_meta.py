"""
Open Graph / Twitter Card extractor.
"""
from typing import Dict, Optional

from wishlist.extractors.markup import Markup, make_soup
from wishlist.models.product import ProductMetadata

SOCIAL_KEYS = ("og:title", "og:image", "twitter:title", "twitter:image")


def collect_meta_content(markup: Markup) -> Dict[str, str]:
    """
    Map social meta keys to the content of the first tag declaring them.

    A tag may name its key through either ``property`` or ``name``; keys
    are compared case-insensitively and empty content is ignored.
    """
    soup = make_soup(markup)
    found: Dict[str, str] = {}

    for meta in soup.find_all("meta"):
        content = meta.get("content")
        if not isinstance(content, str) or not content.strip():
            continue
        for attr in ("property", "name"):
            key = meta.get(attr)
            if not isinstance(key, str):
                continue
            key = key.strip().lower()
            if key in SOCIAL_KEYS and key not in found:
                found[key] = content.strip()

    return found


def extract_social_meta(markup: Markup) -> Optional[ProductMetadata]:
    """
    Extract title and image from Open Graph tags, falling back to Twitter
    Cards for whichever field Open Graph does not supply.

    Never supplies a price. Returns None when neither source has a title.
    """
    meta = collect_meta_content(markup)

    title = meta.get("og:title") or meta.get("twitter:title")
    if not title:
        return None

    return ProductMetadata(
        title=title,
        image_url=meta.get("og:image") or meta.get("twitter:image"),
    )
