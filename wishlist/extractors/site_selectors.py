"""
Site-specific selector table.

An optional pre-step for marketplaces whose pages hide product data from
the generic strategies. Whatever the table finds takes precedence over the
generic pipeline field by field; anything it misses falls through.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from wishlist.extractors.markup import Markup, element_text, make_soup
from wishlist.models.product import ParsedPrice
from wishlist.utils.price import parse_price


@dataclass(frozen=True)
class SiteSelectors:
    """Ordered CSS selectors for one family of sites."""
    name: str
    domain_fragments: Tuple[str, ...]
    title: Tuple[str, ...] = ()
    image: Tuple[str, ...] = ()
    price: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SiteExtraction:
    """Fields found through a site selector table."""
    site: str
    title: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[ParsedPrice] = None

    def is_empty(self) -> bool:
        return not (self.title or self.image_url or self.price)


SITE_SELECTORS = (
    SiteSelectors(
        name="amazon",
        domain_fragments=("amazon.",),
        title=(
            "#productTitle",
            "h1.a-size-large",
            'h1[data-automation-id="product-title"]',
            ".product-title",
            "h1",
            ".a-size-large",
        ),
        image=(
            "#landingImage",
            "#imgBlkFront",
            ".a-dynamic-image",
            ".a-button-thumbnail img",
            ".imgTagWrapper img",
            "#altImages img",
        ),
        price=(
            ".a-price .a-offscreen",
            ".a-price-whole",
            ".a-price",
            ".pricePerUnit",
            ".a-price-range",
        ),
    ),
    SiteSelectors(
        name="ebay",
        domain_fragments=("ebay.",),
        title=(".x-item-title__mainTitle", "#itemTitle", "h1"),
        image=(".ux-image-carousel-item img", "#icImg"),
        price=(".x-price-primary", "#prcIsum", "[itemprop='price']"),
    ),
)


def find_site_selectors(domain: Optional[str]) -> Optional[SiteSelectors]:
    """Return the selector table entry matching a domain, if any."""
    if not domain:
        return None
    domain = domain.lower()
    for entry in SITE_SELECTORS:
        if any(fragment in domain for fragment in entry.domain_fragments):
            return entry
    return None


def extract_with_site_selectors(markup: Markup, domain: Optional[str]) -> Optional[SiteExtraction]:
    """
    Run the selector table for a known domain.

    Returns:
        SiteExtraction with whatever was found, or None for domains the
        table does not cover
    """
    entry = find_site_selectors(domain)
    if entry is None:
        return None

    soup = make_soup(markup)

    title = None
    for selector in entry.title:
        title = element_text(soup.select_one(selector))
        if title:
            break

    image_url = None
    for selector in entry.image:
        element = soup.select_one(selector)
        if element is None:
            continue
        src = element.get("src") or element.get("data-src")
        if isinstance(src, str) and src.strip():
            image_url = src.strip()
            break

    price = None
    for selector in entry.price:
        price = parse_price(element_text(soup.select_one(selector)))
        if price:
            break

    return SiteExtraction(site=entry.name, title=title or None, image_url=image_url, price=price)
