"""
Ingestion Layer for the Wishlist Resolver.
Turns a submitted product URL into a resolved wishlist item.
"""
from typing import Optional

from wishlist.adapters.fetcher import PageFetcher
from wishlist.extractors.markup import make_soup
from wishlist.extractors.site_selectors import SiteExtraction, extract_with_site_selectors
from wishlist.layers.resolution import resolve_metadata
from wishlist.models.product import MetadataSource, ProductMetadata, ResolvedItem
from wishlist.utils.domain import (
    absolutize_url,
    extract_domain,
    get_domain_display_name,
    get_favicon_url,
    is_valid_url,
    normalize_url,
)
from wishlist.utils.logger import LayerLogger
from wishlist.utils.price import format_price

PLACEHOLDER_TITLE = "Untitled"


class InvalidURLError(ValueError):
    """The submitted URL is missing, malformed or points somewhere unsafe."""


def merge_site_extraction(site: Optional[SiteExtraction], generic: ProductMetadata) -> ProductMetadata:
    """Site-table values win field by field; the generic pipeline fills the rest."""
    if site is None or site.is_empty():
        return generic

    price = site.price
    return ProductMetadata(
        title=site.title or generic.title,
        image_url=site.image_url or generic.image_url,
        price_minor_units=price.amount_minor_units if price else generic.price_minor_units,
        currency_code=price.currency_code if price else generic.currency_code,
    )


class IngestionLayer:
    """
    Ingestion Layer - URL in, wishlist item out.

    This layer:
    - Normalizes and validates the submitted URL
    - Fetches the page through the fetcher adapter
    - Applies the site selector table, then the generic resolution pipeline
    - Makes image URLs absolute against the final page URL

    Fetch failures propagate as FetchError; extraction itself never fails.
    """

    def __init__(self, fetcher: Optional[PageFetcher] = None):
        self.logger = LayerLogger("ingestion_layer")
        self.fetcher = fetcher or PageFetcher()

    def prepare_url(self, url: Optional[str]) -> str:
        """
        Normalize and validate a submitted URL.

        Raises:
            InvalidURLError: when the URL is empty, invalid or blocked
        """
        if not url or not isinstance(url, str) or not url.strip():
            raise InvalidURLError("URL is required")

        normalized = normalize_url(url)
        if not is_valid_url(normalized):
            self.logger.log_decision(
                decision="reject_url",
                reason="Invalid or blocked URL",
                url=normalized,
            )
            raise InvalidURLError("Invalid or blocked URL")

        return normalized

    async def ingest(self, url: Optional[str]) -> ResolvedItem:
        """
        Resolve a product URL into a wishlist item.

        Args:
            url: URL as submitted by the user

        Returns:
            ResolvedItem with a placeholder title when nothing was found
        """
        normalized = self.prepare_url(url)
        self.logger.log_action("ingestion", "started", url=normalized)

        page = await self.fetcher.fetch(normalized)
        domain = extract_domain(page.final_url) or extract_domain(normalized)
        if not domain:
            raise InvalidURLError("Could not extract domain from URL")

        metadata = self.resolve_page(page.html, domain)

        image_url = absolutize_url(metadata.image_url, page.final_url) if metadata.image_url else None
        if not metadata.title:
            self.logger.log_decision(
                decision="use_placeholder_title",
                reason="Resolution found no title",
                url=page.final_url,
            )

        item = ResolvedItem(
            url=page.final_url,
            domain=domain,
            domain_name=get_domain_display_name(domain),
            favicon_url=get_favicon_url(domain),
            title=metadata.title or PLACEHOLDER_TITLE,
            image_url=image_url,
            price_minor_units=metadata.price_minor_units,
            currency_code=metadata.currency_code,
            formatted_price=format_price(metadata.price_minor_units, metadata.currency_code),
        )

        self.logger.log_action(
            "ingestion",
            "completed",
            url=item.url,
            fields_present=metadata.get_present_fields(),
        )
        return item

    def resolve_page(self, html: str, domain: Optional[str]) -> ProductMetadata:
        """Run the site selector pre-step and the generic pipeline over one page."""
        soup = make_soup(html)
        generic = resolve_metadata(soup)

        try:
            site = extract_with_site_selectors(soup, domain)
        except Exception as e:
            self.logger.log_error(
                f"Site selectors failed: {str(e)}",
                error_type=type(e).__name__,
                domain=domain,
            )
            site = None

        if site is not None:
            self.logger.log_decision(
                decision="apply_site_selectors",
                reason=f"Domain matches the {site.site} selector table",
                source=MetadataSource.SITE_SELECTORS.value,
                domain=domain,
            )

        return merge_site_extraction(site, generic)
