"""
Metadata Resolution Layer for the Wishlist Resolver.
Runs the extraction strategies in strict priority order.
"""
from typing import Callable, List, Optional, Tuple

from wishlist.extractors.heuristic import extract_heuristic, extract_price_from_text
from wishlist.extractors.markup import Markup, make_soup
from wishlist.extractors.social_meta import extract_social_meta
from wishlist.extractors.structured_data import extract_structured_data
from wishlist.models.product import MetadataSource, ProductMetadata
from wishlist.utils.logger import LayerLogger

logger = LayerLogger("resolution_layer")

# Stages consulted when structured data has no usable product, in
# priority order. Each returns an object exposing title and image_url.
FALLBACK_STAGES: Tuple[Tuple[MetadataSource, Callable], ...] = (
    (MetadataSource.SOCIAL_META, extract_social_meta),
    (MetadataSource.HEURISTIC, extract_heuristic),
)


def _run_stage(source: MetadataSource, extractor: Callable, soup):
    """Run one extractor; a failure counts as no result."""
    try:
        return extractor(soup)
    except Exception as e:
        logger.log_error(
            f"Extractor failed: {str(e)}",
            error_type=type(e).__name__,
            source=source.value,
        )
        return None


def _first_non_empty(partials: List, field: str) -> Tuple[Optional[str], Optional[MetadataSource]]:
    for source, partial in partials:
        value = getattr(partial, field, None) if partial is not None else None
        if value:
            return value, source
    return None, None


def resolve_metadata(html: Optional[Markup]) -> ProductMetadata:
    """
    Resolve product metadata from a page.

    Priority:
    1. JSON-LD Product (returned as-is when it has a title)
    2. Open Graph / Twitter, then heuristic title and image, field by field
    3. Price mined from the page's plain text

    Never raises; an empty title means nothing usable was found.
    """
    try:
        soup = make_soup(html)
    except Exception as e:
        logger.log_error(f"Unparseable markup: {str(e)}", error_type=type(e).__name__)
        return ProductMetadata()

    structured = _run_stage(MetadataSource.STRUCTURED_DATA, extract_structured_data, soup)
    if structured is not None and structured.title:
        logger.log_decision(
            decision="use_structured_data",
            reason="JSON-LD Product with a name found",
        )
        return structured

    logger.log_fallback(
        from_source=MetadataSource.STRUCTURED_DATA.value,
        to_source="social_meta+heuristic",
        reason="No usable JSON-LD Product",
    )

    partials = [
        (source, _run_stage(source, extractor, soup))
        for source, extractor in FALLBACK_STAGES
    ]
    title, title_source = _first_non_empty(partials, "title")
    image_url, image_source = _first_non_empty(partials, "image_url")

    price = _run_stage(MetadataSource.HEURISTIC, extract_price_from_text, soup)

    result = ProductMetadata.with_price(title=title or "", image_url=image_url, price=price)

    logger.log_extraction(
        source="merged",
        fields_present=result.get_present_fields(),
        fields_missing=result.get_missing_fields(),
        title_source=title_source.value if title_source else None,
        image_source=image_source.value if image_source else None,
    )

    return result
