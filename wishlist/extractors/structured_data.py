"""
JSON-LD structured data extractor.

Finds the first schema.org Product node embedded in the page and reads
its name, image and offer price.
"""
import json
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from wishlist.extractors.markup import Markup, make_soup
from wishlist.models.product import ParsedPrice, ProductMetadata
from wishlist.utils.logger import LayerLogger
from wishlist.utils.price import normalize_currency

JSONLD_TYPE = re.compile(r"^\s*application/ld\+json", re.IGNORECASE)
LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

logger = LayerLogger("structured_data")


def iter_jsonld_blocks(markup: Markup) -> List[Any]:
    """
    Parse every JSON-LD script block on the page.

    Blocks that fail to parse are skipped; one broken block never hides
    the others.
    """
    soup = make_soup(markup)
    blocks = []

    for script in soup.find_all("script", attrs={"type": JSONLD_TYPE}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            blocks.append(json.loads(raw))
        except (ValueError, RecursionError) as e:
            logger.log_action("jsonld_block_skipped", "failed", error=str(e)[:200])
            continue

    return blocks


def is_product_node(node: Dict[str, Any]) -> bool:
    """True when a JSON-LD object is typed as a Product."""
    schema_type = node.get("@type")
    if isinstance(schema_type, list):
        return "Product" in schema_type
    return schema_type == "Product"


def find_product_node(data: Any) -> Optional[Dict[str, Any]]:
    """
    Depth-first search for the first Product node.

    Objects are checked before their values; arrays are searched element
    by element. Scalars never match.
    """
    if isinstance(data, dict):
        if is_product_node(data):
            return data
        for value in data.values():
            product = find_product_node(value)
            if product is not None:
                return product
    elif isinstance(data, list):
        for item in data:
            product = find_product_node(item)
            if product is not None:
                return product
    return None


def _image_object_url(image: Any) -> Optional[str]:
    if isinstance(image, str):
        return image or None
    if isinstance(image, dict):
        url = image.get("url") or image.get("@id")
        return url if isinstance(url, str) and url else None
    return None


def extract_image_url(product: Dict[str, Any]) -> Optional[str]:
    """
    Normalize the Product image field to a single URL.

    Handles:
    - String: single URL
    - List: first element, a URL or an ImageObject
    - dict: single ImageObject (url or @id)
    """
    image = product.get("image")
    if not image:
        return None
    if isinstance(image, list):
        return _image_object_url(image[0]) if image else None
    return _image_object_url(image)


def _decimal_price(value: Any) -> Optional[Decimal]:
    """Read a JSON-LD price (number or numeric string) as a Decimal."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        text = repr(value)
    elif isinstance(value, str):
        match = LEADING_NUMBER.match(value)
        if not match:
            return None
        text = match.group(1)
    else:
        return None
    try:
        price = Decimal(text)
    except InvalidOperation:
        return None
    return price if price.is_finite() else None


def extract_offer_price(product: Dict[str, Any]) -> Optional[ParsedPrice]:
    """
    Read the price of the first usable offer.

    Offers may be a single object or a list; the first offer carrying both
    a numeric price and a currency wins. AggregateOffer lowPrice is used
    when an offer has no price of its own.
    """
    offers = product.get("offers")
    if not offers:
        return None
    if not isinstance(offers, list):
        offers = [offers]

    for offer in offers:
        if not isinstance(offer, dict):
            continue
        raw_price = offer.get("price")
        if raw_price in (None, ""):
            raw_price = offer.get("lowPrice")
        currency = offer.get("priceCurrency")
        if not raw_price or not currency or not isinstance(currency, str):
            continue

        price = _decimal_price(raw_price)
        if price is None:
            continue

        try:
            minor_units = int((price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        except InvalidOperation:
            continue
        if minor_units <= 0:
            continue

        return ParsedPrice(
            amount_minor_units=minor_units,
            currency_code=normalize_currency(currency),
        )

    return None


def extract_structured_data(markup: Markup) -> Optional[ProductMetadata]:
    """
    Extract product metadata from JSON-LD structured data.

    Returns:
        ProductMetadata, or None when no Product node is found or the
        first Product found has no name
    """
    for data in iter_jsonld_blocks(markup):
        try:
            product = find_product_node(data)
        except RecursionError:
            logger.log_action("jsonld_search", "failed", reason="nesting too deep")
            continue

        if product is None:
            continue

        name = product.get("name")
        title = name.strip() if isinstance(name, str) else ""
        if not title:
            logger.log_decision(
                decision="discard_product_node",
                reason="Product node has no name",
            )
            return None

        result = ProductMetadata.with_price(
            title=title,
            image_url=extract_image_url(product),
            price=extract_offer_price(product),
        )
        logger.log_extraction(
            source="structured_data",
            fields_present=result.get_present_fields(),
            fields_missing=result.get_missing_fields(),
        )
        return result

    logger.log_action("jsonld_extraction", "no_product_found")
    return None
