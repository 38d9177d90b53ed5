"""
Heuristic DOM/text extractor.

Used when a page carries no usable structured data: guesses the title
from headings, picks the first image that does not look like a logo or
an icon, and mines the visible text for a price.
"""
import re
from typing import Optional

from bs4 import NavigableString, Tag
from bs4.element import CData, RubyParenthesisString, RubyTextString, Script, Stylesheet, TemplateString

from wishlist.extractors.markup import Markup, clean_text, element_text, make_soup
from wishlist.models.product import HeuristicMetadata, ParsedPrice
from wishlist.utils.price import parse_price

LOGO_PATTERN = re.compile(r"logo|icon|favicon", re.IGNORECASE)
LEADING_INT = re.compile(r"^\s*(\d+)")
MIN_IMAGE_SIZE = 100

# Exact string classes scanned for prices (Comment and Doctype excluded)
PAGE_TEXT_TYPES = (
    NavigableString,
    CData,
    Script,
    Stylesheet,
    TemplateString,
    RubyTextString,
    RubyParenthesisString,
)

TITLE_SELECTORS = ("h1", "title", '[data-testid="product-title"]')


def extract_title(markup: Markup) -> Optional[str]:
    """First non-empty of: first h1, the title tag, a product-title test hook."""
    soup = make_soup(markup)
    for selector in TITLE_SELECTORS:
        text = element_text(soup.select_one(selector))
        if text:
            return text
    return None


def _declared_size(img: Tag, attr: str) -> Optional[int]:
    value = img.get(attr)
    if not isinstance(value, str):
        return None
    match = LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _is_small(img: Tag) -> bool:
    """Both dimensions declared and either one under the minimum size."""
    width = _declared_size(img, "width")
    height = _declared_size(img, "height")
    if width is None or height is None:
        return False
    return width < MIN_IMAGE_SIZE or height < MIN_IMAGE_SIZE


def is_candidate_image(img: Tag, src: str) -> bool:
    """Reject logos, icons, inline data, SVGs and tiny declared images."""
    if LOGO_PATTERN.search(src) or LOGO_PATTERN.search(str(img)):
        return False
    if "data:image" in src or src.lower().startswith("data:"):
        return False
    if ".svg" in src.lower():
        return False
    return not _is_small(img)


def extract_image(markup: Markup) -> Optional[str]:
    """
    Extract the first relevant image from the page.

    Images are scanned in document order; protocol-relative URLs are
    returned with an https scheme.
    """
    soup = make_soup(markup)

    for img in soup.find_all("img"):
        src = img.get("src") or img.get("data-src")
        if not isinstance(src, str):
            continue
        src = src.strip()
        if not src or not is_candidate_image(img, src):
            continue
        return f"https:{src}" if src.startswith("//") else src

    return None


def extract_heuristic(markup: Markup) -> HeuristicMetadata:
    """Title and image guessed from page structure."""
    soup = make_soup(markup)
    return HeuristicMetadata(title=extract_title(soup), image_url=extract_image(soup))


def extract_price_from_text(markup: Markup) -> Optional[ParsedPrice]:
    """
    Strip markup and run the price parser once over the page's text.

    Inline script, style and template text is kept; comments and doctypes
    are not.
    """
    soup = make_soup(markup)
    text = clean_text(soup.get_text(separator=" ", types=PAGE_TEXT_TYPES))
    return parse_price(text)
