"""
Domain utilities for URL processing and validation.
"""
import ipaddress
import re
from typing import Optional
from urllib.parse import parse_qsl, quote, urlencode, urljoin, urlparse, urlunparse

MAX_URL_LENGTH = 2048

BLOCKED_HOSTNAMES = {"localhost", "localhost.localdomain", "0.0.0.0"}

DOMAIN_DISPLAY_NAMES = {
    "amazon.com": "Amazon",
    "amazon.fr": "Amazon France",
    "amazon.co.uk": "Amazon UK",
    "amazon.de": "Amazon Germany",
    "ebay.com": "eBay",
    "ebay.fr": "eBay France",
    "ikea.com": "IKEA",
    "ikea.fr": "IKEA France",
    "zalando.fr": "Zalando",
    "cdiscount.com": "Cdiscount",
    "fnac.com": "Fnac",
    "darty.com": "Darty",
    "leclerc.com": "E.Leclerc",
    "carrefour.fr": "Carrefour",
    "auchan.fr": "Auchan",
    "etsy.com": "Etsy",
    "aliexpress.com": "AliExpress",
    "wish.com": "Wish",
    "shopify.com": "Shopify",
}


def extract_domain(url: str) -> Optional[str]:
    """Return the lower-cased hostname of a URL, or None if it has none."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None
    return hostname.lower() if hostname else None


def get_favicon_url(domain: str) -> str:
    """Favicon service URL for a domain."""
    return f"https://www.google.com/s2/favicons?domain={quote(domain, safe='')}&sz=32"


def _is_blocked_host(hostname: str) -> bool:
    """True for localhost and loopback / private / link-local IP literals."""
    if hostname in BLOCKED_HOSTNAMES:
        return True
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_unspecified
    )


def is_valid_url(url: str) -> bool:
    """
    Check that a URL is safe to fetch.

    Only http(s) is allowed; localhost, private and link-local addresses
    are rejected, as are URLs longer than 2048 characters.
    """
    if not url or len(url) > MAX_URL_LENGTH:
        return False
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return False

    if parsed.scheme not in ("http", "https"):
        return False
    if not hostname:
        return False

    return not _is_blocked_host(hostname.lower())


def normalize_url(url: str) -> str:
    """
    Normalize a URL: add https:// when no scheme is given, drop the
    fragment and sort query parameters.
    """
    normalized = url.strip()

    if not re.match(r"^https?://", normalized, re.IGNORECASE):
        normalized = f"https://{normalized}"

    try:
        parsed = urlparse(normalized)
    except ValueError:
        return normalized

    query = urlencode(sorted(parse_qsl(parsed.query, keep_blank_values=True)))
    path = parsed.path or "/"
    return urlunparse((parsed.scheme.lower(), parsed.netloc, path, parsed.params, query, ""))


def absolutize_url(url: str, base_url: Optional[str] = None) -> str:
    """
    Make an extracted URL absolute.

    Protocol-relative URLs get https; relative URLs are resolved against
    base_url when one is known.
    """
    if url.startswith("//"):
        return f"https:{url}"
    if base_url and not re.match(r"^[a-z][a-z0-9+.-]*:", url, re.IGNORECASE):
        return urljoin(base_url, url)
    return url


def get_domain_display_name(domain: str) -> str:
    """Human-friendly store name for common domains."""
    key = domain.lower()
    if key.startswith("www."):
        key = key[4:]
    return DOMAIN_DISPLAY_NAMES.get(key, domain)
