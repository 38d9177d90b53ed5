"""
Image Search Adapter for the Wishlist Resolver.
Finds a stand-in picture for items whose page yielded no image.
Availability of the upstream services is not guaranteed; the adapter always
answers with at least a keyword-based default image.
"""
import re
from typing import Optional
from urllib.parse import quote, unquote

import httpx

from wishlist.config import config
from wishlist.models.product import ImageSearchResult
from wishlist.utils.logger import LayerLogger

GOOGLE_IMAGE_PATTERNS = (
    re.compile(r'"ou":"([^"]+)"'),
    re.compile(r'"url":"([^"]+)"'),
    re.compile(r'\["(https://[^"]*\.(?:jpg|jpeg|png|webp|gif)[^"]*)"[,\]]', re.IGNORECASE),
    re.compile(r'"(https://encrypted-tbn0\.gstatic\.com/images[^"]+)"'),
    re.compile(r'"(https://[^"]*\.googleusercontent\.com[^"]*\.(?:jpg|jpeg|png|webp|gif)[^"]*)"'),
)

IMAGE_EXTENSION = re.compile(r"\.(jpg|jpeg|png|webp|gif)(\?|$)", re.IGNORECASE)

KEYWORD_IMAGES = {
    "phone": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=800&h=600&fit=crop",
    "iphone": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=800&h=600&fit=crop",
    "samsung": "https://images.unsplash.com/photo-1610945415295-d9bbf067e59c?w=800&h=600&fit=crop",
    "laptop": "https://images.unsplash.com/photo-1496181133206-80ce9b88a853?w=800&h=600&fit=crop",
    "macbook": "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?w=800&h=600&fit=crop",
    "robot": "https://images.unsplash.com/photo-1546776230-bb86256870ee?w=800&h=600&fit=crop",
    "aspirateur": "https://images.unsplash.com/photo-1558618666-fcd25c85cd64?w=800&h=600&fit=crop",
    "car": "https://images.unsplash.com/photo-1494976388531-d1058494cdd8?w=800&h=600&fit=crop",
    "watch": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=800&h=600&fit=crop",
    "book": "https://images.unsplash.com/photo-1481627834876-b7833e8f5570?w=800&h=600&fit=crop",
    "camera": "https://images.unsplash.com/photo-1502920917128-1aa500764cbd?w=800&h=600&fit=crop",
}

DEFAULT_IMAGE = "https://images.unsplash.com/photo-1560472354-b33ff0c44a43?w=800&h=600&fit=crop&q=80"


def default_image_for(query: str) -> str:
    """Pick a stock image by keyword, or the generic product picture."""
    lower_query = query.lower()
    for keyword, image_url in KEYWORD_IMAGES.items():
        if keyword in lower_query:
            return image_url
    return DEFAULT_IMAGE


def find_image_in_search_html(html: str) -> Optional[str]:
    """Return the first URL in a Google Images result page that looks like an image."""
    for pattern in GOOGLE_IMAGE_PATTERNS:
        for match in pattern.finditer(html):
            image_url = unquote(match.group(1))
            if (
                IMAGE_EXTENSION.search(image_url)
                or "gstatic.com/images" in image_url
                or "googleusercontent.com" in image_url
            ):
                return image_url
    return None


class ImageSearchAdapter:
    """
    Image search fallback chain.

    Order:
    1. Google Images result page scrape
    2. Unsplash source URL (probed with HEAD)
    3. Keyword-based default image
    """

    def __init__(self, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout if timeout is not None else config.IMAGE_SEARCH_TIMEOUT
        self.transport = transport
        self.logger = LayerLogger("image_search")

    def _get_headers(self) -> dict:
        """Get request headers mimicking a browser."""
        return {
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
        }

    async def search(self, query: str) -> ImageSearchResult:
        """Find an image for a free-text query; never raises."""
        query = query.strip()
        self.logger.log_action("image_search", "started", query=query)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                google_url = await self._search_google(client, query)
                if google_url:
                    return self._result(google_url, "google", query)

                self.logger.log_fallback(
                    from_source="google",
                    to_source="unsplash",
                    reason="No image found in Google results",
                    query=query,
                )
                unsplash_url = await self._search_unsplash(client, query)
                if unsplash_url:
                    return self._result(unsplash_url, "unsplash", query)

        except Exception as e:
            self.logger.log_error(
                f"Image search failed: {str(e)}",
                error_type="image_search_error",
                query=query,
            )
            return self._result(default_image_for("product"), "error_fallback", query)

        self.logger.log_fallback(
            from_source="unsplash",
            to_source="default",
            reason="No image from search services",
            query=query,
        )
        return self._result(default_image_for(query), "default", query)

    async def _search_google(self, client: httpx.AsyncClient, query: str) -> Optional[str]:
        url = f"https://www.google.com/search?q={quote(query)}&tbm=isch&safe=off"
        try:
            response = await client.get(url, headers=self._get_headers())
        except httpx.HTTPError as e:
            self.logger.log_error(f"Google Images request failed: {str(e)}", error_type="http_error")
            return None
        if response.status_code != 200:
            return None
        return find_image_in_search_html(response.text)

    async def _search_unsplash(self, client: httpx.AsyncClient, query: str) -> Optional[str]:
        url = f"https://source.unsplash.com/800x600/?{quote(query)}"
        try:
            response = await client.head(url)
        except httpx.HTTPError as e:
            self.logger.log_error(f"Unsplash probe failed: {str(e)}", error_type="http_error")
            return None
        return url if response.is_success else None

    def _result(self, image_url: str, source: str, query: str) -> ImageSearchResult:
        self.logger.log_action("image_search", "completed", source=source, image_url=image_url)
        return ImageSearchResult(image_url=image_url, source=source, query=query)
