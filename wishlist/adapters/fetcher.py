"""
Page Fetcher Adapter for the Wishlist Resolver.
Downloads product pages under a wall-clock timeout and a response size cap.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from wishlist.config import config
from wishlist.utils.domain import is_valid_url
from wishlist.utils.logger import LayerLogger


class FetchError(Exception):
    """The page could not be fetched."""


class FetchStatusError(FetchError):
    """The server answered with an error status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {reason}".rstrip(": "))


class NotHTMLError(FetchError):
    """The response is not an HTML document."""


class ResponseTooLargeError(FetchError):
    """The response exceeds the configured size cap."""


class FetchTimeoutError(FetchError):
    """The fetch did not finish within the timeout."""


class BlockedRedirectError(FetchError):
    """A request (usually a redirect hop) targets a blocked or invalid URL."""


@dataclass
class FetchedPage:
    """HTML downloaded from a URL, after redirects."""
    html: str
    final_url: str
    status_code: int
    content_type: str


class PageFetcher:
    """
    HTTP fetcher for product pages.

    Follows redirects, sends browser-like headers, requires an HTML content
    type and aborts the transfer once the body grows past max_bytes.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else config.FETCH_TIMEOUT
        self.max_bytes = max_bytes if max_bytes is not None else config.MAX_RESPONSE_SIZE
        self.transport = transport
        self.logger = LayerLogger("page_fetcher")

    def _get_headers(self) -> dict:
        """Get request headers mimicking a browser."""
        return {
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "DNT": "1",
            "Upgrade-Insecure-Requests": "1",
        }

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page.

        Args:
            url: Validated, normalized URL

        Returns:
            FetchedPage with decoded HTML and the final URL

        Raises:
            FetchError (or a subclass) on any failure
        """
        self.logger.log_action("fetch_page", "started", url=url)

        try:
            page = await asyncio.wait_for(self._download(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.logger.log_error("Fetch timed out", error_type="timeout", url=url, timeout=self.timeout)
            raise FetchTimeoutError(f"Timed out after {self.timeout}s")
        except httpx.TimeoutException as e:
            self.logger.log_error(f"Fetch timed out: {str(e)}", error_type="timeout", url=url)
            raise FetchTimeoutError(f"Timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            self.logger.log_error(f"Failed to fetch URL: {str(e)}", error_type="http_error", url=url)
            raise FetchError(f"Failed to fetch URL: {str(e)}") from e
        except FetchError as e:
            self.logger.log_error(str(e), error_type=type(e).__name__, url=url)
            raise

        self.logger.log_action(
            "fetch_page",
            "completed",
            url=url,
            final_url=page.final_url,
            status_code=page.status_code,
            content_length=len(page.html),
        )
        return page

    async def _check_request_target(self, request: httpx.Request) -> None:
        """Request hook: every hop, redirects included, must pass is_valid_url."""
        target = str(request.url)
        if not is_valid_url(target):
            self.logger.log_decision(
                decision="block_request",
                reason="Redirect target is invalid or blocked",
                url=target,
            )
            raise BlockedRedirectError(f"Blocked redirect to {request.url.host or target}")

    async def _download(self, url: str) -> FetchedPage:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
            event_hooks={"request": [self._check_request_target]},
        ) as client:
            async with client.stream("GET", url, headers=self._get_headers()) as response:
                if response.is_error:
                    raise FetchStatusError(response.status_code, response.reason_phrase)

                content_type = response.headers.get("content-type", "")
                if "text/html" not in content_type.lower():
                    raise NotHTMLError(f"Response is not HTML ({content_type or 'no content type'})")

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    raise ResponseTooLargeError(f"Response too large ({declared} bytes)")

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self.max_bytes:
                        raise ResponseTooLargeError(f"Response exceeded {self.max_bytes} bytes")

                encoding = response.charset_encoding or "utf-8"
                try:
                    html = body.decode(encoding, errors="replace")
                except LookupError:
                    html = body.decode("utf-8", errors="replace")

                return FetchedPage(
                    html=html,
                    final_url=str(response.url),
                    status_code=response.status_code,
                    content_type=content_type,
                )
