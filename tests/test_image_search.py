"""Tests for the image search fallback chain (adapters/image_search.py)."""

import asyncio

import httpx

from wishlist.adapters.image_search import (
    DEFAULT_IMAGE,
    KEYWORD_IMAGES,
    ImageSearchAdapter,
    default_image_for,
    find_image_in_search_html,
)


def _search(handler, query: str):
    adapter = ImageSearchAdapter(transport=httpx.MockTransport(handler))
    return asyncio.run(adapter.search(query))


class TestFindImageInSearchHtml:
    def test_first_image_like_url(self):
        html = '["https://example.com/page.html",1] ["https://cdn.example.com/robot.jpg",300,200]'
        assert find_image_in_search_html(html) == "https://cdn.example.com/robot.jpg"

    def test_gstatic_thumbnail(self):
        html = 'x "https://encrypted-tbn0.gstatic.com/images?q=tbn:abc" y'
        assert find_image_in_search_html(html) == "https://encrypted-tbn0.gstatic.com/images?q=tbn:abc"

    def test_nothing(self):
        assert find_image_in_search_html("<html>no results</html>") is None


class TestDefaultImage:
    def test_keyword(self):
        assert default_image_for("Robot aspirateur X200") == KEYWORD_IMAGES["robot"]

    def test_generic(self):
        assert default_image_for("garden chair") == DEFAULT_IMAGE


class TestImageSearchAdapter:
    def test_google_hit(self):
        def handler(request):
            assert request.url.host == "www.google.com"
            return httpx.Response(200, text='["https://cdn.example.com/lamp.png",640,480]')

        result = _search(handler, " desk lamp ")
        assert result.source == "google"
        assert result.image_url == "https://cdn.example.com/lamp.png"
        assert result.query == "desk lamp"

    def test_unsplash_fallback(self):
        def handler(request):
            if request.url.host == "www.google.com":
                return httpx.Response(429)
            assert request.method == "HEAD"
            return httpx.Response(200)

        result = _search(handler, "desk lamp")
        assert result.source == "unsplash"
        assert result.image_url == "https://source.unsplash.com/800x600/?desk%20lamp"

    def test_default_when_services_fail(self):
        def handler(request):
            return httpx.Response(503)

        result = _search(handler, "vintage camera")
        assert result.source == "default"
        assert result.image_url == KEYWORD_IMAGES["camera"]

    def test_network_errors_fall_through(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        result = _search(handler, "book shelf")
        assert result.source == "default"
        assert result.image_url == KEYWORD_IMAGES["book"]
