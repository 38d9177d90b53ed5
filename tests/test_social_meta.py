"""Tests for Open Graph / Twitter Card extraction (extractors/social_meta.py)."""

from wishlist.extractors.social_meta import collect_meta_content, extract_social_meta
from wishlist.models.product import ProductMetadata


class TestExtractSocialMeta:
    def test_open_graph(self):
        html = """
        <html><head>
          <meta property="og:title" content="Test Product" />
          <meta property="og:image" content="https://example.com/image.jpg" />
        </head></html>
        """
        assert extract_social_meta(html) == ProductMetadata(
            title="Test Product",
            image_url="https://example.com/image.jpg",
        )

    def test_twitter_fallback(self):
        html = """
        <html><head>
          <meta name="twitter:title" content="Twitter Title" />
          <meta name="twitter:image" content="https://example.com/twitter-image.jpg" />
        </head></html>
        """
        result = extract_social_meta(html)
        assert result.title == "Twitter Title"
        assert result.image_url == "https://example.com/twitter-image.jpg"
        assert result.price_minor_units is None
        assert result.currency_code is None

    def test_open_graph_preferred(self):
        html = """
        <html><head>
          <meta name="twitter:title" content="Twitter Title" />
          <meta property="og:title" content="OG Title" />
          <meta name="twitter:image" content="https://example.com/twitter-image.jpg" />
          <meta property="og:image" content="https://example.com/og-image.jpg" />
        </head></html>
        """
        result = extract_social_meta(html)
        assert result.title == "OG Title"
        assert result.image_url == "https://example.com/og-image.jpg"

    def test_fallback_is_per_field(self):
        html = """
        <meta property="og:title" content="OG Title" />
        <meta name="twitter:image" content="https://example.com/twitter-image.jpg" />
        """
        result = extract_social_meta(html)
        assert result.title == "OG Title"
        assert result.image_url == "https://example.com/twitter-image.jpg"

    def test_attribute_order_and_case(self):
        html = '<META CONTENT="  Reordered  " PROPERTY="OG:Title">'
        assert extract_social_meta(html).title == "Reordered"

    def test_no_title(self):
        html = '<meta property="og:image" content="https://example.com/image.jpg" />'
        assert extract_social_meta(html) is None

    def test_empty_content_ignored(self):
        html = """
        <meta property="og:title" content="" />
        <meta name="twitter:title" content="Fallback" />
        """
        assert extract_social_meta(html).title == "Fallback"


class TestCollectMetaContent:
    def test_first_declaration_wins(self):
        html = """
        <meta property="og:title" content="First" />
        <meta property="og:title" content="Second" />
        <meta name="description" content="ignored" />
        """
        assert collect_meta_content(html) == {"og:title": "First"}
