"""Tests for JSON-LD product extraction (extractors/structured_data.py)."""

import json

from wishlist.extractors.structured_data import (
    extract_image_url,
    extract_offer_price,
    extract_structured_data,
    find_product_node,
    iter_jsonld_blocks,
)
from wishlist.models.product import ParsedPrice, ProductMetadata


def _page(*blocks) -> str:
    scripts = "\n".join(
        f'<script type="application/ld+json">{block if isinstance(block, str) else json.dumps(block)}</script>'
        for block in blocks
    )
    return f"<html><head>{scripts}</head><body></body></html>"


class TestExtractStructuredData:
    def test_product_with_offer(self):
        html = _page(
            {
                "@context": "https://schema.org",
                "@type": "Product",
                "name": "Test Product",
                "image": "https://example.com/image.jpg",
                "offers": {"@type": "Offer", "price": "299.99", "priceCurrency": "EUR"},
            }
        )
        assert extract_structured_data(html) == ProductMetadata(
            title="Test Product",
            image_url="https://example.com/image.jpg",
            price_minor_units=29999,
            currency_code="EUR",
        )

    def test_product_in_second_block(self):
        html = _page(
            {"@type": "WebSite", "name": "Example Site"},
            {
                "@type": "Product",
                "name": "Test Product",
                "offers": {"price": "199.99", "priceCurrency": "USD"},
            },
        )
        result = extract_structured_data(html)
        assert result.title == "Test Product"
        assert result.price_minor_units == 19999
        assert result.currency_code == "USD"

    def test_invalid_block_is_skipped(self):
        html = _page(
            "{ invalid json }",
            {"@type": "Product", "name": "Still Found"},
        )
        assert extract_structured_data(html).title == "Still Found"

    def test_only_invalid_json(self):
        assert extract_structured_data(_page("{ invalid json }")) is None

    def test_no_product(self):
        assert extract_structured_data(_page({"@type": "WebSite", "name": "Example Site"})) is None

    def test_product_without_name(self):
        html = _page(
            {"@type": "Product", "offers": {"price": "10", "priceCurrency": "EUR"}},
            {"@type": "Product", "name": "Later Product"},
        )
        assert extract_structured_data(html) is None

    def test_graph_container(self):
        html = _page(
            {
                "@context": "https://schema.org",
                "@graph": [
                    {"@type": "BreadcrumbList", "itemListElement": []},
                    {"@type": "Product", "name": "Graph Product", "offers": [{"price": 12.5, "priceCurrency": "gbp"}]},
                ],
            }
        )
        result = extract_structured_data(html)
        assert result.title == "Graph Product"
        assert result.price_minor_units == 1250
        assert result.currency_code == "GBP"

    def test_type_attribute_variants(self):
        html = (
            '<script type="Application/LD+JSON; charset=utf-8">'
            '{"@type": "Product", "name": "Loose Type"}'
            "</script>"
        )
        assert extract_structured_data(html).title == "Loose Type"

    def test_garbage_input(self):
        assert extract_structured_data("") is None
        assert extract_structured_data("<<<not html>>>") is None


class TestFindProductNode:
    def test_depth_first_nested(self):
        data = {
            "@type": "WebPage",
            "mainEntity": {"@type": "ItemPage", "about": [{"@type": "Thing"}, {"@type": "Product", "name": "Deep"}]},
        }
        assert find_product_node(data)["name"] == "Deep"

    def test_first_match_wins(self):
        data = [{"@type": "Product", "name": "First"}, {"@type": "Product", "name": "Second"}]
        assert find_product_node(data)["name"] == "First"

    def test_type_list(self):
        assert find_product_node({"@type": ["Product", "Vehicle"], "name": "Car"})["name"] == "Car"

    def test_scalars(self):
        assert find_product_node("Product") is None
        assert find_product_node(42) is None
        assert find_product_node(None) is None


class TestImageUrl:
    def test_string(self):
        assert extract_image_url({"image": "https://a/1.jpg"}) == "https://a/1.jpg"

    def test_list_of_strings(self):
        assert extract_image_url({"image": ["https://a/1.jpg", "https://a/2.jpg"]}) == "https://a/1.jpg"

    def test_list_of_objects(self):
        assert extract_image_url({"image": [{"@type": "ImageObject", "url": "https://a/obj.jpg"}]}) == "https://a/obj.jpg"

    def test_object_with_id(self):
        assert extract_image_url({"image": {"@id": "https://a/id.jpg"}}) == "https://a/id.jpg"

    def test_missing(self):
        assert extract_image_url({}) is None
        assert extract_image_url({"image": []}) is None
        assert extract_image_url({"image": [{"caption": "no url"}]}) is None


class TestOfferPrice:
    def test_first_usable_offer_wins(self):
        product = {
            "offers": [
                {"price": "abc", "priceCurrency": "EUR"},
                {"price": "19.99"},
                {"price": "24.90", "priceCurrency": "€"},
                {"price": "9.99", "priceCurrency": "USD"},
            ]
        }
        assert extract_offer_price(product) == ParsedPrice(amount_minor_units=2490, currency_code="EUR")

    def test_rounds_half_up(self):
        assert extract_offer_price({"offers": {"price": "0.125", "priceCurrency": "USD"}}).amount_minor_units == 13

    def test_zero_price_is_skipped(self):
        assert extract_offer_price({"offers": {"price": "0.00", "priceCurrency": "EUR"}}) is None

    def test_aggregate_offer_low_price(self):
        product = {"offers": {"@type": "AggregateOffer", "lowPrice": "49.5", "priceCurrency": "EUR"}}
        assert extract_offer_price(product) == ParsedPrice(amount_minor_units=4950, currency_code="EUR")

    def test_no_offers(self):
        assert extract_offer_price({}) is None


class TestIterBlocks:
    def test_empty_scripts_ignored(self):
        html = '<script type="application/ld+json">   </script><script type="application/ld+json">[1]</script>'
        assert iter_jsonld_blocks(html) == [[1]]
