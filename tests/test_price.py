"""Tests for price parsing, currency normalization and formatting (utils/price.py)."""

import pytest

from wishlist.models.product import ParsedPrice
from wishlist.utils.price import (
    PRICE_PATTERNS,
    format_price,
    match_pattern,
    normalize_currency,
    parse_price,
)


def _price(amount: int, currency: str) -> ParsedPrice:
    return ParsedPrice(amount_minor_units=amount, currency_code=currency)


class TestParsePrice:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1 299,99 €", _price(129999, "EUR")),
            ("15,50€", _price(1550, "EUR")),
            ("999€", _price(99900, "EUR")),
        ],
    )
    def test_french_format(self, text, expected):
        assert parse_price(text) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("$1,299.99", _price(129999, "USD")),
            ("$ 15.50", _price(1550, "USD")),
            ("$999", _price(99900, "USD")),
        ],
    )
    def test_us_format(self, text, expected):
        assert parse_price(text) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("£1,299.99", _price(129999, "GBP")),
            ("£15.50", _price(1550, "GBP")),
            ("£999", _price(99900, "GBP")),
        ],
    )
    def test_uk_format(self, text, expected):
        assert parse_price(text) == expected

    def test_currency_codes(self):
        assert parse_price("1299.99 USD") == _price(129999, "USD")
        assert parse_price("CHF 1299.99") == _price(129999, "CHF")
        assert parse_price("SEK 49.90") == _price(4990, "SEK")

    def test_other_symbols_map_through_normalizer(self):
        assert parse_price("¥1500") == _price(150000, "JPY")
        assert parse_price("₹ 2,499") == _price(249900, "INR")

    def test_price_inside_sentence(self):
        text = "Product price: 1 299,99 € (includes VAT)"
        assert parse_price(text) == _price(129999, "EUR")

    def test_whitespace_is_collapsed(self):
        assert parse_price("  1 299,99\n\t€  ") == _price(129999, "EUR")

    def test_german_grouping_dot(self):
        assert parse_price("1.999,99 €") == _price(199999, "EUR")

    @pytest.mark.parametrize("text", ["", None, "no price here", "€", "$"])
    def test_no_price(self, text):
        assert parse_price(text) is None

    @pytest.mark.parametrize("text", ["$١٢٣.٤٥", "١٢٣ €", "٤٥,٠٠ €"])
    def test_non_ascii_digits_are_not_prices(self, text):
        assert parse_price(text) is None

    def test_zero_is_rejected(self):
        assert parse_price("0€") is None
        assert parse_price("$0.00") is None

    def test_zero_match_does_not_stop_scan(self):
        assert parse_price("was 0€, now 25€") == _price(2500, "EUR")

    def test_earlier_pattern_wins_over_earlier_position(self):
        # The US pattern outranks the bare-euro pattern even though the
        # euro amount appears first in the text.
        assert parse_price("12€ or $15.00") == _price(1500, "USD")

    def test_is_pure(self):
        text = "Only today: $1,299.99 instead of $1,499.99"
        assert parse_price(text) == parse_price(text) == _price(129999, "USD")


class TestPricePatterns:
    def test_table_order(self):
        names = [pattern.name for pattern in PRICE_PATTERNS]
        assert names == [
            "french",
            "us",
            "uk",
            "amount_code",
            "code_amount",
            "symbol_amount",
            "amount_euro",
            "amount_dollar",
            "chf",
        ]

    def test_french_pattern_in_isolation(self):
        assert match_pattern(PRICE_PATTERNS[0], "1 299,99 €") == _price(129999, "EUR")
        assert match_pattern(PRICE_PATTERNS[0], "$1,299.99") is None

    def test_symbol_pattern_defaults_decimal(self):
        assert match_pattern(PRICE_PATTERNS[5], "€ 42") == _price(4200, "EUR")

    def test_chf_pattern_in_isolation(self):
        assert match_pattern(PRICE_PATTERNS[8], "CHF 1,299.50") == _price(129950, "CHF")


class TestNormalizeCurrency:
    @pytest.mark.parametrize(
        "symbol, code",
        [("€", "EUR"), ("$", "USD"), ("£", "GBP"), ("¥", "JPY"), ("₹", "INR"), ("₽", "RUB")],
    )
    def test_symbols(self, symbol, code):
        assert normalize_currency(symbol) == code

    def test_codes_pass_through(self):
        assert normalize_currency("USD") == "USD"
        assert normalize_currency("EUR") == "EUR"
        assert normalize_currency("CHF") == "CHF"

    def test_uppercases(self):
        assert normalize_currency("usd") == "USD"
        assert normalize_currency("eur") == "EUR"

    def test_unknown_passes_through(self):
        assert normalize_currency("XYZ") == "XYZ"


class TestFormatPrice:
    def test_known_currencies(self):
        assert format_price(129999, "EUR") == "€1,299.99"
        assert format_price(1550, "USD") == "$15.50"

    def test_missing_amount(self):
        assert format_price(None, "EUR") == "—"

    def test_missing_currency(self):
        assert format_price(129999, None) == "1299.99"

    def test_unknown_currency(self):
        assert format_price(129999, "INVALID") == "1299.99 INVALID"
