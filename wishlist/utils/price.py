"""
Price text parsing and currency helpers.

Prices are turned into integer minor units (cents) plus an ISO-4217-like
currency code. Parsing walks an ordered table of price formats; the first
format that yields a positive amount anywhere in the text wins.
"""
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from wishlist.models.product import ParsedPrice


# Common currency symbols and their ISO codes
CURRENCY_MAP = {
    "€": "EUR",
    "$": "USD",
    "£": "GBP",
    "¥": "JPY",
    "₹": "INR",
    "₽": "RUB",
    "CHF": "CHF",
    "CAD": "CAD",
    "AUD": "AUD",
    "SEK": "SEK",
    "NOK": "NOK",
    "DKK": "DKK",
}

# Display symbols used by format_price
CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "RUB": "₽",
    "CHF": "CHF ",
    "CAD": "CA$",
    "AUD": "A$",
    "SEK": "SEK ",
    "NOK": "NOK ",
    "DKK": "DKK ",
}

# (whole part, decimal part, currency) as read from a regex match
PriceParts = Tuple[str, str, str]


@dataclass(frozen=True)
class PricePattern:
    """One entry of the price format table."""
    name: str
    regex: re.Pattern
    parts: Callable[[re.Match], PriceParts]
    thousands: str = ","  # characters stripped from the whole part


PRICE_PATTERNS = (
    # 1 299,99 € or 1.299,99€
    PricePattern(
        "french",
        re.compile(r"(?:^|\s)([0-9\s.]+),([0-9]{2})\s*€"),
        lambda m: (m.group(1), m.group(2), "EUR"),
        thousands=" .",
    ),
    # $1,299.99
    PricePattern(
        "us",
        re.compile(r"\$\s*([0-9,]+)\.([0-9]{2})"),
        lambda m: (m.group(1), m.group(2), "USD"),
    ),
    # £1,299.99
    PricePattern(
        "uk",
        re.compile(r"£\s*([0-9,]+)\.([0-9]{2})"),
        lambda m: (m.group(1), m.group(2), "GBP"),
    ),
    # 1299.99 USD
    PricePattern(
        "amount_code",
        re.compile(r"([0-9,]+)\.([0-9]{2})\s*([A-Z]{3})"),
        lambda m: (m.group(1), m.group(2), m.group(3)),
    ),
    # USD 1299.99
    PricePattern(
        "code_amount",
        re.compile(r"([A-Z]{3})\s*([0-9,]+)\.([0-9]{2})"),
        lambda m: (m.group(2), m.group(3), m.group(1)),
    ),
    # $1299, €1299, ¥1299.50
    PricePattern(
        "symbol_amount",
        re.compile(r"([€$£¥₹₽])\s*([0-9,]+)(?:\.([0-9]{2}))?"),
        lambda m: (m.group(2), m.group(3) or "00", normalize_currency(m.group(1))),
    ),
    # 1299€
    PricePattern(
        "amount_euro",
        re.compile(r"([0-9,]+)\s*€"),
        lambda m: (m.group(1), "00", "EUR"),
    ),
    # 1299$
    PricePattern(
        "amount_dollar",
        re.compile(r"([0-9,]+)\s*\$"),
        lambda m: (m.group(1), "00", "USD"),
    ),
    # CHF 1299.99
    PricePattern(
        "chf",
        re.compile(r"CHF\s*([0-9,]+)\.([0-9]{2})"),
        lambda m: (m.group(1), m.group(2), "CHF"),
    ),
)


def normalize_currency(currency: str) -> str:
    """Map a currency symbol or code to its ISO code when known, else upper-case it."""
    return CURRENCY_MAP.get(currency, currency.upper())


def _to_minor_units(whole: str, decimal: str, thousands: str) -> Optional[int]:
    """Convert whole/decimal strings to minor units, or None when unparseable."""
    digits = whole
    for separator in thousands:
        digits = digits.replace(separator, "")
    try:
        return int(digits) * 100 + int(decimal)
    except ValueError:
        return None


def match_pattern(pattern: PricePattern, text: str) -> Optional[ParsedPrice]:
    """Return the first positive price one format finds in already-cleaned text."""
    for match in pattern.regex.finditer(text):
        whole, decimal, currency = pattern.parts(match)
        amount = _to_minor_units(whole, decimal, pattern.thousands)
        if amount and amount > 0 and currency:
            return ParsedPrice(amount_minor_units=amount, currency_code=currency)
    return None


def parse_price(text: Optional[str]) -> Optional[ParsedPrice]:
    """
    Extract price information from a text string.

    Args:
        text: Text to parse; may contain much more than a price

    Returns:
        ParsedPrice in minor units, or None if no positive price is found
    """
    if not text:
        return None

    clean_text = re.sub(r"\s+", " ", text).strip()

    for pattern in PRICE_PATTERNS:
        parsed = match_pattern(pattern, clean_text)
        if parsed:
            return parsed

    return None


def format_price(price_minor_units: Optional[int], currency: Optional[str]) -> str:
    """
    Format a minor-unit amount for display.

    Unknown currencies are rendered as ``"1299.99 XYZ"``; a missing amount
    is rendered as an em dash.
    """
    if price_minor_units is None:
        return "—"

    amount = price_minor_units / 100

    if not currency:
        return f"{amount:.2f}"

    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{amount:.2f} {currency}"

    return f"{symbol}{amount:,.2f}"
