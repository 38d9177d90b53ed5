"""
Shared markup helpers for the extractors.
"""
import re
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

Markup = Union[str, BeautifulSoup]


def make_soup(markup: Optional[Markup]) -> BeautifulSoup:
    """Parse HTML once; an already-parsed document is returned as-is."""
    if isinstance(markup, BeautifulSoup):
        return markup
    return BeautifulSoup(markup or "", "lxml")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and trim."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def element_text(element: Optional[Tag]) -> str:
    """Whitespace-normalized text of an element, or empty string."""
    if element is None:
        return ""
    return clean_text(element.get_text(separator=" "))
