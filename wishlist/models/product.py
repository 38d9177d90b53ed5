"""
Product metadata models for the Wishlist Resolver.
These models are the output contract of the extraction engine and the
records returned by the HTTP API.
"""
from typing import Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


class MetadataSource(str, Enum):
    """Extraction strategy that supplied a metadata field."""
    STRUCTURED_DATA = "structured_data"
    SOCIAL_META = "social_meta"
    HEURISTIC = "heuristic"
    SITE_SELECTORS = "site_selectors"


class ParsedPrice(BaseModel):
    """A price found in free text, expressed in minor currency units."""
    model_config = ConfigDict(frozen=True)

    amount_minor_units: int = Field(gt=0)
    currency_code: str


class ProductMetadata(BaseModel):
    """
    Best-effort product metadata resolved from a page.

    An empty title means resolution found nothing usable; callers
    substitute a placeholder. Price and currency are set together or
    not at all.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    image_url: Optional[str] = None
    price_minor_units: Optional[int] = Field(default=None, gt=0)
    currency_code: Optional[str] = None

    @model_validator(mode="after")
    def _price_and_currency_together(self) -> "ProductMetadata":
        if (self.price_minor_units is None) != (self.currency_code is None):
            raise ValueError("price_minor_units and currency_code must be set together")
        return self

    @classmethod
    def with_price(
        cls,
        title: str,
        image_url: Optional[str],
        price: Optional[ParsedPrice],
    ) -> "ProductMetadata":
        """Build metadata, copying amount and currency from a parsed price."""
        return cls(
            title=title,
            image_url=image_url,
            price_minor_units=price.amount_minor_units if price else None,
            currency_code=price.currency_code if price else None,
        )

    @property
    def has_price(self) -> bool:
        return self.price_minor_units is not None

    def get_present_fields(self) -> list:
        """Return list of populated fields."""
        present = []
        if self.title:
            present.append("title")
        if self.image_url:
            present.append("image_url")
        if self.has_price:
            present.extend(["price_minor_units", "currency_code"])
        return present

    def get_missing_fields(self) -> list:
        """Return list of fields left empty."""
        present = set(self.get_present_fields())
        return [
            name for name in ("title", "image_url", "price_minor_units", "currency_code")
            if name not in present
        ]


class HeuristicMetadata(BaseModel):
    """Title and image guessed from page structure."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    image_url: Optional[str] = None


class ResolvedItem(BaseModel):
    """Wishlist item record returned to API callers."""
    url: str
    domain: str
    domain_name: str
    favicon_url: str
    title: str
    image_url: Optional[str] = None
    price_minor_units: Optional[int] = None
    currency_code: Optional[str] = None
    formatted_price: str = "—"


class ImageSearchResult(BaseModel):
    """Image found by the image-search fallback."""
    image_url: str
    source: str  # google, unsplash, default, error_fallback
    query: str
