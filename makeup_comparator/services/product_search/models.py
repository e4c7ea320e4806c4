"""Domain models for product search results."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from makeup_comparator.models.search_models import Website

from .utils import discount


@dataclass(slots=True)
class Tone:
    """Purchasable variant (shade, size) of a product."""

    name: Optional[str] = None
    price_standard: Optional[Decimal] = None
    price_sales: Optional[Decimal] = None
    available: bool = True
    url: Optional[str] = None
    rating: Optional[float] = None

    @property
    def price(self) -> Optional[Decimal]:
        """Price actually paid, whether the tone is on sale or not."""
        if self.price_sales is not None:
            return self.price_sales
        return self.price_standard

    @property
    def on_sale(self) -> bool:
        return self.price_sales is not None and self.price_standard is not None

    def discount(self) -> Optional[Tuple[Decimal, int]]:
        if self.price_standard is None:
            return None
        return discount(self.price_standard, self.price_sales)


@dataclass(slots=True)
class Product:
    """Result matched against the searched name."""

    name: str = ""
    brand: Optional[str] = None
    link: str = ""
    price_standard: Optional[Decimal] = None
    price_sales: Optional[Decimal] = None
    rating: Optional[float] = None
    similarity: float = 0.0
    available: bool = True
    tones: Optional[List[Tone]] = None

    @property
    def full_name(self) -> str:
        """Brand and name as compared against the query."""
        return f"{self.brand or ''} {self.name}".strip()

    @property
    def price(self) -> Optional[Decimal]:
        if self.price_sales is not None:
            return self.price_sales
        return self.price_standard

    @property
    def on_sale(self) -> bool:
        return self.price_sales is not None and self.price_standard is not None

    def discount(self) -> Optional[Tuple[Decimal, int]]:
        if self.price_standard is None:
            return None
        return discount(self.price_standard, self.price_sales)

    def add_tone(self, tone: Tone) -> None:
        if self.tones is None:
            self.tones = []
        self.tones.append(tone)

    def price_range(self) -> Optional[Tuple[Decimal, Decimal]]:
        """Return the lowest and highest tone prices, ignoring unpriced tones."""
        prices = [tone.price for tone in self.tones or [] if tone.price is not None]
        if not prices:
            return None
        return min(prices), max(prices)

    def effective_price(self) -> Optional[Decimal]:
        """Own price, or the cheapest tone when the product has none."""
        if self.price is not None:
            return self.price
        price_range = self.price_range()
        return price_range[0] if price_range else None


@dataclass(slots=True)
class RetailerResponse:
    """Aggregated result for a specific retailer."""

    website: Website
    site: str
    products: List[Product] = field(default_factory=list)
    error: Optional[str] = None


class SearchError(RuntimeError):
    """Typed outcome of a search that produced no usable results."""

    default_message = "search failed."

    def __init__(self, site: str, message: Optional[str] = None) -> None:
        self.site = site
        self.message = message or self.default_message
        super().__init__(self.message)


class SearchTimeout(SearchError):
    default_message = "timeout when doing the petition."


class NotEnoughSimilarity(SearchError):
    default_message = "not found any result above the minimum similarity rate."


class NotFound(SearchError):
    default_message = "not found any result."


class RetailerRequestError(RuntimeError):
    """Raised when a retailer page cannot be downloaded."""

    def __init__(self, site: str, message: str) -> None:
        super().__init__(message)
        self.site = site
        self.message = message
