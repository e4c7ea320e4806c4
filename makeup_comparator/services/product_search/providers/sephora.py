"""Sephora Spain provider.

The search endpoint ``buscar?q=`` answers in one of two ways:

* exact matches redirect to the product page (``/p/<name>.html``);
* anything else renders a grid whose rows link to the product pages.

Product pages list their tones inline, each row carrying its own name,
price and a green dot when it is in stock.
"""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import quote_plus, urlparse

from bs4 import BeautifulSoup

from makeup_comparator.models.search_models import Website

from ..scraping import Element
from .base import RetailerProvider


class SephoraSpainProvider(RetailerProvider):
    """Scrape sephora.es."""

    website = Website.SEPHORA_SPAIN
    site_name = "Sephora Spain"
    base_url = "https://www.sephora.es/"
    _search_url = "https://www.sephora.es/buscar?q={query}"

    result_items_selector = (
        "#search-result-items>li>div>.product-info-wrapper>.product-info"
    )

    tones_container_selector = "div#colorguide-colors>div.colorguide-variations-list"
    tone_rows_selector = "div.variation-button-line"
    tone_name_selector = "div.variation-title"
    sale_marker_selector = "span.price-standard"
    price_selector = "span.price-sales"
    availability_selector = "span.dot-green"
    rating_selector = "span.bv-secondary-rating-summary-rating"
    max_rating = 5.0

    def search_url(self, query: str, page: int) -> str:
        return self._search_url.format(query=quote_plus(query))

    def is_product_page(self, url: str, document: BeautifulSoup) -> bool:
        return "/p/" in urlparse(url).path

    def result_full_name(self, item: Element) -> str:
        # {Brand} {Title}, e.g. "Rare Beauty Kind Words - Barra de labios mate".
        brand = self._optional_text(item, "span.product-brand", "Result.brand") or ""
        title = (
            self._optional_attribute(item, "h3", "title", "Result.title") or ""
        )
        return f"{brand} {title}".strip()

    def result_url(self, item: Element) -> Optional[str]:
        return self._optional_attribute(item, "a", "href", "Result.url")

    def product_identity(
        self, document: BeautifulSoup
    ) -> Tuple[Optional[str], Optional[str]]:
        name = self._optional_attribute(document, "h1>meta", "content", "Product.name")
        brand = self._optional_text(document, "span.brand-name", "Product.brand")
        return name, brand
