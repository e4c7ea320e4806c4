"""Maquillalia price provider.

Search results come in pages of twenty items (``&page=n``); the total count
shown in ``div.NumPro>strong`` tells when the last page is reached. The
listing shows one row per tone, titled ``{Brand} - {Name} - {Tone}``, so rows
are de-duplicated by the title without its tone segment. Every tone also has
its own page, linked from the product page.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import quote_plus, urljoin

import requests
from bs4 import BeautifulSoup

from makeup_comparator.models.search_models import Website

from ..models import RetailerRequestError, Tone
from ..scraping import Element, HtmlSearchError, attribute_value, inner_text
from ..utils import normalize_whitespace
from .base import RetailerProvider

logger = logging.getLogger("makeup_comparator.product_search.maquillalia")

ITEMS_PER_PAGE = 20

# Only a hyphen surrounded by spaces separates title segments, so tone names
# such as "Rose-Gold" survive the split.
_TITLE_DELIMITER = re.compile(r"\s+-\s+")


def split_title(title: str) -> List[str]:
    """Split a ``{Brand} - {Name} - {Tone}`` title into its segments."""
    return [
        segment
        for segment in _TITLE_DELIMITER.split(normalize_whitespace(title))
        if segment
    ]


def get_name_without_tone(title: str) -> str:
    """Return the title without its tone segment.

    >>> get_name_without_tone("Maybelline - Labial SuperStay Vinyl Ink - 35: Pink")
    'Maybelline - Labial SuperStay Vinyl Ink'
    """
    return " - ".join(split_title(title)[:2])


def get_tone_name(title: str) -> Optional[str]:
    """Return the tone segment of the title, None when there is none."""
    return " - ".join(split_title(title)[2:]) or None


class MaquillaliaProvider(RetailerProvider):
    """Scrape maquillalia.com."""

    website = Website.MAQUILLALIA
    site_name = "Maquillalia"
    base_url = "https://www.maquillalia.com/"
    _search_url = "https://www.maquillalia.com/search.php?buscar={query}&page={page}"

    result_items_selector = "div.ListProds>div"
    no_results_selector = "div.msje-wrng>div.msje-icon"
    deduplicate_results = True
    total_results_selector = "div.NumPro>strong"

    tones_container_selector = "ul.familasColores"
    tone_rows_selector = "li"
    sale_marker_selector = "table tr>td>div.Price>del"
    price_selector = "table tr>td>div.Price>strong"
    rating_selector = "div.Rating>span.Stars"
    rating_attribute = "data-rating"
    max_rating = 5.0

    def search_url(self, query: str, page: int) -> str:
        return self._search_url.format(query=quote_plus(query), page=page)

    def has_next_page(self, document: BeautifulSoup, page: int) -> bool:
        try:
            total_text = inner_text(document, self.total_results_selector)
            total_results = int(re.sub(r"\D", "", total_text))
        except (HtmlSearchError, ValueError) as exc:
            logger.debug("Total results unknown, assuming last page: %s", exc)
            return False
        return page * ITEMS_PER_PAGE < total_results

    def result_full_name(self, item: Element) -> str:
        title = self._optional_text(item, "h3.Title>a", "Result.title") or ""
        return get_name_without_tone(title)

    def result_url(self, item: Element) -> Optional[str]:
        return self._optional_attribute(item, "h3.Title>a", "href", "Result.url")

    def product_identity(
        self, document: BeautifulSoup
    ) -> Tuple[Optional[str], Optional[str]]:
        title = self._optional_text(document, "h1.Title", "Product.name")
        if not title:
            return None, None

        segments = split_title(title)
        if len(segments) < 2:
            return segments[0] if segments else None, None
        brand, name = segments[0], segments[1]
        return name, brand

    def tone_name(self, element: Element) -> Optional[str]:
        title = self._optional_text(element, "h1.Title", "Tone.name")
        return get_tone_name(title) if title else None

    def extract_tones(self, document: BeautifulSoup) -> List[Tone]:
        """Fetch the page of every tone linked from the product page."""
        container = document.select_one(self.tones_container_selector)
        if container is None:
            return []

        tones: List[Tone] = []
        # TODO: fetch tone pages through the worker pool as well.
        for row in container.select(self.tone_rows_selector):
            try:
                url = urljoin(self.base_url, attribute_value(row, "a", "href"))
            except HtmlSearchError as exc:
                logger.debug("Tone.url not found, skipping tone: %s", exc)
                continue

            try:
                tone_document = self._fetch_document(url)
            except (requests.RequestException, RetailerRequestError) as exc:
                logger.warning("Skipping tone %s: %s", url, exc)
                continue

            tone = self.create_tone(tone_document)
            tone.url = url
            tones.append(tone)
        return tones
