"""Generic search pipeline shared by every retailer provider.

A provider describes its retailer with class-level selectors and a few hook
methods; the pipeline itself lives here:

1. Request the search page built by :meth:`RetailerProvider.search_url`.
2. If the retailer redirected straight to a product page, parse that page as
   the only result.
3. Otherwise collect candidate URLs from the listing, following pagination
   until ``max_results`` is reached or the last page is detected.
4. Download and parse every candidate concurrently, dropping the ones that
   fail.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal
from typing import ClassVar, List, Optional, Set, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from makeup_comparator.configs import settings
from makeup_comparator.models.search_models import SearchConfiguration, Website

from ..models import (
    NotEnoughSimilarity,
    NotFound,
    Product,
    RetailerRequestError,
    RetailerResponse,
    SearchError,
    SearchTimeout,
    Tone,
)
from ..scraping import (
    Element,
    HtmlSearchError,
    attribute_value,
    has_selector,
    inner_text,
    parse_document,
)
from ..utils import (
    DEFAULT_HEADERS,
    compare_similarity,
    is_missing,
    normalized_rating,
    parse_price_string,
)

logger = logging.getLogger("makeup_comparator.product_search.provider")

Prices = Tuple[Optional[Decimal], Optional[Decimal]]


class RetailerProvider(ABC):
    """Common behaviour for scraping providers."""

    website: ClassVar[Website]
    site_name: ClassVar[str]
    base_url: ClassVar[str]

    # Listing page.
    result_items_selector: ClassVar[str]
    no_results_selector: ClassVar[Optional[str]] = None
    # Set when the listing shows one row per tone of the same product.
    deduplicate_results: ClassVar[bool] = False

    # Product and tone pages.
    tones_container_selector: ClassVar[Optional[str]] = None
    tone_rows_selector: ClassVar[Optional[str]] = None
    tone_name_selector: ClassVar[Optional[str]] = None
    # Standard price element only rendered in the on-sale layout.
    sale_marker_selector: ClassVar[str]
    # Current price: the standard price, or the sale price when on sale.
    price_selector: ClassVar[str]
    availability_selector: ClassVar[Optional[str]] = None
    rating_selector: ClassVar[Optional[str]] = None
    rating_attribute: ClassVar[Optional[str]] = None
    max_rating: ClassVar[float] = 5.0

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers or settings.MAX_WORKERS

    def search(self, query: str, config: SearchConfiguration) -> RetailerResponse:
        """Public search entry point with error handling."""
        try:
            products = self.look_for_products(query, config)
            return RetailerResponse(
                website=self.website, site=self.site_name, products=products
            )
        except SearchError as exc:
            logger.warning("Search in %s without results: %s", exc.site, exc.message)
            return RetailerResponse(
                website=self.website, site=self.site_name, error=exc.message
            )
        except RetailerRequestError as exc:
            logger.warning("Request to %s failed: %s", exc.site, exc.message)
            return RetailerResponse(
                website=self.website, site=self.site_name, error=exc.message
            )
        except requests.RequestException as exc:
            logger.warning("Could not reach %s: %s", self.site_name, exc)
            return RetailerResponse(
                website=self.website,
                site=self.site_name,
                error=f"could not reach {self.site_name}.",
            )
        except Exception:  # pragma: no cover
            logger.exception("Unexpected error while searching in %s", self.site_name)
            return RetailerResponse(
                website=self.website,
                site=self.site_name,
                error=f"unexpected error while searching in {self.site_name}.",
            )

    def look_for_products(
        self, query: str, config: SearchConfiguration
    ) -> List[Product]:
        """Find the products matching ``query``.

        Raises:
            NotFound: The retailer returned no results at all.
            NotEnoughSimilarity: No result reached ``config.min_similarity``.
            SearchTimeout: The search page did not answer in time.
            RetailerRequestError: The search page answered with an error.
        """
        response = self._fetch_listing(self.search_url(query, 1))
        document = parse_document(response.text)

        if self.is_product_page(response.url, document):
            logger.info(
                "%s redirected '%s' to a single product page.", self.site_name, query
            )
            return [self._build_product(document, response.url, query)]

        urls = self._collect_candidate_urls(document, query, config)
        logger.info(
            "%s: %d candidate products for '%s'.", self.site_name, len(urls), query
        )
        return self._fetch_products(urls, query)

    def search_results_urls(
        self, document: BeautifulSoup, query: str, config: SearchConfiguration
    ) -> List[str]:
        """Return the URLs of the listing results similar enough to ``query``."""
        if self._is_no_results_page(document):
            raise NotFound(self.site_name)

        urls, any_results = self._extract_result_urls(
            document, query, config, set(), config.max_results
        )
        return self._classify(urls, any_results)

    def create_product(self, document: BeautifulSoup) -> Product:
        """Build a Product from its page; missing fields are left empty."""
        product = Product()
        name, brand = self.product_identity(document)
        product.name = name or ""
        product.brand = brand

        tones = self.extract_tones(document)
        product.tones = tones or None
        if product.tones is None:
            product.price_standard, product.price_sales = self._extract_prices(
                document, "Product"
            )
        else:
            product.available = any(tone.available for tone in product.tones)

        product.rating = self._extract_rating(document, "Product")
        return product

    def create_tone(self, element: Element) -> Tone:
        """Build a Tone from a tone row or a dedicated tone page."""
        tone = Tone()
        tone.name = self.tone_name(element)
        tone.price_standard, tone.price_sales = self._extract_prices(element, "Tone")
        if self.availability_selector:
            tone.available = has_selector(element, self.availability_selector)
        tone.rating = self._extract_rating(element, "Tone")
        return tone

    @abstractmethod
    def search_url(self, query: str, page: int) -> str:
        """Return the search URL for ``query`` and the 1-based ``page``."""
        raise NotImplementedError

    @abstractmethod
    def result_full_name(self, item: Element) -> str:
        """Return the name of a listing result compared against the query."""
        raise NotImplementedError

    @abstractmethod
    def result_url(self, item: Element) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def product_identity(self, document: BeautifulSoup) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(name, brand)`` of a product page."""
        raise NotImplementedError

    def is_product_page(self, url: str, document: BeautifulSoup) -> bool:
        """Whether the search answered with a product page instead of a listing."""
        return False

    def has_next_page(self, document: BeautifulSoup, page: int) -> bool:
        """Whether results continue after ``page``."""
        return False

    def tone_name(self, element: Element) -> Optional[str]:
        if not self.tone_name_selector:
            return None
        return self._optional_text(element, self.tone_name_selector, "Tone.name")

    def extract_tones(self, document: BeautifulSoup) -> List[Tone]:
        """Return the tones listed in a product page."""
        if not self.tones_container_selector or not self.tone_rows_selector:
            return []
        container = document.select_one(self.tones_container_selector)
        if container is None:
            return []
        return [self.create_tone(row) for row in container.select(self.tone_rows_selector)]

    def _fetch(self, url: str) -> requests.Response:
        response = requests.get(
            url, headers=DEFAULT_HEADERS, timeout=settings.REQUEST_TIMEOUT
        )
        if response.status_code != 200:
            raise RetailerRequestError(
                self.site_name,
                f"HTTP {response.status_code} when requesting {url}.",
            )
        return response

    def _fetch_listing(self, url: str) -> requests.Response:
        try:
            return self._fetch(url)
        except requests.Timeout as exc:
            raise SearchTimeout(self.site_name) from exc

    def _fetch_document(self, url: str) -> BeautifulSoup:
        return parse_document(self._fetch(url).text)

    def _is_no_results_page(self, document: BeautifulSoup) -> bool:
        return bool(self.no_results_selector) and has_selector(
            document, self.no_results_selector
        )

    def _collect_candidate_urls(
        self, document: BeautifulSoup, query: str, config: SearchConfiguration
    ) -> List[str]:
        """Walk the listing pages in order until enough URLs are found."""
        urls: List[str] = []
        accepted_names: Set[str] = set()
        any_results = False
        page = 1

        while True:
            if self._is_no_results_page(document):
                if page == 1:
                    raise NotFound(self.site_name)
                break

            page_urls, page_results = self._extract_result_urls(
                document, query, config, accepted_names, config.max_results - len(urls)
            )
            any_results = any_results or page_results
            urls.extend(page_urls)

            if len(urls) >= config.max_results or not self.has_next_page(document, page):
                break
            page += 1
            logger.debug("%s: requesting results page %d.", self.site_name, page)
            document = parse_document(self._fetch_listing(self.search_url(query, page)).text)

        return self._classify(urls[: config.max_results], any_results)

    def _extract_result_urls(
        self,
        document: BeautifulSoup,
        query: str,
        config: SearchConfiguration,
        accepted_names: Set[str],
        limit: int,
    ) -> Tuple[List[str], bool]:
        """Return the accepted URLs of one page and whether it had any result."""
        urls: List[str] = []
        any_results = False

        for item in document.select(self.result_items_selector):
            any_results = True
            full_name = self.result_full_name(item)
            url = self.result_url(item)
            similarity = compare_similarity(query, full_name)
            if similarity < config.min_similarity or not url:
                continue

            if self.deduplicate_results:
                # Rows of the same product differ only by tone.
                key = full_name.lower()
                if key in accepted_names:
                    continue
                accepted_names.add(key)

            urls.append(url)
            if len(urls) >= limit:
                break

        return urls, any_results

    def _classify(self, urls: List[str], any_results: bool) -> List[str]:
        if urls:
            return urls
        if any_results:
            raise NotEnoughSimilarity(self.site_name)
        raise NotFound(self.site_name)

    def _fetch_products(self, urls: List[str], query: str) -> List[Product]:
        """Download and parse every candidate concurrently."""
        if not urls:
            return []

        products: List[Product] = []
        workers = min(self.max_workers, len(urls))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix=self.website.value
        ) as pool:
            futures = [pool.submit(self._fetch_product, url, query) for url in urls]
            for future in as_completed(futures):
                product = future.result()
                if product is not None:
                    products.append(product)

        if len(products) < len(urls):
            logger.warning(
                "%s: %d of %d candidate products could not be retrieved.",
                self.site_name,
                len(urls) - len(products),
                len(urls),
            )
        return products

    def _fetch_product(self, url: str, query: str) -> Optional[Product]:
        link = urljoin(self.base_url, url)
        try:
            document = self._fetch_document(link)
            return self._build_product(document, link, query)
        except (requests.RequestException, RetailerRequestError) as exc:
            logger.warning("Dropping %s: %s", link, exc)
            return None
        except Exception:  # pragma: no cover
            logger.exception("Unexpected error while parsing %s", link)
            return None

    def _build_product(
        self, document: BeautifulSoup, link: str, query: str
    ) -> Product:
        product = self.create_product(document)
        product.link = link
        product.similarity = compare_similarity(product.full_name, query)
        return product

    def _optional_text(
        self, element: Element, selector: str, field: str
    ) -> Optional[str]:
        try:
            return inner_text(element, selector)
        except HtmlSearchError as exc:
            logger.debug("%s not found, assigning None: %s", field, exc)
            return None

    def _optional_attribute(
        self, element: Element, selector: str, attribute: str, field: str
    ) -> Optional[str]:
        try:
            return attribute_value(element, selector, attribute)
        except HtmlSearchError as exc:
            logger.debug("%s not found, assigning None: %s", field, exc)
            return None

    def _price(self, element: Element, selector: str, field: str) -> Optional[Decimal]:
        text = self._optional_text(element, selector, field)
        if is_missing(text):
            return None
        try:
            return parse_price_string(text)
        except ValueError as exc:
            logger.debug("%s unreadable, assigning None: %s", field, exc)
            return None

    def _extract_prices(self, element: Element, owner: str) -> Prices:
        """Read ``(price_standard, price_sales)`` from either price layout."""
        if not has_selector(element, self.sale_marker_selector):
            return self._price(element, self.price_selector, f"{owner}.price_standard"), None

        price_standard = self._price(
            element, self.sale_marker_selector, f"{owner}.price_standard"
        )
        price_sales = self._price(element, self.price_selector, f"{owner}.price_sales")
        if price_sales is None:
            return price_standard, None
        if price_standard is None or price_sales >= price_standard:
            # Not really discounted: the current price is the standard one.
            return price_sales, None
        return price_standard, price_sales

    def _extract_rating(self, element: Element, owner: str) -> Optional[float]:
        if not self.rating_selector:
            return None
        if self.rating_attribute:
            text = self._optional_attribute(
                element, self.rating_selector, self.rating_attribute, f"{owner}.rating"
            )
        else:
            text = self._optional_text(element, self.rating_selector, f"{owner}.rating")

        if is_missing(text):
            return None
        try:
            value = float(text.replace(",", "."))
        except ValueError:
            logger.debug("%s.rating unreadable, assigning None: %r", owner, text)
            return None
        return normalized_rating(value, self.max_rating)
