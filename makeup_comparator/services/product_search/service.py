"""High-level service that orchestrates product lookups."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from makeup_comparator.models.search_models import (
    SearchConfiguration,
    SortCriterion,
    Website,
)

from .models import Product, RetailerResponse
from .providers.base import RetailerProvider
from .providers.maquillalia import MaquillaliaProvider
from .providers.sephora import SephoraSpainProvider

logger = logging.getLogger("makeup_comparator.product_search.service")


def _price_key(product: Product) -> tuple:
    # Unknown prices go last in the descending order.
    price = product.effective_price()
    if price is None:
        return (1, Decimal(0))
    return (0, -price)


_SORT_KEYS: Dict[SortCriterion, Callable[[Product], object]] = {
    SortCriterion.NAME: lambda product: product.name,
    SortCriterion.BRAND: lambda product: product.brand or "",
    SortCriterion.SIMILARITY: lambda product: -product.similarity,
    SortCriterion.PRICE: _price_key,
    SortCriterion.RATING: lambda product: -(product.rating or 0.0),
}


def sort_products(products: List[Product], criterion: SortCriterion) -> None:
    """Sort ``products`` in place by ``criterion``."""
    products.sort(key=_SORT_KEYS[criterion])


class ProductSearchService:
    """Coordinate product lookups across multiple retailers."""

    def __init__(
        self, providers: Optional[Mapping[Website, RetailerProvider]] = None
    ) -> None:
        self.providers: Mapping[Website, RetailerProvider] = providers or {
            Website.SEPHORA_SPAIN: SephoraSpainProvider(),
            Website.MAQUILLALIA: MaquillaliaProvider(),
        }

    def resolve_websites(self, websites: Iterable[Website]) -> List[Website]:
        """Expand ``ALL`` and drop duplicates and unknown retailers."""
        requested = list(websites)
        if not requested or Website.ALL in requested:
            return list(self.providers)

        selected: List[Website] = []
        for website in requested:
            if website in selected:
                continue
            if website not in self.providers:
                logger.warning("No provider registered for %s, skipping.", website.value)
                continue
            selected.append(website)
        return selected

    def search(
        self,
        query: str,
        websites: Sequence[Website],
        config: SearchConfiguration,
    ) -> List[RetailerResponse]:
        """Execute the search on every selected retailer, one after another."""
        responses: List[RetailerResponse] = []
        for website in self.resolve_websites(websites):
            provider = self.providers[website]
            logger.info("Searching '%s' in %s.", query, provider.site_name)
            response = provider.search(query, config)
            logger.info(
                "%s returned %d products.", provider.site_name, len(response.products)
            )
            responses.append(response)
        return responses

    def get_results(
        self,
        query: str,
        websites: Sequence[Website],
        config: SearchConfiguration,
        sort_by: SortCriterion,
    ) -> Dict[Website, List[Product]]:
        """Return the sorted products found in each retailer.

        A retailer that fails contributes an empty list.
        """
        results: Dict[Website, List[Product]] = {}
        for response in self.search(query, websites, config):
            sort_products(response.products, sort_by)
            results[response.website] = response.products
        return results
