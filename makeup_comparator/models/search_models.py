"""Pydantic models describing a search request."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from makeup_comparator.configs import settings


class Website(str, Enum):
    """Retailers the comparator knows how to scrape."""

    ALL = "all"
    SEPHORA_SPAIN = "sephora-spain"
    MAQUILLALIA = "maquillalia"


class SortCriterion(str, Enum):
    """Ordering applied to each retailer's results."""

    NAME = "name"
    PRICE = "price"
    SIMILARITY = "similarity"
    BRAND = "brand"
    RATING = "rating"


class SearchConfiguration(BaseModel):
    """Thresholds passed explicitly to every retailer search.

    Out of range values are clamped instead of rejected: a similarity above 1
    becomes 1 and a result count above the configured ceiling becomes the
    ceiling.
    """

    model_config = ConfigDict(frozen=True)

    min_similarity: float = Field(
        default=settings.DEFAULT_MIN_SIMILARITY,
        description="Minimum similarity (0-1) between the query and a result.",
    )
    max_results: int = Field(
        default=settings.DEFAULT_MAX_RESULTS,
        description="Maximum number of products retrieved per retailer.",
    )

    @field_validator("min_similarity")
    @classmethod
    def _clamp_similarity(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)

    @field_validator("max_results")
    @classmethod
    def _clamp_max_results(cls, value: int) -> int:
        return min(max(value, 1), settings.MAX_RESULTS_CEILING)


class SearchParameters(BaseModel):
    """Arguments received from the command line."""

    product: str = Field(..., min_length=1, description="Product name to search.")
    websites: List[Website] = Field(default_factory=lambda: [Website.ALL])
    sort_by: SortCriterion = SortCriterion.SIMILARITY
    configuration: SearchConfiguration = Field(default_factory=SearchConfiguration)

    @field_validator("product")
    @classmethod
    def _strip_product(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("product name must not be blank")
        return stripped
