"""Utilities shared by retailer providers."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Tuple

from rapidfuzz.distance import JaroWinkler

from makeup_comparator.configs import settings

DEFAULT_HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,*/*;q=0.8"
    ),
    "Accept-Language": settings.ACCEPT_LANGUAGE,
}

# Ratings are always shown on a 0-5 scale.
RATING_SCALE = 5.0

_MISSING_VALUES = {"", "n/a", "na", "-"}


def compare_similarity(name1: str, name2: str) -> float:
    """Case-insensitive Jaro-Winkler similarity between 0 and 1."""
    return float(JaroWinkler.normalized_similarity(name1.lower(), name2.lower()))


def normalize_whitespace(value: str) -> str:
    """Collapse repeated spaces and newlines."""
    return re.sub(r"\s+", " ", value).strip()


def is_missing(value: Optional[str]) -> bool:
    """Return True for the placeholders retailers print instead of a value."""
    return value is None or normalize_whitespace(value).lower() in _MISSING_VALUES


def parse_price_string(price_text: str) -> Decimal:
    """Convert a localized price such as ``"38,95 €"`` to Decimal.

    Comma is the decimal separator; when both comma and dot appear the dot is
    taken as a thousands separator. Raises ValueError if no number is found.
    """
    cleaned = re.sub(r"[^\d,\.]", "", price_text)
    if not cleaned:
        raise ValueError(f"no price found in {price_text!r}")

    comma_count = cleaned.count(",")
    dot_count = cleaned.count(".")

    if comma_count:
        normalized = cleaned.replace(".", "").replace(",", ".")
    elif dot_count > 1:
        normalized = cleaned.replace(".", "")
    elif dot_count:
        # A single dot followed by exactly three digits groups thousands.
        decimals_len = len(cleaned) - cleaned.rfind(".") - 1
        normalized = cleaned.replace(".", "") if decimals_len == 3 else cleaned
    else:
        normalized = cleaned

    try:
        return Decimal(normalized)
    except InvalidOperation as exc:
        raise ValueError(f"invalid price {price_text!r}") from exc


def normalized_rating(rating: float, max_rating: float) -> float:
    """Scale ``rating`` from ``[0, max_rating]`` onto ``[0, 5]``."""
    return rating * RATING_SCALE / max_rating


def discount(
    price_standard: Decimal, price_sales: Optional[Decimal]
) -> Optional[Tuple[Decimal, int]]:
    """Return ``(discount_value, percentage)`` when there is a sale price.

    >>> discount(Decimal("30"), Decimal("15"))
    (Decimal('15'), 50)
    """
    if price_sales is None or not price_standard:
        return None

    discount_value = price_standard - price_sales
    percentage = (100 - price_sales / price_standard * 100).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return discount_value, int(percentage)
