"""Render search results in the terminal.

Example output::

    Sephora Spain
    - 95.42%. Kind Words - Rare Beauty - 5€-50.99€ - 4.5⭐: https://www.sephora.es/p/...
        - ✔️   Tone 1 - 50.99€
        - ❌   Tone 2 - 10€ 5€(50%)
"""

from __future__ import annotations

import sys
from decimal import Decimal
from typing import Iterable, Optional, TextIO

from colorama import Fore, Style

from makeup_comparator.services.product_search.models import (
    Product,
    RetailerResponse,
    Tone,
)

# colorama has no strikethrough style.
STRIKETHROUGH = "\033[9m"
AVAILABLE = "✔️   "
UNAVAILABLE = "❌   "
UNKNOWN = "N/A"


def _price(
    price_standard: Optional[Decimal],
    price_sales: Optional[Decimal],
    discount: Optional[tuple],
) -> str:
    if price_sales is not None and price_standard is not None and discount:
        struck = f"{STRIKETHROUGH}{price_standard}{Style.RESET_ALL}"
        return f"{struck}€ {price_sales}€({discount[1]}%)"
    price = price_sales if price_sales is not None else price_standard
    return f"{price}€" if price is not None else UNKNOWN


def _rating(rating: Optional[float]) -> str:
    if rating is None:
        return ""
    return f" - {round(rating, 2):g}⭐"


def format_similarity(similarity: float) -> str:
    """Format a 0-1 similarity as a percentage, e.g. 0.621242 -> 62.12%."""
    return f"{similarity * 100:.2f}%"


def format_tone(tone: Tone) -> str:
    out = "    - "
    out += AVAILABLE if tone.available else UNAVAILABLE
    out += f"{tone.name or UNKNOWN} - "
    out += _price(tone.price_standard, tone.price_sales, tone.discount())
    out += _rating(tone.rating)
    return out


def format_product(product: Product) -> str:
    out = f"- {format_similarity(product.similarity)}. {product.name} - "
    if product.brand:
        out += f"{product.brand} - "

    price_range = product.price_range()
    if product.tones and price_range:
        lowest, highest = price_range
        out += f"{lowest}€-{highest}€"
    else:
        out += _price(product.price_standard, product.price_sales, product.discount())

    out += _rating(product.rating)
    out += f": {product.link}"
    return out


def print_results(
    responses: Iterable[RetailerResponse],
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> None:
    """Print every retailer's products and report retailer errors on ``err``."""
    out = out or sys.stdout
    err = err or sys.stderr
    for response in responses:
        print(f"{Style.BRIGHT}{Fore.CYAN}{response.site}{Style.RESET_ALL}", file=out)
        if response.error:
            print(
                f"{Fore.RED}{response.site}: {response.error}{Style.RESET_ALL}",
                file=err,
            )
        elif not response.products:
            print("- No products found.", file=out)

        for product in response.products:
            print(format_product(product), file=out)
            for tone in product.tones or []:
                print(format_tone(tone), file=out)
        print(file=out)
