"""Command line entry point: find and compare a product across retailers."""

from __future__ import annotations

import argparse
from typing import List, Optional, Sequence

from colorama import just_fix_windows_console
from pydantic import ValidationError

from makeup_comparator.configs import settings
from makeup_comparator.logger_config import get_logger
from makeup_comparator.models.search_models import (
    SearchConfiguration,
    SearchParameters,
    SortCriterion,
    Website,
)
from makeup_comparator.services.product_search.service import (
    ProductSearchService,
    sort_products,
)
from makeup_comparator.terminal_visualizer import print_results

logger = get_logger("makeup_comparator")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="makeup-comparator",
        description="A simple command line finder and comparator for makeup websites.",
    )
    parser.add_argument(
        "-p", "--product", required=True, help="Name of the product to search."
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=settings.DEFAULT_MAX_RESULTS,
        help="Maximum number of results per website.",
    )
    parser.add_argument(
        "--min-similarity",
        type=float,
        default=settings.DEFAULT_MIN_SIMILARITY,
        help="Minimum similarity (0-1) between the product and the results.",
    )
    parser.add_argument(
        "--websites",
        action="append",
        type=Website,
        choices=list(Website),
        metavar="{" + ",".join(website.value for website in Website) + "}",
        help="Website to search in, can be repeated (default: all).",
    )
    parser.add_argument(
        "--sort-by",
        type=SortCriterion,
        choices=list(SortCriterion),
        metavar="{" + ",".join(criterion.value for criterion in SortCriterion) + "}",
        default=SortCriterion.SIMILARITY,
        help="Ordering of the results inside each website.",
    )
    return parser


def parse_parameters(argv: Optional[Sequence[str]] = None) -> SearchParameters:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        parameters = SearchParameters(
            product=args.product,
            websites=args.websites or [Website.ALL],
            sort_by=args.sort_by,
            configuration=SearchConfiguration(
                min_similarity=args.min_similarity, max_results=args.max_results
            ),
        )
    except ValidationError as exc:
        parser.error(str(exc))
    return parameters


def main(argv: Optional[List[str]] = None) -> int:
    just_fix_windows_console()
    parameters = parse_parameters(argv)
    logger.info(
        "Looking for '%s' (min similarity %.2f, max results %d).",
        parameters.product,
        parameters.configuration.min_similarity,
        parameters.configuration.max_results,
    )

    service = ProductSearchService()
    responses = service.search(
        parameters.product, parameters.websites, parameters.configuration
    )
    for response in responses:
        sort_products(response.products, parameters.sort_by)

    print_results(responses)
    return 0
