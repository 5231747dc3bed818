# main.py

"""Entry point for the storefront headless CLI."""

import argparse
import asyncio
import logging
import sys

from storefront.config.logging_config import setup_logging
from storefront.filters.product_sorter import ProductSorter
from storefront.models.filters import PriceRange, ProductFilters

logger = logging.getLogger("storefront.main")


def _csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(v.strip() for v in value.split(",") if v.strip())


def _id_list(value: str) -> tuple[int, ...]:
    try:
        return tuple(int(v) for v in _csv(value))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected comma-separated product ids, got {value!r}"
        ) from None


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Browse the product catalog from the terminal.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the catalog API.",
    )
    sub = parser.add_subparsers(dest="command")

    lst = sub.add_parser("list", help="List products with filters.")
    lst.add_argument("-c", "--category", default=None)
    lst.add_argument(
        "--categories",
        default=None,
        help="Comma-separated categories (any of).",
    )
    lst.add_argument("--min-price", type=float, default=None)
    lst.add_argument("--max-price", type=float, default=None)
    lst.add_argument(
        "-r", "--rating", type=float, default=None,
        help="Minimum average rating.",
    )
    lst.add_argument(
        "--stock",
        default=None,
        help="Comma-separated stock statuses "
        "(in-stock, low-stock, out-of-stock).",
    )
    lst.add_argument(
        "-t", "--tags",
        default=None,
        help="Comma-separated tags (category, price/rating bucket, badge).",
    )
    lst.add_argument("-q", "--search", default=None, dest="search_query")
    lst.add_argument(
        "-s", "--sort",
        choices=ProductSorter.available_strategies(),
        default=None,
        dest="sort_by",
    )
    lst.add_argument("-n", "--limit", type=int, default=None)
    lst.add_argument(
        "-f", "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    sug = sub.add_parser("suggest", help="Search suggestions for a query.")
    sug.add_argument("query")

    sub.add_parser("stats", help="Catalog statistics.")

    rec = sub.add_parser("recent", help="Show recent searches.")
    rec.add_argument("--clear", action="store_true", default=False)

    rel = sub.add_parser("related", help="Products related to one product.")
    rel.add_argument("product_id", type=int)
    rel.add_argument("-n", "--limit", type=int, default=None)

    pick = sub.add_parser(
        "recommend", help="Personalised or per-category picks."
    )
    pick.add_argument(
        "--viewed",
        type=_id_list,
        default=(),
        help="Comma-separated ids of products already viewed.",
    )
    pick.add_argument("-c", "--category", default=None)
    pick.add_argument("-n", "--limit", type=int, default=None)

    return parser


def _filters_from_args(args: argparse.Namespace) -> ProductFilters:
    """Translate list options into a filter query."""
    price_range = None
    if args.min_price is not None or args.max_price is not None:
        price_range = PriceRange(min=args.min_price, max=args.max_price)
    return ProductFilters(
        category=args.category,
        categories=_csv(args.categories),
        price_range=price_range,
        rating=args.rating,
        stock_status=_csv(args.stock),
        sort_by=args.sort_by,
        search_query=args.search_query,
        tags=_csv(args.tags),
    )


def main() -> None:
    """Route to the requested command."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    from storefront.cli import runner

    if args.health:
        exit_code = asyncio.run(runner.run_health_check())
    elif args.command == "list":
        exit_code = asyncio.run(
            runner.cli_list(
                _filters_from_args(args), args.output_format, args.limit
            )
        )
    elif args.command == "suggest":
        exit_code = asyncio.run(runner.cli_suggest(args.query))
    elif args.command == "stats":
        exit_code = asyncio.run(runner.cli_stats())
    elif args.command == "recent":
        exit_code = runner.run_recent(clear=args.clear)
    elif args.command == "related":
        exit_code = asyncio.run(
            runner.cli_related(args.product_id, args.limit)
        )
    elif args.command == "recommend":
        exit_code = asyncio.run(
            runner.cli_recommend(
                args.viewed, args.category, args.limit
            )
        )
    else:
        parser.print_help()
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
