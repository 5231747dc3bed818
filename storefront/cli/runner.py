# storefront/cli/runner.py

"""Headless CLI commands built on the storefront service."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from storefront.catalog.formatting import (
    format_category_name,
    format_price,
    generate_stars,
    get_stock_status_text,
    truncate_text,
)
from storefront.models.filters import ProductFilters
from storefront.models.product import EnhancedProduct
from storefront.services.catalog_client import CatalogError
from storefront.services.storefront_service import StorefrontService
from storefront.storage.recent_searches import JsonFileStore, RecentSearches

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(products: list[EnhancedProduct]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", max_width=50)
    table.add_column("Category", style="cyan")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Stock")
    table.add_column("Badges", style="magenta")

    for p in products:
        price_str = format_price(p.price)
        if p.original_price is not None:
            price_str += f" [dim strike]{format_price(p.original_price)}[/]"
        table.add_row(
            str(p.id),
            truncate_text(p.title, 50),
            format_category_name(p.category),
            price_str,
            f"{generate_stars(p.rating.rate)} {p.rating.rate:.1f}"
            f" ({p.rating.count})",
            get_stock_status_text(p.stock_status, p.stock_count),
            ", ".join(b.label for b in p.badges) or "—",
        )

    Console().print(table)


def _dump_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def cli_list(
    filters: ProductFilters,
    output_format: str,
    limit: int | None = None,
    service: StorefrontService | None = None,
) -> int:
    """List filtered products and return an exit code (0=ok, 1=fail)."""
    svc = service or StorefrontService(store=JsonFileStore())

    params = filters.to_query_params()
    if params:
        detail = ", ".join(f"{k}={v}" for k, v in params.items())
        _err.print(f"[dim]Filters: {detail}[/dim]")

    result = await svc.list_products(filters)

    for error_msg in result.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")
    if result.errors:
        return 1

    if not result.products:
        _err.print("[yellow]No products match these filters.[/yellow]")
        return 1

    products = result.products[:limit] if limit else result.products
    _err.print(
        f"[green]✓ {len(result.products)} products"
        f" of {result.total_before_filter}"
        f" ({result.excluded_count} filtered)[/green]"
    )

    if output_format == "table":
        _print_table(products)
    else:
        _dump_json([p.to_dict() for p in products])
    return 0


async def cli_suggest(
    query: str, service: StorefrontService | None = None,
) -> int:
    """Print search suggestions for *query* as JSON."""
    svc = service or StorefrontService()
    try:
        suggestions = await svc.suggest(query)
    except CatalogError as exc:
        logger.error("Suggest failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    _dump_json(
        [
            {
                "id": s.id,
                "text": s.text,
                "type": s.type,
                "count": s.count,
            }
            for s in suggestions
        ]
    )
    return 0


async def cli_stats(service: StorefrontService | None = None) -> int:
    """Print catalog statistics as JSON."""
    svc = service or StorefrontService()
    try:
        stats = await svc.stats()
    except CatalogError as exc:
        logger.error("Stats failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    _dump_json(
        {
            "total_products": stats.total_products,
            "average_price": stats.average_price,
            "average_rating": stats.average_rating,
            "category_distribution": stats.category_distribution,
            "price_ranges": stats.price_ranges,
            "stock_distribution": stats.stock_distribution,
        }
    )
    return 0


async def cli_related(
    product_id: int,
    limit: int | None = None,
    service: StorefrontService | None = None,
) -> int:
    """Print the recommendation rails for one product as JSON."""
    svc = service or StorefrontService()
    try:
        related = await svc.related_products(product_id, limit)
    except CatalogError as exc:
        logger.error("Related lookup failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    if related is None:
        _err.print(f"[yellow]No product with id {product_id}.[/yellow]")
        return 1

    _dump_json(
        {
            "product": related.product.to_dict(),
            "similar": [p.to_dict() for p in related.similar],
            "bought_together": [p.to_dict() for p in related.bought_together],
            "categories": related.categories,
        }
    )
    return 0


async def cli_recommend(
    viewed_ids: tuple[int, ...] = (),
    category: str | None = None,
    limit: int | None = None,
    service: StorefrontService | None = None,
) -> int:
    """Print personalised (or per-category) picks as JSON."""
    svc = service or StorefrontService()
    try:
        picks = await svc.recommend(viewed_ids, category, limit)
    except CatalogError as exc:
        logger.error("Recommend failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    if not picks:
        _err.print("[yellow]No recommendations.[/yellow]")
    _dump_json([p.to_dict() for p in picks])
    return 0


def run_recent(clear: bool = False) -> int:
    """Show (or clear) the persisted recent searches."""
    recent = RecentSearches(JsonFileStore())
    if clear:
        recent.clear()
        _err.print("[green]✓ Recent searches cleared[/green]")
        return 0
    if not recent.items:
        _err.print("[yellow]No recent searches.[/yellow]")
    _dump_json(recent.items)
    return 0


async def run_health_check() -> int:
    """Run a connectivity check against the catalog API."""
    from storefront.services.health_checker import HealthChecker

    _err.print("[bold]Running catalog health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Catalog Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]OK[/green]"
        elif r.status == "slow":
            status = "[yellow]SLOW[/yellow]"
        else:
            status = "[red]DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.endpoint, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
