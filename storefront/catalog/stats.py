# storefront/catalog/stats.py

"""Aggregate statistics over a product collection."""

import math
from dataclasses import dataclass, field

from storefront.catalog.classifier import (
    get_price_category,
    get_stock_status,
    round_half_up,
)
from storefront.models.product import Product


@dataclass
class ProductStats:
    """Summary of a product collection."""

    total_products: int = 0
    average_price: float = 0.0
    average_rating: float = 0.0
    category_distribution: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    price_ranges: dict[str, int] = field(
        default_factory=lambda: {"budget": 0, "mid-range": 0, "premium": 0}
    )
    stock_distribution: dict[str, int] = field(
        default_factory=lambda: {
            "in-stock": 0,
            "low-stock": 0,
            "out-of-stock": 0,
        }
    )


def calculate_product_stats(products: list[Product]) -> ProductStats:
    """Count, averages and distributions for *products*."""
    stats = ProductStats()
    if not products:
        return stats

    total_price = 0.0
    total_rating = 0.0
    for product in products:
        total_price += product.price
        total_rating += product.rating.rate
        stats.category_distribution[product.category] = (
            stats.category_distribution.get(product.category, 0) + 1
        )
        stats.price_ranges[get_price_category(product)] += 1
        stats.stock_distribution[get_stock_status(product)] += 1

    stats.total_products = len(products)
    stats.average_price = round_half_up(total_price / len(products), 2)
    stats.average_rating = round_half_up(total_rating / len(products), 2)
    return stats


def get_price_range(products: list[Product]) -> tuple[int, int]:
    """Whole-number (min, max) price bounds; (0, 100) when empty."""
    if not products:
        return 0, 100
    prices = [p.price for p in products]
    return math.floor(min(prices)), math.ceil(max(prices))


def get_unique_categories(products: list[Product]) -> list[str]:
    """Distinct categories in sorted order."""
    return sorted({p.category for p in products})
