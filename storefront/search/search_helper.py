# storefront/search/search_helper.py

"""Query suggestions and query-independent product rankings."""

import logging
import math
import random
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.search")

TRENDING_SEARCHES: list[str] = [
    "electronics",
    "jewelry",
    "clothing",
    "men's clothing",
    "women's clothing",
    "smartphone",
    "laptop",
    "watch",
    "shoes",
    "accessories",
]

TRENDING_MIN_REVIEWS: int = 50
TRENDING_JITTER: float = 0.1


@dataclass(frozen=True)
class SearchSuggestion:
    """One entry in the search-as-you-type dropdown."""

    id: str
    text: str
    type: Literal["product", "category"]
    count: int | None = None


def ranking_score(product: Product) -> float:
    """Rating weighted by the log of review volume."""
    return product.rating.rate * math.log(product.rating.count + 1)


class SearchHelper:
    """Stateless helpers behind the search box and landing rails."""

    @staticmethod
    def generate_suggestions(
        query: str,
        products: list[Product],
        categories: list[str],
        limit: int = Settings.SUGGESTION_LIMIT,
    ) -> list[SearchSuggestion]:
        """Title matches (at most *limit*) followed by category matches.

        Matching is a case-insensitive substring test; results keep
        source order.  Category entries carry their product count.
        """
        if not query.strip():
            return []
        needle = query.lower()

        title_matches = [
            SearchSuggestion(
                id=f"product-{p.id}", text=p.title, type="product"
            )
            for p in products
            if needle in p.title.lower()
        ][:limit]

        category_matches = [
            SearchSuggestion(
                id=f"category-{category}",
                text=category,
                type="category",
                count=sum(1 for p in products if p.category == category),
            )
            for category in categories
            if needle in category.lower()
        ]

        return title_matches + category_matches

    @staticmethod
    def search_products(query: str, products: list[Product]) -> list[Product]:
        """Products whose title, description or category contain *query*."""
        if not query.strip():
            return list(products)
        needle = query.lower()
        return [
            p
            for p in products
            if needle in p.title.lower()
            or needle in p.description.lower()
            or needle in p.category.lower()
        ]

    @staticmethod
    def get_popular_products(
        products: list[Product],
        limit: int = Settings.POPULAR_PRODUCTS_LIMIT,
    ) -> list[Product]:
        """Top products by :func:`ranking_score`, best first."""
        return sorted(products, key=ranking_score, reverse=True)[:limit]

    @staticmethod
    def get_trending_products(
        products: list[Product],
        limit: int = Settings.TRENDING_PRODUCTS_LIMIT,
        min_rating: float = 4.0,
        exclude_ids: Iterable[int] = (),
        rng: random.Random | None = None,
    ) -> list[Product]:
        """Well-reviewed products in a deliberately shuffled order.

        Each score gets a +/-10% jitter so the rail does not look frozen
        between visits; the output order is therefore non-deterministic
        unless a seeded *rng* is passed.  Only products with more than
        50 reviews qualify.
        """
        jitter = rng or random.Random()
        excluded = set(exclude_ids)
        candidates = [
            p
            for p in products
            if p.id not in excluded
            and p.rating.rate >= min_rating
            and p.rating.count > TRENDING_MIN_REVIEWS
        ]
        scored = [
            (
                ranking_score(p)
                * (1 - TRENDING_JITTER + jitter.random() * 2 * TRENDING_JITTER),
                p,
            )
            for p in candidates
        ]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [p for _score, p in scored[:limit]]

    @staticmethod
    def get_suggested_categories(
        query: str,
        categories: list[str],
        limit: int = Settings.SUGGESTED_CATEGORY_LIMIT,
    ) -> list[str]:
        """Categories to browse next, skipping ones the query already hits."""
        if not query.strip():
            return categories[:limit]
        needle = query.lower()
        return [c for c in categories if needle not in c.lower()][:limit]

    @staticmethod
    def get_trending_searches(
        query: str,
        recent: list[str],
        limit: int = Settings.TRENDING_SEARCH_LIMIT,
    ) -> list[str]:
        """Canned trending terms minus the current and recent queries."""
        current = query.strip().lower()
        recent_lower = {r.lower() for r in recent}
        return [
            term
            for term in TRENDING_SEARCHES
            if not (current and current in term)
            and term not in recent_lower
        ][:limit]
