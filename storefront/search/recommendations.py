# storefront/search/recommendations.py

"""Catalog-only recommendation heuristics (no user model)."""

import logging
import math
import random
from collections import Counter
from dataclasses import dataclass

from storefront.models.product import Product
from storefront.search.search_helper import SearchHelper, ranking_score

logger = logging.getLogger("storefront.search")


@dataclass(frozen=True)
class RecommendationOptions:
    """Common knobs for every recommendation rail."""

    max_results: int = 8
    exclude_ids: frozenset[int] = frozenset()
    min_rating: float = 3.5


def _similarity(a: float, b: float) -> float:
    """1.0 for equal prices, falling towards 0 as they diverge."""
    high = max(a, b)
    if high <= 0:
        return 1.0
    return 1 - abs(a - b) / high


def get_frequently_bought_together(
    product: Product,
    all_products: list[Product],
    options: RecommendationOptions | None = None,
) -> list[Product]:
    """Same category or similar price, ranked by :func:`ranking_score`."""
    opts = options or RecommendationOptions(max_results=4)
    candidates = [
        p
        for p in all_products
        if p.id != product.id
        and p.id not in opts.exclude_ids
        and p.rating.rate >= opts.min_rating
        and (
            p.category == product.category
            or abs(p.price - product.price) < product.price * 0.5
        )
    ]
    candidates.sort(key=ranking_score, reverse=True)
    return candidates[: opts.max_results]


def get_similar_products(
    product: Product,
    all_products: list[Product],
    options: RecommendationOptions | None = None,
) -> list[Product]:
    """Same-category products close in price and rating."""
    opts = options or RecommendationOptions(max_results=6, min_rating=3.0)

    def score(p: Product) -> float:
        price_sim = _similarity(p.price, product.price)
        rating_sim = 1 - abs(p.rating.rate - product.rating.rate) / 5
        return (price_sim * 0.3 + rating_sim * 0.7) * p.rating.rate

    candidates = [
        p
        for p in all_products
        if p.id != product.id
        and p.id not in opts.exclude_ids
        and p.rating.rate >= opts.min_rating
        and p.category == product.category
    ]
    candidates.sort(key=score, reverse=True)
    return candidates[: opts.max_results]


def get_products_by_category(
    category: str,
    all_products: list[Product],
    options: RecommendationOptions | None = None,
) -> list[Product]:
    """Best products of one category (case-insensitive match)."""
    opts = options or RecommendationOptions(max_results=12, min_rating=3.0)
    wanted = category.lower()
    candidates = [
        p
        for p in all_products
        if p.category.lower() == wanted
        and p.id not in opts.exclude_ids
        and p.rating.rate >= opts.min_rating
    ]
    candidates.sort(key=ranking_score, reverse=True)
    return candidates[: opts.max_results]


def get_recommended_categories(
    current_category: str | None,
    all_categories: list[str],
    all_products: list[Product],
) -> list[str]:
    """Categories worth browsing.

    Without a current category, the six categories with the best
    average rating weighted by size; otherwise up to four others.
    """
    if current_category:
        return [c for c in all_categories if c != current_category][:4]

    def category_score(category: str) -> float:
        members = [p for p in all_products if p.category == category]
        if not members:
            return 0.0
        average = sum(p.rating.rate for p in members) / len(members)
        return average * math.log(len(members) + 1)

    return sorted(all_categories, key=category_score, reverse=True)[:6]


def get_personalized_recommendations(
    viewed_products: list[Product],
    all_products: list[Product],
    options: RecommendationOptions | None = None,
    rng: random.Random | None = None,
) -> list[Product]:
    """Rank unseen products by category affinity, price fit and rating.

    Falls back to the (non-deterministic) trending rail when nothing
    has been viewed yet.
    """
    opts = options or RecommendationOptions()
    if not viewed_products:
        if options is None:
            return SearchHelper.get_trending_products(all_products, rng=rng)
        return SearchHelper.get_trending_products(
            all_products,
            limit=options.max_results,
            min_rating=options.min_rating,
            exclude_ids=options.exclude_ids,
            rng=rng,
        )

    preferences = Counter(p.category for p in viewed_products)
    average_price = sum(p.price for p in viewed_products) / len(
        viewed_products
    )
    viewed_ids = {p.id for p in viewed_products}

    def score(p: Product) -> float:
        return (
            preferences.get(p.category, 0) * 0.4
            + _similarity(p.price, average_price) * 0.2
            + p.rating.rate * 0.4
        )

    candidates = [
        p
        for p in all_products
        if p.id not in opts.exclude_ids
        and p.id not in viewed_ids
        and p.rating.rate >= opts.min_rating
    ]
    candidates.sort(key=score, reverse=True)
    logger.debug(
        "Personalised %d candidates from %d viewed products",
        len(candidates),
        len(viewed_products),
    )
    return candidates[: opts.max_results]
