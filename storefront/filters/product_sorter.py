# storefront/filters/product_sorter.py

"""Named sort strategies for enhanced products."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from storefront.models.product import EnhancedProduct

logger = logging.getLogger("storefront.filters")


@dataclass(frozen=True)
class SortOption:
    """A sort strategy as offered to a picker control."""

    value: str
    label: str
    direction: str
    field: str


SORT_OPTIONS: list[SortOption] = [
    SortOption("popularity", "Most Popular", "desc", "popularity"),
    SortOption("price-asc", "Price: Low to High", "asc", "price"),
    SortOption("price-desc", "Price: High to Low", "desc", "price"),
    SortOption("rating", "Highest Rated", "desc", "rating"),
    SortOption("name", "Name: A to Z", "asc", "title"),
    SortOption("newest", "Newest First", "desc", "newest"),
    SortOption("trending", "Trending", "desc", "trending"),
]


def _name_key(p: EnhancedProduct) -> tuple[str, str]:
    # Case-insensitive first, raw title breaks case-only ties
    return p.title.casefold(), p.title


# Keys are ascending; descending orders negate numbers so that
# sorted() stays stable and ties keep their input order.
_SORT_KEYS: dict[str, Callable[[EnhancedProduct], Any]] = {
    "price-asc": lambda p: p.price,
    "price-desc": lambda p: -p.price,
    "rating": lambda p: (-p.rating.rate, -p.rating.count),
    "name": _name_key,
    "popularity": lambda p: -p.popularity_score,
    "newest": lambda p: (not p.is_new, p.rating.count),
    "trending": lambda p: (not p.is_trending, -p.popularity_score),
}


class ProductSorter:
    """Order products by one of the named strategies."""

    @staticmethod
    def sort_products_advanced(
        products: list[EnhancedProduct],
        sort_by: str | None,
    ) -> list[EnhancedProduct]:
        """Return a sorted copy of *products*.

        Unknown or missing strategies return the input order unchanged.
        """
        key = _SORT_KEYS.get(sort_by or "")
        if key is None:
            if sort_by:
                logger.debug("Unknown sort strategy '%s' ignored", sort_by)
            return list(products)
        return sorted(products, key=key)

    @staticmethod
    def available_strategies() -> list[str]:
        return [option.value for option in SORT_OPTIONS]
