# storefront/models/filters.py

"""Filter query model consumed by the filter and sort engines."""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

logger = logging.getLogger("storefront.filters")

# URL / form parameter names accepted by from_query_params, mapped to fields
_PARAM_ALIASES: dict[str, str] = {
    "category": "category",
    "categories": "categories",
    "minPrice": "min_price",
    "min_price": "min_price",
    "maxPrice": "max_price",
    "max_price": "max_price",
    "rating": "rating",
    "stockStatus": "stock_status",
    "stock_status": "stock_status",
    "sortBy": "sort_by",
    "sort_by": "sort_by",
    "sort": "sort_by",
    "q": "search_query",
    "search": "search_query",
    "searchQuery": "search_query",
    "search_query": "search_query",
    "tags": "tags",
}

_LIST_FIELDS = frozenset({"categories", "stock_status", "tags"})
_FLOAT_FIELDS = frozenset({"min_price", "max_price", "rating"})


@dataclass(frozen=True)
class PriceRange:
    """Inclusive price bounds; either side may be open."""

    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class ProductFilters:
    """A fully-specified product query.

    Instances are immutable: use :meth:`with_changes` to derive a new
    query from an existing one.
    """

    category: str | None = None
    categories: tuple[str, ...] = ()
    min_price: float | None = None
    max_price: float | None = None
    price_range: PriceRange | None = None
    rating: float | None = None
    stock_status: tuple[str, ...] = ()
    sort_by: str | None = None
    search_query: str | None = None
    tags: tuple[str, ...] = ()

    def with_changes(self, **changes: Any) -> "ProductFilters":
        """Return a new filter set with *changes* applied.

        List-valued fields accept any iterable and are frozen to tuples.
        Unknown field names raise ``TypeError``.
        """
        normalised: dict[str, Any] = {}
        for name, value in changes.items():
            if name in _LIST_FIELDS and value is not None:
                value = tuple(value)
            elif name in _LIST_FIELDS:
                value = ()
            normalised[name] = value
        return replace(self, **normalised)

    def cleared(self) -> "ProductFilters":
        """Return an empty filter set, keeping the sort order."""
        return ProductFilters(sort_by=self.sort_by)

    @property
    def effective_min_price(self) -> float | None:
        """Lower bound, preferring ``price_range`` over ``min_price``."""
        if self.price_range is not None and self.price_range.min is not None:
            return self.price_range.min
        return self.min_price

    @property
    def effective_max_price(self) -> float | None:
        """Upper bound, preferring ``price_range`` over ``max_price``."""
        if self.price_range is not None and self.price_range.max is not None:
            return self.price_range.max
        return self.max_price

    @property
    def is_empty(self) -> bool:
        """True when no filtering criterion is set (sorting ignored)."""
        return (
            not self.category
            and not self.categories
            and self.effective_min_price is None
            and self.effective_max_price is None
            and not self.rating
            and not self.stock_status
            and not self.search_query
            and not self.tags
        )

    @classmethod
    def from_query_params(
        cls, params: Mapping[str, Any],
    ) -> "ProductFilters":
        """Translate URL or form parameters into a filter set.

        List values may be comma-separated strings or sequences.
        Unknown keys and malformed numbers are ignored.
        """
        values: dict[str, Any] = {}
        for key, raw in params.items():
            name = _PARAM_ALIASES.get(key)
            if name is None or raw is None:
                continue
            if name in _LIST_FIELDS:
                items = raw.split(",") if isinstance(raw, str) else raw
                values[name] = tuple(
                    str(i).strip() for i in items if str(i).strip()
                )
            elif name in _FLOAT_FIELDS:
                try:
                    values[name] = float(raw)
                except (TypeError, ValueError):
                    logger.debug(
                        "Ignoring malformed %s parameter: %r", key, raw
                    )
            else:
                text = str(raw).strip()
                if text:
                    values[name] = text
        return cls(**values)

    def to_query_params(self) -> dict[str, str]:
        """Inverse of :meth:`from_query_params` for the non-empty fields."""
        params: dict[str, str] = {}
        data = asdict(self)
        data.pop("price_range")
        data["min_price"] = self.effective_min_price
        data["max_price"] = self.effective_max_price
        for f in fields(self):
            value = data.get(f.name)
            if value is None or value == () or value == "":
                continue
            if f.name in _LIST_FIELDS:
                params[f.name] = ",".join(value)
            elif f.name in _FLOAT_FIELDS:
                params[f.name] = repr(float(value))
            else:
                params[f.name] = str(value)
        return params
