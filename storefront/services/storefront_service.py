# storefront/services/storefront_service.py

"""Composition root: wires the catalog, engines, history and cart."""

import asyncio
import logging
from dataclasses import dataclass, field

from storefront.catalog.classifier import enhance_products
from storefront.catalog.stats import ProductStats, calculate_product_stats
from storefront.filters.product_filter import ProductFilter
from storefront.models.filters import ProductFilters
from storefront.models.product import EnhancedProduct, Product
from storefront.search.recommendations import (
    get_frequently_bought_together,
    get_personalized_recommendations,
    get_products_by_category,
    get_recommended_categories,
    get_similar_products,
)
from storefront.search.search_helper import SearchHelper, SearchSuggestion
from storefront.services.catalog_client import CatalogClient, CatalogError
from storefront.services.cart_store import CartBackend, CartStore
from storefront.storage.recent_searches import (
    KeyValueStore,
    MemoryStore,
    RecentSearches,
)

logger = logging.getLogger("storefront.service")


@dataclass
class ListingResult:
    """A filtered, sorted product listing."""

    filters: ProductFilters
    products: list[EnhancedProduct] = field(
        default_factory=lambda: list[EnhancedProduct]()
    )
    total_before_filter: int = 0
    excluded_count: int = 0
    errors: list[str] = field(default_factory=lambda: list[str]())


@dataclass
class RelatedProducts:
    """Recommendation rails shown next to one product."""

    product: EnhancedProduct
    similar: list[Product] = field(default_factory=lambda: list[Product]())
    bought_together: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    categories: list[str] = field(default_factory=lambda: list[str]())


class StorefrontService:
    """Owns one session's catalog snapshot, search history and cart."""

    def __init__(
        self,
        client: CatalogClient | None = None,
        store: KeyValueStore | None = None,
        cart_backend: CartBackend | None = None,
    ) -> None:
        self.client = client or CatalogClient()
        self.recent_searches = RecentSearches(store or MemoryStore())
        self.cart = CartStore(backend=cart_backend)
        self._products: list[EnhancedProduct] | None = None
        self._categories: list[str] = []

    # ── Catalog snapshot ─────────────────────────────────

    async def load_catalog(
        self, refresh: bool = False,
    ) -> list[EnhancedProduct]:
        """Fetch and classify the catalog once per session.

        Raises :class:`CatalogError` when the API is unreachable.
        """
        if self._products is not None and not refresh:
            return self._products

        products, categories = await asyncio.gather(
            asyncio.to_thread(self.client.get_all_products),
            asyncio.to_thread(self.client.get_categories),
        )
        self._products = enhance_products(products)
        self._categories = categories
        logger.info(
            "Catalog loaded: %d products in %d categories",
            len(self._products),
            len(categories),
        )
        return self._products

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    # ── Listing ──────────────────────────────────────────

    async def list_products(self, filters: ProductFilters) -> ListingResult:
        """Filter and sort the catalog.

        Catalog failures are reported in ``errors`` rather than raised.
        A non-blank search query is recorded in the recent searches.
        """
        result = ListingResult(filters=filters)
        try:
            products = await self.load_catalog()
        except CatalogError as exc:
            logger.error("Listing failed: %s", exc, exc_info=True)
            result.errors.append(str(exc))
            return result

        if filters.search_query:
            self.recent_searches.add(filters.search_query)

        result.total_before_filter = len(products)
        result.products = ProductFilter.apply(products, filters)
        result.excluded_count = len(products) - len(result.products)
        return result

    async def suggest(self, query: str) -> list[SearchSuggestion]:
        """Search-as-you-type suggestions for *query*."""
        products = await self.load_catalog()
        return SearchHelper.generate_suggestions(
            query, list(products), self._categories
        )

    async def stats(self) -> ProductStats:
        products = await self.load_catalog()
        return calculate_product_stats(list(products))

    def find_product(self, product_id: int) -> EnhancedProduct | None:
        """Look up a product in the loaded snapshot."""
        for product in self._products or []:
            if product.id == product_id:
                return product
        return None

    # ── Recommendations ──────────────────────────────────

    async def related_products(
        self, product_id: int, limit: int | None = None,
    ) -> RelatedProducts | None:
        """Similar and frequently-bought-together picks for one product.

        Returns ``None`` when *product_id* is not in the catalog.  Each
        rail is cut to *limit* entries when given.
        """
        products: list[Product] = list(await self.load_catalog())
        product = self.find_product(product_id)
        if product is None:
            logger.warning("No product with id %d", product_id)
            return None

        related = RelatedProducts(
            product=product,
            similar=get_similar_products(product, products)[:limit],
            bought_together=get_frequently_bought_together(
                product, products
            )[:limit],
            categories=get_recommended_categories(
                product.category, self._categories, products
            ),
        )
        logger.debug(
            "Related to %d: %d similar, %d bought together",
            product_id,
            len(related.similar),
            len(related.bought_together),
        )
        return related

    async def recommend(
        self,
        viewed_ids: tuple[int, ...] = (),
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """Picks for a shopper.

        With *category*, the best products of that category; otherwise
        personalised from the viewed products, or trending when none of
        *viewed_ids* is known.
        """
        products: list[Product] = list(await self.load_catalog())
        if category:
            return get_products_by_category(category, products)[:limit]

        wanted = set(viewed_ids)
        viewed = [p for p in products if p.id in wanted]
        return get_personalized_recommendations(viewed, products)[:limit]
