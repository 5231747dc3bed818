# storefront/filters/product_filter.py

"""Multi-criterion filtering of enhanced products."""

import logging

from storefront.filters.product_sorter import ProductSorter
from storefront.models.filters import ProductFilters
from storefront.models.product import EnhancedProduct

logger = logging.getLogger("storefront.filters")


class ProductFilter:
    """Apply a :class:`ProductFilters` query to a product collection."""

    @staticmethod
    def matches(product: EnhancedProduct, filters: ProductFilters) -> bool:
        """True when *product* satisfies every criterion set in *filters*.

        Criteria that are not set always pass.
        """
        if filters.category and product.category != filters.category:
            return False

        if filters.categories and product.category not in filters.categories:
            return False

        min_price = filters.effective_min_price
        if min_price is not None and product.price < min_price:
            return False

        max_price = filters.effective_max_price
        if max_price is not None and product.price > max_price:
            return False

        if filters.rating and product.rating.rate < filters.rating:
            return False

        if (
            filters.stock_status
            and product.stock_status not in filters.stock_status
        ):
            return False

        if filters.search_query:
            query = filters.search_query.lower()
            searchable = " ".join(
                (
                    product.title,
                    product.description,
                    product.category,
                    *(b.label for b in product.badges),
                )
            ).lower()
            if query not in searchable:
                return False

        if filters.tags:
            product_tags = {
                product.category,
                product.price_category,
                product.rating_category,
                *(b.type for b in product.badges),
            }
            if not any(tag in product_tags for tag in filters.tags):
                return False

        return True

    @staticmethod
    def filter_products_enhanced(
        products: list[EnhancedProduct],
        filters: ProductFilters,
    ) -> list[EnhancedProduct]:
        """Return the products matching *filters*, in their original order.

        The input list is never modified.
        """
        kept = [p for p in products if ProductFilter.matches(p, filters)]

        excluded = len(products) - len(kept)
        if excluded:
            logger.info(
                "Filtered out %d of %d products", excluded, len(products)
            )

        return kept

    @staticmethod
    def apply(
        products: list[EnhancedProduct],
        filters: ProductFilters,
    ) -> list[EnhancedProduct]:
        """Filter, then sort by ``filters.sort_by``."""
        kept = ProductFilter.filter_products_enhanced(products, filters)
        return ProductSorter.sort_products_advanced(kept, filters.sort_by)
