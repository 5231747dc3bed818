# tests/test_classifier.py

"""Tests for product classification, badges and enhancement."""

import unittest

from storefront.catalog.classifier import (
    calculate_discount_percentage,
    calculate_popularity_score,
    enhance_product,
    enhance_products,
    generate_product_badges,
    get_availability_status,
    get_price_category,
    get_primary_badge,
    get_rating_category,
    get_stock_status,
    is_new_product,
    is_on_sale,
    is_popular_product,
    is_trending_product,
    round_half_up,
)
from storefront.models.product import EnhancedProduct, Product, Rating


def _make_product(
    price: float = 50.0,
    rate: float = 3.0,
    count: int = 60,
    category: str = "books",
    product_id: int = 1,
) -> Product:
    """Create a Product with the fields the classifier reads."""
    return Product(
        id=product_id,
        title=f"Product {product_id}",
        price=price,
        description="desc",
        category=category,
        image="https://example.com/img.jpg",
        rating=Rating(rate=rate, count=count),
    )


class TestFlags(unittest.TestCase):
    """Boolean classification predicates."""

    def test_new_below_fifty_reviews(self) -> None:
        """Fewer than 50 reviews marks a product as new."""
        self.assertTrue(is_new_product(_make_product(count=49)))
        self.assertFalse(is_new_product(_make_product(count=50)))

    def test_on_sale_below_threshold(self) -> None:
        """Prices strictly under 25 are on sale."""
        self.assertTrue(is_on_sale(_make_product(price=24.99)))
        self.assertFalse(is_on_sale(_make_product(price=25.0)))

    def test_popular_needs_rating_and_volume(self) -> None:
        """Popular requires rate >= 4.0 and count >= 100."""
        self.assertTrue(is_popular_product(_make_product(rate=4.0, count=100)))
        self.assertFalse(is_popular_product(_make_product(rate=3.9, count=500)))
        self.assertFalse(is_popular_product(_make_product(rate=4.8, count=99)))

    def test_trending_needs_rating_and_score(self) -> None:
        """Trending requires rate >= 3.8 and popularity score > 0.75."""
        self.assertTrue(is_trending_product(_make_product(rate=3.8, count=200)))
        self.assertFalse(is_trending_product(_make_product(rate=3.7, count=200)))
        self.assertFalse(is_trending_product(_make_product(rate=4.0, count=50)))


class TestScores(unittest.TestCase):
    """Popularity score and discount estimation."""

    def test_popularity_score_maximum(self) -> None:
        """Perfect rating with 200+ reviews scores 1.0."""
        self.assertEqual(
            calculate_popularity_score(_make_product(rate=5.0, count=500)),
            1.0,
        )

    def test_popularity_score_minimum(self) -> None:
        """No rating and no reviews scores 0."""
        self.assertEqual(
            calculate_popularity_score(_make_product(rate=0.0, count=0)),
            0.0,
        )

    def test_popularity_score_rounded_two_places(self) -> None:
        """0.7*(4.2/5) + 0 rounds to 0.59."""
        self.assertEqual(
            calculate_popularity_score(_make_product(rate=4.2, count=0)),
            0.59,
        )

    def test_popularity_score_within_bounds(self) -> None:
        """Scores stay within [0, 1] across the rating range."""
        for rate in (0.0, 1.3, 2.5, 3.9, 4.4, 5.0):
            for count in (0, 10, 199, 200, 10_000):
                with self.subTest(rate=rate, count=count):
                    score = calculate_popularity_score(
                        _make_product(rate=rate, count=count)
                    )
                    self.assertGreaterEqual(score, 0.0)
                    self.assertLessEqual(score, 1.0)

    def test_discount_zero_when_not_on_sale(self) -> None:
        """Full-price products carry no discount."""
        self.assertEqual(
            calculate_discount_percentage(_make_product(price=30.0)), 0
        )

    def test_discount_uses_category_multiplier(self) -> None:
        """Known categories use their own list-price multiplier."""
        self.assertEqual(
            calculate_discount_percentage(
                _make_product(price=10.0, category="jewelery")
            ),
            60,
        )
        self.assertEqual(
            calculate_discount_percentage(
                _make_product(price=10.0, category="men's clothing")
            ),
            44,
        )
        self.assertEqual(
            calculate_discount_percentage(
                _make_product(price=15.99, category="electronics")
            ),
            29,
        )

    def test_discount_default_multiplier(self) -> None:
        """Unlisted categories fall back to the 1.5 multiplier."""
        self.assertEqual(
            calculate_discount_percentage(
                _make_product(price=10.0, category="books")
            ),
            33,
        )

    def test_discount_zero_price(self) -> None:
        """A free product has no computable discount."""
        self.assertEqual(
            calculate_discount_percentage(_make_product(price=0.0)), 0
        )

    def test_round_half_up(self) -> None:
        """Halves round up rather than to even."""
        self.assertEqual(round_half_up(12.5), 13)
        self.assertEqual(round_half_up(0.125, 2), 0.13)


class TestCategories(unittest.TestCase):
    """Stock, price and rating buckets."""

    def test_stock_status_boundaries(self) -> None:
        """0 is out of stock, 1..19 low stock, 20+ in stock."""
        self.assertEqual(get_stock_status(_make_product(count=0)), "out-of-stock")
        self.assertEqual(get_stock_status(_make_product(count=1)), "low-stock")
        self.assertEqual(get_stock_status(_make_product(count=19)), "low-stock")
        self.assertEqual(get_stock_status(_make_product(count=20)), "in-stock")

    def test_availability_follows_stock(self) -> None:
        """Availability mirrors the stock status."""
        self.assertEqual(
            get_availability_status(_make_product(count=0)), "unavailable"
        )
        self.assertEqual(
            get_availability_status(_make_product(count=5)), "limited"
        )
        self.assertEqual(
            get_availability_status(_make_product(count=80)), "available"
        )

    def test_price_category_thresholds_exclusive(self) -> None:
        """Thresholds are exclusive upper bounds of the cheaper bucket."""
        self.assertEqual(get_price_category(_make_product(price=19.99)), "budget")
        self.assertEqual(get_price_category(_make_product(price=20.0)), "mid-range")
        self.assertEqual(get_price_category(_make_product(price=99.99)), "mid-range")
        self.assertEqual(get_price_category(_make_product(price=100.0)), "premium")

    def test_rating_category_boundaries(self) -> None:
        """Rating buckets switch at 2.5, 3.5 and 4.5."""
        self.assertEqual(get_rating_category(_make_product(rate=2.49)), "poor")
        self.assertEqual(get_rating_category(_make_product(rate=2.5)), "fair")
        self.assertEqual(get_rating_category(_make_product(rate=3.5)), "good")
        self.assertEqual(get_rating_category(_make_product(rate=4.5)), "excellent")


class TestBadges(unittest.TestCase):
    """Badge generation and ordering."""

    def test_out_of_stock_scenario(self) -> None:
        """Zero reviews: out of stock outranks sale, no low-stock badge."""
        product = Product(
            id=1,
            title="Cable",
            price=15.99,
            category="electronics",
            rating=Rating(rate=4.2, count=0),
        )
        self.assertTrue(is_on_sale(product))
        self.assertEqual(get_stock_status(product), "out-of-stock")
        primary = get_primary_badge(product)
        assert primary is not None
        self.assertEqual(primary.type, "out-of-stock")
        types = [b.type for b in generate_product_badges(product)]
        self.assertNotIn("low-stock", types)
        self.assertEqual(types, ["out-of-stock", "sale", "new"])

    def test_multiple_badges_ordered(self) -> None:
        """Bestseller, popular and trending can stack in priority order."""
        product = _make_product(price=109.95, rate=4.6, count=400)
        types = [b.type for b in generate_product_badges(product)]
        self.assertEqual(types, ["bestseller", "popular", "trending"])

    def test_low_stock_label_shows_count(self) -> None:
        """Low-stock badges state how many are left."""
        badges = generate_product_badges(_make_product(count=15))
        self.assertEqual(badges[0].type, "low-stock")
        self.assertEqual(badges[0].label, "Only 15 left")

    def test_sale_label_shows_discount(self) -> None:
        """Sale badges carry the estimated discount."""
        badges = generate_product_badges(
            _make_product(price=10.0, category="jewelery", count=80)
        )
        sale = [b for b in badges if b.type == "sale"]
        self.assertEqual(sale[0].label, "60% OFF")
        self.assertEqual(sale[0].priority, 8)

    def test_sale_label_without_discount(self) -> None:
        """A free product is labelled plainly as on sale."""
        badges = generate_product_badges(_make_product(price=0.0, count=80))
        self.assertEqual(badges[0].label, "Sale")

    def test_no_badges(self) -> None:
        """An unremarkable product has no primary badge."""
        product = _make_product(price=50.0, rate=3.0, count=60)
        self.assertEqual(generate_product_badges(product), ())
        self.assertIsNone(get_primary_badge(product))

    def test_badges_sorted_and_stock_exclusive(self) -> None:
        """Across a grid of products badges are strictly descending."""
        for price in (0.0, 9.99, 24.99, 25.0, 150.0):
            for rate in (1.0, 3.8, 4.0, 4.5, 5.0):
                for count in (0, 1, 19, 20, 49, 100, 150, 300):
                    product = _make_product(price=price, rate=rate, count=count)
                    badges = generate_product_badges(product)
                    priorities = [b.priority for b in badges]
                    with self.subTest(price=price, rate=rate, count=count):
                        self.assertEqual(
                            priorities, sorted(priorities, reverse=True)
                        )
                        self.assertEqual(len(priorities), len(set(priorities)))
                        types = {b.type for b in badges}
                        self.assertFalse(
                            {"out-of-stock", "low-stock"} <= types
                        )


class TestEnhanceProduct(unittest.TestCase):
    """enhance_product / enhance_products assembly."""

    def test_all_fields_populated(self) -> None:
        """The enhanced product carries every computed property."""
        enhanced = enhance_product(_make_product(price=109.95, rate=4.6, count=400))
        self.assertIsInstance(enhanced, EnhancedProduct)
        self.assertFalse(enhanced.is_new)
        self.assertFalse(enhanced.is_on_sale)
        self.assertTrue(enhanced.is_popular)
        self.assertTrue(enhanced.is_trending)
        self.assertEqual(enhanced.stock_status, "in-stock")
        self.assertEqual(enhanced.stock_count, 400)
        self.assertEqual(enhanced.discount_percentage, 0)
        self.assertIsNone(enhanced.original_price)
        self.assertEqual(enhanced.popularity_score, 0.94)
        self.assertEqual(enhanced.price_category, "premium")
        self.assertEqual(enhanced.rating_category, "excellent")
        self.assertEqual(enhanced.availability_status, "available")

    def test_original_price_for_sale_items(self) -> None:
        """Sale items get an original price backed out of the discount."""
        enhanced = enhance_product(_make_product(price=10.0, category="books"))
        self.assertEqual(enhanced.discount_percentage, 33)
        self.assertEqual(enhanced.original_price, 14.93)

    def test_base_fields_preserved(self) -> None:
        """Catalog fields are copied verbatim."""
        product = _make_product(product_id=7)
        enhanced = enhance_product(product)
        self.assertEqual(enhanced.id, 7)
        self.assertEqual(enhanced.title, product.title)
        self.assertEqual(enhanced.rating, product.rating)

    def test_idempotent(self) -> None:
        """Enhancing twice yields an identical value."""
        product = _make_product(price=15.99, rate=4.2, count=12)
        once = enhance_product(product)
        self.assertEqual(enhance_product(once), once)
        self.assertEqual(enhance_product(product), once)

    def test_enhance_products_keeps_order(self) -> None:
        """Bulk enhancement preserves input order."""
        products = [_make_product(product_id=i) for i in (3, 1, 2)]
        self.assertEqual(
            [p.id for p in enhance_products(products)], [3, 1, 2]
        )


if __name__ == "__main__":
    unittest.main()
