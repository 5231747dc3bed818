# storefront/catalog/classifier.py

"""Derive flags, categories and badges from raw catalog products.

Every function here is pure: it reads a :class:`Product` and returns a
derived value.  Stock is a simulated proxy taken from the review count;
the catalog API carries no inventory data.
"""

import math

from storefront.models.product import (
    AvailabilityStatus,
    Badge,
    BadgeType,
    EnhancedProduct,
    PriceCategory,
    Product,
    RatingCategory,
    StockStatus,
)

# --- Thresholds -----------------------------------------------------------

BUDGET_MAX: float = 20.0
MID_RANGE_MAX: float = 100.0
SALE_THRESHOLD: float = 25.0
NEW_PRODUCT_RATING_COUNT: int = 50
POPULAR_RATING_MIN: float = 4.0
POPULAR_COUNT_MIN: int = 100
LOW_STOCK_THRESHOLD: int = 20
TRENDING_RATING_MIN: float = 3.8
TRENDING_SCORE_MIN: float = 0.75
BESTSELLER_RATING_MIN: float = 4.5
BESTSELLER_COUNT_MIN: int = 150
POPULARITY_COUNT_CAP: int = 200

# Estimated list-price multipliers used to back out a discount
CATEGORY_PRICE_MULTIPLIERS: dict[str, float] = {
    "men's clothing": 1.8,
    "women's clothing": 1.6,
    "jewelery": 2.5,
    "electronics": 1.4,
}
DEFAULT_PRICE_MULTIPLIER: float = 1.5

# Higher number is shown first
BADGE_PRIORITIES: dict[BadgeType, int] = {
    "out-of-stock": 10,
    "low-stock": 9,
    "sale": 8,
    "bestseller": 7,
    "popular": 6,
    "trending": 5,
    "new": 4,
}

BADGE_COLORS: dict[BadgeType, str] = {
    "out-of-stock": "bg-red-500 text-white",
    "low-stock": "bg-orange-500 text-white",
    "sale": "bg-red-600 text-white",
    "bestseller": "bg-yellow-500 text-black",
    "popular": "bg-blue-500 text-white",
    "trending": "bg-purple-500 text-white",
    "new": "bg-green-500 text-white",
}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values.

    ``round()`` uses banker's rounding, which would turn 12.5 into 12.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# --- Flags ----------------------------------------------------------------


def is_new_product(product: Product) -> bool:
    """Few reviews means recently listed."""
    return product.rating.count < NEW_PRODUCT_RATING_COUNT


def is_on_sale(product: Product) -> bool:
    """Anything under the sale threshold is treated as discounted."""
    return product.price < SALE_THRESHOLD


def calculate_discount_percentage(product: Product) -> int:
    """Estimated discount (whole percent) for sale products, else 0."""
    if not is_on_sale(product) or product.price <= 0:
        return 0
    multiplier = CATEGORY_PRICE_MULTIPLIERS.get(
        product.category, DEFAULT_PRICE_MULTIPLIER
    )
    estimated_original = product.price * multiplier
    discount = (estimated_original - product.price) / estimated_original
    return int(round_half_up(discount * 100))


def calculate_popularity_score(product: Product) -> float:
    """Weighted rating (70%) plus capped review volume (30%), in [0, 1]."""
    rate = min(max(product.rating.rate, 0.0), 5.0)
    count = max(product.rating.count, 0)
    rating_score = (rate / 5) * 0.7
    count_score = min(count / POPULARITY_COUNT_CAP, 1) * 0.3
    return round_half_up(rating_score + count_score, 2)


def is_popular_product(product: Product) -> bool:
    """Well rated and widely reviewed."""
    return (
        product.rating.rate >= POPULAR_RATING_MIN
        and product.rating.count >= POPULAR_COUNT_MIN
    )


def is_trending_product(product: Product) -> bool:
    """Good rating combined with a high popularity score."""
    return (
        product.rating.rate >= TRENDING_RATING_MIN
        and calculate_popularity_score(product) > TRENDING_SCORE_MIN
    )


def is_bestseller(product: Product) -> bool:
    """Top rated with a large review base."""
    return (
        product.rating.rate >= BESTSELLER_RATING_MIN
        and product.rating.count >= BESTSELLER_COUNT_MIN
    )


# --- Stock (simulated from review count) -----------------------------------


def get_stock_count(product: Product) -> int:
    """Simulated units on hand."""
    return product.rating.count


def get_stock_status(product: Product) -> StockStatus:
    """Map the simulated stock count to a status."""
    stock = get_stock_count(product)
    if stock <= 0:
        return "out-of-stock"
    if stock < LOW_STOCK_THRESHOLD:
        return "low-stock"
    return "in-stock"


def get_availability_status(product: Product) -> AvailabilityStatus:
    """Customer-facing availability derived from stock status."""
    status = get_stock_status(product)
    if status == "out-of-stock":
        return "unavailable"
    if status == "low-stock":
        return "limited"
    return "available"


# --- Categories -----------------------------------------------------------


def get_price_category(product: Product) -> PriceCategory:
    """Bucket by price; each threshold is an exclusive upper bound."""
    if product.price < BUDGET_MAX:
        return "budget"
    if product.price < MID_RANGE_MAX:
        return "mid-range"
    return "premium"


def get_rating_category(product: Product) -> RatingCategory:
    """Bucket by average review score."""
    rate = product.rating.rate
    if rate < 2.5:
        return "poor"
    if rate < 3.5:
        return "fair"
    if rate < 4.5:
        return "good"
    return "excellent"


# --- Badges ---------------------------------------------------------------


def _badge(badge_type: BadgeType, label: str) -> Badge:
    return Badge(
        type=badge_type,
        label=label,
        color=BADGE_COLORS[badge_type],
        priority=BADGE_PRIORITIES[badge_type],
    )


def generate_product_badges(product: Product) -> tuple[Badge, ...]:
    """All applicable badges, highest priority first.

    Each badge is evaluated independently, so a product can carry
    several at once (e.g. new and sale).  Out-of-stock and low-stock
    are exclusive because both come from a single stock status.
    """
    badges: list[Badge] = []
    stock_status = get_stock_status(product)

    if stock_status == "out-of-stock":
        badges.append(_badge("out-of-stock", "Out of Stock"))
    elif stock_status == "low-stock":
        badges.append(
            _badge("low-stock", f"Only {get_stock_count(product)} left")
        )

    if is_on_sale(product):
        discount = calculate_discount_percentage(product)
        badges.append(
            _badge("sale", f"{discount}% OFF" if discount > 0 else "Sale")
        )

    if is_bestseller(product):
        badges.append(_badge("bestseller", "Bestseller"))

    if is_popular_product(product):
        badges.append(_badge("popular", "Popular"))

    if is_trending_product(product):
        badges.append(_badge("trending", "Trending"))

    if is_new_product(product):
        badges.append(_badge("new", "New"))

    return tuple(sorted(badges, key=lambda b: b.priority, reverse=True))


def get_primary_badge(product: Product) -> Badge | None:
    """The single most important badge, if any."""
    badges = generate_product_badges(product)
    return badges[0] if badges else None


# --- Enhancement ----------------------------------------------------------


def enhance_product(product: Product) -> EnhancedProduct:
    """Attach every computed property to *product*.

    Only the base catalog fields are read, so enhancing an already
    enhanced product yields an equal value.
    """
    on_sale = is_on_sale(product)
    discount = calculate_discount_percentage(product)
    original_price: float | None = None
    if on_sale and discount > 0:
        original_price = round_half_up(
            product.price / (1 - discount / 100), 2
        )

    return EnhancedProduct(
        id=product.id,
        title=product.title,
        price=product.price,
        description=product.description,
        category=product.category,
        image=product.image,
        rating=product.rating,
        is_new=is_new_product(product),
        is_on_sale=on_sale,
        is_popular=is_popular_product(product),
        is_trending=is_trending_product(product),
        stock_status=get_stock_status(product),
        stock_count=get_stock_count(product),
        discount_percentage=discount,
        original_price=original_price,
        popularity_score=calculate_popularity_score(product),
        badges=generate_product_badges(product),
        price_category=get_price_category(product),
        rating_category=get_rating_category(product),
        availability_status=get_availability_status(product),
    )


def enhance_products(products: list[Product]) -> list[EnhancedProduct]:
    """Enhance every product, preserving order."""
    return [enhance_product(p) for p in products]
