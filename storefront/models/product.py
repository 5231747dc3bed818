# storefront/models/product.py

"""Catalog product models shared across the engine."""

from dataclasses import dataclass, field
from typing import Any, Literal

BadgeType = Literal[
    "new",
    "sale",
    "popular",
    "low-stock",
    "out-of-stock",
    "trending",
    "bestseller",
]
StockStatus = Literal["in-stock", "low-stock", "out-of-stock"]
PriceCategory = Literal["budget", "mid-range", "premium"]
RatingCategory = Literal["poor", "fair", "good", "excellent"]
AvailabilityStatus = Literal["available", "limited", "unavailable"]


@dataclass(frozen=True)
class Rating:
    """Average review score (0..5) and number of reviews."""

    rate: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class Product:
    """A single catalog record as served by the product API."""

    id: int
    title: str
    price: float
    description: str = ""
    category: str = ""
    image: str = ""
    rating: Rating = field(default_factory=Rating)

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "Product":
        """Build a Product from a catalog JSON record.

        Raises ``KeyError`` / ``TypeError`` / ``ValueError`` when the
        record lacks an id, title or price, or holds non-numeric values.
        """
        raw_rating: dict[str, Any] = record.get("rating") or {}
        return cls(
            id=int(record["id"]),
            title=str(record["title"]),
            price=float(record["price"]),
            description=str(record.get("description") or ""),
            category=str(record.get("category") or ""),
            image=str(record.get("image") or ""),
            rating=Rating(
                rate=float(raw_rating.get("rate", 0.0)),
                count=int(raw_rating.get("count", 0)),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to the catalog JSON shape."""
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "image": self.image,
            "rating": {
                "rate": self.rating.rate,
                "count": self.rating.count,
            },
        }


@dataclass(frozen=True)
class Badge:
    """A display badge derived from product metadata."""

    type: BadgeType
    label: str
    color: str
    priority: int


@dataclass(frozen=True)
class EnhancedProduct(Product):
    """A Product plus the flags and categories computed by the classifier.

    Never persisted; rebuilt from the base fields whenever needed.
    """

    is_new: bool = False
    is_on_sale: bool = False
    is_popular: bool = False
    is_trending: bool = False
    stock_status: StockStatus = "in-stock"
    stock_count: int = 0
    discount_percentage: int = 0
    original_price: float | None = None
    popularity_score: float = 0.0
    badges: tuple[Badge, ...] = ()
    price_category: PriceCategory = "budget"
    rating_category: RatingCategory = "poor"
    availability_status: AvailabilityStatus = "available"

    def to_dict(self) -> dict[str, Any]:
        """Serialise including computed fields."""
        data = super().to_dict()
        data.update(
            {
                "is_new": self.is_new,
                "is_on_sale": self.is_on_sale,
                "is_popular": self.is_popular,
                "is_trending": self.is_trending,
                "stock_status": self.stock_status,
                "stock_count": self.stock_count,
                "discount_percentage": self.discount_percentage,
                "original_price": self.original_price,
                "popularity_score": self.popularity_score,
                "badges": [
                    {
                        "type": b.type,
                        "label": b.label,
                        "priority": b.priority,
                    }
                    for b in self.badges
                ],
                "price_category": self.price_category,
                "rating_category": self.rating_category,
                "availability_status": self.availability_status,
            }
        )
        return data
