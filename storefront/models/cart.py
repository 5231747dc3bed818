# storefront/models/cart.py

"""Cart value types. Totals are always derived from the items."""

from dataclasses import dataclass, replace

from storefront.models.product import Product


@dataclass(frozen=True)
class CartItem:
    """A product snapshot and how many of it are in the cart."""

    product: Product
    quantity: int

    @property
    def line_total(self) -> float:
        """Price times quantity for this line."""
        return self.product.price * self.quantity


def calculate_cart_total(items: tuple[CartItem, ...]) -> float:
    """Sum of price x quantity over all items."""
    return sum((item.line_total for item in items), 0.0)


def calculate_item_count(items: tuple[CartItem, ...]) -> int:
    """Sum of quantities over all items."""
    return sum(item.quantity for item in items)


@dataclass(frozen=True)
class CartState:
    """Immutable snapshot of the cart, replaced on every change."""

    items: tuple[CartItem, ...] = ()
    total: float = 0.0
    item_count: int = 0
    loading_items: frozenset[int] = frozenset()
    cart_loading: bool = False
    last_added_item: Product | None = None
    show_confirmation: bool = False
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        """True while any item or whole-cart operation is in flight."""
        return self.cart_loading or bool(self.loading_items)

    def with_items(self, items: tuple[CartItem, ...]) -> "CartState":
        """Return a copy holding *items* with totals recomputed.

        Items with a non-positive quantity are dropped here so they can
        never reach a published state.
        """
        kept = tuple(item for item in items if item.quantity > 0)
        return replace(
            self,
            items=kept,
            total=calculate_cart_total(kept),
            item_count=calculate_item_count(kept),
        )

    def find(self, product_id: int) -> CartItem | None:
        """Return the item for *product_id*, if present."""
        for item in self.items:
            if item.product.id == product_id:
                return item
        return None
