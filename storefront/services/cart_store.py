# storefront/services/cart_store.py

"""Async shopping cart with per-item loading state.

Every mutation runs in two phases.  The change is validated and staged
as a pure transform of the item tuple before any I/O; the transform is
applied only after the backend call succeeds, against whatever the cart
holds at that moment.  A failed backend call therefore leaves the cart
exactly as it was, records ``error`` and still clears the loading flag.

The store does not serialise operations on the same product: callers
should treat an id in ``loading_items`` as busy.  An id stays in
``loading_items`` until every overlapping call on it has resolved.
Concurrent quantity updates race and the last one to complete wins.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, Protocol

from storefront.config.settings import Settings
from storefront.models.cart import CartItem, CartState
from storefront.models.product import Product

logger = logging.getLogger("storefront.cart")

ADD_ERROR = "Failed to add item to cart. Please try again."
REMOVE_ERROR = "Failed to remove item from cart. Please try again."
UPDATE_ERROR = "Failed to update quantity. Please try again."
CLEAR_ERROR = "Failed to clear cart. Please try again."

CartTransform = Callable[[tuple[CartItem, ...]], tuple[CartItem, ...]]
CartListener = Callable[[CartState], None]


class CartBackend(Protocol):
    """Remote side of the cart; each call completes or raises."""

    async def add_item(self, product: Product, quantity: int) -> None: ...

    async def remove_item(self, product_id: int) -> None: ...

    async def update_quantity(self, product_id: int, quantity: int) -> None: ...

    async def clear(self) -> None: ...


class SimulatedCartBackend:
    """Backend that only waits, standing in for a cart API."""

    def __init__(
        self,
        add_delay: float = Settings.CART_ADD_DELAY,
        update_delay: float = Settings.CART_UPDATE_DELAY,
        remove_delay: float = Settings.CART_REMOVE_DELAY,
        clear_delay: float = Settings.CART_CLEAR_DELAY,
    ) -> None:
        self.add_delay = add_delay
        self.update_delay = update_delay
        self.remove_delay = remove_delay
        self.clear_delay = clear_delay

    async def add_item(self, product: Product, quantity: int) -> None:
        await asyncio.sleep(self.add_delay)

    async def remove_item(self, product_id: int) -> None:
        await asyncio.sleep(self.remove_delay)

    async def update_quantity(self, product_id: int, quantity: int) -> None:
        await asyncio.sleep(self.update_delay)

    async def clear(self) -> None:
        await asyncio.sleep(self.clear_delay)


# ── Transforms ───────────────────────────────────────────


def _merge_item(product: Product, quantity: int) -> CartTransform:
    def apply(items: tuple[CartItem, ...]) -> tuple[CartItem, ...]:
        if any(item.product.id == product.id for item in items):
            return tuple(
                replace(item, quantity=item.quantity + quantity)
                if item.product.id == product.id
                else item
                for item in items
            )
        return (*items, CartItem(product=product, quantity=quantity))

    return apply


def _drop_item(product_id: int) -> CartTransform:
    def apply(items: tuple[CartItem, ...]) -> tuple[CartItem, ...]:
        return tuple(i for i in items if i.product.id != product_id)

    return apply


def _set_quantity(product_id: int, quantity: int) -> CartTransform:
    def apply(items: tuple[CartItem, ...]) -> tuple[CartItem, ...]:
        return tuple(
            replace(item, quantity=quantity)
            if item.product.id == product_id
            else item
            for item in items
        )

    return apply


class CartStore:
    """Authoritative cart state for one shopping session."""

    def __init__(
        self,
        backend: CartBackend | None = None,
        confirmation_timeout: float | None = None,
    ) -> None:
        self._backend: CartBackend = backend or SimulatedCartBackend()
        self._confirmation_timeout: float = (
            Settings.CONFIRMATION_TIMEOUT
            if confirmation_timeout is None
            else confirmation_timeout
        )
        self._state = CartState()
        self._listeners: list[CartListener] = []
        self._in_flight: Counter[int] = Counter()
        self._confirmation_handle: asyncio.TimerHandle | None = None

    # ── State plumbing ───────────────────────────────────

    @property
    def state(self) -> CartState:
        """The current immutable snapshot."""
        return self._state

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Call *listener* with every new state; returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: CartState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.error("Cart listener failed", exc_info=True)

    def _set_loading(self, product_id: int, loading: bool) -> None:
        # An id stays loading until every overlapping call on it resolves
        if loading:
            self._in_flight[product_id] += 1
        else:
            self._in_flight[product_id] -= 1
            if self._in_flight[product_id] <= 0:
                del self._in_flight[product_id]
        self._set_state(
            replace(self._state, loading_items=frozenset(self._in_flight))
        )

    async def _run_item_operation(
        self,
        product_id: int,
        io: Callable[[], Awaitable[None]],
        transform: CartTransform,
        error_message: str,
        **on_success: Any,
    ) -> bool:
        """Mark loading, await *io*, then commit *transform*.

        Returns ``True`` when the change was committed.
        """
        self._set_loading(product_id, True)
        try:
            await io()
        except Exception:
            logger.error(
                "Cart operation failed for product %d", product_id,
                exc_info=True,
            )
            self._set_state(replace(self._state, error=error_message))
            return False
        else:
            committed = self._state.with_items(transform(self._state.items))
            self._set_state(replace(committed, error=None, **on_success))
            logger.debug(
                "Cart committed: %d items, total %.2f",
                committed.item_count,
                committed.total,
            )
            return True
        finally:
            self._set_loading(product_id, False)

    # ── Mutations ────────────────────────────────────────

    async def add_to_cart(self, product: Product, quantity: int = 1) -> bool:
        """Add *quantity* of *product*, merging with an existing line.

        Raises ``ValueError`` for a quantity below 1 before touching
        any state.
        """
        if quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {quantity}")

        committed = await self._run_item_operation(
            product.id,
            lambda: self._backend.add_item(product, quantity),
            _merge_item(product, quantity),
            ADD_ERROR,
            last_added_item=product,
            show_confirmation=True,
        )
        if committed:
            logger.info("Added %d x product %d", quantity, product.id)
            self._schedule_confirmation_reset()
        return committed

    async def remove_from_cart(self, product_id: int) -> bool:
        """Remove the line for *product_id*; unknown ids are a no-op."""
        committed = await self._run_item_operation(
            product_id,
            lambda: self._backend.remove_item(product_id),
            _drop_item(product_id),
            REMOVE_ERROR,
        )
        if committed:
            logger.info("Removed product %d", product_id)
        return committed

    async def update_quantity(self, product_id: int, new_quantity: int) -> bool:
        """Set the quantity of an existing line.

        A quantity of zero or less removes the line entirely.  Ids not
        in the cart are left alone.
        """
        if new_quantity <= 0:
            return await self.remove_from_cart(product_id)

        committed = await self._run_item_operation(
            product_id,
            lambda: self._backend.update_quantity(product_id, new_quantity),
            _set_quantity(product_id, new_quantity),
            UPDATE_ERROR,
        )
        if committed:
            logger.info(
                "Set product %d quantity to %d", product_id, new_quantity
            )
        return committed

    async def clear_cart(self) -> bool:
        """Empty the cart and reset all transient feedback."""
        self._set_state(replace(self._state, cart_loading=True))
        try:
            await self._backend.clear()
        except Exception:
            logger.error("Clearing the cart failed", exc_info=True)
            self._set_state(replace(self._state, error=CLEAR_ERROR))
            return False
        else:
            self._cancel_confirmation_reset()
            self._set_state(CartState())
            logger.info("Cart cleared")
            return True
        finally:
            if self._state.cart_loading:
                self._set_state(replace(self._state, cart_loading=False))

    # ── Transient feedback ───────────────────────────────

    def clear_confirmation(self) -> None:
        """Hide the "added to cart" confirmation."""
        self._cancel_confirmation_reset()
        self._set_state(
            replace(self._state, show_confirmation=False, last_added_item=None)
        )

    def clear_error(self) -> None:
        self._set_state(replace(self._state, error=None))

    def _schedule_confirmation_reset(self) -> None:
        # A newer add re-arms the timer so its confirmation stays visible
        self._cancel_confirmation_reset()
        loop = asyncio.get_running_loop()
        self._confirmation_handle = loop.call_later(
            self._confirmation_timeout, self.clear_confirmation
        )

    def _cancel_confirmation_reset(self) -> None:
        if self._confirmation_handle is not None:
            self._confirmation_handle.cancel()
            self._confirmation_handle = None

    # ── Queries ──────────────────────────────────────────

    def is_in_cart(self, product_id: int) -> bool:
        return self._state.find(product_id) is not None

    def get_item_quantity(self, product_id: int) -> int:
        """Quantity of *product_id* in the cart, 0 when absent."""
        item = self._state.find(product_id)
        return item.quantity if item else 0

    def is_item_loading(self, product_id: int) -> bool:
        return product_id in self._state.loading_items
