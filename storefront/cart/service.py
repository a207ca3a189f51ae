"""Cart store: reducer + write-through persistence behind one observable unit."""
import os
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from storefront.db import StorageKeys, get_storage_backend
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.money import to_float
from .actions import AddItem, ClearCart, RemoveItem, UpdateQuantity
from .models import CartItem, CartState
from .reducer import reduce
from .storage import CartPersistence

logger = get_logger(__name__)

Listener = Callable[[CartState], None]


class CartStore:
    """
    Owns the authoritative CartState.

    Every dispatch runs to completion before returning:
    reduce -> publish (state + listeners) -> save.
    Consumers get immutable snapshots; `dispatch` is the only mutation path.

    Usage:
        store = CartStore(CartPersistence(MemoryStore()))
        store.add_item(CartItem(id="A", name="Mug", price="10.00"), 2)
        store.total_price  # Decimal("20.00")
    """

    def __init__(self, persistence: CartPersistence):
        self._persistence = persistence
        self._listeners: list[Listener] = []
        self._state = persistence.load()

    # ==================== SELECTORS ====================

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._state.items

    @property
    def total_items(self) -> int:
        return self._state.total_items

    @property
    def total_price(self) -> Decimal:
        return self._state.total_price

    @property
    def is_empty(self) -> bool:
        return self._state.is_empty

    def get_item(self, item_id: str | int) -> Optional[CartItem]:
        return self._state.get_item(item_id)

    # ==================== DISPATCH ====================

    def dispatch(self, action: object) -> CartState:
        """
        Apply an action and persist the result.

        Transitions that leave the state unchanged are neither published nor saved.
        """
        next_state = reduce(self._state, action)
        if next_state == self._state:
            return self._state

        self._state = next_state
        self._notify(next_state)
        self._persistence.save(next_state)
        return next_state

    def add_item(self, item: CartItem | Mapping[str, Any], quantity: int = 1) -> CartState:
        """
        Add `quantity` units of a product.

        `item` may be a CartItem or a product mapping with id, name, price and
        optional display fields. An invalid mapping leaves the cart unchanged.
        """
        if not isinstance(item, CartItem):
            try:
                item = CartItem.from_product(item)
            except (KeyError, TypeError, ValueError, RecursionError) as e:
                logger.warning(f"Rejected invalid cart item: {e}")
                return self._state
        return self.dispatch(AddItem(item=item, quantity=quantity))

    def remove_item(self, item_id: str | int) -> CartState:
        return self.dispatch(RemoveItem(item_id=item_id))

    def update_quantity(self, item_id: str | int, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(item_id=item_id, quantity=quantity))

    def clear_cart(self) -> CartState:
        return self.dispatch(ClearCart())

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with each new state.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, state: CartState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Cart listener failed")

    def summary(self) -> dict:
        """JSON-friendly view of the current cart."""
        state = self._state
        return {
            "items": [
                {
                    **item.to_dict(),
                    "price": to_float(item.price),
                    "subtotal": to_float(item.subtotal),
                }
                for item in state.items
            ],
            "total_items": state.total_items,
            "total_price": to_float(state.total_price),
            "is_empty": state.is_empty,
        }

    def __repr__(self) -> str:
        ids = ", ".join(sanitize_id_for_logging(item.id) for item in self._state.items)
        return f"<CartStore items=[{ids}] total={self._state.total_price}>"


# Singleton instance
_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """Get CartStore singleton built from environment configuration."""
    global _cart_store
    if _cart_store is None:
        key = os.environ.get("CART_STORAGE_KEY") or StorageKeys.cart_key()
        _cart_store = CartStore(CartPersistence(get_storage_backend(), key=key))
    return _cart_store
