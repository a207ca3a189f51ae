"""
Cart Reducer - pure state transitions.

Each action type maps to a pure transform over the item tuple; the reducer
rebuilds the CartState (and its aggregates) from the transformed items.
No I/O, no hidden state: the same state and action always give an equal result.
"""
from typing import Callable, Optional

from storefront.logging import get_logger, sanitize_id_for_logging
from .actions import AddItem, ClearCart, RemoveItem, UpdateQuantity
from .models import CartItem, CartState, is_valid_quantity

logger = get_logger(__name__)

Items = tuple[CartItem, ...]


def _index_of(items: Items, item_id) -> Optional[int]:
    return next((i for i, item in enumerate(items) if item.id == item_id), None)


def without_item(items: Items, item_id) -> Items:
    """Drop the line with `item_id`; unchanged if absent."""
    if _index_of(items, item_id) is None:
        return items
    return tuple(item for item in items if item.id != item_id)


def with_quantity(items: Items, item_id, quantity: int) -> Items:
    """Set the quantity of an existing line; unchanged if absent."""
    index = _index_of(items, item_id)
    if index is None:
        return items
    updated = list(items)
    updated[index] = items[index].with_quantity(quantity)
    return tuple(updated)


def _add_item(items: Items, action: AddItem) -> Items:
    if not isinstance(action.item, CartItem):
        logger.debug(f"Ignoring AddItem with non-item payload {type(action.item).__name__}")
        return items
    if not is_valid_quantity(action.quantity):
        # Rejected: non-positive, non-integer or oversized add quantities leave the cart as is
        logger.debug(
            f"Ignoring AddItem for {sanitize_id_for_logging(action.item.id)} "
            f"with quantity {action.quantity!r}"
        )
        return items

    index = _index_of(items, action.item.id)
    if index is None:
        return items + (action.item.with_quantity(action.quantity),)

    existing = items[index]
    merged = existing.quantity + action.quantity
    if not is_valid_quantity(merged):
        logger.debug(f"Ignoring AddItem for {sanitize_id_for_logging(existing.id)}: quantity {merged} out of range")
        return items
    return with_quantity(items, existing.id, merged)


def _remove_item(items: Items, action: RemoveItem) -> Items:
    return without_item(items, action.item_id)


def _update_quantity(items: Items, action: UpdateQuantity) -> Items:
    quantity = action.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        logger.debug(f"Ignoring UpdateQuantity with quantity {quantity!r}")
        return items
    if quantity <= 0:
        return without_item(items, action.item_id)
    if not is_valid_quantity(quantity):
        logger.debug(f"Ignoring UpdateQuantity with quantity {quantity} out of range")
        return items
    return with_quantity(items, action.item_id, quantity)


_TRANSITIONS: dict[type, Callable[[Items, object], Items]] = {
    AddItem: _add_item,
    RemoveItem: _remove_item,
    UpdateQuantity: _update_quantity,
}


def reduce(state: CartState, action: object) -> CartState:
    """
    Compute the next cart state.

    Args:
        state: Current cart state
        action: AddItem, RemoveItem, UpdateQuantity or ClearCart

    Returns:
        Next state. Unknown actions and no-op transitions return `state` itself.
    """
    if isinstance(action, ClearCart):
        return CartState.empty()

    transition = _TRANSITIONS.get(type(action))
    if transition is None:
        return state

    items = transition(state.items, action)
    if items is state.items:
        return state
    return CartState.from_items(items)
