"""
Cart Router

Consumer-facing cart endpoints. All amounts are returned as floats for
calculations; checkout totals also carry formatted display strings.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.cart import CartItem, CartStore, get_cart_store
from storefront.errors import ERROR_INVALID_ITEM
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.checkout import calculate_order_totals, get_policy
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _resolve_item_id(store: CartStore, item_id: str) -> Optional[str | int]:
    """Path params are strings; stored ids may be ints."""
    for item in store.items:
        if str(item.id) == item_id:
            return item.id
    return None


@router.get("/cart")
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Get the current cart."""
    return store.summary()


@router.post("/cart/items")
async def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add an item to the cart (repeated adds accumulate quantity)."""
    try:
        item = CartItem(id=request.id, name=request.name, price=request.price, extra=request.extra)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"{ERROR_INVALID_ITEM}: {e}")

    store.add_item(item, request.quantity)
    logger.info(f"Added {request.quantity}x {sanitize_id_for_logging(item.id)} to cart")
    return store.summary()


@router.put("/cart/items/{item_id}")
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Set item quantity; zero or less removes the item, an absent item is a no-op."""
    resolved = _resolve_item_id(store, item_id)
    if resolved is not None:
        store.update_quantity(resolved, request.quantity)
    return store.summary()


@router.delete("/cart/items/{item_id}")
async def remove_from_cart(item_id: str, store: CartStore = Depends(get_cart_store)):
    """Remove an item; removing an absent item is a no-op."""
    resolved = _resolve_item_id(store, item_id)
    if resolved is not None:
        store.remove_item(resolved)
    return store.summary()


@router.delete("/cart")
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    """Clear all items from the cart."""
    store.clear_cart()
    return store.summary()


@router.get("/cart/checkout")
async def get_checkout_totals(
    stage: str = Query(default="cart"),
    store: CartStore = Depends(get_cart_store),
):
    """Order totals (subtotal, shipping, tax) for the cart or checkout page."""
    try:
        policy = get_policy(stage)
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Unknown checkout stage: {stage}")

    totals = calculate_order_totals(store.items, store.total_price, policy)
    return {
        "stage": stage,
        "total_items": store.total_items,
        **totals.to_dict(),
    }
