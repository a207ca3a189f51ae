"""Cart package: models, reducer, persistence and store facade."""
from .actions import AddItem, RemoveItem, UpdateQuantity, ClearCart
from .models import CartItem, CartState
from .totals import CartTotals, aggregate
from .reducer import reduce
from .storage import CartPersistence, LoadResult
from .service import CartStore, get_cart_store

__all__ = [
    "AddItem",
    "RemoveItem",
    "UpdateQuantity",
    "ClearCart",
    "CartItem",
    "CartState",
    "CartTotals",
    "aggregate",
    "reduce",
    "CartPersistence",
    "LoadResult",
    "CartStore",
    "get_cart_store",
]
