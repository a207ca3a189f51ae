"""
Storefront Core Module

This package contains the cart state engine and its collaborators:
- cart: reducer, persistence adapter and observable cart store
- db: key-value storage backends (memory, file, Upstash Redis)
- services: money utilities and checkout totals
- routers: FastAPI endpoints for the consumer-facing cart API

Note: Imports are lazy so the engine can be used without loading FastAPI.
"""

__all__ = [
    "CartStore",
    "get_cart_store",
]


def __getattr__(name):
    """Lazy attribute access for clean module loading."""
    if name == "CartStore":
        from storefront.cart import CartStore
        return CartStore
    if name == "get_cart_store":
        from storefront.cart import get_cart_store
        return get_cart_store
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
