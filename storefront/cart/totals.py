"""Monetary aggregation over cart items."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, TYPE_CHECKING

from storefront.services.money import multiply, round_money

if TYPE_CHECKING:
    from .models import CartItem


@dataclass(frozen=True)
class CartTotals:
    """Derived cart aggregates."""
    total_items: int
    total_price: Decimal


def line_total(item: "CartItem") -> Decimal:
    """Rounded price x quantity for a single line."""
    return round_money(multiply(item.price, item.quantity))


def aggregate(items: Iterable["CartItem"]) -> CartTotals:
    """
    Compute item count and total price for a collection of cart items.

    Line totals are summed exactly and the sum is rounded once, so
    19.99 + 3 x 0.02 is 20.05 and not an accumulation of rounded floats.

    Args:
        items: Cart items (any iterable)

    Returns:
        CartTotals; an empty input yields (0, Decimal("0.00"))
    """
    total_items = 0
    total_price = Decimal("0")
    for item in items:
        total_items += item.quantity
        total_price += multiply(item.price, item.quantity)
    return CartTotals(total_items=total_items, total_price=round_money(total_price))
