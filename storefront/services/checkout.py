"""
Checkout totals - shipping and tax over the cart subtotal.

The cart engine only supplies the pre-tax, pre-shipping subtotal. Both the
cart page estimate and the checkout page use this module so their constants
live in one place:

- cart estimate: 25.00 shipping, free above a 500.00 subtotal, 8% tax
- checkout:      flat 15.00 shipping, 8% tax
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from storefront.services.money import ZERO, add, format_money, percent, round_money, to_decimal, to_float


@dataclass(frozen=True)
class ShippingPolicy:
    flat_rate: Decimal
    free_threshold: Optional[Decimal] = None  # free when subtotal is strictly above

    def cost(self, subtotal: Decimal) -> Decimal:
        if self.free_threshold is not None and subtotal > self.free_threshold:
            return ZERO
        return round_money(self.flat_rate)


@dataclass(frozen=True)
class CheckoutPolicy:
    tax_rate: Decimal
    shipping: ShippingPolicy


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0

    def to_dict(self, currency: str = "USD") -> dict:
        """Floats for calculations plus formatted strings for display."""
        amounts = {
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "total": self.total,
        }
        data: dict = {name: to_float(value) for name, value in amounts.items()}
        data["display"] = {name: format_money(value, currency) for name, value in amounts.items()}
        data["free_shipping"] = self.free_shipping
        return data


TAX_RATE = Decimal("0.08")

CART_POLICY = CheckoutPolicy(
    tax_rate=TAX_RATE,
    shipping=ShippingPolicy(flat_rate=Decimal("25.00"), free_threshold=Decimal("500.00")),
)

CHECKOUT_POLICY = CheckoutPolicy(
    tax_rate=TAX_RATE,
    shipping=ShippingPolicy(flat_rate=Decimal("15.00")),
)

POLICIES = {
    "cart": CART_POLICY,
    "checkout": CHECKOUT_POLICY,
}


def get_policy(stage: str) -> CheckoutPolicy:
    """
    Raises:
        KeyError: Unknown stage
    """
    return POLICIES[stage]


def calculate_order_totals(
    items: Sequence[object],
    subtotal: Decimal,
    policy: CheckoutPolicy = CART_POLICY,
) -> OrderTotals:
    """
    Overlay shipping and tax on a cart subtotal.

    Args:
        items: Cart items (only emptiness is checked)
        subtotal: Cart total price before shipping and tax
        policy: Shipping and tax constants

    Returns:
        OrderTotals; an empty cart costs nothing
    """
    if not items:
        return OrderTotals(subtotal=ZERO, shipping=ZERO, tax=ZERO, total=ZERO)

    subtotal = round_money(to_decimal(subtotal))
    shipping = policy.shipping.cost(subtotal)
    tax = percent(subtotal, policy.tax_rate)
    total = round_money(add(add(subtotal, shipping), tax))
    return OrderTotals(subtotal=subtotal, shipping=shipping, tax=tax, total=total)
