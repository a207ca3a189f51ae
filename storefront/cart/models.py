"""Cart models with Decimal-based pricing."""
import copy
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from storefront.errors import ERROR_INVALID_ITEM, ERROR_INVALID_PRICE, ERROR_INVALID_QUANTITY
from storefront.services.money import parse_decimal
from .totals import aggregate, line_total

# Fields the engine understands; anything else on a record is display passthrough
ITEM_FIELDS = ("id", "name", "price", "quantity")

# Upper bounds keep every cart total well inside Decimal's 28-digit context
MAX_PRICE = Decimal("1000000000")
MAX_QUANTITY = 1_000_000


def is_valid_quantity(value: Any) -> bool:
    """Quantities are plain ints in 1..MAX_QUANTITY (bools are rejected)."""
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= MAX_QUANTITY


def is_valid_price(value: Optional[Decimal]) -> bool:
    return value is not None and 0 <= value <= MAX_PRICE


def is_valid_item_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return value != ""
    return isinstance(value, int)


@dataclass(frozen=True)
class CartItem:
    """Single product line in the cart."""
    id: str | int
    name: str
    price: Decimal
    quantity: int = 1
    extra: Mapping[str, Any] = field(default_factory=dict)  # image, variant, ... (not interpreted)

    def __post_init__(self):
        if not is_valid_item_id(self.id):
            raise ValueError(f"{ERROR_INVALID_ITEM}: id must be a non-empty string or integer")
        if not isinstance(self.name, str):
            raise ValueError(f"{ERROR_INVALID_ITEM}: name must be a string")

        price = parse_decimal(self.price)
        if not is_valid_price(price):
            raise ValueError(f"{ERROR_INVALID_PRICE}: {self.price!r}")
        if not is_valid_quantity(self.quantity):
            raise ValueError(f"{ERROR_INVALID_QUANTITY}: {self.quantity!r}")

        # Normalize numeric fields; extras become a read-only private copy
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "extra", MappingProxyType(copy.deepcopy(dict(self.extra))))

    @property
    def subtotal(self) -> Decimal:
        """Total price for all units."""
        return line_total(self)

    def with_quantity(self, quantity: int) -> "CartItem":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary (extras stay flat)."""
        data = copy.deepcopy(dict(self.extra))
        data.update({
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
        })
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartItem":
        """
        Create from dictionary.

        Raises:
            KeyError: If id, price or quantity is missing
            ValueError: If a field has an invalid value
        """
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            price=data["price"],
            quantity=data["quantity"],
            extra={k: v for k, v in data.items() if k not in ITEM_FIELDS},
        )

    @classmethod
    def from_product(cls, product: Mapping[str, Any]) -> "CartItem":
        """Build a line from a product record; any quantity on it is ignored."""
        return cls(
            id=product["id"],
            name=product.get("name", ""),
            price=product["price"],
            extra={k: v for k, v in product.items() if k not in ITEM_FIELDS},
        )


@dataclass(frozen=True)
class CartState:
    """
    Full cart snapshot.

    Aggregates are derived from `items` in `from_items` and never patched
    incrementally. Instances are immutable; compare them by value.
    """
    items: tuple[CartItem, ...] = ()
    total_items: int = 0
    total_price: Decimal = Decimal("0.00")

    @classmethod
    def empty(cls) -> "CartState":
        return cls()

    @classmethod
    def from_items(cls, items: Iterable[CartItem]) -> "CartState":
        items = tuple(items)
        totals = aggregate(items)
        return cls(items=items, total_items=totals.total_items, total_price=totals.total_price)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def get_item(self, item_id: str | int) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage (camelCase record layout)."""
        return {
            "items": [item.to_dict() for item in self.items],
            "totalItems": self.total_items,
            "totalPrice": str(self.total_price),
        }
