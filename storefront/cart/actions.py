"""Cart actions accepted by the reducer."""
from dataclasses import dataclass

from .models import CartItem


@dataclass(frozen=True)
class AddItem:
    """Add `quantity` units of `item`; repeated adds of the same id accumulate."""
    item: CartItem
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem:
    item_id: str | int


@dataclass(frozen=True)
class UpdateQuantity:
    """Set an absolute quantity; zero or less removes the line."""
    item_id: str | int
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = AddItem | RemoveItem | UpdateQuantity | ClearCart
