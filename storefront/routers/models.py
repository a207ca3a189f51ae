"""
Cart API Pydantic Models

Request bodies for the cart endpoints.
"""
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from storefront.cart.models import MAX_QUANTITY


class AddToCartRequest(BaseModel):
    id: str | int
    name: str = ""
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, gt=0, le=MAX_QUANTITY)
    extra: dict[str, Any] = Field(default_factory=dict)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(le=MAX_QUANTITY)  # zero or less removes the item
