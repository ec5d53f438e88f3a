# module shop.carts.models
"""Enregistrements du panier (tables carts, cart_items) et instantané produit joint."""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shop.money import MoneyStr, to_decimal


class CartStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class ProductSnapshot(BaseModel):
    """Colonnes de products jointes à une ligne de panier (prix courant, pas un instantané figé)."""
    id: int
    name: str
    description: Optional[str] = None
    price: MoneyStr
    currency: str
    image_url: Optional[str] = None
    stock: int = 0

    @property
    def unit_price(self) -> Decimal:
        return to_decimal(self.price)


class Cart(BaseModel):
    id: int
    user_id: int
    status: CartStatus = CartStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartItem(BaseModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int = Field(ge=1)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[ProductSnapshot] = None

    @property
    def line_total(self) -> Decimal:
        if self.product is None:
            return Decimal("0")
        return self.product.unit_price * self.quantity
