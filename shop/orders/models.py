# module shop.orders.models
"""
Commandes (table orders) et leurs lignes figées (table order_items).
- total_amount et price sont des chaînes décimales, figées à la création.
- stripe_session_id / stripe_payment_intent_id: références externes Stripe.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel

from shop.money import MoneyStr


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


# Statuts d'origine acceptés pour chaque statut cible: un état terminal ne peut
# qu'être ré-affirmé, jamais quitté.
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PAID: frozenset({OrderStatus.PENDING, OrderStatus.PAID}),
    OrderStatus.FAILED: frozenset({OrderStatus.PENDING, OrderStatus.FAILED}),
}


class Order(BaseModel):
    id: int
    user_id: int
    total_amount: MoneyStr
    currency: str
    status: OrderStatus = OrderStatus.PENDING
    shipping_address: Optional[str] = None
    stripe_session_id: Optional[str] = None
    stripe_payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderItemProduct(BaseModel):
    id: int
    name: str
    image_url: Optional[str] = None


class OrderItem(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: MoneyStr
    currency: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[OrderItemProduct] = None


class NewOrderItem(BaseModel):
    """Ligne à figer au moment du checkout (prix et devise copiés depuis le produit)."""
    product_id: int
    quantity: int
    price: MoneyStr
    currency: str
