"""
Accès aux données pour la feature 'orders' (tables orders, order_items, jointure products).
"""
from typing import Any, Dict, Iterable, List, Optional
import logging

from supabase import Client

from shop.infra.repository import TableRepository
from .models import ALLOWED_TRANSITIONS, NewOrderItem, Order, OrderItem, OrderStatus

logger = logging.getLogger(__name__)

ORDER_ITEM_COLUMNS = (
    "id, order_id, product_id, quantity, price, currency, created_at, updated_at, "
    "product:products(id, name, image_url)"
)

# Colonnes modifiables via update(); le reste est figé à la création
UPDATABLE_FIELDS = {"status", "stripe_session_id", "stripe_payment_intent_id", "shipping_address"}

# module shop.orders.repository
class OrderRepository:
    def __init__(self, client: Optional[Client] = None):
        self.orders = TableRepository("orders", Order, client=client)
        self.items = TableRepository("order_items", OrderItem, client=client)

    def create(
        self,
        *,
        user_id: int,
        total_amount: str,
        currency: str,
        shipping_address: Optional[str] = None,
    ) -> Order:
        """Crée une commande, toujours en 'pending'."""
        data: Dict[str, Any] = {
            "user_id": user_id,
            "total_amount": total_amount,
            "currency": currency,
            "status": OrderStatus.PENDING.value,
        }
        if shipping_address:
            data["shipping_address"] = shipping_address
        return self.orders.create(data)

    def create_order_items(self, order_id: int, items: Iterable[NewOrderItem]) -> List[OrderItem]:
        return self.items.create_many(
            {"order_id": order_id, **item.model_dump()} for item in items
        )

    def update(self, order_id: int, patch: Dict[str, Any]) -> Optional[Order]:
        """Patch partiel (updated_at rafraîchi). Les champs inconnus sont refusés."""
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Champs non modifiables: {sorted(unknown)}")
        return self.orders.update(order_id, _serialize(patch))

    def update_status(self, order_id: int, status: OrderStatus, **patch: Any) -> Optional[Order]:
        """
        Transition conditionnelle: l'écriture n'a lieu que si le statut courant
        l'autorise (pending -> paid|failed, ou ré-affirmation du même état terminal).
        Retourne None si la commande n'existe pas ou si la transition est refusée.
        """
        allowed = [s.value for s in ALLOWED_TRANSITIONS[status]]
        return self.orders.update(
            order_id,
            _serialize({**patch, "status": status}),
            only_if={"status": allowed},
        )

    def find_by_id(self, order_id: int) -> Optional[Order]:
        return self.orders.find_by_id(order_id)

    def find_by_external_session_ref(self, session_ref: str) -> Optional[Order]:
        return self.orders.find_one_by({"stripe_session_id": session_ref})

    def find_by_user_id(self, user_id: int) -> List[Order]:
        return self.orders.find_by({"user_id": user_id}, order_by="created_at", desc=True)

    def get_order_items(self, order_id: int) -> List[OrderItem]:
        return self.items.find_by({"order_id": order_id}, columns=ORDER_ITEM_COLUMNS, order_by="created_at")


def _serialize(patch: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (v.value if isinstance(v, OrderStatus) else v) for k, v in patch.items()}
