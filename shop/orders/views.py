# module shop.orders.views
"""Endpoints des commandes de l'utilisateur (lecture seule)."""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from shop.dependencies import get_order_service
from shop.utils.security import require_user
from .service import OrderService

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])


@router.get("")
def list_orders(user: Dict[str, Any] = Depends(require_user), service: OrderService = Depends(get_order_service)):
    return {"orders": service.list_orders(int(user["id"]))}

@router.get("/{order_id}")
def get_order(
    order_id: int,
    user: Dict[str, Any] = Depends(require_user),
    service: OrderService = Depends(get_order_service),
):
    """Détail: commande + lignes figées (prix au moment du checkout)."""
    order = service.get_order(order_id, int(user["id"]))
    return {"order": order, "items": service.get_order_items(order.id)}
