from typing import List
from fastapi import HTTPException

from .models import Order, OrderItem
from .repository import OrderRepository


class OrderService:
    """
    Logique applicative 'orders' (lecture): liste et détail des commandes d'un utilisateur.
    L'écriture des commandes relève du checkout (shop.payments.service).
    """

    def __init__(self, order_repository: OrderRepository):
        self.order_repository = order_repository

    def list_orders(self, user_id: int) -> List[Order]:
        return self.order_repository.find_by_user_id(user_id)

    def get_order(self, order_id: int, user_id: int) -> Order:
        """
        Détail d'une commande.
        - 404 si introuvable, 403 si elle appartient à un autre utilisateur.
        """
        order = self.order_repository.find_by_id(order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Commande introuvable")
        if order.user_id != user_id:
            raise HTTPException(status_code=403, detail="Commande appartenant à un autre utilisateur")
        return order

    def get_order_items(self, order_id: int) -> List[OrderItem]:
        return self.order_repository.get_order_items(order_id)
