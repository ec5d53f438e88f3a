"""
Cas d'usage 'carts': panier actif de l'utilisateur, créé paresseusement au premier ajout.
"""
from typing import Any, Dict, Optional
import logging

from shop.money import subtotal
from .models import CartItem
from .repository import CartRepository

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, cart_repository: CartRepository):
        self.cart_repository = cart_repository

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        """
        Panier actif + lignes + sous-total (prix produits courants, hors taxe).
        Sans panier actif: structure vide plutôt qu'une erreur (page panier vide).
        """
        cart = self.cart_repository.find_active_cart_by_user_id(user_id)
        if not cart:
            return {"cart": None, "items": [], "subtotal": "0"}
        items = self.cart_repository.get_cart_items(cart.id)
        total = subtotal((i.product.price, i.quantity) for i in items if i.product)
        return {"cart": cart, "items": items, "subtotal": str(total)}

    def add_to_cart(self, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        if quantity < 1:
            raise ValueError("La quantité doit être supérieure ou égale à 1")
        cart = self.cart_repository.find_active_cart_by_user_id(user_id)
        if not cart:
            cart = self.cart_repository.create(user_id)
            logger.info("carts.created cart_id=%s user_id=%s", cart.id, user_id)
        return self.cart_repository.add_to_cart(cart.id, product_id, quantity)

    def update_cart_item_quantity(self, user_id: int, cart_item_id: int, quantity: int) -> Optional[CartItem]:
        if quantity < 1:
            raise ValueError("La quantité doit être supérieure ou égale à 1")
        cart = self.cart_repository.find_active_cart_by_user_id(user_id)
        if not cart:
            return None
        if not self._owns_item(cart.id, cart_item_id):
            return None
        return self.cart_repository.update_cart_item_quantity(cart_item_id, quantity)

    def remove_from_cart(self, user_id: int, cart_item_id: int) -> bool:
        cart = self.cart_repository.find_active_cart_by_user_id(user_id)
        if not cart:
            return False
        if not self._owns_item(cart.id, cart_item_id):
            return False
        return self.cart_repository.remove_from_cart(cart_item_id)

    def _owns_item(self, cart_id: int, cart_item_id: int) -> bool:
        # Une ligne d'un autre panier n'est jamais modifiable via le panier courant
        return any(i.id == cart_item_id for i in self.cart_repository.get_cart_items(cart_id))
