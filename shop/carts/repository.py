"""
Accès aux données pour la feature 'carts' (tables carts, cart_items, jointure products).
"""
from typing import List, Optional
import logging

from supabase import Client

from shop.infra.repository import TableRepository
from .models import Cart, CartItem, CartStatus

logger = logging.getLogger(__name__)

CART_ITEM_COLUMNS = (
    "id, cart_id, product_id, quantity, created_at, updated_at, "
    "product:products(id, name, description, price, currency, image_url, stock)"
)

# module shop.carts.repository
class CartRepository:
    def __init__(self, client: Optional[Client] = None):
        self.carts = TableRepository("carts", Cart, client=client)
        self.items = TableRepository("cart_items", CartItem, client=client)

    def find_active_cart_by_user_id(self, user_id: int) -> Optional[Cart]:
        """Au plus un panier 'active' par utilisateur (garanti par requête, pas par contrainte)."""
        return self.carts.find_one_by({"user_id": user_id, "status": CartStatus.ACTIVE.value})

    def create(self, user_id: int) -> Cart:
        return self.carts.create({"user_id": user_id, "status": CartStatus.ACTIVE.value})

    def get_cart_items(self, cart_id: int) -> List[CartItem]:
        """Lignes du panier jointes à l'instantané produit (nom, prix courant, devise, image, stock)."""
        return self.items.find_by({"cart_id": cart_id}, columns=CART_ITEM_COLUMNS, order_by="created_at")

    def add_to_cart(self, cart_id: int, product_id: int, quantity: int = 1) -> CartItem:
        """
        Ajoute un produit au panier.
        - (cart_id, product_id) est unique: une ligne existante voit sa quantité incrémentée.
        """
        existing = self.items.find_one_by({"cart_id": cart_id, "product_id": product_id})
        if existing:
            updated = self.items.update(existing.id, {"quantity": existing.quantity + quantity})
            return updated or existing
        return self.items.create({"cart_id": cart_id, "product_id": product_id, "quantity": quantity})

    def update_cart_item_quantity(self, cart_item_id: int, quantity: int) -> Optional[CartItem]:
        return self.items.update(cart_item_id, {"quantity": quantity})

    def remove_from_cart(self, cart_item_id: int) -> bool:
        return self.items.delete(cart_item_id)

    def clear_cart(self, user_id: int) -> None:
        """
        Passe le panier actif de l'utilisateur en 'completed' (lignes conservées).
        - Aucun panier actif: no-op (cas d'un second appel après paiement).
        """
        cart = self.find_active_cart_by_user_id(user_id)
        if not cart:
            logger.info("carts.clear noop user_id=%s", user_id)
            return
        self.carts.update(
            cart.id,
            {"status": CartStatus.COMPLETED.value},
            only_if={"status": [CartStatus.ACTIVE.value]},
        )
        logger.info("carts.clear completed cart_id=%s user_id=%s", cart.id, user_id)
