"""
Cas d'usage 'payments': orchestre panier, commandes, passerelle Stripe et URLs.

Machine d'états de Order.status:
  pending --(succès: retour Stripe ou webhook)--> paid    [terminal]
  pending --(échec: webhook)-------------------> failed  [terminal]

Les écritures commande -> lignes -> session Stripe sont séquentielles, sans
rollback: un échec Stripe laisse une commande 'pending' sans session, et un
nouveau checkout crée une nouvelle commande.
"""
from decimal import Decimal
from typing import Any, Dict, Optional
import logging

from shop import config
from shop.carts.repository import CartRepository
from shop.orders.models import NewOrderItem, OrderStatus
from shop.orders.repository import OrderRepository
from shop.urls.service import UrlService
from shop.money import subtotal
from .exceptions import (
    CartNotFound,
    CheckoutRedirect,
    CheckoutUrlUnavailable,
    EmptyCart,
    OrderNotFound,
    SessionCreationFailed,
)
from .gateway import StripeGateway
from .line_items import to_line_items
from .metadata import extract_order_id

logger = logging.getLogger(__name__)

# Événements webhook traités; les autres sont ignorés
SUCCESS_EVENTS = {"checkout.session.completed", "checkout.session.async_payment_succeeded"}
FAILURE_EVENTS = {"checkout.session.expired", "checkout.session.async_payment_failed"}


class CheckoutService:
    def __init__(
        self,
        cart_repository: CartRepository,
        order_repository: OrderRepository,
        gateway: StripeGateway,
        url_service: UrlService,
        *,
        currency: str = config.SHOP_CURRENCY,
        tax_rate: Decimal = config.TAX_RATE,
    ):
        self.cart_repository = cart_repository
        self.order_repository = order_repository
        self.gateway = gateway
        self.url_service = url_service
        self.currency = currency
        self.tax_rate = tax_rate

    def process_checkout(self, user_id: int, shipping_address: Optional[str] = None) -> None:
        """
        Transforme le panier actif en commande 'pending' puis crée la session Stripe.
        Étapes:
          1) Panier actif (CartNotFound) et lignes avec produit joint (EmptyCart),
             vérifiés avant toute écriture
          2) total_amount = Σ prix courant × quantité (hors taxe), devise de la boutique
          3) Commande + une ligne figée par ligne de panier
          4) Session Stripe (line_items TTC), session id persisté sur la commande
          5) Relecture de la session pour son URL hébergée
        Ne retourne jamais normalement: lève CheckoutRedirect(url) en cas de succès.
        """
        cart = self.cart_repository.find_active_cart_by_user_id(user_id)
        if not cart:
            raise CartNotFound()

        cart_items = [i for i in self.cart_repository.get_cart_items(cart.id) if i.product]
        if not cart_items:
            raise EmptyCart()

        total = subtotal((i.product.price, i.quantity) for i in cart_items)
        order = self.order_repository.create(
            user_id=user_id,
            total_amount=str(total),
            currency=self.currency,
            shipping_address=shipping_address,
        )
        order_items = self.order_repository.create_order_items(
            order.id,
            [
                NewOrderItem(
                    product_id=i.product_id,
                    quantity=i.quantity,
                    price=i.product.price,
                    currency=i.product.currency,
                )
                for i in cart_items
            ],
        )
        logger.info(
            "payments.checkout order created order_id=%s user_id=%s items=%s total=%s",
            order.id, user_id, len(order_items), order.total_amount,
        )

        products_by_id = {i.product_id: i.product for i in cart_items}
        line_items = to_line_items(order_items, products_by_id, self.url_service, self.tax_rate)
        session = self.gateway.create_checkout_session(order_id=order.id, line_items=line_items)
        if not session or not session.get("id"):
            logger.error("payments.checkout no session returned order_id=%s", order.id)
            raise SessionCreationFailed()

        self.order_repository.update(order.id, {"stripe_session_id": session["id"]})

        stripe_session = self.gateway.retrieve_session(session["id"])
        url = (stripe_session or {}).get("url")
        if not url:
            logger.error("payments.checkout url unavailable order_id=%s session_id=%s", order.id, session["id"])
            raise CheckoutUrlUnavailable()

        logger.info("payments.checkout redirect order_id=%s session_id=%s", order.id, session["id"])
        raise CheckoutRedirect(url)

    def handle_checkout_session(self, session_ref: str) -> Dict[str, str]:
        """
        Retour synchrone depuis Stripe (success_url).
        - Lit la session faisant autorité, retrouve la commande par stripe_session_id (OrderNotFound)
        - payment_status == "paid": handle_payment_success
        - Dans tous les cas: redirection vers le détail de la commande
        """
        session = self.gateway.retrieve_session(session_ref)
        order = self.order_repository.find_by_external_session_ref(session_ref)
        if not order:
            logger.warning("payments.return order not found session_id=%s", session_ref)
            raise OrderNotFound()

        if (session or {}).get("payment_status") == "paid":
            self.handle_payment_success(session)

        return {"redirect_url": f"/orders/{order.id}"}

    def handle_payment_success(self, session: Dict[str, Any]) -> None:
        """
        Paiement confirmé: commande 'paid' + payment_intent, puis panier du propriétaire 'completed'.
        Idempotent: un second appel ré-affirme 'paid' et ne trouve plus de panier actif.
        """
        order_id = extract_order_id(session)
        payment_intent = _payment_intent_id(session.get("payment_intent"))

        patch = {"stripe_payment_intent_id": payment_intent} if payment_intent else {}
        self.order_repository.update_status(order_id, OrderStatus.PAID, **patch)

        order = self.order_repository.find_by_id(order_id)
        if not order:
            logger.error("payments.success order vanished order_id=%s", order_id)
            raise OrderNotFound()
        if order.status != OrderStatus.PAID:
            # Transition refusée: la commande était déjà 'failed'
            logger.warning("payments.success ignored order_id=%s status=%s", order_id, order.status.value)
            return

        self.cart_repository.clear_cart(order.user_id)
        logger.info("payments.success order_id=%s user_id=%s", order_id, order.user_id)

    def handle_payment_failure(self, session: Dict[str, Any]) -> None:
        """Paiement échoué/expiré: commande 'failed'. Le panier reste actif pour un nouvel essai."""
        order_id = extract_order_id(session)
        updated = self.order_repository.update_status(order_id, OrderStatus.FAILED)
        if updated is None:
            logger.warning("payments.failure not applied order_id=%s", order_id)
            return
        logger.info("payments.failure order_id=%s", order_id)

    def handle_webhook_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Répartit un événement Stripe déjà vérifié.
        - checkout.session.completed (payé) / async_payment_succeeded: succès
        - checkout.session.expired / async_payment_failed: échec
        - autres types, ou completed non payé (paiement différé): ignorés
        """
        event_type = (event or {}).get("type") or ""
        session = ((event or {}).get("data") or {}).get("object") or {}

        if event_type in SUCCESS_EVENTS:
            if event_type == "checkout.session.completed" and session.get("payment_status") != "paid":
                logger.info("payments.webhook completed but unpaid session_id=%s", session.get("id"))
                return {"status": "ignored", "type": event_type}
            self.handle_payment_success(session)
            return {"status": "ok", "type": event_type}

        if event_type in FAILURE_EVENTS:
            self.handle_payment_failure(session)
            return {"status": "ok", "type": event_type}

        logger.info("payments.webhook unhandled type=%s", event_type)
        return {"status": "ignored", "type": event_type}


def _payment_intent_id(value: Any) -> Optional[str]:
    # payment_intent peut être un id ou un objet développé
    if isinstance(value, dict):
        return value.get("id")
    return value or None
