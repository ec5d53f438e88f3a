"""
Passerelle de paiement: session Checkout hébergée pour une commande.
"""
from typing import Any, Dict, List
import logging

from shop import config
from shop.urls.service import UrlService
from . import stripe_client
from .exceptions import SessionCreationFailed
from .metadata import make_metadata

logger = logging.getLogger(__name__)

SUCCESS_PATH = "/api/checkout?session_id={CHECKOUT_SESSION_ID}"
CANCEL_PATH = "/cart"


class StripeGateway:
    def __init__(self, url_service: UrlService):
        self.url_service = url_service

    def create_checkout_session(self, *, order_id: int, line_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Crée la session Stripe d'une commande et retourne {id, url}.
        - success_url: {base}/api/checkout?session_id={CHECKOUT_SESSION_ID} (placeholder laissé à Stripe)
        - cancel_url: {base}/cart
        - Toute erreur Stripe devient SessionCreationFailed (pas de retry automatique).
        """
        base_url = self.url_service.get_base_url().rstrip("/")
        try:
            session = stripe_client.create_session(
                line_items=line_items,
                mode="payment",
                success_url=f"{base_url}{SUCCESS_PATH}",
                cancel_url=f"{base_url}{CANCEL_PATH}",
                metadata=make_metadata(order_id),
                payment_method_types=config.PAYMENT_METHOD_TYPES,
                idempotency_key=f"checkout-order-{order_id}",
            )
        except Exception as e:
            logger.exception("payments.gateway create_session failed order_id=%s", order_id)
            raise SessionCreationFailed() from e
        return {"id": session.get("id"), "url": session.get("url") or ""}

    def retrieve_session(self, session_ref: str) -> Dict[str, Any]:
        """Lecture de l'état faisant autorité (payment_status, payment_intent, metadata). Les erreurs se propagent."""
        return stripe_client.get_session(session_ref)
