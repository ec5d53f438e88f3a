"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
import stripe
from typing import Any, Dict, List, Optional
from fastapi import Request

from shop.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET

# module shop.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def _to_dict(obj: Any) -> Dict[str, Any]:
    # StripeObject -> dict récursif (metadata incluse)
    if obj is None:
        return {}
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    mode: str,
    success_url: str,
    cancel_url: str,
    metadata: Dict[str, Any],
    payment_method_types: List[str],
    idempotency_key: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout.
    - line_items: lignes Stripe (price_data + quantity)
    - mode: "payment"
    - success_url / cancel_url: URLs de redirection
    - metadata: ex {"orderId": "42"}
    - idempotency_key: rejouer la même clé renvoie la même session (reprise après échec réseau)
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
    """
    require_stripe()
    params: Dict[str, Any] = {}
    if idempotency_key:
        params["idempotency_key"] = idempotency_key
    session = stripe.checkout.Session.create(
        line_items=line_items,
        mode=mode,
        success_url=success_url,
        cancel_url=cancel_url,
        metadata=metadata,
        payment_method_types=payment_method_types,
        **params,
    )
    return _to_dict(session)

def get_session(session_id: str) -> Dict[str, Any]:
    """
    Récupère une session Stripe Checkout par son identifiant.
    Retour: dict session incluant "id", "url", "payment_status", "payment_intent", "metadata".
    """
    require_stripe()
    session = stripe.checkout.Session.retrieve(session_id)
    return _to_dict(session)

def construct_event(payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
    """
    Valide la signature (STRIPE_WEBHOOK_SECRET) et retourne l'événement sous forme de dict.
    Lève ValueError (payload invalide) ou stripe.SignatureVerificationError.
    """
    require_stripe()
    event = stripe.Webhook.construct_event(payload, sig_header or "", STRIPE_WEBHOOK_SECRET or "")
    return _to_dict(event)

async def parse_event(request: Request) -> Dict[str, Any]:
    """
    Parse et valide un événement Stripe signé (webhook).
    - Lit le body brut + en-tête Stripe-Signature
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    return construct_event(payload, sig_header)
