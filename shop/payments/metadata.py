"""
Sérialisation/désérialisation des métadonnées Stripe (orderId).
"""
from typing import Any, Dict

from .exceptions import OrderIdMissing

# module shop.payments.metadata
def make_metadata(order_id: int) -> Dict[str, str]:
    """Seul lien entre la session Stripe et la commande: metadata.orderId (chaîne)."""
    return {"orderId": str(order_id)}

def extract_order_id(session: Dict[str, Any]) -> int:
    """
    Extrait l'identifiant numérique de commande depuis session["metadata"]["orderId"].
    - Lève OrderIdMissing si absent, non numérique ou nul.
    """
    meta = (session or {}).get("metadata") or {}
    raw = meta.get("orderId")
    try:
        order_id = int(str(raw).strip())
    except (TypeError, ValueError):
        raise OrderIdMissing()
    if order_id <= 0:
        raise OrderIdMissing()
    return order_id
