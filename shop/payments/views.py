import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_303_SEE_OTHER

from shop.config import CHECKOUT_RATE_LIMIT_TIMES, CHECKOUT_RATE_LIMIT_SECONDS
from shop.dependencies import get_checkout_service
from shop.utils.security import require_user
from shop.utils.rate_limit import optional_rate_limit
from shop.payments import stripe_client
from shop.payments.service import CheckoutService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Payments API"])
return_router = APIRouter(prefix="/api", tags=["Payments return"], include_in_schema=False)


class CheckoutRequest(BaseModel):
    shipping_address: Optional[str] = None

# module shop.payments.views
@router.post(
    "/checkout",
    dependencies=[Depends(optional_rate_limit(times=CHECKOUT_RATE_LIMIT_TIMES, seconds=CHECKOUT_RATE_LIMIT_SECONDS))],
)
def create_checkout(
    body: Optional[CheckoutRequest] = None,
    user: Dict[str, Any] = Depends(require_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Crée la commande et la session Checkout Stripe pour le panier actif de l'utilisateur.
    - Sécurité: require_user + rate limit
    - Succès: CheckoutRedirect -> 303 vers la page Stripe hébergée ({"url"} si Accept JSON)
    - Erreurs: CartNotFound 404, EmptyCart 400, SessionCreationFailed/CheckoutUrlUnavailable 502
    """
    service.process_checkout(int(user["id"]), shipping_address=body.shipping_address if body else None)
    # process_checkout se termine toujours par CheckoutRedirect ou une erreur
    raise HTTPException(status_code=500, detail="Checkout terminé sans redirection")

@router.post("/payments/webhook", include_in_schema=False)
async def stripe_webhook(request: Request, service: CheckoutService = Depends(get_checkout_service)):
    """
    Webhook Stripe (Checkout).
    - Signature: stripe_client.parse_event (Stripe-Signature + STRIPE_WEBHOOK_SECRET), 400 si invalide
    - Répartition: CheckoutService.handle_webhook_event (succès, échec, ignoré)
    - 500 si le traitement échoue (Stripe réessaiera la livraison)
    """
    try:
        event = await stripe_client.parse_event(request)
    except (ValueError, stripe.SignatureVerificationError):
        logger.warning("payments.webhook signature verification failed")
        return JSONResponse({"error": "Webhook signature verification failed."}, status_code=400)

    try:
        result = await run_in_threadpool(service.handle_webhook_event, event)
    except Exception:
        logger.exception("payments.webhook processing failed type=%s", (event or {}).get("type"))
        return JSONResponse({"error": "Error processing webhook."}, status_code=500)
    logger.info("payments.webhook type=%s status=%s", result.get("type"), result.get("status"))
    return JSONResponse({"received": True, **result})

@return_router.get("/checkout")
def checkout_return(session_id: Optional[str] = None, service: CheckoutService = Depends(get_checkout_service)):
    """
    Retour navigateur depuis Stripe (success_url).
    - session_id absent: retour au panier
    - sinon: réconciliation puis redirection vers /orders/{id}; toute erreur -> /error
    """
    if not session_id:
        return RedirectResponse(url="/cart", status_code=HTTP_303_SEE_OTHER)
    try:
        result = service.handle_checkout_session(session_id)
    except Exception:
        logger.exception("payments.return failed session_id=%s", session_id)
        return RedirectResponse(url="/error", status_code=HTTP_303_SEE_OTHER)
    return RedirectResponse(url=result["redirect_url"], status_code=HTTP_303_SEE_OTHER)
