"""
Gestionnaires d'exceptions de l'application.
- CheckoutRedirect: sortie non locale du checkout -> 303 vers la page Stripe
  (ou {"url": ...} pour un client API qui demande du JSON).
- CheckoutError: erreurs métier du checkout -> JSON {detail, code} avec leur statut HTTP.
- HTTPException: JSON standard FastAPI.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from shop.payments.exceptions import CheckoutError, CheckoutRedirect

logger = logging.getLogger(__name__)

def _wants_json(request: Request) -> bool:
    accept = (request.headers.get("accept") or "").lower()
    return "application/json" in accept and "text/html" not in accept

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CheckoutRedirect)
    async def checkout_redirect(request: Request, exc: CheckoutRedirect):
        if _wants_json(request):
            return JSONResponse({"url": exc.url})
        return RedirectResponse(url=exc.url, status_code=HTTP_303_SEE_OTHER)

    @app.exception_handler(CheckoutError)
    async def checkout_error(request: Request, exc: CheckoutError):
        logger.warning("checkout error path=%s code=%s detail=%s", request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)
