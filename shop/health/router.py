from fastapi import APIRouter, Request

from shop.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET, SUPABASE_URL, SUPABASE_SERVICE_KEY

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    """Liveness + configuration effective (sans exposer de secret)."""
    return {
        "ok": True,
        "rate_limit_enabled": getattr(request.app.state, "rate_limit_enabled", False) is True,
        "stripe_configured": bool(STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET),
        "database_configured": bool(SUPABASE_URL and SUPABASE_SERVICE_KEY),
    }
