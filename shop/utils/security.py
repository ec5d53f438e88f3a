from fastapi import Request, HTTPException, Depends
from typing import Dict, Any, Optional
import logging

from shop.config import COOKIE_NAME
from shop.infra import supabase_client

logger = logging.getLogger(__name__)

def _token_from_request(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(COOKIE_NAME)

def resolve_user(token: str) -> Dict[str, Any]:
    """
    Résout un access_token Supabase en utilisateur de la boutique.
    - auth.get_user(token) -> identifiant Supabase (uuid)
    - table users (auth_id) -> identifiant numérique utilisé par carts/orders
    """
    res = supabase_client.get_supabase().auth.get_user(token)
    auth_user = getattr(res, "user", None)
    auth_id = getattr(auth_user, "id", None)
    if not auth_id:
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    rows = (
        supabase_client.get_service_supabase()
        .table("users")
        .select("id, email, role")
        .eq("auth_id", str(auth_id))
        .limit(1)
        .execute()
    ).data or []
    if not rows:
        raise HTTPException(status_code=401, detail="Utilisateur inconnu")
    row = rows[0]
    return {"id": int(row["id"]), "email": row.get("email"), "role": row.get("role") or "user"}

def get_current_user(request: Request) -> Dict[str, Any]:
    token = _token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Non authentifié")
    try:
        return resolve_user(token)
    except HTTPException:
        raise
    except Exception:
        logger.exception("security.get_current_user failed")
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user
