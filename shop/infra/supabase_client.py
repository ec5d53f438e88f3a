"""
Clients Supabase partagés (créés au premier usage).
- get_supabase: clé anon, utilisée pour valider les access_tokens (auth.get_user)
- get_service_supabase: clé service-role, utilisée par les repositories
"""
from typing import Optional
from supabase import create_client, Client
from shop.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY

_anon_client: Optional[Client] = None
_service_client: Optional[Client] = None

def get_supabase() -> Client:
    global _anon_client
    if not SUPABASE_URL or not SUPABASE_ANON:
        raise RuntimeError("SUPABASE_URL/SUPABASE_ANON_KEY manquants pour get_supabase()")
    if _anon_client is None:
        _anon_client = create_client(SUPABASE_URL, SUPABASE_ANON)
    return _anon_client

def get_service_supabase() -> Client:
    """
    Client 'service-role' (bypass RLS): les écritures panier/commande passent par lui,
    y compris depuis le webhook Stripe où aucun token utilisateur n'est disponible.
    """
    global _service_client
    if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
        raise RuntimeError("SUPABASE_URL/SUPABASE_SERVICE_KEY manquants pour get_service_supabase()")
    if _service_client is None:
        _service_client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _service_client
