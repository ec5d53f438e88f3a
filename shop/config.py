# shop.config
from pathlib import Path
from decimal import Decimal
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe), CORS/hosts
- Expose la devise unique de la boutique et le taux de taxe appliqué côté Stripe
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

# Supabase: URL et clés (anon/service)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Cookies / CORS
COOKIE_NAME = _clean_env(os.getenv("SESSION_COOKIE_NAME") or "sb_access")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Stripe: clé secrète et secret webhook
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")

# URLs publiques: VERCEL_URL (plateforme) prioritaire sur BASE_URL
VERCEL_URL = _clean_env(os.getenv("VERCEL_URL") or "")
BASE_URL = _clean_env(os.getenv("BASE_URL") or "")
DEFAULT_BASE_URL = "http://localhost:3000"

# Boutique mono-devise; montants Stripe en unités mineures (yen)
SHOP_CURRENCY = _clean_env(os.getenv("SHOP_CURRENCY") or "jpy").lower()
TAX_RATE = Decimal(_clean_env(os.getenv("TAX_RATE") or "1.1"))
PAYMENT_METHOD_TYPES = ["card"]

# Rate limiting du checkout
CHECKOUT_RATE_LIMIT_TIMES = int(os.getenv("CHECKOUT_RATE_LIMIT_TIMES", "10"))
CHECKOUT_RATE_LIMIT_SECONDS = int(os.getenv("CHECKOUT_RATE_LIMIT_SECONDS", "60"))

# Redis du rate limiting (fastapi-limiter) et options de test
RATE_LIMIT_REDIS_URL = _clean_env(os.getenv("RATE_LIMIT_REDIS_URL") or "redis://127.0.0.1:6379/0")
