"""
Lifespan FastAPI: connexion Redis du rate limiting (fastapi-limiter).

Drapeaux d'environnement, lus au démarrage:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucune limite, aucune connexion
  - USE_FAKE_REDIS_FOR_TESTS=1: fakeredis à la place de RATE_LIMIT_REDIS_URL
  - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre en mémoire si Redis est injoignable
"""
import os
import logging
from contextlib import asynccontextmanager
from redis import asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from shop.config import RATE_LIMIT_REDIS_URL

logger = logging.getLogger(__name__)

def _flag(name: str) -> bool:
    return os.getenv(name) == "1"

def _redis_client():
    if _flag("USE_FAKE_REDIS_FOR_TESTS"):
        from fakeredis import FakeAsyncRedis
        return FakeAsyncRedis(decode_responses=True)
    return aioredis.from_url(RATE_LIMIT_REDIS_URL, encoding="utf-8", decode_responses=True)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    app.state.rate_limit_enabled reflète l'état effectif, consulté par
    shop.utils.rate_limit.optional_rate_limit à chaque requête limitée.
    """
    if _flag("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS"):
        app.state.rate_limit_enabled = False
        logger.info("rate_limit disabled (DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS)")
        yield
        return

    connected = False
    try:
        await FastAPILimiter.init(_redis_client())
        connected = True
        app.state.rate_limit_enabled = True
        logger.info("rate_limit enabled redis=%s", RATE_LIMIT_REDIS_URL)
    except Exception as e:
        # LOCAL_RATE_LIMIT_FALLBACK est aussi lu par optional_rate_limit
        app.state.rate_limit_enabled = _flag("LOCAL_RATE_LIMIT_FALLBACK")
        logger.warning("rate_limit redis init failed (%s), local_fallback=%s", e, app.state.rate_limit_enabled)

    try:
        yield
    finally:
        if connected:
            await FastAPILimiter.close()
