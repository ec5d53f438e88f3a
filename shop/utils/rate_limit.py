from fastapi import Request, Response, HTTPException
import os
import time
import hashlib

from shop.config import COOKIE_NAME

def _user_key_from_request(req: Request) -> str:
    # Priorité: session cookie (hashé) puis IP
    token = req.cookies.get(COOKIE_NAME)
    path = req.url.path
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de limitation de débit.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (dev)
    - app.state.rate_limit_enabled False: aucune limite (ex: Redis indisponible, tests)
    - sinon: fastapi-limiter (Redis)
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _user_key_from_request(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _user_key_from_request(req)

        limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier)
        return await limiter(request, response)
    return _dep
