from __future__ import annotations

import os
from collections.abc import Callable
from typing import TypedDict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import parse as parse_limit
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded


class RateLimitInfo(TypedDict, total=False):
    method: str
    ip: str
    limit: str
    scope: str


# slowapi supplies the canonical RateLimitExceeded handled in main.py; the
# middleware below drives `limits` directly so limits can differ per scope
# without decorating every router.
limiter = Limiter(key_func=lambda request: _client_ip(request))

# In-memory storage matches a single-process deployment; use Redis storage
# when running several workers.
_storage = MemoryStorage()
_rate = MovingWindowRateLimiter(_storage)

# Login is throttled hardest to slow password guessing; booking mutations
# next since each one takes an equipment lock.
_LOGIN_LIMIT = "10/minute"
_MUTATION_LIMIT = "30/minute"
_READ_LIMIT = "120/minute"


def _client_ip(request: Request) -> str:
    # Prefer X-Forwarded-For if present (first hop), fall back to ASGI client
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "local"


def _enabled() -> bool:
    if os.getenv("RATE_LIMIT_ENABLED") in {"1", "true", "TRUE"}:
        return True
    if os.getenv("TESTING"):
        return False
    return True


def _limit_for(method: str, path: str) -> tuple[str, str] | None:
    m = method.upper()
    if m == "POST" and path.rstrip("/") == "/api/auth/login":
        return "login", _LOGIN_LIMIT
    if m in {"POST", "PUT", "PATCH", "DELETE"}:
        return "write", _MUTATION_LIMIT
    if m in {"GET", "HEAD"}:
        return "read", _READ_LIMIT
    # OPTIONS (CORS preflight) is never limited
    return None


def reset() -> None:
    _storage.reset()


async def rate_limit_middleware(request: Request, call_next: Callable) -> Response:
    if not _enabled():
        return await call_next(request)

    rule = _limit_for(request.method, request.url.path)
    if rule is None:
        return await call_next(request)
    scope, limit_str = rule

    key = f"ip:{_client_ip(request)}|s:{scope}"
    if not _rate.hit(parse_limit(limit_str), key):
        info: RateLimitInfo = {
            "method": request.method.upper(),
            "ip": _client_ip(request),
            "limit": limit_str,
            "scope": scope,
        }
        request.state.rate_limit_info = info
        return JSONResponse(
            status_code=429,
            content={
                "error": {
                    "code": "rate_limited",
                    "message": "Too Many Requests",
                    "detail": info,
                }
            },
        )

    response = await call_next(request)
    response.headers.setdefault("X-RateLimit-Limit", limit_str)
    return response


__all__ = ["RateLimitExceeded", "limiter", "rate_limit_middleware", "reset"]
