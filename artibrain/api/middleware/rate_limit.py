"""
Fixed-window rate limiting.

Login attempts are counted per client IP; everything else under the API
prefix per principal when a valid session token is present, else per IP.
The counters live in process memory, so each worker limits on its own.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from artibrain.config import get_settings
from artibrain.kernel.identity.session import decode_session_token
from artibrain.logging_config import get_logger

logger = get_logger(__name__)

WINDOW_SECONDS = 60


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _principal_id(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        return None
    claims = decode_session_token(auth[7:].strip())
    return str(claims.sub) if claims else None


class InMemoryRateLimitStore:
    """Key -> (count, window start)."""

    def __init__(self):
        self._data: Dict[str, Tuple[int, float]] = {}

    def check_and_incr(self, scope: str, identifier: str, limit: int, window_seconds: int) -> bool:
        """True (and count the hit) while under ``limit``; False once over it."""
        key = f"{scope}:{identifier}"
        now = time.monotonic()
        count, start = self._data.get(key, (0, now))
        if now - start >= window_seconds:
            count, start = 0, now
        if count >= limit:
            return False
        self._data[key] = (count + 1, start)
        return True

    def cleanup_old(self, max_age_seconds: int = 3600) -> None:
        now = time.monotonic()
        stale = [k for k, (_, start) in self._data.items() if now - start > max_age_seconds]
        for key in stale:
            self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


_store: Optional[InMemoryRateLimitStore] = None


def get_store() -> InMemoryRateLimitStore:
    global _store
    if _store is None:
        _store = InMemoryRateLimitStore()
    return _store


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        path = request.url.path or ""
        if not settings.rate_limit_enabled or not path.startswith(settings.api_v1_prefix):
            return await call_next(request)

        store = get_store()
        store.cleanup_old(max_age_seconds=2 * WINDOW_SECONDS)

        if path.startswith(f"{settings.api_v1_prefix}/auth") and request.method == "POST":
            scope, limit, identifier = "auth", settings.rate_limit_auth_per_minute, _client_ip(request)
        else:
            scope, limit = "api", settings.rate_limit_api_per_minute
            identifier = _principal_id(request) or _client_ip(request)

        if not store.check_and_incr(scope, identifier, limit, WINDOW_SECONDS):
            logger.warning("Rate limit exceeded", extra={"scope": scope, "path": path})
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "detail": "Too many requests. Please try again later.",
                    "request_id": getattr(request.state, "request_id", None),
                },
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )
        return await call_next(request)
