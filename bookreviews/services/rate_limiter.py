"""
Request Rate Limits

slowapi limits per client address:
- Catalog and review reads: RATE_LIMIT_DEFAULT (100/minute)
- Book and review writes: RATE_LIMIT_WRITE (30/minute)
- Registration and login: fixed limits declared in routers/auth.py

RATE_LIMIT_ENABLED=false turns every limit off (the test suite runs that way).
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookreviews.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

RETRY_AFTER_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """
    Address a request's limits are counted against.

    Behind a reverse proxy the first X-Forwarded-For entry, else X-Real-IP,
    else the socket peer.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Limiter configured from Settings; routers decorate endpoints with it."""
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limits {'on' if settings.rate_limit_enabled else 'off'}: "
        f"reads {settings.rate_limit_default}, writes {settings.rate_limit_write}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 response telling the client which limit it hit and when to retry."""
    limit_detail = str(exc.detail)

    logger.warning(f"Client {get_client_ip(request)} over limit {limit_detail} on {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded ({limit_detail}). Retry in {RETRY_AFTER_SECONDS} seconds.",
        },
        headers={
            "Retry-After": str(RETRY_AFTER_SECONDS),
            "X-RateLimit-Limit": limit_detail,
        },
    )
