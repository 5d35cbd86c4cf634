"""
Rate Limiting Service

slowapi limiter for the books routes. One Limiter is built per
application from that application's Settings:

- Reads (list, get) use settings.rate_limit_default
- Writes (create, update, delete) use settings.rate_limit_write
- settings.rate_limit_enabled=False turns every limit off
- Counters live in settings.rate_limit_storage_uri (memory:// by default)

Limits are counted per client IP and per URL, in fixed windows.
"""

import logging

from fastapi import Request, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.config import Settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Identify the client a request is counted against.

    Behind a proxy the first X-Forwarded-For address (or X-Real-IP) is the
    client; otherwise the socket peer is.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter(settings: Settings) -> Limiter:
    """
    Build a Limiter from settings.

    No default limits are registered: each books route carries its own
    read or write limit (see app.routers.books.create_books_router).
    """
    limiter = Limiter(
        key_func=get_client_ip,
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter: enabled={settings.rate_limit_enabled}, "
        f"read={settings.rate_limit_default}, write={settings.rate_limit_write}"
    )
    return limiter


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Answer a limited request with 429.

    Retry-After is the length of the exceeded limit's window in seconds.
    """
    retry_after = exc.limit.limit.get_expiry()

    logger.warning(
        f"Rate limit {exc.detail} exceeded by {get_client_ip(request)} "
        f"on {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please slow down.",
            "detail": exc.detail,
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": exc.detail,
        },
    )
