"""
Rate Limiting for the Thesis Archive API
========================================
slowapi limiter keyed by client address. A global per-minute default applies
to every route; the login endpoint carries a much tighter limit of its own
(LOGIN_RATE_LIMIT) to slow down password guessing.

Set RATE_LIMIT_ENABLED=false to switch limiting off (the test suite does).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from thesis_archive.core.config import settings
from thesis_archive.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: forwarded client address when behind a proxy, else peer address"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Report an exceeded limit using the same error envelope as every other failure.

    Plain function: SlowAPIMiddleware calls it directly, outside the app's
    exception handling.
    """
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}",
        extra={"event_type": "rate_limited", "http_path": request.url.path}
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests. Please try again later.",
            "code": "RATE_LIMIT_EXCEEDED",
            "details": {"limit": str(exc.detail)},
        },
        headers={"Retry-After": "60"},
    )


def login_rate_limit():
    """Decorator for the login endpoint (LOGIN_RATE_LIMIT, default 5/minute)"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)
