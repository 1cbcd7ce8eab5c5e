"""
Rate limiting for authentication endpoints.
Uses SlowAPI; REDIS_URL selects a shared backend, otherwise limits are in-memory.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from employee_service.core.config import settings

logger = logging.getLogger("employee_service.rate_limiter")


def get_real_client_ip(request: Request) -> str:
    """
    Get the real client IP, accounting for reverse proxies.
    Checks X-Forwarded-For header first, then falls back to direct IP.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP in the chain (original client)
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


if settings.REDIS_URL:
    # Mask password in logs
    logged_url = settings.REDIS_URL.split('@')[-1]
    logger.info(f"Rate limiter using Redis backend: {logged_url}")
elif settings.ENVIRONMENT.lower() == "production":
    logger.warning(
        "PRODUCTION WARNING: Rate limiting is using in-memory storage. "
        "Limits won't sync across instances. Configure REDIS_URL for distributed rate limiting."
    )


limiter = Limiter(
    key_func=get_real_client_ip,
    storage_uri=settings.REDIS_URL or "memory://",
    strategy="fixed-window",
    headers_enabled=True,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render rate-limit rejections in the service's error envelope.
    """
    logger.warning(
        f"Rate limit exceeded for {get_real_client_ip(request)} "
        f"on {request.method} {request.url.path}"
    )

    retry_after = getattr(exc, "retry_after", 60)

    return JSONResponse(
        status_code=429,
        content={
            "statusCode": 429,
            "message": f"Too many requests. Please retry after {retry_after} seconds.",
            "success": False,
        },
        headers={"Retry-After": str(retry_after)},
    )


class RateLimits:
    """Pre-configured rate limits for different endpoint types."""

    AUTH_LOGIN = "5/minute"
    AUTH_REFRESH = "30/minute"
