"""Rate limiting using slowapi"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from .config import settings
from .exceptions import RateLimitException, render_exception

def get_rate_limit_key(request: Request) -> str:
    """Get rate limit key based on client IP"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client:
        ip = request.client.host
    else:
        ip = "unknown"

    return f"ip:{ip}"

# In-memory storage, limits are per process
limiter = Limiter(
    key_func=get_rate_limit_key,
    storage_uri="memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    return render_exception(RateLimitException(f"Too many requests. {exc.detail}"))
