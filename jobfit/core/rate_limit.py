from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from jobfit.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def rate_limit(limit: str | None = None):
    """Per-IP limit for a route; RATE_LIMIT unless the route passes its own."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
