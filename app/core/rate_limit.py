from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Keyed by client address. One limiter serves every app in the process.
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def _unlimited(func):
    return func


def rate_limit(limit: str | None = None):
    """Route decorator applying ``limit`` or the default RATE_LIMIT.

    When limiting is switched off at import time routes are left undecorated.
    """
    if not settings.rate_limit_enabled:
        return _unlimited
    return limiter.limit(limit or settings.rate_limit)


def auth_rate_limit():
    return rate_limit(settings.auth_rate_limit)
