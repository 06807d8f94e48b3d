from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import Settings
from app.core.errors import error_body

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "X-Requested-With", "Accept"]
EXPOSED_HEADERS = ["Content-Range", "X-Content-Range"]


def cors_allowed_origins(app_settings: Settings) -> list[str]:
    return list(app_settings.allowed_origins())


def origin_allowed(origin: str | None, app_settings: Settings) -> bool:
    if not origin or not app_settings.is_production:
        return True
    return origin in app_settings.allowed_origins()


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Rejects cross-origin requests from unlisted origins in production."""

    def __init__(self, app, app_settings: Settings):
        super().__init__(app)
        self._settings = app_settings

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if not origin_allowed(origin, self._settings):
            logger.warning("cors_origin_rejected origin=%s path=%s", origin, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content=error_body("CORS Error: Origin not allowed"),
            )
        return await call_next(request)


def install_cors(app: FastAPI, app_settings: Settings) -> None:
    if app_settings.is_production:
        origin_kwargs = {"allow_origins": cors_allowed_origins(app_settings)}
    else:
        origin_kwargs = {"allow_origin_regex": ".*"}

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        **origin_kwargs,
    )
    # Added last so it runs first, ahead of preflight handling.
    app.add_middleware(OriginGuardMiddleware, app_settings=app_settings)
