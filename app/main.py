import logging

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from app.ai.factory import get_ai_client
from app.ai.types import AIClient
from app.api.v1.ai import router as ai_router
from app.api.v1.auth import router as auth_router
from app.api.v1.health import router as health_router
from app.api.v1.jobs import router as jobs_router
from app.api.v1.resumes import router as resumes_router
from app.core.config import Settings, settings
from app.core.cors import install_cors
from app.core.errors import register_exception_handlers
from app.core.lifespan import lifespan
from app.core.rate_limit import limiter
from app.core.resume_store import ResumeStore
from app.core.user_store import UserStore
from app.services.optimization_client import OptimizationClient
from app.services.resume_service import ResumeService

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.environment)


def create_app(app_settings: Settings | None = None, ai_client: AIClient | None = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Resume Optimizer API", version="1.0.0", lifespan=lifespan)

    resume_store = ResumeStore(app_settings.database_path)
    user_store = UserStore(app_settings.database_path)
    ai_client = ai_client or get_ai_client(app_settings)
    optimization_client = OptimizationClient(ai_client, timeout_s=app_settings.ai_timeout_s)

    app.state.settings = app_settings
    app.state.resume_store = resume_store
    app.state.user_store = user_store
    app.state.ai_client = ai_client
    app.state.optimization_client = optimization_client
    app.state.resume_service = ResumeService(resume_store, optimization_client)

    install_cors(app, app_settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    register_exception_handlers(app, app_settings)

    prefix = app_settings.api_prefix
    app.include_router(health_router, prefix=prefix, tags=["Health"])
    app.include_router(auth_router, prefix=prefix, tags=["Auth"])
    app.include_router(resumes_router, prefix=prefix, tags=["Resumes"])
    app.include_router(jobs_router, prefix=prefix, tags=["Jobs"])
    app.include_router(ai_router, prefix=prefix, tags=["AI"])
    return app


app = create_app()
