from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "your_jwt_secret_key"
ENVIRONMENTS = {"development", "production", "test"}


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    environment: str
    api_prefix: str
    log_level: str
    sentry_dsn: str | None
    database_path: str
    jwt_secret: str
    jwt_algorithm: str
    access_token_expire_minutes: int
    client_url: str | None
    cors_allowed_origins: tuple[str, ...]
    # Rate limits are process-wide: the shared limiter reads these from the
    # module-level settings at import time, not from an app's own Settings.
    rate_limit: str
    auth_rate_limit: str
    rate_limit_enabled: bool
    ai_provider: str
    ai_model: str
    openai_api_key: str | None
    openai_base_url: str | None
    ai_timeout_s: float
    ai_max_retries: int

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def allowed_origins(self) -> tuple[str, ...]:
        origins = list(self.cors_allowed_origins)
        if self.client_url and self.client_url not in origins:
            origins.insert(0, self.client_url)
        return tuple(origins)


def load_settings() -> Settings:
    loaded = Settings(
        environment=(_get_env("ENVIRONMENT", "development") or "development").strip().lower(),
        api_prefix=(_get_env("API_PREFIX", "/api") or "/api").rstrip("/"),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        database_path=_get_env("DATABASE_PATH", "data/resumes.db") or "data/resumes.db",
        jwt_secret=_get_env("JWT_SECRET", DEFAULT_JWT_SECRET) or DEFAULT_JWT_SECRET,
        jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256") or "HS256",
        access_token_expire_minutes=_get_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7),
        client_url=_get_env("CLIENT_URL"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:5173",
                "http://localhost:3000",
            ],
        ),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        auth_rate_limit=_get_env("AUTH_RATE_LIMIT", "10/minute") or "10/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        ai_provider=(_get_env("AI_PROVIDER", "openai") or "openai").strip().lower(),
        ai_model=(_get_env("AI_MODEL", "gpt-3.5-turbo") or "gpt-3.5-turbo").strip(),
        openai_api_key=_get_env("OPENAI_API_KEY"),
        openai_base_url=_get_env("OPENAI_BASE_URL"),
        ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 30.0),
        ai_max_retries=_get_env_int("AI_MAX_RETRIES", 0),
    )
    validate_settings(loaded)
    return loaded


def validate_settings(value: Settings) -> None:
    if value.environment not in ENVIRONMENTS:
        raise RuntimeError("ENVIRONMENT must be one of 'development', 'production' or 'test'.")

    if value.is_production and value.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError("ENVIRONMENT=production requires JWT_SECRET to be set.")

    if value.access_token_expire_minutes <= 0:
        raise RuntimeError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive.")


settings = load_settings()
