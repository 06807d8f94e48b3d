from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.errors import Unauthenticated

NO_TOKEN_MESSAGE = "Access denied. No token provided."
INVALID_TOKEN_MESSAGE = "Invalid or expired token"
USER_ID_CLAIM = "userId"

_PBKDF2_ITERATIONS = 190_000

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, sep, _ = stored.partition("$")
    if not sep:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


def issue_token(user_id: str, app_settings: Settings, *, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        USER_ID_CLAIM: user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=app_settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, app_settings.jwt_secret, algorithm=app_settings.jwt_algorithm)


def verify_token(token: str | None, app_settings: Settings) -> str:
    """Return the user id carried by a signed, unexpired token."""
    if not token or not token.strip():
        raise Unauthenticated(NO_TOKEN_MESSAGE)
    try:
        payload = jwt.decode(
            token.strip(),
            app_settings.jwt_secret,
            algorithms=[app_settings.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated(INVALID_TOKEN_MESSAGE) from exc

    user_id = payload.get(USER_ID_CLAIM)
    if not isinstance(user_id, str) or not user_id:
        raise Unauthenticated(INVALID_TOKEN_MESSAGE)
    return user_id


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        # HTTPBearer drops non-Bearer schemes; those are a bad token, not a missing one.
        header = request.headers.get("authorization", "").strip()
        if header and header.lower() != "bearer":
            raise Unauthenticated(INVALID_TOKEN_MESSAGE)
        return verify_token(None, request.app.state.settings)
    return verify_token(credentials.credentials, request.app.state.settings)
