from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from datetime import datetime, timezone

from app.core.db import open_connection, utc_now
from app.core.errors import NotFound, Unauthenticated, ValidationError
from app.core.security import hash_password, verify_password
from app.schemas.auth import UserOut

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, db_path: str):
        self._conn = open_connection(db_path)
        self._lock = threading.Lock()
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at REAL NOT NULL
            );
            """
        )

    @staticmethod
    def _to_user(row: tuple) -> UserOut:
        return UserOut(
            id=row[0],
            name=row[1],
            email=row[2],
            created_at=datetime.fromtimestamp(row[3], tz=timezone.utc),
        )

    def create(self, *, name: str, email: str, password: str) -> UserOut:
        user_id = uuid.uuid4().hex
        created_at = utc_now()
        try:
            with self._lock:
                self._conn.execute(
                    """
                    INSERT INTO users (id, name, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (user_id, name, email, hash_password(password), created_at.timestamp()),
                )
        except sqlite3.IntegrityError as exc:
            raise ValidationError("User already exists with this email") from exc
        logger.info("user_registered user_id=%s", user_id)
        return UserOut(id=user_id, name=name, email=email, created_at=created_at)

    def authenticate(self, *, email: str, password: str) -> UserOut:
        with self._lock:
            row = self._conn.execute(
                "SELECT id, name, email, created_at, password_hash FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        if not row or not verify_password(password, row[4]):
            raise Unauthenticated("Invalid email or password")
        return self._to_user(row)

    def get(self, user_id: str) -> UserOut:
        with self._lock:
            row = self._conn.execute(
                "SELECT id, name, email, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            raise NotFound("User not found")
        return self._to_user(row)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
