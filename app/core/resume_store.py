from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import Any, Mapping

from pydantic import ValidationError as SchemaValidationError

from app.core.db import open_connection, ping, utc_now
from app.core.errors import NotFound, ValidationError
from app.schemas.resume import Resume, ResumeSummary

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Resume not found or access denied"

# id, owner and created_at are fixed at creation and never patched.
MUTABLE_FIELDS = frozenset(
    {
        "title",
        "original_content",
        "optimized_content",
        "job_description",
        "optimization_score",
        "ai_suggestions",
        "keywords",
    }
)


def describe_validation_error(exc: SchemaValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid resume"
    first = errors[0]
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    if message == "Resume title is required":
        return message
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {message}" if location else message


class ResumeStore:
    """Resume documents kept as JSON next to the columns they are queried by.

    Every lookup filters on (id, owner) so a foreign id is indistinguishable
    from a missing one.
    """

    def __init__(self, db_path: str):
        self._conn = open_connection(db_path)
        self._lock = threading.Lock()
        self._last_timestamp: datetime | None = None
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resumes (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                title TEXT NOT NULL,
                document_json TEXT NOT NULL,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_resumes_owner_updated
            ON resumes (owner, updated_at DESC);
            """
        )

    def _next_timestamp(self) -> datetime:
        # updatedAt ordering must follow mutation order even within one clock tick.
        now = utc_now()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _fetch(self, owner: str, resume_id: str) -> Resume:
        row = self._conn.execute(
            "SELECT document_json FROM resumes WHERE id = ? AND owner = ?",
            (resume_id, owner),
        ).fetchone()
        if not row:
            raise NotFound(NOT_FOUND_MESSAGE)
        return Resume.model_validate_json(row[0])

    def _write(self, resume: Resume) -> int:
        cur = self._conn.execute(
            """
            UPDATE resumes
            SET title = ?, document_json = ?, updated_at = ?
            WHERE id = ? AND owner = ?
            """,
            (
                resume.title,
                resume.model_dump_json(by_alias=True),
                resume.updated_at.timestamp(),
                resume.id,
                resume.owner,
            ),
        )
        return cur.rowcount

    def create(self, owner: str, draft: Mapping[str, Any]) -> Resume:
        title = draft.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Resume title is required")

        fields = {key: value for key, value in draft.items() if key in MUTABLE_FIELDS}
        with self._lock:
            now = self._next_timestamp()
            try:
                resume = Resume.model_validate(
                    {
                        **fields,
                        "id": uuid.uuid4().hex,
                        "owner": owner,
                        "created_at": now,
                        "updated_at": now,
                    }
                )
            except SchemaValidationError as exc:
                raise ValidationError(describe_validation_error(exc)) from exc

            self._conn.execute(
                """
                INSERT INTO resumes (id, owner, title, document_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    resume.id,
                    resume.owner,
                    resume.title,
                    resume.model_dump_json(by_alias=True),
                    resume.created_at.timestamp(),
                    resume.updated_at.timestamp(),
                ),
            )
        logger.info("resume_created resume_id=%s owner=%s", resume.id, owner)
        return resume

    def list_by_owner(self, owner: str) -> list[ResumeSummary]:
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT document_json FROM resumes
                WHERE owner = ?
                ORDER BY updated_at DESC, rowid DESC
                """,
                (owner,),
            ).fetchall()
        return [Resume.model_validate_json(row[0]).summary_view() for row in rows]

    def get_by_id(self, owner: str, resume_id: str) -> Resume:
        with self._lock:
            return self._fetch(owner, resume_id)

    def update(self, owner: str, resume_id: str, patch: Mapping[str, Any]) -> Resume:
        changes = {key: value for key, value in patch.items() if key in MUTABLE_FIELDS}
        with self._lock:
            current = self._fetch(owner, resume_id)
            merged = {**current.model_dump(), **changes, "updated_at": self._next_timestamp()}
            try:
                resume = Resume.model_validate(merged)
            except SchemaValidationError as exc:
                raise ValidationError(describe_validation_error(exc)) from exc
            if not self._write(resume):
                raise NotFound(NOT_FOUND_MESSAGE)
        logger.info("resume_updated resume_id=%s fields=%s", resume_id, sorted(changes))
        return resume

    def delete(self, owner: str, resume_id: str) -> None:
        with self._lock:
            cur = self._conn.execute(
                "DELETE FROM resumes WHERE id = ? AND owner = ?",
                (resume_id, owner),
            )
        if not cur.rowcount:
            raise NotFound(NOT_FOUND_MESSAGE)
        logger.info("resume_deleted resume_id=%s owner=%s", resume_id, owner)

    def ping(self) -> bool:
        with self._lock:
            return ping(self._conn)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
