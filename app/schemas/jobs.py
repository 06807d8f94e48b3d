from __future__ import annotations

from datetime import datetime

from app.schemas.common import CamelModel


class JobSaveRequest(CamelModel):
    title: str | None = None
    description: str | None = None
    company: str | None = None


class SavedJob(CamelModel):
    title: str
    description: str
    company: str
    user_id: str
    saved_at: datetime
