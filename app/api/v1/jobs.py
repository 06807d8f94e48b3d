from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.core.errors import ValidationError
from app.core.security import get_current_user_id
from app.schemas.common import envelope
from app.schemas.jobs import JobSaveRequest, SavedJob

# Saved jobs are not persisted yet: save echoes the normalized job and the
# listing is always empty.
router = APIRouter(prefix="/jobs")


@router.post("/save")
async def save_job(payload: JobSaveRequest, user_id: str = Depends(get_current_user_id)):
    description = (payload.description or "").strip()
    if not description:
        raise ValidationError("Job description is required")

    job = SavedJob(
        title=(payload.title or "").strip() or "Untitled Job",
        description=description,
        company=(payload.company or "").strip() or "Unknown Company",
        user_id=user_id,
        saved_at=datetime.now(timezone.utc),
    )
    return envelope(job, message="Job saved successfully")


@router.get("/saved")
async def saved_jobs(user_id: str = Depends(get_current_user_id)):
    return envelope([])
