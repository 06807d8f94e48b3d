from fastapi import APIRouter, Depends, status

from app.api.deps import get_resume_service
from app.core.security import get_current_user_id
from app.schemas.common import envelope
from app.schemas.resume import OptimizeRequest, ResumeCreate, ResumeUpdate
from app.services.resume_service import ResumeService

router = APIRouter(prefix="/resumes", dependencies=[Depends(get_current_user_id)])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_resume(
    payload: ResumeCreate,
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    resume = await service.create(user_id, payload.model_dump(exclude_unset=True))
    return envelope(resume, message="Resume created successfully")


@router.get("")
async def list_resumes(
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    resumes = await service.list_for_owner(user_id)
    return envelope([resume.to_wire() for resume in resumes], count=len(resumes))


@router.get("/{resume_id}")
async def get_resume(
    resume_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    return envelope(await service.get(resume_id, user_id))


@router.put("/{resume_id}")
async def update_resume(
    resume_id: str,
    payload: ResumeUpdate,
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    resume = await service.update(resume_id, payload.model_dump(exclude_unset=True), user_id)
    return envelope(resume, message="Resume updated successfully")


@router.delete("/{resume_id}")
async def delete_resume(
    resume_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    await service.delete(resume_id, user_id)
    return envelope(message="Resume deleted successfully")


@router.post("/{resume_id}/optimize")
async def optimize_resume(
    resume_id: str,
    payload: OptimizeRequest,
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    resume = await service.optimize(resume_id, payload.job_description, user_id)
    return envelope(resume, message="Resume optimized successfully")


@router.get("/{resume_id}/analyze")
async def analyze_resume(
    resume_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ResumeService = Depends(get_resume_service),
):
    return envelope(await service.analyze(resume_id, user_id))
