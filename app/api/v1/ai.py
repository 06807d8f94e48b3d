from fastapi import APIRouter, Depends, Request

from app.api.deps import get_optimization_client
from app.core.errors import ValidationError
from app.core.rate_limit import rate_limit
from app.core.security import get_current_user_id
from app.schemas.common import envelope
from app.schemas.optimization import AnalyzeJobRequest, GenerateResumeRequest
from app.services.optimization_client import OptimizationClient

router = APIRouter(prefix="/ai", dependencies=[Depends(get_current_user_id)])


@router.post("/analyze-job")
@rate_limit()
async def analyze_job(
    request: Request,
    payload: AnalyzeJobRequest,
    optimizer: OptimizationClient = Depends(get_optimization_client),
):
    job_description = (payload.job_description or "").strip()
    if not job_description:
        raise ValidationError("Job description is required")

    outcome = await optimizer.analyze_job_description(job_description)
    return envelope(outcome.analysis)


@router.post("/generate-resume")
@rate_limit()
async def generate_resume(
    request: Request,
    payload: GenerateResumeRequest,
    optimizer: OptimizationClient = Depends(get_optimization_client),
):
    job_description = (payload.job_description or "").strip()
    if not payload.user_info or not job_description:
        raise ValidationError("User info and job description are required")

    return envelope(await optimizer.generate_resume_from_scratch(payload.user_info, job_description))
