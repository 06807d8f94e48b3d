from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from app.core.errors import ValidationError
from app.core.resume_store import ResumeStore
from app.schemas.optimization import JobAnalysis
from app.schemas.resume import Resume, ResumeSummary
from app.services.optimization_client import OptimizationClient

logger = logging.getLogger(__name__)

NO_JOB_DESCRIPTION_PLACEHOLDER = "No job description provided"


class ResumeService:
    """Owner-scoped resume use cases.

    Store calls are blocking sqlite work and run in worker threads; the AI
    call is awaited directly. Nothing is written until optimization resolves.
    """

    def __init__(self, store: ResumeStore, optimizer: OptimizationClient):
        self._store = store
        self._optimizer = optimizer

    async def create(self, owner_id: str, draft: Mapping[str, Any]) -> Resume:
        return await asyncio.to_thread(self._store.create, owner_id, draft)

    async def list_for_owner(self, owner_id: str) -> list[ResumeSummary]:
        return await asyncio.to_thread(self._store.list_by_owner, owner_id)

    async def get(self, resume_id: str, owner_id: str) -> Resume:
        return await asyncio.to_thread(self._store.get_by_id, owner_id, resume_id)

    async def update(self, resume_id: str, patch: Mapping[str, Any], owner_id: str) -> Resume:
        return await asyncio.to_thread(self._store.update, owner_id, resume_id, patch)

    async def delete(self, resume_id: str, owner_id: str) -> None:
        await asyncio.to_thread(self._store.delete, owner_id, resume_id)

    async def optimize(self, resume_id: str, job_description: str | None, owner_id: str) -> Resume:
        job_description = (job_description or "").strip()
        if not job_description:
            raise ValidationError("Job description is required")

        resume = await self.get(resume_id, owner_id)
        outcome = await self._optimizer.optimize(resume.original_content, job_description)
        if outcome.degraded:
            logger.warning("resume_optimize_fallback resume_id=%s error=%s", resume_id, outcome.error)

        # Merged onto the current row: edits made while the model was running survive.
        result = outcome.result
        patch = {
            "optimized_content": result.optimized_resume,
            "job_description": job_description,
            "optimization_score": result.score,
            "ai_suggestions": list(result.suggestions),
            "keywords": list(result.keywords),
        }
        return await asyncio.to_thread(self._store.update, owner_id, resume_id, patch)

    async def analyze(self, resume_id: str, owner_id: str) -> JobAnalysis:
        resume = await self.get(resume_id, owner_id)
        outcome = await self._optimizer.analyze_job_description(
            resume.job_description or NO_JOB_DESCRIPTION_PLACEHOLDER
        )
        return outcome.analysis
