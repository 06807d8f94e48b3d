from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import ValidationError as SchemaValidationError

from app.ai.types import AIClient, ChatMessage
from app.core.errors import UpstreamUnavailable
from app.schemas.optimization import JobAnalysis, OptimizationResult
from app.schemas.resume import OptimizedContent, ResumeContent, Suggestion

logger = logging.getLogger(__name__)

OPTIMIZE_SYSTEM_PROMPT = (
    "You are a professional resume optimizer and career coach. "
    "Provide responses in valid JSON format only."
)
ANALYZE_SYSTEM_PROMPT = "Extract key information from job descriptions. Return JSON only."

OPTIMIZE_TEMPERATURE = 0.3
OPTIMIZE_MAX_TOKENS = 1500
ANALYZE_TEMPERATURE = 0.2
ANALYZE_MAX_TOKENS = 500

DEGRADED_SCORE = 50
DEGRADED_REASON = "AI service temporarily unavailable. Please try again."
ANALYSIS_UNAVAILABLE_SUMMARY = "Analysis unavailable"

OutcomeStatus = Literal["optimized", "degraded"]


@dataclass(frozen=True)
class OptimizationOutcome:
    status: OutcomeStatus
    result: OptimizationResult
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"


@dataclass(frozen=True)
class AnalysisOutcome:
    status: OutcomeStatus
    analysis: JobAnalysis
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"


def build_optimization_prompt(content: dict[str, Any], job_description: str) -> str:
    return f"""
Analyze this resume and job description, then provide optimization suggestions.

RESUME DATA:
{json.dumps(content, indent=2, ensure_ascii=False)}

JOB DESCRIPTION:
{job_description}

Return a JSON object with this structure:
{{
    "optimizedResume": {{
        "summary": "Optimized summary here",
        "experience": ["Optimized bullet points"],
        "skills": ["Optimized skills list"]
    }},
    "score": 85,
    "suggestions": [
        {{
            "section": "summary",
            "original": "Original text",
            "optimized": "Optimized text",
            "reason": "Improvement reason"
        }}
    ],
    "keywords": ["keyword1", "keyword2"]
}}

The score is an integer from 0 to 100 rating how well the resume matches the job.
Important: Only return valid JSON, no other text.
""".strip()


def build_analysis_prompt(job_description: str) -> str:
    return (
        f"Analyze this job description: {job_description}\n\n"
        'Return a JSON object with the keys "skills", "requirements" and "keywords" '
        '(lists of strings) and "summary" (a short string).'
    )


def degraded_optimization(original: OptimizedContent) -> OptimizationResult:
    return OptimizationResult(
        optimized_resume=original,
        score=DEGRADED_SCORE,
        suggestions=[Suggestion(section="general", original="", optimized="", reason=DEGRADED_REASON)],
        keywords=[],
    )


def unavailable_analysis() -> JobAnalysis:
    return JobAnalysis(skills=[], requirements=[], keywords=[], summary=ANALYSIS_UNAVAILABLE_SUMMARY)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


def _parse_json_object(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as exc:
        raise UpstreamUnavailable(f"non-JSON response: {exc}") from exc
    if not isinstance(parsed, dict):
        raise UpstreamUnavailable("response is not a JSON object")
    return parsed


class OptimizationClient:
    """Best-effort resume optimization on top of an injected AI client.

    Provider failures never escape: each call returns an outcome whose status
    says whether the result came from the model or from the fixed fallback.
    """

    def __init__(self, ai_client: AIClient, *, timeout_s: float = 30.0):
        self._ai_client = ai_client
        self._timeout_s = timeout_s

    async def _complete(self, system_prompt: str, user_prompt: str, *, temperature: float, max_tokens: int) -> str:
        messages = [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        ]
        try:
            return await asyncio.wait_for(
                self._ai_client.complete(messages, temperature=temperature, max_tokens=max_tokens, json_mode=True),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailable(f"timed out after {self._timeout_s}s") from exc

    async def optimize(self, content: ResumeContent | None, job_description: str) -> OptimizationOutcome:
        # A resume saved without content is optimized as an empty one.
        if content is None:
            content = ResumeContent()
        original = OptimizedContent.from_content(content)
        serialized = content.model_dump(by_alias=True, mode="json", exclude_none=True)
        started = time.perf_counter()

        try:
            raw = await self._complete(
                OPTIMIZE_SYSTEM_PROMPT,
                build_optimization_prompt(serialized, job_description),
                temperature=OPTIMIZE_TEMPERATURE,
                max_tokens=OPTIMIZE_MAX_TOKENS,
            )
            parsed = _parse_json_object(raw)
            result = OptimizationResult.model_validate(
                {
                    "optimizedResume": parsed.get("optimizedResume") or original.model_dump(),
                    "score": parsed.get("score") or 0,
                    "suggestions": parsed.get("suggestions") or [],
                    "keywords": parsed.get("keywords") or [],
                }
            )
        except (UpstreamUnavailable, SchemaValidationError) as exc:
            logger.warning(
                "resume_optimize_degraded latency_ms=%s error=%s",
                int((time.perf_counter() - started) * 1000),
                exc,
            )
            return OptimizationOutcome(status="degraded", result=degraded_optimization(original), error=str(exc))
        except Exception as exc:  # noqa: BLE001 - optimization is best-effort
            logger.exception("resume_optimize_failed")
            return OptimizationOutcome(status="degraded", result=degraded_optimization(original), error=str(exc))

        logger.info(
            "resume_optimize_ok score=%s suggestions=%s latency_ms=%s",
            result.score,
            len(result.suggestions),
            int((time.perf_counter() - started) * 1000),
        )
        return OptimizationOutcome(status="optimized", result=result)

    async def analyze_job_description(self, job_description: str) -> AnalysisOutcome:
        try:
            raw = await self._complete(
                ANALYZE_SYSTEM_PROMPT,
                build_analysis_prompt(job_description),
                temperature=ANALYZE_TEMPERATURE,
                max_tokens=ANALYZE_MAX_TOKENS,
            )
            analysis = JobAnalysis.model_validate(_parse_json_object(raw))
        except (UpstreamUnavailable, SchemaValidationError) as exc:
            logger.warning("job_analysis_degraded error=%s", exc)
            return AnalysisOutcome(status="degraded", analysis=unavailable_analysis(), error=str(exc))
        except Exception as exc:  # noqa: BLE001 - analysis is best-effort
            logger.exception("job_analysis_failed")
            return AnalysisOutcome(status="degraded", analysis=unavailable_analysis(), error=str(exc))
        return AnalysisOutcome(status="optimized", analysis=analysis)

    async def generate_resume_from_scratch(self, user_info: dict[str, Any], job_description: str) -> dict[str, Any]:
        # Generation is not offered yet; callers get their input echoed back.
        return {
            "message": "Feature coming soon",
            "userInfo": user_info,
            "jobDescription": job_description,
        }
