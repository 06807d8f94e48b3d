import json
import unittest

from support import SAMPLE_CONTENT, FakeAIClient

from app.core.errors import UpstreamUnavailable
from app.schemas.resume import OptimizedContent, ResumeContent
from app.services.optimization_client import (
    ANALYZE_SYSTEM_PROMPT,
    DEGRADED_REASON,
    OPTIMIZE_SYSTEM_PROMPT,
    OptimizationClient,
)

JOB = "Backend engineer, Go, Kubernetes"


class OptimizeTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.content = ResumeContent.model_validate(SAMPLE_CONTENT)

    def assertDegraded(self, outcome):
        self.assertTrue(outcome.degraded)
        result = outcome.result
        self.assertEqual(result.score, 50)
        self.assertEqual(result.optimized_resume, OptimizedContent.from_content(self.content))
        self.assertEqual(len(result.suggestions), 1)
        suggestion = result.suggestions[0]
        self.assertEqual(suggestion.section, "general")
        self.assertEqual(suggestion.original, "")
        self.assertEqual(suggestion.optimized, "")
        self.assertEqual(suggestion.reason, "AI service temporarily unavailable. Please try again.")
        self.assertEqual(result.keywords, [])

    async def test_parses_model_answer(self):
        ai = FakeAIClient(
            responses=[
                {
                    "optimizedResume": {
                        "summary": "Go and Kubernetes backend engineer.",
                        "experience": ["Built payment APIs in Go"],
                        "skills": ["Go", "Kubernetes"],
                    },
                    "score": 82,
                    "suggestions": [
                        {"section": "summary", "original": "old", "optimized": "new", "reason": "match JD"}
                    ],
                    "keywords": ["Go", "Kubernetes"],
                }
            ]
        )
        outcome = await OptimizationClient(ai).optimize(self.content, JOB)

        self.assertFalse(outcome.degraded)
        self.assertEqual(outcome.status, "optimized")
        self.assertEqual(outcome.result.score, 82)
        self.assertEqual(outcome.result.optimized_resume.summary, "Go and Kubernetes backend engineer.")
        self.assertEqual(outcome.result.optimized_resume.experience, ["Built payment APIs in Go"])
        self.assertEqual(outcome.result.keywords, ["Go", "Kubernetes"])
        self.assertEqual(outcome.result.suggestions[0].reason, "match JD")

    async def test_request_shape(self):
        ai = FakeAIClient(responses=[{"score": 70}])
        await OptimizationClient(ai).optimize(self.content, JOB)

        self.assertEqual(len(ai.calls), 1)
        call = ai.calls[0]
        self.assertTrue(call["json_mode"])
        self.assertEqual(call["max_tokens"], 1500)
        self.assertLess(call["temperature"], 0.7)
        system, user = call["messages"]
        self.assertEqual(system.role, "system")
        self.assertEqual(system.content, OPTIMIZE_SYSTEM_PROMPT)
        self.assertIn(JOB, user.content)
        self.assertIn("Analytical Engines", user.content)
        self.assertIn('"optimizedResume"', user.content)

    async def test_missing_fields_get_safe_defaults(self):
        outcome = await OptimizationClient(FakeAIClient(responses=[{}])).optimize(self.content, JOB)

        self.assertFalse(outcome.degraded)
        self.assertEqual(outcome.result.score, 0)
        self.assertEqual(outcome.result.suggestions, [])
        self.assertEqual(outcome.result.keywords, [])
        self.assertEqual(outcome.result.optimized_resume, OptimizedContent.from_content(self.content))

    async def test_out_of_range_scores_are_clamped(self):
        ai = FakeAIClient(responses=[{"score": 140}, {"score": -3}, {"score": "77"}])
        client = OptimizationClient(ai)
        self.assertEqual((await client.optimize(self.content, JOB)).result.score, 100)
        self.assertEqual((await client.optimize(self.content, JOB)).result.score, 0)
        self.assertEqual((await client.optimize(self.content, JOB)).result.score, 77)

    async def test_fenced_json_is_accepted(self):
        raw = "```json\n" + json.dumps({"score": 64, "keywords": ["Go"]}) + "\n```"
        outcome = await OptimizationClient(FakeAIClient(responses=[raw])).optimize(self.content, JOB)
        self.assertFalse(outcome.degraded)
        self.assertEqual(outcome.result.score, 64)

    async def test_provider_error_degrades(self):
        ai = FakeAIClient(error=UpstreamUnavailable("rate limited"))
        outcome = await OptimizationClient(ai).optimize(self.content, JOB)
        self.assertDegraded(outcome)
        self.assertIn("rate limited", outcome.error)

    async def test_unexpected_error_degrades(self):
        outcome = await OptimizationClient(FakeAIClient(error=ConnectionError("reset"))).optimize(self.content, JOB)
        self.assertDegraded(outcome)

    async def test_non_json_degrades(self):
        outcome = await OptimizationClient(FakeAIClient(responses=["Sure! Here is your resume."])).optimize(
            self.content, JOB
        )
        self.assertDegraded(outcome)

    async def test_non_object_json_degrades(self):
        outcome = await OptimizationClient(FakeAIClient(responses=["[1, 2, 3]"])).optimize(self.content, JOB)
        self.assertDegraded(outcome)

    async def test_malformed_shape_degrades(self):
        ai = FakeAIClient(responses=[{"score": "excellent", "keywords": "Go"}])
        outcome = await OptimizationClient(ai).optimize(self.content, JOB)
        self.assertDegraded(outcome)

    async def test_timeout_degrades(self):
        ai = FakeAIClient(responses=[{"score": 90}], delay=0.5)
        outcome = await OptimizationClient(ai, timeout_s=0.05).optimize(self.content, JOB)
        self.assertDegraded(outcome)
        self.assertIn("timed out", outcome.error)


class AnalyzeJobTests(unittest.IsolatedAsyncioTestCase):
    async def test_parses_analysis(self):
        ai = FakeAIClient(
            responses=[
                {
                    "skills": ["Go", "Kubernetes"],
                    "requirements": ["5+ years backend"],
                    "keywords": ["distributed systems"],
                    "summary": "Backend role on the platform team.",
                }
            ]
        )
        outcome = await OptimizationClient(ai).analyze_job_description(JOB)

        self.assertFalse(outcome.degraded)
        self.assertEqual(outcome.analysis.skills, ["Go", "Kubernetes"])
        self.assertEqual(outcome.analysis.summary, "Backend role on the platform team.")
        call = ai.calls[0]
        self.assertEqual(call["messages"][0].content, ANALYZE_SYSTEM_PROMPT)
        self.assertIn(JOB, call["messages"][1].content)
        self.assertEqual(call["max_tokens"], 500)

    async def test_missing_fields_default(self):
        outcome = await OptimizationClient(FakeAIClient(responses=[{"skills": None}])).analyze_job_description(JOB)
        self.assertEqual(outcome.analysis.skills, [])
        self.assertEqual(outcome.analysis.requirements, [])
        self.assertEqual(outcome.analysis.summary, "")

    async def test_failure_returns_fixed_shape(self):
        outcome = await OptimizationClient(FakeAIClient(error=RuntimeError("down"))).analyze_job_description(JOB)
        self.assertTrue(outcome.degraded)
        self.assertEqual(
            outcome.analysis.to_wire(),
            {"skills": [], "requirements": [], "keywords": [], "summary": "Analysis unavailable"},
        )


class GenerateResumeTests(unittest.IsolatedAsyncioTestCase):
    async def test_placeholder_echoes_input(self):
        ai = FakeAIClient()
        result = await OptimizationClient(ai).generate_resume_from_scratch({"name": "Ada"}, JOB)
        self.assertEqual(
            result,
            {"message": "Feature coming soon", "userInfo": {"name": "Ada"}, "jobDescription": JOB},
        )
        self.assertEqual(ai.calls, [])


class DegradedContractTests(unittest.TestCase):
    def test_reason_text_is_stable(self):
        self.assertEqual(DEGRADED_REASON, "AI service temporarily unavailable. Please try again.")


if __name__ == "__main__":
    unittest.main()
