import asyncio
import dataclasses
import json
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Importing app.main builds the default app; keep it off the real database.
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from fastapi.testclient import TestClient  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.security import issue_token  # noqa: E402
from app.main import create_app  # noqa: E402


class FakeAIClient:
    """Scripted AIClient: returns queued responses or raises ``error``."""

    def __init__(self, responses=None, error: Exception | None = None, delay: float = 0.0):
        self.responses = list(responses or [])
        self.error = error
        self.delay = delay
        self.calls = []
        self.closed = False

    async def complete(self, messages, *, temperature, max_tokens, json_mode=False):
        self.calls.append(
            {
                "messages": list(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
                "json_mode": json_mode,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if not self.responses:
            return "{}"
        response = self.responses.pop(0)
        return response if isinstance(response, str) else json.dumps(response)

    async def aclose(self):
        self.closed = True


def make_settings(database_path: str, **overrides):
    values = {
        "environment": "test",
        "database_path": database_path,
        "jwt_secret": "test-secret",
        "rate_limit_enabled": False,
        "ai_timeout_s": 5.0,
    }
    values.update(overrides)
    return dataclasses.replace(settings, **values)


class AppHarness:
    """A fresh app on a temporary database with a fake AI client."""

    def __init__(self, tmp_dir: str, ai_client: FakeAIClient | None = None, **overrides):
        self.settings = make_settings(os.path.join(tmp_dir, "test.db"), **overrides)
        self.ai = ai_client or FakeAIClient()
        self.app = create_app(self.settings, ai_client=self.ai)
        self.client = TestClient(self.app)

    def url(self, path: str) -> str:
        return f"{self.settings.api_prefix}{path}"

    def auth_headers(self, user_id: str) -> dict:
        return {"Authorization": f"Bearer {issue_token(user_id, self.settings)}"}

    def close(self):
        self.client.close()
        self.app.state.resume_store.close()
        self.app.state.user_store.close()


SAMPLE_CONTENT = {
    "personalInfo": {"name": "Ada Lovelace", "email": "ada@example.com", "github": "ada"},
    "summary": "Backend engineer with 6 years of Python experience.",
    "experience": [
        {
            "title": "Senior Engineer",
            "company": "Analytical Engines",
            "location": "London",
            "startDate": "2019-01",
            "current": True,
            "description": ["Built payment APIs", "Cut latency by 38%"],
        }
    ],
    "education": [{"degree": "BSc Mathematics", "institution": "University of London"}],
    "skills": [{"category": "Languages", "items": ["Python", "Go"]}],
    "projects": [{"title": "Difference Engine", "technologies": ["Python"]}],
}
