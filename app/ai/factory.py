import logging

from app.ai.types import AIClient
from app.ai.providers.disabled_provider import DisabledProvider
from app.ai.providers.openai_provider import OpenAIProvider
from app.core.config import Settings

logger = logging.getLogger(__name__)


def get_ai_client(app_settings: Settings) -> AIClient:
    if app_settings.ai_provider == "openai":
        if not (app_settings.openai_api_key or "").strip():
            logger.warning("ai_provider_disabled reason=missing_openai_api_key")
            return DisabledProvider("OPENAI_API_KEY is missing")
        return OpenAIProvider(
            model=app_settings.ai_model,
            api_key=app_settings.openai_api_key,
            base_url=app_settings.openai_base_url,
            timeout_s=app_settings.ai_timeout_s,
            max_retries=app_settings.ai_max_retries,
        )

    if app_settings.ai_provider == "disabled":
        return DisabledProvider("AI provider disabled by configuration")

    raise ValueError(f"Unsupported AI_PROVIDER='{app_settings.ai_provider}'")
