from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    state = app.state
    logger.info(
        "startup environment=%s database=%s ai_provider=%s",
        state.settings.environment,
        state.settings.database_path,
        state.settings.ai_provider,
    )
    yield
    try:
        await state.ai_client.aclose()
    except Exception as exc:  # pragma: no cover - shutdown must finish
        logger.warning("ai_client_close_failed: %s", exc)
    state.resume_store.close()
    state.user_store.close()
