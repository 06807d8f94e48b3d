from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness plus document store connectivity.")
async def health_check(request: Request):
    state = request.app.state
    return {
        "success": True,
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if state.resume_store.ping() else "disconnected",
        "environment": state.settings.environment,
    }
