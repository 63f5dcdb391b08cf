"""Health endpoint."""

from fastapi import APIRouter, Request

from machet.models import HealthOut

router = APIRouter()


@router.get("/health", response_model=HealthOut)
def health(request: Request):
    profile = request.app.state.profile
    return {
        "status": "ok",
        "model": profile.inference.model,
        "sessions": len(request.app.state.sessions.all()),
    }
