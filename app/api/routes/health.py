from __future__ import annotations

from fastapi import APIRouter

from app.schemas.post import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint.

    Returns a simple status response to verify the API is operational.
    Not rate limited.
    """

    return HealthResponse(status="ok")
