"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from sopdesk.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse()
