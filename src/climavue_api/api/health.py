"""Health check endpoints for Kubernetes probes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model.

    Example:
        >>> HealthResponse(status="ok").status
        'ok'
    """

    status: str
    detail: str | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Liveness probe",
    description="Check if the application process is running",
)
async def health_check() -> HealthResponse:
    """Liveness probe; always OK while the process runs."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Readiness probe",
    description="Check if the application is configured to fetch weather data",
    responses={
        503: {
            "description": "API key missing",
            "content": {
                "application/json": {
                    "example": {"status": "unavailable", "detail": "OPENWEATHER_API_KEY is not set"}
                }
            },
        },
    },
)
async def readiness_check():
    """Readiness probe.

    Not ready while no OpenWeatherMap API key is configured, since every fetch
    would fail. OpenWeatherMap itself is not probed.
    """
    if not settings.OPENWEATHER_API_KEY:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": "OPENWEATHER_API_KEY is not set"},
        )
    return HealthResponse(status="ok")
