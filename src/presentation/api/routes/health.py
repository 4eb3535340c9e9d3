"""Health and liveness endpoints."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from src import __version__

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    message: str = "Pesa Bridge is Awake"
    version: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__)


@health_router.get("/", include_in_schema=False, response_class=PlainTextResponse)
async def root() -> str:
    """Plain-text banner for checking the service from a browser."""
    return "Pesa Bridge is Online and Ready!"
