"""Health check endpoint for API monitoring.

Example:
    GET /health
    Response: {"status": "healthy", "version": "0.1.0"}
"""

from fastapi import APIRouter

from ragcrawl import __version__
from ragcrawl.api.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return API health status."""
    return HealthResponse(status="healthy", version=__version__)
