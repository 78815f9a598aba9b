"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends

from hunkview import __version__
from hunkview.api.dependencies import get_settings
from hunkview.core.config import Settings

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Simple health check endpoint.

    Returns status information about the API, including version and environment.
    """
    return {
        "status": "healthy",
        "message": "hunkview is running.",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }
