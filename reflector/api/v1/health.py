"""
Health check and status endpoints.
"""
from fastapi import APIRouter
from reflector.core.datetime_utils import utc_now
from reflector.core import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns basic health status of the API.
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "profile_version": settings.PROFILE_VERSION,
    }
