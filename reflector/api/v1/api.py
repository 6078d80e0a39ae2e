"""
API v1 router combining all v1 endpoints.
"""
from fastapi import APIRouter
from reflector.api.v1 import (
    activities,
    assessments,
    badges,
    health,
    modules,
    profile,
    streak,
)

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(assessments.router, prefix="/users", tags=["assessments"])
api_router.include_router(profile.router, prefix="/users", tags=["profile"])
api_router.include_router(activities.router, prefix="/users", tags=["activities"])
api_router.include_router(streak.router, prefix="/users", tags=["streak"])
api_router.include_router(modules.router, prefix="/users", tags=["modules"])
api_router.include_router(badges.router, tags=["badges"])
