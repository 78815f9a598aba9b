"""
API routes initialization.

This module aggregates all router modules into a single API router.
"""

from fastapi import APIRouter

from hunkview.api.routes.github import router as github_router
from hunkview.api.routes.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(github_router, prefix="/api", tags=["github"])
