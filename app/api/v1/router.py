"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, health, invites, setup, team, transfers

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(setup.router, tags=["setup"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(invites.router, tags=["invites"])
api_router.include_router(transfers.router, prefix="/transfer", tags=["transfer"])
api_router.include_router(team.router, prefix="/team", tags=["team"])
